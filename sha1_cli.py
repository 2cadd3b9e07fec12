"""SHA-1 implementation using the `compress` function from `sha1_compress.py`.

This module provides:

- `sha1_words(message, length=None)`: the final 5-word state for the first
  `length` bytes of `message`.
- `sha1(data: bytes) -> bytes`: compute the 20-byte SHA-1 digest of `data`.
- CLI usage: `python sha1_cli.py "message"` prints the hex digest of the
  UTF-8 encoding of `"message"`.
"""

from __future__ import annotations

import sys
from typing import List, Tuple

from sha1_compress import MASK32, build_message_schedule, compress, compress80


# Initial hash values, as per FIPS 180-4.
_H0 = (
    0x67452301,
    0xEFCDAB89,
    0x98BADCFE,
    0x10325476,
    0xC3D2E1F0,
)

BLOCK_SIZE = 64  # In bytes
LENGTH_SIZE = 8  # In bytes


def pad_tail(tail, total_length: int) -> List[bytes]:
    """Build the final padded block(s) for a message.

    ``tail`` holds the 0..63 bytes left over after all full blocks have been
    consumed, and ``total_length`` is the length of the whole message in
    bytes. The result is one block, or two when the tail leaves no room for
    the 0x80 byte plus the 8-byte length field (tail of 56 bytes or more).
    """
    rem = len(tail)
    if rem >= BLOCK_SIZE:
        raise ValueError(f"Tail must be shorter than {BLOCK_SIZE} bytes, got {rem}")

    block = bytearray(BLOCK_SIZE)
    block[:rem] = tail
    block[rem] = 0x80
    rem += 1

    blocks: List[bytes] = []
    if BLOCK_SIZE - rem < LENGTH_SIZE:
        blocks.append(bytes(block))
        block = bytearray(BLOCK_SIZE)

    # 64-bit big-endian length in bits.
    bit_length = (total_length * 8) & 0xFFFFFFFFFFFFFFFF
    block[BLOCK_SIZE - LENGTH_SIZE :] = bit_length.to_bytes(LENGTH_SIZE, byteorder="big")
    blocks.append(bytes(block))
    return blocks


def _message_view(message, length: int | None) -> tuple[memoryview, int]:
    """Return a byte view of `message` and the number of bytes to hash."""
    view = memoryview(message).cast("B")
    if length is None:
        return view, len(view)
    if not 0 <= length <= len(view):
        raise ValueError(
            f"Length must be between 0 and {len(view)} bytes, got {length}"
        )
    return view, length


def sha1_words(message, length: int | None = None) -> Tuple[int, int, int, int, int]:
    """Hash the first `length` bytes of `message` and return the final state.

    ``message`` may be any bytes-like object. ``length`` defaults to the full
    message; a shorter length hashes only that prefix.
    """
    view, length = _message_view(message, length)

    state = _H0

    off = 0
    while length - off >= BLOCK_SIZE:
        state = compress(state, view[off : off + BLOCK_SIZE])
        off += BLOCK_SIZE

    for block in pad_tail(view[off:length], length):
        state = compress(state, block)

    return state


def finalize_digest(state: Tuple[int, int, int, int, int]) -> bytes:
    """Convert the final hash state into the 20-byte SHA-1 digest."""
    return b"".join(word.to_bytes(4, byteorder="big") for word in state)


def sha1(data) -> bytes:
    """Compute the SHA-1 digest of `data`."""
    return finalize_digest(sha1_words(data))


def hexdigest(data) -> str:
    """Convenience helper to return the SHA-1 hex digest of `data`."""
    return sha1(data).hex()


def split_into_blocks(data, length: int | None = None) -> List[bytes]:
    """Split a message into the full sequence of padded 64-byte blocks."""
    view, length = _message_view(data, length)
    full = length - length % BLOCK_SIZE
    blocks = [bytes(view[i : i + BLOCK_SIZE]) for i in range(0, full, BLOCK_SIZE)]
    blocks.extend(pad_tail(view[full:length], length))
    return blocks


def sha1_before(data) -> tuple[Tuple[int, int, int, int, int], List[List[int]]]:
    """High-level helper that prepares all inputs needed before compression.

    It returns the initial 5-word state and one 80-word message schedule per
    padded block. With this, you can run your own compression pipeline:

        state0, schedules = sha1_before(data)
        state = state0
        for ws in schedules:
            state = update_hash_state(state, *my_compress80(*state, ws))
        digest = sha1_after(state)
    """
    schedules = [build_message_schedule(block) for block in split_into_blocks(data)]
    return _H0, schedules


def update_hash_state(
    H_i: Tuple[int, int, int, int, int],
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
) -> Tuple[int, int, int, int, int]:
    """Add the working registers to the chaining value, word-wise mod 2**32."""
    h0, h1, h2, h3, h4 = H_i
    return (
        (h0 + a) & MASK32,
        (h1 + b) & MASK32,
        (h2 + c) & MASK32,
        (h3 + d) & MASK32,
        (h4 + e) & MASK32,
    )


def sha1_after(final_state: Tuple[int, int, int, int, int]) -> bytes:
    """Finalize the digest from a state produced by a `sha1_before` pipeline."""
    return finalize_digest(final_state)


def sha1_with_state_tracking(
    data,
) -> tuple[bytes, List[List[Tuple[int, int, int, int, int]]]]:
    """Compute SHA-1 while tracking the working state at each round.

    Returns:
        (digest, states_per_block)
        where states_per_block[block_idx] lists the 80 pre-round states
    """
    state, schedules = sha1_before(data)
    all_states: List[List[Tuple[int, int, int, int, int]]] = []

    for ws in schedules:
        work_out, states = compress80(*state, ws, track_state=True)
        all_states.append(states)
        state = update_hash_state(state, *work_out)

    return sha1_after(state), all_states


_USAGE = (
    "Usage:\n"
    "  python sha1_cli.py \"message\"\n"
    "  python sha1_cli.py -f path/to/file\n"
)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Without flags, the single argument is interpreted as a UTF-8 string and
    hashed. With `-f`, the following argument is treated as a filename whose
    raw bytes are hashed. The resulting hex digest is printed to stdout.
    """
    if argv is None:
        argv = sys.argv[1:]

    if not argv:
        sys.stderr.write(_USAGE)
        return 1

    # File mode: `-f <filename>`
    if argv[0] == "-f":
        if len(argv) != 2:
            sys.stderr.write("Usage: python sha1_cli.py -f path/to/file\n")
            return 1
        filename = argv[1]
        try:
            with open(filename, "rb") as f:
                data = f.read()
        except OSError as e:
            sys.stderr.write(f"Error reading file '{filename}': {e}\n")
            return 1
        print(hexdigest(data))
        return 0

    if len(argv) != 1:
        sys.stderr.write(_USAGE)
        return 1

    print(hexdigest(argv[0].encode("utf-8")))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
