"""Forward SHA-1 compression.

One call to `compress` advances the 160-bit chaining value by one 512-bit
block. The block is read as 16 big-endian words and expanded to the 80-word
message schedule:

    w[i] = (w[i-3] ^ w[i-8] ^ w[i-14] ^ w[i-16]) <<< 1      for 16 <= i < 80

Each round `i` then updates the working state `(a, b, c, d, e)`:

    temp = (a <<< 5) + f_i(b, c, d) + e + k_i + w[i]

    a' = temp
    b' = a
    c' = b <<< 30
    d' = c
    e' = d

with the boolean function and constant chosen by round range:

    rounds  0..19   f = (b & c) | (~b & d)            k = 0x5A827999
    rounds 20..39   f = b ^ c ^ d                     k = 0x6ED9EBA1
    rounds 40..59   f = (b & c) | (b & d) | (c & d)   k = 0x8F1BBCDC
    rounds 60..79   f = b ^ c ^ d                     k = 0xCA62C1D6

After round 79 the working state is added word-wise to the chaining value.
All additions are performed modulo 2**32, as in SHA-1.
"""

from __future__ import annotations

import struct
from typing import List, Sequence, Tuple


MASK32 = 0xFFFFFFFF

# Round constants from FIPS 180-4, one per 20-round range.
K_VALUES: Tuple[int, ...] = (
    0x5A827999,
    0x6ED9EBA1,
    0x8F1BBCDC,
    0xCA62C1D6,
)

_BLOCK_WORDS = struct.Struct(">16I")


def _rotl(x: int, n: int) -> int:
    """Left-rotate a 32-bit word `x` by `n` bits (0 < n < 32)."""
    return ((x << n) | (x >> (32 - n))) & MASK32


def round_function(i: int, b: int, c: int, d: int) -> Tuple[int, int]:
    """Return the `(f, k)` pair for round `i`."""
    if i < 20:
        return (b & c) | (~b & d), K_VALUES[0]
    if i < 40:
        return b ^ c ^ d, K_VALUES[1]
    if i < 60:
        return (b & c) | (b & d) | (c & d), K_VALUES[2]
    return b ^ c ^ d, K_VALUES[3]


def compression(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    w: int,
    i: int,
) -> Tuple[int, int, int, int, int]:
    """Perform SHA-1 compression round `i` (0..79).

    Parameters
    ----------
    a, b, c, d, e : int
        32-bit words representing the current working state.
    w : int
        Message schedule word `w[i]`.
    i : int
        Round index; selects the boolean function and round constant.

    Returns
    -------
    (a_new, b_new, c_new, d_new, e_new) : tuple[int, ...]
        Updated working state after one round, all reduced modulo 2**32.
    """
    if not 0 <= i < 80:
        raise ValueError(f"Round index must be in 0..79, got {i}")

    f, k = round_function(i, b, c, d)
    temp = (_rotl(a, 5) + f + e + k + w) & MASK32

    return temp, a, _rotl(b, 30), c, d


def build_message_schedule(block) -> List[int]:
    """Given a 512-bit block, build the 80-word message schedule w[0..79].

    ``block`` may be any bytes-like object of exactly 64 bytes.
    """
    if len(block) != 64:
        raise ValueError(f"Expected 64-byte block, got {len(block)}")

    w = list(_BLOCK_WORDS.unpack(block))
    for i in range(16, 80):
        x = w[i - 3] ^ w[i - 8] ^ w[i - 14] ^ w[i - 16]
        w.append(((x << 1) | (x >> 31)) & MASK32)
    return w


def compress80(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    ws: Sequence[int],
    track_state: bool = False,
):
    """Run the full 80-round SHA-1 loop for one block.

    Parameters
    ----------
    a, b, c, d, e : int
        Initial working state words (typically the current hash value).
    ws : Sequence[int]
        The 80-word message schedule `w[0..79]` for this block.
    track_state : bool
        Also return the working state at the start of every round.

    Returns
    -------
    (a, b, c, d, e) : tuple[int, ...]
        Final working state words after 80 rounds. With ``track_state`` the
        result is ``((a, b, c, d, e), states)`` where ``states[i]`` is the
        state fed into round ``i``.
    """
    if len(ws) != 80:
        raise ValueError(f"compress80 expects 80 message schedule words, got {len(ws)}")

    if track_state:
        states: List[Tuple[int, int, int, int, int]] = []
        for i in range(80):
            states.append((a, b, c, d, e))
            a, b, c, d, e = compression(a, b, c, d, e, ws[i], i)
        return (a, b, c, d, e), states

    # Same rounds as `compression`, with the round function fixed per range.
    # (a << 5) | (a >> 27) only differs from the 32-bit rotation above bit 31,
    # which the final mask discards.
    for i in range(20):
        a, b, c, d, e = (
            (((a << 5) | (a >> 27)) + (d ^ (b & (c ^ d))) + e + 0x5A827999 + ws[i]) & MASK32,
            a,
            ((b << 30) | (b >> 2)) & MASK32,
            c,
            d,
        )
    for i in range(20, 40):
        a, b, c, d, e = (
            (((a << 5) | (a >> 27)) + (b ^ c ^ d) + e + 0x6ED9EBA1 + ws[i]) & MASK32,
            a,
            ((b << 30) | (b >> 2)) & MASK32,
            c,
            d,
        )
    for i in range(40, 60):
        a, b, c, d, e = (
            (((a << 5) | (a >> 27)) + ((b & c) | (d & (b | c))) + e + 0x8F1BBCDC + ws[i]) & MASK32,
            a,
            ((b << 30) | (b >> 2)) & MASK32,
            c,
            d,
        )
    for i in range(60, 80):
        a, b, c, d, e = (
            (((a << 5) | (a >> 27)) + (b ^ c ^ d) + e + 0xCA62C1D6 + ws[i]) & MASK32,
            a,
            ((b << 30) | (b >> 2)) & MASK32,
            c,
            d,
        )

    return a, b, c, d, e


def compress(
    state: Tuple[int, int, int, int, int], block
) -> Tuple[int, int, int, int, int]:
    """Advance the chaining value `state` by one 64-byte `block`.

    Returns the new 5-word state; `state` itself is left untouched.
    """
    h0, h1, h2, h3, h4 = state
    a, b, c, d, e = compress80(h0, h1, h2, h3, h4, build_message_schedule(block))

    return (
        (h0 + a) & MASK32,
        (h1 + b) & MASK32,
        (h2 + c) & MASK32,
        (h3 + d) & MASK32,
        (h4 + e) & MASK32,
    )
