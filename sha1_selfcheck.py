"""Known-answer self-check and compression throughput benchmark.

Usage:
    python sha1_selfcheck.py
    python sha1_selfcheck.py --iterations 500000
    python sha1_selfcheck.py --no-benchmark --report results.yaml

The self-check hashes a fixed table of messages and compares against the
published SHA-1 digests. When it passes, the benchmark runs `compress` on an
all-zero block and reports throughput. The exit status is 0 only when every
vector matches.
"""

from __future__ import annotations

import argparse
import time
from typing import Dict, List, Tuple

import yaml

from sha1_cli import BLOCK_SIZE, sha1_words
from sha1_compress import compress


TEST_VECTORS: Tuple[Tuple[bytes, Tuple[int, int, int, int, int]], ...] = (
    (b"", (0xDA39A3EE, 0x5E6B4B0D, 0x3255BFEF, 0x95601890, 0xAFD80709)),
    (b"a", (0x86F7E437, 0xFAA5A7FC, 0xE15D1DDC, 0xB9EAEAEA, 0x377667B8)),
    (b"abc", (0xA9993E36, 0x4706816A, 0xBA3E2571, 0x7850C26C, 0x9CD0D89D)),
    (b"message digest", (0xC12252CE, 0xDA8BE899, 0x4D5FA029, 0x0A47231C, 0x1D16AAE3)),
    (
        b"abcdefghijklmnopqrstuvwxyz",
        (0x32D10C7B, 0x8CF96570, 0xCA04CE37, 0xF2A19D84, 0x240D3A89),
    ),
    (
        b"abcdbcdecdefdefgefghfghighijhijkijkljklmklmnlmnomnopnopq",
        (0x84983E44, 0x1C3BD26E, 0xBAAE4AA1, 0xF95129E5, 0xE54670F1),
    ),
)


def _format_state(state: Tuple[int, ...]) -> str:
    return "".join(f"{w:08x}" for w in state)


def failed_vectors() -> List[Tuple[bytes, Tuple[int, ...], Tuple[int, ...]]]:
    """Return `(message, expected, actual)` for every vector that mismatches."""
    failures = []
    for message, expected in TEST_VECTORS:
        actual = sha1_words(message)
        if actual != expected:
            failures.append((message, expected, actual))
    return failures


def self_check() -> bool:
    """Return True when every known-answer vector hashes correctly."""
    return not failed_vectors()


def benchmark(iterations: int) -> float:
    """Compress an all-zero block `iterations` times; return bytes per second."""
    if iterations <= 0:
        raise ValueError(f"Iterations must be positive, got {iterations}")

    state = (0, 0, 0, 0, 0)
    block = bytes(BLOCK_SIZE)
    start_time = time.perf_counter()
    for _ in range(iterations):
        state = compress(state, block)
    elapsed = time.perf_counter() - start_time

    # elapsed can be 0.0 for very short runs.
    return iterations * BLOCK_SIZE / max(elapsed, 1e-9)


def _build_report(speed: float | None, iterations: int) -> Dict:
    """Collect vector results and benchmark figures for the YAML report."""
    vectors = []
    for message, expected in TEST_VECTORS:
        actual = sha1_words(message)
        vectors.append({
            "message": message.decode("ascii"),
            "expected": _format_state(expected),
            "actual": _format_state(actual),
            "passed": actual == expected,
        })

    report: Dict = {
        "passed": all(v["passed"] for v in vectors),
        "vectors": vectors,
    }
    if speed is not None:
        report["benchmark"] = {
            "iterations": iterations,
            "block_size": BLOCK_SIZE,
            "bytes_per_second": round(speed, 1),
            "megabytes_per_second": round(speed / 1_000_000, 3),
        }
    return report


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Run the SHA-1 self-check, then benchmark the compression function"
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=100_000,
        help="Number of blocks to compress in the benchmark (default: 100,000)",
    )
    parser.add_argument(
        "--no-benchmark",
        action="store_true",
        help="Only run the self-check",
    )
    parser.add_argument(
        "--report",
        type=str,
        default=None,
        help="Write a YAML report of the results to this path",
    )
    args = parser.parse_args(argv)

    if args.iterations <= 0:
        parser.error(f"--iterations must be positive (got {args.iterations})")

    failures = failed_vectors()
    if failures:
        print("Self-check failed")
        for message, expected, actual in failures:
            print(f"  {message!r}: expected {_format_state(expected)}, got {_format_state(actual)}")
    else:
        print("Self-check passed")

    speed = None
    if not failures and not args.no_benchmark:
        speed = benchmark(args.iterations)
        print(f"Speed: {speed / 1_000_000:.1f} MB/s")

    if args.report:
        report = _build_report(speed, args.iterations)
        try:
            with open(args.report, "w") as f:
                yaml.safe_dump(report, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            print(f"ERROR: could not write report to {args.report}: {e}")
            return 1
        print(f"Report written to {args.report}")

    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
