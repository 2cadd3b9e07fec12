"""Record the SHA-1 working state at every round of every block of a message.

For one message, this script:
1. Pads and splits the message into 512-bit blocks
2. Computes SHA-1 while tracking the (a, b, c, d, e) registers at each round
3. Saves the schedule words and states to <output-dir>/<name>.yaml or .db

Usage:
    python sha1_trace.py "abc"
    python sha1_trace.py -f path/to/file
    python sha1_trace.py "abc" --format sqlite --output-dir data/trace

SQLite Schema:
    - metadata: message_hex, message_length_bytes, block_count, digest_hex
    - blocks: block_index, block_hex
    - rounds: block_index, round_index, w, a, b, c, d, e
"""

from __future__ import annotations

import argparse
import os
import sqlite3
import sys
from typing import Dict, List

import yaml

from sha1_cli import _H0, finalize_digest, split_into_blocks, update_hash_state
from sha1_compress import build_message_schedule, compress80


def trace_message(message: bytes) -> Dict:
    """Return the digest plus per-block schedules and pre-round states."""
    blocks = split_into_blocks(message)

    state = _H0
    block_entries: List[Dict] = []
    for block_idx, block in enumerate(blocks):
        ws = build_message_schedule(block)
        work_out, states = compress80(*state, ws, track_state=True)
        state = update_hash_state(state, *work_out)

        block_entries.append({
            "block_index": block_idx,
            "block_hex": block.hex(),
            "rounds": [
                {
                    "round_index": i,
                    "w": f"{w:08x}",
                    "state": [f"{x:08x}" for x in round_state],
                }
                for i, (w, round_state) in enumerate(zip(ws, states))
            ],
        })

    return {
        "message_hex": message.hex(),
        "message_length_bytes": len(message),
        "block_count": len(blocks),
        "digest_hex": finalize_digest(state).hex(),
        "blocks": block_entries,
    }


def _write_yaml(trace: Dict, output_path: str) -> None:
    with open(output_path, "w") as f:
        yaml.safe_dump(trace, f, default_flow_style=False, sort_keys=False)


def _write_sqlite(trace: Dict, output_path: str) -> None:
    """Save a trace to a fresh SQLite database."""
    if os.path.exists(output_path):
        os.remove(output_path)

    conn = sqlite3.connect(output_path)
    try:
        cursor = conn.cursor()
        cursor.executescript("""
            CREATE TABLE metadata (
                message_hex TEXT NOT NULL,
                message_length_bytes INTEGER NOT NULL,
                block_count INTEGER NOT NULL,
                digest_hex TEXT NOT NULL
            );

            CREATE TABLE blocks (
                block_index INTEGER PRIMARY KEY,
                block_hex TEXT NOT NULL
            );

            CREATE TABLE rounds (
                block_index INTEGER NOT NULL,
                round_index INTEGER NOT NULL,
                w TEXT NOT NULL,
                a TEXT NOT NULL,
                b TEXT NOT NULL,
                c TEXT NOT NULL,
                d TEXT NOT NULL,
                e TEXT NOT NULL,
                FOREIGN KEY (block_index) REFERENCES blocks(block_index)
            );

            CREATE INDEX idx_rounds_block ON rounds(block_index, round_index);
        """)

        cursor.execute(
            "INSERT INTO metadata VALUES (?, ?, ?, ?)",
            (
                trace["message_hex"],
                trace["message_length_bytes"],
                trace["block_count"],
                trace["digest_hex"],
            ),
        )

        round_rows = []
        for block in trace["blocks"]:
            cursor.execute(
                "INSERT INTO blocks VALUES (?, ?)",
                (block["block_index"], block["block_hex"]),
            )
            for rnd in block["rounds"]:
                round_rows.append(
                    (block["block_index"], rnd["round_index"], rnd["w"], *rnd["state"])
                )
        cursor.executemany("INSERT INTO rounds VALUES (?, ?, ?, ?, ?, ?, ?, ?)", round_rows)
        conn.commit()
    finally:
        conn.close()


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Record the SHA-1 working state at every round for one message"
    )
    parser.add_argument(
        "message",
        nargs="?",
        help="Message to trace (UTF-8 encoded)",
    )
    parser.add_argument(
        "-f",
        "--file",
        type=str,
        default=None,
        help="Trace the raw bytes of this file instead",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="data/trace",
        help="Output directory (default: data/trace)",
    )
    parser.add_argument(
        "--name",
        type=str,
        default=None,
        help="Output file name without extension (default: first 16 hex digits of the digest)",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["yaml", "sqlite"],
        default="yaml",
        help="Output format: yaml or sqlite (default: yaml)",
    )
    args = parser.parse_args(argv)

    if (args.message is None) == (args.file is None):
        parser.error("give exactly one of a message or -f FILE")

    if args.file is not None:
        try:
            with open(args.file, "rb") as f:
                message = f.read()
        except OSError as e:
            sys.stderr.write(f"Error reading file '{args.file}': {e}\n")
            return 1
    else:
        message = args.message.encode("utf-8")

    trace = trace_message(message)
    print(f"Message length: {trace['message_length_bytes']} bytes")
    print(f"Blocks after padding: {trace['block_count']}")
    print(f"Digest: {trace['digest_hex']}")

    os.makedirs(args.output_dir, exist_ok=True)
    name = args.name or trace["digest_hex"][:16]

    if args.format == "sqlite":
        output_path = os.path.join(args.output_dir, f"{name}.db")
        _write_sqlite(trace, output_path)
    else:
        output_path = os.path.join(args.output_dir, f"{name}.yaml")
        _write_yaml(trace, output_path)

    print(f"Done! Saved {trace['block_count'] * 80:,} round entries to {output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
