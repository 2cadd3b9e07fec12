import hashlib
import sqlite3

import pytest
import yaml

import sha1_trace
from sha1_trace import main, trace_message


def test_trace_single_block_message():
    trace = trace_message(b"abc")
    assert trace["digest_hex"] == "a9993e364706816aba3e25717850c26c9cd0d89d"
    assert trace["block_count"] == 1
    assert trace["message_length_bytes"] == 3

    (block,) = trace["blocks"]
    assert len(block["rounds"]) == 80
    first = block["rounds"][0]
    assert first["w"] == "61626380"
    assert first["state"] == ["67452301", "efcdab89", "98badcfe", "10325476", "c3d2e1f0"]


def test_trace_covers_extra_padding_block():
    trace = trace_message(b"q" * 56)
    assert trace["block_count"] == 2
    assert [b["block_index"] for b in trace["blocks"]] == [0, 1]


def test_trace_pads_and_schedules_each_block_once(monkeypatch):
    split_calls = []
    schedule_calls = []
    real_split = sha1_trace.split_into_blocks
    real_schedule = sha1_trace.build_message_schedule

    def counting_split(data, length=None):
        split_calls.append(len(data))
        return real_split(data, length)

    def counting_schedule(block):
        schedule_calls.append(len(block))
        return real_schedule(block)

    monkeypatch.setattr(sha1_trace, "split_into_blocks", counting_split)
    monkeypatch.setattr(sha1_trace, "build_message_schedule", counting_schedule)

    message = b"m" * 130
    trace = trace_message(message)

    assert split_calls == [130]
    assert schedule_calls == [64] * 3
    assert trace["block_count"] == 3
    assert trace["digest_hex"] == hashlib.sha1(message).hexdigest()


def test_main_writes_yaml(tmp_path, capsys):
    assert main(["abc", "--output-dir", str(tmp_path), "--name", "abc"]) == 0
    trace = yaml.safe_load((tmp_path / "abc.yaml").read_text())
    assert trace["digest_hex"] == "a9993e364706816aba3e25717850c26c9cd0d89d"
    assert "Done!" in capsys.readouterr().out


def test_main_writes_sqlite(tmp_path):
    source = tmp_path / "message.bin"
    source.write_bytes(b"z" * 100)
    out_dir = tmp_path / "out"
    assert main(["-f", str(source), "--output-dir", str(out_dir),
                 "--name", "z", "--format", "sqlite"]) == 0

    conn = sqlite3.connect(str(out_dir / "z.db"))
    try:
        (block_count,) = conn.execute("SELECT block_count FROM metadata").fetchone()
        (rounds,) = conn.execute("SELECT COUNT(*) FROM rounds").fetchone()
        first = conn.execute(
            "SELECT a, b, c, d, e FROM rounds WHERE block_index = 0 AND round_index = 0"
        ).fetchone()
    finally:
        conn.close()

    assert block_count == 2
    assert rounds == 160
    assert first == ("67452301", "efcdab89", "98badcfe", "10325476", "c3d2e1f0")


def test_main_missing_file(tmp_path, capsys):
    assert main(["-f", str(tmp_path / "missing"), "--output-dir", str(tmp_path)]) == 1
    assert "Error reading file" in capsys.readouterr().err


@pytest.mark.parametrize("argv", [[], ["abc", "-f", "x"]])
def test_main_requires_exactly_one_input(argv):
    with pytest.raises(SystemExit):
        main(argv)
