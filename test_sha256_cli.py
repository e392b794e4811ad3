import io

import yaml

from sha256_cli import main


EMPTY_DIGEST = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
ABC_DIGEST = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


def _stdin(data: bytes) -> io.TextIOWrapper:
    """A stand-in for sys.stdin whose `.buffer` yields `data`."""
    return io.TextIOWrapper(io.BytesIO(data))


def test_reads_stdin_and_prints_one_digest_per_line(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", _stdin(b"\n616263\n"))

    assert main([]) == 0

    out = capsys.readouterr().out
    assert out.splitlines() == [EMPTY_DIGEST, ABC_DIGEST]


def test_reads_files(tmp_path, capsys):
    first = tmp_path / "a.txt"
    first.write_text("616263\n")
    second = tmp_path / "b.txt"
    second.write_text("\n")

    assert main([str(first), str(second)]) == 0
    assert capsys.readouterr().out.splitlines() == [ABC_DIGEST, EMPTY_DIGEST]


def test_invalid_line_stops_with_error(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", _stdin(b"616263\n6162z\n\n"))

    assert main([]) == 1

    captured = capsys.readouterr()
    assert captured.out.splitlines() == [ABC_DIGEST]
    assert "<stdin>:2" in captured.err
    assert "non-hex character" in captured.err


def test_skip_invalid_continues(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", _stdin(b"abc\n616263\n"))

    assert main(["--skip-invalid"]) == 1

    captured = capsys.readouterr()
    assert captured.out.splitlines() == [ABC_DIGEST]
    assert "odd number of hex digits" in captured.err


def test_yaml_output_with_trace(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", _stdin(b"616263\n" + b"61" * 56 + b"\n"))

    assert main(["--format", "yaml", "--trace"]) == 0

    records = yaml.safe_load(capsys.readouterr().out)
    assert [r["line"] for r in records] == [1, 2]
    assert records[0]["digest_hex"] == ABC_DIGEST
    assert records[0]["message_bytes"] == 3
    assert records[0]["blocks"] == 1
    assert records[0]["states"][0][0] == "6a09e667"
    assert records[0]["states"][-1][0] == "ba7816bf"
    assert records[1]["blocks"] == 2
    assert len(records[1]["states"]) == 3


def test_config_file_sets_format(tmp_path, monkeypatch, capsys):
    config = tmp_path / "settings.yaml"
    config.write_text("format: yaml\n")
    monkeypatch.setattr("sys.stdin", _stdin(b"616263\n"))

    assert main(["--config", str(config)]) == 0

    records = yaml.safe_load(capsys.readouterr().out)
    assert records[0]["digest_hex"] == ABC_DIGEST
    assert "states" not in records[0]


def test_bad_config_file(tmp_path, capsys):
    config = tmp_path / "settings.yaml"
    config.write_text("format: xml\n")

    assert main(["--config", str(config)]) == 1
    assert "format" in capsys.readouterr().err


def test_missing_input_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.txt")]) == 1
    assert "Error reading input" in capsys.readouterr().err


def test_undecodable_bytes_are_reported_as_invalid(tmp_path, capsys):
    path = tmp_path / "inputs.txt"
    path.write_bytes(b"616263\n\xff\xfe\n")

    assert main([str(path)]) == 1

    captured = capsys.readouterr()
    assert captured.out.splitlines() == [ABC_DIGEST]
    assert f"{path}:2" in captured.err
    assert "non-hex character" in captured.err


def test_skip_invalid_skips_undecodable_line(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", _stdin(b"\xff\n616263\n"))

    assert main(["--skip-invalid"]) == 1

    captured = capsys.readouterr()
    assert captured.out.splitlines() == [ABC_DIGEST]
    assert "<stdin>:1" in captured.err


def test_yaml_records_written_when_later_file_is_missing(tmp_path, capsys):
    first = tmp_path / "a.txt"
    first.write_text("616263\n")

    assert main(["--format", "yaml", str(first), str(tmp_path / "missing.txt")]) == 1

    captured = capsys.readouterr()
    records = yaml.safe_load(captured.out)
    assert len(records) == 1
    assert records[0]["digest_hex"] == ABC_DIGEST
    assert "Error reading input" in captured.err


def test_yaml_records_name_their_source(tmp_path, capsys):
    first = tmp_path / "a.txt"
    first.write_text("616263\n")
    second = tmp_path / "b.txt"
    second.write_text("\n")

    assert main(["--format", "yaml", str(first), str(second)]) == 0

    records = yaml.safe_load(capsys.readouterr().out)
    assert [(r["source"], r["line"]) for r in records] == [(str(first), 1), (str(second), 1)]
    assert [r["digest_hex"] for r in records] == [ABC_DIGEST, EMPTY_DIGEST]
