# -*- coding: utf-8 -*-
"""Unit tests for the toon command line."""

import io
import json
from pathlib import Path

import pytest

from toon_codec import __version__, decode, encode
from toon_codec.cli import format_input_label, main


@pytest.fixture
def stdin(monkeypatch):
    """Replace standard input with the given text."""

    def _set(text):
        monkeypatch.setattr("sys.stdin", io.StringIO(text))

    return _set


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run inside an empty temporary directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


SAMPLE = {
    "name": "toon",
    "tags": ["a", "b"],
    "users": [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}],
    "meta": {"active": True, "score": 9.5},
}


class TestEncodeCommand:
    """Test JSON to TOON conversion."""

    def test_stdin_to_stdout(self, stdin, capsys):
        """Encoded lines stream to stdout followed by one newline."""
        stdin(json.dumps(SAMPLE))
        assert main([]) == 0
        out, err = capsys.readouterr()
        assert out == encode(SAMPLE) + "\n"
        assert err == ""

    def test_dash_means_stdin(self, stdin, capsys):
        """'-' reads standard input."""
        stdin('{"a": 1}')
        assert main(["-", "--encode"]) == 0
        assert capsys.readouterr().out == "a: 1\n"

    def test_file_to_file(self, workdir, capsys):
        """File output is exactly encode() with no trailing newline."""
        (workdir / "input.json").write_text(json.dumps(SAMPLE), encoding="utf-8")
        assert main(["input.json", "-o", "output.toon"]) == 0
        assert (workdir / "output.toon").read_text(encoding="utf-8") == encode(SAMPLE)
        out, err = capsys.readouterr()
        assert out == ""
        assert "Encoded `input.json` → `output.toon`" in err

    def test_stdin_to_file(self, workdir, stdin, capsys):
        """Standard input is labelled 'stdin'."""
        stdin(json.dumps(SAMPLE))
        assert main(["-o", "output.toon"]) == 0
        assert (workdir / "output.toon").read_text(encoding="utf-8") == encode(SAMPLE)
        assert "Encoded `stdin` → `output.toon`" in capsys.readouterr().err

    def test_large_streamed_output_matches(self, workdir):
        """Streaming gives the same text as a full encode."""
        data = {"rows": [{"id": i, "name": f"user {i}", "ok": i % 2 == 0} for i in range(500)], "nested": [{"a": {"b": i}} for i in range(50)]}
        (workdir / "big.json").write_text(json.dumps(data), encoding="utf-8")
        assert main(["big.json", "-o", "big.toon", "--delimiter", "tab", "--indent", "4"]) == 0
        assert (workdir / "big.toon").read_text(encoding="utf-8") == encode(data, {"delimiter": "\t", "indent": 4})

    def test_empty_object(self, workdir):
        """The empty object streams to an empty file."""
        (workdir / "empty.json").write_text("{}", encoding="utf-8")
        assert main(["empty.json", "-o", "empty.toon"]) == 0
        assert (workdir / "empty.toon").read_text(encoding="utf-8") == ""

    def test_single_line(self, workdir):
        """A scalar root is written as one line."""
        (workdir / "one.json").write_text('"hello"', encoding="utf-8")
        assert main(["one.json", "-o", "one.toon"]) == 0
        assert (workdir / "one.toon").read_text(encoding="utf-8") == "hello"

    @pytest.mark.parametrize("flag,options", [("pipe", {"delimiter": "|"}), ("|", {"delimiter": "|"}), ("tab", {"delimiter": "\t"})])
    def test_delimiter(self, stdin, capsys, flag, options):
        """--delimiter accepts names and characters."""
        stdin(json.dumps(SAMPLE))
        assert main(["--delimiter", flag]) == 0
        assert capsys.readouterr().out == encode(SAMPLE, options) + "\n"

    def test_indent(self, stdin, capsys):
        """--indent sets spaces per level."""
        stdin(json.dumps(SAMPLE))
        assert main(["--indent", "4"]) == 0
        assert capsys.readouterr().out == encode(SAMPLE, {"indent": 4}) + "\n"

    def test_key_folding(self, stdin, capsys):
        """--key-folding folds single-key chains."""
        stdin('{"a": {"b": {"c": 1}}}')
        assert main(["--key-folding"]) == 0
        assert capsys.readouterr().out == "a.b.c: 1\n"

    def test_flatten_depth(self, stdin, capsys):
        """--flatten-depth limits folding."""
        stdin('{"a": {"b": {"c": 1}}}')
        assert main(["--key-folding", "safe", "--flatten-depth", "2"]) == 0
        assert capsys.readouterr().out == "a.b:\n  c: 1\n"

    def test_stats(self, stdin, capsys):
        """--stats prints the full encode and token estimates."""
        stdin(json.dumps(SAMPLE, indent=2))
        assert main(["--stats"]) == 0
        out, err = capsys.readouterr()
        assert out == encode(SAMPLE) + "\n"
        assert "Token estimates: ~" in err
        assert "(JSON) → ~" in err
        assert "Saved ~" in err and "tokens (-" in err

    def test_stats_to_file(self, workdir, capsys):
        """--stats with an output file writes the file and reports."""
        (workdir / "input.json").write_text(json.dumps(SAMPLE), encoding="utf-8")
        assert main(["input.json", "-o", "out.toon", "--stats"]) == 0
        assert (workdir / "out.toon").read_text(encoding="utf-8") == encode(SAMPLE)
        err = capsys.readouterr().err
        assert "Encoded `input.json` → `out.toon`" in err
        assert "Token estimates:" in err

    def test_encode_flag_overrides_extension(self, workdir, capsys):
        """-e encodes even a .toon input."""
        (workdir / "data.toon").write_text('{"a": 1}', encoding="utf-8")
        assert main(["data.toon", "-e"]) == 0
        assert capsys.readouterr().out == "a: 1\n"

    def test_settings_defaults(self, monkeypatch, stdin, capsys):
        """TOON_* variables supply defaults."""
        monkeypatch.setenv("TOON_DELIMITER", "pipe")
        stdin('{"t": [1, 2]}')
        assert main([]) == 0
        assert capsys.readouterr().out == "t[2|]: 1|2\n"


class TestDecodeCommand:
    """Test TOON to JSON conversion."""

    def test_file_to_file(self, workdir, capsys):
        """A .toon input decodes automatically."""
        (workdir / "input.toon").write_text(encode(SAMPLE), encoding="utf-8")
        assert main(["input.toon", "-o", "output.json"]) == 0
        assert json.loads((workdir / "output.json").read_text(encoding="utf-8")) == SAMPLE
        assert "Decoded `input.toon` → `output.json`" in capsys.readouterr().err

    def test_stdin_to_stdout(self, stdin, capsys):
        """-d decodes standard input to indented JSON."""
        stdin(encode(SAMPLE))
        assert main(["-d"]) == 0
        out = capsys.readouterr().out
        assert json.loads(out) == SAMPLE
        assert out.startswith('{\n  "name": "toon"')

    def test_stdin_to_file(self, workdir, stdin, capsys):
        """Standard input is labelled 'stdin'."""
        stdin(encode(SAMPLE))
        assert main(["--decode", "-o", "output.json"]) == 0
        assert json.loads((workdir / "output.json").read_text(encoding="utf-8")) == SAMPLE
        assert "Decoded `stdin` → `output.json`" in capsys.readouterr().err

    def test_no_strict(self, stdin, capsys):
        """--no-strict tolerates length mismatches."""
        stdin("items[3]{id}:\n  1\n  2")
        assert main(["-d", "--no-strict"]) == 0
        assert json.loads(capsys.readouterr().out) == {"items": [{"id": 1}, {"id": 2}]}

    def test_expand_paths(self, stdin, capsys):
        """--expand-paths reverses key folding."""
        stdin(encode({"a": {"b": {"c": [1, 2]}}, "d": 1}, {"key_folding": "safe"}))
        assert main(["-d", "--expand-paths"]) == 0
        assert json.loads(capsys.readouterr().out) == {"a": {"b": {"c": [1, 2]}}, "d": 1}


class TestErrors:
    """Test failure reporting and exit codes."""

    def test_invalid_json(self, stdin, capsys):
        """Malformed JSON exits 1."""
        stdin('{"a": ')
        assert main([]) == 1
        out, err = capsys.readouterr()
        assert out == ""
        assert "Error: Failed to parse JSON" in err

    def test_invalid_toon(self, stdin, capsys):
        """Malformed TOON exits 1."""
        stdin('key: "unterminated string')
        assert main(["-d"]) == 1
        assert "Error: Failed to decode TOON" in capsys.readouterr().err

    def test_strict_violation(self, stdin, capsys):
        """Strict mode errors are reported with their location."""
        stdin("items[3]{id}:\n  1\n  2")
        assert main(["-d"]) == 1
        assert "line 1" in capsys.readouterr().err

    @pytest.mark.parametrize("value", [";", "semicolon", ""])
    def test_invalid_delimiter(self, stdin, capsys, value):
        """Unsupported delimiters exit 1 before any output."""
        stdin('{"a": 1}')
        assert main(["--delimiter", value]) == 1
        out, err = capsys.readouterr()
        assert out == ""
        assert "Invalid delimiter" in err

    @pytest.mark.parametrize("value", ["abc", "0", "-2", "1.5"])
    def test_invalid_indent(self, stdin, capsys, value):
        """Non-positive or non-integer indents exit 1."""
        stdin('{"a": 1}')
        assert main([f"--indent={value}"]) == 1
        assert "Invalid indent value" in capsys.readouterr().err

    def test_invalid_indent_on_decode(self, stdin, capsys):
        """Indent is validated for decoding too."""
        stdin("a: 1")
        assert main(["-d", "--indent", "x"]) == 1
        assert "Invalid indent value" in capsys.readouterr().err

    def test_missing_input_file(self, workdir, capsys):
        """A missing input file exits 1 without a success message."""
        assert main(["missing.json", "-o", "out.toon"]) == 1
        err = capsys.readouterr().err
        assert "Error: Failed to read input" in err
        assert "Encoded" not in err
        assert not (workdir / "out.toon").exists()

    def test_invalid_utf8_file(self, workdir, capsys):
        """Undecodable input bytes exit 1."""
        (workdir / "in.json").write_bytes(b'{"a": "\xff"}')
        assert main(["in.json"]) == 1
        out, err = capsys.readouterr()
        assert out == ""
        assert "Error: Failed to read input `in.json`" in err

    def test_invalid_utf8_stdin(self, monkeypatch, capsys):
        """Undecodable standard input exits 1."""
        monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(b"a: \xff"), encoding="utf-8"))
        assert main(["-d"]) == 1
        assert "Error: Failed to read input `stdin`" in capsys.readouterr().err

    def test_integer_beyond_json_range(self, workdir, capsys):
        """Integers too large for JSON output exit 1."""
        (workdir / "in.toon").write_text("x: 100000000000000000000000", encoding="utf-8")
        assert main(["in.toon", "-o", "out.json"]) == 1
        err = capsys.readouterr().err
        assert "Error: Failed to encode JSON" in err
        assert "Decoded" not in err
        assert not (workdir / "out.json").exists()

    def test_conflicting_directions(self, capsys):
        """-e and -d cannot be combined."""
        assert main(["-e", "-d"]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_invalid_flatten_depth(self, capsys):
        """Usage errors exit 1 rather than 2."""
        assert main(["--flatten-depth", "many"]) == 1
        assert "Error:" in capsys.readouterr().err


class TestMisc:
    """Test version output and helpers."""

    def test_version(self, capsys):
        """--version prints the package version."""
        assert main(["--version"]) == 0
        assert capsys.readouterr().out.strip() == f"toon {__version__}"

    def test_input_label(self, workdir):
        """Inputs are labelled relative to the working directory."""
        assert format_input_label(None) == "stdin"
        assert format_input_label("-") == "stdin"
        assert format_input_label(str(Path.cwd() / "a.json")) == "a.json"

    def test_round_trip_through_files(self, workdir):
        """Encoding then decoding through the CLI restores the data."""
        (workdir / "in.json").write_text(json.dumps(SAMPLE), encoding="utf-8")
        assert main(["in.json", "-o", "mid.toon", "--delimiter", "pipe"]) == 0
        assert main(["mid.toon", "-o", "out.json"]) == 0
        assert json.loads((workdir / "out.json").read_text(encoding="utf-8")) == SAMPLE
        assert decode((workdir / "mid.toon").read_text(encoding="utf-8")) == SAMPLE

    def test_large_floats_through_files(self, workdir):
        """Floats written with an exponent survive both directions."""
        data = {"big": 1e23, "max": 1.7976931348623157e308, "tiny": 5e-324}
        (workdir / "in.json").write_text(json.dumps(data), encoding="utf-8")
        assert main(["in.json", "-o", "mid.toon"]) == 0
        assert main(["mid.toon", "-o", "out.json"]) == 0
        assert json.loads((workdir / "out.json").read_text(encoding="utf-8")) == data
