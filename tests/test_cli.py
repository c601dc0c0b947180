"""
Tests for the command-line interface.

``main`` is called in-process; stdin is replaced with ``monkeypatch`` and
output is captured with ``capsys``.
"""
from __future__ import annotations

import io
import json
import sys
from pathlib import Path

import pytest

from ippcode_parser.cli import main

FIXTURES = Path(__file__).parent / "fixtures"
FACTORIAL = str(FIXTURES / "factorial.ippcode")

LOOP = ".IPPcode23\nDEFVAR GF@x\nLABEL loop\nJUMP loop\n"


@pytest.fixture
def stdin(monkeypatch):
    def _set(text: str) -> None:
        monkeypatch.setattr(sys, "stdin", io.StringIO(text))
    return _set


# ─────────────────────────────────────────────────────────────────────────────
# Program output
# ─────────────────────────────────────────────────────────────────────────────


class TestOutput:
    def test_xml_from_stdin(self, stdin, capsys):
        stdin(LOOP)
        assert main([]) == 0
        out = capsys.readouterr().out
        assert out.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert '<instruction opcode="JUMP" order="3">' in out

    def test_source_file(self, capsys):
        assert main(["--source", FACTORIAL]) == 0
        assert 'order="14"' in capsys.readouterr().out

    def test_output_file(self, tmp_path, capsys):
        dest = tmp_path / "out.xml"
        assert main(["-i", FACTORIAL, "-o", str(dest)]) == 0
        assert dest.read_text(encoding="utf-8").startswith("<?xml")
        assert capsys.readouterr().out == ""

    def test_json_format(self, capsys):
        assert main(["-i", FACTORIAL, "--format", "json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["instruction_count"] == 14
        assert data["comment_count"] == 3

    def test_cfg_file(self, tmp_path):
        dest = tmp_path / "cfg.dot"
        assert main(["-i", FACTORIAL, "--cfg", str(dest)]) == 0
        assert dest.read_text(encoding="utf-8").startswith("digraph")

    def test_cfg_mermaid(self, tmp_path):
        dest = tmp_path / "cfg.mmd"
        assert main(["-i", FACTORIAL, "--cfg", str(dest), "--cfg-format", "mermaid"]) == 0
        assert "flowchart TD" in dest.read_text(encoding="utf-8")


# ─────────────────────────────────────────────────────────────────────────────
# Statistics groups
# ─────────────────────────────────────────────────────────────────────────────


class TestStatistics:
    def test_single_group(self, stdin, tmp_path):
        stdin(LOOP)
        stats = tmp_path / "stats.txt"
        rc = main([f"--stats={stats}", "--labels", "--jumps", "--backjumps", "--fwjumps", "--badjumps"])
        assert rc == 0
        assert stats.read_text(encoding="utf-8") == "1\n1\n1\n0\n0\n"

    def test_several_groups(self, tmp_path):
        first = tmp_path / "a.txt"
        second = tmp_path / "b.txt"
        rc = main([
            "-i", FACTORIAL,
            f"--stats={first}", "--loc", "--comments",
            f"--stats={second}", "--print=frequent:", "--frequent", "--eol",
        ])
        assert rc == 0
        assert first.read_text(encoding="utf-8") == "14\n3\n"
        assert second.read_text(encoding="utf-8") == "frequent:DEFVAR,LABEL\n\n"

    def test_unknown_statistic_writes_nothing(self, stdin, tmp_path, capsys):
        stdin(LOOP)
        stats = tmp_path / "stats.txt"
        assert main([f"--stats={stats}", "--loc", "--bogus"]) == 10
        assert not stats.exists()
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Unknown statistic: bogus" in captured.err

    def test_same_file_twice(self, stdin, tmp_path):
        stdin(LOOP)
        stats = tmp_path / "stats.txt"
        assert main([f"--stats={stats}", "--loc", f"--stats={stats}", "--labels"]) == 12

    def test_bare_word_in_group(self, stdin, tmp_path):
        stdin(LOOP)
        assert main([f"--stats={tmp_path / 's'}", "loc"]) == 10

    def test_unwritable_stats_file(self, stdin, tmp_path):
        stdin(LOOP)
        assert main([f"--stats={tmp_path / 'missing' / 'dir' / 's.txt'}", "--loc"]) == 12


# ─────────────────────────────────────────────────────────────────────────────
# Parameters and exit codes
# ─────────────────────────────────────────────────────────────────────────────


class TestExitCodes:
    def test_help_alone(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0
        assert "--stats=FILE" in capsys.readouterr().out

    def test_help_with_other_parameters(self):
        assert main(["--help", "--verbose"]) == 10

    def test_unknown_option(self, stdin):
        stdin(LOOP)
        assert main(["--bogus"]) == 10

    def test_missing_source_file(self, tmp_path):
        assert main(["-i", str(tmp_path / "nope.ippcode")]) == 11

    def test_invalid_utf8_on_stdin(self, monkeypatch, capsys):
        raw = io.BytesIO(b".IPPcode23\nWRITE string@\xff\n")
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(raw, encoding="utf-8"))
        assert main([]) == 11
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "standard input" in captured.err

    def test_missing_header(self, stdin, capsys):
        stdin("DEFVAR GF@x\n")
        assert main([]) == 21
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "header" in captured.err

    def test_unknown_opcode(self, stdin, capsys):
        stdin(".IPPcode23\n\nFOOBAR\n")
        assert main([]) == 22
        assert "line 3" in capsys.readouterr().err

    def test_arity(self, stdin):
        stdin(".IPPcode23\nADD GF@x GF@y\n")
        assert main([]) == 23

    def test_bad_argument(self, stdin):
        stdin(".IPPcode23\nDEFVAR int@1\n")
        assert main([]) == 23

    def test_malformed_opcode(self, stdin):
        stdin(".IPPcode23\n123\n")
        assert main([]) == 23
