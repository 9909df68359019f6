"""
Tests for the command-line interface.
"""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from cobol_analyzer.cli import main

FIXTURES = Path(__file__).parent / "fixtures"
PAYROLL_DIR = FIXTURES / "payroll"


class TestJsonOutput:
    def test_exit_zero(self, capsys):
        assert main([str(PAYROLL_DIR)]) == 0

    def test_stdout_payload(self, capsys):
        main([str(PAYROLL_DIR)])
        payload = json.loads(capsys.readouterr().out)
        assert payload["graph"]["missing_programs"] == ["ARCHIVER"]
        assert payload["graph"]["orphaned_programs"] == ["MONTHRPT"]
        assert payload["files"]["TAXCALC.cbl"]["file_type"] == "subprogram"

    def test_missing_warning_on_stderr(self, capsys):
        main([str(PAYROLL_DIR)])
        err = capsys.readouterr().err
        assert "WARNING: 1 called program not found: ARCHIVER" in err

    def test_output_file(self, tmp_path, capsys):
        out = tmp_path / "result.json"
        assert main([str(PAYROLL_DIR), "-o", str(out)]) == 0
        payload = json.loads(out.read_text(encoding="utf-8"))
        assert "PAYROLL" in payload["graph"]["programs"]

    def test_individual_files(self, capsys):
        rc = main([
            str(PAYROLL_DIR / "PAYROLL.cbl"),
            str(PAYROLL_DIR / "TAXCALC.cbl"),
        ])
        assert rc == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["graph"]["programs"]["TAXCALC"]["called_by"] == ["PAYROLL"]
        assert payload["graph"]["missing_programs"] == ["PAYSLIP", "AUDITLOG"]


class TestTextOutput:
    def test_sections(self, capsys):
        main([str(PAYROLL_DIR), "-f", "text"])
        out = capsys.readouterr().out
        assert "FILES (7)" in out
        assert "PROGRAMS (5)" in out
        assert "MISSING PROGRAMS (1)" in out
        assert "ORPHANED PROGRAMS (1)" in out
        assert "Program  : PAYROLL [MAIN]" in out
        assert "Called by: PAYROLL" in out

    def test_unknown_file_flagged(self, tmp_path, capsys):
        (tmp_path / "ODD.cbl").write_text("PROCEDURE DIVISION.\n")
        main([str(tmp_path), "-f", "text"])
        assert "needs manual review" in capsys.readouterr().out


class TestGraphOutput:
    @pytest.mark.parametrize(
        "fmt, marker",
        [
            ("dot", "digraph"),
            ("mermaid", "flowchart LR"),
            ("json", '"nodes"'),
        ],
    )
    def test_formats(self, capsys, fmt, marker):
        assert main([str(PAYROLL_DIR), "--graph", "--graph-format", fmt]) == 0
        assert marker in capsys.readouterr().out

    def test_copybooks_flag(self, capsys):
        main([str(PAYROLL_DIR), "--graph", "--graph-format", "json", "--copybooks"])
        data = json.loads(capsys.readouterr().out)
        assert any(n["status"] == "copybook" for n in data["nodes"])


class TestExitCodes:
    def test_fail_on_missing(self, capsys):
        assert main([str(PAYROLL_DIR), "--fail-on-missing"]) == 1

    def test_fail_on_missing_without_missing(self, capsys):
        rc = main([str(PAYROLL_DIR / "TAXCALC.cbl"), "--fail-on-missing"])
        assert rc == 0

    def test_nonexistent_source(self, tmp_path, capsys):
        rc = main([str(tmp_path / "absent.cbl")])
        assert rc == 2
        assert "error:" in capsys.readouterr().err

    def test_empty_directory(self, tmp_path, capsys):
        rc = main([str(tmp_path)])
        assert rc == 2
        assert "no COBOL sources found" in capsys.readouterr().err

    def test_no_recursive(self, capsys):
        main([str(PAYROLL_DIR), "--no-recursive"])
        payload = json.loads(capsys.readouterr().out)
        assert payload["graph"]["copybooks"] == ["EMPREC.CPY"]
