"""
Tests for program name extraction and the file-name fallback.
"""
from __future__ import annotations

import pytest

from cobol_analyzer.parser.program_name import (
    extract_program_name,
    program_name_from_file_name,
    resolve_program_name,
)


class TestExtractProgramName:
    def test_hyphenated_name(self):
        assert extract_program_name("       PROGRAM-ID. FOO-BAR.") == "FOO-BAR"

    def test_no_space_after_period(self):
        assert extract_program_name("PROGRAM-ID.PAYROLL.") == "PAYROLL"

    def test_lower_case_source(self):
        assert extract_program_name("program-id. payslip.") == "PAYSLIP"

    def test_first_match_wins(self):
        source = "PROGRAM-ID. OUTER.\n...\nPROGRAM-ID. INNER.\n"
        assert extract_program_name(source) == "OUTER"

    def test_absent_marker(self):
        assert extract_program_name("IDENTIFICATION DIVISION.") == ""

    @pytest.mark.parametrize("content", ["", None])
    def test_empty_input(self, content):
        assert extract_program_name(content) == ""

    def test_quoted_name_not_matched(self):
        # The token must follow the period directly (after optional blanks).
        assert extract_program_name("PROGRAM-ID. 'QUOTED'.") == ""


class TestFileNameFallback:
    @pytest.mark.parametrize(
        "file_name, expected",
        [
            ("main.cbl", "MAIN"),
            ("Report.COB", "REPORT"),
            ("ledger.cobol", "LEDGER"),
            ("src/payroll/calc.cbl", "CALC"),
            ("src\\legacy\\old.cob", "OLD"),
            ("rec.cpy", "REC.CPY"),
            ("NOEXT", "NOEXT"),
            ("", ""),
        ],
    )
    def test_derived_names(self, file_name, expected):
        assert program_name_from_file_name(file_name) == expected

    def test_program_id_preferred(self):
        assert resolve_program_name("PROGRAM-ID. REAL.", "other.cbl") == "REAL"

    def test_fallback_when_program_id_missing(self):
        assert resolve_program_name("PROCEDURE DIVISION.", "fallback.cbl") == "FALLBACK"
