"""Tests for candidate roster parsing."""

from __future__ import annotations

import pytest

from saturn_scheduler.errors import CsvFormatError, NoValidCandidatesError
from saturn_scheduler.tools.csv_parser import map_headers, parse_candidates


def test_single_row():
    candidates = parse_candidates("name,email,position\nJane Doe,jane@x.com,Engineer")
    assert len(candidates) == 1
    c = candidates[0]
    assert (c.name, c.email, c.position) == ("Jane Doe", "jane@x.com", "Engineer")
    assert c.skills == ""
    assert len(c.id) == 8


def test_header_synonyms_are_case_insensitive():
    fields = map_headers([" Full Name", "EMAIL ADDRESS", "Years of Experience", "Technical Skills", "Availability"])
    assert fields == ["name", "email", "experience", "skills", "preferred_date"]


def test_unknown_headers_ignored():
    assert map_headers(["name", "linkedin", "email"]) == ["name", None, "email"]
    candidates = parse_candidates("name,linkedin,email\nAl,in/al,al@x.com")
    assert candidates[0].email == "al@x.com"


def test_quoted_cells_keep_commas():
    text = 'Candidate Name, Email, Skills\nBo Chen, bo@x.com, "Python, Docker, AWS"\n'
    candidates = parse_candidates(text)
    assert candidates[0].skills == "Python, Docker, AWS"


def test_rows_missing_name_or_email_are_dropped():
    text = "name,email\nAnn,ann@x.com\n,nobody@x.com\nNo Email,\nCal,cal@x.com"
    candidates = parse_candidates(text)
    assert [c.name for c in candidates] == ["Ann", "Cal"]


def test_blank_lines_skipped():
    text = "\n\nname,email\n\nAnn,ann@x.com\n   \nBen,ben@x.com\n"
    assert [c.name for c in parse_candidates(text)] == ["Ann", "Ben"]


def test_values_are_trimmed():
    candidates = parse_candidates("name,email\n  Ann Lee  ,  ann@x.com  ")
    assert candidates[0].name == "Ann Lee"
    assert candidates[0].email == "ann@x.com"


@pytest.mark.parametrize("text", ["", "name,email", "name,email\n\n   \n"])
def test_header_only_is_a_format_error(text):
    with pytest.raises(CsvFormatError):
        parse_candidates(text)


def test_no_surviving_rows():
    with pytest.raises(NoValidCandidatesError) as exc:
        parse_candidates("name,email\n,missing@x.com\nNobody,")
    assert exc.value.status_code == 400
    assert exc.value.category == "No Valid Candidates"
