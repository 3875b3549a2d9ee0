"""Tests for result line parsing."""

import pytest

from index_client.highlight import Markup, escape_angle_brackets
from index_client.models import ResultRecord
from index_client.records import extract_field, parse_result_line

BOLD = Markup("<b>", "</b>", escape_angle_brackets)


class TestExtractField:
    """Tests for extract_field."""

    def test_present(self):
        """Test a field is returned trimmed."""
        assert extract_field("<a>x</a><title>  Report  </title>", "title") == "Report"

    def test_missing_open_tag(self):
        """Test a missing tag gives an empty field."""
        assert extract_field("<a>x</a>", "title") == ""

    def test_missing_close_tag(self):
        """Test an unterminated tag gives an empty field."""
        assert extract_field("<title>Report", "title") == ""

    def test_empty_line(self):
        """Test parsing never fails on empty input."""
        assert extract_field("", "snippet") == ""


class TestParseResultLine:
    """Tests for parse_result_line."""

    @pytest.fixture
    def line(self, result_line):
        return result_line(
            0,
            filename="/home/alice/reports/q3.pdf",
            author="=?ISO-8859-1?Q?J=F6rg?=",
            score="12.5",
            title="Quarterly Report Q3",
            type="application/pdf",
            page="3-5",
            snippet="The quarterly report shows <growth>",
        )

    def test_fields(self, line):
        """Test every tag lands in its field."""
        record = parse_result_line(line, ["quarterly report"], BOLD)
        assert record.filename == "/home/alice/reports/q3.pdf"
        assert record.score == 12.5
        assert record.dstart == "0"
        assert record.dend == "999"
        assert record.mime_type == "application/pdf"
        assert record.page == "3-5"
        assert record.date == "2005-10-01"
        assert record.filesize == "4 KB"

    def test_author_is_decoded(self, line):
        """Test encoded words in the author are decoded."""
        assert parse_result_line(line, [], BOLD).author == "Jörg"

    def test_title_and_snippet_highlighted(self, line):
        """Test terms are highlighted and angle brackets escaped."""
        record = parse_result_line(line, ["quarterly report"], BOLD)
        assert record.title == "<b>Quarterly Report</b> Q3"
        assert record.snippet == "The <b>quarterly report</b> shows &lt;growth&gt;"

    def test_encoded_title(self, result_line):
        """Test encoded words in the title are decoded before highlighting."""
        line = result_line(1, title="=?ISO-8859-1?Q?Caf=E9_menu?=")
        assert parse_result_line(line, ["menu"], BOLD).title == "Café <b>menu</b>"

    def test_title_falls_back_to_filename(self, result_line):
        """Test the last path segment is used when there is no title."""
        line = result_line(1, title="", filename="/srv/docs/q3.pdf")
        assert parse_result_line(line, ["q3"], BOLD).title == "<b>q3</b>.pdf"

    def test_long_title_truncated(self, result_line):
        """Test titles over 80 characters are cut with an ellipsis."""
        line = result_line(1, title="x" * 100)
        assert parse_result_line(line, [], BOLD).title == "x" * 80 + " ..."

    def test_bad_score(self, result_line):
        """Test an unparsable score becomes zero."""
        assert parse_result_line(result_line(1, score="n/a"), [], BOLD).score == 0.0

    def test_garbage_line(self):
        """Test a line without tags yields an empty record."""
        record = parse_result_line("not a result line", ["x"], BOLD)
        assert record.filename == ""
        assert record.title == ""
        assert record.snippet == ""


class TestPageLabel:
    """Tests for ResultRecord.page_label."""

    @pytest.mark.parametrize("page,label", [
        ("", ""),
        ("1", ""),
        ("4", "page 4"),
        ("3-5", "pages 3-5"),
        ("?", ""),
    ])
    def test_labels(self, page, label):
        """Test the page label wording."""
        assert ResultRecord(page=page).page_label == label
