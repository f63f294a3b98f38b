"""Unit tests for tokenizer.py: format detection, row parsing, tokenization."""
from __future__ import annotations

import pytest

from testpattern_draft.tokenizer import (
    Token,
    looks_tabular,
    parse_delimited_row,
    tokenize,
)


# ---------------------------------------------------------------------------
# parse_delimited_row
# ---------------------------------------------------------------------------


class TestParseDelimitedRow:
    def test_plain_fields(self) -> None:
        assert parse_delimited_row("a,b,c") == ["a", "b", "c"]

    def test_quoted_comma_is_literal(self) -> None:
        assert parse_delimited_row('a,"b,c",d') == ["a", "b,c", "d"]

    def test_doubled_quote_is_escaped(self) -> None:
        assert parse_delimited_row('"He said ""hi""",x') == ['He said "hi"', "x"]

    def test_quoting_can_start_mid_field(self) -> None:
        assert parse_delimited_row('ab"c,d"e,f') == ["abc,de", "f"]

    def test_trailing_comma_yields_empty_field(self) -> None:
        assert parse_delimited_row("a,") == ["a", ""]

    def test_fields_are_not_trimmed(self) -> None:
        assert parse_delimited_row(" a , b ") == [" a ", " b "]

    def test_empty_line_is_one_empty_field(self) -> None:
        assert parse_delimited_row("") == [""]


# ---------------------------------------------------------------------------
# looks_tabular
# ---------------------------------------------------------------------------


class TestLooksTabular:
    def test_label_header_is_tabular(self) -> None:
        assert looks_tabular(["Name,Email,Signup Date", "Ada,ada@example.com,2024-01-02"])

    def test_no_comma_is_free_text(self) -> None:
        assert not looks_tabular(["192.168.1.1 failed login", "other"])

    def test_single_line_is_free_text(self) -> None:
        assert not looks_tabular(["Name,Email"])

    def test_data_in_header_row_is_free_text(self) -> None:
        assert not looks_tabular(["1st,2nd", "x,y"])

    def test_email_in_header_row_is_free_text(self) -> None:
        assert not looks_tabular(["alice@example.com,bob", "x,y"])

    def test_overlong_label_is_free_text(self) -> None:
        assert not looks_tabular(["a" * 60 + ",b", "x,y"])

    def test_label_punctuation_allowed(self) -> None:
        assert looks_tabular(["user.id,created-at,path/name", "1,2,3"])

    def test_non_ascii_label_is_free_text(self) -> None:
        assert not looks_tabular(["Pr\u00e9nom,Email", "Ada,a@x.com"])
        assert tokenize("Pr\u00e9nom,Email\nAda,a@x.com\nBo,b@x.com\n").is_tabular is False

    def test_unicode_space_in_label_allowed(self) -> None:
        assert looks_tabular(["First\u00a0Name,Email", "Ada,a@x.com"])


# ---------------------------------------------------------------------------
# tokenize: tabular
# ---------------------------------------------------------------------------


class TestTokenizeTabular:
    def test_headers_and_tokens(self) -> None:
        doc = tokenize("Name,Email,Signup Date\nAda,ada@example.com,2024-01-02\nBob,bob@example.com,2024-02-03\n")
        assert doc.is_tabular is True
        assert doc.header_names == ["Name", "Email", "Signup Date"]
        assert [t.value for t in doc.tokens] == [
            "Ada",
            "ada@example.com",
            "2024-01-02",
            "Bob",
            "bob@example.com",
            "2024-02-03",
        ]

    def test_token_carries_line_column_and_header(self) -> None:
        doc = tokenize("Name,Email\nAda,ada@example.com\n")
        assert doc.tokens[1] == Token(
            value="ada@example.com", line_number=2, column=1, header="Email"
        )

    def test_extra_fields_get_default_header(self) -> None:
        doc = tokenize("a,b\n1,2,3\n")
        assert doc.tokens[2].header == "column_2"
        assert doc.tokens[2].column == 2

    def test_empty_fields_are_skipped(self) -> None:
        doc = tokenize("a,b\n , x \n")
        assert [(t.value, t.header) for t in doc.tokens] == [("x", "b")]

    def test_blank_rows_are_skipped_but_numbering_kept(self) -> None:
        doc = tokenize("a,b\n\n1,2\n")
        assert [t.line_number for t in doc.tokens] == [3, 3]
        assert [line.line_number for line in doc.lines] == [3]

    def test_crlf_line_endings(self) -> None:
        doc = tokenize("a,b\r\nx,y\r\n")
        assert doc.is_tabular is True
        assert [t.value for t in doc.tokens] == ["x", "y"]

    def test_tabular_tokens_are_never_full_line(self) -> None:
        doc = tokenize("a,b\nx,y\n")
        assert not any(t.is_full_line for t in doc.tokens)


# ---------------------------------------------------------------------------
# tokenize: free text
# ---------------------------------------------------------------------------


class TestTokenizeFreeText:
    def test_words_plus_full_line_token(self) -> None:
        doc = tokenize("hello world\n\n  foo  bar \n")
        assert doc.is_tabular is False
        assert [(t.value, t.line_number, t.is_full_line) for t in doc.tokens] == [
            ("hello", 1, False),
            ("world", 1, False),
            ("hello world", 1, True),
            ("foo", 3, False),
            ("bar", 3, False),
            ("foo  bar", 3, True),
        ]

    def test_lines_record_raw_content(self) -> None:
        doc = tokenize("  alpha beta\n")
        assert len(doc.lines) == 1
        assert doc.lines[0].raw_content == "  alpha beta"

    def test_free_text_tokens_have_no_header(self) -> None:
        doc = tokenize("192.168.1.1 failed login\n")
        assert all(t.header is None and t.column is None for t in doc.tokens)

    @pytest.mark.parametrize("content", ["", "\n\n", "   \n\t\n"])
    def test_blank_content_has_no_tokens(self, content: str) -> None:
        doc = tokenize(content)
        assert doc.tokens == []
        assert doc.lines == []

    def test_token_is_frozen(self) -> None:
        token = Token(value="x", line_number=1)
        with pytest.raises(Exception):
            token.value = "y"  # type: ignore[misc]
