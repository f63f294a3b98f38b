"""Sample tokenizer.

Turns raw sample content into a :class:`TokenizedDocument`.  Content whose
first line looks like a row of column labels is treated as tabular
(comma-delimited) data; everything else is treated as free text.

Tabular documents produce one token per non-empty field, tagged with its
column index and header.  Free-text documents produce one token per
whitespace-delimited word plus one extra full-line token per non-blank line,
so detectors whose patterns span several words still see the whole line.

Example
-------
>>> doc = tokenize("Name,Email\\nAda,ada@example.com\\n")
>>> doc.is_tabular
True
>>> [t.value for t in doc.tokens]
['Ada', 'ada@example.com']
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

_LINE_SPLIT = re.compile(r"\r?\n")
_WORD_SPLIT = re.compile(r"\s+")
_HEADER_LABEL = re.compile(r"^[A-Za-z_][A-Za-z0-9_\s./-]*$")
_MAX_HEADER_LENGTH = 60


@dataclass(frozen=True)
class Token:
    """A single unit of sample content.

    Attributes
    ----------
    value:
        The token text.
    line_number:
        1-based line the token came from.
    column:
        0-based field index for tabular tokens, ``None`` otherwise.
    header:
        Resolved column header for tabular tokens, ``None`` otherwise.
    is_full_line:
        ``True`` for the extra whole-line token emitted in free-text mode.
    """

    value: str
    line_number: int
    column: int | None = None
    header: str | None = None
    is_full_line: bool = False


@dataclass(frozen=True)
class SourceLine:
    """A non-blank line of the sample, kept for diagnostics."""

    line_number: int
    raw_content: str


@dataclass
class TokenizedDocument:
    """Tokenizer output consumed by the detection stages."""

    is_tabular: bool
    header_names: list[str] = field(default_factory=list)
    tokens: list[Token] = field(default_factory=list)
    lines: list[SourceLine] = field(default_factory=list)


def parse_delimited_row(line: str) -> list[str]:
    """Split one comma-delimited row into fields.

    Double quotes toggle quoting and may start or stop mid-field.  Inside a
    quoted section a doubled quote is an escaped literal quote.  Fields are
    returned untrimmed.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    while i < len(line):
        ch = line[i]
        if in_quotes:
            if ch == '"' and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            elif ch == '"':
                in_quotes = False
            else:
                current.append(ch)
        elif ch == '"':
            in_quotes = True
        elif ch == ",":
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1
    fields.append("".join(current))
    return fields


def _is_header_label(raw: str) -> bool:
    label = raw.strip()
    return bool(_HEADER_LABEL.match(label)) and len(label) < _MAX_HEADER_LENGTH


def looks_tabular(lines: list[str]) -> bool:
    """Return ``True`` when *lines* start with a header row of labels."""
    if len(lines) < 2:
        return False
    first = lines[0]
    if "," not in first:
        return False
    header_fields = parse_delimited_row(first)
    if len(header_fields) < 2:
        return False
    return all(_is_header_label(h) for h in header_fields)


def _tokenize_tabular(lines: list[str]) -> TokenizedDocument:
    headers = parse_delimited_row(lines[0])
    doc = TokenizedDocument(is_tabular=True, header_names=headers)
    for index, line in enumerate(lines[1:], start=1):
        if not line.strip():
            continue
        line_number = index + 1
        for column, raw_field in enumerate(parse_delimited_row(line)):
            value = raw_field.strip()
            if not value:
                continue
            header = headers[column] if column < len(headers) and headers[column] else f"column_{column}"
            doc.tokens.append(
                Token(value=value, line_number=line_number, column=column, header=header)
            )
        doc.lines.append(SourceLine(line_number=line_number, raw_content=line))
    return doc


def _tokenize_free_text(lines: list[str]) -> TokenizedDocument:
    doc = TokenizedDocument(is_tabular=False)
    for index, line in enumerate(lines):
        stripped = line.strip()
        if not stripped:
            continue
        line_number = index + 1
        doc.lines.append(SourceLine(line_number=line_number, raw_content=line))
        for word in _WORD_SPLIT.split(line):
            if word:
                doc.tokens.append(Token(value=word, line_number=line_number))
        doc.tokens.append(Token(value=stripped, line_number=line_number, is_full_line=True))
    return doc


def tokenize(content: str) -> TokenizedDocument:
    """Tokenize raw sample content.

    Parameters
    ----------
    content:
        Full text of the sample file.

    Returns
    -------
    TokenizedDocument
        Tokens in line order, then column or word order.
    """
    lines = _LINE_SPLIT.split(content)
    if looks_tabular(lines):
        doc = _tokenize_tabular(lines)
    else:
        doc = _tokenize_free_text(lines)
    logger.debug(
        "Tokenized %s sample: %d lines, %d tokens",
        "tabular" if doc.is_tabular else "free-text",
        len(doc.lines),
        len(doc.tokens),
    )
    return doc
