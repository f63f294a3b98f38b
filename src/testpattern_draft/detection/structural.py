"""Structural generalizer.

Discovers fixed-format identifiers that no built-in detector knows about.
Every eligible token is reduced to a shape signature in which each run of
letters becomes ``<n>A`` and each run of digits becomes ``<n>d``, with all
other characters kept verbatim::

    AB12-3456  ->  2A2d-4d

Tokens sharing a signature form a group.  Groups backed by at least
:data:`MIN_DISTINCT_VALUES` distinct values are turned into a regex and
scored like built-in detections.

Example
-------
>>> compute_signature("AB12-3456")
'2A2d-4d'
>>> signature_to_regex("2A2d-4d")
'\\\\b[A-Za-z]{2}\\\\d{2}\\\\-\\\\d{4}\\\\b'
"""
from __future__ import annotations

import logging
import re
from collections.abc import Set
from dataclasses import dataclass, field

from testpattern_draft.tokenizer import Token, TokenizedDocument

logger = logging.getLogger(__name__)

MIN_DISTINCT_VALUES = 3
MIN_SCORE = 2
HEADER_BONUS = 5
MIN_SIGNATURE_LENGTH = 2
MAX_SIGNATURE_LENGTH = 40
DEFAULT_GROUP_NAME = "Structured Pattern"

_DIGIT = re.compile(r"\d", re.ASCII)
_DIGITS_AND_DOTS = re.compile(r"^[\d.]+$", re.ASCII)
_DIGITS_ONLY = re.compile(r"^\d+$", re.ASCII)
_SIGNATURE_RUN = re.compile(r"(\d+)([Ad])", re.ASCII)
_REGEX_METACHARACTERS = frozenset(".-+*?^${}()|[]\\")


@dataclass
class StructuralGroup:
    """Tokens sharing one shape signature, with the synthesized regex."""

    signature: str
    regex: str
    member_tokens: list[Token]
    distinct_values: dict[str, None] = field(default_factory=dict)
    score: int = 0
    header_context: str | None = None
    derived_name: str = DEFAULT_GROUP_NAME

    def sample_values(self, limit: int) -> list[str]:
        """Return up to *limit* distinct member values in first-seen order."""
        return list(self.distinct_values)[:limit]


def _is_ascii_letter(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def _is_ascii_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def compute_signature(value: str) -> str | None:
    """Return the shape signature of *value*.

    Returns ``None`` when the encoded signature is shorter than 2 or longer
    than 40 characters.
    """
    parts: list[str] = []
    i = 0
    while i < len(value):
        ch = value[i]
        if _is_ascii_letter(ch) or _is_ascii_digit(ch):
            is_letter = _is_ascii_letter(ch)
            same_class = _is_ascii_letter if is_letter else _is_ascii_digit
            start = i
            while i < len(value) and same_class(value[i]):
                i += 1
            parts.append(f"{i - start}{'A' if is_letter else 'd'}")
        else:
            parts.append(ch)
            i += 1
    signature = "".join(parts)
    if len(signature) < MIN_SIGNATURE_LENGTH or len(signature) > MAX_SIGNATURE_LENGTH:
        return None
    return signature


def _literal_to_regex(ch: str) -> str:
    if ch in _REGEX_METACHARACTERS:
        return "\\" + ch
    if ch == " ":
        return r"\s"
    return ch


def signature_to_regex(signature: str) -> str:
    """Synthesize a word-bounded regex matching every value of *signature*.

    Letter runs become ``[A-Za-z]{n}``, digit runs ``\\d{n}`` and literal
    characters are escaped where needed, with spaces widened to ``\\s``.
    """
    pieces = [r"\b"]
    i = 0
    while i < len(signature):
        run = _SIGNATURE_RUN.match(signature, i)
        if run:
            count, kind = run.groups()
            pieces.append(f"[A-Za-z]{{{count}}}" if kind == "A" else rf"\d{{{count}}}")
            i = run.end()
        else:
            pieces.append(_literal_to_regex(signature[i]))
            i += 1
    pieces.append(r"\b")
    return "".join(pieces)


def is_structural_candidate(token: Token, claimed: Set[str]) -> bool:
    """Return ``True`` when *token* may feed a structural group."""
    value = token.value
    if token.is_full_line or value in claimed:
        return False
    if not _DIGIT.search(value) or len(value) < 4:
        return False
    if _DIGITS_AND_DOTS.match(value) and "." not in value:
        return False
    if _DIGITS_ONLY.match(value) and len(value) < 6:
        return False
    return True


def _resolve_header(document: TokenizedDocument, tokens: list[Token]) -> str | None:
    if not document.is_tabular:
        return None
    headers = {t.header for t in tokens if t.header}
    if len(headers) == 1:
        return next(iter(headers))
    return None


def analyze_structural(
    document: TokenizedDocument,
    claimed: Set[str],
) -> list[StructuralGroup]:
    """Group unclaimed structured tokens by signature.

    Parameters
    ----------
    document:
        Tokenizer output.
    claimed:
        Values already matched by built-in detectors; never regrouped here.

    Returns
    -------
    list[StructuralGroup]
        Retained groups in order of each signature's first occurrence.
    """
    by_signature: dict[str, list[Token]] = {}
    for token in document.tokens:
        if not is_structural_candidate(token, claimed):
            continue
        signature = compute_signature(token.value)
        if signature is None:
            continue
        by_signature.setdefault(signature, []).append(token)

    groups: list[StructuralGroup] = []
    for signature, tokens in by_signature.items():
        distinct = dict.fromkeys(t.value for t in tokens)
        if len(distinct) < MIN_DISTINCT_VALUES:
            logger.debug(
                "Skipped signature %s: only %d distinct values", signature, len(distinct)
            )
            continue

        header = _resolve_header(document, tokens)
        score = len(tokens) + 2 * len({t.line_number for t in tokens})
        if header:
            score += HEADER_BONUS
        if score < MIN_SCORE:
            continue

        group = StructuralGroup(
            signature=signature,
            regex=signature_to_regex(signature),
            member_tokens=tokens,
            distinct_values=distinct,
            score=score,
            header_context=header,
            derived_name=f"Structured {header}" if header else DEFAULT_GROUP_NAME,
        )
        logger.debug(
            "Accepted signature %s: %d unique values, score=%d",
            signature,
            len(distinct),
            score,
        )
        groups.append(group)
    return groups
