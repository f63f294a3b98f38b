"""Built-in detection scorer.

Runs every catalogue detector over a :class:`TokenizedDocument` and scores
the accepted matches:

    score = matches + 2 * distinct_lines  (+5 when a tabular header
                                           suggests sensitive content)

Detectors scoring below :data:`MIN_SCORE` are dropped entirely.

Example
-------
>>> from testpattern_draft.tokenizer import tokenize
>>> results = run_detectors(tokenize("mail bob@example.com today"))
>>> list(results)
['Email Address']
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from testpattern_draft.detection.registry import BUILTIN_DETECTORS, DetectorSpec
from testpattern_draft.detection.validators import run_validator
from testpattern_draft.tokenizer import TokenizedDocument

logger = logging.getLogger(__name__)

MIN_SCORE = 2
HEADER_BONUS = 5

SENSITIVE_HEADER_TERMS: tuple[str, ...] = (
    "email",
    "ssn",
    "phone",
    "card",
    "credit",
    "ip",
    "address",
    "name",
    "dob",
    "birth",
    "account",
    "token",
    "key",
    "secret",
    "password",
    "id",
)


@dataclass(frozen=True)
class DetectorMatch:
    """One accepted regex match inside a token."""

    value: str
    line_number: int
    header: str | None = None


@dataclass
class DetectionResult:
    """Accepted matches and score for one detector in one run.

    ``distinct_values`` is a dict used as an insertion-ordered set so that
    sampled values follow token order.
    """

    detector: DetectorSpec
    matches: list[DetectorMatch] = field(default_factory=list)
    distinct_values: dict[str, None] = field(default_factory=dict)
    distinct_lines: set[int] = field(default_factory=set)
    score: int = 0

    def sample_values(self, limit: int) -> list[str]:
        """Return up to *limit* distinct matched values in first-seen order."""
        return list(self.distinct_values)[:limit]


def has_sensitive_header(header_names: Iterable[str]) -> bool:
    """Return ``True`` if any header contains a sensitive vocabulary term."""
    for header in header_names:
        lowered = header.lower()
        if any(term in lowered for term in SENSITIVE_HEADER_TERMS):
            return True
    return False


def _scan(detector: DetectorSpec, document: TokenizedDocument) -> DetectionResult:
    result = DetectionResult(detector=detector)
    for token in document.tokens:
        for match in detector.regex.finditer(token.value):
            value = match.group(0)
            if not run_validator(detector.validator, value):
                continue
            result.matches.append(
                DetectorMatch(value=value, line_number=token.line_number, header=token.header)
            )
            result.distinct_values.setdefault(value, None)
            result.distinct_lines.add(token.line_number)
    return result


def run_detectors(
    document: TokenizedDocument,
    detectors: Sequence[DetectorSpec] = BUILTIN_DETECTORS,
) -> dict[str, DetectionResult]:
    """Score every detector against *document*.

    Parameters
    ----------
    document:
        Tokenizer output.
    detectors:
        Ordered catalogue to evaluate.  Defaults to the built-in catalogue.

    Returns
    -------
    dict[str, DetectionResult]
        Retained results keyed by detector name, in catalogue order.
    """
    header_bonus = (
        HEADER_BONUS
        if document.is_tabular and has_sensitive_header(document.header_names)
        else 0
    )
    results: dict[str, DetectionResult] = {}
    for detector in detectors:
        result = _scan(detector, document)
        if not result.matches:
            continue
        result.score = len(result.matches) + 2 * len(result.distinct_lines) + header_bonus
        if result.score < MIN_SCORE:
            logger.debug("Dropped %s: score %d below threshold", detector.name, result.score)
            continue
        logger.debug(
            "Retained %s: %d matches, %d unique, score=%d",
            detector.name,
            len(result.matches),
            len(result.distinct_values),
            result.score,
        )
        results[detector.name] = result
    return results


def claimed_values(detections: Mapping[str, DetectionResult]) -> set[str]:
    """Return every value matched by a retained detection."""
    claimed: set[str] = set()
    for result in detections.values():
        claimed.update(m.value for m in result.matches)
    return claimed
