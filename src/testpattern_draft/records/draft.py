"""Draft record models and builders.

A :class:`DraftRecord` is the fixed-shape rule document emitted for every
retained built-in detection and structural group.  Field declaration order
is the canonical output order used when records are rendered.

Records are drafts: names and slugs carry a ``DRAFT`` prefix and the
narrative fields ask a reviewer to verify and refine them.

Example
-------
>>> from datetime import date
>>> from testpattern_draft.detection.scorer import run_detectors
>>> from testpattern_draft.tokenizer import tokenize
>>> results = run_detectors(tokenize("email,notes\\na@example.com,x\\nb@example.com,y\\n"))
>>> record = build_builtin_record(results["Email Address"], ["email", "notes"], date(2024, 5, 1))
>>> record.slug
'DRAFT-global-email-address'
"""
from __future__ import annotations

import math
import re
from collections.abc import Sequence
from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from testpattern_draft.config import DraftConfig
from testpattern_draft.detection.scorer import DetectionResult
from testpattern_draft.detection.structural import StructuralGroup

DRAFT_SLUG_PREFIX = "DRAFT-"
DRAFT_NAME_PREFIX = "DRAFT: "
SAMPLE_DESCRIPTION = "Detected in sample data"
STRUCTURAL_FALLBACK_KEYWORDS: tuple[str, ...] = ("identifier", "ID", "number", "code")

_NON_ALNUM_LOWER_RUN = re.compile(r"[^a-z0-9]+")
_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


# ---------------------------------------------------------------------------
# Nested models
# ---------------------------------------------------------------------------


class TestCase(BaseModel):
    """A value with a short explanation of why it should (not) match."""

    __test__ = False
    model_config = ConfigDict(frozen=True)

    value: str
    description: str


class TestCases(BaseModel):
    """Synthesized positive and negative test cases."""

    __test__ = False
    model_config = ConfigDict(frozen=True)

    should_match: list[TestCase] = Field(default_factory=list)
    should_not_match: list[TestCase] = Field(default_factory=list)


class CorroborativeEvidence(BaseModel):
    """Keywords expected near a true positive, within *proximity* characters."""

    model_config = ConfigDict(frozen=True)

    keywords: list[str] = Field(default_factory=list)
    proximity: int = 300


class FalsePositive(BaseModel):
    """Known false-positive scenario and how to mitigate it."""

    model_config = ConfigDict(frozen=True)

    description: str
    mitigation: str


_PLACEHOLDER_FALSE_POSITIVE = FalsePositive(
    description="DRAFT: Review for false positive scenarios specific to your data context.",
    mitigation=(
        "DRAFT: Add specific mitigation strategies after reviewing sample data "
        "and deployment context."
    ),
)


# ---------------------------------------------------------------------------
# Draft record
# ---------------------------------------------------------------------------


class DraftRecord(BaseModel):
    """An unreviewed, machine-generated detection rule.

    Attributes
    ----------
    schema_id:
        Rule schema identifier, serialised under the ``schema`` key.
    pattern:
        Regex text a reviewer should validate.
    created / updated:
        Generation date, identical on both fields.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schema_id: str = Field(alias="schema")
    name: str
    slug: str
    version: str
    type: str = "regex"
    engine: str = "universal"
    description: str
    operation: str
    pattern: str
    confidence: str
    confidence_justification: str
    jurisdictions: list[str]
    regulations: list[str]
    data_categories: list[str]
    corroborative_evidence: CorroborativeEvidence
    test_cases: TestCases
    false_positives: list[FalsePositive]
    exports: list[str]
    scope: str
    created: date
    updated: date
    author: str
    license: str

    def to_dict(self) -> dict[str, object]:
        """Serialise to a plain dict in canonical field order."""
        return self.model_dump(mode="json", by_alias=True)


def _scaffold(config: DraftConfig, today: date) -> dict[str, object]:
    return {
        "schema": config.schema_id,
        "version": config.version,
        "false_positives": [_PLACEHOLDER_FALSE_POSITIVE],
        "exports": list(config.exports),
        "scope": config.scope,
        "created": today,
        "updated": today,
        "author": config.author,
        "license": config.license,
    }


def _positive_cases(values: Sequence[str]) -> list[TestCase]:
    return [TestCase(value=v, description=SAMPLE_DESCRIPTION) for v in values]


def merge_keywords(
    context_keywords: Sequence[str],
    header_names: Sequence[str] | None,
    limit: int,
) -> list[str]:
    """Append lower-cased headers to *context_keywords*, deduplicated and capped."""
    keywords = list(context_keywords)
    for header in header_names or ():
        lowered = header.lower().strip()
        if lowered and lowered not in keywords:
            keywords.append(lowered)
    return keywords[:limit]


# ---------------------------------------------------------------------------
# Built-in detections
# ---------------------------------------------------------------------------


def build_builtin_record(
    result: DetectionResult,
    header_names: Sequence[str] | None,
    today: date,
    config: DraftConfig | None = None,
) -> DraftRecord:
    """Build the draft record for a retained built-in detection.

    Parameters
    ----------
    result:
        Scored detection.
    header_names:
        Tabular headers to fold into the keyword list, or ``None`` for
        free-text samples.
    today:
        Date stamped on ``created`` and ``updated``.
    config:
        Scaffold values; defaults apply when omitted.
    """
    config = config or DraftConfig()
    detector = result.detector
    negatives = [
        TestCase(value=n.value, description=n.description)
        for n in detector.generate_negatives()
    ]
    return DraftRecord(
        **_scaffold(config, today),
        name=f"{DRAFT_NAME_PREFIX}{detector.name}",
        slug=f"{DRAFT_SLUG_PREFIX}{detector.slug}",
        description=(
            f"DRAFT: Auto-detected {detector.name} pattern from sample data. "
            "Review and refine before committing."
        ),
        operation="DRAFT: Review detection approach and corroborative evidence configuration.",
        pattern=detector.pattern_template,
        confidence=detector.confidence,
        confidence_justification=(
            f"DRAFT: Auto-assigned {detector.confidence} confidence based on pattern "
            "structure. Review and provide specific justification."
        ),
        jurisdictions=list(detector.jurisdictions),
        regulations=list(detector.regulations),
        data_categories=list(detector.data_categories),
        corroborative_evidence=CorroborativeEvidence(
            keywords=merge_keywords(detector.context_keywords, header_names, config.max_keywords),
            proximity=config.proximity,
        ),
        test_cases=TestCases(
            should_match=_positive_cases(result.sample_values(config.max_samples)),
            should_not_match=negatives,
        ),
    )


# ---------------------------------------------------------------------------
# Structural groups
# ---------------------------------------------------------------------------


def structural_slug_name(group: StructuralGroup) -> str:
    """Return the slug stem for *group*, from its header or signature."""
    if group.header_context:
        return _NON_ALNUM_LOWER_RUN.sub("-", group.header_context.lower()).strip("-")
    return "structural-" + _NON_ALNUM.sub("", group.signature).lower()


def structural_negatives(sample_value: str | None) -> list[TestCase]:
    """Derive should-not-match cases by truncating and extending a sample."""
    if not sample_value:
        return [
            TestCase(value="XXXXX", description="Random string not matching structural pattern"),
            TestCase(value="12345", description="Plain number without expected structure"),
        ]
    truncated = sample_value[: math.ceil(len(sample_value) / 2)]
    return [
        TestCase(value=truncated, description="Truncated value, too short to match"),
        TestCase(value=sample_value + "99", description="Extended value, extra characters appended"),
    ]


def build_structural_record(
    group: StructuralGroup,
    today: date,
    config: DraftConfig | None = None,
) -> DraftRecord:
    """Build the draft record for a retained structural group."""
    config = config or DraftConfig()
    samples = group.sample_values(config.max_samples)
    keywords = (
        [group.header_context.lower()]
        if group.header_context
        else list(STRUCTURAL_FALLBACK_KEYWORDS)
    )
    return DraftRecord(
        **_scaffold(config, today),
        name=f"{DRAFT_NAME_PREFIX}{group.derived_name} ({group.signature})",
        slug=f"{DRAFT_SLUG_PREFIX}global-{structural_slug_name(group)}",
        description=(
            f'DRAFT: Auto-detected structured pattern with signature "{group.signature}" '
            "from sample data. Review and refine before committing."
        ),
        operation=(
            f"DRAFT: Structural pattern detected from {len(group.distinct_values)} unique "
            "values. Review the regex and adjust for edge cases."
        ),
        pattern=group.regex,
        confidence="medium",
        confidence_justification=(
            "DRAFT: Medium confidence assigned to auto-detected structural pattern. "
            "Review the format specificity and add corroborative evidence if the "
            "structure is generic."
        ),
        jurisdictions=["global"],
        regulations=["general-data-protection"],
        data_categories=["pii"],
        corroborative_evidence=CorroborativeEvidence(
            keywords=keywords,
            proximity=config.proximity,
        ),
        test_cases=TestCases(
            should_match=_positive_cases(samples),
            should_not_match=structural_negatives(samples[0] if samples else None),
        ),
    )
