"""End-to-end draft generation pipeline.

:func:`generate_drafts` is a pure function of the sample content, the date
stamped on records and the scaffold configuration.  Identical inputs always
produce identical, identically ordered records: built-in detections first
in catalogue order, then structural groups in order of first occurrence.

Example
-------
>>> from datetime import date
>>> result = generate_drafts("email,notes\\na@example.com,x\\nb@example.com,y\\n", date(2024, 5, 1))
>>> [r.slug for r in result.records]
['DRAFT-global-email-address']
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from testpattern_draft.config import DraftConfig
from testpattern_draft.detection.scorer import DetectionResult, claimed_values, run_detectors
from testpattern_draft.detection.structural import StructuralGroup, analyze_structural
from testpattern_draft.records.draft import (
    DraftRecord,
    build_builtin_record,
    build_structural_record,
)
from testpattern_draft.tokenizer import TokenizedDocument, tokenize

logger = logging.getLogger(__name__)


class SampleReadError(Exception):
    """Raised when a sample file cannot be read.

    Attributes
    ----------
    path:
        The sample path that failed.
    reason:
        Message of the underlying error.
    """

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Error reading file: {path}: {reason}")


@dataclass
class GenerationResult:
    """Everything one pipeline run produced."""

    document: TokenizedDocument
    detections: dict[str, DetectionResult] = field(default_factory=dict)
    structural_groups: list[StructuralGroup] = field(default_factory=list)
    records: list[DraftRecord] = field(default_factory=list)

    @property
    def has_records(self) -> bool:
        return bool(self.records)


def read_sample(path: Path) -> str:
    """Read a sample file fully as UTF-8 text.

    Raises
    ------
    SampleReadError
        When the file cannot be opened or decoded.
    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SampleReadError(path, str(exc)) from exc


def generate_drafts(
    content: str,
    today: date,
    config: DraftConfig | None = None,
) -> GenerationResult:
    """Tokenize *content*, detect, generalize and build draft records.

    Parameters
    ----------
    content:
        Full sample text.
    today:
        Date stamped on every record.
    config:
        Scaffold values; defaults apply when omitted.

    Returns
    -------
    GenerationResult
        Intermediate stages plus the ordered records.  ``records`` is empty
        when nothing cleared its threshold.
    """
    config = config or DraftConfig()
    document = tokenize(content)
    detections = run_detectors(document)
    groups = analyze_structural(document, claimed_values(detections))

    header_names = document.header_names if document.is_tabular else None
    records = [
        build_builtin_record(result, header_names, today, config)
        for result in detections.values()
    ]
    records.extend(build_structural_record(group, today, config) for group in groups)

    logger.info(
        "Generated %d draft records (%d built-in, %d structural)",
        len(records),
        len(detections),
        len(groups),
    )
    return GenerationResult(
        document=document,
        detections=detections,
        structural_groups=groups,
        records=records,
    )
