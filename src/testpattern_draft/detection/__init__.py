"""Detection package: built-in detector catalogue, scoring and structural generalization.

Built-in detectors recognise known sensitive-data shapes; the structural
generalizer infers regexes for consistently shaped values the catalogue
does not cover.
"""
from __future__ import annotations

from testpattern_draft.detection.registry import (
    BUILTIN_DETECTORS,
    DetectorSpec,
    NegativeCase,
    get_detector,
)
from testpattern_draft.detection.scorer import (
    DetectionResult,
    DetectorMatch,
    claimed_values,
    run_detectors,
)
from testpattern_draft.detection.structural import (
    StructuralGroup,
    analyze_structural,
    compute_signature,
    signature_to_regex,
)
from testpattern_draft.detection.validators import ValidatorKind, run_validator

__all__ = [
    "BUILTIN_DETECTORS",
    "DetectionResult",
    "DetectorMatch",
    "DetectorSpec",
    "NegativeCase",
    "StructuralGroup",
    "ValidatorKind",
    "analyze_structural",
    "claimed_values",
    "compute_signature",
    "get_detector",
    "run_detectors",
    "run_validator",
    "signature_to_regex",
]
