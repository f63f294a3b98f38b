"""testpattern-draft: Infer draft sensitive-data detection rules from sample files.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> from datetime import date
>>> import testpattern_draft as tpd
>>> result = tpd.generate_drafts("email,notes\\na@example.com,x\\nb@example.com,y\\n", date(2024, 5, 1))
>>> [r.slug for r in result.records]
['DRAFT-global-email-address']
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------
from testpattern_draft.tokenizer import Token, TokenizedDocument, tokenize

# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------
from testpattern_draft.detection.registry import BUILTIN_DETECTORS, DetectorSpec, get_detector
from testpattern_draft.detection.scorer import DetectionResult, run_detectors
from testpattern_draft.detection.structural import (
    StructuralGroup,
    analyze_structural,
    compute_signature,
    signature_to_regex,
)

# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------
from testpattern_draft.config import ConfigLoader, DraftConfig
from testpattern_draft.records.draft import DraftRecord
from testpattern_draft.records.render import record_to_yaml, records_to_yaml

# ---------------------------------------------------------------------------
# Pipeline and corpus
# ---------------------------------------------------------------------------
from testpattern_draft.pipeline import (
    GenerationResult,
    SampleReadError,
    generate_drafts,
    read_sample,
)
from testpattern_draft.corpus.compiler import CompiledCorpus, CorpusCompileError, CorpusCompiler

__all__ = [
    "__version__",
    # Tokenizer
    "Token",
    "TokenizedDocument",
    "tokenize",
    # Detection
    "BUILTIN_DETECTORS",
    "DetectionResult",
    "DetectorSpec",
    "StructuralGroup",
    "analyze_structural",
    "compute_signature",
    "get_detector",
    "run_detectors",
    "signature_to_regex",
    # Records
    "ConfigLoader",
    "DraftConfig",
    "DraftRecord",
    "record_to_yaml",
    "records_to_yaml",
    # Pipeline and corpus
    "CompiledCorpus",
    "CorpusCompileError",
    "CorpusCompiler",
    "GenerationResult",
    "SampleReadError",
    "generate_drafts",
    "read_sample",
]
