"""Draft record models, builders and YAML rendering."""
from __future__ import annotations

from testpattern_draft.records.draft import (
    DraftRecord,
    build_builtin_record,
    build_structural_record,
)
from testpattern_draft.records.render import record_to_yaml, records_to_yaml

__all__ = [
    "DraftRecord",
    "build_builtin_record",
    "build_structural_record",
    "record_to_yaml",
    "records_to_yaml",
]
