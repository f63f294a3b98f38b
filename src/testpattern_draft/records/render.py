"""YAML rendering for draft records.

Keys keep the canonical order of :class:`DraftRecord`; several records are
rendered as one multi-document stream.
"""
from __future__ import annotations

from collections.abc import Iterable

import yaml

from testpattern_draft.records.draft import DraftRecord

DOCUMENT_SEPARATOR = "---\n"


def record_to_yaml(record: DraftRecord) -> str:
    """Serialise a single record to a YAML document."""
    return yaml.dump(
        record.to_dict(),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        width=120,
    )


def records_to_yaml(records: Iterable[DraftRecord]) -> str:
    """Serialise *records* as YAML documents joined by ``---`` separators."""
    return DOCUMENT_SEPARATOR.join(record_to_yaml(r) for r in records)


def record_filename(record: DraftRecord) -> str:
    """Return the file name a record is written under."""
    return f"{record.slug}.yaml"
