"""Rule corpus compiler.

Merges a directory tree of YAML rule records into one distributable JSON
corpus.  The expected layout is::

    data/
      keywords/      keyword dictionaries (slug -> keywords)
      patterns/      rule records, including reviewed drafts
      collections/   named groupings of patterns

Records missing required fields are skipped with a warning.  Pattern
records may reference keyword dictionaries by slug under
``corroborative_evidence.keyword_lists``; those references are resolved
into the inline ``keywords`` list.

Example
-------
>>> compiler = CorpusCompiler(Path("data"))
>>> corpus = compiler.compile()
>>> corpus.version
'1.0.0'
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

CORPUS_VERSION = "1.0.0"

REQUIRED_PATTERN_FIELDS: tuple[str, ...] = (
    "schema",
    "name",
    "slug",
    "type",
    "confidence",
    "jurisdictions",
    "regulations",
    "data_categories",
    "test_cases",
)
REQUIRED_COLLECTION_FIELDS: tuple[str, ...] = ("schema", "name", "slug", "description", "patterns")
REQUIRED_KEYWORD_FIELDS: tuple[str, ...] = ("schema", "name", "slug", "type", "keywords")

KEYWORD_RECORD_TYPES: frozenset[str] = frozenset({"keyword_dictionary", "keyword_list"})


class CorpusCompileError(Exception):
    """Raised when the data directory or one of its files is unusable."""


@dataclass
class CompiledCorpus:
    """Merged corpus ready to be written as JSON."""

    generated: str
    version: str = CORPUS_VERSION
    patterns: list[dict[str, object]] = field(default_factory=list)
    collections: list[dict[str, object]] = field(default_factory=list)
    keywords: list[dict[str, object]] = field(default_factory=list)
    resolved_count: int = 0
    skipped: list[Path] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        """Return the JSON document body."""
        return {
            "version": self.version,
            "generated": self.generated,
            "patterns": self.patterns,
            "collections": self.collections,
            "keywords": self.keywords,
        }


def missing_fields(record: dict[str, object], required: tuple[str, ...]) -> list[str]:
    """Return the names in *required* absent from *record*."""
    return [name for name in required if name not in record]


def required_fields_for(record: dict[str, object]) -> tuple[str, ...]:
    """Return the required field set for a record in ``patterns/``."""
    if record.get("type") in KEYWORD_RECORD_TYPES:
        return REQUIRED_KEYWORD_FIELDS
    return REQUIRED_PATTERN_FIELDS


def resolve_keyword_lists(
    record: dict[str, object],
    keyword_map: dict[str, list[str]],
    source: str = "<record>",
) -> bool:
    """Inline the keyword lists *record* references.

    The resulting ``keywords`` list is the order-preserving union of the
    inline keywords followed by the resolved words.

    Returns
    -------
    bool
        ``True`` when the record carries a ``keyword_lists`` list, even an
        empty one.
    """
    evidence = record.get("corroborative_evidence")
    if not isinstance(evidence, dict) or not isinstance(evidence.get("keyword_lists"), list):
        return False

    resolved: list[str] = []
    for ref in evidence["keyword_lists"]:
        words = keyword_map.get(ref)
        if words is None:
            logger.warning("%s references unknown keyword list: %s", source, ref)
            continue
        if isinstance(words, list):
            resolved.extend(words)

    inline = evidence.get("keywords") or []
    evidence["keywords"] = list(dict.fromkeys([*inline, *resolved]))
    return True


class CorpusCompiler:
    """Compiles a data directory of YAML records into a single corpus.

    Parameters
    ----------
    data_dir:
        Root directory holding ``keywords/``, ``patterns/`` and
        ``collections/`` subdirectories.
    """

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = Path(data_dir)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compile(self, generated_at: datetime | None = None) -> CompiledCorpus:
        """Load, validate and merge every record under the data directory.

        Raises
        ------
        CorpusCompileError
            When the data directory does not exist or a file is not a YAML
            mapping.
        """
        if not self._data_dir.is_dir():
            raise CorpusCompileError(f"Data directory not found: {self._data_dir}")

        stamp = generated_at or datetime.now(timezone.utc)
        corpus = CompiledCorpus(generated=stamp.isoformat())

        keyword_map: dict[str, list[str]] = {}
        for path, record in self._load_section("keywords"):
            if self._check(path, record, REQUIRED_KEYWORD_FIELDS, corpus):
                corpus.keywords.append(record)
                keyword_map[str(record["slug"])] = record["keywords"]  # type: ignore[assignment]

        for path, record in self._load_section("patterns"):
            if not self._check(path, record, required_fields_for(record), corpus):
                continue
            if resolve_keyword_lists(record, keyword_map, self._relative(path)):
                corpus.resolved_count += 1
            corpus.patterns.append(record)

        for path, record in self._load_section("collections"):
            if self._check(path, record, REQUIRED_COLLECTION_FIELDS, corpus):
                corpus.collections.append(record)

        logger.info(
            "Compiled %d patterns, %d collections, %d keyword dictionaries",
            len(corpus.patterns),
            len(corpus.collections),
            len(corpus.keywords),
        )
        return corpus

    def compile_to_file(
        self,
        output_path: Path,
        generated_at: datetime | None = None,
    ) -> CompiledCorpus:
        """Compile and write the corpus to *output_path* as indented JSON."""
        corpus = self.compile(generated_at)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding="utf-8") as fh:
            json.dump(corpus.to_dict(), fh, indent=2, default=str)
        return corpus

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _relative(self, path: Path) -> str:
        return path.relative_to(self._data_dir).as_posix()

    def _load_section(self, section: str) -> list[tuple[Path, dict[str, object]]]:
        root = self._data_dir / section
        if not root.is_dir():
            return []
        files = sorted(
            p for p in root.rglob("*") if p.is_file() and p.suffix in (".yaml", ".yml")
        )
        loaded: list[tuple[Path, dict[str, object]]] = []
        for path in files:
            try:
                with path.open("r", encoding="utf-8") as fh:
                    data = yaml.safe_load(fh)
            except yaml.YAMLError as exc:
                raise CorpusCompileError(f"Invalid YAML in {self._relative(path)}: {exc}") from exc
            if not isinstance(data, dict):
                raise CorpusCompileError(f"Expected a mapping in {self._relative(path)}")
            loaded.append((path, data))
        return loaded

    def _check(
        self,
        path: Path,
        record: dict[str, object],
        required: tuple[str, ...],
        corpus: CompiledCorpus,
    ) -> bool:
        missing = missing_fields(record, required)
        if missing:
            logger.warning("%s missing fields: %s", self._relative(path), ", ".join(missing))
            corpus.skipped.append(path)
            return False
        return True
