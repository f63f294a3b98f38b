"""Corpus compilation: merges reviewed rule records into one JSON artifact."""
from __future__ import annotations

from testpattern_draft.corpus.compiler import CompiledCorpus, CorpusCompileError, CorpusCompiler

__all__ = [
    "CompiledCorpus",
    "CorpusCompileError",
    "CorpusCompiler",
]
