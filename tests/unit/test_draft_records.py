"""Unit tests for records/draft.py and records/render.py."""
from __future__ import annotations

from datetime import date

import pytest
import yaml
from pydantic import ValidationError

from testpattern_draft.config import DraftConfig
from testpattern_draft.detection.registry import CREDIT_CARD, EMAIL
from testpattern_draft.detection.scorer import DetectionResult, run_detectors
from testpattern_draft.detection.structural import StructuralGroup, analyze_structural
from testpattern_draft.records.draft import (
    DraftRecord,
    build_builtin_record,
    build_structural_record,
    merge_keywords,
    structural_negatives,
    structural_slug_name,
)
from testpattern_draft.records.render import (
    record_filename,
    record_to_yaml,
    records_to_yaml,
)
from testpattern_draft.tokenizer import tokenize

TODAY = date(2024, 5, 1)

FIELD_ORDER = [
    "schema",
    "name",
    "slug",
    "version",
    "type",
    "engine",
    "description",
    "operation",
    "pattern",
    "confidence",
    "confidence_justification",
    "jurisdictions",
    "regulations",
    "data_categories",
    "corroborative_evidence",
    "test_cases",
    "false_positives",
    "exports",
    "scope",
    "created",
    "updated",
    "author",
    "license",
]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def email_result() -> DetectionResult:
    content = "email,notes\nalice@example.com,first\nbob@example.org,second\nnot-an-email,third\n"
    return run_detectors(tokenize(content))["Email Address"]


@pytest.fixture()
def code_group() -> StructuralGroup:
    doc = tokenize("Order Code,notes\nAB12-3456,a\nCD34-5678,b\nEF56-7890,c\n")
    return analyze_structural(doc, set())[0]


@pytest.fixture()
def free_text_group() -> StructuralGroup:
    doc = tokenize("ref AB12-3456\nref CD34-5678\nref EF56-7890\n")
    return analyze_structural(doc, set())[0]


# ---------------------------------------------------------------------------
# merge_keywords
# ---------------------------------------------------------------------------


class TestMergeKeywords:
    def test_headers_lowercased_and_deduplicated(self) -> None:
        assert merge_keywords(["email", "mail"], ["Email", "Notes", "notes"], 10) == [
            "email",
            "mail",
            "notes",
        ]

    def test_capped(self) -> None:
        merged = merge_keywords(CREDIT_CARD.context_keywords, list("ABCDEF"), 10)
        assert len(merged) == 10
        assert merged[:6] == list(CREDIT_CARD.context_keywords)

    def test_no_headers(self) -> None:
        assert merge_keywords(["a"], None, 10) == ["a"]

    def test_blank_headers_ignored(self) -> None:
        assert merge_keywords(["a"], ["  "], 10) == ["a"]


# ---------------------------------------------------------------------------
# Built-in records
# ---------------------------------------------------------------------------


class TestBuiltinRecord:
    def test_identity_fields(self, email_result: DetectionResult) -> None:
        record = build_builtin_record(email_result, ["email", "notes"], TODAY)
        assert record.name == "DRAFT: Email Address"
        assert record.slug == "DRAFT-global-email-address"
        assert record.schema_id == "testpattern/v1"
        assert record.type == "regex"
        assert record.engine == "universal"
        assert record.pattern == EMAIL.pattern_template
        assert record.confidence == "high"

    def test_positive_cases_from_sample(self, email_result: DetectionResult) -> None:
        record = build_builtin_record(email_result, ["email", "notes"], TODAY)
        assert [(c.value, c.description) for c in record.test_cases.should_match] == [
            ("alice@example.com", "Detected in sample data"),
            ("bob@example.org", "Detected in sample data"),
        ]

    def test_negative_cases_from_detector(self, email_result: DetectionResult) -> None:
        record = build_builtin_record(email_result, None, TODAY)
        assert [c.value for c in record.test_cases.should_not_match] == ["not-an-email", "user@"]

    def test_keywords_merge_headers(self, email_result: DetectionResult) -> None:
        record = build_builtin_record(email_result, ["email", "notes"], TODAY)
        assert record.corroborative_evidence.keywords == [
            "email",
            "e-mail",
            "mail",
            "contact",
            "address",
            "notes",
        ]
        assert record.corroborative_evidence.proximity == 300

    def test_samples_capped_at_five(self) -> None:
        rows = "\n".join(f"user{i}@example.com,x" for i in range(7))
        result = run_detectors(tokenize(f"email,notes\n{rows}\n"))["Email Address"]
        record = build_builtin_record(result, None, TODAY)
        assert len(record.test_cases.should_match) == 5
        assert record.test_cases.should_match[0].value == "user0@example.com"

    def test_scaffold_fields(self, email_result: DetectionResult) -> None:
        record = build_builtin_record(email_result, None, TODAY)
        assert record.created == TODAY
        assert record.updated == TODAY
        assert record.exports == ["purview_xml", "yaml", "regex_copy"]
        assert record.scope == "wide"
        assert record.author == "testpattern-community"
        assert record.license == "MIT"
        assert record.version == "1.0.0"
        assert record.false_positives[0].description.startswith("DRAFT:")

    def test_narrative_fields_marked_draft(self, email_result: DetectionResult) -> None:
        record = build_builtin_record(email_result, None, TODAY)
        for text in (record.description, record.operation, record.confidence_justification):
            assert text.startswith("DRAFT:")

    def test_config_overrides_scaffold(self, email_result: DetectionResult) -> None:
        config = DraftConfig(author="security-team", proximity=120, max_samples=1)
        record = build_builtin_record(email_result, None, TODAY, config)
        assert record.author == "security-team"
        assert record.corroborative_evidence.proximity == 120
        assert len(record.test_cases.should_match) == 1

    def test_record_is_frozen(self, email_result: DetectionResult) -> None:
        record = build_builtin_record(email_result, None, TODAY)
        with pytest.raises(ValidationError):
            record.slug = "other"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Structural records
# ---------------------------------------------------------------------------


class TestStructuralRecord:
    def test_header_slug_and_name(self, code_group: StructuralGroup) -> None:
        record = build_structural_record(code_group, TODAY)
        assert record.slug == "DRAFT-global-order-code"
        assert record.name == "DRAFT: Structured Order Code (2A2d-4d)"
        assert record.corroborative_evidence.keywords == ["order code"]

    def test_signature_slug_without_header(self, free_text_group: StructuralGroup) -> None:
        assert structural_slug_name(free_text_group) == "structural-2a2d4d"
        record = build_structural_record(free_text_group, TODAY)
        assert record.slug == "DRAFT-global-structural-2a2d4d"
        assert record.name == "DRAFT: Structured Pattern (2A2d-4d)"
        assert record.corroborative_evidence.keywords == ["identifier", "ID", "number", "code"]

    def test_pattern_is_synthesized_regex(self, code_group: StructuralGroup) -> None:
        record = build_structural_record(code_group, TODAY)
        assert record.pattern == r"\b[A-Za-z]{2}\d{2}\-\d{4}\b"
        assert record.confidence == "medium"
        assert record.jurisdictions == ["global"]
        assert record.data_categories == ["pii"]

    def test_test_cases(self, code_group: StructuralGroup) -> None:
        record = build_structural_record(code_group, TODAY)
        assert [c.value for c in record.test_cases.should_match] == [
            "AB12-3456",
            "CD34-5678",
            "EF56-7890",
        ]
        assert [c.value for c in record.test_cases.should_not_match] == ["AB12-", "AB12-345699"]

    def test_operation_mentions_unique_count(self, code_group: StructuralGroup) -> None:
        record = build_structural_record(code_group, TODAY)
        assert "3 unique values" in record.operation

    def test_header_slug_sanitised(self) -> None:
        group = StructuralGroup(
            signature="2d",
            regex=r"\b\d{2}\b",
            member_tokens=[],
            header_context="  Customer #Ref (v2) ",
        )
        assert structural_slug_name(group) == "customer-ref-v2"


class TestStructuralNegatives:
    def test_truncated_rounds_up(self) -> None:
        negatives = structural_negatives("ABC12")
        assert negatives[0].value == "ABC"
        assert negatives[1].value == "ABC1299"

    def test_fallback_without_sample(self) -> None:
        assert [n.value for n in structural_negatives(None)] == ["XXXXX", "12345"]
        assert [n.value for n in structural_negatives("")] == ["XXXXX", "12345"]


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestRender:
    def test_field_order(self, email_result: DetectionResult) -> None:
        record = build_builtin_record(email_result, None, TODAY)
        assert list(record.to_dict()) == FIELD_ORDER

    def test_yaml_round_trip_and_order(self, email_result: DetectionResult) -> None:
        record = build_builtin_record(email_result, None, TODAY)
        loaded = yaml.safe_load(record_to_yaml(record))
        assert list(loaded) == FIELD_ORDER
        assert loaded["created"] == "2024-05-01"
        assert loaded["pattern"] == EMAIL.pattern_template
        assert loaded["test_cases"]["should_match"][0] == {
            "value": "alice@example.com",
            "description": "Detected in sample data",
        }

    def test_multiple_documents(
        self, email_result: DetectionResult, code_group: StructuralGroup
    ) -> None:
        records = [
            build_builtin_record(email_result, None, TODAY),
            build_structural_record(code_group, TODAY),
        ]
        text = records_to_yaml(records)
        docs = list(yaml.safe_load_all(text))
        assert [d["slug"] for d in docs] == [
            "DRAFT-global-email-address",
            "DRAFT-global-order-code",
        ]

    def test_record_filename(self, code_group: StructuralGroup) -> None:
        record = build_structural_record(code_group, TODAY)
        assert record_filename(record) == "DRAFT-global-order-code.yaml"

    def test_record_accepts_alias_round_trip(self, email_result: DetectionResult) -> None:
        record = build_builtin_record(email_result, None, TODAY)
        restored = DraftRecord.model_validate(record.to_dict())
        assert restored.to_dict() == record.to_dict()
        assert restored.schema_id == "testpattern/v1"
