"""
Unit tests for leadmind/core/catalog.py and leadmind/core/validation.py.
"""
import json

import pytest

from leadmind.core.catalog import ContentStore, parse_items, validate_content_integrity
from leadmind.core.models import CombinationCode, ConcernCategory, ContentType, LeadershipCode
from leadmind.core.validation import (
    ValidationError,
    validate_and_raise,
    validate_assessment_id,
    validate_code,
)


def _write(tmp_path, name, key, items):
    path = tmp_path / name
    path.write_text(json.dumps({key: items}), encoding="utf-8")
    return str(path)


@pytest.fixture
def content_files(tmp_path, reference_store):
    """The reference tables written back out as editable JSON files"""
    return {
        "questions": _write(tmp_path, "questions.json", "questions",
                            reference_store.table(ContentType.QUESTIONS)),
        "concerns": _write(tmp_path, "concerns.json", "concerns",
                           reference_store.table(ContentType.CONCERNS)),
        "leadership": _write(tmp_path, "leadership_types.json", "leadership_types",
                             reference_store.table(ContentType.LEADERSHIP)),
        "solutions": _write(tmp_path, "solutions.json", "solutions",
                            reference_store.table(ContentType.SOLUTIONS)),
        "followership": _write(tmp_path, "followership_types.json", "followership_types",
                               reference_store.table(ContentType.FOLLOWERSHIP)),
        "compatibility": _write(tmp_path, "compatibility.json", "compatibility",
                                reference_store.table(ContentType.COMPATIBILITY)),
    }


def _load(files):
    return ContentStore.from_files(
        files["questions"], files["concerns"], files["leadership"], files["solutions"],
        files["followership"], files["compatibility"],
    )


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------

class TestReferenceContent:

    def test_counts(self, reference_store):
        assert len(reference_store.questions) == 23
        assert len(reference_store.concerns) == 15
        assert set(reference_store.leadership_types) == set(LeadershipCode)
        assert set(reference_store.solutions) == set(CombinationCode)

    def test_passes_integrity_check(self, reference_store):
        is_valid, errors = validate_content_integrity(reference_store)
        assert is_valid, errors

    def test_question_dimension_sizes(self, reference_store):
        sizes = {}
        for q in reference_store.questions:
            sizes[q.dimension.value] = sizes.get(q.dimension.value, 0) + 1
        assert sizes == {"growth": 8, "sharing": 8, "interaction": 7}

    def test_round_trips_through_files(self, content_files, reference_store):
        store = _load(content_files)
        assert store.questions == reference_store.questions
        assert store.concerns.category_totals == reference_store.concerns.category_totals


# ---------------------------------------------------------------------------
# Loading failures
# ---------------------------------------------------------------------------

class TestLoadFailures:

    def test_missing_file(self, content_files):
        content_files["concerns"] = "/nonexistent/concerns.json"
        with pytest.raises(FileNotFoundError):
            _load(content_files)

    def test_duplicate_question_ids(self, tmp_path, content_files, reference_store):
        rows = reference_store.table(ContentType.QUESTIONS)
        rows.append(dict(rows[0]))
        content_files["questions"] = _write(tmp_path, "q2.json", "questions", rows)

        with pytest.raises(ValidationError) as exc_info:
            _load(content_files)
        assert any("Duplicate question id: 1" in e for e in exc_info.value.errors)

    def test_duplicate_solution_codes(self, tmp_path, content_files, reference_store):
        rows = reference_store.table(ContentType.SOLUTIONS)
        rows.append(dict(rows[0]))
        content_files["solutions"] = _write(tmp_path, "s2.json", "solutions", rows)

        with pytest.raises(ValidationError) as exc_info:
            _load(content_files)
        assert any("Duplicate codes" in e for e in exc_info.value.errors)

    def test_missing_leadership_type(self, tmp_path, content_files, reference_store):
        rows = [r for r in reference_store.table(ContentType.LEADERSHIP) if r["code"] != "L03"]
        content_files["leadership"] = _write(tmp_path, "l2.json", "leadership_types", rows)

        with pytest.raises(ValidationError) as exc_info:
            _load(content_files)
        assert any("L03" in e for e in exc_info.value.errors)


# ---------------------------------------------------------------------------
# parse_items
# ---------------------------------------------------------------------------

class TestParseItems:

    def test_valid_concern(self):
        items = parse_items(ContentType.CONCERNS, [
            {"id": "1", "label": "Deadlines slip", "categories": ["E"]},
        ])
        assert items[0].categories[0].value == "E"

    def test_empty_categories_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_items(ContentType.CONCERNS, [{"id": "1", "label": "x", "categories": []}])
        assert exc_info.value.errors[0].startswith("concerns[0]")

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError):
            parse_items(ContentType.CONCERNS, [{"id": "1", "label": "x", "categories": ["X"]}])

    def test_unknown_leadership_code_rejected(self, reference_store):
        row = reference_store.table(ContentType.LEADERSHIP)[0]
        row["code"] = "L09"
        with pytest.raises(ValidationError):
            parse_items(ContentType.LEADERSHIP, [row])

    def test_collects_every_bad_row(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_items(ContentType.QUESTIONS, [
                {"id": 0, "text": "a", "dimension": "growth"},
                {"id": 2, "text": "b", "dimension": "growth"},
                {"id": 3, "text": "c", "dimension": "speed"},
            ])
        assert len(exc_info.value.errors) == 2


# ---------------------------------------------------------------------------
# ContentStore.replace
# ---------------------------------------------------------------------------

class TestReplace:

    def test_replace_concerns_updates_totals(self, reference_store):
        items = parse_items(ContentType.CONCERNS, [
            {"id": "a", "label": "A", "categories": ["E"]},
            {"id": "b", "label": "B", "categories": ["L", "C"]},
        ])
        new_store = reference_store.replace(ContentType.CONCERNS, items)

        assert len(new_store.concerns) == 2
        assert new_store.concerns.category_totals[ConcernCategory.COLLABORATION] == 1
        # Original snapshot untouched
        assert len(reference_store.concerns) == 15

    def test_replace_with_dimension_gap_rejected(self, reference_store):
        items = [q for q in reference_store.questions if q.dimension.value != "sharing"]
        with pytest.raises(ValidationError) as exc_info:
            reference_store.replace(ContentType.QUESTIONS, items)
        assert any("sharing" in e for e in exc_info.value.errors)

    def test_repeated_category_rejected(self, reference_store):
        items = parse_items(ContentType.CONCERNS, [
            {"id": "a", "label": "A", "categories": ["E", "E"]},
        ])
        with pytest.raises(ValidationError):
            reference_store.replace(ContentType.CONCERNS, items)


# ---------------------------------------------------------------------------
# validation helpers
# ---------------------------------------------------------------------------

class TestValidators:

    @pytest.mark.parametrize("code, kind, ok", [
        ("L01", "leadership", True),
        ("P11", "solution", True),
        ("L1", "leadership", False),
        ("P01", "leadership", False),
        ("L01", "colour", False),
    ])
    def test_validate_code(self, code, kind, ok):
        assert validate_code(code, kind)[0] is ok

    @pytest.mark.parametrize("assessment_id, ok", [
        ("3f2a9c1e-77b0-4d8e-9a51-0c2e6f1b8d44", True),
        ("abc_123", True),
        ("", False),
        ("has space", False),
        ("x" * 101, False),
    ])
    def test_validate_assessment_id(self, assessment_id, ok):
        assert validate_assessment_id(assessment_id)[0] is ok

    def test_validate_and_raise_wraps_string(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_and_raise((False, "bad"), "Lookup")
        assert exc_info.value.errors == ["bad"]
        assert str(exc_info.value) == "Lookup failed: bad"


# ---------------------------------------------------------------------------
# Followership and compatibility tables
# ---------------------------------------------------------------------------

class TestFollowershipContent:

    def test_reference_tables(self, reference_store):
        assert sorted(reference_store.followership_types) == ["F01", "F02", "F03", "F04", "F05"]
        assert len(reference_store.compatibility) == 40

    def test_compatibility_lookup(self, reference_store):
        entry = reference_store.get_compatibility(LeadershipCode.L01, "F02")
        assert entry.leader_type == LeadershipCode.L01
        assert entry.follower_type == "F02"
        assert entry.strengths

    def test_missing_pair_is_none(self, reference_store):
        assert reference_store.get_compatibility(LeadershipCode.L01, "F99") is None

    def test_matrix_nests_leader_then_follower(self, reference_store):
        matrix = reference_store.compatibility_matrix()
        assert sorted(matrix) == [f"L0{i}" for i in range(1, 9)]
        assert matrix["L03"]["F04"]["follower_type"] == "F04"

    def test_bad_follower_code_rejected(self):
        with pytest.raises(ValidationError):
            parse_items(ContentType.FOLLOWERSHIP, [
                {"code": "X1", "name": "n", "title": "t", "description": "d"},
            ])

    def test_compatibility_needs_strengths(self):
        with pytest.raises(ValidationError):
            parse_items(ContentType.COMPATIBILITY, [
                {"leader_type": "L01", "follower_type": "F01", "strengths": [], "cautions": ["c"]},
            ])

    def test_removing_referenced_follower_type_rejected(self, reference_store):
        items = [ft for code, ft in reference_store.followership_types.items() if code != "F05"]
        with pytest.raises(ValidationError) as exc_info:
            reference_store.replace(ContentType.FOLLOWERSHIP, items)
        assert any("F05" in e for e in exc_info.value.errors)

    def test_duplicate_compatibility_pairs_rejected(self, tmp_path, content_files, reference_store):
        rows = reference_store.table(ContentType.COMPATIBILITY)
        rows.append(dict(rows[0]))
        content_files["compatibility"] = _write(tmp_path, "c2.json", "compatibility", rows)

        with pytest.raises(ValidationError) as exc_info:
            _load(content_files)
        assert any("Duplicate codes in compatibility" in e for e in exc_info.value.errors)

    def test_replace_compatibility(self, reference_store):
        items = parse_items(ContentType.COMPATIBILITY, [
            {"leader_type": "L02", "follower_type": "F01",
             "strengths": ["Fast together"], "cautions": ["Burnout"]},
        ])
        new_store = reference_store.replace(ContentType.COMPATIBILITY, items)
        assert len(new_store.compatibility) == 1
        assert new_store.get_compatibility(LeadershipCode.L02, "F01").tips == []
        assert new_store.get_compatibility(LeadershipCode.L01, "F01") is None
