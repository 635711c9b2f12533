"""
Read-only content catalogs: questions, concern keywords, leadership types,
solutions, followership types and leader/follower compatibility. Loaded
once from JSON and replaced only as a whole.
"""
import json
import os
import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from .concerns import ConcernCatalog
from .models import (
    CombinationCode, Compatibility, Concern, ContentType, Dimension,
    FollowershipTypeInfo, LeadershipCode, LeadershipTypeInfo, Question, Solution
)
from .validation import ValidationError

logger = logging.getLogger(__name__)

CompatibilityKey = Tuple[LeadershipCode, str]


class ContentStore:
    """Validated snapshot of every content table"""

    def __init__(self, questions: List[Question], concerns: List[Concern],
                 leadership_types: Dict[LeadershipCode, LeadershipTypeInfo],
                 solutions: Dict[CombinationCode, Solution],
                 followership_types: Optional[Dict[str, FollowershipTypeInfo]] = None,
                 compatibility: Optional[Dict[CompatibilityKey, Compatibility]] = None):
        self.questions: Tuple[Question, ...] = tuple(questions)
        self.concerns = ConcernCatalog(concerns)
        self.leadership_types = dict(leadership_types)
        self.solutions = dict(solutions)
        self.followership_types = dict(followership_types or {})
        self.compatibility = dict(compatibility or {})

    @classmethod
    def from_files(cls, questions_file: str, concerns_file: str,
                   leadership_file: str, solutions_file: str,
                   followership_file: str, compatibility_file: str) -> "ContentStore":
        """Load and validate all catalogs, raising on the first broken file"""
        questions = parse_items(ContentType.QUESTIONS, _read_items(questions_file, "questions"))
        concerns = parse_items(ContentType.CONCERNS, _read_items(concerns_file, "concerns"))
        leadership = parse_items(ContentType.LEADERSHIP, _read_items(leadership_file, "leadership_types"))
        solutions = parse_items(ContentType.SOLUTIONS, _read_items(solutions_file, "solutions"))
        followership = parse_items(ContentType.FOLLOWERSHIP,
                                   _read_items(followership_file, "followership_types"))
        compatibility = parse_items(ContentType.COMPATIBILITY,
                                    _read_items(compatibility_file, "compatibility"))

        store = cls(
            questions=questions,
            concerns=concerns,
            leadership_types={lt.code: lt for lt in leadership},
            solutions={s.code: s for s in solutions},
            followership_types={ft.code: ft for ft in followership},
            compatibility=_key_compatibility(compatibility),
        )

        is_valid, errors = validate_content_integrity(store, expected_counts={
            ContentType.LEADERSHIP: len(leadership),
            ContentType.SOLUTIONS: len(solutions),
            ContentType.FOLLOWERSHIP: len(followership),
            ContentType.COMPATIBILITY: len(compatibility),
        })
        if not is_valid:
            raise ValidationError("Content validation failed", errors)

        logger.info(
            f"Loaded content: {len(store.questions)} questions, {len(store.concerns)} concerns, "
            f"{len(store.leadership_types)} leadership types, {len(store.solutions)} solutions, "
            f"{len(store.followership_types)} followership types, "
            f"{len(store.compatibility)} compatibility entries"
        )
        return store

    @classmethod
    def from_settings(cls, settings) -> "ContentStore":
        return cls.from_files(*settings.catalog_files)

    def replace(self, content_type: ContentType, items: List[Any]) -> "ContentStore":
        """Return a new store with one table swapped out; self is untouched"""
        tables = {
            "questions": list(self.questions),
            "concerns": list(self.concerns),
            "leadership_types": self.leadership_types,
            "solutions": self.solutions,
            "followership_types": self.followership_types,
            "compatibility": self.compatibility,
        }

        if content_type == ContentType.QUESTIONS:
            tables["questions"] = items
        elif content_type == ContentType.CONCERNS:
            tables["concerns"] = items
        elif content_type == ContentType.LEADERSHIP:
            tables["leadership_types"] = {lt.code: lt for lt in items}
        elif content_type == ContentType.SOLUTIONS:
            tables["solutions"] = {s.code: s for s in items}
        elif content_type == ContentType.FOLLOWERSHIP:
            tables["followership_types"] = {ft.code: ft for ft in items}
        elif content_type == ContentType.COMPATIBILITY:
            tables["compatibility"] = _key_compatibility(items)

        store = ContentStore(**tables)
        is_valid, errors = validate_content_integrity(store, expected_counts={
            content_type: len(items)
        })
        if not is_valid:
            raise ValidationError(f"Invalid {content_type.value} content", errors)
        return store

    def get_compatibility(self, leader_type: LeadershipCode,
                          follower_type: str) -> Optional[Compatibility]:
        return self.compatibility.get((leader_type, follower_type))

    def compatibility_matrix(self) -> Dict[str, Dict[str, Dict[str, Any]]]:
        """Compatibility as leader code -> follower code -> entry"""
        matrix: Dict[str, Dict[str, Dict[str, Any]]] = {}
        for (leader, follower), entry in sorted(self.compatibility.items()):
            matrix.setdefault(leader.value, {})[follower] = entry.model_dump(mode="json")
        return matrix

    def table(self, content_type: ContentType) -> List[Dict[str, Any]]:
        """Serialize one table for the admin editor"""
        if content_type == ContentType.QUESTIONS:
            rows = self.questions
        elif content_type == ContentType.CONCERNS:
            rows = list(self.concerns)
        elif content_type == ContentType.LEADERSHIP:
            rows = [self.leadership_types[code] for code in sorted(self.leadership_types)]
        elif content_type == ContentType.SOLUTIONS:
            rows = [self.solutions[code] for code in sorted(self.solutions)]
        elif content_type == ContentType.FOLLOWERSHIP:
            rows = [self.followership_types[code] for code in sorted(self.followership_types)]
        else:
            rows = [self.compatibility[key] for key in sorted(self.compatibility)]
        return [row.model_dump(mode="json") for row in rows]


def _key_compatibility(entries: List[Compatibility]) -> Dict[CompatibilityKey, Compatibility]:
    return {(c.leader_type, c.follower_type): c for c in entries}


def _read_items(file_path: str, key: str) -> List[Dict[str, Any]]:
    try:
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"Content file not found: {file_path}")

        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        return data[key]

    except Exception as e:
        logger.error(f"Failed to load {key} from {file_path}: {e}")
        raise


MODEL_BY_TYPE = {
    ContentType.QUESTIONS: Question,
    ContentType.CONCERNS: Concern,
    ContentType.LEADERSHIP: LeadershipTypeInfo,
    ContentType.SOLUTIONS: Solution,
    ContentType.FOLLOWERSHIP: FollowershipTypeInfo,
    ContentType.COMPATIBILITY: Compatibility,
}


def parse_items(content_type: ContentType, raw_items: List[Dict[str, Any]]) -> List[Any]:
    """Build catalog models, collecting every row error before raising"""
    model = MODEL_BY_TYPE[content_type]
    items, errors = [], []

    for index, raw in enumerate(raw_items):
        try:
            items.append(model(**raw))
        except (PydanticValidationError, TypeError) as e:
            errors.append(f"{content_type.value}[{index}]: {e}")

    if errors:
        raise ValidationError(f"Invalid {content_type.value} content", errors)
    return items


def _duplicates(values: List[Any]) -> List[Any]:
    seen, dupes = set(), []
    for value in values:
        if value in seen and value not in dupes:
            dupes.append(value)
        seen.add(value)
    return dupes


def validate_content_integrity(store: ContentStore,
                               expected_counts: Dict[ContentType, int] = None) -> Tuple[bool, List[str]]:
    errors = []
    expected_counts = expected_counts or {}

    # Questions
    question_ids = [q.id for q in store.questions]
    for dupe in _duplicates(question_ids):
        errors.append(f"Duplicate question id: {dupe}")
    for dimension in Dimension:
        if not any(q.dimension == dimension for q in store.questions):
            errors.append(f"No questions for dimension: {dimension.value}")

    # Concerns
    concern_ids = [c.id for c in store.concerns]
    for dupe in _duplicates(concern_ids):
        errors.append(f"Duplicate concern id: {dupe}")
    for concern in store.concerns:
        if len(set(concern.categories)) != len(concern.categories):
            errors.append(f"Concern {concern.id} repeats a category")

    # Leadership types and solutions: every computable code needs content
    missing_types = set(LeadershipCode) - set(store.leadership_types)
    if missing_types:
        errors.append(f"Missing leadership types: {sorted(c.value for c in missing_types)}")

    missing_solutions = set(CombinationCode) - set(store.solutions)
    if missing_solutions:
        errors.append(f"Missing solutions: {sorted(c.value for c in missing_solutions)}")

    # Compatibility rows must point at a known follower type
    unknown_followers = sorted({
        follower for _, follower in store.compatibility
        if follower not in store.followership_types
    })
    if unknown_followers:
        errors.append(f"Compatibility references unknown followership types: {unknown_followers}")

    # Keyed tables silently collapse repeated codes, so compare sizes
    sizes = {
        ContentType.LEADERSHIP: len(store.leadership_types),
        ContentType.SOLUTIONS: len(store.solutions),
        ContentType.FOLLOWERSHIP: len(store.followership_types),
        ContentType.COMPATIBILITY: len(store.compatibility),
    }
    for content_type, expected in expected_counts.items():
        if content_type in sizes and sizes[content_type] != expected:
            errors.append(f"Duplicate codes in {content_type.value} content")

    is_valid = len(errors) == 0
    if is_valid:
        logger.info("Content validation passed")
    else:
        logger.warning(f"Content validation failed with {len(errors)} errors")

    return is_valid, errors
