"""
Concern keyword analysis.

Selected keywords are tallied per category, each tally is normalized by the
number of catalog keywords carrying that category, and the two strongest
categories pick the solution combination shown to the user.
"""
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import CombinationCode, Concern, ConcernAnalysis, ConcernCategory
from .utils import safe_ratio
from .validation import ValidationError

logger = logging.getLogger(__name__)

E = ConcernCategory.EXECUTION
G = ConcernCategory.GROWTH
C = ConcernCategory.COLLABORATION
L = ConcernCategory.LEADERSHIP

# Equal Z-scores are resolved in this order
TIE_BREAK_ORDER: Tuple[ConcernCategory, ...] = (G, C, E)

CATEGORY_NAMES: Dict[ConcernCategory, str] = {
    E: "Team execution",
    G: "Team growth capability",
    C: "Collaboration & communication culture",
    L: "Leadership direction",
}

SINGLE_CODES: Dict[ConcernCategory, CombinationCode] = {
    L: CombinationCode.P08,
    E: CombinationCode.P09,
    G: CombinationCode.P10,
    C: CombinationCode.P11,
}

# Keyed by the pair sorted on category letter
PAIR_CODES: Dict[Tuple[str, str], CombinationCode] = {
    ("E", "L"): CombinationCode.P01,
    ("G", "L"): CombinationCode.P02,
    ("C", "L"): CombinationCode.P03,
    ("E", "G"): CombinationCode.P04,
    ("C", "E"): CombinationCode.P05,
    ("C", "G"): CombinationCode.P06,
}

FALLBACK_CODE = CombinationCode.P08


class ConcernCatalog:
    """Read-only concern keywords with their per-category totals"""

    def __init__(self, concerns: Iterable[Concern]):
        self._concerns: Tuple[Concern, ...] = tuple(concerns)
        self._by_id: Dict[str, Concern] = {c.id: c for c in self._concerns}
        self.category_totals: Dict[ConcernCategory, int] = self._count_categories()

    def _count_categories(self) -> Dict[ConcernCategory, int]:
        totals = {category: 0 for category in ConcernCategory}
        for concern in self._concerns:
            for category in concern.categories:
                totals[category] += 1
        return totals

    def get(self, concern_id: str) -> Optional[Concern]:
        return self._by_id.get(concern_id)

    def __contains__(self, concern_id: object) -> bool:
        return concern_id in self._by_id

    def __iter__(self):
        return iter(self._concerns)

    def __len__(self) -> int:
        return len(self._concerns)


def count_categories(selected_ids: Iterable[str],
                     catalog: ConcernCatalog) -> Dict[ConcernCategory, int]:
    """Tally selections per category; a cross-cutting keyword counts once in each"""
    counts = {category: 0 for category in ConcernCategory}
    for concern_id in selected_ids:
        concern = catalog.get(concern_id)
        if concern is None:
            logger.debug(f"Ignoring unknown concern id: {concern_id}")
            continue
        for category in concern.categories:
            counts[category] += 1
    return counts


def calculate_z_scores(counts: Dict[ConcernCategory, int],
                       totals: Dict[ConcernCategory, int]) -> Dict[ConcernCategory, float]:
    return {
        category: safe_ratio(counts.get(category, 0), totals.get(category, 0))
        for category in ConcernCategory
    }


def rank_categories(z_scores: Dict[ConcernCategory, float],
                    candidates: Sequence[ConcernCategory] = TIE_BREAK_ORDER) -> List[ConcernCategory]:
    """Order candidates by Z-score (highest first), then by TIE_BREAK_ORDER"""
    return sorted(
        candidates,
        key=lambda category: (-z_scores[category], TIE_BREAK_ORDER.index(category)),
    )


def determine_combination_id(primary_a: Optional[ConcernCategory],
                             primary_b: Optional[ConcernCategory],
                             counts: Dict[ConcernCategory, int]) -> CombinationCode:
    """Pick the solution combination for the primary categories"""
    if primary_a == L and all(counts[category] > 0 for category in ConcernCategory):
        return CombinationCode.P07

    if (primary_a is None) != (primary_b is None):
        return SINGLE_CODES[primary_a or primary_b]

    if primary_a is not None and primary_b is not None:
        pair = tuple(sorted((primary_a.value, primary_b.value)))
        code = PAIR_CODES.get(pair)
        if code is not None:
            return code

    return FALLBACK_CODE


def analyze_concerns(selected_ids: Iterable[str], catalog: ConcernCatalog) -> ConcernAnalysis:
    """
    Derive the primary concern categories and solution combination

    Leadership direction (L) always leads when selected, with the strongest
    remaining category second. Without L the two strongest categories among
    E, G and C are used. A category only qualifies with a Z-score above 0.
    Unknown ids are ignored.

    Args:
        selected_ids: Concern ids chosen by the user
        catalog: Concern catalog supplying categories and totals

    Returns:
        ConcernAnalysis with primary categories, combination id and the
        intermediate tallies
    """
    counts = count_categories(selected_ids, catalog)
    z_scores = calculate_z_scores(counts, catalog.category_totals)

    primary_a: Optional[ConcernCategory] = None
    primary_b: Optional[ConcernCategory] = None
    ranked = rank_categories(z_scores)

    if counts[L] > 0:
        primary_a = L
        if z_scores[ranked[0]] > 0:
            primary_b = ranked[0]
    else:
        if z_scores[ranked[0]] > 0:
            primary_a = ranked[0]
        if z_scores[ranked[1]] > 0:
            primary_b = ranked[1]

    combination_id = determine_combination_id(primary_a, primary_b, counts)

    return ConcernAnalysis(
        primary_a=primary_a,
        primary_b=primary_b,
        combination_id=combination_id,
        z_scores=z_scores,
        category_counts=counts,
    )


def toggle_concern(selected: Sequence[str], concern_id: str,
                   max_selected: int = 3) -> List[str]:
    """
    Add or remove a concern from the user's selection

    Raises:
        ValidationError: Adding would exceed max_selected
    """
    if concern_id in selected:
        return [cid for cid in selected if cid != concern_id]

    if len(selected) >= max_selected:
        raise ValidationError(
            "Too many concerns selected",
            [f"At most {max_selected} concerns can be selected"]
        )
    return list(selected) + [concern_id]


def validate_concern_selection(selected_ids: Sequence[str], max_selected: int = 3) -> None:
    """Reject selections larger than the wizard allows"""
    errors = []
    if len(selected_ids) > max_selected:
        errors.append(f"At most {max_selected} concerns can be selected, got {len(selected_ids)}")
    if len(set(selected_ids)) != len(selected_ids):
        errors.append("Concern ids must not repeat")
    if errors:
        raise ValidationError("Invalid concern selection", errors)
