"""
Leadership type classification.

Answers are averaged per dimension, each average is compared against a
fixed threshold, and the resulting (sharing, interaction, growth) triple
selects one of eight leadership types.
"""
import logging
from typing import Dict, Iterable, List, Mapping, Tuple

from .models import Dimension, DimensionScores, LeadershipCode, Question
from .utils import mean, round_half_up

logger = logging.getLogger(__name__)

LEADERSHIP_THRESHOLD = 4.5

# (sharing_high, interaction_high, growth_high) -> type
LEADERSHIP_TABLE: Dict[Tuple[bool, bool, bool], LeadershipCode] = {
    (True, False, True): LeadershipCode.L01,     # shared vision
    (True, True, True): LeadershipCode.L02,      # growth partner
    (True, False, False): LeadershipCode.L03,    # operations
    (True, True, False): LeadershipCode.L04,     # harmony
    (False, False, True): LeadershipCode.L05,    # mentor
    (False, True, False): LeadershipCode.L06,    # safe harbor
    (False, True, True): LeadershipCode.L07,     # tailored coach
    (False, False, False): LeadershipCode.L08,   # in transition
}


def calculate_scores(answers: Mapping[int, float],
                     questions: Iterable[Question]) -> DimensionScores:
    """
    Average the answers of each dimension

    Answers for ids missing from the catalog are ignored. A dimension
    with no answers averages to 0.

    Args:
        answers: Question id -> score on the 1-6 scale
        questions: Question catalog used to resolve each id's dimension

    Returns:
        Dimension averages rounded to 2 decimals
    """
    buckets: Dict[Dimension, List[float]] = {dimension: [] for dimension in Dimension}

    for question in questions:
        answer = answers.get(question.id)
        if answer is not None:
            buckets[question.dimension].append(answer)

    return DimensionScores(
        growth=round_half_up(mean(buckets[Dimension.GROWTH])),
        sharing=round_half_up(mean(buckets[Dimension.SHARING])),
        interaction=round_half_up(mean(buckets[Dimension.INTERACTION])),
    )


def is_high(score: float, threshold: float = LEADERSHIP_THRESHOLD) -> bool:
    return score >= threshold


def determine_leadership_type(scores: DimensionScores) -> LeadershipCode:
    """Map dimension averages to a leadership type"""
    key = (
        is_high(scores.sharing),
        is_high(scores.interaction),
        is_high(scores.growth),
    )
    return LEADERSHIP_TABLE[key]


def classify_leadership(answers: Mapping[int, float],
                        questions: Iterable[Question]) -> LeadershipCode:
    """Classify a full or partial answer set"""
    scores = calculate_scores(answers, questions)
    code = determine_leadership_type(scores)
    logger.debug(
        f"Classified {len(answers)} answers: growth={scores.growth}, "
        f"sharing={scores.sharing}, interaction={scores.interaction} -> {code.value}"
    )
    return code
