"""
Team compatibility: pairs the leader's classified type with each
followership type present in the team.
"""
import logging
from typing import Dict, List, Sequence

from .catalog import ContentStore
from .models import LeadershipCode, TeamGroup, TeamMember, TeamResult

logger = logging.getLogger(__name__)


def group_members(members: Sequence[TeamMember]) -> Dict[str, List[str]]:
    """Member names per follower type, in order of first appearance"""
    groups: Dict[str, List[str]] = {}
    for member in members:
        groups.setdefault(member.follower_type, []).append(member.name)
    return groups


def build_team_result(leadership_type: LeadershipCode, members: Sequence[TeamMember],
                      store: ContentStore) -> TeamResult:
    """
    Look up coaching notes for every follower type in the team

    Follower types with no catalog entry or no compatibility row are still
    listed, with the missing parts left as None.

    Args:
        leadership_type: The leader's classified type
        members: Team members tagged by the leader
        store: Content snapshot holding followership and compatibility tables

    Returns:
        TeamResult with one group per follower type
    """
    groups = []
    for follower_type, names in group_members(members).items():
        compatibility = store.get_compatibility(leadership_type, follower_type)
        if compatibility is None:
            logger.debug(f"No compatibility entry for {leadership_type.value}/{follower_type}")
        groups.append(TeamGroup(
            follower_type=follower_type,
            follower=store.followership_types.get(follower_type),
            members=names,
            compatibility=compatibility,
        ))

    return TeamResult(
        leadership_type=leadership_type,
        member_count=len(members),
        groups=groups,
    )
