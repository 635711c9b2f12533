import uuid
from datetime import datetime
from typing import Dict, List, Optional, Any, Annotated
from enum import Enum
from pydantic import BaseModel, Field


class Dimension(str, Enum):
    """Questionnaire axes used for leadership classification"""
    GROWTH = "growth"
    SHARING = "sharing"
    INTERACTION = "interaction"


class ConcernCategory(str, Enum):
    """Tags attached to concern keywords"""
    EXECUTION = "E"
    GROWTH = "G"
    COLLABORATION = "C"
    LEADERSHIP = "L"


class LeadershipCode(str, Enum):
    L01 = "L01"
    L02 = "L02"
    L03 = "L03"
    L04 = "L04"
    L05 = "L05"
    L06 = "L06"
    L07 = "L07"
    L08 = "L08"


class CombinationCode(str, Enum):
    P01 = "P01"  # E+L
    P02 = "P02"  # G+L
    P03 = "P03"  # C+L
    P04 = "P04"  # E+G
    P05 = "P05"  # C+E
    P06 = "P06"  # C+G
    P07 = "P07"  # L+E+G+C
    P08 = "P08"  # L only, also the empty fallback
    P09 = "P09"  # E only
    P10 = "P10"  # G only
    P11 = "P11"  # C only


class AssessmentStatus(str, Enum):
    """Wizard step an assessment was last saved from"""
    ONBOARDING = "onboarding"
    DIAGNOSIS = "diagnosis"
    CONCERNS = "concerns"
    PROFILE = "profile"
    RESULT = "result"
    TEAM = "team"
    SERVICE = "service"
    COMPLETED = "completed"


class ContentType(str, Enum):
    """Content tables staff can replace"""
    QUESTIONS = "questions"
    CONCERNS = "concerns"
    LEADERSHIP = "leadership"
    SOLUTIONS = "solutions"
    FOLLOWERSHIP = "followership"
    COMPATIBILITY = "compatibility"


LikertScore = Annotated[int, Field(ge=1, le=6)]

# Followership codes are staff-defined, F01-F99
FollowerCode = Annotated[str, Field(pattern=r"^F\d{2}$")]


# Catalog entries

class Question(BaseModel):
    """Diagnosis question on a 6-point scale"""
    id: int = Field(..., ge=1)
    text: str = Field(..., min_length=1, max_length=1000)
    dimension: Dimension
    subdimension: Optional[str] = Field(None, max_length=100)

    class Config:
        frozen = True


class Concern(BaseModel):
    """Team concern keyword; cross-cutting keywords carry two categories"""
    id: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1, max_length=200)
    categories: List[ConcernCategory] = Field(..., min_length=1, max_length=2)
    group_name: str = Field("", max_length=100)

    class Config:
        frozen = True


class LeadershipTypeInfo(BaseModel):
    code: LeadershipCode
    name: str = Field(..., min_length=1, max_length=100)
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=5000)
    strengths: List[str] = Field(..., min_length=1, max_length=20)
    challenges: List[str] = Field(..., min_length=1, max_length=20)
    image: Optional[str] = Field(None, max_length=500)

    class Config:
        frozen = True


class SolutionAction(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    method: str = Field("", max_length=2000)
    effect: str = Field("", max_length=1000)
    leadership_tip: str = Field("", max_length=1000)

    class Config:
        frozen = True


class Solution(BaseModel):
    """Pre-authored answer for one concern combination"""
    code: CombinationCode
    combination: str = Field(..., min_length=1, max_length=20)
    title: str = Field(..., min_length=1, max_length=200)
    core_issue: str = Field(..., min_length=1, max_length=500)
    field_voices: List[str] = Field(default_factory=list, max_length=10)
    diagnosis: str = Field("", max_length=2000)
    actions: List[SolutionAction] = Field(default_factory=list)

    class Config:
        frozen = True


class FollowershipTypeInfo(BaseModel):
    """How a team member tends to follow; assigned by the leader"""
    code: FollowerCode
    name: str = Field(..., min_length=1, max_length=100)
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=5000)
    icon: Optional[str] = Field(None, max_length=10)

    class Config:
        frozen = True


class Compatibility(BaseModel):
    """Coaching notes for one leadership type working with one follower type"""
    leader_type: LeadershipCode
    follower_type: FollowerCode
    strengths: List[str] = Field(..., min_length=1, max_length=10)
    cautions: List[str] = Field(..., min_length=1, max_length=10)
    tips: List[str] = Field(default_factory=list, max_length=10)

    class Config:
        frozen = True


# Derived results

class DimensionScores(BaseModel):
    """Per-dimension answer averages, rounded to 2 decimals"""
    growth: float = 0.0
    sharing: float = 0.0
    interaction: float = 0.0

    def get(self, dimension: Dimension) -> float:
        return getattr(self, dimension.value)


class ConcernAnalysis(BaseModel):
    primary_a: Optional[ConcernCategory] = None
    primary_b: Optional[ConcernCategory] = None
    combination_id: CombinationCode
    z_scores: Dict[ConcernCategory, float]
    category_counts: Dict[ConcernCategory, int]


class TeamMember(BaseModel):
    """Team member the leader tagged with a followership type"""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str = Field(..., min_length=1, max_length=100)
    follower_type: FollowerCode


class TeamGroup(BaseModel):
    """Members sharing one follower type, with the matching coaching notes"""
    follower_type: str
    follower: Optional[FollowershipTypeInfo] = None
    members: List[str]
    compatibility: Optional[Compatibility] = None


class TeamResult(BaseModel):
    leadership_type: LeadershipCode
    member_count: int
    groups: List[TeamGroup]


class AssessmentRecord(BaseModel):
    """Everything the wizard saved for one visitor"""
    id: str
    status: AssessmentStatus = AssessmentStatus.ONBOARDING
    answers: Dict[int, LikertScore] = Field(default_factory=dict)
    scores: Optional[DimensionScores] = None
    leadership_type: Optional[LeadershipCode] = None
    concerns: List[str] = Field(default_factory=list)
    analysis: Optional[ConcernAnalysis] = None
    team_members: List[TeamMember] = Field(default_factory=list)
    services: List[str] = Field(default_factory=list)
    service_requested_at: Optional[datetime] = None
    nickname: Optional[str] = None
    company: Optional[str] = None
    department: Optional[str] = None
    job_role: Optional[str] = None
    email: Optional[str] = None
    agreed_to_terms: bool = False
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    def touch(self):
        """Update last modification timestamp"""
        self.updated_at = datetime.now()


# API Request Models

class ScoreRequest(BaseModel):
    """Answers collected by the diagnosis step"""
    answers: Dict[int, LikertScore] = Field(default_factory=dict)
    include_content: bool = True


class AnalyzeConcernsRequest(BaseModel):
    """Concern keywords picked by the user"""
    concern_ids: List[str] = Field(default_factory=list)
    include_content: bool = True


class ToggleConcernRequest(BaseModel):
    concern_id: str = Field(..., min_length=1, max_length=50)


class AssessmentUpsertRequest(BaseModel):
    """Partial assessment update; omitted fields keep their stored value"""
    id: str = Field(..., min_length=1, max_length=100)
    status: Optional[AssessmentStatus] = None
    answers: Optional[Dict[int, LikertScore]] = None
    concerns: Optional[List[str]] = None
    team_members: Optional[List[TeamMember]] = Field(None, max_length=50)
    nickname: Optional[str] = Field(None, max_length=100)
    company: Optional[str] = Field(None, max_length=200)
    department: Optional[str] = Field(None, max_length=200)
    job_role: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=254)
    agreed_to_terms: Optional[bool] = None


class ServiceRequest(BaseModel):
    """Follow-up services a visitor asked for from the result page"""
    id: str = Field(..., min_length=1, max_length=100)
    services: List[Annotated[str, Field(min_length=1, max_length=100)]] = Field(
        ..., min_length=1, max_length=20
    )
    nickname: Optional[str] = Field(None, max_length=100)
    company: Optional[str] = Field(None, max_length=200)
    department: Optional[str] = Field(None, max_length=200)
    job_role: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=254)


class ContentReplaceRequest(BaseModel):
    """Full replacement of one content table"""
    items: List[Dict[str, Any]]
