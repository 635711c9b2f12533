from fastapi import APIRouter, HTTPException, Depends, Query, status
from typing import Optional
import logging
from datetime import datetime

from ..config import settings
from ..core.assessments import AssessmentStore
from ..core.catalog import ContentStore
from ..core.classifier import LEADERSHIP_THRESHOLD, calculate_scores, determine_leadership_type
from ..core.concerns import CATEGORY_NAMES, analyze_concerns, validate_concern_selection
from ..core.team import build_team_result
from ..core.models import (
    AnalyzeConcernsRequest, AssessmentUpsertRequest, CombinationCode,
    LeadershipCode, ScoreRequest, ServiceRequest, ToggleConcernRequest
)
from ..core.validation import (
    ValidationError, validate_and_raise, validate_assessment_id, validate_code
)

logger = logging.getLogger(__name__)

# Global instances
_content_store: Optional[ContentStore] = None
_assessment_store: Optional[AssessmentStore] = None


def get_content_store() -> ContentStore:
    """Dependency to get the current content snapshot"""
    global _content_store
    if _content_store is None:
        try:
            _content_store = ContentStore.from_settings(settings)
        except Exception as e:
            logger.error(f"Failed to load content: {e}")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Content catalogs unavailable"
            )
    return _content_store


def set_content_store(store: ContentStore) -> None:
    """Swap in a new content snapshot; in-flight requests keep the old one"""
    global _content_store
    _content_store = store


def get_assessment_store() -> AssessmentStore:
    global _assessment_store
    if _assessment_store is None:
        _assessment_store = AssessmentStore()
    return _assessment_store


def set_assessment_store(store: AssessmentStore) -> None:
    global _assessment_store
    _assessment_store = store


router = APIRouter()

# CONTENT ENDPOINTS

@router.get("/questions")
async def list_questions(store: ContentStore = Depends(get_content_store)):
    """Diagnosis questions in display order"""
    return {
        "questions": [q.model_dump(mode="json") for q in store.questions],
        "total": len(store.questions),
    }


@router.get("/concerns")
async def list_concerns(store: ContentStore = Depends(get_content_store)):
    """Concern keywords with the per-category totals used for Z-scores"""
    return {
        "concerns": [c.model_dump(mode="json") for c in store.concerns],
        "category_totals": {k.value: v for k, v in store.concerns.category_totals.items()},
        "category_names": {k.value: v for k, v in CATEGORY_NAMES.items()},
    }


@router.get("/leadership")
async def list_leadership_types(store: ContentStore = Depends(get_content_store)):
    return {
        "leadership_types": {
            code.value: info.model_dump(mode="json")
            for code, info in sorted(store.leadership_types.items())
        }
    }


@router.get("/leadership/{code}")
async def get_leadership_type(code: str, store: ContentStore = Depends(get_content_store)):
    validate_and_raise(validate_code(code, "leadership"), "Leadership code validation")

    info = store.leadership_types.get(_to_enum(LeadershipCode, code))
    if info is None:
        raise HTTPException(status_code=404, detail=f"Leadership type {code} not found")
    return info.model_dump(mode="json")


@router.get("/solutions")
async def list_solutions(store: ContentStore = Depends(get_content_store)):
    return {
        "solutions": {
            code.value: solution.model_dump(mode="json")
            for code, solution in sorted(store.solutions.items())
        }
    }


@router.get("/solutions/{code}")
async def get_solution(code: str, store: ContentStore = Depends(get_content_store)):
    validate_and_raise(validate_code(code, "solution"), "Solution code validation")

    solution = store.solutions.get(_to_enum(CombinationCode, code))
    if solution is None:
        raise HTTPException(status_code=404, detail=f"Solution {code} not found")
    return solution.model_dump(mode="json")


@router.get("/followership")
async def list_followership_types(
    include_compatibility: bool = Query(False, description="Also return the leader x follower table"),
    store: ContentStore = Depends(get_content_store)
):
    """Followership types, optionally with the compatibility table"""
    response_data = {
        "followership_types": {
            code: info.model_dump(mode="json")
            for code, info in sorted(store.followership_types.items())
        }
    }
    if include_compatibility:
        response_data["compatibility"] = store.compatibility_matrix()
    return response_data


def _to_enum(enum_cls, value: str):
    try:
        return enum_cls(value)
    except ValueError:
        return None

# SCORING ENDPOINTS

@router.post("/diagnosis/score")
async def score_diagnosis(request: ScoreRequest, store: ContentStore = Depends(get_content_store)):
    """Average the answers per dimension and classify the leadership type"""
    try:
        scores = calculate_scores(request.answers, store.questions)
        code = determine_leadership_type(scores)

        response_data = {
            "scores": scores.model_dump(),
            "leadership_type": code.value,
            "threshold": LEADERSHIP_THRESHOLD,
            "answered": len(request.answers),
            "total_questions": len(store.questions),
        }
        if request.include_content:
            info = store.leadership_types.get(code)
            response_data["leadership"] = info.model_dump(mode="json") if info else None

        logger.info(f"Scored {len(request.answers)} answers -> {code.value}")
        return response_data

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to score diagnosis: {e}")
        raise HTTPException(status_code=500, detail="Failed to score diagnosis")


@router.post("/concerns/analyze")
async def analyze_concern_selection(request: AnalyzeConcernsRequest,
                                    store: ContentStore = Depends(get_content_store)):
    """Pick primary concern categories and the matching solution"""
    validate_concern_selection(request.concern_ids, settings.MAX_SELECTED_CONCERNS)

    try:
        analysis = analyze_concerns(request.concern_ids, store.concerns)

        response_data = analysis.model_dump(mode="json")
        response_data["category_names"] = {k.value: v for k, v in CATEGORY_NAMES.items()}
        if request.include_content:
            solution = store.solutions.get(analysis.combination_id)
            response_data["solution"] = solution.model_dump(mode="json") if solution else None

        logger.info(
            f"Analyzed concerns {request.concern_ids} -> {analysis.combination_id.value}"
        )
        return response_data

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to analyze concerns: {e}")
        raise HTTPException(status_code=500, detail="Failed to analyze concerns")

# ASSESSMENT ENDPOINTS

@router.post("/assessments")
async def upsert_assessment(request: AssessmentUpsertRequest,
                            store: ContentStore = Depends(get_content_store),
                            assessments: AssessmentStore = Depends(get_assessment_store)):
    """Create or update the record for one wizard session"""
    validate_and_raise(validate_assessment_id(request.id), "Assessment ID validation")
    if request.concerns is not None:
        validate_concern_selection(request.concerns, settings.MAX_SELECTED_CONCERNS)

    try:
        record = assessments.upsert(request, store)
        return record.model_dump(mode="json")

    except (HTTPException, ValidationError):
        raise
    except Exception as e:
        logger.error(f"Failed to save assessment {request.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save assessment")


@router.get("/assessments/{assessment_id}")
async def get_assessment(assessment_id: str,
                         assessments: AssessmentStore = Depends(get_assessment_store)):
    validate_and_raise(validate_assessment_id(assessment_id), "Assessment ID validation")

    record = assessments.get(assessment_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Assessment {assessment_id} not found")
    return record.model_dump(mode="json")


@router.post("/assessments/{assessment_id}/concerns/toggle")
async def toggle_assessment_concern(assessment_id: str, request: ToggleConcernRequest,
                                    store: ContentStore = Depends(get_content_store),
                                    assessments: AssessmentStore = Depends(get_assessment_store)):
    """Select a concern keyword, or deselect it when already selected"""
    validate_and_raise(validate_assessment_id(assessment_id), "Assessment ID validation")

    record = assessments.toggle_concern(
        assessment_id, request.concern_id, store, settings.MAX_SELECTED_CONCERNS
    )
    if record is None:
        raise HTTPException(status_code=404, detail=f"Assessment {assessment_id} not found")
    return record.model_dump(mode="json")


@router.get("/assessments/{assessment_id}/team")
async def get_team_result(assessment_id: str,
                          store: ContentStore = Depends(get_content_store),
                          assessments: AssessmentStore = Depends(get_assessment_store)):
    """Compatibility of the leader's type with each follower type on the team"""
    validate_and_raise(validate_assessment_id(assessment_id), "Assessment ID validation")

    record = assessments.get(assessment_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Assessment {assessment_id} not found")
    if record.leadership_type is None:
        raise ValidationError(
            "Team result unavailable",
            ["Complete the diagnosis before analyzing the team"]
        )

    result = build_team_result(record.leadership_type, record.team_members, store)
    return result.model_dump(mode="json")


@router.post("/service-request")
async def request_service(request: ServiceRequest,
                          assessments: AssessmentStore = Depends(get_assessment_store)):
    validate_and_raise(validate_assessment_id(request.id), "Assessment ID validation")

    try:
        record = assessments.record_service_request(request)
        return {
            "success": True,
            "id": record.id,
            "services": record.services,
            "leadership_type": record.leadership_type.value if record.leadership_type else None,
        }

    except (HTTPException, ValidationError):
        raise
    except Exception as e:
        logger.error(f"Failed to save service request {request.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save service request")

# UTILITY ENDPOINTS

@router.get("/health")
async def health_check(store: ContentStore = Depends(get_content_store),
                       assessments: AssessmentStore = Depends(get_assessment_store)):
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "service": "LeadMind Assessment",
        "components": {
            "questions_loaded": len(store.questions),
            "concerns_loaded": len(store.concerns),
            "leadership_types_loaded": len(store.leadership_types),
            "solutions_loaded": len(store.solutions),
            "followership_types_loaded": len(store.followership_types),
            "compatibility_loaded": len(store.compatibility),
            "active_assessments": len(assessments.assessments),
        },
    }
