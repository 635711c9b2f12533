from fastapi import APIRouter, HTTPException, Depends, Header, Query, status
from typing import Optional
import logging
import secrets
from datetime import datetime

from ..config import settings
from ..core.assessments import AssessmentStore
from ..core.catalog import ContentStore, parse_items
from ..core.models import ContentReplaceRequest, ContentType
from .routes import get_assessment_store, get_content_store, set_content_store

logger = logging.getLogger(__name__)


def require_api_key(x_api_key: Optional[str] = Header(None)) -> None:
    """Staff endpoints need X-API-Key to match ADMIN_API_KEY"""
    if not settings.ADMIN_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin API is disabled"
        )
    if x_api_key is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing API key")
    # Bytes, since compare_digest rejects non-ASCII str
    if not secrets.compare_digest(x_api_key.encode("utf-8"), settings.ADMIN_API_KEY.encode("utf-8")):
        logger.warning("Rejected admin request with invalid API key")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid API key")


router = APIRouter(dependencies=[Depends(require_api_key)])


@router.get("/admin/content/{content_type}")
async def get_content(content_type: ContentType,
                      store: ContentStore = Depends(get_content_store)):
    rows = store.table(content_type)
    return {"content_type": content_type.value, "items": rows, "count": len(rows)}


@router.put("/admin/content/{content_type}")
async def replace_content(content_type: ContentType, request: ContentReplaceRequest,
                          store: ContentStore = Depends(get_content_store)):
    """
    Replace one content table

    The new rows are validated together with the other current tables; on
    failure nothing changes and the errors are returned as a 400.
    """
    items = parse_items(content_type, request.items)
    new_store = store.replace(content_type, items)
    set_content_store(new_store)

    logger.info(f"Replaced {content_type.value} content with {len(items)} items")
    return {
        "content_type": content_type.value,
        "count": len(items),
        "message": f"{content_type.value} content updated",
    }


@router.get("/admin/assessments")
async def list_assessments(limit: int = Query(50, ge=1, le=500),
                           assessments: AssessmentStore = Depends(get_assessment_store)):
    """Newest assessments first"""
    records = assessments.list_recent(limit)
    return {
        "assessments": [r.model_dump(mode="json") for r in records],
        "count": len(records),
        "total": len(assessments.assessments),
    }


@router.post("/admin/cleanup")
async def cleanup_assessments(max_age_hours: Optional[int] = Query(None, ge=0),
                              assessments: AssessmentStore = Depends(get_assessment_store)):
    if max_age_hours is None:
        max_age_hours = settings.ASSESSMENT_TTL_HOURS

    try:
        removed = assessments.cleanup_expired(max_age_hours)
        return {
            "removed": removed,
            "remaining": len(assessments.assessments),
            "max_age_hours": max_age_hours,
            "timestamp": datetime.now().isoformat(),
        }
    except Exception as e:
        logger.error(f"Cleanup failed: {e}")
        raise HTTPException(status_code=500, detail="Cleanup failed")


@router.get("/admin/stats")
async def get_statistics(assessments: AssessmentStore = Depends(get_assessment_store)):
    stats = assessments.get_statistics()
    stats["timestamp"] = datetime.now().isoformat()
    return stats
