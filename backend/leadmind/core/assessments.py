import logging
import threading
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from .catalog import ContentStore
from .classifier import calculate_scores, determine_leadership_type
from .concerns import analyze_concerns, toggle_concern
from .models import AssessmentRecord, AssessmentStatus, AssessmentUpsertRequest, ServiceRequest
from .validation import ValidationError

logger = logging.getLogger(__name__)

CONTACT_FIELDS = ("nickname", "company", "department", "job_role", "email")
PROFILE_FIELDS = ("status",) + CONTACT_FIELDS + ("agreed_to_terms",)


class AssessmentStore:
    """In-memory assessment records keyed by the browser session id"""

    def __init__(self):
        self.assessments: Dict[str, AssessmentRecord] = {}
        self._lock = threading.Lock()

    def upsert(self, request: AssessmentUpsertRequest, content: ContentStore) -> AssessmentRecord:
        """
        Create or merge an assessment record

        Fields left as None in the request keep their stored value. Scores,
        leadership type and concern analysis are recomputed whenever answers
        or concerns are supplied.

        Args:
            request: Partial update from the wizard
            content: Catalogs used to score answers and analyze concerns

        Returns:
            The stored record after the merge
        """
        with self._lock:
            record = self.assessments.get(request.id)
            created = record is None
            if created:
                record = AssessmentRecord(id=request.id)

            for field in PROFILE_FIELDS:
                value = getattr(request, field)
                if value is not None:
                    setattr(record, field, value)

            if request.answers is not None:
                record.answers = dict(request.answers)
                record.scores = calculate_scores(record.answers, content.questions)
                record.leadership_type = determine_leadership_type(record.scores)

            if request.concerns is not None:
                record.concerns = list(request.concerns)
                record.analysis = analyze_concerns(record.concerns, content.concerns)

            if request.team_members is not None:
                record.team_members = list(request.team_members)

            record.touch()
            self.assessments[record.id] = record

        logger.info(
            f"{'Created' if created else 'Updated'} assessment {record.id} "
            f"(status={record.status.value})"
        )
        return record

    def toggle_concern(self, assessment_id: str, concern_id: str, content: ContentStore,
                       max_selected: int = 3) -> Optional[AssessmentRecord]:
        """
        Select or deselect one concern keyword and re-run the analysis

        Returns None when the assessment does not exist.

        Raises:
            ValidationError: Unknown concern id, or the selection is full
        """
        if concern_id not in content.concerns:
            raise ValidationError("Unknown concern", [f"Concern '{concern_id}' is not in the catalog"])

        with self._lock:
            record = self.assessments.get(assessment_id)
            if record is None:
                return None

            record.concerns = toggle_concern(record.concerns, concern_id, max_selected)
            record.analysis = analyze_concerns(record.concerns, content.concerns)
            record.touch()

        logger.info(f"Assessment {assessment_id} concerns now {record.concerns}")
        return record

    def record_service_request(self, request: ServiceRequest) -> AssessmentRecord:
        """Store requested services, creating the record if the visitor skipped ahead"""
        # Keep order, drop blanks and repeats
        services = list(dict.fromkeys(s.strip() for s in request.services if s.strip()))
        if not services:
            raise ValidationError("Invalid service request", ["At least one service is required"])

        with self._lock:
            record = self.assessments.get(request.id)
            if record is None:
                record = AssessmentRecord(id=request.id)

            for field in CONTACT_FIELDS:
                value = getattr(request, field)
                if value is not None:
                    setattr(record, field, value)

            record.services = services
            record.service_requested_at = datetime.now()
            record.status = AssessmentStatus.SERVICE
            record.touch()
            self.assessments[record.id] = record

        logger.info(f"Service request for assessment {record.id}: {record.services}")
        return record

    def get(self, assessment_id: str) -> Optional[AssessmentRecord]:
        """Retrieve assessment by ID"""
        return self.assessments.get(assessment_id)

    def list_recent(self, limit: int = 50) -> List[AssessmentRecord]:
        """Newest first"""
        records = sorted(self.assessments.values(), key=lambda r: r.created_at, reverse=True)
        return records[:limit]

    def cleanup_expired(self, max_age_hours: int = 24) -> int:
        """Drop records not updated within max_age_hours"""
        cutoff = datetime.now() - timedelta(hours=max_age_hours)

        with self._lock:
            expired = [
                aid for aid, record in self.assessments.items()
                if record.updated_at < cutoff
            ]
            for aid in expired:
                del self.assessments[aid]

        if expired:
            logger.info(f"Cleaned up {len(expired)} expired assessments")
        return len(expired)

    def get_statistics(self) -> Dict:
        """Completion counts and result distributions"""
        records = list(self.assessments.values())
        completed = [r for r in records if r.status == AssessmentStatus.COMPLETED]

        type_counts: Dict[str, int] = {}
        combination_counts: Dict[str, int] = {}
        for record in records:
            if record.leadership_type:
                code = record.leadership_type.value
                type_counts[code] = type_counts.get(code, 0) + 1
            if record.analysis:
                code = record.analysis.combination_id.value
                combination_counts[code] = combination_counts.get(code, 0) + 1

        return {
            "total_assessments": len(records),
            "completed_assessments": len(completed),
            "completion_rate": round(len(completed) / len(records), 3) if records else 0,
            "service_requests": sum(1 for r in records if r.services),
            "leadership_types": dict(sorted(type_counts.items())),
            "combinations": dict(sorted(combination_counts.items())),
        }
