import re
from typing import List, Optional, Tuple, Union
import logging

logger = logging.getLogger(__name__)

# Result codes are a fixed letter plus two digits
CODE_PATTERNS = {
    "leadership": r"^L\d{2}$",
    "solution": r"^P\d{2}$",
}


class ValidationError(Exception):
    """Custom exception for validation errors"""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []

    def __str__(self):
        if self.errors:
            return f"{super().__str__()}: {'; '.join(self.errors)}"
        return super().__str__()


def validate_code(code: str, kind: str) -> Tuple[bool, Optional[str]]:
    """Check a leadership (L01-L08) or solution (P01-P11) code"""
    pattern = CODE_PATTERNS.get(kind)
    if pattern is None:
        return False, f"Unknown code kind '{kind}'"

    if not isinstance(code, str) or not re.match(pattern, code):
        return False, f"Invalid {kind} code '{code}'"

    return True, None


def validate_assessment_id(assessment_id: str) -> Tuple[bool, Optional[str]]:

    if not isinstance(assessment_id, str):
        return False, "Assessment ID must be a string"

    assessment_id = assessment_id.strip()

    if not assessment_id:
        return False, "Assessment ID cannot be empty"

    # Browser-generated UUIDs, or plain alphanumeric ids
    if not re.match(r'^[a-zA-Z0-9_-]+$', assessment_id):
        return False, "Assessment ID must be UUID format or alphanumeric"

    if len(assessment_id) > 100:
        return False, "Assessment ID too long"

    return True, None


def validate_and_raise(validation_result: Tuple[bool, Union[str, List[str], None]],
                       operation: str = "validation") -> None:

    is_valid, errors = validation_result

    if not is_valid:
        if isinstance(errors, str):
            errors = [errors]
        raise ValidationError(f"{operation} failed", errors or [])
