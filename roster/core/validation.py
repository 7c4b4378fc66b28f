"""
Input validation for record creation.

Every check runs before the store is touched. A failure raises
:class:`~roster.core.exceptions.ValidationError` whose ``details`` name the
offending field(s).
"""

import math
from typing import Any, Dict, List, Mapping, Optional

from .exceptions import ValidationError


GRADE_FIELDS = ("student_id", "course_id", "score")


def is_missing(value: Any) -> bool:
    """True for None and for strings that are empty once stripped."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def require_text(payload: Mapping[str, Any], field: str) -> str:
    """Return ``payload[field]`` or raise if it is absent or blank."""
    value = payload.get(field)
    if is_missing(value):
        raise ValidationError(f"{field} is required", error_code="missing_field",
                              details={"field": field})
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string", error_code="invalid_field",
                              details={"field": field})
    return value


def optional_reference(payload: Mapping[str, Any], field: str) -> Optional[str]:
    """Optional reference id; an empty string means no reference."""
    value = payload.get(field)
    if is_missing(value):
        return None
    return str(value)


def require_score(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError("score must be a number", error_code="invalid_field",
                              details={"field": "score"})
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError("score must be a number", error_code="invalid_field",
                              details={"field": "score"})
    return value


def validate_course(payload: Mapping[str, Any]) -> Dict[str, Any]:
    return {"name": require_text(payload, "name")}


def validate_student(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Name is required; email and course_id pass through unchecked."""
    email = payload.get("email")
    return {
        "name": require_text(payload, "name"),
        "email": None if email is None else str(email),
        "course_id": optional_reference(payload, "course_id"),
    }


def validate_grade(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """All three fields are required. A score of zero is present, not missing."""
    missing: List[str] = [field for field in GRADE_FIELDS if is_missing(payload.get(field))]
    if missing:
        raise ValidationError("student_id, course_id, and score are required",
                              error_code="missing_field",
                              details={"fields": missing})
    return {
        "student_id": str(payload["student_id"]),
        "course_id": str(payload["course_id"]),
        "score": require_score(payload["score"]),
    }
