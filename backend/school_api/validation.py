"""Explicit payload validation for students and teachers.

Each `validate_*` function returns the full list of field violations for
a payload (empty when the payload is acceptable). Services call them
before touching the database and raise `ValidationFailure` when the list
is not empty.
"""

import re
from typing import List, Optional

from .schemas import FieldViolation, StudentIn, TeacherIn

MIN_NAME_LENGTH = 2
MIN_AGE = 18
EMAIL_PATTERN = re.compile(
    r"^(?=.{1,64}@)[A-Za-z0-9_-]+(\.[A-Za-z0-9_-]+)*@"
    r"[A-Za-z0-9][A-Za-z0-9-]*(\.[A-Za-z0-9-]+)*(\.[A-Za-z]{2,})$"
)


def _check_name(field: str, label: str, value: Optional[str]) -> List[FieldViolation]:
    if value is None or not value.strip():
        return [FieldViolation(field=field, message=f"The {label} should not be empty")]
    if len(value) < MIN_NAME_LENGTH:
        return [FieldViolation(field=field, message=f"The {label} should have at least {MIN_NAME_LENGTH} characters")]
    return []


def _check_age(value: Optional[int]) -> List[FieldViolation]:
    if value is None:
        return [FieldViolation(field="age", message="The age should not be empty")]
    if value < MIN_AGE:
        return [FieldViolation(field="age", message=f"The age should be {MIN_AGE} or greater")]
    return []


def _check_email(value: Optional[str]) -> List[FieldViolation]:
    if value is None or not value.strip():
        return [FieldViolation(field="email", message="Email cannot be empty")]
    if not EMAIL_PATTERN.fullmatch(value):
        return [FieldViolation(field="email", message="Email is not valid")]
    return []


def _validate_person(payload) -> List[FieldViolation]:
    violations = []
    violations += _check_name("firstName", "first name", payload.first_name)
    violations += _check_name("lastName", "last name", payload.last_name)
    violations += _check_age(payload.age)
    violations += _check_email(payload.email)
    return violations


def validate_student(payload: StudentIn) -> List[FieldViolation]:
    """Return every constraint violated by a student payload."""
    return _validate_person(payload)


def validate_teacher(payload: TeacherIn) -> List[FieldViolation]:
    """Return every constraint violated by a teacher payload."""
    return _validate_person(payload)
