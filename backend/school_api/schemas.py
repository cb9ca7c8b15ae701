"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable. JSON field names are
camelCase (``firstName``) while Python attributes stay snake_case; both
spellings are accepted on input.

Input payloads are deliberately loose (every scalar optional) so that
missing or short values reach `validation` and are reported as
field-level violations instead of a generic parse error.
"""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class EntityRef(CamelModel):
    """Reference to another entity by id inside a payload collection."""
    id: int


class StudentIn(CamelModel):
    """Payload for `POST /students/save` and `PUT /students/{id}`."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    age: Optional[int] = None
    email: Optional[str] = None
    specialization: Optional[str] = None
    teachers: Optional[List[EntityRef]] = None


class TeacherIn(CamelModel):
    """Payload for `POST /teachers/save` and `PUT /teachers/{id}`."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    age: Optional[int] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    students: Optional[List[EntityRef]] = None


class StudentSummary(CamelModel):
    """A student without its teacher list."""
    id: int
    first_name: str
    last_name: str
    age: int
    email: str
    specialization: Optional[str] = None


class TeacherSummary(CamelModel):
    """A teacher without its student list."""
    id: int
    first_name: str
    last_name: str
    age: int
    email: str
    subject: Optional[str] = None


class StudentOut(StudentSummary):
    teachers: List[TeacherSummary] = []


class TeacherOut(TeacherSummary):
    students: List[StudentSummary] = []


class Page(CamelModel, Generic[T]):
    """One zero-indexed page of a listing."""
    content: List[T]
    page_number: int
    page_size: int
    total_elements: int
    total_pages: int
    number_of_elements: int
    first: bool
    last: bool


class MessageOut(CamelModel):
    """Plain confirmation returned by mutating endpoints."""
    message: str
    id: Optional[int] = None


class FieldViolation(CamelModel):
    """A single failed constraint on a payload field."""
    field: str
    message: str
