"""Teacher endpoints mounted under `/teachers`.

Endpoints implemented:
- GET /teachers/all
- GET /teachers/all/{page}/{size}
- GET /teachers/all/{page}/{size}/{sortProperty}
- GET /teachers/filterByFirstName/{firstName}
- GET /teachers/filterByLastName/{lastName}
- GET /teachers/{id}
- GET /teachers/{id}/getStudents
- POST /teachers/save
- PUT /teachers/{id}
- DELETE /teachers/{id}
- PUT /teachers/{teacherId}/addStudent/{studentId}
- PUT /teachers/{teacherId}/removeStudent/{studentId}
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, Path
from sqlmodel import Session

from ..config import settings
from ..database import get_session
from ..schemas import MessageOut, Page, StudentSummary, TeacherIn, TeacherOut
from ..services import TeacherService
from . import DOMAIN_ERRORS, MAX_PAGE_NUMBER, http_error

router = APIRouter(prefix="/teachers", tags=["teachers"])

PageNumber = Annotated[int, Path(ge=0, le=MAX_PAGE_NUMBER)]
PageSize = Annotated[int, Path(ge=1, le=settings.MAX_PAGE_SIZE)]


@router.get("/all", response_model=List[TeacherOut])
def list_all(db: Session = Depends(get_session)):
    """Return every teacher; an empty table answers 404."""
    try:
        return TeacherService(db).list_all()
    except DOMAIN_ERRORS as e:
        raise http_error(e)


@router.get("/all/{page}/{size}", response_model=Page[TeacherOut])
def list_paged(page: PageNumber, size: PageSize, db: Session = Depends(get_session)):
    return TeacherService(db).list_paged(page, size)


@router.get("/all/{page}/{size}/{sort_property}", response_model=Page[TeacherOut])
def list_paged_sorted(sort_property: str, page: PageNumber, size: PageSize,
                      db: Session = Depends(get_session)):
    """Return one page of teachers sorted ascending by `sort_property`."""
    try:
        return TeacherService(db).list_paged_sorted(page, size, sort_property)
    except DOMAIN_ERRORS as e:
        raise http_error(e)


@router.get("/filterByFirstName/{first_name}", response_model=List[TeacherOut])
def filter_by_first_name(first_name: str, db: Session = Depends(get_session)):
    try:
        return TeacherService(db).filter_by_first_name(first_name)
    except DOMAIN_ERRORS as e:
        raise http_error(e)


@router.get("/filterByLastName/{last_name}", response_model=List[TeacherOut])
def filter_by_last_name(last_name: str, db: Session = Depends(get_session)):
    try:
        return TeacherService(db).filter_by_last_name(last_name)
    except DOMAIN_ERRORS as e:
        raise http_error(e)


@router.get("/{teacher_id}", response_model=TeacherOut)
def get_teacher(teacher_id: int, db: Session = Depends(get_session)):
    try:
        return TeacherService(db).get_one(teacher_id)
    except DOMAIN_ERRORS as e:
        raise http_error(e)


@router.get("/{teacher_id}/getStudents", response_model=List[StudentSummary])
def get_students(teacher_id: int, db: Session = Depends(get_session)):
    try:
        return TeacherService(db).get_students(teacher_id)
    except DOMAIN_ERRORS as e:
        raise http_error(e)


@router.post("/save", response_model=MessageOut)
def save_teacher(payload: TeacherIn, db: Session = Depends(get_session)):
    """Validate and store a new teacher.

    `students` may list existing students as `{"id": ...}` references.
    """
    try:
        teacher = TeacherService(db).save(payload)
    except DOMAIN_ERRORS as e:
        raise http_error(e)
    return MessageOut(message="Teacher was saved successfully", id=teacher.id)


@router.put("/{teacher_id}", response_model=MessageOut)
def update_teacher(teacher_id: int, payload: TeacherIn, db: Session = Depends(get_session)):
    try:
        TeacherService(db).update(teacher_id, payload)
    except DOMAIN_ERRORS as e:
        raise http_error(e)
    return MessageOut(message="Teacher was updated successfully", id=teacher_id)


@router.delete("/{teacher_id}", response_model=MessageOut)
def delete_teacher(teacher_id: int, db: Session = Depends(get_session)):
    try:
        TeacherService(db).delete(teacher_id)
    except DOMAIN_ERRORS as e:
        raise http_error(e)
    return MessageOut(message="Teacher was deleted successfully", id=teacher_id)


@router.put("/{teacher_id}/addStudent/{student_id}", response_model=MessageOut)
def add_student(teacher_id: int, student_id: int, db: Session = Depends(get_session)):
    """Link a student and a teacher; the pair shows up on both sides."""
    try:
        TeacherService(db).add_student(teacher_id, student_id)
    except DOMAIN_ERRORS as e:
        raise http_error(e)
    return MessageOut(message="The student has been added to the list of students", id=teacher_id)


@router.put("/{teacher_id}/removeStudent/{student_id}", response_model=MessageOut)
def remove_student(teacher_id: int, student_id: int, db: Session = Depends(get_session)):
    """Remove a student from the teacher's list only; 500 when not linked."""
    try:
        TeacherService(db).remove_student(teacher_id, student_id)
    except DOMAIN_ERRORS as e:
        raise http_error(e)
    return MessageOut(message="The student has been removed from the student list", id=teacher_id)
