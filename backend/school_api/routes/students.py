"""Student endpoints mounted under `/students`.

Endpoints implemented:
- GET /students/all
- GET /students/all/{page}/{size}
- GET /students/all/{page}/{size}/{sortProperty}
- GET /students/filterByFirstName/{firstName}
- GET /students/filterByLastName/{lastName}
- GET /students/{id}
- GET /students/{id}/getTeachers
- POST /students/save
- PUT /students/{id}
- DELETE /students/{id}
- PUT /students/{studentId}/addTeacher/{teacherId}
- PUT /students/{studentId}/removeTeacher/{teacherId}
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, Path
from sqlmodel import Session

from ..config import settings
from ..database import get_session
from ..schemas import MessageOut, Page, StudentIn, StudentOut, TeacherSummary
from ..services import StudentService
from . import DOMAIN_ERRORS, MAX_PAGE_NUMBER, http_error

router = APIRouter(prefix="/students", tags=["students"])

PageNumber = Annotated[int, Path(ge=0, le=MAX_PAGE_NUMBER)]
PageSize = Annotated[int, Path(ge=1, le=settings.MAX_PAGE_SIZE)]


@router.get("/all", response_model=List[StudentOut])
def list_all(db: Session = Depends(get_session)):
    """Return every student; an empty table answers 404."""
    try:
        return StudentService(db).list_all()
    except DOMAIN_ERRORS as e:
        raise http_error(e)


@router.get("/all/{page}/{size}", response_model=Page[StudentOut])
def list_paged(page: PageNumber, size: PageSize, db: Session = Depends(get_session)):
    """Return one zero-indexed page of students in store order."""
    return StudentService(db).list_paged(page, size)


@router.get("/all/{page}/{size}/{sort_property}", response_model=Page[StudentOut])
def list_paged_sorted(sort_property: str, page: PageNumber, size: PageSize,
                      db: Session = Depends(get_session)):
    """Return one page of students sorted ascending by `sort_property`."""
    try:
        return StudentService(db).list_paged_sorted(page, size, sort_property)
    except DOMAIN_ERRORS as e:
        raise http_error(e)


@router.get("/filterByFirstName/{first_name}", response_model=List[StudentOut])
def filter_by_first_name(first_name: str, db: Session = Depends(get_session)):
    try:
        return StudentService(db).filter_by_first_name(first_name)
    except DOMAIN_ERRORS as e:
        raise http_error(e)


@router.get("/filterByLastName/{last_name}", response_model=List[StudentOut])
def filter_by_last_name(last_name: str, db: Session = Depends(get_session)):
    try:
        return StudentService(db).filter_by_last_name(last_name)
    except DOMAIN_ERRORS as e:
        raise http_error(e)


@router.get("/{student_id}", response_model=StudentOut)
def get_student(student_id: int, db: Session = Depends(get_session)):
    try:
        return StudentService(db).get_one(student_id)
    except DOMAIN_ERRORS as e:
        raise http_error(e)


@router.get("/{student_id}/getTeachers", response_model=List[TeacherSummary])
def get_teachers(student_id: int, db: Session = Depends(get_session)):
    """Return the teachers in a student's list."""
    try:
        return StudentService(db).get_teachers(student_id)
    except DOMAIN_ERRORS as e:
        raise http_error(e)


@router.post("/save", response_model=MessageOut)
def save_student(payload: StudentIn, db: Session = Depends(get_session)):
    """Validate and store a new student.

    `teachers` may list existing teachers as `{"id": ...}` references;
    they are linked on both sides.
    """
    try:
        student = StudentService(db).save(payload)
    except DOMAIN_ERRORS as e:
        raise http_error(e)
    return MessageOut(message="Student was saved to DB", id=student.id)


@router.put("/{student_id}", response_model=MessageOut)
def update_student(student_id: int, payload: StudentIn, db: Session = Depends(get_session)):
    """Replace every field of a student, including its teacher list."""
    try:
        StudentService(db).update(student_id, payload)
    except DOMAIN_ERRORS as e:
        raise http_error(e)
    return MessageOut(message="Student was updated", id=student_id)


@router.delete("/{student_id}", response_model=MessageOut)
def delete_student(student_id: int, db: Session = Depends(get_session)):
    try:
        StudentService(db).delete(student_id)
    except DOMAIN_ERRORS as e:
        raise http_error(e)
    return MessageOut(message="Student was deleted from DB", id=student_id)


@router.put("/{student_id}/addTeacher/{teacher_id}", response_model=MessageOut)
def add_teacher(student_id: int, teacher_id: int, db: Session = Depends(get_session)):
    """Link a teacher and a student; the pair shows up on both sides."""
    try:
        StudentService(db).add_teacher(student_id, teacher_id)
    except DOMAIN_ERRORS as e:
        raise http_error(e)
    return MessageOut(message="The teacher has been added to the teacher list", id=student_id)


@router.put("/{student_id}/removeTeacher/{teacher_id}", response_model=MessageOut)
def remove_teacher(student_id: int, teacher_id: int, db: Session = Depends(get_session)):
    """Remove a teacher from the student's list.

    The teacher keeps the student in its own list. Answers 500 when the
    teacher is not in the student's list.
    """
    try:
        StudentService(db).remove_teacher(student_id, teacher_id)
    except DOMAIN_ERRORS as e:
        raise http_error(e)
    return MessageOut(message="The teacher has been removed from the teacher list", id=student_id)
