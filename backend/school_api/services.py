"""Business logic services used by HTTP controllers.

Services validate payloads, apply the not-found rules and maintain the
student/teacher association through the repositories. Each mutating
operation commits exactly once, so a link, unlink, save or update is
either fully applied or not at all.

Association rules:
- adding a link puts the pair on both sides;
- removing a link takes it off the requesting side only, so a teacher
  removed from a student's list still lists that student until the
  teacher side removes it too;
- removing a pair that is not on the requesting side raises
  `InconsistentAssociation`.
"""

import logging
from typing import Callable, Iterable, List, Optional

from sqlmodel import Session

from . import models, schemas
from .errors import InconsistentAssociation, NotFoundError, ValidationFailure
from .repositories import LinkRepository, StudentRepository, TeacherRepository
from .validation import validate_student, validate_teacher

logger = logging.getLogger("school_api.services")


def _not_found(label: str, entity_id: int) -> NotFoundError:
    return NotFoundError(f"{label} not found for id :: {entity_id}")


def _unique_ids(refs: Optional[Iterable[schemas.EntityRef]]) -> List[int]:
    """Collapse a payload collection into distinct ids, keeping order."""
    seen = []
    for ref in refs or []:
        if ref.id not in seen:
            seen.append(ref.id)
    return seen


class _PersonService:
    """Listing and lookup operations shared by students and teachers.

    Subclasses set `repo` to their own table's repository and provide
    `describe`, which turns a row into its response schema.
    """
    label = ""
    plural = ""

    def __init__(self, session: Session):
        self.session = session
        self.students = StudentRepository(session)
        self.teachers = TeacherRepository(session)
        self.links = LinkRepository(session)

    def get(self, entity_id: int):
        """Return the entity row or raise `NotFoundError`."""
        entity = self.repo.get(entity_id)
        if entity is None:
            raise _not_found(self.label, entity_id)
        return entity

    def get_one(self, entity_id: int):
        return self.describe(self.get(entity_id))

    def list_all(self):
        """All rows; an empty table is reported as `NotFoundError`."""
        rows = self.repo.list_all()
        if not rows:
            raise NotFoundError(f"No {self.plural} found")
        return [self.describe(r) for r in rows]

    def list_paged(self, page_number: int, page_size: int) -> schemas.Page:
        return self._page(page_number, page_size, None)

    def list_paged_sorted(self, page_number: int, page_size: int, sort_property: Optional[str] = None) -> schemas.Page:
        return self._page(page_number, page_size, self.repo.sort_attribute(sort_property))

    def _page(self, page_number: int, page_size: int, order_by: Optional[str]) -> schemas.Page:
        rows, total, total_pages = self.repo.list_page(page_number, page_size, order_by)
        return schemas.Page(
            content=[self.describe(r) for r in rows],
            page_number=page_number,
            page_size=page_size,
            total_elements=total,
            total_pages=total_pages,
            number_of_elements=len(rows),
            first=page_number == 0,
            last=page_number + 1 >= total_pages,
        )

    def filter_by_first_name(self, first_name: str):
        return self._non_empty(self.repo.list_by_first_name(first_name), f"first name '{first_name}'")

    def filter_by_last_name(self, last_name: str):
        return self._non_empty(self.repo.list_by_last_name(last_name), f"last name '{last_name}'")

    def _non_empty(self, rows, criterion: str):
        if not rows:
            raise NotFoundError(f"No {self.plural} found with {criterion}")
        return [self.describe(r) for r in rows]

    def _require_students(self, ids: List[int]):
        for sid in ids:
            if self.students.get(sid) is None:
                raise _not_found("Student", sid)

    def _require_teachers(self, ids: List[int]):
        for tid in ids:
            if self.teachers.get(tid) is None:
                raise _not_found("Teacher", tid)

    @staticmethod
    def _replace(current: List[int], wanted: List[int], link: Callable[[int], object], unlink: Callable[[int], bool]):
        for other_id in wanted:
            if other_id not in current:
                link(other_id)
        for other_id in current:
            if other_id not in wanted:
                unlink(other_id)


class StudentService(_PersonService):
    """Student operations, including the student side of the association."""
    label = "Student"
    plural = "students"

    def __init__(self, session: Session):
        super().__init__(session)
        self.repo = self.students

    def describe(self, student: models.Student) -> schemas.StudentOut:
        summary = schemas.StudentSummary.model_validate(student)
        teachers = [schemas.TeacherSummary.model_validate(t) for t in self.links.teachers_of(student.id)]
        return schemas.StudentOut(**summary.model_dump(), teachers=teachers)

    def get_teachers(self, student_id: int) -> List[schemas.TeacherSummary]:
        self.get(student_id)
        return [schemas.TeacherSummary.model_validate(t) for t in self.links.teachers_of(student_id)]

    def _check(self, payload: schemas.StudentIn) -> List[int]:
        violations = validate_student(payload)
        if violations:
            raise ValidationFailure(violations)
        teacher_ids = _unique_ids(payload.teachers)
        self._require_teachers(teacher_ids)
        return teacher_ids

    def save(self, payload: schemas.StudentIn) -> models.Student:
        """Validate and insert a student, linking any referenced teachers."""
        teacher_ids = self._check(payload)
        student = models.Student(
            first_name=payload.first_name,
            last_name=payload.last_name,
            age=payload.age,
            email=payload.email,
            specialization=payload.specialization,
        )
        self.students.add(student)
        for tid in teacher_ids:
            self.links.link(student.id, tid)
        self.session.commit()
        self.session.refresh(student)
        logger.info("student_saved id=%s teachers=%s", student.id, teacher_ids)
        return student

    def update(self, student_id: int, payload: schemas.StudentIn) -> models.Student:
        """Replace every mutable field, including the teacher list."""
        teacher_ids = self._check(payload)
        student = self.get(student_id)
        student.first_name = payload.first_name
        student.last_name = payload.last_name
        student.age = payload.age
        student.email = payload.email
        student.specialization = payload.specialization
        self.students.add(student)
        current = [t.id for t in self.links.teachers_of(student_id)]
        self._replace(
            current,
            teacher_ids,
            lambda tid: self.links.link(student_id, tid),
            lambda tid: self.links.unlink_from_student(student_id, tid),
        )
        self.session.commit()
        self.session.refresh(student)
        logger.info("student_updated id=%s teachers=%s", student_id, teacher_ids)
        return student

    def delete(self, student_id: int):
        student = self.get(student_id)
        self.links.delete_for_student(student_id)
        self.students.delete(student)
        self.session.commit()
        logger.info("student_deleted id=%s", student_id)

    def add_teacher(self, student_id: int, teacher_id: int):
        """Link a teacher to a student on both sides."""
        self.get(student_id)
        if self.teachers.get(teacher_id) is None:
            raise _not_found("Teacher", teacher_id)
        self.links.link(student_id, teacher_id)
        self.session.commit()
        logger.info("teacher_added student_id=%s teacher_id=%s", student_id, teacher_id)

    def remove_teacher(self, student_id: int, teacher_id: int):
        """Remove a teacher from the student's list (student side only)."""
        self.get(student_id)
        if self.teachers.get(teacher_id) is None:
            raise _not_found("Teacher", teacher_id)
        if not self.links.unlink_from_student(student_id, teacher_id):
            logger.warning("teacher_not_linked student_id=%s teacher_id=%s", student_id, teacher_id)
            raise InconsistentAssociation("Something went wrong")
        self.session.commit()
        logger.info("teacher_removed student_id=%s teacher_id=%s", student_id, teacher_id)


class TeacherService(_PersonService):
    """Teacher operations, including the teacher side of the association."""
    label = "Teacher"
    plural = "teachers"

    def __init__(self, session: Session):
        super().__init__(session)
        self.repo = self.teachers

    def describe(self, teacher: models.Teacher) -> schemas.TeacherOut:
        summary = schemas.TeacherSummary.model_validate(teacher)
        students = [schemas.StudentSummary.model_validate(s) for s in self.links.students_of(teacher.id)]
        return schemas.TeacherOut(**summary.model_dump(), students=students)

    def get_students(self, teacher_id: int) -> List[schemas.StudentSummary]:
        self.get(teacher_id)
        return [schemas.StudentSummary.model_validate(s) for s in self.links.students_of(teacher_id)]

    def _check(self, payload: schemas.TeacherIn) -> List[int]:
        violations = validate_teacher(payload)
        if violations:
            raise ValidationFailure(violations)
        student_ids = _unique_ids(payload.students)
        self._require_students(student_ids)
        return student_ids

    def save(self, payload: schemas.TeacherIn) -> models.Teacher:
        """Validate and insert a teacher, linking any referenced students."""
        student_ids = self._check(payload)
        teacher = models.Teacher(
            first_name=payload.first_name,
            last_name=payload.last_name,
            age=payload.age,
            email=payload.email,
            subject=payload.subject,
        )
        self.teachers.add(teacher)
        for sid in student_ids:
            self.links.link(sid, teacher.id)
        self.session.commit()
        self.session.refresh(teacher)
        logger.info("teacher_saved id=%s students=%s", teacher.id, student_ids)
        return teacher

    def update(self, teacher_id: int, payload: schemas.TeacherIn) -> models.Teacher:
        """Replace every mutable field, including the student list."""
        student_ids = self._check(payload)
        teacher = self.get(teacher_id)
        teacher.first_name = payload.first_name
        teacher.last_name = payload.last_name
        teacher.age = payload.age
        teacher.email = payload.email
        teacher.subject = payload.subject
        self.teachers.add(teacher)
        current = [s.id for s in self.links.students_of(teacher_id)]
        self._replace(
            current,
            student_ids,
            lambda sid: self.links.link(sid, teacher_id),
            lambda sid: self.links.unlink_from_teacher(teacher_id, sid),
        )
        self.session.commit()
        self.session.refresh(teacher)
        logger.info("teacher_updated id=%s students=%s", teacher_id, student_ids)
        return teacher

    def delete(self, teacher_id: int):
        teacher = self.get(teacher_id)
        self.links.delete_for_teacher(teacher_id)
        self.teachers.delete(teacher)
        self.session.commit()
        logger.info("teacher_deleted id=%s", teacher_id)

    def add_student(self, teacher_id: int, student_id: int):
        """Link a student to a teacher on both sides."""
        self.get(teacher_id)
        if self.students.get(student_id) is None:
            raise _not_found("Student", student_id)
        self.links.link(student_id, teacher_id)
        self.session.commit()
        logger.info("student_added teacher_id=%s student_id=%s", teacher_id, student_id)

    def remove_student(self, teacher_id: int, student_id: int):
        """Remove a student from the teacher's list (teacher side only)."""
        self.get(teacher_id)
        if self.students.get(student_id) is None:
            raise _not_found("Student", student_id)
        if not self.links.unlink_from_teacher(teacher_id, student_id):
            logger.warning("student_not_linked teacher_id=%s student_id=%s", teacher_id, student_id)
            raise InconsistentAssociation("Something went wrong")
        self.session.commit()
        logger.info("student_removed teacher_id=%s student_id=%s", teacher_id, student_id)
