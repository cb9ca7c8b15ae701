"""Repository classes encapsulating database operations.

`StudentRepository` and `TeacherRepository` cover a single table each.
`LinkRepository` reads and writes the `students_teachers` join table.
Repositories only stage changes on the session; services commit once
per operation.
"""

import math
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlmodel import Session, select

from . import models
from .errors import InvalidSortProperty


class _PersonRepository:
    """Queries shared by the student and teacher tables."""
    model = None
    sortable: Dict[str, str] = {}

    def __init__(self, session: Session):
        self.session = session

    def get(self, entity_id: int):
        """Fetch a row by primary key, or `None`."""
        return self.session.get(self.model, entity_id)

    def list_all(self) -> List:
        return self.session.exec(select(self.model)).all()

    def list_by_first_name(self, first_name: str) -> List:
        """Return rows whose first name matches exactly."""
        stmt = select(self.model).where(self.model.first_name == first_name)
        return self.session.exec(stmt).all()

    def list_by_last_name(self, last_name: str) -> List:
        """Return rows whose last name matches exactly."""
        stmt = select(self.model).where(self.model.last_name == last_name)
        return self.session.exec(stmt).all()

    def sort_attribute(self, sort_property: Optional[str]) -> str:
        """Map an API sort property onto a column name.

        `None` sorts by id. Both the camelCase API name and the column
        name are accepted; anything else raises `InvalidSortProperty`.
        """
        if sort_property is None:
            return "id"
        if sort_property in self.sortable:
            return self.sortable[sort_property]
        if sort_property in self.sortable.values():
            return sort_property
        allowed = ", ".join(sorted(self.sortable))
        raise InvalidSortProperty(f"cannot sort by '{sort_property}'; expected one of: {allowed}")

    def count(self) -> int:
        return self.session.exec(select(func.count()).select_from(self.model)).one()

    def list_page(self, page_number: int, page_size: int, order_by: Optional[str] = None) -> Tuple[List, int, int]:
        """Return `(rows, total_elements, total_pages)` for one page.

        Without `order_by` rows come back in store order. With it they
        are sorted ascending, ties broken by id.
        """
        stmt = select(self.model)
        if order_by is not None:
            stmt = stmt.order_by(getattr(self.model, order_by).asc(), self.model.id.asc())
        stmt = stmt.offset(page_number * page_size).limit(page_size)
        rows = self.session.exec(stmt).all()
        total = self.count()
        return rows, total, math.ceil(total / page_size)

    def add(self, entity):
        """Stage a new or changed row and flush so it gets an id."""
        self.session.add(entity)
        self.session.flush()
        return entity

    def delete(self, entity):
        self.session.delete(entity)


class StudentRepository(_PersonRepository):
    """CRUD operations for `Student` rows."""
    model = models.Student
    sortable = {
        "id": "id",
        "firstName": "first_name",
        "lastName": "last_name",
        "age": "age",
        "email": "email",
        "specialization": "specialization",
    }


class TeacherRepository(_PersonRepository):
    """CRUD operations for `Teacher` rows."""
    model = models.Teacher
    sortable = {
        "id": "id",
        "firstName": "first_name",
        "lastName": "last_name",
        "age": "age",
        "email": "email",
        "subject": "subject",
    }


class LinkRepository:
    """Explicit access to the `students_teachers` join table.

    Linking always sets both sides of a pair. Unlinking clears one side
    and removes the row once neither side holds it.
    """
    def __init__(self, session: Session):
        self.session = session

    def get(self, student_id: int, teacher_id: int) -> Optional[models.StudentTeacherLink]:
        return self.session.get(models.StudentTeacherLink, (student_id, teacher_id))

    def link(self, student_id: int, teacher_id: int) -> models.StudentTeacherLink:
        """Put the pair on both sides, creating the row if needed."""
        row = self.get(student_id, teacher_id)
        if row is None:
            row = models.StudentTeacherLink(student_id=student_id, teacher_id=teacher_id)
        row.student_side = True
        row.teacher_side = True
        self.session.add(row)
        return row

    def unlink_from_student(self, student_id: int, teacher_id: int) -> bool:
        """Drop the teacher from the student's list only.

        Returns False when the teacher was not in the student's list.
        """
        row = self.get(student_id, teacher_id)
        if row is None or not row.student_side:
            return False
        row.student_side = False
        self._store(row)
        return True

    def unlink_from_teacher(self, teacher_id: int, student_id: int) -> bool:
        """Drop the student from the teacher's list only.

        Returns False when the student was not in the teacher's list.
        """
        row = self.get(student_id, teacher_id)
        if row is None or not row.teacher_side:
            return False
        row.teacher_side = False
        self._store(row)
        return True

    def _store(self, row: models.StudentTeacherLink):
        if row.student_side or row.teacher_side:
            self.session.add(row)
        else:
            self.session.delete(row)

    def teachers_of(self, student_id: int) -> List[models.Teacher]:
        """Teachers in the student's list, in store order."""
        stmt = (
            select(models.Teacher)
            .join(models.StudentTeacherLink, models.StudentTeacherLink.teacher_id == models.Teacher.id)
            .where(
                models.StudentTeacherLink.student_id == student_id,
                models.StudentTeacherLink.student_side.is_(True),
            )
        )
        return self.session.exec(stmt).all()

    def students_of(self, teacher_id: int) -> List[models.Student]:
        """Students in the teacher's list, in store order."""
        stmt = (
            select(models.Student)
            .join(models.StudentTeacherLink, models.StudentTeacherLink.student_id == models.Student.id)
            .where(
                models.StudentTeacherLink.teacher_id == teacher_id,
                models.StudentTeacherLink.teacher_side.is_(True),
            )
        )
        return self.session.exec(stmt).all()

    def delete_for_student(self, student_id: int):
        """Remove every join row of a student (cascade on delete)."""
        stmt = select(models.StudentTeacherLink).where(models.StudentTeacherLink.student_id == student_id)
        for row in self.session.exec(stmt).all():
            self.session.delete(row)
        # join rows must be gone before the student row is deleted
        self.session.flush()

    def delete_for_teacher(self, teacher_id: int):
        """Remove every join row of a teacher (cascade on delete)."""
        stmt = select(models.StudentTeacherLink).where(models.StudentTeacherLink.teacher_id == teacher_id)
        for row in self.session.exec(stmt).all():
            self.session.delete(row)
        self.session.flush()
