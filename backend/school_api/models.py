"""SQLModel data models.

This module defines the three tables of the roster database: `students`,
`teachers` and the `students_teachers` join table. The many-to-many
association is not mapped as an ORM relationship; it is read and written
explicitly through `repositories.LinkRepository`.
"""

from typing import Optional
from sqlmodel import SQLModel, Field


class Student(SQLModel, table=True):
    """A student enrolled with zero or more teachers."""
    __tablename__ = "students"

    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str = Field(index=True)
    last_name: str = Field(index=True)
    age: int
    email: str
    specialization: Optional[str] = None


class Teacher(SQLModel, table=True):
    """A teacher with zero or more students."""
    __tablename__ = "teachers"

    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str = Field(index=True)
    last_name: str = Field(index=True)
    age: int
    email: str
    subject: Optional[str] = None


class StudentTeacherLink(SQLModel, table=True):
    """A (student, teacher) pair in the association.

    The pair is the key. `student_side` is set while the teacher appears
    in the student's teacher list, `teacher_side` while the student
    appears in the teacher's student list. A row with neither flag set is
    deleted rather than kept.
    """
    __tablename__ = "students_teachers"

    student_id: int = Field(foreign_key="students.id", primary_key=True, ondelete="CASCADE")
    teacher_id: int = Field(foreign_key="teachers.id", primary_key=True, ondelete="CASCADE")
    student_side: bool = True
    teacher_side: bool = True
