"""Lookups in the student registry."""

from typing import Optional

from .. import domain
from .database import Database
from .models import DBStudent


class StudentStore(object):
    """Read-only access to the registry of enrolled students."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def find(self, uni_id: str, name: str, birthday: str) \
            -> Optional[domain.Student]:
        """Get the student with exactly this id, name and birth date."""
        with self.db.transaction() as session:
            db_student = (
                session.query(DBStudent)
                .filter(DBStudent.uni_id == uni_id)
                .filter(DBStudent.name == name)
                .filter(DBStudent.birthday == birthday)
                .first()
            )
            if db_student is None:
                return None
            return domain.Student(uni_id=db_student.uni_id,
                                  name=db_student.name,
                                  birthday=db_student.birthday)
