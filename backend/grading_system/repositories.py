"""Repository classes encapsulating database operations.

Each repository is small and focused on a single table. Repositories
return SQLModel objects and perform commits/refreshes where
appropriate; database errors are not caught here.
"""

from typing import List, Optional
from sqlmodel import Session, select
from . import models


class SubjectRepository:
    """Keyed storage for `Subject` rows."""
    def __init__(self, session: Session):
        self.session = session

    def save(self, subject: models.Subject) -> models.Subject:
        """Insert or update `subject` and return the managed instance.

        A `Subject` without an id is inserted and receives one from the
        database. One with an id is merged onto the stored row.
        """
        managed = self.session.merge(subject)
        self.session.commit()
        self.session.refresh(managed)
        return managed

    def find_by_id(self, subject_id: int) -> Optional[models.Subject]:
        """Return the `Subject` with `subject_id` or `None`."""
        return self.session.get(models.Subject, subject_id)

    def find_all(self) -> List[models.Subject]:
        """Return every subject in primary key order."""
        stmt = select(models.Subject).order_by(models.Subject.id)
        return list(self.session.exec(stmt).all())

    def exists_by_id(self, subject_id: int) -> bool:
        stmt = select(models.Subject.id).where(models.Subject.id == subject_id)
        return self.session.exec(stmt).first() is not None

    def delete_by_id(self, subject_id: int) -> None:
        """Delete the row if present; unknown ids are ignored."""
        subject = self.session.get(models.Subject, subject_id)
        if subject is None:
            return
        self.session.delete(subject)
        self.session.commit()


class UserRepository:
    """CRUD operations for `User` objects."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, user: models.User) -> models.User:
        """Persist a new user and return the managed instance."""
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def get_by_username(self, username: str) -> Optional[models.User]:
        """Return a `User` by username or `None` if not found."""
        stmt = select(models.User).where(models.User.username == username)
        return self.session.exec(stmt).first()

    def get(self, user_id: int) -> Optional[models.User]:
        """Get a `User` by primary key."""
        return self.session.get(models.User, user_id)
