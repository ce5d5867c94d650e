"""Business logic services used by HTTP controllers.

Services are intentionally thin: they map between transport and table
models and persist through repositories. Request-shape validation lives
in the controllers, not here.
"""

import logging
from datetime import datetime, timedelta, timezone
from passlib.context import CryptContext
import jwt
from typing import List, Optional
from . import mappers, models, repositories
from .config import settings
from .schemas import SubjectDTO

PWD_CTX = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

logger = logging.getLogger("grading_system.services")


class SubjectService:
    """CRUD orchestration for subjects.

    The repository is handed in by the caller so the service owns no
    storage of its own.
    """
    def __init__(self, subject_repo: repositories.SubjectRepository):
        self.subject_repo = subject_repo

    def save(self, dto: SubjectDTO) -> SubjectDTO:
        """Persist `dto` and return it with its database id."""
        logger.debug("Request to save Subject : %s", dto)
        subject = self.subject_repo.save(mappers.to_entity(dto))
        return mappers.to_dto(subject)

    def update(self, dto: SubjectDTO) -> SubjectDTO:
        """Overwrite the stored subject with every field of `dto`.

        Mechanically the same as `save`; callers must check that the id
        exists first or this will create a new row.
        """
        logger.debug("Request to update Subject : %s", dto)
        subject = self.subject_repo.save(mappers.to_entity(dto))
        return mappers.to_dto(subject)

    def partial_update(self, dto: SubjectDTO) -> Optional[SubjectDTO]:
        """Merge the non-null fields of `dto` onto the stored subject.

        Returns `None` when no subject has `dto.id`.
        """
        logger.debug("Request to partially update Subject : %s", dto)
        existing = self.subject_repo.find_by_id(dto.id)
        if existing is None:
            return None
        mappers.partial_update(existing, dto)
        return mappers.to_dto(self.subject_repo.save(existing))

    def find_all(self) -> List[SubjectDTO]:
        logger.debug("Request to get all Subjects")
        return [mappers.to_dto(s) for s in self.subject_repo.find_all()]

    def find_one(self, subject_id: int) -> Optional[SubjectDTO]:
        logger.debug("Request to get Subject : %s", subject_id)
        subject = self.subject_repo.find_by_id(subject_id)
        return mappers.to_dto(subject) if subject is not None else None

    def delete(self, subject_id: int) -> None:
        logger.debug("Request to delete Subject : %s", subject_id)
        self.subject_repo.delete_by_id(subject_id)


class AuthService:
    """Authentication related operations (register + authenticate)."""
    def __init__(self, user_repo: repositories.UserRepository):
        self.user_repo = user_repo

    def register(self, username: str, password: str) -> models.User:
        """Create a new user with a hashed password.

        Returns the persisted `User` instance.
        """
        hashed = PWD_CTX.hash(password)
        u = models.User(username=username, password_hash=hashed)
        return self.user_repo.create(u)

    def authenticate(self, username: str, password: str) -> Optional[str]:
        """Verify credentials and return a signed JWT token on success.

        Returns `None` if authentication fails.
        """
        user = self.user_repo.get_by_username(username)
        if not user:
            return None
        if not PWD_CTX.verify(password, user.password_hash):
            return None
        return issue_token(user)


def issue_token(user: models.User) -> str:
    """Sign a token carrying `user_id` and `username` for `user`."""
    expire = datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRE_HOURS)
    payload = {"user_id": user.id, "username": user.username, "exp": int(expire.timestamp())}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
