"""HTTP controllers for the `/api` prefix.

Endpoints implemented:
- POST /api/register
- POST /api/authenticate
- POST /api/subjects
- PUT /api/subjects/{subject_id}
- PATCH /api/subjects/{subject_id}
- GET /api/subjects
- GET /api/subjects/{subject_id}
- DELETE /api/subjects/{subject_id}

The subject controllers check the id invariants the service does not
(presence, path/body agreement, existence) before delegating, and turn
service results into status codes and alert headers.
"""

import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Response
from sqlmodel import Session

from . import models, repositories
from .auth import require_writer
from .database import get_session
from .errors import InvalidRequest, NotFound
from .schemas import MAX_ID, MIN_ID, RegisterIn, SubjectDTO, TokenOut, UserOut
from .services import AuthService, SubjectService
from .utils import headers

ENTITY_NAME = "subject"

SubjectId = Annotated[int, Path(ge=MIN_ID, le=MAX_ID)]

logger = logging.getLogger("grading_system.api")

router = APIRouter(prefix="/api")


def get_subject_repository(db: Session = Depends(get_session)) -> repositories.SubjectRepository:
    return repositories.SubjectRepository(db)


def get_subject_service(
    subject_repo: repositories.SubjectRepository = Depends(get_subject_repository),
) -> SubjectService:
    """Build the service around the request-scoped repository."""
    return SubjectService(subject_repo)


def _check_update_ids(subject_id: int, dto: SubjectDTO, subject_repo: repositories.SubjectRepository) -> None:
    """Raise `InvalidRequest` unless `dto` targets the stored subject `subject_id`."""
    if dto.id is None:
        raise InvalidRequest("Invalid id", ENTITY_NAME, "idnull")
    if dto.id != subject_id:
        raise InvalidRequest("Invalid ID", ENTITY_NAME, "idinvalid")
    if not subject_repo.exists_by_id(subject_id):
        raise InvalidRequest("Entity not found", ENTITY_NAME, "idnotfound")


@router.post('/register', response_model=UserOut, status_code=201)
def register(payload: RegisterIn, response: Response, db: Session = Depends(get_session)):
    """Register a new user (idempotent).

    Returns the existing user with status 200 if the username is taken
    so automation can call it repeatedly.
    """
    user_repo = repositories.UserRepository(db)
    existing = user_repo.get_by_username(payload.username)
    if existing:
        response.status_code = 200
        return UserOut(id=existing.id, username=existing.username)
    user = AuthService(user_repo).register(payload.username, payload.password)
    return UserOut(id=user.id, username=user.username)


@router.post('/authenticate', response_model=TokenOut)
def authenticate(payload: RegisterIn, db: Session = Depends(get_session)):
    """Exchange credentials for a signed JWT."""
    token = AuthService(repositories.UserRepository(db)).authenticate(payload.username, payload.password)
    if not token:
        raise HTTPException(status_code=401, detail='invalid credentials')
    return TokenOut(access_token=token)


@router.post('/subjects', response_model=SubjectDTO, status_code=201)
def create_subject(
    dto: SubjectDTO,
    response: Response,
    service: SubjectService = Depends(get_subject_service),
    user: Optional[models.User] = Depends(require_writer),
):
    """Create a subject; the id is assigned by the database."""
    logger.debug("REST request to save Subject : %s", dto)
    if dto.id is not None:
        raise InvalidRequest("A new subject cannot already have an ID", ENTITY_NAME, "idexists")
    result = service.save(dto)
    response.headers["Location"] = f"/api/subjects/{result.id}"
    response.headers.update(headers.entity_creation_alert(ENTITY_NAME, str(result.id)))
    return result


@router.put('/subjects/{subject_id}', response_model=SubjectDTO)
def update_subject(
    subject_id: SubjectId,
    dto: SubjectDTO,
    response: Response,
    service: SubjectService = Depends(get_subject_service),
    subject_repo: repositories.SubjectRepository = Depends(get_subject_repository),
    user: Optional[models.User] = Depends(require_writer),
):
    """Replace every field of an existing subject."""
    logger.debug("REST request to update Subject : %s, %s", subject_id, dto)
    _check_update_ids(subject_id, dto, subject_repo)
    result = service.update(dto)
    response.headers.update(headers.entity_update_alert(ENTITY_NAME, str(dto.id)))
    return result


@router.patch('/subjects/{subject_id}', response_model=SubjectDTO)
def partial_update_subject(
    subject_id: SubjectId,
    dto: SubjectDTO,
    response: Response,
    service: SubjectService = Depends(get_subject_service),
    subject_repo: repositories.SubjectRepository = Depends(get_subject_repository),
    user: Optional[models.User] = Depends(require_writer),
):
    """Update only the fields present (non-null) in the body.

    Accepts `application/json` and `application/merge-patch+json`.
    """
    logger.debug("REST request to partial update Subject partially : %s, %s", subject_id, dto)
    _check_update_ids(subject_id, dto, subject_repo)
    result = service.partial_update(dto)
    if result is None:
        raise NotFound(f"subject {subject_id} not found")
    response.headers.update(headers.entity_update_alert(ENTITY_NAME, str(dto.id)))
    return result


@router.get('/subjects', response_model=List[SubjectDTO])
def get_all_subjects(service: SubjectService = Depends(get_subject_service)):
    logger.debug("REST request to get all Subjects")
    return service.find_all()


@router.get('/subjects/{subject_id}', response_model=SubjectDTO)
def get_subject(subject_id: SubjectId, service: SubjectService = Depends(get_subject_service)):
    logger.debug("REST request to get Subject : %s", subject_id)
    result = service.find_one(subject_id)
    if result is None:
        raise NotFound(f"subject {subject_id} not found")
    return result


@router.delete('/subjects/{subject_id}', status_code=204)
def delete_subject(
    subject_id: SubjectId,
    service: SubjectService = Depends(get_subject_service),
    user: Optional[models.User] = Depends(require_writer),
):
    """Delete a subject. Unknown ids are acknowledged the same way."""
    logger.debug("REST request to delete Subject : %s", subject_id)
    service.delete(subject_id)
    return Response(status_code=204, headers=headers.entity_deletion_alert(ENTITY_NAME, str(subject_id)))
