"""Conversions between the `Subject` table model and `SubjectDTO`."""

from . import models
from .schemas import SubjectDTO


def to_entity(dto: SubjectDTO) -> models.Subject:
    """Copy every DTO field, `id` included, onto a new `Subject`."""
    return models.Subject(id=dto.id, name=dto.name, code=dto.code)


def to_dto(subject: models.Subject) -> SubjectDTO:
    return SubjectDTO(id=subject.id, name=subject.name, code=subject.code)


def partial_update(subject: models.Subject, dto: SubjectDTO) -> models.Subject:
    """Overwrite `subject` fields with the non-null fields of `dto`.

    `None` means "leave unchanged", not "clear". The id is the join key
    and is never touched here.
    """
    if dto.name is not None:
        subject.name = dto.name
    if dto.code is not None:
        subject.code = dto.code
    return subject
