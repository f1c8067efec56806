from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.core.exceptions import Forbidden, NotFound
from app.models.resume import Education, Project, Resume, ResumeInformation, Skill, WorkExperience
from app.schemas.resume import ResumeCreate, ResumeUpdate

logger = logging.getLogger(__name__)

# Child collections and the model each is stored as.
COLLECTIONS = {
    "information": ResumeInformation,
    "educations": Education,
    "skills": Skill,
    "work_experiences": WorkExperience,
    "projects": Project,
}

_RESUME_LOAD_OPTIONS = [selectinload(getattr(Resume, name)) for name in COLLECTIONS]


def _build_children(model: type, items: list) -> list:
    return [model(**item.model_dump()) for item in items]


def create_resume(db: Session, user_id: UUID, payload: ResumeCreate) -> Resume:
    resume = Resume(
        user_id=user_id,
        title=payload.title,
        sub_title=payload.sub_title,
        overview=payload.overview,
        avatar=payload.avatar,
    )
    for name, model in COLLECTIONS.items():
        setattr(resume, name, _build_children(model, getattr(payload, name)))
    db.add(resume)
    db.commit()
    logger.info("Resume created", extra={"resume_id": str(resume.id), "user_id": str(user_id)})
    return get_resume(db, resume.id)


def get_resume(db: Session, resume_id: UUID) -> Resume | None:
    return db.scalar(select(Resume).where(Resume.id == resume_id).options(*_RESUME_LOAD_OPTIONS))


def list_resumes(db: Session, user_id: UUID) -> list[Resume]:
    return list(
        db.scalars(select(Resume).where(Resume.user_id == user_id).options(*_RESUME_LOAD_OPTIONS).order_by(Resume.created_at.desc()))
    )


def get_owned_resume(db: Session, resume_id: UUID, user_id: UUID, action: str = "view") -> Resume:
    resume = get_resume(db, resume_id)
    if not resume:
        raise NotFound(f"Resume with id {resume_id} not found")
    if resume.user_id != user_id:
        raise Forbidden(f"You do not have permission to {action} this resume")
    return resume


def update_resume(db: Session, resume_id: UUID, user_id: UUID, payload: ResumeUpdate) -> Resume:
    resume = get_owned_resume(db, resume_id, user_id, action="update")
    changes = payload.model_dump(exclude_unset=True)

    for field in ("title", "overview"):
        if changes.get(field) is not None:
            setattr(resume, field, changes[field])
    for field in ("sub_title", "avatar"):
        if field in changes:
            setattr(resume, field, changes[field])

    for name, model in COLLECTIONS.items():
        items = getattr(payload, name)
        if name in changes and items is not None:
            # delete-orphan cascade removes the previous rows
            setattr(resume, name, _build_children(model, items))

    db.commit()
    db.expire(resume)
    return get_resume(db, resume_id)


def delete_resume(db: Session, resume_id: UUID, user_id: UUID) -> None:
    resume = get_owned_resume(db, resume_id, user_id, action="delete")
    db.delete(resume)
    db.commit()
    logger.info("Resume deleted", extra={"resume_id": str(resume_id), "user_id": str(user_id)})
