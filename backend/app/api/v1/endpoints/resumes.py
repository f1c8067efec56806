from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.db.session import get_db
from app.schemas.resume import ResumeCreate, ResumeRead, ResumeUpdate
from app.schemas.user import UserRead
from app.services.resume_service import create_resume, delete_resume, get_owned_resume, list_resumes, update_resume

router = APIRouter(prefix="/resumes", tags=["resumes"])


@router.get("", response_model=list[ResumeRead])
def get_resumes(db: Session = Depends(get_db), user: UserRead = Depends(get_current_user)) -> list[ResumeRead]:
    return [ResumeRead.model_validate(item) for item in list_resumes(db, user.id)]


@router.post("", response_model=ResumeRead, status_code=status.HTTP_201_CREATED)
def create_new_resume(
    payload: ResumeCreate,
    db: Session = Depends(get_db),
    user: UserRead = Depends(get_current_user),
) -> ResumeRead:
    return ResumeRead.model_validate(create_resume(db, user.id, payload))


@router.get("/{resume_id}", response_model=ResumeRead)
def get_resume_by_id(resume_id: UUID, db: Session = Depends(get_db), user: UserRead = Depends(get_current_user)) -> ResumeRead:
    return ResumeRead.model_validate(get_owned_resume(db, resume_id, user.id))


@router.patch("/{resume_id}", response_model=ResumeRead)
@router.post("/{resume_id}", response_model=ResumeRead, include_in_schema=False)
def update_existing_resume(
    resume_id: UUID,
    payload: ResumeUpdate,
    db: Session = Depends(get_db),
    user: UserRead = Depends(get_current_user),
) -> ResumeRead:
    return ResumeRead.model_validate(update_resume(db, resume_id, user.id, payload))


@router.delete("/{resume_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_resume(resume_id: UUID, db: Session = Depends(get_db), user: UserRead = Depends(get_current_user)) -> Response:
    delete_resume(db, resume_id, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
