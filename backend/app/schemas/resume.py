from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.common import ORMModel


class InformationBase(BaseModel):
    label: str = Field(..., min_length=1, max_length=100)
    value: str = Field(..., min_length=1, max_length=200)


class SkillBase(BaseModel):
    label: str = Field(..., min_length=1, max_length=100)
    value: str = Field(..., min_length=1, max_length=100)


class EducationBase(BaseModel):
    school: str = Field(..., min_length=1, max_length=200)
    degree: str = Field(..., min_length=1, max_length=200)
    major: str = Field(..., min_length=1, max_length=200)
    start_date: date
    end_date: date | None = None


class WorkExperienceBase(BaseModel):
    company: str = Field(..., min_length=1, max_length=200)
    position: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=1, max_length=5000)
    start_date: date
    end_date: date | None = None


class ProjectBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    sub_title: str = Field(..., min_length=1, max_length=200)
    details: str = Field(..., min_length=1, max_length=5000)


class ResumeCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    sub_title: str | None = Field(default=None, max_length=200)
    overview: str = Field(default="", max_length=5000)
    avatar: str | None = Field(default=None, max_length=1024)
    information: list[InformationBase] = Field(default_factory=list)
    educations: list[EducationBase] = Field(default_factory=list)
    work_experiences: list[WorkExperienceBase] = Field(default_factory=list)
    projects: list[ProjectBase] = Field(default_factory=list)
    skills: list[SkillBase] = Field(default_factory=list)


class ResumeUpdate(BaseModel):
    """Partial update; a collection that is present replaces the stored one."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    sub_title: str | None = Field(default=None, max_length=200)
    overview: str | None = Field(default=None, max_length=5000)
    avatar: str | None = Field(default=None, max_length=1024)
    information: list[InformationBase] | None = None
    educations: list[EducationBase] | None = None
    work_experiences: list[WorkExperienceBase] | None = None
    projects: list[ProjectBase] | None = None
    skills: list[SkillBase] | None = None


class InformationRead(InformationBase, ORMModel):
    id: UUID


class SkillRead(SkillBase, ORMModel):
    id: UUID


class EducationRead(EducationBase, ORMModel):
    id: UUID


class WorkExperienceRead(WorkExperienceBase, ORMModel):
    id: UUID


class ProjectRead(ProjectBase, ORMModel):
    id: UUID


class ResumeRead(ORMModel):
    id: UUID
    user_id: UUID
    title: str
    sub_title: str | None
    overview: str
    avatar: str | None
    information: list[InformationRead]
    educations: list[EducationRead]
    work_experiences: list[WorkExperienceRead]
    projects: list[ProjectRead]
    skills: list[SkillRead]
    created_at: datetime
    updated_at: datetime
