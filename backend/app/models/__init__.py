from app.models.resume import Education, Project, Resume, ResumeInformation, Skill, WorkExperience
from app.models.user import User

__all__ = [
    "Education",
    "Project",
    "Resume",
    "ResumeInformation",
    "Skill",
    "User",
    "WorkExperience",
]
