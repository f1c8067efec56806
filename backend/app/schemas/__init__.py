from app.schemas.clerk_webhook import ClerkDeletedData, ClerkEmailAddress, ClerkEventType, ClerkUserData, ClerkWebhookEvent
from app.schemas.common import ApiErrorResponse, HealthResponse, Message
from app.schemas.resume import ResumeCreate, ResumeRead, ResumeUpdate
from app.schemas.user import UserCreate, UserRead, UserUpdate

__all__ = [
    "ApiErrorResponse",
    "ClerkDeletedData",
    "ClerkEmailAddress",
    "ClerkEventType",
    "ClerkUserData",
    "ClerkWebhookEvent",
    "HealthResponse",
    "Message",
    "ResumeCreate",
    "ResumeRead",
    "ResumeUpdate",
    "UserCreate",
    "UserRead",
    "UserUpdate",
]
