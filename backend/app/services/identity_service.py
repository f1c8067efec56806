from __future__ import annotations

import logging
from typing import Any

import jwt
from jwt import PyJWKClient

from app.core.config import Settings, get_settings
from app.core.exceptions import ServiceUnavailable, Unauthenticated

logger = logging.getLogger(__name__)


class ClerkTokenValidator:
    """Verifies Clerk session tokens (RS256) against the instance JWKS."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._jwks_client = PyJWKClient(self.settings.clerk_jwks_url) if self.settings.clerk_jwks_url else None

    def validate(self, token: str) -> dict[str, Any]:
        if not self._jwks_client:
            raise ServiceUnavailable("Clerk JWKS URL is not configured.")

        try:
            signing_key = self._jwks_client.get_signing_key_from_jwt(token)
            claims = jwt.decode(
                token,
                signing_key.key,
                algorithms=["RS256"],
                issuer=self.settings.clerk_issuer,
                options={
                    "verify_signature": True,
                    "verify_exp": True,
                    "verify_iss": bool(self.settings.clerk_issuer),
                    "verify_aud": False,
                    "require": ["exp", "sub"],
                },
            )
        except jwt.PyJWTError as exc:
            logger.debug("Clerk token validation failed: %s", exc)
            raise Unauthenticated("Invalid token") from exc

        authorized_parties = self.settings.authorized_party_list
        if authorized_parties and claims.get("azp") not in authorized_parties:
            raise Unauthenticated("Token was issued for an unauthorized party")
        return claims


_validator: ClerkTokenValidator | None = None


def get_token_validator() -> ClerkTokenValidator:
    global _validator
    if _validator is None:
        _validator = ClerkTokenValidator()
    return _validator


def resolve_provider_id(claims: dict[str, Any]) -> str:
    provider_id = claims.get("sub")
    if not provider_id:
        raise Unauthenticated("Missing provider ID in auth payload")
    return str(provider_id)
