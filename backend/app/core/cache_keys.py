"""Cache key builders. Keys are relative; ``CacheService`` adds the namespace."""

USER_PREFIX = "user"


def user_by_provider_id(provider_id: str) -> str:
    return f"{USER_PREFIX}:provider:{provider_id}"
