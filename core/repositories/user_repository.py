"""User repository for authentication."""

from datetime import datetime, timezone

from core.logging import get_logger
from core.models import TokenBlacklist, User

from .base import BaseRepository

logger = get_logger("repository.user")


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    model = User


class TokenBlacklistRepository(BaseRepository[TokenBlacklist]):
    """Repository for revoked token ids."""

    model = TokenBlacklist

    def is_blacklisted(self, jti: str) -> bool:
        """Return True when the given JTI has been revoked."""
        return (
            self.session.query(TokenBlacklist.id).filter(TokenBlacklist.token_jti == jti).first()
            is not None
        )

    def revoke(self, jti: str, expires_at: datetime) -> TokenBlacklist:
        entry = self.create(TokenBlacklist(token_jti=jti, expires_at=expires_at))
        logger.info("token_revoked", jti=jti[:8])
        return entry

