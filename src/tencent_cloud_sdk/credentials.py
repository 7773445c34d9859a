"""Credentials for TC3 request signing."""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from .errors import InvalidConfigError


class Credentials(BaseModel):
    """Secret id/key pair with an optional session token.

    Immutable once built. The token is the only part that may be rotated,
    and only by deriving a new value with :meth:`with_token`.
    """

    model_config = ConfigDict(frozen=True)

    secret_id: SecretStr
    secret_key: SecretStr
    token: SecretStr | None = Field(default=None)

    @classmethod
    def create(cls, secret_id: str, secret_key: str, token: str | None = None) -> Self:
        """Build credentials from plain strings."""
        return cls(
            secret_id=SecretStr(secret_id),
            secret_key=SecretStr(secret_key),
            token=SecretStr(token) if token else None,
        )

    @classmethod
    def from_env(cls, prefix: str = "TENCENTCLOUD_") -> Self:
        """Create credentials from environment variables.

        Reads ``SECRET_ID``, ``SECRET_KEY`` and optional ``SESSION_TOKEN``.
        """
        import os

        secret_id = os.environ.get(f"{prefix}SECRET_ID")
        secret_key = os.environ.get(f"{prefix}SECRET_KEY")
        if not secret_id or not secret_key:
            msg = f"{prefix}SECRET_ID and {prefix}SECRET_KEY environment variables are required"
            raise InvalidConfigError(msg, field="credentials")

        return cls.create(secret_id, secret_key, os.environ.get(f"{prefix}SESSION_TOKEN"))

    def with_token(self, token: str | None) -> Self:
        """Return a copy carrying a rotated session token."""
        return self.model_copy(update={"token": SecretStr(token) if token else None})

    @property
    def has_token(self) -> bool:
        """Whether a session token is attached."""
        return self.token is not None

    def __repr__(self) -> str:
        return f"Credentials(secret_id='[redacted]', secret_key='[redacted]', has_token={self.has_token})"

    def __str__(self) -> str:
        return self.__repr__()
