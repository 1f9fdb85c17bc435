"""Credential channels: where each kind of principal presents its token."""

from __future__ import annotations

from enum import StrEnum


class CredentialChannel(StrEnum):
    """Bearer credential channels. A resolver only reads its own channel."""

    TENANT_USER = "user-token"
    PLATFORM_ADMINISTRATOR = "administrator-token"
    TENANT_ADMINISTRATOR = "x-tenant-token"

    @property
    def is_cookie(self) -> bool:
        return self is not CredentialChannel.TENANT_ADMINISTRATOR
