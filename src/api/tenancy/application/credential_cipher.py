"""Symmetric encryption of stored tenant database passwords.

Tokens have the form ``ivHex:authTagHex:cipherHex``. The key is derived
from the deployment secret with scrypt on every call and never stored.
The constants below match the tokens already stored in tenant rows, so
they must not change without re-encrypting every stored password.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from shared_kernel.exceptions import ConfigurationError
from tenancy.application.observability import DefaultCredentialCipherProbe
from tenancy.ports.exceptions import CredentialIntegrityError

if TYPE_CHECKING:
    from tenancy.application.observability import CredentialCipherProbe

KDF_SALT = b"salt"
KEY_LENGTH = 32
SCRYPT_N = 2**14
SCRYPT_R = 8
SCRYPT_P = 1
IV_LENGTH = 16
TAG_LENGTH = 16
ASSOCIATED_DATA = b"additional-auth-data"
SEPARATOR = ":"


class CredentialCipher:
    """AES-256-GCM cipher keyed by a secret-derived key."""

    def __init__(self, secret: str, probe: CredentialCipherProbe | None = None):
        """Initialize the cipher.

        Args:
            secret: Deployment secret the key is derived from. An empty value
                means unconfigured; every operation then fails.
            probe: Optional domain probe for observability.
        """
        self._secret = secret
        self._probe = probe or DefaultCredentialCipherProbe()

    def _derive_key(self) -> bytes:
        if not self._secret:
            self._probe.secret_missing()
            raise ConfigurationError("Tenant encryption key is not configured")
        kdf = Scrypt(
            salt=KDF_SALT,
            length=KEY_LENGTH,
            n=SCRYPT_N,
            r=SCRYPT_R,
            p=SCRYPT_P,
        )
        return kdf.derive(self._secret.encode("utf-8"))

    def encrypt(self, plaintext: str) -> str:
        """Encrypt a credential under a fresh random IV.

        Encrypting the same plaintext twice yields two different tokens.

        Raises:
            ConfigurationError: If the deployment secret is unset.
        """
        key = self._derive_key()
        iv = os.urandom(IV_LENGTH)
        sealed = AESGCM(key).encrypt(iv, plaintext.encode("utf-8"), ASSOCIATED_DATA)
        ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
        return SEPARATOR.join((iv.hex(), tag.hex(), ciphertext.hex()))

    def decrypt(self, token: str) -> str:
        """Verify and decrypt a token produced by `encrypt`.

        Raises:
            ConfigurationError: If the deployment secret is unset.
            CredentialIntegrityError: If the token is malformed, was
                tampered with, or was encrypted under another key.
        """
        key = self._derive_key()
        iv, tag, ciphertext = self._split(token)
        try:
            plaintext = AESGCM(key).decrypt(iv, ciphertext + tag, ASSOCIATED_DATA)
        except InvalidTag as e:
            self._probe.integrity_check_failed(reason="tag_mismatch")
            raise CredentialIntegrityError(
                "Encrypted credential failed integrity verification"
            ) from e
        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            self._probe.integrity_check_failed(reason="not_utf8")
            raise CredentialIntegrityError(
                "Encrypted credential is not valid text"
            ) from e

    def _split(self, token: str) -> tuple[bytes, bytes, bytes]:
        parts = token.split(SEPARATOR)
        if len(parts) != 3:
            self._probe.integrity_check_failed(reason="malformed")
            raise CredentialIntegrityError("Encrypted credential is malformed")
        try:
            iv, tag, ciphertext = (bytes.fromhex(part) for part in parts)
        except ValueError as e:
            self._probe.integrity_check_failed(reason="malformed")
            raise CredentialIntegrityError("Encrypted credential is malformed") from e
        if len(iv) != IV_LENGTH or len(tag) != TAG_LENGTH:
            self._probe.integrity_check_failed(reason="malformed")
            raise CredentialIntegrityError("Encrypted credential is malformed")
        return iv, tag, ciphertext
