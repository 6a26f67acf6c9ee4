"""Key material for signed and private cookies.

A ``Key`` holds two independent 32-byte secrets: one for signing
(HMAC-SHA256 via ``itsdangerous``) and one for encryption
(AES-256-GCM via ``cryptography``). Keys are created by the caller
and passed per call; crumbs never stores, persists, or rotates them.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from crumbs.errors import ConfigurationError

SIGNING_KEY_LEN = 32
ENCRYPTION_KEY_LEN = 32
MASTER_KEY_LEN = SIGNING_KEY_LEN + ENCRYPTION_KEY_LEN
MIN_DERIVE_LEN = 32

_HKDF_INFO = b"crumbs cookie key: signing + encryption"


@dataclass(frozen=True, slots=True, repr=False)
class Key:
    """A cryptographic master key for signed and private cookie views.

    Usage::

        key = Key.generate()               # random, for tests and dev
        key = Key.from_bytes(master)       # 64+ random bytes you manage
        key = Key.derive_from(secret)      # 32+ bytes, stretched with HKDF
    """

    signing: bytes
    encryption: bytes

    def __post_init__(self) -> None:
        if len(self.signing) != SIGNING_KEY_LEN or len(self.encryption) != ENCRYPTION_KEY_LEN:
            msg = (
                f"Key halves must be {SIGNING_KEY_LEN} bytes each, got "
                f"{len(self.signing)} and {len(self.encryption)}."
            )
            raise ConfigurationError(msg)

    @classmethod
    def from_bytes(cls, master: bytes) -> Key:
        """Split a master key of at least 64 bytes into signing and encryption keys.

        Only the first 64 bytes are used.
        """
        if len(master) < MASTER_KEY_LEN:
            msg = f"Master key must be at least {MASTER_KEY_LEN} bytes, got {len(master)}."
            raise ConfigurationError(msg)
        return cls(
            signing=bytes(master[:SIGNING_KEY_LEN]),
            encryption=bytes(master[SIGNING_KEY_LEN:MASTER_KEY_LEN]),
        )

    @classmethod
    def derive_from(cls, master: bytes) -> Key:
        """Derive a full key from a secret of at least 32 bytes using HKDF-SHA256."""
        if len(master) < MIN_DERIVE_LEN:
            msg = f"Secret must be at least {MIN_DERIVE_LEN} bytes to derive a key, got {len(master)}."
            raise ConfigurationError(msg)
        hkdf = HKDF(algorithm=hashes.SHA256(), length=MASTER_KEY_LEN, salt=None, info=_HKDF_INFO)
        return cls.from_bytes(hkdf.derive(bytes(master)))

    @classmethod
    def generate(cls) -> Key:
        """Return a new random key."""
        return cls.from_bytes(secrets.token_bytes(MASTER_KEY_LEN))

    @property
    def master(self) -> bytes:
        """The 64-byte master key (signing followed by encryption)."""
        return self.signing + self.encryption

    def __repr__(self) -> str:
        return "Key(<redacted>)"
