"""Persisted records for shares handed to the storage collaborator."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, field_validator

from shamirvault.config import MIN_DEGREE
from shamirvault.crypto import encoding
from shamirvault.crypto.shamir import Share


class PartialSecret(BaseModel):
    """One share of a private key, bound to a holder and a public key."""

    id: Optional[str] = None
    user_id: str
    public_key: str
    partial_secret: str  # "<x>||<y>"
    secret_degree: int

    @field_validator("partial_secret")
    @classmethod
    def _check_share(cls, value: str) -> str:
        encoding.decode_share(value)
        return value

    @field_validator("secret_degree")
    @classmethod
    def _check_degree(cls, value: int) -> int:
        if value < MIN_DEGREE:
            raise ValueError(f"secret_degree must be >= {MIN_DEGREE}")
        return value

    @classmethod
    def from_share(
        cls, share: Share, user_id: str, public_key: str, secret_degree: int
    ) -> "PartialSecret":
        return cls(
            user_id=user_id,
            public_key=public_key,
            partial_secret=encoding.encode_share(share),
            secret_degree=secret_degree,
        )

    @property
    def share(self) -> Share:
        return encoding.decode_share(self.partial_secret)


class Wallet(BaseModel):
    """A wallet's public key and the degree its private key was split with."""

    pub_key: str
    degree: int

    @field_validator("degree")
    @classmethod
    def _check_degree(cls, value: int) -> int:
        if value < MIN_DEGREE:
            raise ValueError(f"degree must be >= {MIN_DEGREE}")
        return value


class User(BaseModel):
    """A share owner and the wallets whose keys are held in shares."""

    id: Optional[str] = None
    wallets: List[Wallet] = []

    def wallet(self, pub_key: str) -> Optional[Wallet]:
        return next((w for w in self.wallets if w.pub_key == pub_key), None)
