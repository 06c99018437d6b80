"""Secret service: split wallet private keys into stored shares and recover them.

The service owns the hex/int conversion at the edge and the mapping between
shares and ``PartialSecret`` records; the arithmetic lives in
``shamirvault.crypto.shamir``.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from shamirvault.crypto import encoding
from shamirvault.crypto.shamir import ShamirScheme, Share
from shamirvault.errors import InvalidParameters, SessionNotFound
from shamirvault.vault.audit import AuditLog
from shamirvault.vault.models import PartialSecret, User, Wallet
from shamirvault.vault.store import InMemoryUserStore, ShareStore, UserStore

logger = logging.getLogger(__name__)


class SecretService:
    def __init__(
        self,
        store: ShareStore,
        scheme: Optional[ShamirScheme] = None,
        audit: Optional[AuditLog] = None,
        users: Optional[UserStore] = None,
    ) -> None:
        self.store = store
        self.scheme = scheme if scheme is not None else ShamirScheme()
        self.audit = audit
        self.users = users if users is not None else InMemoryUserStore()

    # ---- pure helpers ----

    def split_secret(self, secret_hex: str, degree: int, parties: int) -> List[Share]:
        """Parse *secret_hex* and split it into *parties* shares."""
        secret = encoding.parse_secret_hex(secret_hex)
        return self.scheme.split(secret, parties, degree)

    def recover_secret(self, shares: Sequence[Share], degree: int) -> str:
        """Reconstruct a secret from *shares* and render it as hex."""
        observer = self.audit.append if self.audit is not None else None
        return encoding.format_secret_hex(self.scheme.reconstruct(shares, degree, observer))

    # ---- store-backed workflow ----

    def _save_shares(
        self, shares: Sequence[Share], degree: int, public_key: str, user_id: str
    ) -> List[PartialSecret]:
        records = [PartialSecret.from_share(s, user_id, public_key, degree) for s in shares]
        saved = self.store.save_many(records)
        logger.info("Stored %d shares for %s (degree=%d)", len(saved), public_key, degree)
        if self.audit is not None:
            self.audit.append(
                "split", {"public_key": public_key, "parties": len(shares), "degree": degree}
            )
        return saved

    def partition(
        self,
        secret_hex: str,
        degree: int,
        parties: int,
        public_key: str,
        user_id: str,
    ) -> List[PartialSecret]:
        """Split a private key and persist one record per share."""
        shares = self.split_secret(secret_hex, degree, parties)
        return self._save_shares(shares, degree, public_key, user_id)

    def register_wallet(
        self, public_key: str, secret_hex: str, degree: int, holders_count: int
    ) -> User:
        """Store a user owning the wallet *public_key* and share out its private key.

        Registering the same wallet again returns the existing user and
        replaces its shares with a fresh split.
        """
        if holders_count < degree + 1:
            raise InvalidParameters(
                f"Number of holders {holders_count} must be >= degree + 1 = {degree + 1}"
            )
        shares = self.split_secret(secret_hex, degree, holders_count)

        user = User(wallets=[Wallet(pub_key=public_key, degree=degree)])
        user_id = self.users.create_user(user)
        removed = self.store.delete_by_public_key(public_key)
        if removed:
            logger.info("Replacing %d existing shares for %s", removed, public_key)
        self._save_shares(shares, degree, public_key, user_id)
        return user.model_copy(update={"id": user_id})

    def recover(self, public_key: str, user_id: Optional[str] = None) -> str:
        """Load the shares stored for *public_key* and return the private key as hex."""
        records = self.store.find_by_public_key(public_key, user_id)
        if not records:
            raise SessionNotFound(public_key)

        degrees = {r.secret_degree for r in records}
        if len(degrees) != 1:
            raise InvalidParameters(
                f"Shares for {public_key} disagree on degree: {sorted(degrees)}"
            )
        degree = degrees.pop()

        logger.debug("Recovering %s from %d stored shares", public_key, len(records))
        secret_hex = self.recover_secret([r.share for r in records], degree)
        if self.audit is not None:
            self.audit.append(
                "reconstruct", {"public_key": public_key, "shares": len(records)}
            )
        return secret_hex
