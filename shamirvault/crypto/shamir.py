"""Shamir (t+1-of-n) secret sharing over F_p.

API
---
ShamirScheme(degree).split(secret, n)     -> list of Share(x, y)
ShamirScheme(degree).reconstruct(shares)  -> secret   (needs >= degree + 1 shares)

``degree`` is the threshold minus one: a degree-2 polynomial needs 3 shares.
Module-level ``split`` / ``reconstruct`` use a default scheme backed by the
operating system's secure random source.
"""

from __future__ import annotations

import secrets
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence

from shamirvault.config import (
    COORDINATE_STRATEGY,
    DEFAULT_DEGREE,
    MAX_RANDOM_COORDINATE,
    MIN_DEGREE,
    PRIME,
)
from shamirvault.crypto import field
from shamirvault.crypto.polynomial import Polynomial
from shamirvault.errors import DuplicateCoordinate, InsufficientShares, InvalidParameters


class Share(NamedTuple):
    x: int
    y: int


Observer = Callable[[str, Dict[str, Any]], Any]

COORDINATE_STRATEGIES = ("sequential", "random")

# SystemRandom draws from os.urandom and is safe to share between threads.
_system_random = secrets.SystemRandom()


def _check_degree(degree: int) -> None:
    if degree < MIN_DEGREE:
        raise InvalidParameters(f"Degree must be >= {MIN_DEGREE}, got {degree}")


class ShamirScheme:
    """Split and reconstruct secrets with a fixed default degree.

    *rng* is anything with ``randrange(start, stop)``; pass a seeded
    ``random.Random`` for reproducible tests.
    """

    def __init__(
        self,
        degree: int = DEFAULT_DEGREE,
        rng=None,
        prime: int = PRIME,
        coordinates: str = COORDINATE_STRATEGY,
    ) -> None:
        _check_degree(degree)
        if coordinates not in COORDINATE_STRATEGIES:
            raise InvalidParameters(f"Unknown coordinate strategy: {coordinates!r}")
        self.degree = degree
        self.prime = prime
        self.coordinates = coordinates
        self._rng = rng if rng is not None else _system_random

    # ---- split ----

    def split(self, secret: int, party_count: int, degree: Optional[int] = None) -> List[Share]:
        """Split *secret* into *party_count* shares; any ``degree + 1`` recover it.

        A random polynomial f of the given degree is chosen with f(0) = secret.
        Shares are (x_i, f(x_i)) for pairwise-distinct nonzero x_i.
        """
        degree = self.degree if degree is None else degree
        _check_degree(degree)
        if party_count < degree + 1:
            raise InvalidParameters(
                f"Party count must be >= degree + 1 = {degree + 1}, got {party_count}"
            )
        if not 0 <= secret < self.prime:
            raise InvalidParameters("Secret must lie in [0, PRIME)")

        poly = Polynomial.random(degree, secret, self._rng, self.prime, modulus=self.prime)
        return [Share(x, poly.evaluate_at(x)) for x in self._coordinates(party_count)]

    def _coordinates(self, party_count: int) -> List[int]:
        if self.coordinates == "sequential":
            return list(range(1, party_count + 1))

        if party_count > MAX_RANDOM_COORDINATE:
            raise InvalidParameters(
                f"Cannot pick {party_count} distinct coordinates from 1..{MAX_RANDOM_COORDINATE}"
            )
        xs: List[int] = []
        while len(xs) < party_count:
            x = self._rng.randrange(1, MAX_RANDOM_COORDINATE + 1)
            if x not in xs:
                xs.append(x)
        return xs

    # ---- reconstruct ----

    def reconstruct(
        self,
        shares: Sequence[Share],
        degree: Optional[int] = None,
        observer: Optional[Observer] = None,
    ) -> int:
        """Recover the secret with Lagrange interpolation at x = 0.

        Any ``degree + 1`` distinct shares in any order suffice; the first
        ``degree + 1`` supplied are used.  *observer*, when given, is called as
        ``observer("lagrange_term", {"x": x_i, "weight": w_i})`` per term.
        """
        degree = self.degree if degree is None else degree
        _check_degree(degree)
        quorum = self._quorum(shares, degree)

        secret = 0
        for j, (xj, yj) in enumerate(quorum):
            num = 1
            den = 1
            for m, (xm, _) in enumerate(quorum):
                if m == j:
                    continue
                num = field.mul(num, field.neg(xm, self.prime), self.prime)       # (0 - x_m)
                den = field.mul(den, field.sub(xj, xm, self.prime), self.prime)  # (x_j - x_m)
            weight = field.div(num, den, self.prime)
            if observer is not None:
                observer("lagrange_term", {"x": xj, "weight": weight})
            secret = field.add(secret, field.mul(yj, weight, self.prime), self.prime)
        return secret

    def _quorum(self, shares: Sequence[Share], degree: int) -> List[Share]:
        """Validate *shares* and return the first ``degree + 1`` as field elements."""
        required = degree + 1
        if len(shares) < required:
            raise InsufficientShares(required=required, got=len(shares))

        seen = set()
        normalized: List[Share] = []
        for x, y in shares:
            xr = field.reduce(x, self.prime)
            if xr == 0:
                raise InvalidParameters("Share coordinate x must be nonzero")
            if xr in seen:
                raise DuplicateCoordinate(x)
            seen.add(xr)
            normalized.append(Share(xr, field.reduce(y, self.prime)))
        return normalized[:required]

    # ---- helpers ----

    def lagrange_at(self, points: Sequence[Share], x_target: int) -> int:
        """Evaluate the interpolating polynomial of *points* at ``x_target``."""
        k = len(points)
        result = 0
        for j in range(k):
            xj, yj = points[j]
            num = 1
            den = 1
            for m in range(k):
                if m == j:
                    continue
                xm = points[m][0]
                num = field.mul(num, field.sub(x_target, xm, self.prime), self.prime)
                den = field.mul(den, field.sub(xj, xm, self.prime), self.prime)
            coeff = field.div(num, den, self.prime)
            result = field.add(result, field.mul(yj, coeff, self.prime), self.prime)
        return result

    def verify_shares(self, shares: Sequence[Share], degree: Optional[int] = None) -> bool:
        """True if every share lies on the polynomial fixed by the first quorum."""
        degree = self.degree if degree is None else degree
        _check_degree(degree)
        quorum = self._quorum(shares, degree)
        for x, y in shares[len(quorum):]:
            if self.lagrange_at(quorum, x) != field.reduce(y, self.prime):
                return False
        return True


_default_scheme = ShamirScheme(degree=DEFAULT_DEGREE)


def split(secret: int, party_count: int, degree: int = DEFAULT_DEGREE) -> List[Share]:
    """Split *secret* with the process-wide default scheme."""
    return _default_scheme.split(secret, party_count, degree)


def reconstruct(
    shares: Sequence[Share],
    degree: int = DEFAULT_DEGREE,
    observer: Optional[Observer] = None,
) -> int:
    """Reconstruct a secret with the process-wide default scheme."""
    return _default_scheme.reconstruct(shares, degree, observer)
