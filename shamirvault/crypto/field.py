"""Prime-field arithmetic F_p.

All values are Python ints reduced mod *p* (``PRIME`` unless a different
modulus is passed explicitly).
"""

from __future__ import annotations

from typing import Tuple

from shamirvault.config import PRIME
from shamirvault.errors import ModularInverseUndefined


def add(a: int, b: int, p: int = PRIME) -> int:
    """Field addition."""
    return (a + b) % p


def sub(a: int, b: int, p: int = PRIME) -> int:
    """Field subtraction."""
    return (a - b) % p


def mul(a: int, b: int, p: int = PRIME) -> int:
    """Field multiplication."""
    return (a * b) % p


def neg(a: int, p: int = PRIME) -> int:
    """Additive inverse."""
    return (-a) % p


def reduce(a: int, p: int = PRIME) -> int:
    """Reduce an integer into [0, p)."""
    return a % p


def egcd(a: int, b: int) -> Tuple[int, int, int]:
    """Extended Euclid: return ``(g, s, t)`` with ``a*s + b*t == g == gcd(a, b)``."""
    old_r, r = a, b
    old_s, s = 1, 0
    old_t, t = 0, 1
    while r != 0:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_s, s = s, old_s - q * s
        old_t, t = t, old_t - q * t
    return old_r, old_s, old_t


def inv(a: int, p: int = PRIME) -> int:
    """Multiplicative inverse mod *p* via the extended Euclidean algorithm."""
    a = a % p
    if a == 0:
        raise ModularInverseUndefined(a, p)
    g, s, _ = egcd(a, p)
    if g != 1:
        raise ModularInverseUndefined(a, p)
    return s % p


def div(a: int, b: int, p: int = PRIME) -> int:
    """Field division ``a / b``."""
    return mul(a, inv(b, p), p)
