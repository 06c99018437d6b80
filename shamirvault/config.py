"""Global configuration for shamirvault."""

import os

# ---------- Finite-field prime ----------
# All share arithmetic is mod PRIME.  M521 comfortably exceeds any 256-bit
# private key, so every secret is a field element.
PRIME = 2**521 - 1  # Mersenne prime M521

# ---------- Shamir parameters ----------
MIN_DEGREE = 2       # threshold - 1; quorum is degree + 1 shares


def _degree_from_env(raw: str) -> int:
    """Parse SHAMIRVAULT_DEFAULT_DEGREE; values below MIN_DEGREE are rejected."""
    degree = int(raw)
    if degree < MIN_DEGREE:
        raise ValueError(
            f"SHAMIRVAULT_DEFAULT_DEGREE must be >= {MIN_DEGREE}, got {degree}"
        )
    return degree


DEFAULT_DEGREE = _degree_from_env(os.environ.get("SHAMIRVAULT_DEFAULT_DEGREE", "2"))

# ---------- Evaluation coordinates ----------
# "sequential": x = 1..n   |   "random": distinct x in [1, MAX_RANDOM_COORDINATE]
COORDINATE_STRATEGY = os.environ.get("SHAMIRVAULT_COORDINATES", "sequential")
MAX_RANDOM_COORDINATE = 255

# ---------- Edge encoding ----------
SECRET_HEX_WIDTH = 64   # 32-byte private keys
SHARE_SEPARATOR = "||"
