"""Immutable polynomials over the integers or over F_p.

Coefficients are stored lowest degree first, so ``Polynomial([1, 2, 3])`` is
``f(x) = 1 + 2x + 3x^2``.  With ``modulus=None`` arithmetic is exact integer
arithmetic; with a prime modulus every coefficient is kept in ``[0, p)``.

Every operation returns a new, already-normalized instance.
"""

from __future__ import annotations

from dataclasses import dataclass, field as dc_field
from typing import Iterable, List, Optional, Sequence, Tuple

from shamirvault.crypto import field
from shamirvault.errors import DuplicateCoordinate, InvalidParameters

Point = Tuple[int, int]


def _strip_trailing_zeros(coeffs: Sequence[int]) -> Tuple[int, ...]:
    end = len(coeffs)
    while end > 0 and coeffs[end - 1] == 0:
        end -= 1
    return tuple(coeffs[:end])


@dataclass(frozen=True)
class Polynomial:
    """A polynomial value with normalized coefficients.

    The zero polynomial is canonically ``(0,)`` and reports degree ``-1``.
    ``indeterminate`` only affects rendering and is ignored by ``==``.
    """

    coefficients: Tuple[int, ...]
    indeterminate: str = dc_field(default="x", compare=False)
    modulus: Optional[int] = None

    def __post_init__(self) -> None:
        coeffs = list(self.coefficients)
        for c in coeffs:
            if not isinstance(c, int) or isinstance(c, bool):
                raise InvalidParameters(f"Coefficients must be integers, got {c!r}")
        if self.modulus is not None:
            if self.modulus < 2:
                raise InvalidParameters(f"Invalid modulus: {self.modulus}")
            coeffs = [field.reduce(c, self.modulus) for c in coeffs]
        stripped = _strip_trailing_zeros(coeffs)
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "coefficients", stripped or (0,))

    # ---- constructors ----

    @classmethod
    def zero(cls, indeterminate: str = "x", modulus: Optional[int] = None) -> "Polynomial":
        return cls((0,), indeterminate, modulus)

    @classmethod
    def constant(
        cls, value: int, indeterminate: str = "x", modulus: Optional[int] = None
    ) -> "Polynomial":
        return cls((value,), indeterminate, modulus)

    @classmethod
    def random(
        cls,
        degree: int,
        constant: int,
        rng,
        bound: int,
        modulus: Optional[int] = None,
    ) -> "Polynomial":
        """Random polynomial of exactly *degree* with constant term *constant*.

        The remaining coefficients are drawn independently from
        ``rng.randrange(1, bound)``.  With a modulus, *bound* may not exceed it,
        so no draw reduces to zero and the leading term survives normalization.
        """
        if degree < 0:
            raise InvalidParameters(f"Invalid degree: {degree}")
        if bound < 2:
            raise InvalidParameters(f"Invalid coefficient bound: {bound}")
        if modulus is not None and bound > modulus:
            raise InvalidParameters(f"Coefficient bound {bound} exceeds modulus {modulus}")
        coeffs = [constant] + [rng.randrange(1, bound) for _ in range(degree)]
        return cls(tuple(coeffs), modulus=modulus)

    @classmethod
    def interpolate(cls, points: Sequence[Point], modulus: int) -> "Polynomial":
        """Return the unique polynomial of degree < len(points) through *points*.

        Built as ``Σ y_i · Π_{j≠i} (x - x_j) / (x_i - x_j)`` in F_modulus.
        """
        if not points:
            raise InvalidParameters("Need at least one point")
        xs = [field.reduce(x, modulus) for x, _ in points]
        seen = set()
        for x in xs:
            if x in seen:
                raise DuplicateCoordinate(x)
            seen.add(x)

        result = cls.zero(modulus=modulus)
        for i, (_, yi) in enumerate(points):
            basis = cls.constant(1, modulus=modulus)
            for j, xj in enumerate(xs):
                if i == j:
                    continue
                factor = cls((-xj, 1), modulus=modulus)
                basis = basis.multiply(factor).scale(field.inv(xs[i] - xj, modulus))
            result = result.add(basis.scale(yi))
        return result

    # ---- arithmetic ----

    def _check_compatible(self, other: "Polynomial") -> None:
        if self.modulus != other.modulus:
            raise ValueError(
                f"Cannot combine polynomials with moduli {self.modulus} and {other.modulus}"
            )

    def _new(self, coeffs: Iterable[int]) -> "Polynomial":
        return Polynomial(tuple(coeffs), self.indeterminate, self.modulus)

    def add(self, other: "Polynomial") -> "Polynomial":
        """Element-wise sum, the shorter operand padded with zeros."""
        self._check_compatible(other)
        a = list(self.coefficients)
        b = list(other.coefficients)
        size = max(len(a), len(b))
        a.extend([0] * (size - len(a)))
        b.extend([0] * (size - len(b)))
        return self._new(x + y for x, y in zip(a, b))

    def negate(self) -> "Polynomial":
        return self._new(-c for c in self.coefficients)

    def sub(self, other: "Polynomial") -> "Polynomial":
        self._check_compatible(other)
        return self.add(other.negate())

    def multiply(self, other: "Polynomial") -> "Polynomial":
        """Discrete convolution of the two coefficient sequences."""
        self._check_compatible(other)
        out: List[int] = [0] * (len(self.coefficients) + len(other.coefficients) - 1)
        for i, a in enumerate(self.coefficients):
            if a == 0:
                continue
            for j, b in enumerate(other.coefficients):
                out[i + j] += a * b
        return self._new(out)

    def scale(self, k: int) -> "Polynomial":
        """Multiply every coefficient by the scalar *k*."""
        return self._new(c * k for c in self.coefficients)

    def evaluate_at(self, value: int) -> int:
        """Evaluate with Horner's method using exact integer arithmetic."""
        result = 0
        if self.modulus is None:
            for c in reversed(self.coefficients):
                result = result * value + c
            return result
        for c in reversed(self.coefficients):
            result = field.add(field.mul(result, value, self.modulus), c, self.modulus)
        return result

    def degree(self) -> int:
        if self.coefficients == (0,):
            return -1
        return len(self.coefficients) - 1

    def is_zero(self) -> bool:
        return self.coefficients == (0,)

    # ---- operators ----

    __add__ = add
    __sub__ = sub
    __mul__ = multiply
    __neg__ = negate
    __call__ = evaluate_at

    # ---- rendering ----

    def as_string(self) -> str:
        """Render as ``f(x) = 1 + 2x + 3x^3``; zero non-constant terms are omitted."""
        ind = self.indeterminate
        terms = [str(self.coefficients[0])]
        for degree, coeff in enumerate(self.coefficients[1:], start=1):
            if coeff == 0:
                continue
            if degree == 1:
                terms.append(f"{coeff}{ind}")
            else:
                terms.append(f"{coeff}{ind}^{degree}")
        return f"f({ind}) = {' + '.join(terms)}"

    def __str__(self) -> str:
        return self.as_string()
