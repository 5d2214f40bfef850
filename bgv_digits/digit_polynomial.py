"""
Degree-p polynomials that act like x -> x^p on digits.

For a prime p and precision e, build_digit_polynomial returns
poly(x) = x^p + corr(x) with corr interpolating x - x^p (mod p^e) on the
centered residues {-(p//2), ..., p - 1 - p//2}. For any t < e and any z with
z = z0 (mod p^t), t >= 1, z0 one of those residues:

    poly(z) = z0 (mod p^(t+1))

corr vanishes mod p at every residue and has degree < p, so all of its
coefficients are divisible by p; that is what makes the lift work.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from .errors import InternalConsistencyError
from .padic import centered_mod, interpolate_mod

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DigitPolynomial:
    """x^p plus its correction mod p^e, coefficients low degree first"""
    p: int
    e: int
    coeffs: Tuple[int, ...]  # low degree first, centered mod p^e; coeffs[p] == 1

    @property
    def modulus(self) -> int:
        return self.p ** self.e

    @property
    def degree(self) -> int:
        return len(self.coeffs) - 1

    @property
    def correction(self) -> Tuple[int, ...]:
        return self.coeffs[:-1]

    def evaluate(self, z: int) -> int:
        """Evaluate at an integer with Horner's method, result in [0, p^e)"""
        result = 0
        for c in reversed(self.coeffs):
            result = (result * z + c) % self.modulus
        return result


@lru_cache(maxsize=None)
def build_digit_polynomial(p: int, e: int) -> Optional[DigitPolynomial]:
    """Build the digit polynomial for p and precision e; None when p < 2 or e <= 1"""
    if p < 2 or e <= 1:
        return None
    p2e = p ** e

    # x - x^p (mod p^e) on the residues centered around zero
    bottom = -(p // 2)
    points = []
    for j in range(p):
        z = bottom + j
        points.append((z, centered_mod(z - pow(z, p, p2e), p2e)))

    correction = interpolate_mod(points, p, e)
    if len(correction) > p:
        # p points always interpolate to degree <= p-1
        raise InternalConsistencyError(
            f"interpolation returned degree {len(correction) - 1} for p={p}")
    coeffs = correction + [0] * (p - len(correction)) + [1]
    _logger.debug("digit polynomial mod %d^%d: %s", p, e, coeffs)
    return DigitPolynomial(p=p, e=e, coeffs=tuple(coeffs))
