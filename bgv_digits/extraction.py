"""
Homomorphic p-adic digit extraction.

extract_digits takes a ciphertext whose slots hold integers mod p^R and
returns r ciphertexts, the j-th holding the j-th lowest base-p digit of
each slot. For odd p the digits are balanced, {-(p-1)/2, ..., (p-1)/2}, so
z = 2, p = 3 yields (-1, 1) rather than (2, 0); see padic.padic_digits.
Round i peels the digits found in rounds 0..i-1 off a fresh copy
of the input: it raises each stored residue w[j] to the "p-th power"
(a map that lifts w[j] one more p-adic digit towards its digit), subtracts
it and divides by p. That costs O(r^2) power maps and (r-1)(D+1) levels,
where D is the depth of one power map.

Caller obligation: only the free term of each slot's plaintext may be
nonzero. This is not checked; a violation yields ciphertexts that decrypt
to garbage. BGV.assert_free_terms_only is a plaintext-side check for tests
and debugging.
"""

import enum
import logging
from dataclasses import dataclass
from typing import List, Optional

from .ciphertext import Ciphertext
from .digit_polynomial import DigitPolynomial, build_digit_polynomial
from .poly_eval import poly_eval

_logger = logging.getLogger(__name__)


class PowerStrategy(enum.Enum):
    SQUARE = 'square'
    CUBE = 'cube'
    POLYNOMIAL = 'polynomial'


@dataclass(frozen=True)
class PowerMap:
    """The p-th power substitute, selected once per (p, precision)"""
    strategy: PowerStrategy
    polynomial: Optional[DigitPolynomial] = None

    @classmethod
    def for_prime(cls, p: int, e: int) -> 'PowerMap':
        if p == 2:
            return cls(PowerStrategy.SQUARE)
        if p == 3:
            return cls(PowerStrategy.CUBE)
        return cls(PowerStrategy.POLYNOMIAL, build_digit_polynomial(p, e))

    def apply(self, ctxt: Ciphertext) -> Ciphertext:
        if self.strategy is PowerStrategy.SQUARE:
            return ctxt.square()
        if self.strategy is PowerStrategy.CUBE:
            return ctxt.cube()
        if self.polynomial is None:
            raise ValueError("no digit polynomial at precision e <= 1")
        return poly_eval(ctxt, self.polynomial.coeffs)


def power_map_depth(p: int) -> int:
    """Levels consumed by one application of the power map for p"""
    return (p - 1).bit_length()


def extraction_depth(p: int, r: int) -> int:
    """Levels needed above level 0 to extract r digits"""
    return max(r - 1, 0) * (power_map_depth(p) + 1)


def extract_digits(c: Ciphertext, r: int = 0, shortcut: bool = False) -> List[Ciphertext]:
    """Extract the r lowest base-p digits of every slot of c.

    r <= 0 or r larger than c.effective_r is silently replaced by
    c.effective_r; a plaintext space of 1 gives an empty list.

    Digits are balanced for odd p, in {-(p-1)/2, ..., (p-1)/2}, and plain
    bits for p = 2 (a negative digit decrypts as its residue). padic_digits
    computes the same expansion in the clear.

    With shortcut set, digit i is returned as soon as round i produces it,
    at the highest level it can have, with plaintext space p. Otherwise
    digit i is lifted through the remaining rounds so it is exact mod
    p^(r-i); all digits are then switched to one common level.
    """
    context = c.context
    p = context.p
    rr = c.effective_r
    if r <= 0 or r > rr:
        r = rr  # how many digits to extract

    if r == 0:
        return []  # plaintext space 1 holds no digits

    power = PowerMap.for_prime(p, r)
    _logger.debug("extracting %d digits, p=%d, %s, level %d",
                  r, p, power.strategy.value, c.level)

    digits: List[Optional[Ciphertext]] = [None] * r
    w: List[Optional[Ciphertext]] = [None] * r
    for i in range(r):
        tmp = c.copy()
        for j in range(i):
            w[j] = power.apply(w[j])  # "in spirit" w[j] = w[j]^p
            tmp = (tmp - w[j]).divide_by_p()
        w[i] = tmp  # needed in the next rounds
        if shortcut:
            digits[i] = tmp.reduce_ptxt_space(p)
        _logger.debug("round %d: level %d, plaintext space %d", i, tmp.level, tmp.ptxt_space)

    if not shortcut:
        level = min(x.level for x in w)
        digits = [x.mod_switch_to(level).reduce_ptxt_space(p ** (r - i))
                  for i, x in enumerate(w)]

    _logger.info("extracted %d digits (shortcut=%s), lowest level %d",
                 r, shortcut, min(x.level for x in digits))
    return digits
