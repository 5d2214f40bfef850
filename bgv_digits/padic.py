"""Exact p-adic helpers: centered residues, modular interpolation, digit expansion."""

from typing import List, Sequence, Tuple

import sympy

from .errors import InternalConsistencyError


def centered_mod(x: int, m: int) -> int:
    """Representative of x mod m in (-m/2, m/2]"""
    x %= m
    return x - m if x > m // 2 else x


def interpolate_mod(points: Sequence[Tuple[int, int]], p: int, e: int) -> List[int]:
    """Interpolate points over Q and reduce the coefficients mod p^e.

    The x-coordinates must be pairwise distinct mod p. Every Lagrange
    denominator is then a unit in Z_p, so the coefficients are p-adic
    integers and the reduction agrees with interpolation mod p^(t+1) for
    every t < e. Coefficients are returned low degree first, centered.
    """
    xs = [x for x, _ in points]
    if len({x % p for x in xs}) != len(xs):
        raise ValueError("interpolation nodes must be distinct mod p")
    modulus = p ** e
    x = sympy.Symbol('x')
    poly = sympy.Poly(sympy.interpolate(list(points), x), x, domain=sympy.QQ)
    coeffs = []
    for c in reversed(poly.all_coeffs()):
        c = sympy.Rational(c)
        num, den = int(c.p), int(c.q)
        if den % p == 0:
            raise InternalConsistencyError(f"coefficient {c} is not p-integral for p={p}")
        coeffs.append(centered_mod(num * pow(den, -1, modulus), modulus))
    return coeffs


def digit_representative(z: int, p: int) -> int:
    """The fixed point of the p-th power map congruent to z mod p.

    Squaring fixes {0, 1}; for odd p the map fixes the balanced set
    {-(p-1)/2, ..., (p-1)/2}.
    """
    return z % p if p == 2 else centered_mod(z, p)


def padic_digits(z: int, p: int, r: int) -> List[int]:
    """The r lowest base-p digits of z mod p^r, as produced by digit extraction"""
    z %= p ** r
    digits = []
    for _ in range(r):
        digit = digit_representative(z, p)
        digits.append(digit)
        z = (z - digit) // p
    return digits
