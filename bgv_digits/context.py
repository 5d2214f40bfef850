"""Scheme-wide parameters shared by every key and ciphertext of one BGV instance."""

import logging
import math
from dataclasses import dataclass
from functools import cached_property
from typing import Tuple

import sympy

from .errors import LevelExhaustedError
from .ring import PolynomialRing

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncryptionContext:
    """Public parameters for the leveled BGV scheme"""
    p: int                    # Plaintext prime
    r: int                    # Slots hold integers mod p^r
    d: int                    # Ring degree, R = Z[X]/(X^d + 1)
    n_slots: int              # Independent lanes per ciphertext
    primes: Tuple[int, ...]   # Modulus chain q_0 < q_1 < ... ; level l uses q_0*...*q_l
    std_dev: float = 3.2      # Standard deviation of the error distribution
    relin_base_bits: int = 30  # Digit size for relinearization key decomposition

    def __post_init__(self):
        if not isinstance(self.p, int) or not sympy.isprime(self.p):
            raise ValueError(f"p must be a prime, got {self.p}")
        if self.r < 1:
            raise ValueError(f"r must be >= 1, got {self.r}")
        if self.d < 2 or self.d & (self.d - 1) != 0:
            raise ValueError(f"d must be a power of 2, got {self.d}")
        if self.n_slots < 1:
            raise ValueError(f"n_slots must be >= 1, got {self.n_slots}")
        if not self.primes:
            raise ValueError("modulus chain is empty")
        if len(set(self.primes)) != len(self.primes):
            raise ValueError("modulus chain primes must be distinct")
        for q in self.primes:
            if (q - 1) % self.ptxt_modulus != 0:
                raise ValueError(f"modulus {q} is not 1 mod p^r = {self.ptxt_modulus}")

    @classmethod
    def create(cls, p: int, r: int, levels: int = 8, d: int = 16, n_slots: int = 4,
               prime_bits: int = 60, **kwargs) -> 'EncryptionContext':
        """Build a context with levels + 1 primes q = 1 mod p^r of about prime_bits bits"""
        if levels < 0:
            raise ValueError(f"levels must be >= 0, got {levels}")
        step = p ** r
        if step.bit_length() >= prime_bits:
            raise ValueError(f"prime_bits={prime_bits} too small for p^r={step}")
        primes = []
        # First q = 1 mod p^r above 2^(prime_bits-1)
        q = ((1 << (prime_bits - 1)) // step + 1) * step + 1
        while len(primes) < levels + 1:
            if sympy.isprime(q):
                primes.append(q)
            q += step
        context = cls(p=p, r=r, d=d, n_slots=n_slots, primes=tuple(primes), **kwargs)
        _logger.info("context p=%d r=%d d=%d slots=%d levels=%d log2(Q)=%d",
                     p, r, d, n_slots, context.max_level, context.modulus(context.max_level).bit_length())
        return context

    @property
    def ptxt_modulus(self) -> int:
        return self.p ** self.r

    @property
    def max_level(self) -> int:
        return len(self.primes) - 1

    @cached_property
    def ring(self) -> PolynomialRing:
        return PolynomialRing(self.d)

    def modulus(self, level: int) -> int:
        """Ciphertext modulus Q_level = q_0 * ... * q_level"""
        if level < 0:
            raise LevelExhaustedError(f"level {level} is below the bottom of the modulus chain")
        if level > self.max_level:
            raise ValueError(f"level {level} exceeds the top level {self.max_level}")
        return math.prod(self.primes[:level + 1])

    def relin_digits(self, level: int) -> int:
        """Number of base-2^relin_base_bits digits needed to cover Q_level"""
        return -(-self.modulus(level).bit_length() // self.relin_base_bits)

    def power_of_p(self, t: int) -> int:
        """Exponent k with t == p^k; raises ValueError if t is not a power of p"""
        k = 0
        while t > 1 and t % self.p == 0:
            t //= self.p
            k += 1
        if t != 1:
            raise ValueError(f"plaintext modulus is not a power of {self.p}")
        return k
