"""
Polynomial Ring Operations
Batched arithmetic in R_q = Z_q[X]/(X^d + 1). Every element is a numpy
object array of shape (n_slots, d): one row per slot, coefficient 0 first.
Python ints are kept throughout so that multi-prime moduli never overflow.
"""

import secrets

import numpy as np


class PolynomialRing:
    def __init__(self, d):
        if d < 2 or d & (d - 1) != 0:
            raise ValueError("d must be a power of 2")
        self.d = d

    def zeros(self, n_slots):
        return np.zeros((n_slots, self.d), dtype=object)

    def add(self, a, b, q):
        return (a + b) % q

    def sub(self, a, b, q):
        return (a - b) % q

    def neg(self, a, q):
        return (-a) % q

    def mul_scalar(self, a, scalar, q):
        return (a * scalar) % q

    def mul(self, a, b, q):
        """Multiply row by row and reduce modulo X^d + 1 and q"""
        d = self.d
        conv = np.zeros((a.shape[0], 2 * d - 1), dtype=object)
        for i in range(d):
            conv[:, i:i + d] += a[:, i:i + 1] * b
        # Negacyclic reduction: X^d = -1
        result = conv[:, :d]
        result[:, :d - 1] -= conv[:, d:]
        return result % q

    def mod_center(self, a, q):
        """Representatives in (-q/2, q/2]"""
        result = a % q
        return np.where(result > q // 2, result - q, result)

    def sample_uniform(self, n_slots, q):
        values = [secrets.randbelow(q) for _ in range(n_slots * self.d)]
        return np.array(values, dtype=object).reshape(n_slots, self.d)

    def sample_ternary(self, rng, n_slots):
        return rng.integers(-1, 2, size=(n_slots, self.d)).astype(object)

    def sample_gaussian(self, rng, n_slots, std_dev):
        """Rounded Gaussian clipped at six standard deviations"""
        bound = int(6 * std_dev)
        samples = np.round(rng.normal(0, std_dev, size=(n_slots, self.d)))
        return np.clip(samples, -bound, bound).astype(np.int64).astype(object)
