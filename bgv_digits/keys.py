"""Key containers for the leveled BGV scheme."""

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from .context import EncryptionContext


@dataclass
class SecretKey:
    """Ternary secret, one copy per slot row"""
    context: EncryptionContext
    s: np.ndarray


@dataclass
class PublicKey:
    """Encryption key and relinearization keys, all modulo the top-level modulus"""
    context: EncryptionContext
    b: np.ndarray      # -(a*s) + t*e
    a: np.ndarray      # uniform
    # relin_keys[i] = (-(a_i*s) + t*e_i + 2^(w*i) * s^2, a_i)
    relin_keys: List[Tuple[np.ndarray, np.ndarray]] = field(default_factory=list)

    def relin_key(self, i: int, level: int) -> Tuple[np.ndarray, np.ndarray]:
        """The i-th relinearization key reduced to the modulus of `level`"""
        if i >= len(self.relin_keys):
            raise ValueError(f"no relinearization key for digit {i}")
        q = self.context.modulus(level)
        k0, k1 = self.relin_keys[i]
        return k0 % q, k1 % q
