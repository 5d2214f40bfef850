"""Exceptions raised by the BGV toolkit and the digit extraction routines."""


class HEError(Exception):
    """Base class for homomorphic-encryption failures."""


class LevelExhaustedError(HEError):
    """A ciphertext ran out of levels (modulus switch below level 0)."""


class InternalConsistencyError(HEError):
    """An internal invariant failed; indicates a bug, not bad input."""
