"""Test utilities: cached schemes and cleartext reference values."""

from functools import lru_cache

from bgv_digits import BGV, EncryptionContext, extraction_depth, padic_digits


@lru_cache(maxsize=None)
def make_scheme(p, r, levels=None, d=8, n_slots=4):
    """Key-generated BGV instance with enough levels to extract r digits."""
    if levels is None:
        levels = max(extraction_depth(p, r), 1)
    context = EncryptionContext.create(p, r, levels=levels, d=d, n_slots=n_slots)
    bgv = BGV(context, seed=1234)
    bgv.gen_key()
    return bgv


def node_representative(z, p):
    """Residue of z mod p in the interpolation node set {-(p//2), ..., p-1-p//2}"""
    bottom = -(p // 2)
    return (z - bottom) % p + bottom


def expected_digit_slots(values, p, r, shortcut):
    """Per-digit lists of slot values the decryption of extract_digits should give."""
    expansions = [padic_digits(z, p, r) for z in values]
    result = []
    for j in range(r):
        modulus = p if shortcut else p ** (r - j)
        result.append([digits[j] % modulus for digits in expansions])
    return result
