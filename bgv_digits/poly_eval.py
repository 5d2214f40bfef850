"""Evaluate an integer polynomial on a ciphertext."""

from typing import Dict, Sequence

from .ciphertext import Ciphertext


def poly_eval(ctxt: Ciphertext, coeffs: Sequence[int]) -> Ciphertext:
    """Return an encryption of sum(coeffs[k] * x^k) for x the plaintext of ctxt.

    Powers are built as x^k = x^(2^j) * x^(k - 2^j) with 2^j < k <= 2^(j+1),
    so x^k sits ceil(log2 k) levels below the input.
    """
    coeffs = list(coeffs)
    while len(coeffs) > 1 and coeffs[-1] == 0:
        coeffs.pop()
    degree = len(coeffs) - 1

    powers: Dict[int, Ciphertext] = {1: ctxt}
    for k in range(2, degree + 1):
        high = 1 << ((k - 1).bit_length() - 1)
        powers[k] = powers[high].multiply(powers[k - high])

    result = ctxt.mul_constant(0)
    for k in range(1, degree + 1):
        if coeffs[k] % ctxt.ptxt_space:
            result = result + powers[k].mul_constant(coeffs[k])
    return result.add_constant(coeffs[0])
