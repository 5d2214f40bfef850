"""p-adic digit extraction on leveled BGV ciphertexts."""

from .bgv import BGV
from .ciphertext import Ciphertext
from .context import EncryptionContext
from .digit_polynomial import DigitPolynomial, build_digit_polynomial
from .errors import HEError, InternalConsistencyError, LevelExhaustedError
from .extraction import PowerMap, PowerStrategy, extract_digits, extraction_depth
from .keys import PublicKey, SecretKey
from .padic import padic_digits
from .poly_eval import poly_eval
