import logging

import numpy as np  # Import NumPy for the batched ring arithmetic

from .ciphertext import Ciphertext
from .context import EncryptionContext
from .keys import PublicKey, SecretKey

_logger = logging.getLogger(__name__)


class BGV:
    def __init__(self, context: EncryptionContext, seed=None):
        # context: prime p, digit capacity r, ring degree d, slots and modulus chain
        # seed: seeds the small-noise generator (uniform elements always use secrets)
        self.context = context
        self.ring = context.ring
        self.rng = np.random.default_rng(seed)
        self.sk = None
        self.pk = None

    def gen_key(self):
        ctx = self.context
        n = ctx.n_slots
        q = ctx.modulus(ctx.max_level)  # Keys live at the top of the modulus chain
        t = ctx.ptxt_modulus            # Noise is a multiple of p^r, hence of every p^k

        # Generate secret key as ternary polynomial, same secret in every slot row
        s = np.tile(self.ring.sample_ternary(self.rng, 1), (n, 1))

        # Generate random polynomial a and error polynomial e
        a = self.ring.sample_uniform(n, q)
        e = self.ring.sample_gaussian(self.rng, n, ctx.std_dev)

        # Compute public key: b = -(a*s) + t*e mod q (Ring-LWE with noise scaled by t)
        b = self.ring.sub(t * e, self.ring.mul(a, s, q), q)

        # Relinearization keys: encryptions of 2^(w*i) * s^2 for each base-2^w digit
        s2 = self.ring.mul(s, s, q)
        relin_keys = []
        for i in range(ctx.relin_digits(ctx.max_level)):
            a_i = self.ring.sample_uniform(n, q)
            e_i = self.ring.sample_gaussian(self.rng, n, ctx.std_dev)
            k0 = (t * e_i - self.ring.mul(a_i, s, q) + (1 << (ctx.relin_base_bits * i)) * s2) % q
            relin_keys.append((k0, a_i))

        self.sk = SecretKey(ctx, s)
        self.pk = PublicKey(ctx, b, a, relin_keys)
        _logger.info("generated keys with %d relinearization keys", len(relin_keys))
        return self.pk, self.sk

    def encode(self, values, ptxt_space=None):
        """Place one integer per slot in the free term of the slot's plaintext"""
        t = ptxt_space or self.context.ptxt_modulus
        # Handle single integer input by converting to list
        if isinstance(values, int):
            values = [values]
        if len(values) > self.context.n_slots:
            raise ValueError(f"{len(values)} values do not fit in {self.context.n_slots} slots")
        m_poly = self.ring.zeros(self.context.n_slots)
        for i, v in enumerate(values):
            m_poly[i, 0] = int(v) % t
        return m_poly

    def encrypt(self, m, ptxt_space=None):
        """Encrypt slot values (or a full (n_slots, d) plaintext array) at the top level"""
        if self.pk is None:
            raise ValueError("No Public Key")
        ctx = self.context
        t = ptxt_space or ctx.ptxt_modulus
        ctx.power_of_p(t)
        if ctx.ptxt_modulus % t:
            raise ValueError(f"plaintext space {t} does not divide p^r = {ctx.ptxt_modulus}")

        if isinstance(m, np.ndarray):
            m_poly = np.array(m, dtype=object) % t
        else:
            m_poly = self.encode(m, t)

        level = ctx.max_level
        q = ctx.modulus(level)
        n = ctx.n_slots

        # Generate encryption randomness and noise
        u = self.ring.sample_ternary(self.rng, n)
        e1 = self.ring.sample_gaussian(self.rng, n, ctx.std_dev)
        e2 = self.ring.sample_gaussian(self.rng, n, ctx.std_dev)

        # c0 = b*u + t*e1 + m
        c0 = (self.ring.mul(self.pk.b, u, q) + t * e1 + m_poly) % q

        # c1 = a*u + t*e2
        c1 = (self.ring.mul(self.pk.a, u, q) + t * e2) % q

        return Ciphertext([c0, c1], level, t, self.pk)

    def _noisy_plaintext(self, c):
        # Compute sum c_i * s^i mod Q_l with Horner, centered
        if self.sk is None:
            raise ValueError("No Secret Key")
        q = c.modulus
        s = self.sk.s
        acc = c.parts[-1]
        for part in reversed(c.parts[:-1]):
            acc = self.ring.add(self.ring.mul(acc, s, q), part, q)
        return self.ring.mod_center(acc, q)

    def decrypt_polynomial(self, c):
        """Full plaintext polynomial of every slot, coefficients in [0, t)"""
        return self._noisy_plaintext(c) % c.ptxt_space

    def decrypt(self, c):
        """Free term of every slot"""
        return [int(v) for v in self.decrypt_polynomial(c)[:, 0]]

    def noise_budget(self, c):
        """Bits left before decryption fails: log2(Q_l / 2) - log2(max |m + t*v|)"""
        noisy = self._noisy_plaintext(c)
        largest = max(abs(int(v)) for v in noisy.flat)
        return (c.modulus // 2).bit_length() - largest.bit_length()

    def assert_free_terms_only(self, c):
        """Raise ValueError unless every slot plaintext is a constant polynomial"""
        plaintext = self.decrypt_polynomial(c)
        if any(int(v) != 0 for v in plaintext[:, 1:].flat):
            raise ValueError("slot plaintexts have nonzero non-constant coefficients")


def demo():
    from .extraction import extract_digits, extraction_depth
    from .padic import padic_digits

    logging.basicConfig(level=logging.INFO)

    # Set parameters
    p = 5      # Plaintext prime
    r = 3      # Slots hold integers mod p^r = 125
    context = EncryptionContext.create(p, r, levels=extraction_depth(p, r), d=8, n_slots=4)

    # Create BGV instance and generate keys
    bgv = BGV(context)
    bgv.gen_key()

    # Test message
    message = [7, 42, 99, 124]
    print(f"Original message: {message}")
    ct = bgv.encrypt(message)
    print(f"Encrypted at level {ct.level}, noise budget {bgv.noise_budget(ct)} bits")

    for shortcut in (True, False):
        digits = extract_digits(ct, r, shortcut=shortcut)
        print(f"\nshortcut={shortcut}")
        for j, digit in enumerate(digits):
            print(f"  digit {j} (mod {digit.ptxt_space}, level {digit.level}): {bgv.decrypt(digit)}")

    expected = [[d % p ** (r - j) for j, d in enumerate(padic_digits(z, p, r))] for z in message]
    print(f"\nExpected digits per slot: {expected}")


# Test code
if __name__ == "__main__":
    demo()
