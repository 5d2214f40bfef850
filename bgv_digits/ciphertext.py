"""
Leveled BGV ciphertexts.

A ciphertext (c_0, ..., c_k) at level l decrypts to [sum c_i s^i]_{Q_l} = m + t*v
where t is the plaintext space. Operations return new ciphertexts and never
mutate their operands.
"""

import math

from .errors import LevelExhaustedError


class Ciphertext:
    def __init__(self, parts, level, ptxt_space, public_key):
        self.parts = list(parts)
        self.level = level
        self.ptxt_space = ptxt_space
        self.public_key = public_key

    @property
    def context(self):
        return self.public_key.context

    @property
    def modulus(self):
        return self.context.modulus(self.level)

    @property
    def size(self):
        return len(self.parts)

    @property
    def effective_r(self):
        """Number of base-p digits the plaintext space p^k supports"""
        return self.context.power_of_p(self.ptxt_space)

    def copy(self):
        return Ciphertext([part.copy() for part in self.parts], self.level,
                          self.ptxt_space, self.public_key)

    def __repr__(self):
        return (f"Ciphertext(size={self.size}, level={self.level}, "
                f"ptxt_space={self.ptxt_space})")

    # ------------------------------------------------------------------
    # Additive operations
    # ------------------------------------------------------------------

    def _aligned(self, other):
        if other.public_key is not self.public_key:
            raise ValueError("ciphertexts are encrypted under different keys")
        level = min(self.level, other.level)
        return self.mod_switch_to(level), other.mod_switch_to(level)

    def __add__(self, other):
        if isinstance(other, int):
            return self.add_constant(other)
        a, b = self._aligned(other)
        ring, q = a.context.ring, a.modulus
        n_parts = max(a.size, b.size)
        zero = ring.zeros(a.context.n_slots)
        parts = []
        for i in range(n_parts):
            x = a.parts[i] if i < a.size else zero
            y = b.parts[i] if i < b.size else zero
            parts.append(ring.add(x, y, q))
        return Ciphertext(parts, a.level, math.gcd(a.ptxt_space, b.ptxt_space), a.public_key)

    def __neg__(self):
        ring, q = self.context.ring, self.modulus
        return Ciphertext([ring.neg(part, q) for part in self.parts], self.level,
                          self.ptxt_space, self.public_key)

    def __sub__(self, other):
        if isinstance(other, int):
            return self.add_constant(-other)
        return self + (-other)

    def add_constant(self, k):
        """Add the integer k to every slot"""
        q = self.modulus
        k = _centered(k, self.ptxt_space)
        c0 = self.parts[0].copy()
        c0[:, 0] = (c0[:, 0] + k) % q
        return Ciphertext([c0] + self.parts[1:], self.level, self.ptxt_space, self.public_key)

    # ------------------------------------------------------------------
    # Multiplicative operations
    # ------------------------------------------------------------------

    def __mul__(self, other):
        if isinstance(other, int):
            return self.mul_constant(other)
        return self.multiply(other)

    __rmul__ = __mul__

    def mul_constant(self, k):
        """Multiply every slot by the integer k; consumes no level"""
        ring, q = self.context.ring, self.modulus
        k = _centered(k, self.ptxt_space)
        return Ciphertext([ring.mul_scalar(part, k, q) for part in self.parts],
                          self.level, self.ptxt_space, self.public_key)

    def multiply(self, other):
        """Tensor, relinearize, then switch down one level"""
        a, b = self._aligned(other)
        if a.level == 0:
            raise LevelExhaustedError("cannot multiply at level 0")
        if a.size != 2 or b.size != 2:
            raise ValueError("multiplication expects relinearized ciphertexts")
        ring, q = a.context.ring, a.modulus
        a0, a1 = a.parts
        b0, b1 = b.parts
        d0 = ring.mul(a0, b0, q)
        d1 = ring.add(ring.mul(a0, b1, q), ring.mul(a1, b0, q), q)
        d2 = ring.mul(a1, b1, q)
        product = Ciphertext([d0, d1, d2], a.level,
                             math.gcd(a.ptxt_space, b.ptxt_space), a.public_key)
        return product.relinearize().mod_switch_down()

    def square(self):
        return self.multiply(self)

    def cube(self):
        return self.square().multiply(self)

    def relinearize(self):
        """Bring a size-3 ciphertext back to size 2 with the key-switching keys"""
        if self.size == 2:
            return self
        if self.size != 3:
            raise ValueError(f"cannot relinearize a ciphertext of size {self.size}")
        context = self.context
        ring, q = context.ring, self.modulus
        base = 1 << context.relin_base_bits
        c0, c1, c2 = self.parts
        # Decompose c2 into digits base 2^w so each key product stays small
        for i in range(context.relin_digits(self.level)):
            digit = (c2 // (base ** i)) % base
            k0, k1 = self.public_key.relin_key(i, self.level)
            c0 = ring.add(c0, ring.mul(digit, k0, q), q)
            c1 = ring.add(c1, ring.mul(digit, k1, q), q)
        return Ciphertext([c0, c1], self.level, self.ptxt_space, self.public_key)

    # ------------------------------------------------------------------
    # Level and plaintext-space management
    # ------------------------------------------------------------------

    def mod_switch_down(self):
        """Scale from Q_l to Q_{l-1}; the plaintext is unchanged since q_l = 1 mod t"""
        if self.level == 0:
            raise LevelExhaustedError("ciphertext is already at level 0")
        context = self.context
        ring = context.ring
        q = context.primes[self.level]
        new_modulus = context.modulus(self.level - 1)
        t = self.ptxt_space
        t_inv = pow(t, -1, q)
        parts = []
        for part in self.parts:
            # delta = -part mod q and delta = 0 mod t, so part + delta divides by q
            delta = t * ring.mod_center((-part * t_inv) % q, q)
            parts.append(((part + delta) // q) % new_modulus)
        return Ciphertext(parts, self.level - 1, t, self.public_key)

    def mod_switch_to(self, level):
        if level > self.level:
            raise ValueError(f"cannot switch up from level {self.level} to {level}")
        ctxt = self
        while ctxt.level > level:
            ctxt = ctxt.mod_switch_down()
        return ctxt

    def divide_by_p(self):
        """Divide every slot by p (slots must be divisible by p) and drop one level"""
        p = self.context.p
        if self.ptxt_space <= p:
            raise ValueError(f"cannot divide by p at plaintext space {self.ptxt_space}")
        ring, q = self.context.ring, self.modulus
        p_inv = pow(p, -1, q)
        divided = Ciphertext([ring.mul_scalar(part, p_inv, q) for part in self.parts],
                             self.level, self.ptxt_space // p, self.public_key)
        return divided.mod_switch_down()

    def reduce_ptxt_space(self, t):
        """Reinterpret the ciphertext modulo a divisor t of its plaintext space"""
        if self.ptxt_space % t != 0:
            raise ValueError(f"{t} does not divide the plaintext space {self.ptxt_space}")
        return Ciphertext(self.parts, self.level, t, self.public_key)


def _centered(k, t):
    k %= t
    return k - t if k > t // 2 else k
