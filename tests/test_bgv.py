"""Tests for the leveled BGV ciphertext operations."""

import numpy as np
import pytest

from bgv_digits import BGV, LevelExhaustedError, poly_eval

from tests.utils import make_scheme


P, R = 5, 3
T = P ** R


@pytest.fixture(scope="module")
def bgv():
    return make_scheme(P, R, levels=6)


def test_encrypt_decrypt(bgv):
    values = [0, 1, 42, T - 1]
    ct = bgv.encrypt(values)
    assert ct.level == bgv.context.max_level
    assert ct.ptxt_space == T
    assert ct.effective_r == R
    assert bgv.decrypt(ct) == values


def test_encrypt_reduces_values(bgv):
    assert bgv.decrypt(bgv.encrypt([T + 3, -1])) == [3, T - 1, 0, 0]


def test_encrypt_smaller_plaintext_space(bgv):
    ct = bgv.encrypt([7, 24], ptxt_space=P ** 2)
    assert ct.effective_r == 2
    assert bgv.decrypt(ct) == [7, 24, 0, 0]


def test_encrypt_rejects_foreign_plaintext_space(bgv):
    with pytest.raises(ValueError):
        bgv.encrypt([1], ptxt_space=6)
    with pytest.raises(ValueError):
        bgv.encrypt([1], ptxt_space=P ** (R + 1))


def test_too_many_values(bgv):
    with pytest.raises(ValueError):
        bgv.encrypt(list(range(bgv.context.n_slots + 1)))


def test_add_sub_neg(bgv):
    a = bgv.encrypt([10, 20, 30, 40])
    b = bgv.encrypt([1, 2, 3, 100])
    assert bgv.decrypt(a + b) == [11, 22, 33, 140 % T]
    assert bgv.decrypt(a - b) == [9, 18, 27, (40 - 100) % T]
    assert bgv.decrypt(-a) == [T - 10, T - 20, T - 30, T - 40]


def test_constants(bgv):
    a = bgv.encrypt([10, 20, 30, 40])
    assert bgv.decrypt(a + 5) == [15, 25, 35, 45]
    assert bgv.decrypt(a - 11) == [T - 1, 9, 19, 29]
    assert bgv.decrypt(a * 3) == [30, 60, 90, 120]
    assert bgv.decrypt(4 * a) == [40, 80, 120, 160 % T]
    assert (a * 3).level == a.level


def test_multiply_consumes_one_level(bgv):
    a = bgv.encrypt([2, 3, 11, 100])
    b = bgv.encrypt([5, 7, 13, 2])
    product = a * b
    assert product.size == 2
    assert product.level == a.level - 1
    assert bgv.decrypt(product) == [10, 21, 143 % T, 200 % T]


def test_square_and_cube(bgv):
    a = bgv.encrypt([2, 3, 4, T - 1])
    assert bgv.decrypt(a.square()) == [4, 9, 16, 1]
    cube = a.cube()
    assert cube.level == a.level - 2
    assert bgv.decrypt(cube) == [8, 27, 64, T - 1]


def test_repeated_squaring(bgv):
    a = bgv.encrypt([2, 3, 1, 0])
    ct = a
    for _ in range(4):
        ct = ct.square()
    assert bgv.decrypt(ct) == [pow(2, 16, T), pow(3, 16, T), 1, 0]


def test_add_aligns_levels(bgv):
    a = bgv.encrypt([3, 4, 5, 6])
    b = a.square()
    total = a + b
    assert total.level == b.level
    assert bgv.decrypt(total) == [12, 20, 30, 42]


def test_mod_switch_preserves_plaintext(bgv):
    a = bgv.encrypt([1, 2, 3, 124])
    switched = a.mod_switch_to(0)
    assert switched.level == 0
    assert bgv.decrypt(switched) == [1, 2, 3, 124]
    assert a.mod_switch_to(a.level) is a
    with pytest.raises(ValueError):
        switched.mod_switch_to(1)


def test_mod_switch_below_zero(bgv):
    a = bgv.encrypt([1]).mod_switch_to(0)
    with pytest.raises(LevelExhaustedError):
        a.mod_switch_down()


def test_multiply_at_level_zero(bgv):
    a = bgv.encrypt([1]).mod_switch_to(0)
    with pytest.raises(LevelExhaustedError):
        a * a


def test_divide_by_p(bgv):
    a = bgv.encrypt([0, 5, 50, 120])
    divided = a.divide_by_p()
    assert divided.ptxt_space == P ** 2
    assert divided.level == a.level - 1
    assert bgv.decrypt(divided) == [0, 1, 10, 24]


def test_divide_by_p_twice(bgv):
    a = bgv.encrypt([0, 25, 50, 100])
    twice = a.divide_by_p().divide_by_p()
    assert twice.ptxt_space == P
    assert twice.level == a.level - 2
    assert bgv.decrypt(twice) == [0, 1, 2, 4]


def test_divide_by_p_needs_room(bgv):
    a = bgv.encrypt([0], ptxt_space=P)
    with pytest.raises(ValueError):
        a.divide_by_p()


def test_reduce_ptxt_space(bgv):
    a = bgv.encrypt([7, 33, 124])
    reduced = a.reduce_ptxt_space(P)
    assert reduced.ptxt_space == P
    assert bgv.decrypt(reduced) == [2, 3, 4, 0]
    with pytest.raises(ValueError):
        a.reduce_ptxt_space(3)


def test_add_mixes_plaintext_spaces(bgv):
    a = bgv.encrypt([7])
    b = bgv.encrypt([3], ptxt_space=P)
    total = a + b
    assert total.ptxt_space == P
    assert bgv.decrypt(total)[0] == 0


def test_different_keys_rejected(bgv):
    other = BGV(bgv.context, seed=99)
    other.gen_key()
    with pytest.raises(ValueError):
        bgv.encrypt([1]) + other.encrypt([1])


def test_copy_is_independent(bgv):
    a = bgv.encrypt([4])
    b = a.copy()
    b.parts[0][0, 0] += 1
    assert bgv.decrypt(a)[0] == 4


def test_noise_budget_shrinks(bgv):
    a = bgv.encrypt([3, 4, 5, 6])
    fresh = bgv.noise_budget(a)
    assert fresh > 0
    switched = a.mod_switch_to(2)
    assert bgv.noise_budget(switched) > 0
    assert bgv.noise_budget(switched) < fresh


def test_assert_free_terms_only(bgv):
    bgv.assert_free_terms_only(bgv.encrypt([1, 2, 3, 4]))
    plaintext = np.zeros((bgv.context.n_slots, bgv.context.d), dtype=object)
    plaintext[0, 1] = 1
    with pytest.raises(ValueError):
        bgv.assert_free_terms_only(bgv.encrypt(plaintext))


def test_decrypt_polynomial_full_plaintext(bgv):
    plaintext = np.zeros((bgv.context.n_slots, bgv.context.d), dtype=object)
    plaintext[1, 0] = 3
    plaintext[1, 1] = 2
    ct = bgv.encrypt(plaintext)
    # (3 + 2X)^2 = 9 + 12X + 4X^2
    squared = bgv.decrypt_polynomial(ct.square())
    assert list(squared[1, :3]) == [9, 12, 4]


def test_poly_eval(bgv):
    a = bgv.encrypt([0, 1, 2, 3])
    # 1 + 2x + x^3
    result = poly_eval(a, [1, 2, 0, 1])
    assert bgv.decrypt(result) == [1, 4, 13, 34]
    assert result.level == a.level - 2


def test_poly_eval_depth_is_logarithmic(bgv):
    a = bgv.encrypt([2, 1, 0, 3])
    result = poly_eval(a, [0, 0, 0, 0, 0, 1])
    assert result.level == a.level - 3
    assert bgv.decrypt(result) == [32, 1, 0, 243 % T]


def test_poly_eval_constant_and_trailing_zeros(bgv):
    a = bgv.encrypt([5, 6])
    result = poly_eval(a, [7, 0, 0])
    assert bgv.decrypt(result) == [7, 7, 7, 7]
    assert result.level == a.level


def test_decrypt_needs_secret_key():
    scheme = make_scheme(P, R, levels=6)
    ct = scheme.encrypt([1])
    fresh = BGV(scheme.context)
    with pytest.raises(ValueError):
        fresh.decrypt(ct)
    with pytest.raises(ValueError):
        fresh.encrypt([1])
