"""
Unit tests for UBigInt and gcd_ubi
"""

import math
import pickle
import random
import unittest

from bigratio import ubigint
from bigratio import EmptyInputError, InvalidDigitError, MalformedRadixError, ParseError
from bigratio import UBigInt, gcd_ubi


def interesting_ints(rng, count):
    """Ints built from limbs that stress carries and quotient estimates:  0, 1, all ones, high bit."""
    special = [0, 1, ubigint.LIMB_MAX, 0x80000000, 0x7FFFFFFF, ubigint.LIMB_MAX - 1]
    for _ in range(count):
        limbs = [
            rng.choice(special) if rng.random() < 0.5 else rng.getrandbits(32)
            for _ in range(rng.randint(1, 7))
        ]
        yield sum(limb << (32 * i) for i, limb in enumerate(limbs))


def naive_is_prime(n):
    if n < 2:
        return False
    return all(n % d != 0 for d in range(2, math.isqrt(n) + 1))


class UBigIntTests(unittest.TestCase):

    def assertSameInt(self, expected, ubi):
        self.assertIsInstance(ubi, UBigInt)
        self.assertTrue(ubi._is_valid(), "Invalid limbs {}".format(ubi.limbs))
        self.assertEqual(expected, int(ubi))

    def test_limbs(self):
        self.assertEqual(      (0,), UBigInt(0).limbs)
        self.assertEqual(      (0,), UBigInt().limbs)
        self.assertEqual(      (1,), UBigInt(1).limbs)
        self.assertEqual((0xFFFFFFFF,), UBigInt(2**32 - 1).limbs)
        self.assertEqual(    (0, 1), UBigInt(2**32).limbs)
        self.assertEqual( (0, 0, 1), UBigInt(2**64).limbs)
        self.assertEqual(    (5, 7), UBigInt(7 * 2**32 + 5).limbs)

    def test_from_raw_normalizes(self):
        self.assertEqual((1, 1), UBigInt.from_raw([1, 1, 0, 0]).limbs)
        self.assertEqual(  (0,), UBigInt.from_raw([0, 0, 0]).limbs)
        self.assertEqual(  (0,), UBigInt.from_raw([]).limbs)

    def test_from_raw_bad_limb(self):
        with self.assertRaises(UBigInt.ConstructorValueError):
            UBigInt.from_raw([2**32])
        with self.assertRaises(UBigInt.ConstructorValueError):
            UBigInt.from_raw([-1])
        with self.assertRaises(UBigInt.ConstructorValueError):
            UBigInt.from_raw([1.0])

    def test_from_fixed_width(self):
        self.assertSameInt(2**32 - 1, UBigInt.from_u32(2**32 - 1))
        self.assertSameInt(2**64 - 1, UBigInt.from_u64(2**64 - 1))
        self.assertSameInt(2**128 - 1, UBigInt.from_u128(2**128 - 1))
        with self.assertRaises(UBigInt.ConstructorValueError):
            UBigInt.from_u32(2**32)
        with self.assertRaises(UBigInt.ConstructorValueError):
            UBigInt.from_u64(-1)
        with self.assertRaises(UBigInt.ConstructorTypeError):
            UBigInt.from_u32('1')

    def test_constructor_errors(self):
        with self.assertRaises(UBigInt.ConstructorValueError):
            UBigInt(-1)
        with self.assertRaises(UBigInt.ConstructorTypeError):
            UBigInt(1.5)
        with self.assertRaises(UBigInt.ConstructorTypeError):
            UBigInt(True)
        with self.assertRaises(UBigInt.ConstructorTypeError):
            UBigInt([1, 2])
        with self.assertRaises(TypeError):
            UBigInt(None, None)

    def test_from_string(self):
        self.assertSameInt(         0, UBigInt('0'))
        self.assertSameInt(        42, UBigInt('42'))
        self.assertSameInt(   1000000, UBigInt('1_000_000'))
        self.assertSameInt(       255, UBigInt('0xff'))
        self.assertSameInt(       255, UBigInt('0XFF'))
        self.assertSameInt( 2**32 - 1, UBigInt('0xFFFF_FFFF'))
        self.assertSameInt(     2**32, UBigInt('0x1_0000_0000'))
        self.assertSameInt(     10**9, UBigInt('1000000000'))
        self.assertSameInt(    10**30, UBigInt('1' + '0' * 30))
        self.assertSameInt(        42, UBigInt('000042'))
        self.assertSameInt(        42, UBigInt.from_string('42'))

    def test_from_string_errors(self):
        with self.assertRaises(EmptyInputError):
            UBigInt('')
        with self.assertRaises(EmptyInputError):
            UBigInt('___')
        with self.assertRaises(InvalidDigitError):
            UBigInt('12a')
        with self.assertRaises(InvalidDigitError):
            UBigInt('-5')
        with self.assertRaises(InvalidDigitError):
            UBigInt(' 5')
        with self.assertRaises(MalformedRadixError):
            UBigInt('0x')
        with self.assertRaises(MalformedRadixError):
            UBigInt('0x__')
        with self.assertRaises(InvalidDigitError):
            UBigInt('0xfg')
        with self.assertRaises(ValueError):
            UBigInt('nope')
        with self.assertRaises(ParseError):
            UBigInt('1.5')
        with self.assertRaises(UBigInt.ConstructorTypeError):
            UBigInt.from_string(5)

    def test_str_round_trip(self):
        for n in (0, 1, 9, 10, 2**32 - 1, 2**32, 10**9, 10**9 - 1, 10**18, 2**64 + 5, 10**40 + 12345, 3**100):
            self.assertEqual(str(n), str(UBigInt(n)))
            self.assertEqual(UBigInt(n), UBigInt.from_string(str(UBigInt(n))))

    def test_hex_and_repr(self):
        self.assertEqual(               '0x0', UBigInt(0).to_hex_string())
        self.assertEqual(              '0xff', UBigInt(255).to_hex_string())
        self.assertEqual(       '0x100000000', UBigInt(2**32).to_hex_string())
        self.assertEqual('0x10000000000000001', UBigInt(2**64 + 1).to_hex_string())
        self.assertEqual(     "UBigInt('42')", repr(UBigInt(42)))
        self.assertEqual(UBigInt(3**50), UBigInt(UBigInt(3**50).to_hex_string()))

    def test_to_fixed_width(self):
        self.assertEqual(2**32 - 1, UBigInt(2**32 - 1).to_u32())
        self.assertEqual(2**64 - 1, UBigInt(2**64 - 1).to_u64())
        self.assertEqual(2**128 - 1, UBigInt(2**128 - 1).to_u128())
        self.assertEqual(0, UBigInt(0).to_u32())
        with self.assertRaises(UBigInt.IntOverflowError):
            UBigInt(2**32).to_u32()
        with self.assertRaises(UBigInt.IntOverflowError):
            UBigInt(2**64).to_u64()
        with self.assertRaises(OverflowError):
            UBigInt(2**128).to_u128()

    def test_comparison(self):
        self.assertTrue(UBigInt(5) == 5)
        self.assertTrue(UBigInt(5) != 6)
        self.assertTrue(UBigInt(5) > -1)
        self.assertTrue(UBigInt(0) >= 0)
        self.assertTrue(UBigInt(2**32) > UBigInt(2**32 - 1))
        self.assertTrue(UBigInt(2**64) < 2**64 + 1)
        self.assertFalse(UBigInt(5) == 'five')
        self.assertEqual(-1, UBigInt(3).cmp_ubi(UBigInt(2**32)))
        self.assertEqual( 0, UBigInt(2**40).cmp_ubi(UBigInt(2**40)))
        self.assertEqual( 1, UBigInt(2**40 + 1).cmp_ubi(UBigInt(2**40)))
        self.assertEqual( 1, UBigInt(2**40).cmp_u32(7))
        self.assertEqual(
            [UBigInt(0), UBigInt(3), UBigInt(2**33), UBigInt(2**70)],
            sorted([UBigInt(2**70), UBigInt(3), UBigInt(0), UBigInt(2**33)])
        )

    def test_hash(self):
        self.assertEqual(hash(2**100), hash(UBigInt(2**100)))
        self.assertEqual(2, len({UBigInt(1), UBigInt(1), UBigInt(2**40)}))

    def test_bool(self):
        self.assertFalse(UBigInt(0))
        self.assertTrue(UBigInt(1))
        self.assertTrue(UBigInt(2**64))

    def test_predicates(self):
        self.assertTrue(UBigInt(0).is_zero())
        self.assertFalse(UBigInt(2**32).is_zero())
        self.assertTrue(UBigInt(1).is_one())
        self.assertFalse(UBigInt(2**32 + 1).is_one())
        self.assertTrue(UBigInt(2**40).is_even())
        self.assertFalse(UBigInt(2**40 + 1).is_even())

    def test_trailing_zeros(self):
        self.assertEqual( 0, UBigInt(0).trailing_zeros())
        self.assertEqual( 0, UBigInt(1).trailing_zeros())
        self.assertEqual( 2, UBigInt(12).trailing_zeros())
        self.assertEqual(32, UBigInt(2**32).trailing_zeros())
        self.assertEqual(70, UBigInt(3 * 2**70).trailing_zeros())

    def test_add(self):
        self.assertSameInt(2**32, UBigInt(2**32 - 1) + 1)
        self.assertSameInt(2**64, UBigInt(2**64 - 1) + UBigInt(1))
        self.assertSameInt(2**64, UBigInt(1) + UBigInt(2**64 - 1))
        self.assertSameInt(2**33 - 2, UBigInt(2**32 - 1).add_ubi(UBigInt(2**32 - 1)))
        self.assertSameInt(2**96, UBigInt(2**96 - 1).add_u32(1))
        self.assertSameInt(7, 3 + UBigInt(4))

    def test_add_mut(self):
        x = UBigInt(2**64 - 1)
        x.add_u32_mut(2)
        self.assertSameInt(2**64 + 1, x)
        x.add_ubi_mut(UBigInt(2**64))
        self.assertSameInt(2**65 + 1, x)

    def test_sub(self):
        self.assertSameInt(2**32 - 1, UBigInt(2**32) - 1)
        self.assertSameInt(2**64 - 1, UBigInt(2**64) - UBigInt(1))
        self.assertSameInt(0, UBigInt(2**64) - UBigInt(2**64))
        self.assertSameInt(2**96 - 2**32, UBigInt(2**96).sub_ubi(UBigInt(2**32)))
        self.assertSameInt(2**64 - 5, UBigInt(2**64).sub_u32(5))
        self.assertSameInt(10, 15 - UBigInt(5))

    def test_sub_underflow(self):
        with self.assertRaises(UBigInt.SubtractionUnderflow):
            UBigInt(1).sub_ubi(UBigInt(2))
        with self.assertRaises(UBigInt.SubtractionUnderflow):
            UBigInt(2**32).sub_ubi(UBigInt(2**64))
        with self.assertRaises(ArithmeticError):
            UBigInt(3).sub_u32(4)
        with self.assertRaises(ArithmeticError):
            UBigInt(3) - 4

    def test_sub_underflow_leaves_value_alone(self):
        x = UBigInt(2**40)
        with self.assertRaises(UBigInt.SubtractionUnderflow):
            x.sub_ubi_mut(UBigInt(2**41))
        self.assertSameInt(2**40, x)

    def test_add_sub_inverse(self):
        rng = random.Random(1)
        values = list(interesting_ints(rng, 40))
        for x, y in zip(values, reversed(values)):
            self.assertSameInt(x + y, UBigInt(x) + UBigInt(y))
            self.assertEqual(UBigInt(x), (UBigInt(x) + UBigInt(y)) - UBigInt(y))

    def test_mul(self):
        self.assertSameInt(0, UBigInt(0) * UBigInt(2**64))
        self.assertSameInt(2**64, UBigInt(2**32) * UBigInt(2**32))
        self.assertSameInt((2**32 - 1)**2, UBigInt(2**32 - 1) * UBigInt(2**32 - 1))
        self.assertSameInt((2**96 - 1) * (2**64 - 1), UBigInt(2**96 - 1) * UBigInt(2**64 - 1))
        self.assertSameInt(3 * (2**64 - 1), UBigInt(2**64 - 1).mul_u32(3))
        self.assertSameInt(0, UBigInt(2**64 - 1).mul_u32(0))

    def test_mul_against_int(self):
        rng = random.Random(2)
        values = list(interesting_ints(rng, 40))
        for x, y in zip(values, values[1:]):
            self.assertSameInt(x * y, UBigInt(x).mul_ubi(UBigInt(y)))

    def test_mut_with_itself(self):
        x = UBigInt(3**50)
        x.mul_ubi_mut(x)
        self.assertSameInt(3**100, x)
        x.add_ubi_mut(x)
        self.assertSameInt(2 * 3**100, x)
        x.sub_ubi_mut(x)
        self.assertSameInt(0, x)

    def test_mut_leaves_argument_alone(self):
        x = UBigInt(2**40)
        y = UBigInt(2**70 + 1)
        x.add_ubi_mut(y)
        x.mul_ubi_mut(y)
        self.assertSameInt(2**70 + 1, y)

    def test_pow(self):
        self.assertSameInt(3**100, UBigInt(3).pow_u32(100))
        self.assertSameInt(1, UBigInt(0).pow_u32(0))
        self.assertSameInt(0, UBigInt(0).pow_u32(5))
        self.assertSameInt(2**320, UBigInt(2**32) ** 10)

    def test_div_u32(self):
        q, r = UBigInt(2**64 + 5).divmod_u32(7)
        self.assertSameInt((2**64 + 5) // 7, q)
        self.assertEqual((2**64 + 5) % 7, r)
        self.assertEqual(1, UBigInt(10).rem_u32(3))
        self.assertSameInt(3, UBigInt(10).div_u32(3))
        x = UBigInt(10**20)
        self.assertEqual(0, x.divmod_u32_mut(10**9))
        self.assertSameInt(10**11, x)

    def test_div_ubi(self):
        self.assertEqual((UBigInt(3), UBigInt(1)), UBigInt(10).divmod_ubi(UBigInt(3)))
        self.assertEqual((UBigInt(0), UBigInt(5)), UBigInt(5).divmod_ubi(UBigInt(2**40)))
        self.assertSameInt(2**32, UBigInt(2**96) // UBigInt(2**64))
        self.assertSameInt(1, UBigInt(2**96 + 1) % UBigInt(2**64))
        self.assertEqual((UBigInt(2), UBigInt(1)), divmod(UBigInt(2**65 + 1), UBigInt(2**64)))

    def test_div_ubi_against_int(self):
        rng = random.Random(3)
        values = list(interesting_ints(rng, 200))
        for x, y in zip(values, values[1:]):
            if y == 0:
                continue
            q, r = UBigInt(x).divmod_ubi(UBigInt(y))
            self.assertSameInt(x // y, q)
            self.assertSameInt(x % y, r)

    def test_div_quotient_estimate(self):
        """High-bit and all-ones limbs, where a quotient digit guessed from the top limbs can be too big."""
        cases = [
            (0x7FFFFFFF800000000000000000000000, 0x800000000000000000000003),
            (0x800000000000000000000003, 0x200000000000000000000001),
            (0x8000000000000000fffffffe00000000, 0x8000000000000001ffffffff),
            (0xFFFFFFFF000000000000000000000000, 0xFFFFFFFF0000000000000001),
            (0x800000000000fffe00000000, 0x800000000000000000000001),
            (0x00007fff800000000000000000000000, 0x800000000000000000000001),
        ]
        for x, y in cases:
            q, r = UBigInt(x).divmod_ubi(UBigInt(y))
            self.assertSameInt(x // y, q)
            self.assertSameInt(x % y, r)

    def test_div_mut(self):
        x = UBigInt(2**100 + 7)
        remainder = x.divmod_ubi_mut(UBigInt(2**40))
        self.assertSameInt(2**60, x)
        self.assertSameInt(7, remainder)
        x.rem_ubi_mut(UBigInt(2**33 + 1))
        self.assertSameInt(2**60 % (2**33 + 1), x)

    def test_div_by_zero(self):
        with self.assertRaises(ZeroDivisionError):
            UBigInt(5).div_ubi(UBigInt(0))
        with self.assertRaises(ZeroDivisionError):
            UBigInt(2**64).rem_ubi(UBigInt(0))
        with self.assertRaises(ZeroDivisionError):
            UBigInt(5).div_u32(0)
        with self.assertRaises(ZeroDivisionError):
            UBigInt(5) // 0

    def test_shift(self):
        self.assertSameInt(2**100, UBigInt(1).shift_left(100))
        self.assertSameInt(2**100, UBigInt(1) << 100)
        self.assertSameInt(0, UBigInt(0) << 100)
        self.assertSameInt(5 * 2**64, UBigInt(5) << 64)
        self.assertSameInt((2**100 + 12345) >> 37, UBigInt(2**100 + 12345).shift_right(37))
        self.assertSameInt(2**36, UBigInt(2**100) >> 64)
        self.assertSameInt(0, UBigInt(2**100) >> 101)
        self.assertSameInt(0, UBigInt(2**100) >> 1000)
        self.assertSameInt(1, UBigInt(2**100) >> 100)

    def test_shift_against_int(self):
        rng = random.Random(4)
        for x in interesting_ints(rng, 40):
            bits = rng.randint(0, 100)
            self.assertSameInt(x << bits, UBigInt(x) << bits)
            self.assertSameInt(x >> bits, UBigInt(x) >> bits)

    def test_shift_negative(self):
        with self.assertRaises(ValueError):
            UBigInt(1).shift_left(-1)
        with self.assertRaises(ValueError):
            UBigInt(1).shift_right(-1)

    def test_log2(self):
        self.assertSameInt(  0, UBigInt(0).log2())
        self.assertSameInt(  0, UBigInt(1).log2())
        self.assertSameInt(  1, UBigInt(2).log2())
        self.assertSameInt(  1, UBigInt(3).log2())
        self.assertSameInt( 31, UBigInt(2**32 - 1).log2())
        self.assertSameInt( 32, UBigInt(2**32).log2())
        self.assertSameInt( 99, UBigInt(2**100 - 1).log2())
        self.assertSameInt(100, UBigInt(2**100).log2())

    def test_log2_accurate_powers_of_two_are_exact(self):
        self.assertSameInt(0, UBigInt(0).log2_accurate())
        self.assertSameInt(0, UBigInt(1).log2_accurate())
        self.assertSameInt(2**24, UBigInt(2).log2_accurate())
        self.assertSameInt(40 * 2**24, UBigInt(2**40).log2_accurate())
        self.assertSameInt(200 * 2**24, UBigInt(2**200).log2_accurate())

    def test_log2_accurate(self):
        for n in (3, 5, 10, 9900, 2**32 - 1, 3**100, 10**60 + 7):
            approximate = int(UBigInt(n).log2_accurate()) / 2**24
            self.assertAlmostEqual(math.log2(n), approximate, delta=1e-6)

    def test_sqrt(self):
        for n in list(range(300)) + [2**64 - 1, 2**64, 10**40, 3**101, (2**70 + 3)**2]:
            root = int(UBigInt(n).sqrt())
            self.assertEqual(math.isqrt(n), root)
            self.assertTrue(root * root <= n < (root + 1) * (root + 1))

    def test_is_prime(self):
        for n in range(200):
            self.assertEqual(naive_is_prime(n), UBigInt(n).is_prime(), "is_prime({})".format(n))

    def test_is_prime_squares(self):
        for p in (2, 3, 5, 7, 11, 13, 17, 19, 31, 65521):
            self.assertTrue(UBigInt(p).is_prime())
            self.assertFalse(UBigInt(p * p).is_prime(), "{} squared".format(p))

    def test_is_prime_bigger(self):
        self.assertTrue(UBigInt(1000000007).is_prime())
        self.assertTrue(UBigInt(4294967291).is_prime())
        self.assertFalse(UBigInt(4294967291 * 3).is_prime())
        self.assertFalse(UBigInt(2**63 + 1).is_prime())

    def test_is_prime_fallback(self):
        """Past 2**64 the bound needs two limbs and big-integer trial division takes over."""
        with self.assertLogs('bigratio.ubigint', level='WARNING'):
            self.assertFalse(UBigInt(2**64 - 1).is_prime())
        with self.assertLogs('bigratio.ubigint', level='WARNING'):
            self.assertFalse(UBigInt(3**41).is_prime())
        with self.assertLogs('bigratio.ubigint', level='WARNING'):
            self.assertFalse(UBigInt(2**70 + 1).is_prime())

    def test_prime_factorial(self):
        self.assertEqual([UBigInt(0)], UBigInt(0).prime_factorial())
        self.assertEqual([UBigInt(1)], UBigInt(1).prime_factorial())
        self.assertEqual([2], UBigInt(2).prime_factorial())
        self.assertEqual([2, 2, 3], UBigInt(12).prime_factorial())
        self.assertEqual([5, 5], UBigInt(25).prime_factorial())
        self.assertEqual([13, 13], UBigInt(169).prime_factorial())
        self.assertEqual([3] * 41, UBigInt(3**41).prime_factorial())
        self.assertEqual([2] * 70 + [5], UBigInt(5 * 2**70).prime_factorial())
        self.assertEqual([4294967291], UBigInt(4294967291).prime_factorial())

    def test_prime_factorial_multiplies_back(self):
        for n in range(2, 400):
            factors = UBigInt(n).prime_factorial()
            product = 1
            for factor in factors:
                self.assertTrue(naive_is_prime(int(factor)), "{} has factor {}".format(n, factor))
                product *= int(factor)
            self.assertEqual(n, product)
            self.assertEqual(sorted(factors), factors)
            self.assertEqual(naive_is_prime(n), len(factors) == 1)

    def test_factorial(self):
        for n in range(60):
            self.assertSameInt(math.factorial(n), UBigInt.factorial(n))
        self.assertSameInt(math.factorial(200), UBigInt.factorial(200))

    def test_fibonacci(self):
        a, b = 0, 1
        for n in range(200):
            self.assertSameInt(a, UBigInt.fibonacci(n))
            a, b = b, a + b

    def test_random(self):
        x = UBigInt.random(4, random.Random(5))
        self.assertEqual(4, x.limb_count())
        self.assertTrue(all(limb != 0 for limb in x.limbs))
        self.assertEqual(x, UBigInt.random(4, random.Random(5)))
        self.assertTrue(UBigInt.random(0, random.Random(5)).is_zero())

    def test_gcd(self):
        self.assertSameInt(7, gcd_ubi(UBigInt(0), UBigInt(7)))
        self.assertSameInt(7, gcd_ubi(UBigInt(7), UBigInt(0)))
        self.assertSameInt(0, gcd_ubi(UBigInt(0), UBigInt(0)))
        self.assertSameInt(6, gcd_ubi(UBigInt(12), UBigInt(18)))
        self.assertSameInt(1, gcd_ubi(UBigInt(2**64 + 1), UBigInt(2**64)))
        self.assertSameInt(3 * 2**50, gcd_ubi(UBigInt(3 * 2**100), UBigInt(9 * 2**50)))

    def test_copy_is_independent(self):
        x = UBigInt(2**40)
        y = x.copy()
        y.add_u32_mut(1)
        self.assertSameInt(2**40, x)
        z = UBigInt(x)
        z.mul_u32_mut(2)
        self.assertSameInt(2**40, x)

    def test_pickle(self):
        x = UBigInt(3**100)
        self.assertEqual(x, pickle.loads(pickle.dumps(x)))

    def test_limb_operand_range(self):
        with self.assertRaises(ValueError):
            UBigInt(5).add_u32(2**32)
        with self.assertRaises(ValueError):
            UBigInt(5).mul_u32(-1)


if __name__ == '__main__':
    unittest.main()
