"""
A BigInt is a signed integer of any size:  a UBigInt magnitude and a sign flag.

Zero is never negative, so BigInt('-0') == BigInt(0) in every respect.

Division truncates toward zero, and the remainder takes the sign of the dividend.
That differs from Python's int, whose // and % floor:

    assert BigInt(-2) == BigInt(-7) // BigInt(3)      # but -7 // 3 == -3
    assert BigInt(-1) == BigInt(-7) % BigInt(3)       # but -7 % 3 == 2
"""

import logging
import numbers

from bigratio import parse
from bigratio.ubigint import UBigInt, gcd_ubi


logger = logging.getLogger(__name__)


I32_MIN, I32_MAX = -(1 << 31), (1 << 31) - 1
I64_MIN, I64_MAX = -(1 << 63), (1 << 63) - 1
I128_MIN, I128_MAX = -(1 << 127), (1 << 127) - 1


class BigInt:
    """
    Signed integer of arbitrary size.

    content - the type can be:
        None             zero
        int              -2**100
        str              '-1_000', '+0xff'
        UBigInt          the same non-negative value
        BigInt           a copy
    """

    __slots__ = ('_magnitude', '_negative')

    def __init__(self, content=None):
        if content is None:
            self._magnitude = UBigInt()
            self._negative = False
        elif isinstance(content, BigInt):
            self._magnitude = content._magnitude.copy()
            self._negative = content._negative
        elif isinstance(content, UBigInt):
            self._magnitude = content.copy()
            self._negative = False
        elif isinstance(content, bool):
            raise self.ConstructorTypeError("BigInt(bool) is not supported")
        elif isinstance(content, numbers.Integral):
            self._magnitude = UBigInt(abs(int(content)))
            self._negative = content < 0
        elif isinstance(content, str):
            negative, body = parse.split_sign(content)
            if body == '':
                raise parse.EmptyInputError("No digits in {}".format(repr(content)))
            self._magnitude = UBigInt(body)
            self._negative = negative
        else:
            raise self.ConstructorTypeError("BigInt({}) is not supported".format(type(content).__name__))
        self._canonicalize()

    class ConstructorTypeError(TypeError):
        """e.g. BigInt(1.5)"""

    class IntOverflowError(OverflowError):
        """Out of range for the fixed-width target, e.g. BigInt(2**31).to_i32()"""

    def _canonicalize(self):
        if self._negative and self._magnitude.is_zero():
            self._negative = False

    @classmethod
    def zero(cls):
        return cls()

    @classmethod
    def one(cls):
        return cls(1)

    @classmethod
    def from_int(cls, n):
        return cls(n)

    @classmethod
    def from_string(cls, s):
        """
        Optional sign, then decimal or 0x hexadecimal digits.

        assert BigInt(-255) == BigInt.from_string('-0xff')
        """
        if not isinstance(s, str):
            raise cls.ConstructorTypeError("from_string() needs a str, not {}".format(type(s).__name__))
        return cls(s)

    @classmethod
    def from_ubi(cls, magnitude, negative=False):
        """Construct from a magnitude and a sign.  A negative zero comes out non-negative."""
        return_value = cls(magnitude)
        return_value._negative = bool(negative)
        return_value._canonicalize()
        return return_value

    def copy(self):
        return type(self)(self)

    def __getstate__(self):
        """For the 'pickle' package, object serialization."""
        return self._magnitude.limbs, self._negative

    def __setstate__(self, state):
        """For the 'pickle' package, object serialization."""
        limbs, negative = state
        self._magnitude = UBigInt.from_raw(limbs)
        self._negative = negative

    @property
    def magnitude(self):
        """Absolute value, as a new UBigInt."""
        return self._magnitude.copy()

    def _is_valid(self):
        return self._magnitude._is_valid() and not (self._negative and self._magnitude.is_zero())

    # Inspection
    # ----------
    def is_zero(self):
        return self._magnitude.is_zero()

    def is_neg(self):
        return self._negative

    def is_pos(self):
        return not self._negative and not self._magnitude.is_zero()

    def is_one(self):
        return not self._negative and self._magnitude.is_one()

    def is_even(self):
        return self._magnitude.is_even()

    def __bool__(self):
        return not self.is_zero()

    # Comparison
    # ----------
    def cmp_bi(self, other):
        """Three-way comparison:  -1, 0, or +1.  Sign first, then magnitude."""
        if self._negative != other._negative:
            return -1 if self._negative else 1
        magnitude_order = self._magnitude.cmp_ubi(other._magnitude)
        return -magnitude_order if self._negative else magnitude_order

    cmp = cmp_bi

    @classmethod
    def _coerce(cls, other):
        if isinstance(other, BigInt):
            return other
        if isinstance(other, UBigInt):
            return cls(other)
        if isinstance(other, numbers.Integral) and not isinstance(other, bool):
            return cls(other)
        return NotImplemented

    def _compare(self, other):
        operand = self._coerce(other)
        if operand is NotImplemented:
            return NotImplemented
        return self.cmp_bi(operand)

    def __eq__(self, other):
        result = self._compare(other)
        return result if result is NotImplemented else result == 0

    def __ne__(self, other):
        result = self._compare(other)
        return result if result is NotImplemented else result != 0

    def __lt__(self, other):
        result = self._compare(other)
        return result if result is NotImplemented else result < 0

    def __le__(self, other):
        result = self._compare(other)
        return result if result is NotImplemented else result <= 0

    def __gt__(self, other):
        result = self._compare(other)
        return result if result is NotImplemented else result > 0

    def __ge__(self, other):
        result = self._compare(other)
        return result if result is NotImplemented else result >= 0

    def __hash__(self):
        return hash(int(self))

    # Sign
    # ----
    def neg_mut(self):
        self._negative = not self._negative
        self._canonicalize()

    def neg(self):
        result = self.copy()
        result.neg_mut()
        return result

    def abs_mut(self):
        self._negative = False

    def abs(self):
        result = self.copy()
        result.abs_mut()
        return result

    # Arithmetic
    # ----------
    def add_bi_mut(self, other):
        if self._negative == other._negative:
            self._magnitude.add_ubi_mut(other._magnitude)
        elif self._magnitude.cmp_ubi(other._magnitude) >= 0:
            self._magnitude.sub_ubi_mut(other._magnitude)
        else:
            self._magnitude = other._magnitude.sub_ubi(self._magnitude)
            self._negative = other._negative
        self._canonicalize()

    def add_bi(self, other):
        result = self.copy()
        result.add_bi_mut(other)
        return result

    def sub_bi_mut(self, other):
        self.add_bi_mut(other.neg())

    def sub_bi(self, other):
        result = self.copy()
        result.sub_bi_mut(other)
        return result

    def mul_bi_mut(self, other):
        negative = self._negative != other._negative
        self._magnitude.mul_ubi_mut(other._magnitude)
        self._negative = negative
        self._canonicalize()

    def mul_bi(self, other):
        result = self.copy()
        result.mul_bi_mut(other)
        return result

    def divmod_bi(self, other):
        """
        Truncating quotient and remainder, both BigInt.

        The remainder has the sign of self, and quotient * other + remainder == self.
        """
        quotient, remainder = self._magnitude.divmod_ubi(other._magnitude)
        return (
            self.from_ubi(quotient, self._negative != other._negative),
            self.from_ubi(remainder, self._negative),
        )

    def div_bi(self, other):
        return self.divmod_bi(other)[0]

    def div_bi_mut(self, other):
        quotient = self.div_bi(other)
        self._magnitude, self._negative = quotient._magnitude, quotient._negative

    def rem_bi(self, other):
        return self.divmod_bi(other)[1]

    def rem_bi_mut(self, other):
        remainder = self.rem_bi(other)
        self._magnitude, self._negative = remainder._magnitude, remainder._negative

    # Small operands
    # --------------
    @staticmethod
    def _check_i32(n):
        if isinstance(n, bool) or not isinstance(n, numbers.Integral) or not I32_MIN <= n <= I32_MAX:
            raise ValueError("Not a 32-bit signed operand: {}".format(repr(n)))

    def add_i32_mut(self, n):
        self._check_i32(n)
        self.add_bi_mut(type(self)(n))

    def add_i32(self, n):
        result = self.copy()
        result.add_i32_mut(n)
        return result

    def sub_i32_mut(self, n):
        self._check_i32(n)
        self.add_bi_mut(type(self)(-n))

    def sub_i32(self, n):
        result = self.copy()
        result.sub_i32_mut(n)
        return result

    def mul_i32_mut(self, n):
        self._check_i32(n)
        self._magnitude.mul_u32_mut(abs(n))
        self._negative = self._negative != (n < 0)
        self._canonicalize()

    def mul_i32(self, n):
        result = self.copy()
        result.mul_i32_mut(n)
        return result

    def div_i32_mut(self, n):
        self._check_i32(n)
        self._magnitude.div_u32_mut(abs(n))
        self._negative = self._negative != (n < 0)
        self._canonicalize()

    def div_i32(self, n):
        result = self.copy()
        result.div_i32_mut(n)
        return result

    def rem_i32(self, n):
        """Truncating remainder, with the sign of self, as a BigInt."""
        self._check_i32(n)
        return self.from_ubi(UBigInt(self._magnitude.rem_u32(abs(n))), self._negative)

    def rem_i32_mut(self, n):
        remainder = self.rem_i32(n)
        self._magnitude, self._negative = remainder._magnitude, remainder._negative

    # Shifts and powers
    # -----------------
    def shift_left_mut(self, bits):
        self._magnitude.shift_left_mut(bits)

    def shift_left(self, bits):
        result = self.copy()
        result.shift_left_mut(bits)
        return result

    def shift_right_mut(self, bits):
        """Shift the magnitude, so this truncates toward zero:  -5 >> 1 is -2, not -3."""
        self._magnitude.shift_right_mut(bits)
        self._canonicalize()

    def shift_right(self, bits):
        result = self.copy()
        result.shift_right_mut(bits)
        return result

    def pow_u32(self, exponent):
        return self.from_ubi(self._magnitude.pow_u32(exponent), self._negative and exponent % 2 == 1)

    # "to" conversions:  BigInt --> other type
    # ----------------------------------------
    def __int__(self):
        magnitude = int(self._magnitude)
        return -magnitude if self._negative else magnitude

    def _to_bounded(self, low, high, width):
        value = int(self)
        if not low <= value <= high:
            raise self.IntOverflowError("{} does not fit in an i{}".format(self, width))
        return value

    def to_i32(self):
        return self._to_bounded(I32_MIN, I32_MAX, 32)

    def to_i64(self):
        return self._to_bounded(I64_MIN, I64_MAX, 64)

    def to_i128(self):
        return self._to_bounded(I128_MIN, I128_MAX, 128)

    def __str__(self):
        return ('-' if self._negative else '') + str(self._magnitude)

    def to_hex_string(self):
        return ('-' if self._negative else '') + self._magnitude.to_hex_string()

    def __repr__(self):
        return "BigInt('{}')".format(self)

    # Operators
    # ---------
    def _binary(self, other, method):
        operand = self._coerce(other)
        if operand is NotImplemented:
            return NotImplemented
        return method(self, operand)

    def _binary_reflected(self, other, method):
        operand = self._coerce(other)
        if operand is NotImplemented:
            return NotImplemented
        return method(operand, self)

    def __pos__(self): return self.copy()
    def __neg__(self): return self.neg()
    def __abs__(self): return self.abs()

    def __add__(self, other): return self._binary(other, BigInt.add_bi)
    def __radd__(self, other): return self._binary_reflected(other, BigInt.add_bi)
    def __sub__(self, other): return self._binary(other, BigInt.sub_bi)
    def __rsub__(self, other): return self._binary_reflected(other, BigInt.sub_bi)
    def __mul__(self, other): return self._binary(other, BigInt.mul_bi)
    def __rmul__(self, other): return self._binary_reflected(other, BigInt.mul_bi)
    def __floordiv__(self, other): return self._binary(other, BigInt.div_bi)
    def __rfloordiv__(self, other): return self._binary_reflected(other, BigInt.div_bi)
    def __mod__(self, other): return self._binary(other, BigInt.rem_bi)
    def __rmod__(self, other): return self._binary_reflected(other, BigInt.rem_bi)
    def __divmod__(self, other): return self._binary(other, BigInt.divmod_bi)
    def __rdivmod__(self, other): return self._binary_reflected(other, BigInt.divmod_bi)

    def __lshift__(self, bits): return self.shift_left(bits)
    def __rshift__(self, bits): return self.shift_right(bits)
    def __pow__(self, exponent): return self.pow_u32(exponent)


def gcd_bi(a, b):
    """Greatest common divisor of the magnitudes, never negative."""
    return BigInt(gcd_ubi(a._magnitude, b._magnitude))
