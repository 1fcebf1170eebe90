"""
A Ratio is an exact rational number:  a BigInt numerator over a UBigInt denominator.

Representation invariants, kept by every constructor and operation:
    the denominator is positive
    numerator and denominator are coprime
    zero is 0/1

So equal values have equal representations, and str() is canonical:

    assert '-1/3' == str(Ratio('-2/6'))
    assert '5/2' == str(Ratio('2.5'))
    assert '0' == str(Ratio('-0.0'))

Floats convert exactly, bit by bit, so 0.1 is not 1/10:

    assert Ratio('0.1') != Ratio(0.1)
"""

import fractions
import logging
import numbers
import struct

from bigratio import parse
from bigratio.bigint import BigInt, I32_MIN, I32_MAX
from bigratio.ubigint import UBigInt, gcd_ubi, LIMB_BITS


logger = logging.getLogger(__name__)


F64_EXPONENT_BITS, F64_MANTISSA_BITS, F64_BIAS = 11, 52, 1075
F32_EXPONENT_BITS, F32_MANTISSA_BITS, F32_BIAS = 8, 23, 150
DECIMAL_EXPONENT_LIMIT = 10000     # largest magnitude of the e exponent in decimal text, e.g. 1e10000


def _pack_f64(x):
    return struct.unpack('>Q', struct.pack('>d', x))[0]
assert 0x3FF0000000000000 == _pack_f64(1.0)


def _pack_f32(x):
    return struct.unpack('>L', struct.pack('>f', x))[0]
assert 0x3F800000 == _pack_f32(1.0)


class Ratio:
    """
    Exact rational number.

    content - the type can be:
        None                zero
        int, BigInt, UBigInt
        float               exact binary value, Ratio(0.5) == Ratio(1, 2)
        fractions.Fraction
        str                 '-3/4', '1_000.25', '2.5e-3', '0xff'
        another Ratio       a copy

    Ratio(numerator, denominator) takes two integers, of type int, BigInt or UBigInt.
    """

    __slots__ = ('_numer', '_denom')

    def __init__(self, content=None, denominator=None):
        if denominator is not None:
            self._numer = BigInt()
            self._denom = UBigInt(1)
            self._assign_signed(self._integer_operand(content), self._integer_operand(denominator))
        elif content is None:
            self._numer = BigInt()
            self._denom = UBigInt(1)
        elif isinstance(content, Ratio):
            self._numer = content._numer.copy()
            self._denom = content._denom.copy()
        elif isinstance(content, bool):
            raise self.ConstructorTypeError("Ratio(bool) is not supported")
        elif isinstance(content, (BigInt, UBigInt, numbers.Integral)):
            self._numer = BigInt(content)
            self._denom = UBigInt(1)
        elif isinstance(content, float):
            other = self.from_ieee754_f64(content)
            self._numer, self._denom = other._numer, other._denom
        elif isinstance(content, fractions.Fraction):
            self._numer = BigInt(content.numerator)
            self._denom = UBigInt(content.denominator)
        elif isinstance(content, str):
            other = self._from_text(content)
            self._numer, self._denom = other._numer, other._denom
        else:
            raise self.ConstructorTypeError("Ratio({}) is not supported".format(type(content).__name__))

    class ConstructorTypeError(TypeError):
        """e.g. Ratio([1, 2]) or Ratio(1.5, 2)"""

    @classmethod
    def _integer_operand(cls, n):
        if isinstance(n, bool) or not isinstance(n, (BigInt, UBigInt, numbers.Integral)):
            raise cls.ConstructorTypeError("Ratio(numerator, denominator) needs integers, not {}".format(
                type(n).__name__
            ))
        return BigInt(n)

    def _assign(self, numer, denom):
        """Reduce numer/denom into self.  Takes ownership of both.  The denominator must be nonzero."""
        assert not denom.is_zero()
        divisor = gcd_ubi(numer._magnitude, denom)
        if not divisor.is_one():
            numer._magnitude.div_ubi_mut(divisor)
            denom.div_ubi_mut(divisor)
        self._numer = numer
        self._denom = denom
        assert self._is_valid()

    def _assign_signed(self, numer, denom):
        """Like _assign() but the denominator is a BigInt, and may be negative, or zero."""
        if denom.is_zero():
            raise ZeroDivisionError("Ratio with a zero denominator: {}/0".format(numer))
        if denom.is_neg():
            numer = numer.neg()
        self._assign(numer, denom.magnitude)

    @classmethod
    def _from_denom_and_numer_raw(cls, denom, numer):
        """Construct without reducing.  The caller guarantees the representation invariants."""
        return_value = cls.__new__(cls)
        return_value._numer = numer
        return_value._denom = denom
        assert return_value._is_valid()
        return return_value

    def _is_valid(self):
        return (
            self._numer._is_valid()
            and self._denom._is_valid()
            and not self._denom.is_zero()
            and gcd_ubi(self._numer._magnitude, self._denom).is_one()
        )

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
    def from_bi(cls, n):
        return cls(BigInt(n))

    @classmethod
    def from_ubi(cls, n):
        return cls(UBigInt(n))

    @classmethod
    def from_denom_and_numer(cls, denom, numer):
        """
        numer / denom, reduced.  Either may be negative.

        assert Ratio(-2, 3) == Ratio.from_denom_and_numer(BigInt(-6), BigInt(4))
        """
        return_value = cls()
        return_value._assign_signed(BigInt(numer), BigInt(denom))
        return return_value

    @classmethod
    def from_string(cls, s):
        if not isinstance(s, str):
            raise cls.ConstructorTypeError("from_string() needs a str, not {}".format(type(s).__name__))
        return cls._from_text(s)

    @classmethod
    def _from_text(cls, s):
        """
        Grammar, after an optional sign:
            0x hexadecimal integer             '0xff'
            decimal, optional point, exponent  '12.5e-3'
            numerator / denominator            '22/7'
        Underscores may group digits anywhere except in the exponent marker.
        """
        if s == '':
            raise parse.EmptyInputError("Empty string is not a Ratio")
        negative, body = parse.split_sign(s)
        if body == '':
            raise parse.EmptyInputError("No digits in {}".format(repr(s)))

        if '/' in body:
            numer_text, _, denom_text = body.partition('/')
            if numer_text == '' or denom_text == '':
                raise parse.EmptyInputError("Missing side of a fraction in {}".format(repr(s)))
            result = cls.from_denom_and_numer(
                BigInt(UBigInt(denom_text)),
                BigInt.from_ubi(UBigInt(numer_text), negative),
            )
            return result

        if parse.is_hex_literal(body):
            return cls(BigInt.from_ubi(UBigInt(body), negative))

        mantissa, marker, exponent_text = body.replace('E', 'e').partition('e')
        exponent = 0
        if marker:
            exponent = cls._parse_exponent(exponent_text, s)
        whole_text, _, fraction_text = mantissa.partition('.')
        if whole_text.replace('_', '') == '' and fraction_text.replace('_', '') == '':
            raise parse.EmptyInputError("No digits in {}".format(repr(s)))
        whole_digits = parse.decimal_digits(whole_text, s) if whole_text else ''
        fraction_digits = parse.decimal_digits(fraction_text, s) if fraction_text else ''

        numer = UBigInt(whole_digits + fraction_digits)
        scale = len(fraction_digits) - exponent
        if scale >= 0:
            denom = UBigInt(10).pow_u32(scale)
        else:
            numer.mul_ubi_mut(UBigInt(10).pow_u32(-scale))
            denom = UBigInt(1)
        return_value = cls()
        return_value._assign(BigInt.from_ubi(numer, negative), denom)
        return return_value

    @staticmethod
    def _parse_exponent(text, whole):
        exponent_negative, digits = parse.split_sign(text)
        if digits.replace('_', '') == '':
            raise parse.MalformedExponentError("Exponent without digits in {}".format(repr(whole)))
        for c in digits:
            if c != '_' and c not in parse.DECIMAL_DIGITS:
                raise parse.MalformedExponentError("Invalid exponent character {char} in {whole}".format(
                    char=repr(c),
                    whole=repr(whole),
                ))
        stripped = digits.replace('_', '').lstrip('0')
        if len(stripped) > len(str(DECIMAL_EXPONENT_LIMIT)) or int(stripped or '0') > DECIMAL_EXPONENT_LIMIT:
            raise parse.MalformedExponentError("Exponent out of range in {}".format(repr(whole)))
        magnitude = int(stripped or '0')
        return -magnitude if exponent_negative else magnitude

    # IEEE 754
    # --------
    @classmethod
    def _from_ieee754_fields(cls, bits, exponent_bits, mantissa_bits, bias):
        negative = (bits >> (exponent_bits + mantissa_bits)) & 1
        exponent = (bits >> mantissa_bits) & ((1 << exponent_bits) - 1)
        mantissa = bits & ((1 << mantissa_bits) - 1)
        if exponent == (1 << exponent_bits) - 1:
            raise parse.NonFiniteError("NaN or infinity has no exact value, bits {}".format(hex(bits)))
        if exponent == 0:
            # NOTE:  Subnormal.  No hidden bit, and the same scale as the smallest normal exponent.
            power = 1 - bias
        else:
            mantissa |= 1 << mantissa_bits
            power = exponent - bias
        result = cls(BigInt.from_ubi(UBigInt(mantissa), negative))
        result.mul_pow2_mut(power)
        return result

    @classmethod
    def from_ieee754_f64_bits(cls, bits):
        """
        Exact value of a 64-bit IEEE 754 bit pattern.

        assert Ratio(1, 2) == Ratio.from_ieee754_f64_bits(0x3FE0000000000000)
        """
        return cls._from_ieee754_fields(bits, F64_EXPONENT_BITS, F64_MANTISSA_BITS, F64_BIAS)

    @classmethod
    def from_ieee754_f32_bits(cls, bits):
        return cls._from_ieee754_fields(bits, F32_EXPONENT_BITS, F32_MANTISSA_BITS, F32_BIAS)

    @classmethod
    def from_ieee754_f64(cls, x):
        return cls.from_ieee754_f64_bits(_pack_f64(x))

    @classmethod
    def from_ieee754_f32(cls, x):
        """The value of x after rounding to single precision.  Raises OverflowError out of f32 range."""
        return cls.from_ieee754_f32_bits(_pack_f32(x))

    @classmethod
    def random(cls, rng):
        """
        Between 0 and 1, both exclusive:  128 random bits over 2**128.

        rng - e.g. random.Random(seed), anything with a getrandbits() method
        """
        numer = UBigInt.random(4, rng)
        return_value = cls()
        return_value._assign(BigInt(numer), UBigInt(1).shift_left(4 * LIMB_BITS))
        return return_value

    def copy(self):
        return type(self)(self)

    def __getstate__(self):
        """For the 'pickle' package, object serialization."""
        return str(self)

    def __setstate__(self, text):
        """For the 'pickle' package, object serialization."""
        other = self._from_text(text)
        self._numer, self._denom = other._numer, other._denom

    @property
    def numerator(self):
        return self._numer.copy()

    @property
    def denominator(self):
        return self._denom.copy()

    # Inspection
    # ----------
    def is_zero(self):
        return self._numer.is_zero()

    def is_neg(self):
        return self._numer.is_neg()

    def is_pos(self):
        return self._numer.is_pos()

    def is_one(self):
        return self._numer.is_one() and self._denom.is_one()

    def is_integer(self):
        return self._denom.is_one()

    def __bool__(self):
        return not self.is_zero()

    # Comparison
    # ----------
    def cmp_rat(self, other):
        """Three-way comparison by cross multiplication:  -1, 0, or +1."""
        return self._numer.mul_bi(BigInt(other._denom)).cmp_bi(other._numer.mul_bi(BigInt(self._denom)))

    cmp = cmp_rat

    @classmethod
    def _coerce(cls, other):
        if isinstance(other, Ratio):
            return other
        if isinstance(other, (BigInt, UBigInt, fractions.Fraction)):
            return cls(other)
        if isinstance(other, numbers.Integral) and not isinstance(other, bool):
            return cls(other)
        return NotImplemented

    def _compare(self, other):
        operand = self._coerce(other)
        if operand is NotImplemented:
            return NotImplemented
        return self.cmp_rat(operand)

    def __eq__(self, other):
        operand = self._coerce(other)
        if operand is NotImplemented:
            return NotImplemented
        return self._numer == operand._numer and self._denom == operand._denom

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

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
        if self._denom.is_one():
            return hash(int(self._numer))
        return hash(self.to_fraction())

    # Sign and reciprocal
    # -------------------
    def neg_mut(self):
        self._numer.neg_mut()

    def neg(self):
        result = self.copy()
        result.neg_mut()
        return result

    def abs_mut(self):
        self._numer.abs_mut()

    def abs(self):
        result = self.copy()
        result.abs_mut()
        return result

    def reci_mut(self):
        """self = 1 / self.  Already coprime, so only the sign moves."""
        if self.is_zero():
            raise ZeroDivisionError("Reciprocal of zero")
        negative = self._numer.is_neg()
        self._numer, self._denom = BigInt.from_ubi(self._denom, negative), self._numer.magnitude

    def reci(self):
        result = self.copy()
        result.reci_mut()
        return result

    # Arithmetic
    # ----------
    def add_rat_mut(self, other):
        numer = self._numer.mul_bi(BigInt(other._denom))
        numer.add_bi_mut(other._numer.mul_bi(BigInt(self._denom)))
        self._assign(numer, self._denom.mul_ubi(other._denom))

    def add_rat(self, other):
        result = self.copy()
        result.add_rat_mut(other)
        return result

    def sub_rat_mut(self, other):
        self.add_rat_mut(other.neg())

    def sub_rat(self, other):
        result = self.copy()
        result.sub_rat_mut(other)
        return result

    def mul_rat_mut(self, other):
        self._assign(self._numer.mul_bi(other._numer), self._denom.mul_ubi(other._denom))

    def mul_rat(self, other):
        result = self.copy()
        result.mul_rat_mut(other)
        return result

    def div_rat_mut(self, other):
        self.mul_rat_mut(other.reci())

    def div_rat(self, other):
        result = self.copy()
        result.div_rat_mut(other)
        return result

    def rem_rat(self, other):
        """self - truncate(self / other) * other, with the sign of self."""
        quotient = self.div_rat(other).truncate()
        return self.sub_rat(quotient.mul_rat(other))

    def rem_rat_mut(self, other):
        remainder = self.rem_rat(other)
        self._numer, self._denom = remainder._numer, remainder._denom

    def _small(self, n):
        if isinstance(n, bool) or not isinstance(n, numbers.Integral) or not I32_MIN <= n <= I32_MAX:
            raise ValueError("Not a 32-bit signed operand: {}".format(repr(n)))
        return type(self)(n)

    def add_i32_mut(self, n): self.add_rat_mut(self._small(n))
    def sub_i32_mut(self, n): self.sub_rat_mut(self._small(n))
    def mul_i32_mut(self, n): self.mul_rat_mut(self._small(n))
    def div_i32_mut(self, n): self.div_rat_mut(self._small(n))

    def add_i32(self, n): return self.add_rat(self._small(n))
    def sub_i32(self, n): return self.sub_rat(self._small(n))
    def mul_i32(self, n): return self.mul_rat(self._small(n))
    def div_i32(self, n): return self.div_rat(self._small(n))

    def mul_bi_mut(self, n): self.mul_rat_mut(type(self)(BigInt(n)))
    def div_bi_mut(self, n): self.div_rat_mut(type(self)(BigInt(n)))

    def mul_bi(self, n): return self.mul_rat(type(self)(BigInt(n)))
    def div_bi(self, n): return self.div_rat(type(self)(BigInt(n)))

    def pow_i32(self, exponent):
        """
        self ** exponent.  A negative exponent takes the reciprocal first.

        Powers of coprime integers stay coprime, so there is nothing to reduce.
        """
        if exponent < 0:
            return self.reci().pow_i32(-exponent)
        return self._from_denom_and_numer_raw(
            self._denom.pow_u32(exponent),
            self._numer.pow_u32(exponent),
        )

    def pow_i32_mut(self, exponent):
        result = self.pow_i32(exponent)
        self._numer, self._denom = result._numer, result._denom

    def mul_pow2_mut(self, k):
        """
        self *= 2**k, and k may be negative.

        Factors of two cancel against the other side first,
        and only one side of a reduced ratio can be even, so no gcd is needed.
        """
        if self.is_zero() or k == 0:
            return
        if k > 0:
            cancel = min(self._denom.trailing_zeros(), k)
            self._denom.shift_right_mut(cancel)
            self._numer.shift_left_mut(k - cancel)
        else:
            cancel = min(self._numer._magnitude.trailing_zeros(), -k)
            self._numer.shift_right_mut(cancel)
            self._denom.shift_left_mut(-k - cancel)
        assert self._is_valid()

    def mul_pow2(self, k):
        result = self.copy()
        result.mul_pow2_mut(k)
        return result

    def fit_mut(self, limbs):
        """
        Approximate self by dropping the same number of low limbs from numerator and denominator.

        Only when both are longer than limbs.  The shorter one keeps exactly limbs limbs,
        so the relative error is below 2**(1 - 32*(limbs-1)).
        """
        if limbs < 1:
            raise ValueError("fit() needs at least one limb, not {}".format(limbs))
        shorter = min(self._numer._magnitude.limb_count(), self._denom.limb_count())
        if shorter <= limbs:
            return
        drop_bits = (shorter - limbs) * LIMB_BITS
        numer = self._numer.shift_right(drop_bits)
        self._assign(numer, self._denom.shift_right(drop_bits))

    def fit(self, limbs):
        result = self.copy()
        result.fit_mut(limbs)
        return result

    # Rounding
    # --------
    def truncate_bi(self):
        """Integer part, toward zero, as a BigInt."""
        return self._numer.div_bi(BigInt(self._denom))

    def truncate(self):
        return type(self)(self.truncate_bi())

    def frac(self):
        """self - truncate(self), so it has the sign of self."""
        return self.sub_rat(self.truncate())

    def truncate_and_frac(self):
        truncated = self.truncate()
        return truncated, self.sub_rat(truncated)

    def floor_bi(self):
        result = self.truncate_bi()
        if self.is_neg() and not self.is_integer():
            result.sub_i32_mut(1)
        return result

    def floor(self):
        return type(self)(self.floor_bi())

    def ceil_bi(self):
        result = self.truncate_bi()
        if self.is_pos() and not self.is_integer():
            result.add_i32_mut(1)
        return result

    def ceil(self):
        return type(self)(self.ceil_bi())

    def round_bi(self):
        """Nearest integer, and half way rounds away from zero:  2.5 --> 3, -2.5 --> -3"""
        truncated, fraction = self.truncate_and_frac()
        result = truncated.truncate_bi()
        twice_fraction = fraction._numer._magnitude.mul_u32(2)
        if twice_fraction.cmp_ubi(fraction._denom) >= 0:
            if self.is_neg():
                result.sub_i32_mut(1)
            else:
                result.add_i32_mut(1)
        return result

    def round(self):
        return type(self)(self.round_bi())

    # "to" conversions:  Ratio --> other type
    # ---------------------------------------
    def __int__(self):
        """Truncates toward zero, like int(float)."""
        return int(self.truncate_bi())

    def __float__(self):
        return int(self._numer) / int(self._denom)

    def to_fraction(self):
        return fractions.Fraction(int(self._numer), int(self._denom))

    def __str__(self):
        if self._denom.is_one():
            return str(self._numer)
        return "{}/{}".format(self._numer, self._denom)

    def __repr__(self):
        return "Ratio('{}')".format(self)

    def to_approx_string(self, max_len):
        """
        Decimal text, at most max_len characters including sign and point.

        The value is truncated toward zero, never rounded.
        Trailing zeros after the point are dropped, and so is a lonely point.
        The integer part is never cut, so the result is longer than max_len when it must be.

        assert '0.3333' == Ratio(1, 3).to_approx_string(6)
        assert '-2.5' == Ratio(-5, 2).to_approx_string(10)
        assert '1234' == Ratio(12345, 10).to_approx_string(3)
        """
        sign = '-' if self.is_neg() else ''
        whole, remainder = self._numer._magnitude.divmod_ubi(self._denom)
        whole_text = str(whole)
        room = max_len - len(sign) - len(whole_text) - 1
        digits = []
        for _ in range(room):
            remainder.mul_u32_mut(10)
            digit, remainder = remainder.divmod_ubi(self._denom)
            digits.append(str(digit))
        fraction_text = ''.join(digits).rstrip('0')
        result = sign + whole_text
        if fraction_text:
            result += '.' + fraction_text
        if result == '-0':
            return '0'
        return result

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

    def __add__(self, other): return self._binary(other, Ratio.add_rat)
    def __radd__(self, other): return self._binary_reflected(other, Ratio.add_rat)
    def __sub__(self, other): return self._binary(other, Ratio.sub_rat)
    def __rsub__(self, other): return self._binary_reflected(other, Ratio.sub_rat)
    def __mul__(self, other): return self._binary(other, Ratio.mul_rat)
    def __rmul__(self, other): return self._binary_reflected(other, Ratio.mul_rat)
    def __truediv__(self, other): return self._binary(other, Ratio.div_rat)
    def __rtruediv__(self, other): return self._binary_reflected(other, Ratio.div_rat)
    def __mod__(self, other): return self._binary(other, Ratio.rem_rat)
    def __rmod__(self, other): return self._binary_reflected(other, Ratio.rem_rat)

    def __pow__(self, exponent): return self.pow_i32(exponent)
