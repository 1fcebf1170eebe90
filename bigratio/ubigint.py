"""
A UBigInt is a non-negative integer of any size, stored as a list of 32-bit limbs.

Features:
 - exact arithmetic, no silent wraparound
 - in-place (_mut) and value-returning twins of every operation
 - floor and fixed-point logarithms, integer square root, primes, factorials

Limb 0 is least significant, so the value is sum(limb[i] * 2**(32*i)).
The list never ends in a zero limb, except zero itself, which is exactly [0].

    assert [0] == list(UBigInt(0).limbs)
    assert [0, 1] == list(UBigInt(2**32).limbs)
    assert '18446744073709551616' == str(UBigInt(2**32) * UBigInt(2**32))
"""

import logging
import numbers

from bigratio import parse


logger = logging.getLogger(__name__)


LIMB_BITS = 32
LIMB_BASE = 1 << LIMB_BITS
LIMB_MAX = LIMB_BASE - 1

U64_MAX = (1 << 64) - 1
U128_MAX = (1 << 128) - 1

LOG2_ACCURATE_BITS = 24         # log2_accurate() is scaled by 2**24
LOG2_ACCURATE_KEEP_LIMBS = 3    # limbs kept between squarings, at least 65 significant bits

DECIMAL_CHUNK = 10 ** 9         # largest power of ten below LIMB_BASE
DECIMAL_CHUNK_DIGITS = 9


def log2_u32(n):
    """floor(log2(n)) of a single limb.  log2_u32(0) is 0, same as log2_u32(1)."""
    assert 0 <= n <= LIMB_MAX
    return max(n.bit_length() - 1, 0)
assert 0 == log2_u32(1)
assert 10 == log2_u32(1024)
assert 31 == log2_u32(LIMB_MAX)


def _normalize(limbs):
    """Strip most-significant zero limbs in place, but never below one limb."""
    while len(limbs) > 1 and limbs[-1] == 0:
        limbs.pop()
    if not limbs:
        limbs.append(0)
    return limbs
assert [0] == _normalize([0, 0, 0])
assert [5, 0, 1] == _normalize([5, 0, 1, 0])


def _limbs_from_int(i):
    limbs = []
    while i:
        limbs.append(i & LIMB_MAX)
        i >>= LIMB_BITS
    return limbs or [0]


def _int_from_limbs(limbs):
    result = 0
    for limb in reversed(limbs):
        result = (result << LIMB_BITS) | limb
    return result
assert 2**40 + 7 == _int_from_limbs(_limbs_from_int(2**40 + 7))


def _mul_limbs(a, b):
    """
    Schoolbook product of two normalized limb lists.

    Each step computes result[k] + x*y + carry, which is at most
    (2**32-1) + (2**32-1)**2 + (2**32-1) == 2**64-1, so the carry always fits a limb.
    """
    if (len(a) == 1 and a[0] == 0) or (len(b) == 1 and b[0] == 0):
        return [0]
    result = [0] * (len(a) + len(b))
    for i, x in enumerate(a):
        if x == 0:
            continue
        carry = 0
        k = i
        for y in b:
            t = result[k] + x * y + carry
            result[k] = t & LIMB_MAX
            carry = t >> LIMB_BITS
            k += 1
        result[k] = carry
    return _normalize(result)


def _shift_left_limbs(limbs, bits):
    """New limb list shifted left by bits, which is less than LIMB_BITS.  May end in a zero limb."""
    if bits == 0:
        return list(limbs)
    result = []
    carry = 0
    for limb in limbs:
        t = limb << bits
        result.append((t & LIMB_MAX) | carry)
        carry = t >> LIMB_BITS
    result.append(carry)
    return result


def _divmod_limbs(u, v):
    """
    Long division of limb lists, most significant limb first.  Knuth's algorithm D.

    v has at least two limbs and u is at least as long as v.
    Return a tuple of (quotient limbs, remainder limbs).

    SEE:  Knuth, TAOCP vol 2, 4.3.1, Algorithm D
    """
    n = len(v)
    m = len(u) - n
    assert n >= 2 and m >= 0

    # NOTE:  Shift so the top divisor limb has its high bit set.  Then the quotient digit
    #        estimated from two limbs over one is at most 2 too big.
    shift = LIMB_BITS - v[-1].bit_length()
    vn = _shift_left_limbs(v, shift)[:n]
    un = _shift_left_limbs(u, shift)
    if len(un) == len(u):
        un.append(0)

    v_top = vn[n - 1]
    v_next = vn[n - 2]
    quotient = [0] * (m + 1)
    for j in range(m, -1, -1):
        numerator = (un[j + n] << LIMB_BITS) | un[j + n - 1]
        q_hat, r_hat = divmod(numerator, v_top)
        while q_hat >= LIMB_BASE or q_hat * v_next > ((r_hat << LIMB_BITS) | un[j + n - 2]):
            q_hat -= 1
            r_hat += v_top
            if r_hat >= LIMB_BASE:
                break

        borrow = 0
        carry = 0
        for i in range(n):
            p = q_hat * vn[i] + carry
            carry = p >> LIMB_BITS
            t = un[i + j] - (p & LIMB_MAX) - borrow
            if t < 0:
                t += LIMB_BASE
                borrow = 1
            else:
                borrow = 0
            un[i + j] = t
        t = un[j + n] - carry - borrow

        if t < 0:
            # NOTE:  q_hat was one too big.  Add the divisor back, dropping the final carry.
            un[j + n] = t + LIMB_BASE
            q_hat -= 1
            carry = 0
            for i in range(n):
                s = un[i + j] + vn[i] + carry
                un[i + j] = s & LIMB_MAX
                carry = s >> LIMB_BITS
            un[j + n] = (un[j + n] + carry) & LIMB_MAX
        else:
            un[j + n] = t
        quotient[j] = q_hat

    remainder = []
    for i in range(n):
        high = (un[i + 1] << (LIMB_BITS - shift)) & LIMB_MAX if i + 1 < n else 0
        remainder.append((un[i] >> shift) | high)
    return _normalize(quotient), _normalize(remainder)


class UBigInt:
    """
    Unsigned integer of arbitrary size.

    content - the type can be:
        None             zero
        int              2**100  (but not negative)
        decimal string   '1_000_000'
        hex string       '0xFFFF_FFFF'
        another UBigInt  UBigInt(42)

    Every arithmetic operation comes as a pair:

        y = x.add_ubi(z)      returns a new UBigInt, x unchanged
        x.add_ubi_mut(z)      changes x, returns nothing

    The operators + - * // % << >> ** use the value-returning forms.
    """

    __slots__ = ('_limbs',)

    def __init__(self, content=None):
        if content is None:
            self._limbs = [0]
        elif isinstance(content, UBigInt):
            self._limbs = list(content._limbs)
        elif isinstance(content, bool):
            raise self.ConstructorTypeError("UBigInt(bool) is not supported")
        elif isinstance(content, numbers.Integral):
            if content < 0:
                raise self.ConstructorValueError("UBigInt cannot be negative: {}".format(content))
            self._limbs = _limbs_from_int(int(content))
        elif isinstance(content, str):
            self._limbs = self._limbs_from_string(content)
        else:
            raise self.ConstructorTypeError("UBigInt({}) is not supported".format(type(content).__name__))

    class ConstructorTypeError(TypeError):
        """e.g. UBigInt(1.5) or UBigInt([1, 2])"""

    class ConstructorValueError(ValueError):
        """e.g. UBigInt(-1) or UBigInt.from_raw([2**32])"""

    class SubtractionUnderflow(ArithmeticError):
        """The result would be negative, e.g. UBigInt(1) - UBigInt(2).  A programming error."""

    class IntOverflowError(OverflowError):
        """Too big for the fixed-width target, e.g. UBigInt(2**32).to_u32()"""

    @classmethod
    def _from_limbs(cls, limbs):
        """Take ownership of a limb list, no copy, no range check.  Normalizes."""
        return_value = cls.__new__(cls)
        return_value._limbs = _normalize(limbs)
        return return_value

    @staticmethod
    def _limbs_from_string(s):
        if s == '':
            raise parse.EmptyInputError("Empty string is not a UBigInt")
        if parse.is_hex_literal(s):
            digits = parse.hex_digits(s)
            limbs = []
            for end in range(len(digits), 0, -8):
                limbs.append(int(digits[max(end - 8, 0):end], 16))
            return _normalize(limbs)
        digits = parse.decimal_digits(s)
        result = UBigInt()
        head = len(digits) % DECIMAL_CHUNK_DIGITS or DECIMAL_CHUNK_DIGITS
        result.add_u32_mut(int(digits[:head]))
        for start in range(head, len(digits), DECIMAL_CHUNK_DIGITS):
            result.mul_u32_mut(DECIMAL_CHUNK)
            result.add_u32_mut(int(digits[start:start + DECIMAL_CHUNK_DIGITS]))
        return result._limbs

    @classmethod
    def zero(cls):
        return cls()

    @classmethod
    def one(cls):
        return cls._from_limbs([1])

    @classmethod
    def _from_bounded(cls, n, limit, width):
        if isinstance(n, bool) or not isinstance(n, numbers.Integral):
            raise cls.ConstructorTypeError("from_u{}({}) needs an int".format(width, type(n).__name__))
        if not 0 <= n <= limit:
            raise cls.ConstructorValueError("{} is not a u{}".format(n, width))
        return cls(n)

    @classmethod
    def from_u32(cls, n):
        return cls._from_bounded(n, LIMB_MAX, 32)

    @classmethod
    def from_u64(cls, n):
        return cls._from_bounded(n, U64_MAX, 64)

    @classmethod
    def from_u128(cls, n):
        return cls._from_bounded(n, U128_MAX, 128)

    @classmethod
    def from_int(cls, n):
        return cls(n)

    @classmethod
    def from_string(cls, s):
        """
        Decimal or 0x-hexadecimal text, underscores allowed between digits.

        assert UBigInt(1000) == UBigInt.from_string('1_000')
        assert UBigInt(255) == UBigInt.from_string('0xff')
        """
        if not isinstance(s, str):
            raise cls.ConstructorTypeError("from_string() needs a str, not {}".format(type(s).__name__))
        return cls(s)

    @classmethod
    def from_raw(cls, limbs):
        """
        Construct from a sequence of limbs, least significant first.

        assert UBigInt(2**32 + 1) == UBigInt.from_raw([1, 1, 0, 0])
        """
        limb_list = list(limbs)
        for limb in limb_list:
            if isinstance(limb, bool) or not isinstance(limb, numbers.Integral) or not 0 <= limb <= LIMB_MAX:
                raise cls.ConstructorValueError("Not a 32-bit limb: {}".format(repr(limb)))
        return cls._from_limbs([int(limb) for limb in limb_list])

    @classmethod
    def random(cls, scale, rng):
        """
        A value with scale random limbs, each of them nonzero.  So between 1 and 2**(32*scale).

        rng - e.g. random.Random(seed), anything with a getrandbits() method
        Not cryptographically secure.  UBigInt.random(0, rng) is zero.
        """
        if scale == 0:
            return cls()
        return cls._from_limbs([max(rng.getrandbits(LIMB_BITS), 1) for _ in range(scale)])

    def copy(self):
        return type(self)(self)

    def __getstate__(self):
        """For the 'pickle' package, object serialization."""
        return tuple(self._limbs)

    def __setstate__(self, limbs):
        """For the 'pickle' package, object serialization."""
        self._limbs = list(limbs)

    @property
    def limbs(self):
        """Copy of the limbs, least significant first."""
        return tuple(self._limbs)

    def limb_count(self):
        return len(self._limbs)

    def _is_valid(self):
        """Representation invariant, for assertions."""
        return (
            len(self._limbs) >= 1
            and all(0 <= limb <= LIMB_MAX for limb in self._limbs)
            and (len(self._limbs) == 1 or self._limbs[-1] != 0)
        )

    # Inspection
    # ----------
    def is_zero(self):
        return len(self._limbs) == 1 and self._limbs[0] == 0

    def is_one(self):
        return len(self._limbs) == 1 and self._limbs[0] == 1

    def is_even(self):
        return self._limbs[0] & 1 == 0

    def trailing_zeros(self):
        """Number of zero bits below the lowest set bit.  Zero for zero."""
        count = 0
        for limb in self._limbs:
            if limb:
                return count + (limb & -limb).bit_length() - 1
            count += LIMB_BITS
        return 0

    def __bool__(self):
        return not self.is_zero()

    # Comparison
    # ----------
    def cmp_ubi(self, other):
        """Three-way comparison:  -1, 0, or +1."""
        a = self._limbs
        b = other._limbs
        if len(a) != len(b):
            return -1 if len(a) < len(b) else 1
        for i in range(len(a) - 1, -1, -1):
            if a[i] != b[i]:
                return -1 if a[i] < b[i] else 1
        return 0

    def cmp_u32(self, n):
        if len(self._limbs) > 1:
            return 1
        limb = self._limbs[0]
        return (limb > n) - (limb < n)

    def _compare(self, other):
        if isinstance(other, UBigInt):
            return self.cmp_ubi(other)
        if isinstance(other, numbers.Integral) and not isinstance(other, bool):
            if other < 0:
                return 1
            return self.cmp_ubi(UBigInt(other))
        return NotImplemented

    def __eq__(self, other):
        result = self._compare(other)
        if result is NotImplemented:
            return NotImplemented
        return result == 0

    def __ne__(self, other):
        eq_result = self.__eq__(other)
        if eq_result is NotImplemented:
            return NotImplemented
        return not eq_result

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

    # Addition and subtraction
    # ------------------------
    @staticmethod
    def _check_limb_operand(n):
        if not 0 <= n <= LIMB_MAX:
            raise ValueError("Single-limb operand out of range: {}".format(n))

    def add_ubi_mut(self, other):
        a = self._limbs
        b = other._limbs
        if b is a:
            b = list(b)
        if len(a) < len(b):
            a.extend([0] * (len(b) - len(a)))
        carry = 0
        for i in range(len(b)):
            s = a[i] + b[i] + carry
            a[i] = s & LIMB_MAX
            carry = s >> LIMB_BITS
        i = len(b)
        while carry:
            if i == len(a):
                a.append(carry)
                break
            s = a[i] + carry
            a[i] = s & LIMB_MAX
            carry = s >> LIMB_BITS
            i += 1
        _normalize(a)

    def add_ubi(self, other):
        result = self.copy()
        result.add_ubi_mut(other)
        return result

    def add_u32_mut(self, n):
        self._check_limb_operand(n)
        a = self._limbs
        carry = n
        i = 0
        while carry:
            if i == len(a):
                a.append(carry)
                break
            s = a[i] + carry
            a[i] = s & LIMB_MAX
            carry = s >> LIMB_BITS
            i += 1

    def add_u32(self, n):
        result = self.copy()
        result.add_u32_mut(n)
        return result

    def sub_ubi_mut(self, other):
        """
        self -= other

        Raise SubtractionUnderflow, leaving self unchanged, if other is bigger.
        """
        if self.cmp_ubi(other) < 0:
            raise self.SubtractionUnderflow("Attempt to subtract {} from {}".format(other, self))
        a = self._limbs
        b = other._limbs
        if b is a:
            self._limbs = [0]
            return
        borrow = 0
        for i in range(len(b)):
            d = a[i] - b[i] - borrow
            if d < 0:
                a[i] = d + LIMB_BASE
                borrow = 1
            else:
                a[i] = d
                borrow = 0
        i = len(b)
        while borrow:
            if a[i] == 0:
                a[i] = LIMB_MAX
                i += 1
            else:
                a[i] -= 1
                borrow = 0
        _normalize(a)
        assert self._is_valid()

    def sub_ubi(self, other):
        result = self.copy()
        result.sub_ubi_mut(other)
        return result

    def sub_u32_mut(self, n):
        self._check_limb_operand(n)
        if self.cmp_u32(n) < 0:
            raise self.SubtractionUnderflow("Attempt to subtract {} from {}".format(n, self))
        a = self._limbs
        if a[0] >= n:
            a[0] -= n
            return
        a[0] = a[0] + LIMB_BASE - n
        i = 1
        while a[i] == 0:
            a[i] = LIMB_MAX
            i += 1
        a[i] -= 1
        _normalize(a)

    def sub_u32(self, n):
        result = self.copy()
        result.sub_u32_mut(n)
        return result

    # Multiplication
    # --------------
    def mul_u32_mut(self, n):
        self._check_limb_operand(n)
        if n == 0:
            self._limbs = [0]
            return
        a = self._limbs
        carry = 0
        for i in range(len(a)):
            p = a[i] * n + carry
            a[i] = p & LIMB_MAX
            carry = p >> LIMB_BITS
        if carry:
            a.append(carry)

    def mul_u32(self, n):
        result = self.copy()
        result.mul_u32_mut(n)
        return result

    def mul_ubi_mut(self, other):
        self._limbs = _mul_limbs(self._limbs, other._limbs)

    def mul_ubi(self, other):
        return self._from_limbs(_mul_limbs(self._limbs, other._limbs))

    def pow_u32(self, exponent):
        """self ** exponent by repeated squaring.  0 ** 0 is 1."""
        self._check_limb_operand(exponent)
        result = self.one()
        base = self.copy()
        while exponent:
            if exponent & 1:
                result.mul_ubi_mut(base)
            exponent >>= 1
            if exponent:
                base.mul_ubi_mut(base)
        return result

    # Division
    # --------
    def divmod_u32_mut(self, n):
        """self //= n, returning the remainder as an int."""
        self._check_limb_operand(n)
        if n == 0:
            raise ZeroDivisionError("Attempt to divide {} by zero".format(self))
        a = self._limbs
        remainder = 0
        for i in range(len(a) - 1, -1, -1):
            current = (remainder << LIMB_BITS) | a[i]
            a[i], remainder = divmod(current, n)
        _normalize(a)
        return remainder

    def div_u32_mut(self, n):
        self.divmod_u32_mut(n)

    def div_u32(self, n):
        result = self.copy()
        result.divmod_u32_mut(n)
        return result

    def rem_u32(self, n):
        """self % n, as an int."""
        return self.copy().divmod_u32_mut(n)

    def rem_u32_mut(self, n):
        self._limbs = [self.copy().divmod_u32_mut(n)]

    def divmod_u32(self, n):
        quotient = self.copy()
        remainder = quotient.divmod_u32_mut(n)
        return quotient, remainder

    def divmod_ubi(self, other):
        """
        Quotient and remainder, both UBigInt.

        assert (UBigInt(3), UBigInt(1)) == UBigInt(10).divmod_ubi(UBigInt(3))
        """
        if other.is_zero():
            raise ZeroDivisionError("Attempt to divide {} by zero".format(self))
        if len(other._limbs) == 1:
            quotient, remainder = self.divmod_u32(other._limbs[0])
            return quotient, type(self)(remainder)
        if self.cmp_ubi(other) < 0:
            return type(self)(), self.copy()
        quotient, remainder = _divmod_limbs(self._limbs, other._limbs)
        return self._from_limbs(quotient), self._from_limbs(remainder)

    def divmod_ubi_mut(self, other):
        """self //= other, returning the remainder as a UBigInt."""
        quotient, remainder = self.divmod_ubi(other)
        self._limbs = quotient._limbs
        return remainder

    def div_ubi(self, other):
        return self.divmod_ubi(other)[0]

    def div_ubi_mut(self, other):
        self._limbs = self.divmod_ubi(other)[0]._limbs

    def rem_ubi(self, other):
        return self.divmod_ubi(other)[1]

    def rem_ubi_mut(self, other):
        self._limbs = self.divmod_ubi(other)[1]._limbs

    # Shifts
    # ------
    @staticmethod
    def _check_shift(bits):
        if bits < 0:
            raise ValueError("Negative shift count: {}".format(bits))

    def shift_left_mut(self, bits):
        """self *= 2**bits"""
        self._check_shift(bits)
        if self.is_zero():
            return
        whole_limbs, sub_limb_bits = divmod(bits, LIMB_BITS)
        shifted = _shift_left_limbs(self._limbs, sub_limb_bits)
        self._limbs = _normalize([0] * whole_limbs + shifted)

    def shift_left(self, bits):
        result = self.copy()
        result.shift_left_mut(bits)
        return result

    def shift_right_mut(self, bits):
        """self //= 2**bits  (the bits shifted out are lost)"""
        self._check_shift(bits)
        whole_limbs, sub_limb_bits = divmod(bits, LIMB_BITS)
        if whole_limbs >= len(self._limbs):
            self._limbs = [0]
            return
        a = self._limbs[whole_limbs:]
        if sub_limb_bits:
            for i in range(len(a)):
                high = (a[i + 1] << (LIMB_BITS - sub_limb_bits)) & LIMB_MAX if i + 1 < len(a) else 0
                a[i] = (a[i] >> sub_limb_bits) | high
        self._limbs = _normalize(a)

    def shift_right(self, bits):
        result = self.copy()
        result.shift_right_mut(bits)
        return result

    # Logarithms
    # ----------
    def log2(self):
        """
        floor(log2(self)), as a UBigInt.

        By convention the log2 of zero is zero, the same as the log2 of one.
        """
        top = len(self._limbs) - 1
        return type(self)(top * LIMB_BITS + log2_u32(self._limbs[top]))

    def log2_accurate(self):
        """
        Approximately floor(log2(self) * 2**24), as a UBigInt.

        Squares the value 24 times.  After each squaring the low limbs beyond three are dropped,
        and their bit count is credited to the result, which doubles along with the logarithm.
        Exact for powers of two.  Expensive.  Zero gives zero.
        """
        result = type(self)()
        reduced = self.copy()
        reduced._drop_low_limbs_into(result)
        for _ in range(LOG2_ACCURATE_BITS):
            reduced.mul_ubi_mut(reduced)
            result.mul_u32_mut(2)
            reduced._drop_low_limbs_into(result)
        result.add_ubi_mut(reduced.log2())
        return result

    def _drop_low_limbs_into(self, accumulator):
        excess = len(self._limbs) - LOG2_ACCURATE_KEEP_LIMBS
        if excess > 0:
            accumulator.add_ubi_mut(type(self)(excess * LIMB_BITS))
            self._limbs = self._limbs[excess:]

    # Roots and primes
    # ----------------
    def sqrt(self):
        """
        floor(sqrt(self))

        The step starts above the root, a power of two from the bit length.
        Each round raises the root while its square is too small,
        then lowers it while its square is too big, quartering the step in between.
        """
        step = self.one().shift_left(int(self.log2()) // 2 + 1)
        root = type(self)()
        while True:
            while root.mul_ubi(root).cmp_ubi(self) < 0:
                root.add_ubi_mut(step)
            step.div_u32_mut(4)
            if step.cmp_u32(4) < 0:
                step = self.one()
            while root.mul_ubi(root).cmp_ubi(self) > 0:
                root.sub_ubi_mut(step)
            step.div_u32_mut(4)
            if step.is_zero():
                break
        return root

    def is_prime(self):
        """
        Trial division by odd numbers up to sqrt(self).

        When sqrt(self) + 1 fits in a limb, self fits in 64 bits and native ints do the work.
        Otherwise big-integer trial division takes over, which is hopelessly slow for a big prime.
        """
        if self.is_even():
            return self.cmp_u32(2) == 0
        if self.is_one():
            return False
        bound = self.sqrt().add_u32(1)
        if bound.limb_count() == 1:
            n = int(self)
            limit = int(bound)
            divisor = 3
            while divisor < limit:
                if n % divisor == 0:
                    return False
                divisor += 2
            return True

        logger.warning("is_prime() on a %d-limb value falls back to big-integer trial division", self.limb_count())
        divisor = 3
        while divisor <= LIMB_MAX:
            if self.rem_u32(divisor) == 0:
                return False
            divisor += 2
        big_divisor = type(self)(divisor)
        while big_divisor.mul_ubi(big_divisor).cmp_ubi(self) <= 0:
            if self.rem_ubi(big_divisor).is_zero():
                return False
            big_divisor.add_u32_mut(2)
        return True

    def prime_factorial(self):
        """
        Prime factors, smallest first, repeated by multiplicity.

        assert [2, 2, 3] == UBigInt(12).prime_factorial()

        By convention 1 factors to [1] and 0 to [0].
        """
        remaining = self.copy()
        result = []
        while remaining.cmp_u32(1) > 0 and remaining.is_even():
            remaining.shift_right_mut(1)
            result.append(type(self)(2))

        divisor = 3
        while divisor <= LIMB_MAX and remaining.cmp_ubi(type(self)(divisor * divisor)) >= 0:
            while remaining.rem_u32(divisor) == 0:
                remaining.div_u32_mut(divisor)
                result.append(type(self)(divisor))
            divisor += 2

        if divisor > LIMB_MAX:
            logger.warning("prime_factorial() falls back to big-integer divisors past 2**32")
            big_divisor = type(self)(divisor)
            while remaining.cmp_ubi(big_divisor.mul_ubi(big_divisor)) >= 0:
                while remaining.rem_ubi(big_divisor).is_zero():
                    remaining.div_ubi_mut(big_divisor)
                    result.append(big_divisor.copy())
                big_divisor.add_u32_mut(2)

        if remaining.cmp_u32(1) > 0 or not result:
            result.append(remaining)
        return result

    # Sequences
    # ---------
    @classmethod
    def factorial(cls, n):
        """
        n!

        Native ints up to 20! (the last one below 2**64), then limb multiplication,
        batching small factors into one 32-bit multiplier at a time.
        """
        cls._check_limb_operand(n)
        if n <= 20:
            product = 1
            for i in range(2, n + 1):
                product *= i
            return cls.from_u64(product)

        result = cls.factorial(20)
        buffer = 1
        for i in range(21, n + 1):
            if buffer * i > LIMB_MAX:
                result.mul_u32_mut(buffer)
                buffer = i
            else:
                buffer *= i
        result.mul_u32_mut(buffer)
        return result

    FIBONACCI_NATIVE_MAX = 93   # fibonacci(93) is the last one below 2**64

    @classmethod
    def fibonacci(cls, n):
        """fibonacci(0) == 0, fibonacci(1) == 1, fibonacci(n) == fibonacci(n-1) + fibonacci(n-2)"""
        cls._check_limb_operand(n)
        if n <= cls.FIBONACCI_NATIVE_MAX:
            return cls.from_u64(_fibonacci_native(n))

        last = cls.from_u64(_fibonacci_native(cls.FIBONACCI_NATIVE_MAX))
        before_last = cls.from_u64(_fibonacci_native(cls.FIBONACCI_NATIVE_MAX - 1))
        for _ in range(n - cls.FIBONACCI_NATIVE_MAX):
            last, before_last = last.add_ubi(before_last), last
        return last

    # "to" conversions:  UBigInt --> other type
    # -----------------------------------------
    def __int__(self):
        return _int_from_limbs(self._limbs)

    def _to_bounded(self, limit, width):
        if len(self._limbs) > width // LIMB_BITS:
            raise self.IntOverflowError("{} does not fit in a u{}".format(self, width))
        value = int(self)
        assert value <= limit
        return value

    def to_u32(self):
        return self._to_bounded(LIMB_MAX, 32)

    def to_u64(self):
        return self._to_bounded(U64_MAX, 64)

    def to_u128(self):
        return self._to_bounded(U128_MAX, 128)

    def __str__(self):
        """Decimal digits, e.g. '42'"""
        if len(self._limbs) == 1:
            return str(self._limbs[0])
        chunks = []
        remaining = self.copy()
        while not remaining.is_zero():
            chunks.append(remaining.divmod_u32_mut(DECIMAL_CHUNK))
        return str(chunks[-1]) + ''.join('{:09d}'.format(chunk) for chunk in reversed(chunks[:-1]))

    def to_hex_string(self):
        """
        Lower case hexadecimal with a 0x prefix.

        assert '0x100000000' == UBigInt(2**32).to_hex_string()
        """
        top = '{:x}'.format(self._limbs[-1])
        return '0x' + top + ''.join('{:08x}'.format(limb) for limb in reversed(self._limbs[:-1]))

    def __repr__(self):
        return "UBigInt('{}')".format(self)

    # Operators
    # ---------
    @classmethod
    def _coerce(cls, other):
        if isinstance(other, UBigInt):
            return other
        if isinstance(other, numbers.Integral) and not isinstance(other, bool) and other >= 0:
            return cls(other)
        return NotImplemented

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

    def __add__(self, other):  return self._binary(other, UBigInt.add_ubi)
    def __radd__(self, other): return self._binary_reflected(other, UBigInt.add_ubi)
    def __sub__(self, other):  return self._binary(other, UBigInt.sub_ubi)
    def __rsub__(self, other): return self._binary_reflected(other, UBigInt.sub_ubi)
    def __mul__(self, other):  return self._binary(other, UBigInt.mul_ubi)
    def __rmul__(self, other): return self._binary_reflected(other, UBigInt.mul_ubi)
    def __floordiv__(self, other):  return self._binary(other, UBigInt.div_ubi)
    def __rfloordiv__(self, other): return self._binary_reflected(other, UBigInt.div_ubi)
    def __mod__(self, other):  return self._binary(other, UBigInt.rem_ubi)
    def __rmod__(self, other): return self._binary_reflected(other, UBigInt.rem_ubi)
    def __divmod__(self, other):  return self._binary(other, UBigInt.divmod_ubi)
    def __rdivmod__(self, other): return self._binary_reflected(other, UBigInt.divmod_ubi)

    def __lshift__(self, bits): return self.shift_left(bits)
    def __rshift__(self, bits): return self.shift_right(bits)
    def __pow__(self, exponent): return self.pow_u32(exponent)


def _fibonacci_native(n):
    a, b = 0, 1
    for _ in range(n):
        a, b = b, a + b
    return a
assert 233 == _fibonacci_native(13)


def gcd_ubi(a, b):
    """
    Greatest common divisor, by Euclid's algorithm.

    gcd_ubi(0, b) is b, so gcd_ubi(0, 0) is 0.
    """
    if a.is_zero():
        return b.copy()
    a, b = b.rem_ubi(a), a.copy()
    while not a.is_zero():
        a, b = b.rem_ubi(a), a
    return b
