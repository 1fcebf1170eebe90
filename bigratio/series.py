"""
Transcendental functions of Ratio values, as truncated series.

Every function takes an iteration count, and the work and accuracy grow with it.
There is no convergence test:  the same inputs always give the same Ratio.

    assert '0.6931471' == ln_iter(Ratio(2), 6).to_approx_string(9)
    assert '3.141592' == pi_iter(6).to_approx_string(8)

Intermediate values are fit() to fit_limbs(iterations) limbs, which keeps
numerators and denominators from growing with every term.
The error that fitting adds is far below the truncation error of the series.
"""

import logging

from bigratio.bigint import BigInt
from bigratio.ratio import Ratio
from bigratio.ubigint import LOG2_ACCURATE_BITS


logger = logging.getLogger(__name__)


EXP_REDUCTION_BITS = 4      # exp_iter() halves its argument to at most 2**-4 in magnitude


class LogarithmDomainError(ValueError):
    """Logarithm of zero or a negative number, e.g. ln_iter(Ratio(-1), 6)"""


def fit_limbs(iterations):
    """Limbs kept by intermediate values, a bit more than the series can resolve."""
    return iterations // 4 + 4
assert 4 == fit_limbs(0)
assert 7 == fit_limbs(12)


def _as_ratio(x):
    return x if isinstance(x, Ratio) else Ratio(x)


# Constants
# ---------
def _artanh_inv(m, iterations):
    """artanh(1/m) = 1/m + 1/(3 m**3) + 1/(5 m**5) + ...  to 2*iterations + 1 terms"""
    limbs = fit_limbs(iterations)
    m_squared = m * m
    power = Ratio(1, m)
    result = power.copy()
    for k in range(iterations):
        power.div_i32_mut(m_squared)
        result.add_rat_mut(power.div_i32(4 * k + 3))
        power.div_i32_mut(m_squared)
        result.add_rat_mut(power.div_i32(4 * k + 5))
        result.fit_mut(limbs)
    return result


def _arctan_inv(m, iterations):
    """arctan(1/m) = 1/m - 1/(3 m**3) + 1/(5 m**5) - ...  to 2*iterations + 1 terms"""
    limbs = fit_limbs(iterations)
    m_squared = m * m
    power = Ratio(1, m)
    result = power.copy()
    for k in range(iterations):
        power.div_i32_mut(m_squared)
        result.sub_rat_mut(power.div_i32(4 * k + 3))
        power.div_i32_mut(m_squared)
        result.add_rat_mut(power.div_i32(4 * k + 5))
        result.fit_mut(limbs)
    return result


def ln2_iter(iterations):
    """ln(2) = 2 artanh(1/3).  All terms are positive, so this is a little below ln(2)."""
    return _artanh_inv(3, iterations).mul_i32(2)


def pi_iter(iterations):
    """Machin's formula, pi = 16 arctan(1/5) - 4 arctan(1/239)"""
    return _arctan_inv(5, iterations).mul_i32(16).sub_rat(_arctan_inv(239, iterations).mul_i32(4))


def e_iter(iterations):
    """e = 1/0! + 1/1! + 1/2! + ...  through 1/(2*iterations + 1)!"""
    limbs = fit_limbs(iterations)
    result = Ratio(2)
    term = Ratio.one()
    for k in range(iterations):
        term.div_i32_mut(2 * k + 2)
        result.add_rat_mut(term)
        term.div_i32_mut(2 * k + 3)
        result.add_rat_mut(term)
        result.fit_mut(limbs)
    return result


# Logarithms and exponentials
# ---------------------------
def ln_iter(x, iterations):
    """
    Natural logarithm.

    Range reduction:  x = x' * 2**p, with p from the fixed-point log2 of numerator and denominator,
    rounded to nearest, so x' is within a factor of sqrt(2) of 1.  Then with a = x' - 1

        ln(x) = a - a**2/2 + a**3/3 - ...  +  p ln(2)

    summing two terms per iteration.
    """
    x = _as_ratio(x)
    if x.is_neg() or x.is_zero():
        raise LogarithmDomainError("ln({}) is undefined".format(x))
    limbs = fit_limbs(iterations)

    log2_difference = int(x.numerator.magnitude.log2_accurate()) - int(x.denominator.log2_accurate())
    p = (log2_difference + (1 << (LOG2_ACCURATE_BITS - 1))) >> LOG2_ACCURATE_BITS
    logger.debug("ln_iter(%s) range reduction 2**%d", x, p)

    a = x.mul_pow2(-p).sub_i32(1)
    a.fit_mut(limbs)
    result = a.copy()
    power = a.copy()
    for k in range(iterations):
        power.mul_rat_mut(a)
        power.fit_mut(limbs)
        result.sub_rat_mut(power.div_i32(2 * k + 2))
        power.mul_rat_mut(a)
        power.fit_mut(limbs)
        result.add_rat_mut(power.div_i32(2 * k + 3))
        result.fit_mut(limbs)

    if p != 0:
        result.add_rat_mut(ln2_iter(iterations).mul_bi(BigInt(p)))
    return result


def log_iter(x, base, iterations):
    """Logarithm in any positive base other than 1."""
    return ln_iter(x, iterations).div_rat(ln_iter(base, iterations))


def exp_iter(x, iterations):
    """
    e ** x

    Range reduction:  r = x / 2**s with |r| <= 2**-4, then

        e ** x = (1 + r + r**2/2! + ... ) ** (2**s)

    with exactly iterations terms of the Taylor series, so exp_iter(x, 0) is zero.
    """
    x = _as_ratio(x)
    limbs = fit_limbs(iterations) + 1

    numer_log2 = int(x.numerator.magnitude.log2())
    denom_log2 = int(x.denominator.log2())
    s = max(0, numer_log2 - denom_log2 + 1 + EXP_REDUCTION_BITS)
    logger.debug("exp_iter(%s) range reduction 2**%d", x, s)

    r = x.mul_pow2(-s)
    r.fit_mut(limbs)
    result = Ratio.zero()
    term = Ratio.one()
    for k in range(iterations):
        result.add_rat_mut(term)
        term.mul_rat_mut(r)
        term.div_i32_mut(k + 1)
        term.fit_mut(limbs)
        result.fit_mut(limbs)

    for _ in range(s):
        result.mul_rat_mut(result)
        result.fit_mut(limbs)
    return result


def pow_iter(a, b, iterations):
    """
    a ** b = e ** (b ln(a))

    Zero to any power is zero, including 0 ** 0.
    A negative base raises LogarithmDomainError, even for an integer exponent.
    """
    a = _as_ratio(a)
    b = _as_ratio(b)
    if a.is_zero():
        return Ratio.zero()
    return exp_iter(b.mul_rat(ln_iter(a, iterations)), iterations)


def sqrt_iter(x, iterations):
    return pow_iter(x, Ratio(1, 2), iterations)


def cbrt_iter(x, iterations):
    """Cube root, and unlike sqrt_iter() defined for negative x:  cbrt(-x) = -cbrt(x)"""
    x = _as_ratio(x)
    if x.is_neg():
        return pow_iter(x.neg(), Ratio(1, 3), iterations).neg()
    return pow_iter(x, Ratio(1, 3), iterations)


# Trigonometry
# ------------
def _reduce_angle(x, iterations):
    """An angle equal to x modulo 2 pi, in [-pi, pi)."""
    pi = pi_iter(iterations)
    two_pi = pi.mul_i32(2)
    turns = x.add_rat(pi).div_rat(two_pi).floor()
    reduced = x.sub_rat(turns.mul_rat(two_pi))
    reduced.fit_mut(fit_limbs(iterations))
    return reduced


def sin_iter(x, iterations):
    """sin(r) = r - r**3/3! + r**5/5! - ...  two terms per iteration, after reducing x to [-pi, pi)"""
    r = _reduce_angle(_as_ratio(x), iterations)
    limbs = fit_limbs(iterations)
    r_squared = r.mul_rat(r)
    result = r.copy()
    term = r.copy()
    for k in range(iterations):
        term.mul_rat_mut(r_squared)
        term.div_i32_mut(4 * k + 2)
        term.div_i32_mut(4 * k + 3)
        term.fit_mut(limbs)
        result.sub_rat_mut(term)
        term.mul_rat_mut(r_squared)
        term.div_i32_mut(4 * k + 4)
        term.div_i32_mut(4 * k + 5)
        term.fit_mut(limbs)
        result.add_rat_mut(term)
        result.fit_mut(limbs)
    return result


def cos_iter(x, iterations):
    """cos(r) = 1 - r**2/2! + r**4/4! - ...  two terms per iteration, after reducing x to [-pi, pi)"""
    r = _reduce_angle(_as_ratio(x), iterations)
    limbs = fit_limbs(iterations)
    r_squared = r.mul_rat(r)
    result = Ratio.one()
    term = Ratio.one()
    for k in range(iterations):
        term.mul_rat_mut(r_squared)
        term.div_i32_mut(4 * k + 1)
        term.div_i32_mut(4 * k + 2)
        term.fit_mut(limbs)
        result.sub_rat_mut(term)
        term.mul_rat_mut(r_squared)
        term.div_i32_mut(4 * k + 3)
        term.div_i32_mut(4 * k + 4)
        term.fit_mut(limbs)
        result.add_rat_mut(term)
        result.fit_mut(limbs)
    return result


def tan_iter(x, iterations):
    return sin_iter(x, iterations).div_rat(cos_iter(x, iterations))
