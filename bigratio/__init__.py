"""
bigratio - Exact big integers and rational numbers, in pure Python.

Usage example:

    import bigratio

    third = bigratio.Ratio(1, 3)
    assert bigratio.Ratio(1) == third + third + third
    assert '1.0986' == bigratio.ln_iter(bigratio.Ratio(3), 8).to_approx_string(6)

Usage example:

    from bigratio import UBigInt, BigInt, Ratio

    assert '0x10000000000000000' == (UBigInt(2**32) * UBigInt(2**32)).to_hex_string()
    assert BigInt(-7) // BigInt(2) == BigInt(-3)    # truncates, unlike int
"""

import logging

from .ubigint import UBigInt
from .ubigint import gcd_ubi
from .bigint import BigInt
from .bigint import gcd_bi
from .ratio import Ratio
from .parse import ParseError
from .parse import EmptyInputError
from .parse import InvalidDigitError
from .parse import MalformedExponentError
from .parse import MalformedRadixError
from .parse import NonFiniteError
from .series import LogarithmDomainError
from .series import ln_iter
from .series import log_iter
from .series import exp_iter
from .series import pow_iter
from .series import sqrt_iter
from .series import cbrt_iter
from .series import sin_iter
from .series import cos_iter
from .series import tan_iter
from .series import e_iter
from .series import ln2_iter
from .series import pi_iter

__all__ = [
    'UBigInt',
    'gcd_ubi',
    'BigInt',
    'gcd_bi',
    'Ratio',
    'ParseError',
    'EmptyInputError',
    'InvalidDigitError',
    'MalformedExponentError',
    'MalformedRadixError',
    'NonFiniteError',
    'LogarithmDomainError',
    'ln_iter',
    'log_iter',
    'exp_iter',
    'pow_iter',
    'sqrt_iter',
    'cbrt_iter',
    'sin_iter',
    'cos_iter',
    'tan_iter',
    'e_iter',
    'ln2_iter',
    'pi_iter',
]

logging.getLogger(__name__).addHandler(logging.NullHandler())

from . import version
__version__ = version.__doc__
