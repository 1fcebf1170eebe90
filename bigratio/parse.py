"""
Text parsing shared by UBigInt, BigInt and Ratio.

Digits may be grouped with underscores for readability:

    assert 10000000 == int(UBigInt('1000_0000'))
    assert 255 == int(UBigInt('0xff'))

Malformed text raises a subclass of ParseError, which is a ValueError,
so callers can catch the broad or the specific complaint.
"""


class ParseError(ValueError):
    """Text that cannot become a number."""


class EmptyInputError(ParseError):
    """e.g. UBigInt('') or Ratio('-')"""


class InvalidDigitError(ParseError):
    """e.g. UBigInt('12a') or Ratio('1.2.3')"""


class MalformedExponentError(ParseError):
    """e.g. Ratio('1e') or Ratio('1e+') or Ratio('1e2.5')"""


class MalformedRadixError(ParseError):
    """e.g. UBigInt('0x') or UBigInt('0x_')"""


class NonFiniteError(ParseError):
    """NaN and the infinities have no exact rational value, e.g. Ratio(float('nan'))"""


DECIMAL_DIGITS = '0123456789'
HEX_DIGITS = '0123456789abcdefABCDEF'


def split_sign(s):
    """
    Peel an optional leading '+' or '-'.

    Return a tuple (is_negative, rest).
    """
    if s[:1] == '-':
        return True, s[1:]
    if s[:1] == '+':
        return False, s[1:]
    return False, s
assert (True, '5') == split_sign('-5')
assert (False, '5') == split_sign('5')


def is_hex_literal(s):
    return s[:2] in ('0x', '0X')


def strip_underscores(s, allowed, whole):
    """
    Remove digit-grouping underscores, checking every other character is allowed.

    whole - the complete original text, for error messages
    """
    if s == '':
        raise EmptyInputError("No digits in {}".format(repr(whole)))
    for c in s:
        if c != '_' and c not in allowed:
            raise InvalidDigitError("Invalid character {char} in {whole}".format(
                char=repr(c),
                whole=repr(whole),
            ))
    digits = s.replace('_', '')
    if digits == '':
        raise EmptyInputError("Only underscores in {}".format(repr(whole)))
    return digits


def decimal_digits(s, whole=None):
    """Validated decimal digit string, underscores removed."""
    return strip_underscores(s, DECIMAL_DIGITS, s if whole is None else whole)
assert '1000' == decimal_digits('1_000')


def hex_digits(s, whole=None):
    """
    Validated hexadecimal digit string from a '0x' literal, prefix and underscores removed.

    A bare prefix is a malformed radix marker, not an empty input.
    """
    whole = s if whole is None else whole
    assert is_hex_literal(s)
    body = s[2:]
    if body.replace('_', '') == '':
        raise MalformedRadixError("Radix marker without digits in {}".format(repr(whole)))
    return strip_underscores(body, HEX_DIGITS, whole)
assert 'ff' == hex_digits('0x_ff')
