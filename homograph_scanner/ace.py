"""
ASCII-Compatible Encoding
=========================

Encoding goes through the ``idna`` library (IDNA 2008 with UTS #46
mapping). Decoding is a lenient RFC 3492 Bootstring decoder: malformed
input yields a best-effort string instead of an exception, which is what
the reverse scan needs for hostile domains.
"""

import logging

import idna

logger = logging.getLogger(__name__)


ACE_PREFIX = 'xn--'

# RFC 3492 parameters for Punycode
BASE = 36
TMIN = 1
TMAX = 26
SKEW = 38
DAMP = 700
INITIAL_BIAS = 72
INITIAL_N = 128
DELIMITER = '-'

MAX_CODE_POINT = 0x10FFFF
SURROGATES = range(0xD800, 0xE000)


def to_ace(domain: str) -> str:
    """
    Convert a domain to its ACE form.

    ASCII-only domains are returned unchanged, as is anything ``idna``
    refuses to encode.
    """
    if domain.isascii():
        return domain
    try:
        return idna.encode(domain, uts46=True).decode('ascii')
    except idna.IDNAError as e:
        logger.debug(f"ACE encoding failed for {domain!r}: {e}")
        return domain


def _adapt(delta: int, num_points: int, first: bool) -> int:
    delta = delta // DAMP if first else delta // 2
    delta += delta // num_points
    k = 0
    while delta > ((BASE - TMIN) * TMAX) // 2:
        delta //= BASE - TMIN
        k += BASE
    return k + ((BASE - TMIN + 1) * delta) // (delta + SKEW)


def _digit_value(char: str) -> int:
    cp = ord(char)
    if 0x30 <= cp <= 0x39:
        return cp - 0x30 + 26
    if 0x41 <= cp <= 0x5A:
        return cp - 0x41
    if 0x61 <= cp <= 0x7A:
        return cp - 0x61
    return BASE


def _threshold(k: int, bias: int) -> int:
    if k <= bias:
        return TMIN
    if k >= bias + TMAX:
        return TMAX
    return k - bias


def decode_label(label: str) -> str:
    """
    Decode a single ``xn--`` label; other labels are returned as-is.

    An invalid digit or a digit sequence cut short ends the current
    character's read early; the character is still inserted.
    """
    if not label.lower().startswith(ACE_PREFIX):
        return label
    encoded = label[len(ACE_PREFIX):]

    n = INITIAL_N
    bias = INITIAL_BIAS
    i = 0

    delimiter = encoded.rfind(DELIMITER)
    if delimiter > 0:
        output = list(encoded[:delimiter])
        pos = delimiter + 1
    else:
        output = []
        pos = 0

    first = True
    while pos < len(encoded):
        old_i = i
        w = 1
        k = BASE
        while pos < len(encoded):
            digit = _digit_value(encoded[pos])
            pos += 1
            if digit >= BASE:
                break
            i += digit * w
            t = _threshold(k, bias)
            if digit < t:
                break
            w *= BASE - t
            k += BASE

        length = len(output) + 1
        bias = _adapt(i - old_i, length, first)
        first = False
        n += i // length
        i %= length
        if n > MAX_CODE_POINT or n in SURROGATES:
            logger.debug(f"Invalid code point U+{n:04X} while decoding {label!r}")
            break
        output.insert(i, chr(n))
        i += 1

    return ''.join(output)


def from_ace(domain: str) -> str:
    """Decode every ACE label of a domain."""
    return '.'.join(decode_label(part) for part in domain.split('.'))
