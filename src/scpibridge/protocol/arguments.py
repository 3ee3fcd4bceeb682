"""
Parsers for command arguments. Each parser takes the raw argument text and returns a ParseResult
rather than raising, so a command can check all its arguments before acting on any of them.
"""
import logging
import math
import re

from scpibridge.bridge import UnknownChannelError
from scpibridge.support.mixins import CommonEqualityMixin, StringerMixin

logger = logging.getLogger(__name__)

UINT64_MAX = 2 ** 64 - 1

_uint_pattern = re.compile(r'\+?[0-9]+')
_double_pattern = re.compile(r'[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?')


class ParseResult(CommonEqualityMixin, StringerMixin):
    """ The outcome of parsing an argument: either a value, or the reason it could not be parsed. """

    def __init__(self, value=None, error=None):
        self.value = value
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value):
        return cls(value=value)

    @classmethod
    def failure(cls, error):
        return cls(error=error)


def parse_uint64(text: str) -> ParseResult:
    """
    >>> parse_uint64('100').value
    100
    >>> parse_uint64('-1').ok
    False
    """
    if not _uint_pattern.fullmatch(text):
        logger.warning("Invalid u64: %s" % text)
        return ParseResult.failure("not an unsigned integer: '%s'" % text)
    value = int(text)
    if value > UINT64_MAX:
        logger.warning("Invalid u64: %s" % text)
        return ParseResult.failure("out of range for u64: '%s'" % text)
    return ParseResult.success(value)


def parse_double(text: str) -> ParseResult:
    """
    >>> parse_double('-2.5e-3').value
    -0.0025
    >>> parse_double('abc').ok
    False
    """
    if not _double_pattern.fullmatch(text):
        logger.warning("Invalid double: %s" % text)
        return ParseResult.failure("not a number: '%s'" % text)
    value = float(text)
    if not math.isfinite(value):
        logger.warning("Invalid double: %s" % text)
        return ParseResult.failure("out of range for double: '%s'" % text)
    return ParseResult.success(value)


def parse_text(text: str) -> ParseResult:
    """ Free text, passed to the instrument as-is. The instrument decides what is legal. """
    return ParseResult.success(text)


def parse_literal(expected: str):
    """
    Creates a parser that only accepts the given literal text. The parsed value is the literal.

    >>> parse_literal('EDGE')('EDGE').ok
    True
    >>> parse_literal('EDGE')('PULSE').ok
    False
    """
    def parse(text):
        if text != expected:
            return ParseResult.failure("expected '%s' but was '%s'" % (expected, text))
        return ParseResult.success(text)
    return parse


def channel_parser(bridge):
    """ Creates a parser that resolves channel names to channel ids via the given bridge. """
    def parse(text):
        try:
            return ParseResult.success(bridge.get_channel_id(text))
        except UnknownChannelError:
            logger.debug("unknown channel: %s" % text)
            return ParseResult.failure("unknown channel: '%s'" % text)
    return parse
