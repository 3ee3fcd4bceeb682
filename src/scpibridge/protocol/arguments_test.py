import unittest
from unittest.mock import Mock

from hamcrest import assert_that, is_, equal_to, none, not_none

from scpibridge.bridge import UnknownChannelError
from scpibridge.protocol.arguments import ParseResult, parse_uint64, parse_double, parse_text, parse_literal, \
    channel_parser, UINT64_MAX


class ParseResultTest(unittest.TestCase):

    def test_success(self):
        sut = ParseResult.success(5)
        assert_that(sut.ok, is_(True))
        assert_that(sut.value, is_(5))
        assert_that(sut.error, is_(none()))

    def test_failure(self):
        sut = ParseResult.failure("bad")
        assert_that(sut.ok, is_(False))
        assert_that(sut.value, is_(none()))
        assert_that(sut.error, is_("bad"))

    def test_falsy_value_is_still_ok(self):
        assert_that(ParseResult.success(0).ok, is_(True))


class ParseUint64Test(unittest.TestCase):

    def test_valid(self):
        assert_that(parse_uint64("100"), is_(equal_to(ParseResult.success(100))))
        assert_that(parse_uint64("+7").value, is_(7))
        assert_that(parse_uint64("0").value, is_(0))

    def test_max(self):
        assert_that(parse_uint64(str(UINT64_MAX)).value, is_(UINT64_MAX))

    def test_overflow(self):
        assert_that(parse_uint64(str(UINT64_MAX + 1)).ok, is_(False))

    def test_invalid(self):
        for text in ("", "abc", "-1", "1.5", "1e3", "12abc", " 12", "1_000"):
            result = parse_uint64(text)
            assert_that(result.ok, is_(False), text)
            assert_that(result.error, is_(not_none()))

    def test_failure_is_logged(self):
        with self.assertLogs('scpibridge.protocol.arguments', 'WARNING') as logs:
            parse_uint64("abc")
        assert_that(logs.output, is_(['WARNING:scpibridge.protocol.arguments:Invalid u64: abc']))


class ParseDoubleTest(unittest.TestCase):

    def test_valid(self):
        assert_that(parse_double("1.0").value, is_(1.0))
        assert_that(parse_double("-0.5").value, is_(-0.5))
        assert_that(parse_double("+3").value, is_(3.0))
        assert_that(parse_double(".25").value, is_(0.25))
        assert_that(parse_double("5.").value, is_(5.0))
        assert_that(parse_double("1E3").value, is_(1000.0))
        assert_that(parse_double("2.5e-3").value, is_(0.0025))

    def test_invalid(self):
        for text in ("", "abc", "1.0V", "nan", "inf", "-", ".", "e5", "1_0", "0x10"):
            assert_that(parse_double(text).ok, is_(False), text)

    def test_overflow(self):
        assert_that(parse_double("1e999").ok, is_(False))

    def test_failure_is_logged(self):
        with self.assertLogs('scpibridge.protocol.arguments', 'WARNING') as logs:
            parse_double("abc")
        assert_that(logs.output, is_(['WARNING:scpibridge.protocol.arguments:Invalid double: abc']))


class ParseTextTest(unittest.TestCase):

    def test_passes_anything(self):
        assert_that(parse_text("RISING").value, is_("RISING"))
        assert_that(parse_text("x:y").value, is_("x:y"))


class ParseLiteralTest(unittest.TestCase):

    def test_matches_exactly(self):
        parse = parse_literal("EDGE")
        assert_that(parse("EDGE").value, is_("EDGE"))
        assert_that(parse("edge").ok, is_(False))
        assert_that(parse("EDGES").ok, is_(False))


class ChannelParserTest(unittest.TestCase):

    def test_resolves_channel(self):
        bridge = Mock()
        bridge.get_channel_id.return_value = 3
        result = channel_parser(bridge)("C4")
        assert_that(result.value, is_(3))
        bridge.get_channel_id.assert_called_once_with("C4")

    def test_unknown_channel_fails(self):
        bridge = Mock()
        bridge.get_channel_id.side_effect = UnknownChannelError("X9")
        result = channel_parser(bridge)("X9")
        assert_that(result.ok, is_(False))
