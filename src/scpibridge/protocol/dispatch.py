"""
Routes tokenized SCPI commands and queries to an InstrumentBridge.

Commands are looked up in COMMAND_ROUTES, a table of (namespace, verb, channel types) entries.
A command is only carried out once every argument has parsed, so a bad argument never leaves
the instrument half-configured. Failures are never reported to the client.
"""
import logging
from decimal import Decimal

from scpibridge.bridge import ChannelType, InstrumentBridge, UnknownChannelError
from scpibridge.protocol.arguments import channel_parser, parse_double, parse_literal, parse_text, parse_uint64
from scpibridge.protocol.scpi import TRIGGER_SUBJECT, ParsedCommand

logger = logging.getLogger(__name__)

FS_PER_SECOND = 1e15

# command namespaces, selected by the subject of the command
DEVICE = 'device'
TRIGGER = 'trigger'
CHANNEL = 'channel'

ANY_CHANNEL = tuple(ChannelType)
ANALOG_ONLY = (ChannelType.ANALOG,)
DIGITAL_ONLY = (ChannelType.DIGITAL,)

# placeholder in a route's parsers for an argument that names a channel
CHANNEL_NAME = object()


def namespace_of(subject: str) -> str:
    """
    >>> namespace_of('')
    'device'
    >>> namespace_of('TRIG')
    'trigger'
    >>> namespace_of('C1')
    'channel'
    """
    if not subject:
        return DEVICE
    if subject == TRIGGER_SUBJECT:
        return TRIGGER
    return CHANNEL


class CommandRoute:
    """
    One legal command.
    :param namespace: DEVICE, TRIGGER or CHANNEL
    :param verb: the verb that selects this route
    :param parsers: one parser per argument, the argument count must match exactly.
    :param action: called with the bridge, then the channel id for channel commands, then the parsed arguments.
    :param channel_types: for channel commands, the channel types the command is legal for.
    """

    def __init__(self, namespace, verb, parsers, action, channel_types=None):
        self.namespace = namespace
        self.verb = verb
        self.parsers = parsers
        self.action = action
        self.channel_types = channel_types

    def accepts(self, namespace, verb, channel_type=None) -> bool:
        if namespace != self.namespace or verb != self.verb:
            return False
        return self.channel_types is None or channel_type in self.channel_types

    def __repr__(self):
        return 'CommandRoute(%s, %s)' % (self.namespace, self.verb)


COMMAND_ROUTES = (
    CommandRoute(DEVICE, 'START', (), lambda bridge: bridge.acquisition_start(False)),
    CommandRoute(DEVICE, 'SINGLE', (), lambda bridge: bridge.acquisition_start(True)),
    CommandRoute(DEVICE, 'FORCE', (), lambda bridge: bridge.acquisition_force_trigger()),
    CommandRoute(DEVICE, 'STOP', (), lambda bridge: bridge.acquisition_stop()),
    CommandRoute(DEVICE, 'RATE', (parse_uint64,), lambda bridge, rate: bridge.set_sample_rate(rate)),
    CommandRoute(DEVICE, 'DEPTH', (parse_uint64,), lambda bridge, depth: bridge.set_sample_depth(depth)),

    CommandRoute(TRIGGER, 'DELAY', (parse_uint64,), lambda bridge, delay: bridge.set_trigger_delay(delay)),
    CommandRoute(TRIGGER, 'SOU', (CHANNEL_NAME,), lambda bridge, source: bridge.set_trigger_source(source)),
    CommandRoute(TRIGGER, 'MODE', (parse_literal('EDGE'),), lambda bridge, mode: bridge.set_trigger_type_edge()),
    CommandRoute(TRIGGER, 'LEV', (parse_double,), lambda bridge, level: bridge.set_trigger_level(level)),
    CommandRoute(TRIGGER, 'EDGE:DIR', (parse_text,), lambda bridge, edge: bridge.set_edge_trigger_edge(edge)),

    CommandRoute(CHANNEL, 'ON', (), lambda bridge, ch: bridge.set_channel_enabled(ch, True), ANY_CHANNEL),
    CommandRoute(CHANNEL, 'OFF', (), lambda bridge, ch: bridge.set_channel_enabled(ch, False), ANY_CHANNEL),
    CommandRoute(CHANNEL, 'COUP', (parse_text,), lambda bridge, ch, v: bridge.set_analog_coupling(ch, v), ANALOG_ONLY),
    CommandRoute(CHANNEL, 'RANGE', (parse_double,), lambda bridge, ch, v: bridge.set_analog_range(ch, v), ANALOG_ONLY),
    CommandRoute(CHANNEL, 'OFFS', (parse_double,), lambda bridge, ch, v: bridge.set_analog_offset(ch, v), ANALOG_ONLY),
    CommandRoute(CHANNEL, 'THRESH', (parse_double,), lambda bridge, ch, v: bridge.set_digital_threshold(ch, v),
                 DIGITAL_ONLY),
    CommandRoute(CHANNEL, 'HYS', (parse_double,), lambda bridge, ch, v: bridge.set_digital_hysteresis(ch, v),
                 DIGITAL_ONLY),
)


def find_route(namespace, verb, channel_type=None, routes=COMMAND_ROUTES):
    """
    Looks up the route for a command.
    :return: the matching CommandRoute, or None if the command is not legal.

    >>> find_route(CHANNEL, 'RANGE', ChannelType.ANALOG)
    CommandRoute(channel, RANGE)
    >>> find_route(CHANNEL, 'RANGE', ChannelType.DIGITAL) is None
    True
    """
    for route in routes:
        if route.accepts(namespace, verb, channel_type):
            return route
    return None


def is_known_verb(namespace, verb, routes=COMMAND_ROUTES) -> bool:
    """ Determines if any route exists for the verb in the namespace, regardless of channel type. """
    return any(route.namespace == namespace and route.verb == verb for route in routes)


def format_period(rate_hz) -> str:
    """
    Converts a sample rate to the sample period in femtoseconds, in the shortest scientific
    notation that reads back as the same value.

    >>> format_period(1000)
    '1e12'
    >>> format_period(400)
    '2.5e12'
    """
    period = FS_PER_SECOND / rate_hz
    return format(Decimal(repr(period)).normalize(), 'e').replace('e+', 'e')


def identity_reply(bridge: InstrumentBridge) -> str:
    return ','.join((bridge.make, bridge.model, bridge.serial, bridge.firmware_version))


def armed_reply(bridge: InstrumentBridge) -> str:
    return '1' if bridge.is_trigger_armed() else '0'


def rates_reply(bridge: InstrumentBridge) -> str:
    reply = ''
    for rate in bridge.get_sample_rates():
        if not rate:
            logger.warning("ignoring sample rate of 0 Hz")
            continue
        reply += format_period(rate) + ','
    return reply


def depths_reply(bridge: InstrumentBridge) -> str:
    return ''.join('%d,' % depth for depth in bridge.get_sample_depths())


QUERY_REPLIES = {
    '*IDN': identity_reply,
    'CHANS': lambda bridge: str(bridge.get_channel_count()),
    'ARMED': armed_reply,
    'RATES': rates_reply,
    'DEPTHS': depths_reply,
}


class BridgeCommandHandler:
    """
    Carries out parsed commands and queries against a bridge.
    """

    def __init__(self, bridge: InstrumentBridge, routes=COMMAND_ROUTES):
        self.bridge = bridge
        self.routes = routes
        self._channel_parser = channel_parser(bridge)

    def dispatch(self, command: ParsedCommand):
        """
        :return: a tuple of (recognized, reply). The reply is None for commands, and for unrecognized queries.
        """
        if command.is_query:
            reply = self.on_query(command)
            return reply is not None, reply
        return self.on_command(command), None

    def on_command(self, command: ParsedCommand) -> bool:
        """
        Process a command.
        :return: True if the command was recognized and processed, False if unknown or invalid.
        """
        if not command.verb:
            return False

        namespace = namespace_of(command.subject)
        target = ()
        channel_type = None
        if namespace == CHANNEL:
            try:
                channel = self.bridge.get_channel_id(command.subject)
            except UnknownChannelError:
                logger.debug("unknown channel: %s" % command.subject)
                return False
            channel_type = self.bridge.get_channel_type(channel)
            target = (channel,)

        route = find_route(namespace, command.verb, channel_type, self.routes)
        if route is None:
            if is_known_verb(namespace, command.verb, self.routes):
                logger.debug("%s not valid for %s channel %s" % (command.verb, channel_type, command.subject))
                return False
            return self.bridge.on_command(command.subject, command.verb, command.args)

        values = self._parse_arguments(route, command.args)
        if values is None:
            return False
        route.action(self.bridge, *target, *values)
        return True

    def _parse_arguments(self, route: CommandRoute, args):
        """
        :return: the parsed argument values, or None if any argument is missing or invalid.
        """
        if len(args) != len(route.parsers):
            logger.debug("%s expects %d arguments but got %d" % (route.verb, len(route.parsers), len(args)))
            return None
        values = []
        for parser, arg in zip(route.parsers, args):
            if parser is CHANNEL_NAME:
                parser = self._channel_parser
            result = parser(arg)
            if not result.ok:
                logger.debug("%s rejected: %s" % (route.verb, result.error))
                return None
            values.append(result.value)
        return values

    def on_query(self, command: ParsedCommand):
        """
        Process a query. The subject is not used by any of the generic queries.
        :return: the reply text, or None when the query isn't recognized.
        """
        if not command.verb:
            return None
        reply = QUERY_REPLIES.get(command.verb)
        if reply is not None:
            return reply(self.bridge)
        return self.bridge.on_query(command.subject, command.verb)
