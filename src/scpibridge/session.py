"""
Runs the command loop for a single SCPI client.
"""
import logging

from scpibridge.conduit.base import Conduit
from scpibridge.protocol.dispatch import BridgeCommandHandler
from scpibridge.protocol.io import LineReader, ReplyWriter
from scpibridge.protocol.scpi import ParsedCommand, tokenize
from scpibridge.support.events import EventSource

logger = logging.getLogger(__name__)

DEFAULT_TERMINATE_KEYWORD = 'EXIT'


class SessionEvent:
    """ base class for session events. """
    def __init__(self, session):
        self.session = session


class CommandUnrecognizedEvent(SessionEvent):
    """ A command or query was not recognized, or had invalid arguments. Nothing is sent to the client. """
    def __init__(self, session, line: str, command: ParsedCommand):
        super().__init__(session)
        self.line = line
        self.command = command


class SessionClosedEvent(SessionEvent):
    """ The session ended, either from the end of the stream or the client asking to exit. """


class SCPISession:
    """
    Reads commands from a conduit one line at a time and carries out each one before reading the next.
    Replies to queries are written back to the conduit.
    """

    def __init__(self, conduit: Conduit, handler: BridgeCommandHandler,
                 terminate_keyword=DEFAULT_TERMINATE_KEYWORD):
        self.conduit = conduit
        self.handler = handler
        self.terminate_keyword = terminate_keyword
        self.reader = LineReader(conduit.input)
        self.writer = ReplyWriter(conduit.output)
        self.events = EventSource()
        self.closed = False

    def main_loop(self):
        """
        Processes commands until the stream ends or the terminate command is received.
        """
        try:
            while self._next_line():
                pass
        finally:
            self.closed = True
            self.events.fire(SessionClosedEvent(self))

    def _next_line(self) -> bool:
        """
        Reads and processes one line.
        :return: False when the session should end.
        """
        try:
            line = self.reader.read_line()
        except OSError as e:
            logger.info("error reading from %s: %s" % (self.conduit.target, e))
            return False
        if line is None:
            return False
        logger.debug(line)
        return self.process_line(line)

    def process_line(self, line: str) -> bool:
        """
        Tokenizes and dispatches a single line.
        :return: False when the session should end.
        """
        command = tokenize(line)
        if not command.is_query and command.verb == self.terminate_keyword:
            return False

        recognized, reply = self.handler.dispatch(command)
        if not recognized:
            logger.debug("unrecognized command: %s" % line)
            self.events.fire(CommandUnrecognizedEvent(self, line, command))
        elif reply is not None:
            return self.writer.send_reply(reply)
        return True
