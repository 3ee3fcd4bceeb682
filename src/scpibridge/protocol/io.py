"""
Line oriented I/O for the SCPI stream.
"""
import logging

logger = logging.getLogger(__name__)

# a command ends at a newline or a semicolon
TERMINATORS = (b'\n', b';')


class LineReader:
    """
    Reads SCPI commands from a binary stream, one command per call.
    """

    def __init__(self, stream, encoding='ascii'):
        self.stream = stream
        self.encoding = encoding

    def read_line(self):
        """
        Reads the next command, up to a newline or semicolon.
        :return: the command text without the terminator, or None when the stream ends. Any partial command
            at the end of the stream is discarded.
        """
        line = bytearray()
        while True:
            c = self.stream.read(1)
            if not c:
                if line:
                    logger.debug("discarding unterminated command at end of stream: %s" % bytes(line))
                return None
            if c in TERMINATORS:
                return line.decode(self.encoding, errors='replace')
            line += c

    def __iter__(self):
        line = self.read_line()
        while line is not None:
            yield line
            line = self.read_line()


class ReplyWriter:
    """
    Sends replies to a binary stream. Each reply is a single line terminated by a newline.
    """

    def __init__(self, stream, encoding='ascii'):
        self.stream = stream
        self.encoding = encoding

    def send_reply(self, reply: str) -> bool:
        """
        :return: True if the reply was written, False if the stream failed.
        """
        try:
            self.stream.write((reply + '\n').encode(self.encoding, errors='replace'))
            self.stream.flush()
            return True
        except (OSError, ValueError) as e:
            logger.info("unable to send reply: %s" % e)
            return False
