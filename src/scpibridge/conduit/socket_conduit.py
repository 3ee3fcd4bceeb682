import logging
import socket

from scpibridge.conduit.base import Conduit

logger = logging.getLogger(__name__)


def disable_nagle(sock: socket.socket) -> bool:
    """
    Turns off Nagle's algorithm so that short replies are sent immediately.
    :return: True if the option was set.
    """
    try:
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        return True
    except OSError as e:
        logger.warning("Failed to disable Nagle on socket, performance may be poor: %s" % e)
        return False


class SocketConduit(Conduit):
    """
    A conduit that provides communication via a connected socket.
    """
    def __init__(self, sock: socket.socket):
        """
        :param sock: the client socket that represents the connection
        :type sock: socket
        """
        self.sock = sock
        self.read = sock.makefile('rb')
        self.write = sock.makefile('wb')

    @property
    def open(self) -> bool:
        return self.sock.fileno() >= 0

    @property
    def target(self):
        return self.sock

    @property
    def output(self):
        return self.write

    @property
    def input(self):
        return self.read

    def close(self):
        self.read.close()
        try:
            self.write.close()
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            # the peer may have closed the socket already
            pass
        finally:
            self.sock.close()
