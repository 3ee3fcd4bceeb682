"""
A TCP server that serves SCPI sessions for an instrument bridge.

Clients are served one at a time: a session runs to completion before the next connection
is accepted, so the bridge is only ever driven by a single client.
"""
import logging
import os
import socket

from scpibridge.config.config import apply_conf_path, load_config
from scpibridge.conduit.socket_conduit import SocketConduit, disable_nagle
from scpibridge.protocol.dispatch import BridgeCommandHandler
from scpibridge.session import DEFAULT_TERMINATE_KEYWORD, SCPISession
from scpibridge.support.mixins import CommonEqualityMixin, StringerMixin

logger = logging.getLogger(__name__)

config_name = 'scpibridge'
config_directory = os.path.dirname(__file__)


class ServerSettings(CommonEqualityMixin, StringerMixin):
    """
    The settings for a SCPI server.
    """

    def __init__(self, host='0.0.0.0', port=5025, backlog=1, terminate_keyword=DEFAULT_TERMINATE_KEYWORD,
                 no_delay=True):
        self.host = host
        self.port = port
        self.backlog = backlog
        self.terminate_keyword = terminate_keyword
        self.no_delay = no_delay

    @classmethod
    def load(cls, name=config_name, directory=config_directory, user_directory=None):
        """
        Loads the settings from the [server] section of the layered configuration files with the given name.
        """
        settings = cls()
        conf = load_config(name, directory, user_directory)
        apply_conf_path(conf, ['server'], settings)
        return settings


class SCPIServer:
    """
    Listens for SCPI clients and runs a session for each one.
    :param bridge_factory: called for each client to supply the InstrumentBridge the session drives.
    """

    def __init__(self, bridge_factory, settings: ServerSettings=None):
        self.bridge_factory = bridge_factory
        self.settings = settings or ServerSettings()
        self.sock = None

    @property
    def address(self):
        """ the (host, port) the server is listening on. """
        return self.sock.getsockname() if self.sock else None

    def open(self):
        if self.sock is not None:
            return
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.settings.host, self.settings.port))
            sock.listen(self.settings.backlog)
        except OSError:
            sock.close()
            raise
        self.sock = sock
        logger.info("listening for SCPI clients on %s:%d" % self.address)

    def close(self):
        sock = self.sock
        self.sock = None
        if sock is not None:
            sock.close()

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def serve_one(self):
        """
        Accepts one client and serves its session until the client exits or disconnects.
        """
        if self.sock is None:
            self.open()
        client, address = self.sock.accept()
        logger.info("client connected from %s:%d" % address[:2])
        if self.settings.no_delay:
            disable_nagle(client)
        conduit = SocketConduit(client)
        try:
            self.create_session(conduit).main_loop()
        except Exception:
            # a failing bridge ends this client's session, not the server
            logger.exception("session for %s:%d failed" % address[:2])
        finally:
            conduit.close()
            logger.info("client disconnected from %s:%d" % address[:2])

    def create_session(self, conduit) -> SCPISession:
        handler = BridgeCommandHandler(self.bridge_factory())
        return SCPISession(conduit, handler, self.settings.terminate_keyword)

    def serve_forever(self):
        """
        Serves clients one after another until the server is closed.
        """
        self.open()
        while self.sock is not None:
            try:
                self.serve_one()
            except OSError:
                if self.sock is None:
                    logger.info("server closed")
                    break
                raise
