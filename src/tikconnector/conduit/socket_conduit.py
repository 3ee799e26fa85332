import logging
import socket

from tikconnector.conduit import base

logger = logging.getLogger(__name__)


class SocketConduit(base.Conduit):
    """
    A conduit that provides communication via a connected TCP socket.
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
        if not self.open:
            return
        self.read.close()
        try:
            self.write.close()
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            # the peer may already have closed the socket
            logger.debug("error shutting down socket: %s", e)
        finally:
            self.sock.close()


def connect_socket(host, port, timeout=None) -> SocketConduit:
    """
    Opens a TCP connection to host:port and wraps it in a conduit.
    Raises OSError when the connection cannot be established.
    """
    sock = socket.create_connection((host, port), timeout)
    logger.info("opened socket to %s:%s", host, port)
    return SocketConduit(sock)
