import logging

from tikconnector.conduit.base import Conduit
from tikconnector.conduit.socket_conduit import connect_socket
from tikconnector.connector.base import AbstractConnector, CommandConnector, ConnectorError, ConnectorLoginError
from tikconnector.protocol.api import write_sentence, read_sentence, parse_reply, attribute_words, \
    ApiProtocolError, REPLY_ROW, REPLY_DONE, REPLY_TRAP, REPLY_FATAL

logger = logging.getLogger(__name__)

# attribute words whose values never reach a log
masked_attributes = ('=password=',)


class ApiTrapError(ConnectorError):
    """
    The device rejected a command (a !trap reply).
    :param attributes   the attributes of the trap, usually 'message' and optionally 'category'
    """
    def __init__(self, command, attributes):
        super().__init__("command '%s' failed: %s" % (command, attributes.get('message', 'unknown error')))
        self.command = command
        self.attributes = attributes


def masked(words):
    return [w.split('=', 2)[0] + '=' + w.split('=', 2)[1] + '=***'
            if w.startswith(masked_attributes) else w for w in words]


class ApiConnector(AbstractConnector, CommandConnector):
    """
    Talks to the RouterOS API service (TCP port 8728 by default).
    """
    def __init__(self, timeout=10.0, encoding='utf-8'):
        """
        :param timeout  socket timeout in seconds for connecting and for each read, None blocks indefinitely.
        :param encoding the text encoding of words on the wire.
        """
        super().__init__()
        self.timeout = timeout
        self.encoding = encoding

    @property
    def default_port(self):
        return 8728

    def _connect(self, host, port) -> Conduit:
        try:
            return connect_socket(host, port, self.timeout)
        except OSError as e:
            logger.warning("error opening API connection to %s:%s: %s", host, port, e)
            raise ConnectorError("unable to connect to %s:%s" % (host, port)) from e

    def _login(self, user, password):
        try:
            self._exchange('/login', attribute_words({'name': user, 'password': password}))
        except ApiTrapError as e:
            raise ConnectorLoginError("login as '%s' refused: %s" % (user, e.attributes.get('message'))) from e

    def _disconnect(self, conduit: Conduit):
        try:
            self._write(conduit, ['/quit'])
        except (OSError, ValueError) as e:
            # the device drops the connection on /quit, or may already have
            logger.debug("error sending /quit: %s", e)

    def execute(self, command, attributes=None, queries=None):
        self.check_open()
        words = attribute_words(attributes) + attribute_words(queries, '?')
        return self._exchange(command, words)

    def _write(self, conduit, words):
        if self.logger is not None:
            self.logger.debug(">>> %s", " ".join(masked(words)))
        write_sentence(conduit.output, words, self.encoding)

    def _read(self, conduit):
        words = read_sentence(conduit.input, self.encoding)
        if self.logger is not None:
            self.logger.debug("<<< %s", " ".join(words))
        return parse_reply(words)

    def _exchange(self, command, words):
        """
        Sends one command and reads replies up to !done.
        A !trap is raised once the reply is complete; a !fatal or a broken stream closes the connector.
        """
        conduit = self.conduit
        rows = []
        trap = None
        try:
            self._write(conduit, [command] + words)
            while True:
                reply, attributes = self._read(conduit)
                if reply == REPLY_ROW:
                    rows.append(attributes)
                elif reply == REPLY_TRAP:
                    trap = trap or attributes
                elif reply == REPLY_DONE:
                    break
                elif reply == REPLY_FATAL:
                    raise ConnectorError("device closed the connection: %s" % attributes.get('message', ''))
                else:
                    raise ApiProtocolError("unexpected reply '%s'" % reply)
        except (OSError, ApiProtocolError) as e:
            self.close()
            raise ConnectorError("error exchanging '%s': %s" % (command, e)) from e
        except ConnectorError:
            self.close()
            raise
        if trap is not None:
            raise ApiTrapError(command, trap)
        return rows
