import logging
from abc import abstractmethod

from tikconnector.conduit.base import Conduit
from tikconnector.support.events import EventSource

logger = logging.getLogger(__name__)


class ConnectorError(Exception):
    """ Indicates an error condition with a connection to a device. """


class ConnectionNotOpenError(ConnectorError):
    """ Indicates the connector is not logged on when a connection is required. """


class ConnectionAlreadyOpenError(ConnectorError):
    """ Indicates open() was called on a connector that is already logged on. """


class ConnectorLoginError(ConnectorError):
    """ The device refused the credentials. """


class ConnectorCapabilityError(ConnectorError, TypeError):
    """ The connector does not implement the requested capability. """


class ConnectorEvent:
    """ base class for connector events. """
    def __init__(self, connector):
        self.connector = connector

    def __eq__(self, other):
        return type(other) is type(self) and other.connector is self.connector

    def __hash__(self):
        return hash((type(self), id(self.connector)))


class ConnectorOpenedEvent(ConnectorEvent):
    """ The connector logged on to the device. """


class ConnectorClosedEvent(ConnectorEvent):
    """ The connector was closed after having been logged on. """


class Connector:
    """
    A transport that can log on to a device, exchange commands with it and close the connection.
    """

    def __init__(self):
        self.events = EventSource()
        self.logger = None

    @property
    @abstractmethod
    def default_port(self) -> int:
        """ the port used when open() is not given one """
        raise NotImplementedError

    @property
    @abstractmethod
    def logged_on(self) -> bool:
        """
        :return: True if this connector is connected and logged on to the device. False otherwise.
        :rtype: bool
        """
        raise NotImplementedError

    @abstractmethod
    def open(self, host, user, password, port=None):
        """
        Connects to the device and logs on.
        Raises ConnectorError if the connection cannot be established.
        """
        raise NotImplementedError

    @abstractmethod
    def close(self):
        """
        Logs off and closes the connection. Closing a connector that is not open does nothing.
        """
        raise NotImplementedError

    def set_logger(self, logger: logging.Logger):
        """ sets the logger that receives the low-level traffic of this connector, or None to stop logging. """
        self.logger = logger


class CommandConnector:
    """
    Capability of connectors that execute commands on a path of the device's configuration tree
    and return the resulting rows.
    """

    @abstractmethod
    def execute(self, command, attributes=None, queries=None):
        """
        Runs a command such as '/log/print'.
        :param command      the command path
        :param attributes   mapping of attribute names to values sent with the command
        :param queries      mapping of attribute names to values the returned rows must match
        :return: a list of rows, each a dict of attribute names to raw string values
        """
        raise NotImplementedError


def query_capability(connector, capability):
    """
    :return: the connector when it implements the capability, None otherwise.
    """
    return connector if isinstance(connector, capability) else None


def cast_connector(connector, capability):
    """
    Returns the connector viewed as the given capability.
    Raises ConnectorCapabilityError when the connector does not implement it.
    """
    if connector is None:
        raise ValueError("connector is required")
    if query_capability(connector, capability) is None:
        raise ConnectorCapabilityError("Connector '%s' doesn't implement '%s'." %
                                       (type(connector).__name__, capability.__name__))
    return connector


class AbstractConnector(Connector):
    """ Manages the open/close cycle of a connection to a device. Subclasses provide the
        transport (_connect) and the protocol steps (_login, _disconnect).
    """

    def __init__(self):
        super().__init__()
        self._conduit = None
        self._logged_on = False

    @property
    def logged_on(self):
        return self._conduit is not None and self._logged_on

    @property
    def conduit(self) -> Conduit:
        """
        Retrieves the conduit for this connection.
        raises ConnectionNotOpenError if not connected
        """
        if self._conduit is None:
            raise ConnectionNotOpenError("%s is not connected" % type(self).__name__)
        return self._conduit

    def open(self, host, user, password, port=None):
        if self.logged_on:
            raise ConnectionAlreadyOpenError("%s is already logged on" % type(self).__name__)
        if port is None:
            port = self.default_port

        try:
            self._conduit = self._connect(host, port)
            self._login(user, password)
            self._logged_on = True
        finally:
            if not self._logged_on:
                self.close()
        logger.debug("logged on to %s:%s as '%s'", host, port, user)
        self.events.fire(ConnectorOpenedEvent(self))

    def close(self):
        conduit = self._conduit
        if conduit is None:
            return
        was_logged_on = self._logged_on
        self._conduit = None
        self._logged_on = False
        try:
            if was_logged_on:
                self._disconnect(conduit)
        finally:
            conduit.close()
        if was_logged_on:
            self.events.fire(ConnectorClosedEvent(self))

    def check_open(self):
        if not self.logged_on:
            raise ConnectionNotOpenError("%s is not logged on" % type(self).__name__)

    @abstractmethod
    def _connect(self, host, port) -> Conduit:
        """ Template method for subclasses to open the transport.
            If connection is not possible, an exception should be thrown
        """
        raise NotImplementedError

    @abstractmethod
    def _login(self, user, password):
        """ Authenticates over the freshly opened conduit. Raises ConnectorLoginError on refusal. """
        raise NotImplementedError

    @abstractmethod
    def _disconnect(self, conduit: Conduit):
        """ perform any actions needed before the conduit is closed, such as logging off.
        The base class takes care of closing the conduit, which happens after this method has been called.
        """
        raise NotImplementedError
