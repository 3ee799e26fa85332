"""
The session: the owner of one connector and the source of the default session for entities and lists.
"""
import logging
import threading
from enum import Enum

from tikconnector import context
from tikconnector.connector.apiconn import ApiConnector
from tikconnector.connector.base import Connector, ConnectorClosedEvent, cast_connector, query_capability
from tikconnector.context import SessionError, SessionStackError, NoActiveSessionError
from tikconnector.objects import SystemResource
from tikconnector.support.logs import create_logger

logger = logging.getLogger(__name__)

__all__ = ['Session', 'ConnectorType', 'SessionState', 'SessionError', 'SessionStateError', 'SessionClosedError',
           'SessionStackError', 'NoActiveSessionError', 'SessionConfigurationError', 'UnsupportedTransportError']


class ConnectorType(Enum):
    API = 'api'
    SSH = 'ssh'
    TELNET = 'telnet'
    CUSTOM = 'custom'


class SessionState(Enum):
    CREATED = 'created'
    OPENED = 'opened'
    CLOSED = 'closed'


class SessionConfigurationError(SessionError, ValueError):
    """ The session was constructed with an invalid connector type or connector. """


class UnsupportedTransportError(SessionConfigurationError, NotImplementedError):
    """ The connector type is known but no built-in connector implements it. """


class SessionStateError(SessionError):
    """ The operation is not valid in the session's current state. """


class SessionClosedError(SessionStateError):
    """ The session was disposed or its connection was closed. """


# connector types with a built-in implementation
builtin_connectors = {
    ConnectorType.API: ApiConnector,
}


class Session:
    """
    Represents a connection to a router through its connector.

    Either give one of the predefined ConnectorType values (or its name) to use a built-in connector,
    or a Connector instance for a custom transport. Creating a session makes it the active session of the
    current thread; entities and lists created without a session use the active one.

    Use the session as a context manager to dispose of it (and log off) on exit:

        with Session(ConnectorType.API) as session:
            session.open('192.168.88.1', 'admin', '')
            queues = EntityList(QueueSimple).load_all()

    Sessions must be disposed in the reverse order of their creation, in the thread that created them.
    A session is not thread-safe.

    :param connector            a ConnectorType, its value (e.g. 'api') or a Connector instance
    :param connector_options    keyword arguments for the built-in connector's constructor, e.g. timeout
    """

    def __init__(self, connector=ConnectorType.API, **connector_options):
        if isinstance(connector, Connector):
            if connector_options:
                raise SessionConfigurationError("connector options apply only to built-in connectors")
            self._connector_type = ConnectorType.CUSTOM
            self._connector = connector
        else:
            self._connector_type = self._builtin_type(connector)
            self._connector = builtin_connectors[self._connector_type](**connector_options)

        self._state = SessionState.CREATED
        self._disposed = False
        self._connector_logging_allowed = False
        self._device_identity = None
        self._lock = threading.RLock()
        self._connector.events.add(self._connector_events)
        context.push_session(self)

    @staticmethod
    def _builtin_type(connector):
        if connector is None or connector in (ConnectorType.CUSTOM, ConnectorType.CUSTOM.value):
            raise SessionConfigurationError("Use a connector instance for custom connectors.")
        try:
            connector_type = ConnectorType(connector)
        except ValueError:
            raise SessionConfigurationError("Not supported connector type '%s'." % (connector,)) from None
        if connector_type not in builtin_connectors:
            raise UnsupportedTransportError("Connector type '%s' is not implemented." % connector_type.value)
        return connector_type

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.dispose()

    def __repr__(self):
        return '<Session %s %s>' % (self._connector_type.value, self._state.value)

    @staticmethod
    def active_session():
        """ :return: the most recently created, not yet disposed session of the current thread, or None. """
        return context.active_session()

    @property
    def connector(self) -> Connector:
        """ the connector used to reach the router. Use it for low-level access. """
        return self._connector

    @property
    def connector_type(self) -> ConnectorType:
        return self._connector_type

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def logged_on(self) -> bool:
        return self._connector.logged_on

    @property
    def allow_connector_logging(self) -> bool:
        """ whether the connector logs the low-level commands sent to the router. Default is False. """
        return self._connector_logging_allowed

    @allow_connector_logging.setter
    def allow_connector_logging(self, value):
        if value:
            self._connector.set_logger(create_logger(type(self._connector)))
        else:
            self._connector.set_logger(None)
        self._connector_logging_allowed = bool(value)

    @property
    def device_identity(self) -> SystemResource:
        """
        The router's /system/resource row, loaded on first access and cached for the life of the session.
        Load SystemResource directly for current values such as the CPU load.
        """
        with self._lock:
            if self._device_identity is None:
                self._device_identity = SystemResource.load_instance(self)
            return self._device_identity

    def open(self, host, user, password, port=None):
        """
        Logs on to the router. The connector's default port is used when port is None.
        Errors raised by the connector are passed on unchanged; the session is then CLOSED and can only be disposed.
        """
        if self._state is SessionState.CLOSED:
            raise SessionClosedError("%r cannot be reopened" % self)
        if self._state is SessionState.OPENED:
            raise SessionStateError("%r is already open" % self)
        try:
            self._connector.open(host, user, password, port)
        except Exception:
            self._state = SessionState.CLOSED
            raise
        self._state = SessionState.OPENED
        logger.info("session opened to %s as '%s'", host, user)

    def dispose(self):
        """
        Removes this session from the active sessions of the current thread and closes the connector.
        Disposing again does nothing more than closing the connector again.
        Raises SessionStackError, leaving the session untouched, if this session is not the active one.
        """
        if not self._disposed:
            context.pop_session(self)
            self._disposed = True
            self._state = SessionState.CLOSED
        self._connector.close()
        self._connector.events.remove(self._connector_events)

    def _connector_events(self, event):
        if isinstance(event, ConnectorClosedEvent) and self._state is SessionState.OPENED:
            self._state = SessionState.CLOSED
            logger.info("connection of %r closed", self)

    def query_connector(self, capability):
        """ :return: the connector if it implements the capability, otherwise None """
        return query_capability(self._connector, capability)

    def cast_connector(self, capability):
        """
        Returns the connector as the given capability (e.g. CommandConnector).
        Raises ConnectorCapabilityError if the connector does not implement it.
        """
        return cast_connector(self._connector, capability)

    @staticmethod
    def cast_active_connector(capability):
        """ cast_connector() on the active session's connector. """
        return context.resolve_session().cast_connector(capability)
