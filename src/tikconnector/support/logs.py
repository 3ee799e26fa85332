"""
Process-wide registry of the factory that creates the loggers handed to connectors.

Connectors never create their own command loggers: a session asks this registry for one when
connector logging is allowed. The default factory produces disabled loggers, so nothing is
written until an application installs another factory with set_log_factory() at startup.
"""
import logging

logger = logging.getLogger(__name__)


class LogFactory:
    """ Creates the logger used by an object of the given type. """

    def create_logger(self, owner: type) -> logging.Logger:
        raise NotImplementedError


class NullLogFactory(LogFactory):
    """ Hands out a single disabled logger that is not registered with the logging module. """

    def __init__(self):
        self._logger = logging.Logger('tikconnector.null')
        self._logger.addHandler(logging.NullHandler())
        self._logger.disabled = True

    def create_logger(self, owner):
        return self._logger


class LoggingLogFactory(LogFactory):
    """
    Returns standard library loggers named after the owner's module and class,
    e.g. 'tikconnector.connector.apiconn.ApiConnector'.
    :param prefix   optional name prepended to each logger name
    """

    def __init__(self, prefix=None):
        self.prefix = prefix

    def create_logger(self, owner):
        name = owner.__module__ + '.' + owner.__qualname__
        if self.prefix:
            name = self.prefix + '.' + name
        return logging.getLogger(name)


_log_factory = NullLogFactory()


def log_factory() -> LogFactory:
    return _log_factory


def set_log_factory(factory: LogFactory):
    """
    Installs the process-wide log factory. Passing None restores the default NullLogFactory.
    """
    global _log_factory
    if factory is None:
        factory = NullLogFactory()
    elif not isinstance(factory, LogFactory):
        raise TypeError("expected a LogFactory, got %s" % type(factory).__name__)
    logger.debug("log factory set to %s", type(factory).__name__)
    _log_factory = factory


def create_logger(owner: type) -> logging.Logger:
    return _log_factory.create_logger(owner)
