"""
Startup settings for a session, loaded from the layered configuration.

    settings = load_settings()      # tikconnector.cfg in the current directory, plus its flavors
    configure_logging(settings)
    with open_session(settings) as session:
        ...
"""
import logging

from tikconnector.config.config import load_config, apply_conf_path
from tikconnector.session import Session, ConnectorType
from tikconnector.support.logs import set_log_factory, NullLogFactory, LoggingLogFactory

logger = logging.getLogger(__name__)

log_factories = {
    'null': lambda settings: NullLogFactory(),
    'logging': lambda settings: LoggingLogFactory(settings.log_prefix),
}


class SessionSettings:
    """ The values used to create and open a session. Attribute names match the [session] keys. """

    def __init__(self):
        self.connector_type = ConnectorType.API.value
        self.host = None
        self.port = None
        self.user = 'admin'
        self.password = ''
        self.timeout = 10.0
        self.encoding = 'utf-8'
        self.allow_connector_logging = False
        self.log_factory = 'null'
        self.log_prefix = None

    def __repr__(self):
        return '<SessionSettings %s %s@%s:%s>' % (self.connector_type, self.user, self.host, self.port)


class _LoggingSection:
    """ receives the [logging] keys, which are named differently on SessionSettings """

    def __init__(self, settings):
        self.log_factory = settings.log_factory
        self.prefix = settings.log_prefix


def load_settings(name='tikconnector', directory=None, include_user=True) -> SessionSettings:
    """
    Loads and validates the named configuration.
    Raises ConfigObjError when a value fails validation.
    """
    config = load_config(name, directory, include_user)
    settings = SessionSettings()
    apply_conf_path(config, ['session'], settings)
    section = _LoggingSection(settings)
    apply_conf_path(config, ['logging'], section)
    settings.log_factory = section.log_factory
    settings.log_prefix = section.prefix
    logger.debug("loaded settings %r", settings)
    return settings


def configure_logging(settings: SessionSettings):
    """ installs the log factory named by the settings as the process-wide factory. """
    try:
        factory = log_factories[settings.log_factory]
    except KeyError:
        raise ValueError("unknown log factory '%s'" % settings.log_factory) from None
    set_log_factory(factory(settings))


def open_session(settings: SessionSettings) -> Session:
    """
    Creates a session with the built-in connector named by the settings and, when a host is configured,
    logs on. The session is disposed again if logging on fails.
    """
    connector_options = {}
    if ConnectorType(settings.connector_type) is ConnectorType.API:
        connector_options = {'timeout': settings.timeout, 'encoding': settings.encoding}
    session = Session(settings.connector_type, **connector_options)
    session.allow_connector_logging = settings.allow_connector_logging
    if settings.host:
        try:
            session.open(settings.host, settings.user, settings.password, settings.port)
        except Exception:
            session.dispose()
            raise
    return session
