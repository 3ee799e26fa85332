import unittest
from unittest.mock import Mock

from hamcrest import assert_that, is_, raises, calling, instance_of, none

from tikconnector.connector.base import ConnectorEvent, ConnectorOpenedEvent, ConnectorClosedEvent, Connector, \
    AbstractConnector, ConnectorError, ConnectionNotOpenError, ConnectionAlreadyOpenError, ConnectorLoginError, \
    CommandConnector, ConnectorCapabilityError, cast_connector, query_capability
from tikconnector.support.events import EventSource
from tikconnector.test.stubs import StubConnector, PlainConnector


class ConnectorEventsTest(unittest.TestCase):

    def test_connector_event(self):
        self.assert_event(ConnectorEvent)
        self.assert_event(ConnectorOpenedEvent)
        self.assert_event(ConnectorClosedEvent)

    def assert_event(self, event_class):
        source = Mock()
        event = event_class(source)
        assert_that(event.connector, is_(source))
        assert_that(event == event_class(source), is_(True))
        source.assert_not_called()

    def test_event_types_differ(self):
        source = Mock()
        assert_that(ConnectorOpenedEvent(source) == ConnectorClosedEvent(source), is_(False))


class ConnectorTest(unittest.TestCase):
    def test_abstract_methods(self):
        sut = Connector()
        assert_that(sut.events, is_(instance_of(EventSource)))
        assert_that(sut.logger, is_(none()))
        assert_that(calling(sut.close), raises(NotImplementedError))
        assert_that(calling(sut.open).with_args('host', 'admin', ''), raises(NotImplementedError))
        # property access has to be deferred or it will throw outside the scope of the assert
        assert_that(calling(getattr).with_args(sut, 'default_port'), raises(NotImplementedError))
        assert_that(calling(getattr).with_args(sut, 'logged_on'), raises(NotImplementedError))

    def test_set_logger(self):
        sut = Connector()
        logger = Mock()
        sut.set_logger(logger)
        assert_that(sut.logger, is_(logger))
        sut.set_logger(None)
        assert_that(sut.logger, is_(none()))


class RecordingConnector(AbstractConnector):
    """ records the template method calls """
    default_port = 1234

    def __init__(self):
        super().__init__()
        self._connect = Mock(return_value=Mock())
        self._login = Mock()
        self._disconnect = Mock()


class AbstractConnectorTest(unittest.TestCase):
    def test_constructor(self):
        sut = AbstractConnector()
        assert_that(sut.events, is_(instance_of(EventSource)))
        assert_that(sut._conduit, is_(none()))
        assert_that(sut.logged_on, is_(False))

    def test_abstract_methods(self):
        sut = AbstractConnector()
        assert_that(calling(sut._connect).with_args('host', 1), raises(NotImplementedError))
        assert_that(calling(sut._login).with_args('admin', ''), raises(NotImplementedError))
        assert_that(calling(sut._disconnect).with_args(Mock()), raises(NotImplementedError))

    def test_conduit_not_connected(self):
        sut = AbstractConnector()
        assert_that(calling(getattr).with_args(sut, 'conduit'), raises(ConnectionNotOpenError))

    def test_open(self):
        sut = RecordingConnector()
        sut.events = Mock()
        sut.open('10.0.0.1', 'admin', 'secret', 8729)
        sut._connect.assert_called_once_with('10.0.0.1', 8729)
        sut._login.assert_called_once_with('admin', 'secret')
        assert_that(sut.logged_on, is_(True))
        assert_that(sut.conduit, is_(sut._connect.return_value))
        sut.events.fire.assert_called_once_with(ConnectorOpenedEvent(sut))

    def test_open_default_port(self):
        sut = RecordingConnector()
        sut.open('10.0.0.1', 'admin', '')
        sut._connect.assert_called_once_with('10.0.0.1', 1234)

    def test_open_already_open(self):
        sut = RecordingConnector()
        sut.open('10.0.0.1', 'admin', '')
        assert_that(calling(sut.open).with_args('10.0.0.1', 'admin', ''), raises(ConnectionAlreadyOpenError))
        sut._connect.assert_called_once()

    def test_open_connect_fails(self):
        sut = RecordingConnector()
        sut.events = Mock()
        sut._connect.side_effect = ConnectorError("unreachable")
        assert_that(calling(sut.open).with_args('10.0.0.1', 'admin', ''), raises(ConnectorError))
        sut._login.assert_not_called()
        sut.events.fire.assert_not_called()
        assert_that(sut.logged_on, is_(False))

    def test_open_login_fails_closes_conduit(self):
        sut = RecordingConnector()
        sut.events = Mock()
        conduit = sut._connect.return_value
        sut._login.side_effect = ConnectorLoginError("refused")
        assert_that(calling(sut.open).with_args('10.0.0.1', 'admin', ''), raises(ConnectorLoginError))
        conduit.close.assert_called_once()
        sut._disconnect.assert_not_called()
        sut.events.fire.assert_not_called()
        assert_that(sut._conduit, is_(none()))

    def test_close(self):
        sut = RecordingConnector()
        sut.open('10.0.0.1', 'admin', '')
        conduit = sut._conduit
        sut.events = Mock()
        sut.close()
        sut._disconnect.assert_called_once_with(conduit)
        conduit.close.assert_called_once()
        assert_that(sut.logged_on, is_(False))
        sut.events.fire.assert_called_once_with(ConnectorClosedEvent(sut))

    def test_close_not_open(self):
        sut = RecordingConnector()
        sut.events = Mock()
        sut.close()
        sut._disconnect.assert_not_called()
        sut.events.fire.assert_not_called()

    def test_close_twice(self):
        sut = RecordingConnector()
        sut.open('10.0.0.1', 'admin', '')
        sut.close()
        sut.close()
        sut._disconnect.assert_called_once()

    def test_close_when_disconnect_fails(self):
        sut = RecordingConnector()
        sut.open('10.0.0.1', 'admin', '')
        conduit = sut._conduit
        sut._disconnect.side_effect = ConnectorError("broken pipe")
        assert_that(calling(sut.close), raises(ConnectorError))
        conduit.close.assert_called_once()
        assert_that(sut.logged_on, is_(False))

    def test_check_open(self):
        sut = RecordingConnector()
        assert_that(calling(sut.check_open), raises(ConnectionNotOpenError))
        sut.open('10.0.0.1', 'admin', '')
        sut.check_open()


class CapabilityTest(unittest.TestCase):
    def test_cast_implemented(self):
        connector = StubConnector()
        assert_that(cast_connector(connector, CommandConnector), is_(connector))
        assert_that(cast_connector(connector, AbstractConnector), is_(connector))

    def test_cast_not_implemented(self):
        connector = PlainConnector()
        assert_that(calling(cast_connector).with_args(connector, CommandConnector),
                    raises(ConnectorCapabilityError, "PlainConnector.*CommandConnector"))

    def test_cast_none(self):
        assert_that(calling(cast_connector).with_args(None, CommandConnector), raises(ValueError))

    def test_capability_error_is_type_error(self):
        assert_that(issubclass(ConnectorCapabilityError, TypeError), is_(True))
        assert_that(issubclass(ConnectorCapabilityError, ConnectorError), is_(True))

    def test_query(self):
        assert_that(query_capability(PlainConnector(), CommandConnector), is_(none()))
        connector = StubConnector()
        assert_that(query_capability(connector, CommandConnector), is_(connector))

    def test_command_connector_abstract(self):
        assert_that(calling(CommandConnector().execute).with_args('/log/print'), raises(NotImplementedError))
