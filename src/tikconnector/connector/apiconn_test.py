import unittest
from io import BytesIO
from unittest.mock import Mock, patch

from hamcrest import assert_that, is_, equal_to, calling, raises, contains_string, instance_of

from tikconnector.conduit.base import DefaultConduit
from tikconnector.connector.apiconn import ApiConnector, ApiTrapError, masked
from tikconnector.connector.base import ConnectorError, ConnectorLoginError, ConnectionNotOpenError, CommandConnector
from tikconnector.protocol.api import encode_sentence, read_sentence


class CapturingStream(BytesIO):
    """ keeps the written bytes available after the conduit closes the stream """
    def close(self):
        if not self.closed:
            self.written = self.getvalue()
        super().close()


def replies(*sentences):
    return BytesIO(b''.join(encode_sentence(s) for s in sentences))


class ApiConnectorTest(unittest.TestCase):

    def connector(self, *sentences):
        """ a connector whose conduit reads the given reply sentences """
        sut = ApiConnector()
        self.output = CapturingStream()
        self.conduit = DefaultConduit(replies(*sentences), self.output)
        sut._connect = Mock(return_value=self.conduit)
        return sut

    def sent(self):
        data = self.output.getvalue() if not self.output.closed else self.output.written
        stream = BytesIO(data)
        sentences = []
        while stream.tell() < len(data):
            sentences.append(read_sentence(stream))
        return sentences

    def test_defaults(self):
        sut = ApiConnector()
        assert_that(sut.default_port, is_(8728))
        assert_that(sut.timeout, is_(10.0))
        assert_that(sut, is_(instance_of(CommandConnector)))

    def test_login(self):
        sut = self.connector(['!done'])
        sut.open('10.0.0.1', 'admin', 'secret')
        sut._connect.assert_called_once_with('10.0.0.1', 8728)
        assert_that(sut.logged_on, is_(True))
        assert_that(self.sent(), is_([['/login', '=name=admin', '=password=secret']]))

    def test_login_refused(self):
        sut = self.connector(['!trap', '=message=invalid user name or password (6)'], ['!done'])
        assert_that(calling(sut.open).with_args('10.0.0.1', 'admin', 'wrong'),
                    raises(ConnectorLoginError, "invalid user name"))
        assert_that(sut.logged_on, is_(False))
        assert_that(self.conduit.open, is_(False))

    def test_connect_error(self):
        sut = ApiConnector(timeout=2)
        with patch('tikconnector.connector.apiconn.connect_socket', side_effect=OSError("no route to host")) as c:
            assert_that(calling(sut.open).with_args('10.0.0.1', 'admin', ''), raises(ConnectorError))
            c.assert_called_once_with('10.0.0.1', 8728, 2)
        assert_that(sut.logged_on, is_(False))

    def test_execute(self):
        sut = self.connector(['!done'],
                             ['!re', '=.id=*0', '=message=router rebooted'],
                             ['!re', '=.id=*1', '=message=user admin logged in'],
                             ['!done'])
        sut.open('10.0.0.1', 'admin', '')
        rows = sut.execute('/log/print', queries={'topics': 'system,info'})
        assert_that(rows, is_(equal_to([{'.id': '*0', 'message': 'router rebooted'},
                                        {'.id': '*1', 'message': 'user admin logged in'}])))
        assert_that(self.sent()[1], is_(['/log/print', '?topics=system,info']))

    def test_execute_attributes(self):
        sut = self.connector(['!done'], ['!done'])
        sut.open('10.0.0.1', 'admin', '')
        assert_that(sut.execute('/queue/simple/set', {'.id': '*3', 'max-limit': '1M/1M'}), is_([]))
        assert_that(self.sent()[1], is_(['/queue/simple/set', '=.id=*3', '=max-limit=1M/1M']))

    def test_execute_not_open(self):
        sut = ApiConnector()
        assert_that(calling(sut.execute).with_args('/log/print'), raises(ConnectionNotOpenError))

    def test_execute_trap(self):
        sut = self.connector(['!done'], ['!trap', '=message=no such command'], ['!done'])
        sut.open('10.0.0.1', 'admin', '')
        assert_that(calling(sut.execute).with_args('/bogus/print'), raises(ApiTrapError, "no such command"))
        # the reply was drained, the connection stays usable
        assert_that(sut.logged_on, is_(True))

    def test_execute_fatal_closes(self):
        sut = self.connector(['!done'], ['!fatal', 'session terminated on request'])
        sut.open('10.0.0.1', 'admin', '')
        sut.events = Mock()
        assert_that(calling(sut.execute).with_args('/log/print'), raises(ConnectorError))
        assert_that(sut.logged_on, is_(False))
        sut.events.fire.assert_called_once()

    def test_execute_truncated_stream_closes(self):
        sut = self.connector(['!done'], ['!re', '=message=cut'])
        sut.open('10.0.0.1', 'admin', '')
        assert_that(calling(sut.execute).with_args('/log/print'), raises(ConnectorError, "stream ended"))
        assert_that(sut.logged_on, is_(False))

    def test_close_sends_quit(self):
        sut = self.connector(['!done'])
        sut.open('10.0.0.1', 'admin', '')
        sut.close()
        assert_that(self.sent()[-1], is_(['/quit']))
        assert_that(self.conduit.open, is_(False))

    def test_close_ignores_broken_stream(self):
        sut = self.connector(['!done'])
        sut.open('10.0.0.1', 'admin', '')
        self.output.close()
        sut.close()
        assert_that(sut.logged_on, is_(False))

    def test_logger_masks_password(self):
        sut = self.connector(['!done'])
        logger = Mock()
        sut.set_logger(logger)
        sut.open('10.0.0.1', 'admin', 'secret')
        logged = " ".join(str(c) for c in logger.debug.call_args_list)
        assert_that(logged, contains_string('=password=***'))
        assert_that('secret' in logged, is_(False))
        assert_that(logged, contains_string('!done'))

    def test_masked(self):
        assert_that(masked(['/login', '=name=admin', '=password=a=b']),
                    is_(['/login', '=name=admin', '=password=***']))


class ApiTrapErrorTest(unittest.TestCase):
    def test_message(self):
        e = ApiTrapError('/ip/address/add', {'message': 'invalid value', 'category': '1'})
        assert_that(str(e), is_("command '/ip/address/add' failed: invalid value"))
        assert_that(e.attributes['category'], is_('1'))
        assert_that(e, is_(instance_of(ConnectorError)))
