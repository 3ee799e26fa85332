import unittest
from io import BytesIO
from unittest.mock import Mock

from hamcrest import assert_that, is_, calling, raises

from tikconnector.conduit.base import Conduit, DefaultConduit


class ConduitTest(unittest.TestCase):
    def test_abstract_methods(self):
        sut = Conduit()
        assert_that(calling(sut.close), raises(NotImplementedError))
        assert_that(calling(getattr).with_args(sut, 'target'), raises(NotImplementedError))
        assert_that(calling(getattr).with_args(sut, 'input'), raises(NotImplementedError))
        assert_that(calling(getattr).with_args(sut, 'output'), raises(NotImplementedError))
        assert_that(calling(getattr).with_args(sut, 'open'), raises(NotImplementedError))


class DefaultConduitTest(unittest.TestCase):
    def test_separate_streams(self):
        read, write = BytesIO(b"in"), BytesIO()
        sut = DefaultConduit(read, write, "target")
        assert_that(sut.input, is_(read))
        assert_that(sut.output, is_(write))
        assert_that(sut.target, is_("target"))
        assert_that(sut.open, is_(True))

    def test_same_stream(self):
        stream = BytesIO()
        sut = DefaultConduit(stream)
        assert_that(sut.input, is_(stream))
        assert_that(sut.output, is_(stream))

    def test_close(self):
        read, write = Mock(), Mock()
        sut = DefaultConduit(read, write)
        sut.close()
        read.close.assert_called_once()
        write.close.assert_called_once()
        assert_that(sut.open, is_(False))

    def test_close_twice(self):
        stream = Mock()
        sut = DefaultConduit(stream)
        sut.close()
        sut.close()
        stream.close.assert_called_once()
