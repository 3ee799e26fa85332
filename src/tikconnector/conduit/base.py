from abc import abstractmethod
from io import IOBase


class Conduit:
    """
    The byte streams of one connection to a router: an input stream the connector reads replies from
    and an output stream it writes sentences to.
    """

    @property
    @abstractmethod
    def target(self):
        """ the endpoint this conduit is connected to, for diagnostics """
        raise NotImplementedError

    @property
    @abstractmethod
    def input(self) -> IOBase:
        """ the binary stream replies are read from """
        raise NotImplementedError

    @property
    @abstractmethod
    def output(self) -> IOBase:
        """ the binary stream requests are written to. Writes are flushed by the caller. """
        raise NotImplementedError

    @property
    @abstractmethod
    def open(self) -> bool:
        """ True until close() is called or the underlying connection goes away """
        raise NotImplementedError

    @abstractmethod
    def close(self):
        """ Closes both streams. Closing a closed conduit does nothing. """
        raise NotImplementedError


class DefaultConduit(Conduit):
    """ provides the conduit streams from specific read/write file-like types (which may be the same value) """

    def __init__(self, read=None, write=None, target=None):
        self._read = self._write = None
        self._target = target
        self._closed = False
        self.set_streams(read, write)

    def set_streams(self, read, write=None):
        self._read = read
        self._write = write if write is not None else read

    @property
    def target(self):
        return self._target

    def close(self):
        if self._closed:
            return
        self._closed = True
        self._write.close()
        if self._read is not self._write:
            self._read.close()

    @property
    def open(self):
        return not self._closed

    @property
    def input(self) -> IOBase:
        return self._read

    @property
    def output(self) -> IOBase:
        return self._write
