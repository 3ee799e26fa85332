class EventSource(object):
    """ Keeps a list of handlers and calls each of them when an event is fired. """

    def __init__(self):
        self._handlers = []

    def __iadd__(self, handler):
        return self.add(handler)

    def __isub__(self, handler):
        return self.remove(handler)

    def __len__(self):
        return len(self._handlers)

    def add(self, handler):
        self._handlers.append(handler)
        return self

    def remove(self, handler):
        """ removes the handler. Removing a handler that was never added is ignored. """
        if handler in self._handlers:
            self._handlers.remove(handler)
        return self

    def clear(self):
        self._handlers = []

    def fire(self, *args, **kwargs):
        # copy, handlers may remove themselves while being notified
        for handler in list(self._handlers):
            handler(*args, **kwargs)

    def fire_all(self, events):
        for e in events:
            self.fire(e)
