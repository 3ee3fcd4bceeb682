class EventSource(object):
    """
    A list of handlers that are each called, in registration order, with the events fired.
    Handlers can be added and removed with += and -=.
    """

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
        if handler in self._handlers:
            self._handlers.remove(handler)
        return self

    def handlers(self):
        return tuple(self._handlers)

    def fire(self, event):
        # iterate a snapshot so handlers may unregister themselves
        for handler in self.handlers():
            handler(event)
