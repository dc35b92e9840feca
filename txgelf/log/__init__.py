"""
Logging for txgelf itself.

Everything txgelf logs goes through :data:`log`, which is bound with
``system='txgelf'`` so that :class:`txgelf.log.graylog.GraylogObserver`
can recognise and skip its own events.
"""

import functools

from twisted.python.log import err, msg


SYSTEM = 'txgelf'


class BoundLog(object):
    """
    A pair of twisted ``msg`` and ``err`` functions with keyword arguments
    partially applied.

    :ivar msg: The function to call for logging non-error messages.
    :ivar err: The function to call for logging errors.
    """
    def __init__(self, msg, err):
        self.msg = msg
        self.err = err

    def bind(self, **kwargs):
        """
        Bind the keyword arguments to `self.msg` and `self.err`.

        :returns: A new :py:class:`BoundLog` instance.
        """
        return self.__class__(functools.partial(self.msg, **kwargs),
                              functools.partial(self.err, **kwargs))

    @property
    def fields(self):
        """
        All keyword arguments bound so far, later bindings winning.
        """
        chain = []
        f = self.msg
        while isinstance(f, functools.partial):
            chain.append(f.keywords)
            f = f.func
        bound = {}
        for keywords in reversed(chain):
            bound.update(keywords)
        return bound


log = BoundLog(msg, err).bind(system=SYSTEM)


__all__ = ['BoundLog', 'SYSTEM', 'log']
