"""
A GELF client sending log events to graylog over UDP.
"""
import socket

from twisted.application.service import Service
from twisted.internet.defer import maybeDeferred, succeed
from twisted.internet.task import deferLater
from twisted.python.failure import Failure

from txgelf.chunker import maybe_chunk
from txgelf.compress import compress
from txgelf.config import GelfConfig
from txgelf.envelope import encode_event
from txgelf.errors import TransportError
from txgelf.log import log as default_log
from txgelf.transport import GelfUDPProtocol


class GelfClient(object):
    """
    Encodes, compresses, chunks and sends GELF messages.

    The client owns one UDP port, opened with :meth:`open` and closed with
    :meth:`close`. Sending never raises: results and errors are delivered
    through the returned Deferred, the optional completion callback and the
    error observers.

    :ivar config: The :class:`txgelf.config.GelfConfig` in use.
    """
    def __init__(self, options=None, reactor=None, hostname=None,
                 log=default_log):
        """
        :param options: A :class:`GelfConfig`, or a mapping of camelCase
            options for :meth:`GelfConfig.from_options`.
        :param reactor: An ``IReactorUDP``, ``IReactorTime`` and
            ``IReactorCore`` provider, the global reactor if not given.
        :param str hostname: ``host`` of the events that do not have one.
        :param log: A bound logger.
        """
        if reactor is None:  # pragma: no cover
            from twisted.internet import reactor

        if not isinstance(options, GelfConfig):
            options = GelfConfig.from_options(options)

        self.config = options
        self.reactor = reactor
        self.hostname = hostname or socket.gethostname()
        self.protocol = GelfUDPProtocol()
        self._log = log.bind(graylog_host=options.host,
                            graylog_port=options.port)
        self._port = None
        self._address = None
        self._error_observers = []

    @property
    def is_open(self):
        """
        True between :meth:`open` and :meth:`close`.
        """
        return self._port is not None

    def open(self):
        """
        Listen on an ephemeral UDP port to send from. Does nothing if the
        client is already open.
        """
        if self._port is None:
            self._port = self.reactor.listenUDP(0, self.protocol)
            self._log.msg('Opened GELF client')

    def close(self):
        """
        Stop listening on the UDP port.

        :return: Deferred that fires when the port is closed.
        """
        if self._port is None:
            return succeed(None)
        port, self._port = self._port, None
        self._log.msg('Closing GELF client')
        return maybeDeferred(port.stopListening)

    def add_error_observer(self, observer):
        """
        Call `observer` with the exception of every message that fails.
        """
        self._error_observers.append(observer)

    def remove_error_observer(self, observer):
        """
        Stop calling an observer added with :meth:`add_error_observer`.
        """
        self._error_observers.remove(observer)

    def _resolve(self):
        if self._address is not None:
            return succeed(self._address)

        def resolved(ip):
            self._address = (ip, self.config.port)
            return self._address

        def failed(failure):
            raise TransportError(failure.value)

        d = self.reactor.resolve(self.config.host)
        return d.addCallbacks(resolved, failed)

    def _send_datagrams(self, datagrams):
        d = self._resolve()
        d.addCallback(lambda address: self.protocol.send(datagrams, address))
        return d

    def send_message(self, data):
        """
        Compress, chunk and send an already serialized message.

        :param data: ``str`` or ``bytes`` of the GELF JSON message.
        :return: Deferred that fires with the number of datagrams sent.
        """
        d = maybeDeferred(compress, data)
        d.addCallback(maybe_chunk, self.config.profile)
        d.addCallback(self._send_datagrams)
        return d

    def _failed(self, failure):
        self._log.err(failure, 'Failed to send GELF message')
        for observer in list(self._error_observers):
            try:
                observer(failure.value)
            except Exception:
                self._log.err(Failure(), 'GELF error observer failed')
        return failure

    def _complete(self, result, callback):
        error = result.value if isinstance(result, Failure) else None
        try:
            callback(error)
        except Exception:
            self._log.err(Failure(), 'GELF completion callback failed')

    def _deliver(self, d, callback):
        d.addErrback(self._failed)
        if callback is not None:
            d.addBoth(self._complete, callback)
        return d.addCallback(lambda _: None)

    def log(self, event, callback=None):
        """
        Send a log event.

        The event is normalized right away, so an invalid event is reported
        before this returns. The message itself is sent on the next reactor
        iteration.

        :param event: ``str`` or a mapping of GELF fields, see
            :func:`txgelf.envelope.normalize`.
        :param callback: Optional callable taking the exception or ``None``
            once the message is sent or has failed.

        :return: Deferred that fires with ``None``. Without a `callback`, it
            fails with the error that stopped the message and must be
            consumed, or twisted also reports it as an unhandled error.
            Fire-and-forget callers should pass a `callback`: the error is
            then handed to it and the Deferred always fires with ``None``.
            An exception raised by `callback` is logged, not propagated.
        """
        d = maybeDeferred(encode_event, event, hostname=self.hostname,
                          now=self.reactor.seconds())
        d.addCallback(
            lambda data: deferLater(self.reactor, 0, self.send_message, data))
        return self._deliver(d, callback)

    def message(self, raw, callback=None):
        """
        Send a message that is already GELF JSON, without normalizing it.

        :param raw: ``str`` or ``bytes``.
        :param callback: see :meth:`log`.
        :return: see :meth:`log`.
        """
        return self._deliver(self.send_message(raw), callback)


class GelfService(Service, object):
    """
    A service that opens a :class:`GelfClient` when started and closes it
    when stopped.
    """
    def __init__(self, client):
        self.client = client

    def startService(self):
        """
        Open the client.
        """
        Service.startService(self)
        self.client.open()

    def stopService(self):
        """
        Close the client.
        """
        Service.stopService(self)
        return self.client.close()
