"""
UDP transport for GELF datagrams.
"""
from twisted.internet.defer import maybeDeferred, succeed
from twisted.internet.protocol import DatagramProtocol

from txgelf.errors import TransportError


class GelfUDPProtocol(DatagramProtocol):
    """
    A write-only datagram protocol that sends the datagrams of a message
    one after the other.

    Hook it up with ``reactor.listenUDP(0, protocol)``.
    """
    noisy = False

    def datagramReceived(self, data, addr):
        """
        Graylog never answers, anything received is ignored.
        """

    @property
    def connected(self):
        """
        True while the protocol has a transport to write to.
        """
        return self.transport is not None

    def _write(self, datagram, address, index):
        if self.transport is None:
            raise TransportError("not connected", index=index, sent=index)
        return self.transport.write(datagram, address)

    def _write_failed(self, failure, index):
        if failure.check(TransportError):
            return failure
        raise TransportError(failure.value, index=index, sent=index)

    def send(self, datagrams, address):
        """
        Write `datagrams` to `address` in order.

        Each datagram is only written once the write of the previous one
        has succeeded. The first failure stops the series, the datagrams
        after it are never written.

        :param list datagrams: ``bytes`` to send, one UDP packet each.
        :param tuple address: ``(ip, port)`` of the graylog server.

        :return: Deferred that fires with the number of datagrams written,
            or fails with :class:`TransportError`.
        """
        def write(_, datagram, index):
            d = maybeDeferred(self._write, datagram, address, index)
            return d.addErrback(self._write_failed, index)

        d = succeed(None)
        for index, datagram in enumerate(datagrams):
            d.addCallback(write, datagram, index)
        d.addCallback(lambda _: len(datagrams))
        return d
