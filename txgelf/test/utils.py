"""
Mixins and utilities to be used for testing.
"""
import struct

import mock

from twisted.internet.defer import fail, succeed
from twisted.internet.task import Clock
from twisted.python.failure import Failure

from txgelf.log import BoundLog


class matches(object):
    """
    A helper for using `testtools matchers
    <http://testtools.readthedocs.org/en/latest/for-test-authors.html#matchers>`_
    with mock.

    Example::

        mock_fun({'foo': 'bar', 'baz': 'bax'})
        mock_fun.assert_called_once_with(
            matches(
                ContainsDict(
                    {'baz': Equals('bax')})))

    :param matcher: A testtools matcher that will be matched when this object
        is compared to another object.
    """
    def __init__(self, matcher):
        self._matcher = matcher
        self._last_match = None

    def __eq__(self, other):
        self._last_match = self._matcher.match(other)
        return self._last_match is None

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        if self._last_match:
            return 'matches({}): <mismatch: {}>'.format(
                self._matcher, self._last_match.describe())
        return 'matches({0!s})'.format(self._matcher)


class CheckFailure(object):
    """
    Compares equal to a `twisted.python.failure.Failure` wrapping an
    exception of the given type.
    """
    def __init__(self, exception_type):
        self.exception_type = exception_type

    def __eq__(self, other):
        return isinstance(other, Failure) and other.check(
            self.exception_type)

    def __ne__(self, other):
        return not self == other


class DummyException(Exception):
    """
    Fake exception
    """


def patch(testcase, *args, **kwargs):
    """
    Patches and starts a test case, taking care of the cleanup.
    """
    if not getattr(testcase, '_stopallAdded', False):
        testcase.addCleanup(mock.patch.stopall)
        testcase._stopallAdded = True

    return mock.patch(*args, **kwargs).start()


def mock_log():
    """
    Returns a BoundLog whose msg and err methods are mocks.
    """
    msg = mock.Mock(spec=[])
    msg.return_value = None
    err = mock.Mock(spec=[])
    err.return_value = None
    return BoundLog(msg, err)


def mock_udp_transport():
    """
    A UDP transport whose ``write`` is a mock and that stops listening
    right away.
    """
    transport = mock.Mock(spec=['write', 'stopListening', 'getHost'])
    transport.write.return_value = None
    transport.stopListening.return_value = succeed(None)
    return transport


class FakeReactor(Clock):
    """
    A clock that can also listen on UDP and resolve host names.

    :ivar transport: Transport given to every protocol passed to
        ``listenUDP``.
    :ivar dict addresses: Host names to IP addresses, anything else fails
        to resolve.
    """
    def __init__(self, transport=None, addresses=None):
        Clock.__init__(self)
        self.transport = transport or mock_udp_transport()
        self.addresses = {'127.0.0.1': '127.0.0.1'}
        self.addresses.update(addresses or {})
        self.listening = []
        self.resolved = []

    def listenUDP(self, port, protocol, interface='', maxPacketSize=8192):
        self.listening.append((port, protocol))
        protocol.makeConnection(self.transport)
        return self.transport

    def resolve(self, name, timeout=(1, 3, 11, 45)):
        self.resolved.append(name)
        if name in self.addresses:
            return succeed(self.addresses[name])
        return fail(DummyException('cannot resolve {}'.format(name)))


def parse_chunk(datagram):
    """
    Split a chunked datagram into ``(magic, message_id, index, count,
    data)``.
    """
    magic, message_id, index, count = struct.unpack('>2sQBB', datagram[:12])
    return magic, message_id, index, count, datagram[12:]
