"""
Building GELF envelopes out of log events.
"""
import json
import socket
import time
from collections.abc import Mapping
from datetime import date, datetime

from twisted.python.failure import Failure

from txgelf.errors import ReservedFieldError


GELF_VERSION = '1.0'

DEFAULT_FACILITY = 'txgelf'

DEFAULT_SHORT_MESSAGE = 'Gelf Shortmessage'

RESERVED_FIELDS = ('_id',)


class GelfEncoder(json.JSONEncoder):
    """
    A JSONEncoder that never gives up on a field: objects the base encoder
    does not know about are serialized by `serializers`, falling back to
    ``repr(obj)``.
    """
    serializers = [((datetime, date), lambda obj: obj.isoformat()),
                   (Failure, str),
                   (bytes, lambda obj: obj.decode('utf-8', 'replace')),
                   ((set, frozenset), list),
                   (Exception, repr)]

    def default(self, obj):
        for _type, serializer in self.serializers:
            if isinstance(obj, _type):
                return serializer(obj)
        return repr(obj)


def _missing(envelope, key):
    return envelope.get(key) in (None, '')


def normalize(event, hostname=None, now=None):
    """
    Turn a log event into a GELF envelope.

    Text is used as the ``short_message``. A mapping is copied and the
    ``version``, ``host``, ``timestamp``, ``facility`` and ``short_message``
    fields it lacks (or sets to ``None`` or ``''``) are filled in.

    :param event: ``str`` or a mapping of GELF fields.
    :param str hostname: ``host`` default, :func:`socket.gethostname` if not
        given.
    :param float now: ``timestamp`` default in seconds since the epoch,
        the current time if not given.

    :raises ReservedFieldError: if the mapping has an ``_id`` field.
    :raises TypeError: if `event` is neither text nor a mapping.
    :return: a new ``dict``
    """
    if isinstance(event, str):
        envelope = {'short_message': event}
    elif isinstance(event, Mapping):
        for field in RESERVED_FIELDS:
            if field in event:
                raise ReservedFieldError(field)
        envelope = dict(event)
    else:
        raise TypeError(
            "Cannot build a GELF envelope from {t}".format(
                t=type(event).__name__))

    if _missing(envelope, 'version'):
        envelope['version'] = GELF_VERSION
    if _missing(envelope, 'host'):
        envelope['host'] = hostname or socket.gethostname()
    if envelope.get('timestamp') is None:
        envelope['timestamp'] = time.time() if now is None else now
    if _missing(envelope, 'facility'):
        envelope['facility'] = DEFAULT_FACILITY
    if _missing(envelope, 'short_message'):
        envelope['short_message'] = DEFAULT_SHORT_MESSAGE

    return envelope


def serialize(envelope):
    """
    :return: ``bytes`` of the UTF-8 JSON text of `envelope`.
    """
    return json.dumps(envelope, cls=GelfEncoder,
                      ensure_ascii=False).encode('utf-8')


def encode_event(event, hostname=None, now=None):
    """
    Normalize and serialize `event`. See :func:`normalize`.
    """
    return serialize(normalize(event, hostname=hostname, now=now))
