"""
Graylog integration for twisted logging.
"""
from toolz.dicttoolz import merge

from twisted.python.log import ILogObserver, textFromEventDict

from zope.interface import implementer

from txgelf.client import GelfClient
from txgelf.envelope import RESERVED_FIELDS
from txgelf.log import SYSTEM


class LogLevel(object):
    """ Syslog levels used in GELF messages """
    ERROR = 3
    INFO = 6


ERROR_FIELDS = {'isError', 'failure', 'why'}

PRIMITIVE_FIELDS = {'message', 'time', 'system', 'format', 'level'}


def event_to_gelf(event_dict):
    """
    Build GELF fields out of a twisted log event.

    The message (or the reason of an error) becomes ``short_message``, the
    traceback of a failure ``full_message`` and every other field an
    additional ``_`` prefixed field.

    :param dict event_dict: twisted log event.
    :rtype: dict
    """
    system = event_dict.get('system')
    gelf = {
        'short_message': textFromEventDict(
            merge({'message': (), 'isError': 0}, event_dict)),
        'facility': None if system == '-' else system,
    }
    if 'time' in event_dict:
        gelf['timestamp'] = event_dict['time']

    if event_dict.get('isError'):
        gelf['level'] = LogLevel.ERROR
        failure = event_dict.get('failure')
        if failure is not None:
            gelf['full_message'] = failure.getTraceback()
            gelf['_exception_type'] = failure.type.__name__
            gelf['short_message'] = '{0}: {1!r}'.format(
                event_dict.get('why') or 'Unhandled Error', failure.value)
    else:
        gelf['level'] = event_dict.get('level', LogLevel.INFO)

    for key, value in event_dict.items():
        if (key in PRIMITIVE_FIELDS or key in ERROR_FIELDS or
                key.startswith('log_')):
            continue
        name = '_' + key.lstrip('_')
        if name in RESERVED_FIELDS:
            name = '_event' + name
        gelf[name] = value

    return gelf


@implementer(ILogObserver)
class GraylogObserver(object):
    """
    A log observer that sends every event to graylog with a
    :class:`GelfClient`, except txgelf's own events.
    """
    def __init__(self, client):
        self.client = client

    def __call__(self, event_dict):
        if event_dict.get('system') == SYSTEM:
            return
        self.client.log(event_to_gelf(event_dict), callback=lambda _: None)


def GraylogUDPPublisher(host='127.0.0.1', port=12201, reactor=None,
                        **options):
    """
    Publish twisted log events to a graylog server over UDP.

    :param str host: Host name or IP address of the graylog server.
    :param int port: UDP port of the graylog server.
    :param IReactorUDP,IReactorTime,None reactor: An instance of a reactor
        or None
    :params options: Other camelCase options of
        :meth:`txgelf.config.GelfConfig.from_options`.

    :rtype: :class:`GraylogObserver`
    """
    options.update(graylogHostname=host, graylogPort=port)
    client = GelfClient(options, reactor=reactor)
    client.open()
    return GraylogObserver(client)
