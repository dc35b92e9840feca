"""
Configuration of a GELF client.

Options are given as a mapping using the same camelCase names as the JSON
configuration files, e.g.::

    {"graylogHostname": "graylog.example.com", "connection": "lan"}

Unknown options are ignored and unset options fall back to
:data:`DEFAULTS`.
"""
import json

import attr

from pyrsistent import pmap

from toolz.dicttoolz import keyfilter, merge


WAN = 'wan'
LAN = 'lan'

DEFAULTS = pmap({
    'graylogPort': 12201,
    'graylogHostname': '127.0.0.1',
    'connection': WAN,
    'maxChunkSizeWan': 1420,
    'maxChunkSizeLan': 8154,
})


def _validate_connection(instance, attribute, value):
    if value not in (WAN, LAN):
        raise ValueError(
            "{name} must be {w!r} or {l!r}, got {v!r}".format(
                name=attribute.name, w=WAN, l=LAN, v=value))


def _validate_positive(instance, attribute, value):
    if value <= 0:
        raise ValueError(
            "{name} must be positive, got {v!r}".format(
                name=attribute.name, v=value))


@attr.s(frozen=True)
class TransportProfile(object):
    """
    The connection kind and the chunk sizes that decide when and how a
    compressed message is chunked.
    """
    connection = attr.ib(default=WAN, validator=_validate_connection)
    max_chunk_size_wan = attr.ib(default=DEFAULTS['maxChunkSizeWan'],
                                 converter=int, validator=_validate_positive)
    max_chunk_size_lan = attr.ib(default=DEFAULTS['maxChunkSizeLan'],
                                 converter=int, validator=_validate_positive)

    @property
    def max_chunk_size(self):
        """
        Largest payload, in bytes, sent without chunking on this connection.
        """
        if self.connection == LAN:
            return self.max_chunk_size_lan
        return self.max_chunk_size_wan


@attr.s(frozen=True)
class GelfConfig(object):
    """
    Destination and transport profile of a GELF client.
    """
    host = attr.ib(default=DEFAULTS['graylogHostname'])
    port = attr.ib(default=DEFAULTS['graylogPort'], converter=int)
    profile = attr.ib(default=attr.Factory(TransportProfile))

    @classmethod
    def from_options(cls, options=None):
        """
        Build a configuration from a mapping of camelCase options.

        :param dict options: Options to override :data:`DEFAULTS` with.
            Keys that are not in :data:`DEFAULTS` are ignored, and so are
            ``None`` values.
        :raises ValueError: if ``connection`` is neither ``lan`` nor
            ``wan``, or a chunk size is not positive.
        :rtype: :class:`GelfConfig`
        """
        known = keyfilter(lambda k: k in DEFAULTS, dict(options or {}))
        opts = merge(DEFAULTS,
                     {k: v for k, v in known.items() if v is not None})
        return cls(
            host=opts['graylogHostname'],
            port=opts['graylogPort'],
            profile=TransportProfile(
                connection=opts['connection'],
                max_chunk_size_wan=opts['maxChunkSizeWan'],
                max_chunk_size_lan=opts['maxChunkSizeLan']))

    def to_options(self):
        """
        :return: the camelCase options this configuration was built from.
        """
        return {
            'graylogHostname': self.host,
            'graylogPort': self.port,
            'connection': self.profile.connection,
            'maxChunkSizeWan': self.profile.max_chunk_size_wan,
            'maxChunkSizeLan': self.profile.max_chunk_size_lan,
        }


def options_from_path(path):
    """
    Read configuration options from a JSON file.

    :param str path: Path to a JSON file holding an object of options.
    :rtype: dict
    """
    with open(path) as f:
        options = json.load(f)
    if not isinstance(options, dict):
        raise ValueError(
            "{p} must contain a JSON object, not {t}".format(
                p=path, t=type(options).__name__))
    return options
