"""
Compression of serialized GELF messages.
"""
import zlib

from txgelf.errors import CompressionError


def compress(data, level=zlib.Z_DEFAULT_COMPRESSION):
    """
    Compress a serialized message with zlib, which is what graylog expects
    to find in an unchunked datagram.

    :param data: ``str`` (encoded as UTF-8) or ``bytes``.
    :param int level: zlib compression level.

    :raises CompressionError: if zlib rejects the input.
    :rtype: bytes
    """
    try:
        if isinstance(data, str):
            data = data.encode('utf-8')
        return zlib.compress(data, level)
    except (zlib.error, TypeError, ValueError, UnicodeError) as e:
        raise CompressionError(e)
