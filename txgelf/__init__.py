"""
Send log events to graylog as GELF over UDP, with twisted.
"""

from txgelf.client import GelfClient, GelfService
from txgelf.config import GelfConfig, TransportProfile
from txgelf.errors import (
    CompressionError, GelfError, ReservedFieldError, TooManyChunksError,
    TransportError)


__all__ = ['GelfClient', 'GelfService', 'GelfConfig', 'TransportProfile',
           'GelfError', 'ReservedFieldError', 'CompressionError',
           'TooManyChunksError', 'TransportError']
