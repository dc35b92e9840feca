"""
Exceptions raised while encoding and sending GELF messages.
"""


class GelfError(Exception):
    """
    Base class for every error that terminates the sending of a GELF message.
    """


class ReservedFieldError(GelfError):
    """
    Error raised when a log event uses a field name that GELF reserves.
    """
    def __init__(self, field):
        super(ReservedFieldError, self).__init__(
            "{f} is not allowed".format(f=field))
        self.field = field


class CompressionError(GelfError):
    """
    Error raised when the serialized envelope could not be compressed.
    """
    def __init__(self, reason):
        super(CompressionError, self).__init__(
            "Could not compress GELF message: {r!r}".format(r=reason))
        self.reason = reason


class TooManyChunksError(GelfError):
    """
    Error raised when a compressed message needs more chunks than a GELF
    chunk header can describe.
    """
    def __init__(self, size, chunk_size, count, maximum):
        super(TooManyChunksError, self).__init__(
            "Message of {s} bytes needs {c} chunks of {cs} bytes, "
            "at most {m} are allowed".format(
                s=size, c=count, cs=chunk_size, m=maximum))
        self.size = size
        self.chunk_size = chunk_size
        self.count = count
        self.maximum = maximum


class TransportError(GelfError):
    """
    Error raised when a datagram could not be written to the UDP port.

    :ivar reason: The underlying exception, or None.
    :ivar int index: Index of the datagram that failed, or None if no write
        was attempted.
    :ivar int sent: Number of datagrams of the message written before the
        failure.
    """
    def __init__(self, reason, index=None, sent=0):
        super(TransportError, self).__init__(
            "Could not send GELF datagram {i}: {r!r}".format(
                i=index, r=reason))
        self.reason = reason
        self.index = index
        self.sent = sent
