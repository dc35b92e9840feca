"""
GELF chunking of compressed messages that are too big for one datagram.

Every chunk is prefixed with a 12 byte header::

    0x1e 0x0f | message id (8 bytes) | sequence number | sequence count
"""
import random
import struct

from txgelf.errors import TooManyChunksError


GELF_MAGIC = b'\x1e\x0f'

HEADER = struct.Struct('>2sQBB')

MAX_CHUNKS = 128

MESSAGE_ID_RANGE = (10000000, 99999999)


def new_message_id():
    """
    :return: a random message id shared by all the chunks of one message.
        Ids are not guaranteed to be unique across messages in flight.
    """
    return random.randrange(*MESSAGE_ID_RANGE)


def get_chunks(payload, chunk_size):
    """
    Split `payload` into consecutive pieces of at most `chunk_size` bytes.
    """
    return [payload[i:i + chunk_size]
            for i in range(0, len(payload), chunk_size)]


def create_packets(chunks, message_id):
    """
    Prefix every chunk with its GELF chunk header.

    :param list chunks: the ``bytes`` pieces of one message, in order.
    :param int message_id: id shared by all pieces.

    :raises TooManyChunksError: if there are more than :data:`MAX_CHUNKS`
        chunks.
    :raises ValueError: if `message_id` does not fit in 8 bytes.
    :return: ``list`` of ``bytes``
    """
    count = len(chunks)
    if count > MAX_CHUNKS:
        raise TooManyChunksError(sum(map(len, chunks)), len(chunks[0]),
                                 count, MAX_CHUNKS)
    if not 0 <= message_id < 2 ** 64:
        raise ValueError(
            "message id {i} does not fit in 8 bytes".format(i=message_id))

    return [HEADER.pack(GELF_MAGIC, message_id, index, count) + chunk
            for index, chunk in enumerate(chunks)]


def maybe_chunk(payload, profile, message_id=None):
    """
    Get the datagrams to send for a compressed message.

    :param bytes payload: The compressed message.
    :param profile: A :class:`txgelf.config.TransportProfile`.
    :param int message_id: Id to put in the chunk headers; a random one is
        generated if not given.

    :raises TooManyChunksError: if `payload` needs more than
        :data:`MAX_CHUNKS` chunks.
    :return: ``[payload]`` if it fits in ``profile.max_chunk_size`` bytes,
        otherwise the framed chunks in sequence order.
    """
    chunk_size = profile.max_chunk_size
    if len(payload) <= chunk_size:
        return [payload]

    count = -(-len(payload) // chunk_size)
    if count > MAX_CHUNKS:
        raise TooManyChunksError(len(payload), chunk_size, count, MAX_CHUNKS)

    if message_id is None:
        message_id = new_message_id()
    return create_packets(get_chunks(payload, chunk_size), message_id)
