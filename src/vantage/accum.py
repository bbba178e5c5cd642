#
#    Copyright (c) 2009-2023 Tom Keffer <tkeffer@gmail.com>
#
#    See the file LICENSE.txt for your full rights.
#
"""Collect the reply to a single command.

The console does not frame its replies: there is no length prefix and, for
binary replies, no terminator. A reply is considered complete once the channel
has nothing more to offer. The console pads fixed-size records with zero bytes,
which are trimmed off the end."""

import logging

import vantage

log = logging.getLogger(__name__)

# Size of the console's largest reply
BUFFER_CAPACITY = 4200


class ResponseAccumulator(object):
    """Bounded buffer for the bytes of one reply. Use a new instance for every exchange."""

    def __init__(self, capacity=BUFFER_CAPACITY):
        self.capacity = capacity
        # Allocated when the first byte arrives:
        self._buffer = None
        # Offset of the next byte to be written:
        self.cursor = 0
        self.complete = False

    def __len__(self):
        return self.cursor

    def feed(self, data):
        """Copy data into the buffer at the cursor.

        Raises:
            vantage.BufferOverflow: If the data does not fit.
        """
        if not data:
            return
        if self.cursor + len(data) > self.capacity:
            raise vantage.BufferOverflow("Reply exceeds %d bytes (have %d, got %d more)"
                                         % (self.capacity, self.cursor, len(data)))
        if self._buffer is None:
            self._buffer = bytearray(self.capacity)
        self._buffer[self.cursor:self.cursor + len(data)] = data
        self.cursor += len(data)

    def accumulate(self, channel, max_reads=None):
        """Drain everything the channel has available.

        Args:
            channel(vantage.channel.BaseChannel): Where the bytes come from.
            max_reads(int): Upper bound on the number of reads. Default is one more than
                the buffer capacity, which is enough for a channel that delivers a byte at a time.

        Returns:
            bytes|None: None if nothing has been received yet, otherwise the trimmed reply.

        Raises:
            vantage.BufferOverflow: If the reply does not fit in the buffer.
            vantage.VantageIOError: If the channel is still delivering after max_reads reads.
        """
        if max_reads is None:
            max_reads = self.capacity + 1

        for _ in range(max_reads):
            chunk = channel.read()
            if not chunk:
                break
            log.debug("Received %d byte(s)", len(chunk))
            self.feed(chunk)
        else:
            raise vantage.VantageIOError("Channel still delivering data after %d reads"
                                         % max_reads)

        if not self.cursor:
            return None

        self.complete = True
        return self.trimmed()

    @property
    def received(self):
        """All bytes received so far, including any trailing zero padding."""
        if self._buffer is None:
            return b''
        return bytes(self._buffer[:self.cursor])

    def trimmed(self):
        """The received bytes with trailing zero bytes removed.

        An empty result means nothing meaningful was received."""
        return trim_padding(self.received)


def trim_padding(data):
    """Strip trailing zero bytes.

    Examples:
    >>> trim_padding(b'5.2\\n\\x00\\x00')
    b'5.2\\n'
    >>> trim_padding(b'\\x00' * 10)
    b''
    """
    return bytes(data).rstrip(b'\x00')
