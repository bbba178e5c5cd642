#
#    Copyright (c) 2009-2023 Tom Keffer <tkeffer@gmail.com>
#
#    See the file LICENSE.txt for your full rights.
#
"""Byte channels used to talk to a Davis Vantage console"""

import logging

import serial

import vantage

log = logging.getLogger(__name__)

# Fixed by the Davis serial protocol: 8 data bits, no parity, one stop bit.
DEFAULT_BAUDRATE = 19200


# ===============================================================================
#                           class BaseChannel
# ===============================================================================

class BaseChannel(object):
    """Duplex byte stream to a console. The protocol engine uses nothing else.

    Writes either complete or raise vantage.VantageIOError. Reads never block and
    return whatever happens to be buffered, which may be nothing at all, or only
    part of a message."""

    def open(self):
        raise NotImplementedError

    def close(self):
        raise NotImplementedError

    def write(self, data):
        raise NotImplementedError

    def drain(self):
        raise NotImplementedError

    def read(self):
        raise NotImplementedError

    def wait_readable(self, timeout):
        """Block until at least one byte can be read, or until timeout seconds have passed.

        Returns:
            bool: True if there is something to read.
        """
        raise NotImplementedError

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, etyp, einst, etb):
        self.close()


# ===============================================================================
#                           class SerialChannel
# ===============================================================================

def guard_termios(fn):
    """Decorator function that converts termios exceptions into vantage exceptions."""
    # Some functions in the module 'serial' can raise undocumented termios
    # exceptions. This catches them and converts them to vantage exceptions.
    try:
        import termios

        def guarded_fn(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except termios.error as e:
                raise vantage.VantageIOError(e)
    except ImportError:
        def guarded_fn(*args, **kwargs):
            return fn(*args, **kwargs)
    return guarded_fn


class SerialChannel(BaseChannel):
    """Wraps a serial connection returned from package serial"""

    def __init__(self, port, baudrate=DEFAULT_BAUDRATE, timeout=4.0):
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self.serial_port = None
        # A byte consumed while waiting for the port to become readable:
        self._pushback = b''

    @property
    def is_open(self):
        return self.serial_port is not None

    def open(self):
        try:
            # Reads are non-blocking. The timeout applies to writes.
            self.serial_port = serial.Serial(self.port, self.baudrate,
                                             bytesize=serial.EIGHTBITS,
                                             parity=serial.PARITY_NONE,
                                             stopbits=serial.STOPBITS_ONE,
                                             timeout=0,
                                             write_timeout=self.timeout)
        except (serial.SerialException, ValueError) as e:
            log.error("Unable to open serial port %s: %s", self.port, e)
            # Reraise as a vantage I/O error:
            raise vantage.VantageIOError(e)
        log.debug("Opened up serial port %s; baud %d; timeout %.2f",
                  self.port, self.baudrate, self.timeout)

    def close(self):
        """Close the port. Closing a port that is not open does nothing."""
        if self.serial_port is None:
            return
        try:
            self.serial_port.close()
        except (serial.SerialException, OSError) as e:
            raise vantage.VantageIOError(e)
        finally:
            self.serial_port = None
            self._pushback = b''
            log.debug("Closed serial port %s", self.port)

    def write(self, data):
        self._check_open()
        try:
            N = self.serial_port.write(data)
        except (serial.SerialException, OSError) as e:
            log.error("SerialException on write.")
            log.error("   ****  %s", e)
            # Reraise as a vantage I/O error:
            raise vantage.VantageIOError(e)
        if N is not None and N != len(data):
            raise vantage.VantageIOError("Expected to write %d chars; sent %d instead"
                                         % (len(data), N))

    @guard_termios
    def drain(self):
        self._check_open()
        try:
            self.serial_port.flush()
        except (serial.SerialException, OSError) as e:
            raise vantage.VantageIOError(e)

    @guard_termios
    def read(self):
        self._check_open()
        try:
            # in_waiting is an ioctl. An unplugged adapter makes it raise a plain OSError.
            nc = self.serial_port.in_waiting
            _buffer = self.serial_port.read(nc) if nc else b''
        except (serial.SerialException, OSError) as e:
            log.error("SerialException on read.")
            log.error("   ****  %s", e)
            log.error("   ****  Is there a competing process running??")
            raise vantage.VantageIOError(e)
        _buffer = self._pushback + _buffer
        self._pushback = b''
        return _buffer

    @guard_termios
    def wait_readable(self, timeout):
        self._check_open()
        if self._pushback:
            return True
        # Let the serial driver do the waiting by doing a blocking read of a
        # single byte. Keep the byte for the next read().
        try:
            self.serial_port.timeout = timeout
            try:
                self._pushback = self.serial_port.read(1)
            finally:
                self.serial_port.timeout = 0
        except (serial.SerialException, OSError) as e:
            raise vantage.VantageIOError(e)
        return len(self._pushback) > 0

    def _check_open(self):
        if self.serial_port is None:
            raise vantage.VantageIOError("Serial port %s is not open" % self.port)
