#
#    Copyright (c) 2009-2023 Tom Keffer <tkeffer@gmail.com>
#
#    See the file LICENSE.txt for your full rights.
#
"""Package vantage, containing the serial protocol engine for Davis Vantage consoles."""

__version__ = "1.0.0"

# Set to true for extra debug information:
debug = False

# Exit return codes
CMD_ERROR = 2
CONFIG_ERROR = 3
IO_ERROR = 4
WAKEUP_ERROR = 6
TIMEOUT_ERROR = 7
OVERFLOW_ERROR = 8


# =============================================================================
#           Define possible exceptions that could get thrown.
# =============================================================================

class VantageIOError(IOError):
    """Base class of exceptions thrown when encountering an input/output error
    with the hardware."""


class WakeupError(VantageIOError):
    """Exception thrown when unable to wake up or initially connect with the
    console."""


class ReplyTimeout(VantageIOError):
    """Exception thrown when the console does not answer a command within the
    allotted time."""


class BufferOverflow(VantageIOError):
    """Exception thrown when a reply does not fit in the response buffer."""


class UnsupportedFeature(Exception):
    """Exception thrown when attempting to use a feature or option that is not
    supported."""


class ViolatedPrecondition(Exception):
    """Exception thrown when a function is called with violated
    preconditions."""


def exit_code(e):
    """Map an exception to the process exit status used by vproweather.

    Args:
        e(Exception): The exception that ended the session.

    Returns:
        int: The exit status.
    """
    # Order matters: the specific I/O errors are subclasses of VantageIOError
    if isinstance(e, WakeupError):
        return WAKEUP_ERROR
    if isinstance(e, ReplyTimeout):
        return TIMEOUT_ERROR
    if isinstance(e, BufferOverflow):
        return OVERFLOW_ERROR
    if isinstance(e, (IOError, OSError)):
        return IO_ERROR
    if isinstance(e, (UnsupportedFeature, ValueError)):
        return CMD_ERROR
    return 1
