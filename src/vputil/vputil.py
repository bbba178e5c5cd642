#
#    Copyright (c) 2009-2023 Tom Keffer <tkeffer@gmail.com>
#
#    See the file LICENSE.txt for your full rights.
#
"""Various handy utilities that don't belong anywhere else.

   NB: To run the doctests, this code must be run as a module. For example:
     cd ~/git/vproweather/src
     python -m vputil.vputil
"""


def to_int(x):
    """Convert an object to an integer, unless it is None

    Examples:
    >>> print(to_int(123))
    123
    >>> print(to_int('123'))
    123
    >>> print(to_int('0x10'))
    16
    >>> print(to_int(-5.2))
    -5
    >>> print(to_int(None))
    None
    """
    if isinstance(x, str) and (x.lower() == 'none' or x == ''):
        x = None
    if x is None:
        return None
    try:
        # Base 0 so that hex values such as '0x10' are accepted:
        return int(x, 0) if isinstance(x, str) else int(x)
    except ValueError:
        # Perhaps it's a string, holding a floating point number?
        return int(float(x))


def to_float(x):
    """Convert an object to a float, unless it is None

    Examples:
    >>> print(to_float(12.3))
    12.3
    >>> print(to_float('12.3'))
    12.3
    >>> print(to_float(None))
    None
    """
    if isinstance(x, str) and x.lower() == 'none':
        x = None
    return float(x) if x is not None else None


def hexdump(data):
    """Format a byte string as space-separated, upper-case hex pairs.

    Examples:
    >>> print(hexdump(b'5.2\\n'))
    35 2E 32 0A
    >>> print(repr(hexdump(b'')))
    ''
    """
    return ' '.join('%02X' % b for b in bytes(data))


class bcolors:
    """Colors used for terminals"""
    HEADER = '\033[95m'
    OKBLUE = '\033[94m'
    OKCYAN = '\033[96m'
    OKGREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'
    UNDERLINE = '\033[4m'


if __name__ == '__main__':
    import doctest

    if not doctest.testmod().failed:
        print("PASSED")
