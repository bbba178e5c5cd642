#
#    Copyright (c) 2009-2023 Tom Keffer <tkeffer@gmail.com>
#
#    See the file LICENSE.txt for your full rights.
#
"""Wake up a Davis Vantage console"""

import logging
import time

import vantage
from vantage.commands import wakeup_command

log = logging.getLogger(__name__)

DEFAULT_MAX_TRIES = 3

# How long the console needs after waking before it will take a command.
WAKE_SETTLE_DELAY = 0.2


def wakeup_console(channel, max_tries=DEFAULT_MAX_TRIES, settle_delay=WAKE_SETTLE_DELAY):
    """Wake up a Davis Vantage console.

    A carriage return is sent to the console. A successful write is taken as proof
    that the console is awake; no acknowledgement is read back. A failed write is
    retried immediately, up to max_tries times in all.

    Args:
        channel(vantage.channel.BaseChannel): An open channel to the console.
        max_tries(int): How many writes to try before giving up.
        settle_delay(float): Seconds to wait after a successful write.

    Returns:
        int: The attempt number that succeeded.

    Raises:
        vantage.WakeupError: If every write failed.
    """
    payload = wakeup_command().payload

    for attempt in range(1, max_tries + 1):
        try:
            channel.write(payload)
        except vantage.VantageIOError as e:
            log.debug("Wake up try #%d failed. Exception: %s", attempt, e)
            continue
        log.debug("Successfully woke up Vantage console on try #%d", attempt)
        time.sleep(settle_delay)
        return attempt

    log.error("Unable to wake up Vantage console")
    raise vantage.WakeupError("Unable to wake up Vantage console after %d tries" % max_tries)
