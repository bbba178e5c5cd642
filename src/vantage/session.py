#
#    Copyright (c) 2009-2023 Tom Keffer <tkeffer@gmail.com>
#
#    See the file LICENSE.txt for your full rights.
#
"""A single command/response session with a Davis Vantage console.

A session goes through these states:

    closed -> open -> woken -> awaiting_reply -> done

Commands without a reply (the backlight) go straight from woken to done. Only one
command is serviced per session."""

import logging
import time

import vantage
import vantage.commands
from vantage.accum import ResponseAccumulator, BUFFER_CAPACITY
from vantage.channel import SerialChannel, DEFAULT_BAUDRATE
from vantage.wakeup import wakeup_console, DEFAULT_MAX_TRIES, WAKE_SETTLE_DELAY
from vputil.vputil import to_int, to_float

log = logging.getLogger(__name__)

# How long to let the console fill its reply after the first byte shows up
REPLY_SETTLE_DELAY = 1.0
# How long to wait for the first byte of a reply
REPLY_TIMEOUT = 5.0

CLOSED = 'closed'
OPEN = 'open'
WOKEN = 'woken'
AWAITING_REPLY = 'awaiting_reply'
DONE = 'done'


class StationSession(object):
    """Owns the channel to the console for the lifetime of one command."""

    def __init__(self, channel=None, **vp_dict):
        """Initialize a session. The channel is not opened until open() is called.

        NAMED ARGUMENTS:

        channel: An instance of vantage.channel.BaseChannel. [Optional. If not given, a
        SerialChannel is built from 'port', 'baudrate' and 'timeout']

        port: The serial port of the console. [Required if no channel is given]

        baudrate: Baudrate of the port. [Optional. Default 19200]

        timeout: Serial write timeout in seconds. [Optional. Default 4]

        max_tries: How many times to try waking up the console. [Optional. Default 3]

        wake_settle_delay: Seconds to wait after waking the console. [Optional. Default 0.2]

        reply_settle_delay: Seconds to wait after the first byte of a reply arrives before
        collecting it. [Optional. Default 1.0]

        reply_timeout: Seconds to wait for the first byte of a reply. [Optional. Default 5]

        firmware_command: Form of the firmware query, 'ver' or 'wrd'. [Optional. Default 'ver']

        model_offset: Offset of the model code in the reply to a model query.
        [Optional. Default 0]
        """
        self.max_tries = to_int(vp_dict.get('max_tries', DEFAULT_MAX_TRIES))
        self.wake_settle_delay = to_float(vp_dict.get('wake_settle_delay', WAKE_SETTLE_DELAY))
        self.reply_settle_delay = to_float(vp_dict.get('reply_settle_delay', REPLY_SETTLE_DELAY))
        self.reply_timeout = to_float(vp_dict.get('reply_timeout', REPLY_TIMEOUT))
        self.firmware_form = str(vp_dict.get('firmware_command',
                                             vantage.commands.FIRMWARE_VER)).lower()
        self.model_offset = to_int(vp_dict.get('model_offset', 0))
        self.buffer_capacity = to_int(vp_dict.get('buffer_capacity', BUFFER_CAPACITY))

        if self.max_tries is None or self.max_tries < 1:
            raise ValueError("max_tries must be at least 1")
        if self.firmware_form not in (vantage.commands.FIRMWARE_VER,
                                      vantage.commands.FIRMWARE_WRD):
            raise vantage.UnsupportedFeature("Unknown firmware_command '%s'" % self.firmware_form)

        if channel is None:
            port = vp_dict.get('port')
            if not port:
                raise ValueError("No serial port specified")
            channel = SerialChannel(port,
                                    baudrate=to_int(vp_dict.get('baudrate', DEFAULT_BAUDRATE)),
                                    timeout=to_float(vp_dict.get('timeout', 4.0)))
        self.channel = channel
        self.state = CLOSED
        self._released = False
        self._serviced = False

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, etyp, einst, etb):
        self.close()

    def open(self):
        """Open the channel to the console."""
        if self.state != CLOSED or self._released:
            raise vantage.ViolatedPrecondition("Session can only be opened once")
        self.channel.open()
        self.state = OPEN
        log.debug("Channel to console is open")

    def close(self):
        """Release the channel. Only the first call has any effect."""
        if self._released:
            return
        self._released = True
        try:
            self.channel.close()
        finally:
            if self.state != DONE:
                self.state = CLOSED

    def wakeup(self):
        """Wake up the console. On failure, the channel is closed.

        Raises:
            vantage.WakeupError: If the console could not be woken up.
        """
        if self.state != OPEN:
            raise vantage.ViolatedPrecondition("Cannot wake up console in state '%s'"
                                               % self.state)
        try:
            wakeup_console(self.channel, max_tries=self.max_tries,
                           settle_delay=self.wake_settle_delay)
        except vantage.WakeupError:
            self.close()
            raise
        self.state = WOKEN

    def run(self, command):
        """Send a command and, if it has a reply, collect it.

        I/O errors are not retried: repeating a command such as a lamp toggle is not safe.

        Returns:
            ResponseAccumulator|None: The collected reply, or None for commands without one.
        """
        if self.state != WOKEN or self._serviced:
            raise vantage.ViolatedPrecondition("Cannot send command '%s' in state '%s'"
                                               % (command.name, self.state))
        self._serviced = True
        log.debug("Sending %r", command)
        self.channel.write(command.payload)
        self.channel.drain()

        if not command.expects_reply:
            self.state = DONE
            return None

        self.state = AWAITING_REPLY
        return self._await_reply(command)

    def get_firmware_version(self):
        """Query the console's firmware.

        Returns:
            vantage.commands.FirmwareReply: The raw reply.
        """
        accumulator = self.run(vantage.commands.firmware_command(self.firmware_form))
        reply = accumulator.trimmed()
        if not reply:
            raise vantage.ReplyTimeout("Console sent no firmware data")
        result = vantage.commands.decode_firmware(reply)
        self.state = DONE
        return result

    def get_model(self):
        """Query the console's model.

        Returns:
            vantage.commands.ModelReply: The model code and name.
        """
        accumulator = self.run(vantage.commands.model_command())
        # Zero is a valid model code, so decode from the untrimmed reply.
        result = vantage.commands.decode_model(accumulator.received, self.model_offset)
        self.state = DONE
        return result

    def set_backlight(self, turn_on):
        """Turn the console lamps on or off. No reply is expected."""
        self.run(vantage.commands.backlight_command(turn_on))
        log.info("Backlight turned %s", 'on' if turn_on else 'off')

    def _await_reply(self, command):
        if not self.channel.wait_readable(self.reply_timeout):
            raise vantage.ReplyTimeout("No reply to '%s' within %.1f seconds"
                                       % (command.name, self.reply_timeout))
        # There is no end-of-message marker. Give the console time to send the rest
        # before treating an empty channel as the end of the reply.
        time.sleep(self.reply_settle_delay)
        accumulator = ResponseAccumulator(self.buffer_capacity)
        if accumulator.accumulate(self.channel) is None:
            raise vantage.ReplyTimeout("No reply to '%s'" % command.name)
        log.debug("Reply to '%s' is %d byte(s)", command.name, len(accumulator))
        return accumulator
