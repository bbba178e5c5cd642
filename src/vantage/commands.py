#
#    Copyright (c) 2009-2023 Tom Keffer <tkeffer@gmail.com>
#
#    See the file LICENSE.txt for your full rights.
#
"""The commands understood by a Davis Vantage console, and decoders for their replies.

Two generations of console firmware are in circulation. They differ in how the
firmware version is asked for ("VER" versus the EEPROM read "WRD"), and in where
the model code sits in the reply to "WRD". Which one is right depends on the
console, so both are selectable."""

import logging

import vantage
import vantage.models
from vputil.vputil import hexdump

log = logging.getLogger(__name__)

# A few handy constants:
CR = b'\x0d'
ACK = b'\x06'

# Forms of the firmware query:
FIRMWARE_VER = 'ver'
FIRMWARE_WRD = 'wrd'

_read_model_payload = b"WRD\x12\x4d\n"


class Command(object):
    """A command to the console: the bytes to send, and whether a reply comes back."""

    def __init__(self, name, payload, expects_reply=False):
        self.name = name
        self.payload = payload
        self.expects_reply = expects_reply

    def __eq__(self, other):
        return isinstance(other, Command) \
            and (self.name, self.payload, self.expects_reply) \
            == (other.name, other.payload, other.expects_reply)

    def __repr__(self):
        return "Command(%s, payload=%r, expects_reply=%s)" % (self.name, self.payload,
                                                               self.expects_reply)


def wakeup_command():
    return Command('wakeup', CR)


def firmware_command(form=FIRMWARE_VER):
    """Build the firmware version query.

    Args:
        form(str): 'ver' for the "VER" command, 'wrd' for the older "WRD" form.
    """
    if form == FIRMWARE_VER:
        return Command('firmware', b"VER\n", expects_reply=True)
    elif form == FIRMWARE_WRD:
        return Command('firmware', _read_model_payload, expects_reply=True)
    raise vantage.UnsupportedFeature("Unknown firmware command form '%s'" % form)


def model_command():
    return Command('model', _read_model_payload, expects_reply=True)


def backlight_command(turn_on):
    """Build the command that turns the console lamps on or off."""
    return Command('backlight', b"LAMPS %s\n" % (b'1' if turn_on else b'0'))


# ===============================================================================
#                           Reply decoders
# ===============================================================================

class FirmwareReply(object):
    """Whatever the console sent back to a firmware query.

    The protocol does not define any structure beyond the raw bytes."""

    def __init__(self, raw):
        self.raw = bytes(raw)

    @property
    def length(self):
        return len(self.raw)

    @property
    def hex(self):
        return hexdump(self.raw)

    @property
    def text(self):
        """Best-effort rendering as text. The console ends lines with \\n\\r and may
        precede the answer with an 'OK' line."""
        lines = [line.strip() for line in self.raw.split(b'\n\r')]
        lines = [line for line in lines if line and line != b'OK']
        return ' '.join(line.decode('ascii', errors='replace') for line in lines)

    def __str__(self):
        return "%s (%d bytes)" % (self.hex, self.length)


class ModelReply(object):
    """A model code and its name. The code is None if the reply was too short to hold one."""

    def __init__(self, code, name):
        self.code = code
        self.name = name

    def __str__(self):
        if self.code is None:
            return self.name
        return "%s (code %d)" % (self.name, self.code)


def decode_firmware(raw):
    return FirmwareReply(raw)


def decode_model(raw, offset=0):
    """Pull the model code out of a reply to the "WRD" command.

    Args:
        raw(bytes): The reply, including any significant zero bytes.
        offset(int): Where the model code sits in the reply. Newer firmware puts it
            first (offset 0). Consoles that acknowledge with ACK before answering put
            it at offset 1. Some older consoles return a four byte record with the
            code in the last byte (offset 3).

    Returns:
        ModelReply: The decoded model. Unexpected codes decode to "Unknown model".
    """
    if offset < 0 or offset >= len(raw):
        log.warning("Model reply has %d byte(s); no model code at offset %d", len(raw), offset)
        return ModelReply(None, vantage.models.UNKNOWN_MODEL)
    code = raw[offset]
    log.debug("Model code is %d", code)
    # 0x06 is also a model code, so an ACK in front of a longer reply is only a hint.
    if offset == 0 and raw[:1] == ACK and len(raw) > 1:
        log.info("Model reply starts with ACK. If the model is wrong, try model_offset = 1")
    return ModelReply(code, vantage.models.decode(code))
