#
#    Copyright (c) 2009-2023 Tom Keffer <tkeffer@gmail.com>
#
#    See the file LICENSE.txt for your full rights.
#
"""Test a console session against a fake channel"""
import unittest
from unittest.mock import patch

import vantage
import vantage.session
from vantage.accum import BUFFER_CAPACITY
from vantage.channel import BaseChannel, SerialChannel
from vantage.session import StationSession


class FakeChannel(BaseChannel):
    """An in-memory channel. Reads hand out the scripted chunks in order."""

    def __init__(self, chunks=(), write_failures=0, fail_commands=False):
        self.chunks = list(chunks)
        self.write_failures = write_failures
        self.fail_commands = fail_commands
        self.written = []
        self.opened = 0
        self.closed = 0
        self.drained = 0

    def open(self):
        self.opened += 1

    def close(self):
        self.closed += 1

    def write(self, data):
        if self.write_failures:
            self.write_failures -= 1
            raise vantage.VantageIOError("write failed")
        if self.fail_commands and data != b'\r':
            raise vantage.VantageIOError("command write failed")
        self.written.append(bytes(data))

    def drain(self):
        self.drained += 1

    def read(self):
        return self.chunks.pop(0) if self.chunks else b''

    def wait_readable(self, timeout):
        return bool(self.chunks)


@patch('vantage.wakeup.time')
@patch('vantage.session.time')
class SessionTest(unittest.TestCase):

    def make_session(self, channel, **kwargs):
        session = StationSession(channel=channel, **kwargs)
        session.open()
        session.wakeup()
        return session

    def test_firmware_in_two_chunks(self, mock_time, mock_wake_time):
        channel = FakeChannel([b'5.', b'2\n' + b'\x00' * (BUFFER_CAPACITY - 4)])
        session = self.make_session(channel)
        reply = session.get_firmware_version()
        self.assertEqual(reply.raw, b'\x35\x2e\x32\x0a')
        self.assertEqual(reply.hex, '35 2E 32 0A')
        self.assertEqual(reply.length, 4)
        self.assertEqual(channel.written, [b'\r', b'VER\n'])
        self.assertEqual(channel.chunks, [])
        self.assertEqual(session.state, vantage.session.DONE)
        # The settle delay elapsed before the reply was collected
        mock_time.sleep.assert_called_once_with(vantage.session.REPLY_SETTLE_DELAY)

    def test_firmware_wrd_form(self, mock_time, mock_wake_time):
        channel = FakeChannel([b'\x06\x10'])
        session = self.make_session(channel, firmware_command='WRD')
        reply = session.get_firmware_version()
        self.assertEqual(channel.written[-1], b'WRD\x12\x4d\n')
        self.assertEqual(reply.hex, '06 10')

    def test_firmware_only_padding(self, mock_time, mock_wake_time):
        channel = FakeChannel([b'\x00' * 16])
        session = self.make_session(channel)
        with self.assertRaises(vantage.ReplyTimeout):
            session.get_firmware_version()

    def test_model_offset_3(self, mock_time, mock_wake_time):
        channel = FakeChannel([b'\x00\x00', b'\x00\x10'])
        session = self.make_session(channel, model_offset='3')
        reply = session.get_model()
        self.assertEqual(reply.code, 16)
        self.assertEqual(reply.name, 'Vantage Pro')
        self.assertEqual(channel.written, [b'\r', b'WRD\x12\x4d\n'])

    def test_model_offset_0(self, mock_time, mock_wake_time):
        channel = FakeChannel([b'\x10'])
        session = self.make_session(channel)
        self.assertEqual(session.get_model().name, 'Vantage Pro')

    def test_model_code_zero(self, mock_time, mock_wake_time):
        # A zero model code must not be mistaken for padding
        channel = FakeChannel([b'\x00'])
        session = self.make_session(channel)
        self.assertEqual(session.get_model().name, 'Wizard III')

    def test_backlight(self, mock_time, mock_wake_time):
        for turn_on, payload in ((True, b'LAMPS 1\n'), (False, b'LAMPS 0\n')):
            channel = FakeChannel()
            session = self.make_session(channel)
            session.set_backlight(turn_on)
            self.assertEqual(channel.written, [b'\r', payload])
            self.assertEqual(channel.drained, 1)
            self.assertEqual(session.state, vantage.session.DONE)
            mock_time.sleep.assert_not_called()

    def test_wake_retry(self, mock_time, mock_wake_time):
        channel = FakeChannel([b'\x10'], write_failures=2)
        session = self.make_session(channel)
        self.assertEqual(session.state, vantage.session.WOKEN)
        self.assertEqual(session.get_model().code, 16)

    def test_wake_failure(self, mock_time, mock_wake_time):
        channel = FakeChannel(write_failures=3)
        session = StationSession(channel=channel)
        session.open()
        with self.assertRaises(vantage.WakeupError):
            session.wakeup()
        self.assertEqual(channel.closed, 1)
        self.assertEqual(session.state, vantage.session.CLOSED)
        # No command may be sent
        with self.assertRaises(vantage.ViolatedPrecondition):
            session.get_model()
        self.assertEqual(channel.written, [])
        session.close()
        self.assertEqual(channel.closed, 1)

    def test_command_write_not_retried(self, mock_time, mock_wake_time):
        channel = FakeChannel(fail_commands=True)
        session = self.make_session(channel)
        with self.assertRaises(vantage.VantageIOError):
            session.set_backlight(True)
        self.assertEqual(channel.written, [b'\r'])

    def test_timeout(self, mock_time, mock_wake_time):
        channel = FakeChannel()
        session = self.make_session(channel, reply_timeout='0.5')
        with self.assertRaises(vantage.ReplyTimeout):
            session.get_model()
        self.assertEqual(session.state, vantage.session.AWAITING_REPLY)

    def test_overflow(self, mock_time, mock_wake_time):
        channel = FakeChannel([b'\x01' * BUFFER_CAPACITY, b'\x01'])
        session = self.make_session(channel)
        with self.assertRaises(vantage.BufferOverflow):
            session.get_firmware_version()

    def test_one_command_per_session(self, mock_time, mock_wake_time):
        channel = FakeChannel([b'\x10', b'\x10'])
        session = self.make_session(channel)
        session.get_model()
        with self.assertRaises(vantage.ViolatedPrecondition):
            session.get_model()

    def test_context_manager_closes_once(self, mock_time, mock_wake_time):
        channel = FakeChannel()
        with StationSession(channel=channel) as session:
            self.assertEqual(session.state, vantage.session.OPEN)
            session.wakeup()
            session.close()
        self.assertEqual(channel.opened, 1)
        self.assertEqual(channel.closed, 1)
        with self.assertRaises(vantage.ViolatedPrecondition):
            session.open()


class OptionsTest(unittest.TestCase):

    def test_serial_channel_from_options(self):
        session = StationSession(port='/dev/ttyUSB0', baudrate='9600', timeout='2')
        self.assertIsInstance(session.channel, SerialChannel)
        self.assertEqual(session.channel.port, '/dev/ttyUSB0')
        self.assertEqual(session.channel.baudrate, 9600)
        self.assertEqual(session.channel.timeout, 2.0)
        self.assertEqual(session.state, vantage.session.CLOSED)

    def test_defaults(self):
        session = StationSession(channel=FakeChannel())
        self.assertEqual(session.max_tries, 3)
        self.assertEqual(session.firmware_form, 'ver')
        self.assertEqual(session.model_offset, 0)
        self.assertEqual(session.reply_timeout, vantage.session.REPLY_TIMEOUT)

    def test_bad_options(self):
        with self.assertRaises(ValueError):
            StationSession()
        with self.assertRaises(vantage.UnsupportedFeature):
            StationSession(channel=FakeChannel(), firmware_command='nver')
        # A config file line such as 'firmware_command = ver, wrd' gives a list
        with self.assertRaises(vantage.UnsupportedFeature):
            StationSession(channel=FakeChannel(), firmware_command=['ver', 'wrd'])
        session = StationSession(channel=FakeChannel(), firmware_command='WRD')
        self.assertEqual(session.firmware_form, 'wrd')
        with self.assertRaises(ValueError):
            StationSession(channel=FakeChannel(), max_tries=0)


if __name__ == '__main__':
    unittest.main()
