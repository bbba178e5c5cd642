#
#    Copyright (c) 2009-2023 Tom Keffer <tkeffer@gmail.com>
#
#    See the file LICENSE.txt for your rights.
#
"""Entry point to 'vproweather', a utility for querying a Davis Vantage console."""

import argparse
import logging
import sys

import configobj

import vantage
import vpcfg
import vputil.logger
from vantage.session import StationSession
from vputil.vputil import bcolors, to_int

log = logging.getLogger('vproweather')

usagestr = """%(prog)s --port PORT [--firmware-version | --model | --set-backlight 0|1]
                   [--config CONFIG] [--verbose]
       %(prog)s -v|--version
       %(prog)s -h|--help
"""

description = """Talk to a Davis Vantage Pro, Vantage Pro2, or Vantage Vue console over a serial
port. The console is woken up, then at most one command is sent. With no command, the
console is just woken up."""

epilog = """Options not given on the command line are taken from the [Vantage] section of
the configuration file, if one can be found."""


def log_error(msg):
    print(f"{bcolors.FAIL}{msg}{bcolors.ENDC}", file=sys.stderr)


def log_success(msg):
    print(f"{bcolors.OKGREEN}{msg}{bcolors.ENDC}")


def log_warn(msg):
    print(f"{bcolors.WARNING}{msg}{bcolors.ENDC}")


def get_parser():
    parser = argparse.ArgumentParser(prog='vproweather', usage=usagestr,
                                     description=description, epilog=epilog)
    parser.add_argument('-v', '--version', action='version',
                        version=f"vproweather {vantage.__version__}")
    parser.add_argument('-p', '--port', metavar='PORT',
                        help="Port the Vantage console is connected to, e.g. /dev/ttyUSB0.")
    parser.add_argument('--config', metavar='CONFIG',
                        help="Path to a configuration file. "
                             "Default is to look for vproweather.conf.")
    parser.add_argument('--verbose', action='store_true',
                        help="Show verbose output.")
    parser.add_argument('--firmware-command', choices=['ver', 'wrd'],
                        help="Form of the firmware query. Which one works depends on the "
                             "console's firmware generation. Default is 'ver'.")
    parser.add_argument('--model-offset', type=int, metavar='N',
                        help="Byte offset of the model code in the console's reply. "
                             "Default is 0.")
    parser.add_argument('--reply-timeout', type=float, metavar='SECONDS',
                        help="How long to wait for a reply. Default is 5 seconds.")

    group = parser.add_mutually_exclusive_group()
    group.add_argument('-f', '--firmware-version', action='store_true',
                       help="Query for the Davis firmware version string.")
    group.add_argument('-b', '--set-backlight', choices=['0', '1'], metavar='0|1',
                       help="Turn the backlight off (0) or on (1).")
    group.add_argument('-m', '--model', action='store_true',
                       help="Query for the station model.")
    return parser


def main(argv=None):
    parser = get_parser()
    namespace = parser.parse_args(argv)

    # Read the configuration file
    try:
        config_path, config_dict = vpcfg.load_config(namespace.config)
    except (IOError, configobj.ConfigObjError) as e:
        log_error(f"Error reading config file: {e}")
        return vantage.CONFIG_ERROR

    if namespace.verbose:
        vantage.debug = 1
    else:
        vantage.debug = to_int(config_dict.get('debug', 0))

    try:
        # Customize the logging with user settings.
        vputil.logger.setup('vproweather', config_dict)
    except Exception as e:
        log_error(f"Unable to set up logger: {e}")
        return vantage.CONFIG_ERROR

    if config_path:
        log.debug("Using configuration file %s", config_path)

    vp_dict = vpcfg.merge_options(config_dict, {
        'port': namespace.port,
        'firmware_command': namespace.firmware_command,
        'model_offset': namespace.model_offset,
        'reply_timeout': namespace.reply_timeout,
    })
    if not vp_dict.get('port'):
        parser.print_usage(sys.stderr)
        log_error("The port is required")
        return vantage.CMD_ERROR

    try:
        session = StationSession(**vp_dict)
    except (ValueError, vantage.UnsupportedFeature) as e:
        log_error(f"Bad option: {e}")
        return vantage.CMD_ERROR

    try:
        return run_session(session, namespace)
    except vantage.VantageIOError as e:
        log.error("%s: %s", type(e).__name__, e)
        if vantage.debug:
            vputil.logger.log_traceback(log.debug, '    ****  ')
        log_error(describe_failure(e))
        return vantage.exit_code(e)
    finally:
        try:
            session.close()
        except vantage.VantageIOError as e:
            log.error("Unable to close serial port: %s", e)


def run_session(session, namespace):
    """Open the channel, wake up the console, then service the requested command.

    Returns:
        int: The exit status.
    """
    session.open()
    log.info("Serial port opened")

    session.wakeup()
    log.info("Woke up weather station")

    if namespace.firmware_version:
        log.info("Getting firmware version...")
        reply = session.get_firmware_version()
        print(f"Firmware: {reply.hex}")
        print(f"Length:   {reply.length} bytes")
        if reply.text:
            print(f"Text:     {reply.text}")
    elif namespace.model:
        log.info("Getting station model...")
        reply = session.get_model()
        if reply.code is None:
            log_warn(f"Model: {reply}")
        else:
            log_success(f"Model: {reply}")
    elif namespace.set_backlight is not None:
        turn_on = namespace.set_backlight == '1'
        onoff = 'on' if turn_on else 'off'
        log.info("Turning backlight %s...", onoff)
        session.set_backlight(turn_on)
        log_success(f"Turned backlight {onoff}")
    else:
        log.info("No command given. Done.")

    return 0


def describe_failure(e):
    if isinstance(e, vantage.WakeupError):
        return f"Could not wake up weather station: {e}"
    if isinstance(e, vantage.ReplyTimeout):
        return f"No reply from weather station: {e}"
    if isinstance(e, vantage.BufferOverflow):
        return f"Reply from weather station too long: {e}"
    return f"I/O error talking to weather station: {e}"


if __name__ == "__main__":
    # Start up the program
    sys.exit(main())
