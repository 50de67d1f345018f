"""Opcode trace logging.

Tracing is off by default; the window toggles it with F1.
"""
import logging
import sys

logger = logging.getLogger("chip8vm")

#make it true if you want the logs
logsOn = False


def configure(level=logging.INFO):
    logging.basicConfig(level=level, format="[%(levelname)s]:  %(message)s", stream=sys.stdout)


def set_logs(enabled):
    global logsOn
    logsOn = bool(enabled)
    if logsOn and logger.getEffectiveLevel() > logging.DEBUG:
        logger.setLevel(logging.DEBUG)


def toggle_logs():
    set_logs(not logsOn)
    logger.info("logsOn: %s", logsOn)
    return logsOn


def log(msg, *args):
    # %-style arguments are only formatted while tracing is on
    if logsOn:
        logger.debug(msg, *args)
