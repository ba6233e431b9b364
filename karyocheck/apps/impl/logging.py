# -*- coding: utf-8 -*-
"""Helper code for console output of the apps"""

import sys

from termcolor import colored


#: Message level: ERROR
LVL_ERROR = "ERROR"

#: Message level: WARNING
LVL_WARNING = "WARNING"

#: Message level: INFO
LVL_INFO = "INFO"

#: Message level: IMPORTANT
LVL_IMPORTANT = "IMPORTANT"

#: Message level: SUCCESS
LVL_SUCCESS = "SUCCESS"

#: Colors of the level prefixes
PREFIX_COLORS = {
    LVL_ERROR: "red",
    LVL_WARNING: "magenta",
    LVL_INFO: "yellow",
    LVL_SUCCESS: "green",
}

#: Report message levels (see ``karyocheck.reconcile.MessageLevel``) and the matching log level
REPORT_LEVELS = {
    "INFORMA": LVL_INFO,
    "WARNING": LVL_WARNING,
    "FAILURE": LVL_ERROR,
    "SUCCESS": LVL_SUCCESS,
}


def log(msg, args=None, level=None, file=None):
    """Print log message for given levels of importance

    For LVL_ERROR, LVL_WARNING, LVL_INFO, LVL_SUCCESS, the message will be prefixed with a
    colored keyword identifying the level.  For IMPORTANT, the message itself will be colored.
    """
    args = args or {}
    file = file or sys.stderr
    if level == LVL_IMPORTANT:
        print(colored(msg.format(**args), "yellow"), file=file)
    elif level in PREFIX_COLORS:
        prefix = colored(level + ": ", PREFIX_COLORS[level], attrs=["bold"])
        print(prefix, msg.format(**args), sep="", file=file)
    else:
        print(msg.format(**args), file=file)


def log_message(message, file=None):
    """Print a decision message (``karyocheck.reconcile.Message``) at its level"""
    log("{text}", {"text": message.text}, level=REPORT_LEVELS.get(str(message.level)), file=file)
