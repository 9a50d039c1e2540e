import re
from enum import IntEnum

ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")

GREEN = "32"
RED = "31"
BLUE = "34"
MAGENTA = "35"
YELLOW = "33"
DIM = "2"


class ReportingLevel(IntEnum):
    QUIET = 0
    BASIC = 1
    VERBOSE = 2


def color_text(text, color_code):
    return f"\033[{color_code}m{text}\033[0m"

def strip_ansi(text):
    return ANSI_ESCAPE.sub("", text)

def visible_len(text):
    return len(strip_ansi(text))

def info_text(text):
    return f"{color_text('INFO', BLUE)}  {text}"

def warning_text(text):
    return f"{color_text('WARN', YELLOW)}  {text}"

def error_text(text):
    return f"{color_text('ERROR', RED)} {text}"

def sending_text(text):
    return f"{color_text('SENDING  ', GREEN)} {text}"

def received_text(text):
    return f"{color_text('RECEIVED ', MAGENTA)} {text}"
