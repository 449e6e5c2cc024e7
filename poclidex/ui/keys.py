"""
Key input abstraction: arrows, Enter/Esc/Tab/Backspace, F1-F9 and printable
characters, read raw from the terminal.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Optional
import os
import sys

class Key(Enum):
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    ENTER = auto()
    ESC = auto()
    TAB = auto()
    BACKSPACE = auto()
    CTRL_C = auto()
    FUNCTION = auto()
    CHAR = auto()
    OTHER = auto()

@dataclass
class KeyEvent:
    key: Key
    raw: str | bytes | None = None
    char: str = ""
    number: Optional[int] = None    # F-key number for Key.FUNCTION

    @property
    def function_number(self) -> Optional[int]:
        return self.number if self.key is Key.FUNCTION else None

# Escape sequences after the leading ESC
_UNIX_SEQUENCES: Dict[str, KeyEvent] = {
    "[A": KeyEvent(Key.UP), "[B": KeyEvent(Key.DOWN),
    "[C": KeyEvent(Key.RIGHT), "[D": KeyEvent(Key.LEFT),
    "OP": KeyEvent(Key.FUNCTION, number=1), "OQ": KeyEvent(Key.FUNCTION, number=2),
    "OR": KeyEvent(Key.FUNCTION, number=3), "OS": KeyEvent(Key.FUNCTION, number=4),
    "[11~": KeyEvent(Key.FUNCTION, number=1), "[12~": KeyEvent(Key.FUNCTION, number=2),
    "[13~": KeyEvent(Key.FUNCTION, number=3), "[14~": KeyEvent(Key.FUNCTION, number=4),
    "[15~": KeyEvent(Key.FUNCTION, number=5), "[17~": KeyEvent(Key.FUNCTION, number=6),
    "[18~": KeyEvent(Key.FUNCTION, number=7), "[19~": KeyEvent(Key.FUNCTION, number=8),
    "[20~": KeyEvent(Key.FUNCTION, number=9),
}

# Windows extended codes after 0x00 / 0xe0
_WIN_EXTENDED: Dict[bytes, KeyEvent] = {
    b"H": KeyEvent(Key.UP), b"P": KeyEvent(Key.DOWN),
    b"K": KeyEvent(Key.LEFT), b"M": KeyEvent(Key.RIGHT),
    **{bytes([0x3B + i]): KeyEvent(Key.FUNCTION, number=i + 1) for i in range(9)},
}

def decode_char(ch: str) -> KeyEvent:
    """Map one already-read character (not part of an escape sequence)."""
    if ch in ("\r", "\n"):
        return KeyEvent(Key.ENTER, ch)
    if ch == "\t":
        return KeyEvent(Key.TAB, ch)
    if ch in ("\x7f", "\x08"):
        return KeyEvent(Key.BACKSPACE, ch)
    if ch == "\x03":
        return KeyEvent(Key.CTRL_C, ch)
    if ch == "\x1b":
        return KeyEvent(Key.ESC, ch)
    if ch.isprintable() and ch:
        return KeyEvent(Key.CHAR, ch, char=ch)
    return KeyEvent(Key.OTHER, ch)

def decode_sequence(seq: str) -> KeyEvent:
    """Map the part of an escape sequence that follows ESC."""
    known = _UNIX_SEQUENCES.get(seq)
    if known is None:
        return KeyEvent(Key.OTHER, "\x1b" + seq)
    return KeyEvent(known.key, "\x1b" + seq, number=known.number)

def _win_read() -> KeyEvent:
    import msvcrt
    ch = msvcrt.getch()
    if ch in (b"\x00", b"\xe0"):
        nxt = msvcrt.getch()
        known = _WIN_EXTENDED.get(nxt)
        if known is None:
            return KeyEvent(Key.OTHER, ch + nxt)
        return KeyEvent(known.key, ch + nxt, number=known.number)
    return decode_char(ch.decode(errors="ignore"))

ESC_TIMEOUT = 0.05

def _read_sequence(read, ready) -> str:
    """Collect the rest of an escape sequence; empty when ESC was pressed alone."""
    if not ready():
        return ""
    seq = read()
    if seq not in ("[", "O"):
        return seq
    while True:
        ch = read()
        seq += ch
        if not ch or ch.isalpha() or ch == "~":
            return seq

def _read_char(fd: int) -> str:
    # One UTF-8 character straight from the descriptor
    first = os.read(fd, 1)
    if not first:
        return ""
    lead = first[0]
    extra = 3 if lead >= 0xF0 else 2 if lead >= 0xE0 else 1 if lead >= 0xC0 else 0
    data = first + os.read(fd, extra) if extra else first
    return data.decode(errors="ignore")

def read_fd_key(fd: int, timeout: float = ESC_TIMEOUT) -> KeyEvent:
    """Read one key from a descriptor already in raw mode.

    Bytes come from the descriptor itself, never from sys.stdin's buffer, so
    the readiness check after ESC sees whatever is still pending.
    """
    import select
    ch = _read_char(fd)
    if ch == "":
        return KeyEvent(Key.CTRL_C, ch)
    if ch != "\x1b":
        return decode_char(ch)
    seq = _read_sequence(lambda: _read_char(fd),
                         lambda: bool(select.select([fd], [], [], timeout)[0]))
    return decode_sequence(seq) if seq else KeyEvent(Key.ESC, ch)

def _unix_read(fd: int) -> KeyEvent:
    import termios
    import tty
    old = termios.tcgetattr(fd)
    try:
        # TCSANOW keeps type-ahead queued between reads
        tty.setraw(fd, termios.TCSANOW)
        return read_fd_key(fd)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)

def _line_read() -> KeyEvent:
    # Not a tty: read a line and treat it as one key
    line = sys.stdin.readline()
    if line == "":
        return KeyEvent(Key.CTRL_C, line)
    line = line.rstrip("\n")
    return decode_char(line[:1]) if line else KeyEvent(Key.ENTER, line)

def read_key() -> KeyEvent:
    if sys.platform.startswith("win"):
        return _win_read()
    try:
        fd = sys.stdin.fileno()
    except (OSError, ValueError):
        return _line_read()
    if not os.isatty(fd):
        return _line_read()
    return _unix_read(fd)
