"""Module containing :class:`ConsoleSession`, ownership of the controlling terminal's mode."""
# std imports
import os
import sys
import enum
import tty
import fcntl
import struct
import termios
import contextlib
import collections
from typing import IO, List, Iterable, Optional, Generator


class WINSZ(collections.namedtuple('WINSZ', (
        'ws_row', 'ws_col', 'ws_xpixel', 'ws_ypixel'))):
    """
    Structure represents return value of :const:`termios.TIOCGWINSZ`.

    Only ``ws_row`` and ``ws_col``, in characters, are used by :meth:`ConsoleSession.size`.
    """
    #: format of termios structure
    _FMT = 'hhhh'
    #: buffer of termios structure appropriate for ioctl argument
    _BUF = b'\x00' * struct.calcsize(_FMT)


#: Dimensions of a terminal in character cells, note (width, height) order.
TerminalSize = collections.namedtuple('TerminalSize', ('width', 'height'))


class ConsoleMode(enum.Enum):
    """Input mode of a terminal."""
    COOKED = 'cooked'
    RAW = 'raw'


class NoConsoleError(OSError):
    """None of the standard streams is attached to a terminal."""


def _getenv_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


class ConsoleSession():
    """
    Exclusive ownership of the process's controlling terminal.

    The mode observed on :meth:`enter_raw_mode` is restored by exactly one
    :meth:`restore`, which is best arranged by the :meth:`raw` context
    manager::

        session = ConsoleSession.acquire()
        with session.raw():
            main()
    """

    def __init__(self, fd: int) -> None:
        """
        Class constructor.

        :arg int fd: descriptor of a terminal, see :meth:`acquire`.
        """
        self._fd = fd
        self._saved_mode: Optional[List[object]] = None

    @classmethod
    def acquire(cls, streams: Optional[Iterable[Optional[IO[str]]]] = None) -> 'ConsoleSession':
        """
        Return a session for the first of ``streams`` attached to a terminal.

        :arg streams: candidate streams, defaults to the original values of
            :obj:`sys.__stdin__`, :obj:`sys.__stdout__` and :obj:`sys.__stderr__`.
        :raises NoConsoleError: no stream is a terminal.
        """
        if streams is None:
            streams = (sys.__stdin__, sys.__stdout__, sys.__stderr__)
        errors = []
        for stream in streams:
            if stream is None:
                continue
            try:
                fd = stream.fileno()
            except (AttributeError, ValueError) as err:
                errors.append(f'{stream!r}: {err}')
                continue
            if os.isatty(fd):
                return cls(fd)
            errors.append(f'{stream!r}: not a TTY')
        raise NoConsoleError(f'No controlling terminal available ({"; ".join(errors)})')

    def fileno(self) -> int:
        """Return descriptor of the terminal."""
        return self._fd

    @property
    def mode(self) -> ConsoleMode:
        """Read-only property: whether this session currently holds the terminal in raw mode."""
        return ConsoleMode.COOKED if self._saved_mode is None else ConsoleMode.RAW

    def enter_raw_mode(self) -> None:
        """
        Disable line-buffering and echo of input, as :func:`tty.setraw`.

        The prior mode is saved for :meth:`restore`.  Calling this method
        again while raw mode is active has no effect.
        """
        if self._saved_mode is not None:
            return
        self._saved_mode = termios.tcgetattr(self._fd)
        tty.setraw(self._fd, termios.TCSANOW)

    def restore(self) -> None:
        """
        Restore the mode observed by :meth:`enter_raw_mode`.

        Has no effect when raw mode was never entered, or already restored.
        """
        if self._saved_mode is None:
            return
        save_mode, self._saved_mode = self._saved_mode, None
        termios.tcsetattr(self._fd, termios.TCSAFLUSH, save_mode)

    @contextlib.contextmanager
    def raw(self) -> Generator['ConsoleSession', None, None]:
        r"""
        Context manager for :meth:`enter_raw_mode`, restoring on every exit path.

        Because output processing is not done by the terminal driver, the
        newline ``'\n'`` is not enough, you must also print carriage return to
        ensure that the cursor is returned to the first column.
        """
        self.enter_raw_mode()
        try:
            yield self
        finally:
            self.restore()

    @staticmethod
    def _winsize(fd: int) -> WINSZ:
        """
        Return named tuple describing size of the terminal by ``fd``.

        :raises OSError: the file descriptor ``fd`` is not a terminal.
        """
        # pylint: disable=protected-access
        data = fcntl.ioctl(fd, termios.TIOCGWINSZ, WINSZ._BUF)
        return WINSZ(*struct.unpack(WINSZ._FMT, data))

    def size(self) -> TerminalSize:
        """
        Return current dimensions of the terminal as ``(width, height)``.

        When the terminal does not answer :const:`termios.TIOCGWINSZ`, values
        of environment variables ``COLUMNS`` and ``LINES`` are used, default
        80 columns by 25 rows, which are also used for values that are not
        numbers.
        """
        try:
            winsize = self._winsize(self._fd)
        except (IOError, OSError, ValueError, TypeError):  # pylint: disable=overlapping-except
            return TerminalSize(width=_getenv_int('COLUMNS', 80),
                                height=_getenv_int('LINES', 25))
        return TerminalSize(width=winsize.ws_col, height=winsize.ws_row)


__all__ = ('ConsoleSession', 'ConsoleMode', 'NoConsoleError', 'TerminalSize', 'WINSZ',)
