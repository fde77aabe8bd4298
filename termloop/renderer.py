"""Module containing :class:`Renderer`, serialized output of terminal capabilities."""
# std imports
import sys
import threading
import contextlib
from typing import IO, Optional, Generator

# local
from .terminfo import Database


class Renderer():
    """
    Writes capabilities of a :class:`~.Database` to an output stream.

    All writes go through :meth:`writing`, which holds a single lock for the
    duration of one write, so that concurrent callers never interleave partial
    control sequences.

    A capability the terminal does not have is never an error, the write is
    skipped.
    """

    def __init__(self, database: Database, stream: Optional[IO[str]] = None) -> None:
        """
        Class constructor.

        :arg Database database: capabilities of the attached terminal.
        :arg file stream: text stream that receives output, defaults to
            the original value of :obj:`sys.__stdout__`.
        """
        if stream is None:
            stream = sys.__stdout__
        if stream is None:
            raise ValueError('Renderer requires an output stream')
        self._database = database
        self._stream = stream
        self._lock = threading.Lock()

    @property
    def database(self) -> Database:
        """Read-only property: capability database of this renderer."""
        return self._database

    @contextlib.contextmanager
    def writing(self) -> Generator[IO[str], None, None]:
        """
        Context manager holding exclusive use of the output stream.

        The stream is yielded, and flushed before the lock is released::

            with renderer.writing() as stream:
                stream.write(text)
        """
        with self._lock:
            try:
                yield self._stream
            finally:
                self._stream.flush()

    def write(self, text: str) -> None:
        """Write plain ``text`` to the output stream."""
        with self.writing() as stream:
            stream.write(text)

    def write_capability(self, capability: str, *params: int) -> bool:
        """
        Write ``capability``, expanded with ``params``, to the output stream.

        :rtype: bool
        :returns: ``False`` when the terminal lacks this capability and
            nothing was written.
        """
        # curses.tparm() expands into a static buffer, so it is also serialized
        with self.writing() as stream:
            sequence = self._database.instantiate(capability, *params)
            if sequence is None:
                return False
            stream.write(sequence)
        return True

    def enter_fullscreen(self) -> bool:
        """Switch to the alternate screen buffer, ``smcup``."""
        return self.write_capability('smcup')

    def exit_fullscreen(self) -> bool:
        """Switch back to the primary screen buffer, ``rmcup``."""
        return self.write_capability('rmcup')

    def move_cursor(self, row: int, col: int) -> bool:
        """
        Move the cursor to the given zero-based ``(row, col)``, ``cup``.

        :arg int row: vertical position, from top, *0*, to bottom of screen.
        :arg int col: horizontal position, from left, *0*, to right edge of screen.
        """
        return self.write_capability('cup', row, col)

    def clear(self) -> bool:
        """Clear the screen and home the cursor, ``clear``."""
        return self.write_capability('clear')

    def hide_cursor(self) -> bool:
        """Make the cursor invisible, ``civis``."""
        return self.write_capability('civis')

    def normal_cursor(self) -> bool:
        """Make the cursor visible again, ``cnorm``."""
        return self.write_capability('cnorm')

    @contextlib.contextmanager
    def fullscreen(self) -> Generator[None, None, None]:
        """
        Context manager that switches to secondary screen, restoring on exit.

        .. note:: There is only one primary and one secondary screen buffer.
           :meth:`fullscreen` calls cannot be nested, only one should be
           entered at a time.
        """
        self.enter_fullscreen()
        try:
            yield
        finally:
            self.exit_fullscreen()

    @contextlib.contextmanager
    def hidden_cursor(self) -> Generator[None, None, None]:
        """Context manager that hides the cursor, setting visibility on exit."""
        self.hide_cursor()
        try:
            yield
        finally:
            self.normal_cursor()


__all__ = ('Renderer',)
