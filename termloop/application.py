"""Module containing :class:`Application`, the consumer of terminal events."""
# std imports
import enum
from typing import IO, Optional

# 3rd party
from wcwidth import wcswidth

# local
from .events import Key, Event, Resize, MultiKey, DecodeError
from .session import ConsoleSession
from .renderer import Renderer
from .terminfo import Database, load_from_environment
from .multiplexer import EventMultiplexer


class AppState(enum.Enum):
    """Lifecycle state of an :class:`Application`."""
    STOPPED = 'stopped'
    RUNNING = 'running'


class Application():
    """
    Drives the ``enter -> render -> event loop -> exit`` lifecycle of a terminal session.

    Subclasses customize :meth:`render` and :meth:`handle`.
    """

    #: Key that ends the event loop.
    quit_key = 'q'

    def __init__(self, database: Database, stream: Optional[IO[str]] = None,
                 distinct: bool = False) -> None:
        """
        Class constructor.

        :arg Database database: capabilities of the attached terminal.
        :arg file stream: output stream, defaults to :obj:`sys.__stdout__`.
        :arg bool distinct: passed to :class:`~.EventMultiplexer`.
        """
        self.renderer = Renderer(database, stream)
        self._distinct = distinct
        self._state = AppState.STOPPED
        self._width = 0
        self._height = 0
        self._last_key = ''

    @classmethod
    def from_environment(cls, **kwargs: object) -> 'Application':
        """Create an application for the terminal named by ``TERM``."""
        return cls(load_from_environment(), **kwargs)  # type: ignore[arg-type]

    @property
    def state(self) -> AppState:
        """Read-only property: current :class:`AppState`."""
        return self._state

    def run(self, session: Optional[ConsoleSession] = None) -> None:
        """
        Run the application until the quit key is pressed.

        Full-screen mode is exited before the console mode is restored, on
        every exit path.

        :arg ConsoleSession session: defaults to :meth:`ConsoleSession.acquire`.
        """
        if session is None:
            session = ConsoleSession.acquire()
        with session.raw(), EventMultiplexer(session, distinct=self._distinct) as events:
            self._state = AppState.RUNNING
            try:
                with self.renderer.fullscreen(), self.renderer.hidden_cursor():
                    self.render()
                    self.loop(events)
            finally:
                self._state = AppState.STOPPED

    def loop(self, events: EventMultiplexer) -> None:
        """Process events one at a time, in order of arrival, until the quit key."""
        while True:
            event = events.next()
            if event is None:
                continue
            if not self.handle(event):
                break

    def handle(self, event: Event) -> bool:
        """
        Process one event.

        :rtype: bool
        :returns: ``False`` to stop the event loop.
        """
        if isinstance(event, Key):
            if event.value == self.quit_key:
                return False
            self._last_key = event.value
        elif isinstance(event, Resize):
            self._width, self._height = event.width, event.height
        elif isinstance(event, MultiKey):
            self._last_key = event.sequence
        elif isinstance(event, DecodeError):
            self._last_key = repr(event.data)
        self.render()
        return True

    def _center(self, row: int, text: str) -> None:
        col = max(0, (self._width - max(0, wcswidth(text))) // 2)
        self.renderer.move_cursor(row, col)
        self.renderer.write(text)

    def render(self) -> None:
        """Draw the screen from the latest known size and key."""
        self.renderer.clear()
        if not self._height:
            return
        middle = self._height // 2
        self._center(middle - 1, f"press '{self.quit_key}' to quit.")
        self._center(middle, f'{self._width}x{self._height}')
        if self._last_key:
            self._center(middle + 1, f'last key: {self._last_key!r}')


__all__ = ('Application', 'AppState',)
