"""Sub-module providing a single ordered stream of terminal input and resize events."""
# std imports
import os
import queue
import select
import signal
import threading
from typing import Any, List, Callable, Iterator, Optional, NamedTuple

# local
from .events import Event, Resize, decode_input
from .session import ConsoleSession

#: Bytes requested by each read of the keyboard.
READ_SIZE = 256

#: Default interval, in seconds, at which the producers of
#: :class:`EventMultiplexer` observe its shutdown signal while otherwise
#: waiting for input or a resize notification.  Users may override it using
#: environment value of ``TERMLOOP_POLL_MS`` as milliseconds.
DEFAULT_POLL_INTERVAL = 0.1  # pylint: disable=invalid-name


class EventSourceError(Exception):
    """A producer of events has failed, re-raised by :meth:`EventMultiplexer.next`."""


class InputClosed(EventSourceError):
    """The terminal input has reached end of file."""


class _Failure(NamedTuple):
    error: Exception


class _Producer(threading.Thread):
    """A daemon thread that pushes events until the shutdown signal is set."""

    def __init__(self, name: str, emit: Callable[[Any], None],
                 shutdown: threading.Event, poll_interval: float) -> None:
        super().__init__(name=name, daemon=True)
        self._emit = emit
        self._shutdown = shutdown
        self._poll_interval = poll_interval

    def run(self) -> None:
        try:
            self.produce()
        except Exception as err:  # pylint: disable=broad-except
            # the consumer re-raises, and unwinds its scoped resources
            self._emit(_Failure(err))

    def produce(self) -> None:
        """Emit events until shutdown, implemented by subclasses."""
        raise NotImplementedError


class ResizeWatcher(_Producer):
    """
    Emits the current size, then a fresh size on each resize notification.

    Notifications received while a size is being queried coalesce into one.
    """

    def __init__(self, session: ConsoleSession, notified: threading.Event,
                 emit: Callable[[Any], None], shutdown: threading.Event,
                 poll_interval: float) -> None:
        super().__init__('termloop-resize', emit, shutdown, poll_interval)
        self._session = session
        self._notified = notified

    def produce(self) -> None:
        self._emit(Resize(*self._session.size()))
        while not self._shutdown.is_set():
            if not self._notified.wait(self._poll_interval):
                continue
            self._notified.clear()
            if self._shutdown.is_set():
                break
            self._emit(Resize(*self._session.size()))


class InputReader(_Producer):
    """Emits one event for each read of the terminal's input."""

    def __init__(self, session: ConsoleSession, distinct: bool,
                 emit: Callable[[Any], None], shutdown: threading.Event,
                 poll_interval: float) -> None:
        super().__init__('termloop-input', emit, shutdown, poll_interval)
        self._session = session
        self._distinct = distinct

    def produce(self) -> None:
        fd = self._session.fileno()
        while not self._shutdown.is_set():
            ready_r, _, _ = select.select([fd], [], [], self._poll_interval)
            if not ready_r:
                continue
            data = os.read(fd, READ_SIZE)
            if not data:
                raise InputClosed(f'End of input on file descriptor {fd}')
            self._emit(decode_input(data, self._distinct))


class EventMultiplexer():
    """
    Runs a :class:`ResizeWatcher` and an :class:`InputReader` feeding one event stream.

    Events of each producer arrive in the order they were emitted, there is
    no ordering between the two producers.  Use as a context manager, which
    stops both producers on exit::

        with session.raw(), EventMultiplexer(session) as events:
            for event in events:
                ...

    :meth:`start` installs a :const:`signal.SIGWINCH` handler, and so must
    be called from the main thread.
    """

    def __init__(self, session: ConsoleSession, distinct: bool = False,
                 poll_interval: Optional[float] = None) -> None:
        """
        Class constructor.

        :arg ConsoleSession session: terminal whose input and size is watched.
        :arg bool distinct: decode input with distinct :class:`~.MultiKey` and
            :class:`~.DecodeError` events, see :func:`~.decode_input`.
        :arg float poll_interval: maximum delay, in seconds, before producers
            observe :meth:`stop`, defaults to :data:`DEFAULT_POLL_INTERVAL`.
        """
        self._session = session
        self._distinct = distinct
        self._poll_interval = (DEFAULT_POLL_INTERVAL if poll_interval is None
                               else poll_interval)
        self._events: 'queue.Queue[Any]' = queue.Queue()
        self._shutdown = threading.Event()
        self._notified = threading.Event()
        self._producers: List[_Producer] = []
        self._handler_installed = False
        self._previous_handler: Any = None

    def _on_resize(self, *_: Any) -> None:
        self._notified.set()

    @property
    def running(self) -> bool:
        """Read-only property: whether producers have been started and not stopped."""
        return bool(self._producers) and not self._shutdown.is_set()

    def start(self) -> None:
        """Install the resize handler, and start both producers."""
        if self._producers:
            raise RuntimeError('EventMultiplexer can only be started once.')
        self._previous_handler = signal.signal(signal.SIGWINCH, self._on_resize)
        self._handler_installed = True
        self._producers = [
            ResizeWatcher(self._session, self._notified, self._events.put,
                          self._shutdown, self._poll_interval),
            InputReader(self._session, self._distinct, self._events.put,
                        self._shutdown, self._poll_interval),
        ]
        for producer in self._producers:
            producer.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Signal both producers to stop, and wait for them to do so.

        The resize handler in place before :meth:`start` is restored.  Events
        already queued remain available to :meth:`next`.
        """
        self._shutdown.set()
        self._notified.set()
        if self._handler_installed:
            previous = self._previous_handler
            # None when the prior handler was not installed from python
            signal.signal(signal.SIGWINCH, signal.SIG_DFL if previous is None else previous)
            self._handler_installed = False
        for producer in self._producers:
            if producer is not threading.current_thread():
                producer.join(timeout)

    def next(self, timeout: Optional[float] = None) -> Optional[Event]:
        """
        Return the next event, blocking until one is ready.

        :arg float timeout: seconds to wait, blocking indefinitely when ``None``.
        :rtype: Event or None
        :returns: the next event, or ``None`` when ``timeout`` has elapsed.
        :raises EventSourceError: a producer has failed.
        """
        try:
            event = self._events.get(timeout=timeout)
        except queue.Empty:
            return None
        if isinstance(event, _Failure):
            if isinstance(event.error, EventSourceError):
                raise event.error
            raise EventSourceError(f'Event producer failed: {event.error}') from event.error
        return event

    def __iter__(self) -> Iterator[Event]:
        while True:
            event = self.next()
            if event is not None:
                yield event

    def __enter__(self) -> 'EventMultiplexer':
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        self.stop()


def _reinit_poll_interval() -> None:
    # pylint: disable=global-statement
    global DEFAULT_POLL_INTERVAL
    if os.environ.get('TERMLOOP_POLL_MS'):
        try:
            poll_ms = int(os.environ['TERMLOOP_POLL_MS'])
        except ValueError:
            # invalid values of 'TERMLOOP_POLL_MS' are ignored
            return
        if poll_ms > 0:
            DEFAULT_POLL_INTERVAL = poll_ms / 1000.0


_reinit_poll_interval()


__all__ = ('EventMultiplexer', 'EventSourceError', 'InputClosed',
           'ResizeWatcher', 'InputReader', 'DEFAULT_POLL_INTERVAL',)
