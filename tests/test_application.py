"""Tests for the application lifecycle and event loop."""
# std imports
import io
import os
import contextlib

# 3rd party
import pytest

# local
from termloop.events import Key, Resize, MultiKey, DecodeError
from termloop.session import TerminalSize
from termloop.multiplexer import InputClosed
from termloop.terminfo import parse
from termloop.__main__ import main
from termloop.application import AppState, Application
from .accessories import make_terminfo
from .conftest import TEST_NAME, XTERM_STRINGS

# without 'cup', cursor movement is silently skipped and curses is never needed
STRINGS = {cap: value for cap, value in XTERM_STRINGS.items() if cap != 'cup'}


class ListEvents():
    """Stands in for an EventMultiplexer, with events given in advance."""

    def __init__(self, events):
        self.pending = list(events)

    def next(self, timeout=None):
        return self.pending.pop(0)


class RecordingApplication(Application):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.handled = []

    def handle(self, event):
        self.handled.append(event)
        return super().handle(event)


class LogStream(io.StringIO):
    """Output stream appending each write to a shared log."""

    def __init__(self, log):
        super().__init__()
        self.log = log

    def write(self, text):
        self.log.append(text)
        return super().write(text)


class LogSession():
    """A pipe-backed session recording raw mode transitions to a shared log."""

    def __init__(self, log):
        self.log = log
        self.read_fd, self.write_fd = os.pipe()

    def fileno(self):
        return self.read_fd

    def size(self):
        return TerminalSize(80, 24)

    @contextlib.contextmanager
    def raw(self):
        self.log.append('raw')
        try:
            yield self
        finally:
            self.log.append('restore')


def make_app(cls=Application, stream=None):
    return cls(parse(make_terminfo(STRINGS)), stream=stream or io.StringIO())


def test_quit_key_ends_loop_in_order():
    """Events are handled in arrival order, and nothing after the quit key."""
    app = make_app(RecordingApplication)
    events = ListEvents([Key('a'), Resize(100, 30), Key('q'), Resize(120, 40), Key('b')])
    app.loop(events)
    assert app.handled == [Key('a'), Resize(100, 30), Key('q')]
    assert events.pending == [Resize(120, 40), Key('b')]


def test_quit_with_pending_resize():
    """A resize queued behind the quit key is never processed."""
    app = make_app(RecordingApplication)
    events = ListEvents([Resize(80, 24), Key('q'), Resize(90, 30)])
    app.loop(events)
    assert app.handled[-1] == Key('q')
    assert events.pending == [Resize(90, 30)]


def test_loop_skips_timeouts():
    """A None from next() is not an event."""
    app = make_app(RecordingApplication)
    app.loop(ListEvents([None, Key('q')]))
    assert app.handled == [Key('q')]


def test_render_from_events():
    """Size and last key are rendered only from events."""
    stream = io.StringIO()
    app = make_app(stream=stream)
    assert app.handle(Resize(40, 10))
    assert '40x10' in stream.getvalue()
    assert app.handle(Key('x'))
    assert "last key: 'x'" in stream.getvalue()
    assert app.handle(MultiKey('ab'))
    assert "last key: 'ab'" in stream.getvalue()
    assert app.handle(DecodeError(b'\xff'))
    assert app.handle(Key('q')) is False


def test_custom_quit_key():
    """The quit key is a class attribute."""
    class EscapeApplication(Application):
        quit_key = '\x1b'

    app = make_app(EscapeApplication)
    assert app.handle(Key('q'))
    assert not app.handle(Key('\x1b'))


def test_run_lifecycle():
    """Full-screen exit is written before the console mode is restored."""
    log = []
    session = LogSession(log)
    app = make_app(stream=LogStream(log))
    assert app.state is AppState.STOPPED
    os.write(session.write_fd, b'q')
    try:
        app.run(session)
    finally:
        os.close(session.read_fd)
        os.close(session.write_fd)
    assert app.state is AppState.STOPPED
    assert log[0] == 'raw'
    assert log[1] == XTERM_STRINGS['smcup']
    assert log[-2:] == [XTERM_STRINGS['rmcup'], 'restore']


def test_state_running_during_loop():
    """The application is running while it handles events."""
    states = []

    class StateApplication(Application):
        def handle(self, event):
            states.append(self.state)
            return super().handle(event)

    log = []
    session = LogSession(log)
    app = make_app(StateApplication)
    os.write(session.write_fd, b'q')
    try:
        app.run(session)
    finally:
        os.close(session.read_fd)
        os.close(session.write_fd)
    assert states and all(state is AppState.RUNNING for state in states)


def test_run_end_of_input_restores():
    """End of input ends the run, after full-screen exit and restore."""
    log = []
    session = LogSession(log)
    app = make_app(stream=LogStream(log))
    os.close(session.write_fd)
    try:
        with pytest.raises(InputClosed):
            app.run(session)
    finally:
        os.close(session.read_fd)
    assert app.state is AppState.STOPPED
    assert log[0] == 'raw'
    assert log[-2:] == [XTERM_STRINGS['rmcup'], 'restore']


def test_main_without_term(monkeypatch, capsys):
    """An empty TERM is rejected."""
    monkeypatch.setenv('TERM', '')
    assert main() == 1
    assert 'TERM' in capsys.readouterr().err


def test_main_not_found(clean_env, monkeypatch, capsys):
    """Every directory searched is printed, and the exit status is non-zero."""
    monkeypatch.setenv('TERM', 'termloop-no-such-terminal')
    assert main() == 1
    err = capsys.readouterr().err
    assert os.path.join(clean_env, '.terminfo') in err
    assert '/usr/share/terminfo' in err


def test_main_malformed(clean_env, monkeypatch, capsys, write_terminfo):
    """A malformed entry is reported."""
    write_terminfo(clean_env / '.terminfo', data=b'bogus')
    monkeypatch.setenv('TERM', TEST_NAME)
    assert main() == 1
    assert 'Failed to load terminfo' in capsys.readouterr().err


def test_from_environment(clean_env, monkeypatch, write_terminfo):
    """The database is that named by TERM."""
    write_terminfo(clean_env / '.terminfo')
    monkeypatch.setenv('TERM', TEST_NAME)
    app = Application.from_environment(stream=io.StringIO())
    assert app.renderer.database.name == TEST_NAME


@pytest.mark.parametrize('width', [0, 5])
def test_center_narrow_screen(width):
    """Text wider than the screen starts at the first column."""
    app = make_app()
    assert app.handle(Resize(width, 3))
