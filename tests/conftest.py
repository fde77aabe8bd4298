# std imports
import os

# 3rd party
import pytest

# local
from .accessories import make_terminfo

TEST_NAME = 'termloop-test'

XTERM_STRINGS = {
    'clear': '\x1b[H\x1b[2J',
    'cup': '\x1b[%i%p1%d;%p2%dH',
    'civis': '\x1b[?25l',
    'cnorm': '\x1b[?12l\x1b[?25h',
    'smcup': '\x1b[?1049h\x1b[22;0;0t',
    'rmcup': '\x1b[?1049l\x1b[23;0;0t',
}


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Environment without terminfo variables, home directory in ``tmp_path``."""
    home = tmp_path / 'home'
    home.mkdir()
    monkeypatch.delenv('TERMINFO', raising=False)
    monkeypatch.delenv('TERMINFO_DIRS', raising=False)
    monkeypatch.setenv('HOME', str(home))
    return home


@pytest.fixture
def write_terminfo():
    """Factory writing a compiled entry, returning its path."""
    def _write(directory, name=TEST_NAME, nested=False, data=None, **kwargs):
        if nested:
            directory = directory / name[0]
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_bytes(make_terminfo(XTERM_STRINGS, **kwargs) if data is None else data)
        return os.fspath(path)
    return _write
