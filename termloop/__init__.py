"""
A terminal session engine: capability databases, raw input, and one ordered event stream.
"""
# local
from termloop.events import Key, Event, Resize, MultiKey, DecodeError
from termloop.session import ConsoleMode, NoConsoleError, ConsoleSession
from termloop.renderer import Renderer
from termloop.terminfo import (Database,
                               TermInfoError,
                               TermInfoNotFound,
                               TermInfoParseError,
                               load_from_name,
                               load_from_environment)
from termloop.application import AppState, Application
from termloop.multiplexer import InputClosed, EventSourceError, EventMultiplexer

__all__ = ('Application', 'AppState', 'ConsoleMode', 'ConsoleSession', 'Database',
           'DecodeError', 'Event', 'EventMultiplexer', 'EventSourceError', 'InputClosed',
           'Key', 'MultiKey', 'NoConsoleError', 'Renderer', 'Resize', 'TermInfoError',
           'TermInfoNotFound', 'TermInfoParseError', 'load_from_environment',
           'load_from_name',)
__version__ = "0.1.0"
