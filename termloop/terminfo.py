"""Sub-module for locating and loading compiled terminal capability databases."""
# std imports
import os
import re
import sys
import curses
import struct
import warnings
import collections.abc
from types import MappingProxyType
from typing import List, Tuple, Mapping, Iterator, Optional

# local
from ._capabilities import CAPABILITY_ALIASES, STRING_CAPABILITIES

#: Directories searched after any found in the environment, in order.
SYSTEM_DIRECTORIES = ('/etc/terminfo', '/lib/terminfo', '/usr/share/terminfo')

#: Name of the per-user directory, relative to the home directory.
USER_DIRECTORY = '.terminfo'

_MAGIC_LEGACY = 0o432
_MAGIC_32BIT = 0o1036
_HEADER_FMT = '<6h'
_RE_PADDING = re.compile(r'\$<[0-9.]+[*/]{0,2}>')

_CUR_TERM = None  # See comments at end of file


class TermInfoError(Exception):
    """Base class of all errors raised while resolving a terminal database."""


class TermInfoNotInDir(TermInfoError):
    """
    The terminal database is absent from one directory.

    This is the only error :func:`load_from_name` continues searching past.
    """

    def __init__(self, name: str, directory: str) -> None:
        self.name = name
        self.directory = directory
        super().__init__(f'Could not find terminfo {name!r} in {directory!r}')


class TermInfoNotFound(TermInfoError):
    """The terminal database is absent from every searched directory."""

    def __init__(self, name: str, directories: List[str]) -> None:
        self.name = name
        self.directories = list(directories)
        super().__init__(
            f'Could not find terminfo {name!r} in any of '
            f'{", ".join(self.directories)!r}')


class TermInfoParseError(TermInfoError):
    """A terminal database file exists, but could not be read or parsed."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f'Failed to load terminfo file {path!r}: {reason}')


class HomeDirectoryError(TermInfoError):
    """The home directory of the current user could not be determined."""


class Database(collections.abc.Mapping):
    """
    An immutable mapping of string capability names to their templates.

    Templates are decoded as latin-1, so that each byte of the compiled file
    maps to exactly one character, and may contain ``tparm(3)`` parameter
    slots such as ``%p1%d``.  Capabilities that are absent or cancelled in the
    compiled file are not members of the mapping.

    Sugary names of :data:`~._capabilities.CAPABILITY_ALIASES`, such as
    ``'enter_fullscreen'``, may be used in place of the short names.
    """

    def __init__(self, names: Tuple[str, ...], strings: Mapping[str, str],
                 path: Optional[str] = None) -> None:
        self._names = tuple(names)
        self._strings = MappingProxyType(dict(strings))
        self._path = path

    @property
    def name(self) -> str:
        """Primary name of the terminal, as declared by the database."""
        return self._names[0] if self._names else ''

    @property
    def names(self) -> Tuple[str, ...]:
        """All names and aliases declared by the database, the description last."""
        return self._names

    @property
    def path(self) -> Optional[str]:
        """File the database was loaded from, if any."""
        return self._path

    def __getitem__(self, key: str) -> str:
        return self._strings[CAPABILITY_ALIASES.get(key, key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._strings)

    def __len__(self) -> int:
        return len(self._strings)

    def __repr__(self) -> str:
        return f'<Database name={self.name!r} path={self._path!r} capabilities={len(self)}>'

    def instantiate(self, capability: str, *params: int) -> Optional[str]:
        """
        Return the output-ready sequence for ``capability``, or ``None``.

        :arg str capability: short or sugary capability name.
        :arg int params: numeric parameters, in the order the capability
            declares them, such as ``(row, column)`` for ``cup``.
        :rtype: str or None
        :returns: the expanded sequence with any ``$<..>`` padding removed,
            or ``None`` when the terminal does not have this capability.
        """
        template = self.get(capability)
        if template is None:
            return None
        if params or '%' in template:
            _setupterm(self.name)
            template = curses.tparm(template.encode('latin1'), *params).decode('latin1')
        return _RE_PADDING.sub('', template)


def _setupterm(kind: str) -> None:
    """
    Initialize curses once for this process, so that :func:`curses.tparm` works.

    Only parameter expansion is used from curses, so a terminal type unknown
    to the system database falls back to ``'dumb'``.
    """
    # pylint: disable=global-statement
    global _CUR_TERM
    if _CUR_TERM is not None:
        return
    try:
        fd = sys.__stdout__.fileno()  # type: ignore[union-attr]
    except (AttributeError, ValueError):
        fd = -1
    errors = []
    for candidate in (kind, 'dumb'):
        if not candidate:
            continue
        try:
            curses.setupterm(candidate, fd)
        except curses.error as err:
            errors.append(f'Failed to setupterm(kind={candidate!r}): {err}')
            continue
        if errors:
            warnings.warn('; '.join(errors))
        _CUR_TERM = candidate
        return
    raise TermInfoError('; '.join(errors))


def parse(data: bytes, path: str = '<bytes>') -> Database:
    """
    Parse a compiled terminfo entry into a :class:`Database`.

    Both the legacy format (magic ``0o432``) and the 32-bit number format of
    ncurses 6.1 (magic ``0o1036``) are understood.  Only the standard string
    capabilities are decoded; the extended section, if any, is ignored.

    :raises TermInfoParseError: the data is not a well-formed compiled entry.
    """
    try:
        (magic, names_size, bool_count, num_count,
         str_count, table_size) = struct.unpack_from(_HEADER_FMT, data)
    except struct.error as err:
        raise TermInfoParseError(path, f'truncated header: {err}') from err

    if magic == _MAGIC_LEGACY:
        num_width = 2
    elif magic == _MAGIC_32BIT:
        num_width = 4
    else:
        raise TermInfoParseError(path, f'bad magic number {magic:#o}')
    if min(names_size, bool_count, num_count, str_count, table_size) < 0:
        raise TermInfoParseError(path, 'negative section size in header')

    offset = struct.calcsize(_HEADER_FMT)
    names = data[offset:offset + names_size].split(b'\x00', 1)[0]
    offset += names_size + bool_count
    # the number section begins on an even byte boundary
    offset += offset % 2
    offset += num_count * num_width

    try:
        positions = struct.unpack_from(f'<{str_count}h', data, offset)
    except struct.error as err:
        raise TermInfoParseError(path, f'truncated string section: {err}') from err
    offset += str_count * 2
    table = data[offset:offset + table_size]
    if len(table) != table_size:
        raise TermInfoParseError(path, 'truncated string table')

    strings = {}
    for capability, position in zip(STRING_CAPABILITIES, positions):
        if position < 0:
            # -1 is absent, -2 is cancelled
            continue
        end = table.find(b'\x00', position)
        if end == -1:
            raise TermInfoParseError(
                path, f'unterminated string for capability {capability!r}')
        strings[capability] = table[position:end].decode('latin1')

    return Database(tuple(names.decode('latin1').split('|')), strings, path=path)


def load_from_file(path: str) -> Database:
    """
    Load the compiled terminfo entry at ``path``.

    :raises TermInfoParseError: the file could not be read, or parsed. This
        is never treated as "not present" by the directory search.
    """
    try:
        with open(path, 'rb') as fin:
            data = fin.read()
    except OSError as err:
        raise TermInfoParseError(path, str(err)) from err
    return parse(data, path)


def load_from_directory(directory: str, name: str) -> Database:
    """
    Load terminal ``name`` from ``directory``.

    The flat form ``directory/name`` is tried first, then the nested form
    ``directory/n/name`` by the first letter of ``name``, as most system
    databases are laid out.

    :raises TermInfoNotInDir: neither form exists.
    :raises TermInfoParseError: a file exists, but is malformed.
    """
    root_file = os.path.join(directory, name)
    if os.path.isfile(root_file):
        return load_from_file(root_file)
    if name:
        nested_file = os.path.join(directory, name[0], name)
        if os.path.isfile(nested_file):
            return load_from_file(nested_file)
    raise TermInfoNotInDir(name, directory)


def search_path() -> List[str]:
    """
    Return the ordered list of directories searched for terminal databases.

    In order of priority: ``$TERMINFO``, ``~/.terminfo``, each entry of
    colon-separated ``$TERMINFO_DIRS``, then :data:`SYSTEM_DIRECTORIES`.

    Empty entries of ``$TERMINFO_DIRS``, such as the middle of ``/a::/b``,
    are skipped.  They do not stand for the system default directory as in
    ncurses, nor for the working directory, so relative lookups never occur.

    :raises HomeDirectoryError: the home directory cannot be determined.
    """
    directories = []
    if os.environ.get('TERMINFO'):
        directories.append(os.environ['TERMINFO'])

    home = os.path.expanduser('~')
    if not home or home == '~':
        raise HomeDirectoryError('Unable to determine home directory of current user')
    directories.append(os.path.join(home, USER_DIRECTORY))

    # empty entries of TERMINFO_DIRS are skipped
    directories.extend(
        directory for directory in os.environ.get('TERMINFO_DIRS', '').split(':')
        if directory)
    directories.extend(SYSTEM_DIRECTORIES)
    return directories


def load_from_name(name: str) -> Database:
    """
    Load terminal ``name`` from the first directory of :func:`search_path` having it.

    :raises TermInfoNotFound: every directory reported the entry as absent.
    :raises TermInfoParseError: the first entry found is malformed; no later
        directory is tried.
    :raises HomeDirectoryError: the search path could not be determined.
    """
    directories = search_path()
    for directory in directories:
        try:
            return load_from_directory(directory, name)
        except TermInfoNotInDir:
            continue
    raise TermInfoNotFound(name, directories)


def load_from_environment() -> Database:
    """
    Load the terminal database named by the ``TERM`` environment variable.

    An empty or unset ``TERM`` is searched for as an empty name; callers
    should reject that beforehand.
    """
    return load_from_name(os.environ.get('TERM', ''))


#: _CUR_TERM = None
#: Python's :func:`curses.setupterm` initializes the terminal only on its
#: first call in a process, subsequent calls have no effect.  Only
#: :func:`curses.tparm` is used here, which requires that first call to have
#: succeeded but does not depend on which terminal type it was made with.
#: This global records the kind curses was initialized with.

__all__ = ('Database', 'TermInfoError', 'TermInfoNotInDir', 'TermInfoNotFound',
           'TermInfoParseError', 'HomeDirectoryError', 'SYSTEM_DIRECTORIES',
           'parse', 'load_from_file', 'load_from_directory', 'load_from_name',
           'load_from_environment', 'search_path',)
