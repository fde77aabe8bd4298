"""Event types produced by :class:`~.EventMultiplexer`, and the input decoding policy."""
# std imports
import warnings
from typing import Union, NamedTuple

#: Value carried by :class:`Key` when a read did not decode to exactly one character.
PLACEHOLDER = ' '


class Resize(NamedTuple):
    """The terminal has (or initially had) the given dimensions, in character cells."""
    width: int
    height: int


class Key(NamedTuple):
    """A single character received from the keyboard."""
    value: str


class MultiKey(NamedTuple):
    """
    Several characters received by a single read, such as from an input method.

    Only produced when distinct decoding is requested, see :func:`decode_input`.
    """
    sequence: str


class DecodeError(NamedTuple):
    """
    Bytes received on input that are not valid UTF-8.

    Only produced when distinct decoding is requested, see :func:`decode_input`.
    """
    data: bytes


#: Any value returned by :meth:`~.EventMultiplexer.next`.
Event = Union[Resize, Key, MultiKey, DecodeError]


def decode_input(data: bytes, distinct: bool = False) -> Event:
    """
    Decode the bytes of one read from the keyboard as a single event.

    :arg bytes data: bytes returned by one read of the input descriptor.
    :arg bool distinct: when ``False`` (default), anything but exactly one
        decoded character produces ``Key(PLACEHOLDER)``.  When ``True``,
        several characters produce :class:`MultiKey` and undecodable bytes
        produce :class:`DecodeError`, while an empty read still produces the
        placeholder.
    :rtype: Event

    Undecodable input is reported by :func:`warnings.warn`; it never raises.
    """
    try:
        text = data.decode('utf-8')
    except UnicodeDecodeError as err:
        warnings.warn(f'Could not decode input {data!r}: {err}')
        if distinct:
            return DecodeError(data)
        return Key(PLACEHOLDER)

    if len(text) == 1:
        return Key(text)
    if distinct and text:
        return MultiKey(text)
    return Key(PLACEHOLDER)


__all__ = ('Event', 'Resize', 'Key', 'MultiKey', 'DecodeError', 'PLACEHOLDER', 'decode_input',)
