#!/usr/bin/env python
"""Print each event of the controlling terminal, as they arrive, until 'q' is pressed."""
# std imports
import sys

# local
from termloop import Key, Resize, ConsoleSession, EventMultiplexer


def main():
    """Program entry point."""
    session = ConsoleSession.acquire()
    with session.raw(), EventMultiplexer(session, distinct=True) as events:
        print("press 'q' to quit.", end='\r\n', flush=True)
        for event in events:
            if isinstance(event, Resize):
                print(f'height={event.height}, width={event.width}', end='\r\n', flush=True)
            elif event == Key('q'):
                break
            else:
                print(repr(event), end='\r\n', flush=True)


if __name__ == '__main__':
    sys.exit(main())
