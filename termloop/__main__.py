"""Run :class:`~.Application` on the controlling terminal, press 'q' to quit."""
# std imports
import os
import sys

# local
from termloop.session import NoConsoleError
from termloop.terminfo import TermInfoError, TermInfoNotFound
from termloop.application import Application


def main() -> int:
    """Program entry point."""
    if not os.environ.get('TERM'):
        print('TERM environment variable is not set.', file=sys.stderr)
        return 1

    try:
        app = Application.from_environment()
    except TermInfoNotFound as err:
        print(f'Could not find terminfo {err.name!r}, searched:', file=sys.stderr)
        for directory in err.directories:
            print(f'  {directory}', file=sys.stderr)
        return 1
    except TermInfoError as err:
        print(err, file=sys.stderr)
        return 1

    try:
        app.run()
    except NoConsoleError as err:
        print(err, file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
