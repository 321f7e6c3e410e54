"""Output helpers. Messages go to stdout, errors to stderr as workflow commands."""
import json
import sys
from contextlib import contextmanager


def info(message: str):
    print(message)


def warning(message: str):
    print(f'::warning::{message}', file=sys.stderr)


def error(message: str):
    print(f'::error::{message}', file=sys.stderr)


def dump(label: str, payload):
    """Print an API response for diagnostics."""
    print(f'{label} >>> {json.dumps(payload, default=str, indent=2)}')


@contextmanager
def group(title: str):
    """Fold everything printed inside the block under a collapsible title."""
    print(f'::group::{title}')
    try:
        yield
    finally:
        print('::endgroup::')
