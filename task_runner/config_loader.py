"""Build a RunRequest from step inputs (environment variables or a Lambda event)."""
import os
import re

from task_runner import console
from task_runner.models import CapacityProvider, RunRequest

INPUT_PREFIX = 'INPUT_'

_TRUE = ('true', 'True', 'TRUE')
_FALSE = ('false', 'False', 'FALSE')
_ENV_PAIR = re.compile(r'^name=(?P<name>.+),value=(?P<value>.*)$')
_FILTER = re.compile(r'^Name=(?P<name>.+),Values=(?P<values>.+)$')


def load_config(environ=None) -> dict:
    """Collect ``INPUT_<NAME>`` variables into a dict keyed by lower-case name.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.

    Returns:
        dict: Input names (e.g. ``task_name``) mapped to their raw values.
    """
    environ = os.environ if environ is None else environ
    return {
        key[len(INPUT_PREFIX):].lower(): value
        for key, value in environ.items()
        if key.startswith(INPUT_PREFIX)
    }


def build_request(inputs: dict) -> RunRequest:
    """Parse raw inputs into a RunRequest.

    Raises:
        ValueError: If ``task_name`` is missing, a boolean input isn't
            true/false, or the resulting request is invalid.
    """
    task_name = _text(inputs.get('task_name'))
    if not task_name:
        raise ValueError('Input required and not supplied: task_name')

    return RunRequest(
        task_name=task_name,
        cluster=_text(inputs.get('cluster')) or 'default',
        container_name=_text(inputs.get('container_name')) or None,
        command=parse_list(inputs.get('command'), delimiter=None),
        environment=parse_environment(inputs.get('environment')),
        wait=parse_bool(inputs.get('wait'), default=True),
        check_cluster_exists=parse_bool(inputs.get('check_cluster_exists'), default=False),
        public_ip=parse_bool(inputs.get('public_ip'), default=False),
        timeout=parse_int(inputs.get('timeout'), default=600),
        poll_interval=parse_int(inputs.get('poll_interval'), default=6),
        count=parse_int(inputs.get('count'), default=1),
        sg_ids=parse_list(inputs.get('sg_ids')),
        sg_names=parse_list(inputs.get('sg_names')),
        sg_filters=parse_filters(inputs.get('sg_filters')),
        subnet_ids=parse_list(inputs.get('subnet_ids')),
        subnet_filters=parse_filters(inputs.get('subnet_filters')),
        capacity_provider=parse_capacity_provider(inputs.get('capacity_provider')),
    )


def _text(value) -> str:
    return value.strip() if isinstance(value, str) else (value or '')


def _require_text(value):
    if value is not None and not isinstance(value, str):
        raise ValueError(f'Expected text or a list, got {type(value).__name__}')


def parse_bool(value, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    value = _text(value)
    if not value:
        return default
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f'Boolean input must be true or false, got "{value}"')


def parse_int(value, default: int) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    try:
        return int(_text(value))
    except ValueError:
        return default


def parse_list(value, delimiter=','):
    """Split a delimited string; ``delimiter=None`` splits on whitespace."""
    if isinstance(value, (list, tuple)):
        items = [str(item).strip() for item in value]
    else:
        _require_text(value)
        value = _text(value)
        if not value:
            return None
        items = [item.strip() for item in value.split(delimiter)]
    items = [item for item in items if item]
    return items or None


def _lines(value):
    if isinstance(value, (list, tuple)):
        return [line.strip() if isinstance(line, str) else line for line in value if line]
    _require_text(value)
    return [line.strip() for line in _text(value).splitlines() if line.strip()]


def parse_environment(value):
    """Parse ``name=FOO,value=bar`` or ``FOO=bar`` lines into ECS key/value pairs."""
    pairs = []
    for line in _lines(value):
        if isinstance(line, dict):
            if 'name' not in line or 'value' not in line:
                raise ValueError(f'Environment entry needs "name" and "value": {line}')
            pairs.append({'name': line['name'], 'value': str(line['value'])})
            continue
        if not isinstance(line, str):
            raise ValueError(f'Environment entry must be text or a dict, got {line!r}')
        match = _ENV_PAIR.match(line)
        if match:
            pairs.append({'name': match['name'], 'value': match['value']})
        elif '=' in line and not line.startswith('='):
            name, _, env_value = line.partition('=')
            pairs.append({'name': name.strip(), 'value': env_value})
        else:
            console.warning(f'Skipping environment entry "{line}"')
    return pairs or None


def parse_filters(value):
    """Parse ``Name=vpc-id,Values=vpc-123`` lines into EC2 filters."""
    filters = []
    for line in _lines(value):
        if isinstance(line, dict):
            filters.append(line)
            continue
        if not isinstance(line, str):
            raise ValueError(f'Filter must be text or a dict, got {line!r}')
        match = _FILTER.match(line)
        if match:
            filters.append({'Name': match['name'], 'Values': [match['values']]})
        else:
            console.warning(f'Skipping filter "{line}"')
    return filters or None


def parse_capacity_provider(value):
    value = _text(value)
    try:
        return CapacityProvider(value)
    except ValueError:
        if value:
            console.warning(f'Ignoring unknown capacity provider "{value}"')
        return None
