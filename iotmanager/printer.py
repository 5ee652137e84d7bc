import dataclasses
import json

import click
import yaml
from tabulate import tabulate

FORMATS = ('json', 'yaml', 'table')


def to_plain(data):
    """Dataclasses (and lists of them) to plain dicts/lists."""
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return dataclasses.asdict(data)
    if isinstance(data, (list, tuple)):
        return [to_plain(d) for d in data]
    return data


def format_output(data, fmt: str = 'json') -> str:
    data = to_plain(data)
    if fmt == 'json':
        return json.dumps(data, indent=2, ensure_ascii=False)
    if fmt == 'yaml':
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True).rstrip('\n')
    if fmt == 'table':
        if isinstance(data, list) and data and isinstance(data[0], dict):
            return tabulate(data, headers='keys')
        if isinstance(data, dict):
            return tabulate(data.items(), headers=['field', 'value'])
        return str(data)
    raise ValueError(f"unknown output format: {fmt}")


def echo(data, fmt: str = 'json') -> None:
    click.echo(format_output(data, fmt))
