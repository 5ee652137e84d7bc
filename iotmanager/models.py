from dataclasses import dataclass, fields
from typing import Any, ClassVar, Dict, List, Union

# Opaque JSON value (shadow properties, command paras, extension_info...).
# Passed to and from the API unmodified.
Document = Union[Dict[str, Any], List[Any], str, int, float, bool, None]

_EMPTY = (None, '', [], {})

# limits applied by IoTDA list endpoints
DEFAULT_LIMIT = 10
MAX_LIMIT = 50
MAX_OFFSET = 500


class Model:
    """Mixin for the response/request dataclasses: JSON dict <-> dataclass."""

    # field name -> Model subclass, for nested objects or lists of them
    _nested: ClassVar[dict] = {}

    @classmethod
    def from_dict(cls, data: dict):
        data = data or {}
        kwargs = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            nested = cls._nested.get(f.name)
            if nested is not None and value is not None:
                if isinstance(value, list):
                    value = [nested.from_dict(v) for v in value]
                else:
                    value = nested.from_dict(value)
            kwargs[f.name] = value
        return cls(**kwargs)

    def to_dict(self, omit_empty: bool = False) -> dict:
        out = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Model):
                value = value.to_dict(omit_empty)
            elif isinstance(value, list):
                value = [v.to_dict(omit_empty) if isinstance(v, Model) else v for v in value]
            if omit_empty and any(value is e or (type(value) is type(e) and value == e) for e in _EMPTY):
                continue
            out[f.name] = value
        return out


@dataclass
class Page(Model):
    count: int = 0
    marker: str = ''


@dataclass
class Tag(Model):
    tag_key: str = ''
    tag_value: str = ''


def page_params(limit: int = None, marker: str = None, offset: int = None) -> dict:
    """Query parameters of a paginated list call, clamped to what IoTDA accepts."""
    params = {'limit': str(limit if limit is not None and 1 <= limit <= MAX_LIMIT else DEFAULT_LIMIT)}
    if marker:
        params['marker'] = marker
    params['offset'] = str(offset if offset is not None and 0 <= offset <= MAX_OFFSET else 0)
    return params


def compact(body: dict) -> dict:
    """Drop unset (None or empty string) members of a request body."""
    return {k: v for k, v in body.items() if v is not None and v != ''}
