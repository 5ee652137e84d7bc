"""
Canonical request construction for SDK-HMAC-SHA256 signing.

The canonical request is the newline-joined sequence of
method, URI, query string, headers block, signed header list and the
payload hash. What gets signed is the SHA-256 of that text, so every
byte here has to match what IoTDA re-derives on its side.
"""
import hashlib
from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Union
from urllib.parse import quote_plus

from .exceptions import EncodingError


@dataclass
class RequestDescriptor:
    """Outgoing request as seen by the signer."""
    method: str
    path: str
    query: List[Tuple[str, str]] = field(default_factory=list)
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b''


def _encode(value: str) -> str:
    try:
        return quote_plus(value, safe='').replace('+', '%20')
    except (TypeError, UnicodeError) as e:
        raise EncodingError(f"cannot encode query component {value!r}: {e}") from e


def _to_bytes(data: Union[bytes, bytearray, str, None]) -> bytes:
    if data is None:
        return b''
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    if isinstance(data, str):
        try:
            return data.encode('utf-8')
        except UnicodeError as e:
            raise EncodingError(f"cannot encode request body: {e}") from e
    raise EncodingError(f"unsupported request body type for signing: {type(data).__name__}")


def hash_payload(body: Union[bytes, str, None]) -> str:
    return hashlib.sha256(_to_bytes(body)).hexdigest()


def canonical_uri(path: str) -> str:
    # only a trailing slash is added, dot segments are kept as-is
    if not path:
        return '/'
    if not path.endswith('/'):
        path += '/'
    return path


def canonical_query_string(query: List[Tuple[str, str]]) -> str:
    # sorted() is stable: repeated keys keep their original order
    pairs = sorted(query, key=lambda kv: kv[0])
    return '&'.join(f"{_encode(k)}={_encode(v)}" for k, v in pairs)


def sorted_header_names(headers: Dict[str, str]) -> List[str]:
    return sorted(headers, key=lambda name: name.lower())


def signed_headers(headers: Dict[str, str]) -> str:
    return ';'.join(name.lower() for name in sorted_header_names(headers))


def canonical_headers(headers: Dict[str, str]) -> str:
    return ''.join(f"{name.lower()}:{headers[name]}\n" for name in sorted_header_names(headers))


def build_canonical_request(request: RequestDescriptor) -> str:
    parts = [
        # 1) HTTP method
        request.method.upper(),
        # 2) Canonical URI
        canonical_uri(request.path),
        # 3) Canonical query string
        canonical_query_string(request.query),
        # 4) Canonical headers, terminated by a blank line, then the signed header list
        canonical_headers(request.headers),
        signed_headers(request.headers),
        # 5) Hashed payload
        hash_payload(request.body),
    ]
    return '\n'.join(parts)


def canonical_request_digest(request: RequestDescriptor) -> str:
    text = build_canonical_request(request)
    try:
        raw = text.encode('utf-8')
    except UnicodeError as e:
        raise EncodingError(f"cannot encode canonical request: {e}") from e
    return hashlib.sha256(raw).hexdigest()
