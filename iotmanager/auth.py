import logging
from datetime import datetime, timezone
from urllib.parse import parse_qsl, unquote, urlsplit

import requests

from .canonical import RequestDescriptor
from .credentials import AuthMode, Credential
from .signer import SDKSigner

logger = logging.getLogger(__name__)

SDK_DATE_FORMAT = '%Y%m%dT%H%M%SZ'
DEFAULT_CONTENT_TYPE = 'application/json'


def sdk_date(now: datetime = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.strftime(SDK_DATE_FORMAT)


def descriptor_from_request(request: requests.PreparedRequest) -> RequestDescriptor:
    """Snapshot a prepared request, headers as currently set, for the signer."""
    parsed = urlsplit(request.url)
    headers = {}
    for name, value in request.headers.items():
        headers[name] = value.decode('latin-1') if isinstance(value, bytes) else value
    return RequestDescriptor(
        method=request.method or 'GET',
        path=unquote(parsed.path),
        query=parse_qsl(parsed.query, keep_blank_values=True),
        headers=headers,
        body=request.body if request.body is not None else b'',
    )


class IoTDAAuth(requests.auth.AuthBase):
    """
    Attaches IoTDA authentication to every outgoing request.
    Use it as the `auth` of a requests.Session or of a single call.

    1) Content-Type defaults to application/json
    2) X-Sdk-Date is stamped with the current UTC time
    3) AK/SK: Authorization is signed over the headers set so far
       token: X-Auth-Token is attached, nothing is signed
    4) Instance-Id is added when configured
    """

    def __init__(self, credential: Credential, instance_id: str = ''):
        credential.validate()
        self.credential = credential
        self.instance_id = instance_id or ''
        self._signer = SDKSigner(credential) if credential.mode is AuthMode.AK_SK else None

    def __call__(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        if not request.headers.get('Content-Type'):
            request.headers['Content-Type'] = DEFAULT_CONTENT_TYPE

        timestamp = sdk_date()
        request.headers['X-Sdk-Date'] = timestamp

        if self.credential.mode is AuthMode.AK_SK:
            descriptor = descriptor_from_request(request)
            value = self._signer.sign_descriptor(descriptor, timestamp)
            # leading space kept as sent by the reference SDK
            request.headers['Authorization'] = ' ' + value
            logger.debug("Signed %s %s (SignedHeaders=%s)", descriptor.method, descriptor.path,
                         ';'.join(sorted(h.lower() for h in descriptor.headers)))
        else:
            self.credential.validate()
            request.headers['X-Auth-Token'] = self.credential.token

        if self.instance_id:
            request.headers['Instance-Id'] = self.instance_id
        return request
