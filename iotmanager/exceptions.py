import json

import requests


class IoTDAError(Exception):
    """Base class for every error raised by iotmanager."""


class ValidationError(IoTDAError, ValueError):
    """Credentials or client options are incomplete."""


class EncodingError(IoTDAError):
    """A request could not be serialized for signing."""


class ApiError(IoTDAError, requests.HTTPError):
    """
    Non-2xx answer from IoTDA.
    error_code / error_msg are copied verbatim from the response body.
    """

    def __init__(self, status_code: int, error_code: str = '', error_msg: str = '', response=None):
        self.status_code = status_code
        self.error_code = error_code
        self.error_msg = error_msg
        super().__init__(self._render(), response=response)

    def _render(self) -> str:
        return json.dumps({
            'status': self.status_code,
            'error_code': self.error_code,
            'error_msg': self.error_msg,
        })

    def __str__(self):
        return self._render()


class ServerAuthError(ApiError):
    """The server rejected the signature or token (401/403)."""


def error_from_response(response: requests.Response) -> ApiError:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    cls = ServerAuthError if response.status_code in (401, 403) else ApiError
    return cls(
        response.status_code,
        error_code=str(body.get('error_code', '')),
        error_msg=str(body.get('error_msg', response.text if not body else '')),
        response=response,
    )
