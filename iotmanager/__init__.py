from .auth import IoTDAAuth
from .client import IoTDAClient
from .credentials import AuthMode, Credential
from .exceptions import ApiError, EncodingError, IoTDAError, ServerAuthError, ValidationError
from .options import ClientOptions

__version__ = '0.1.0'

__all__ = [
    'ApiError',
    'AuthMode',
    'ClientOptions',
    'Credential',
    'EncodingError',
    'IoTDAAuth',
    'IoTDAClient',
    'IoTDAError',
    'ServerAuthError',
    'ValidationError',
]
