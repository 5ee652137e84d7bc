from dataclasses import dataclass
from enum import Enum

from .exceptions import ValidationError


class AuthMode(Enum):
    AK_SK = 'aksk'
    TOKEN = 'token'


@dataclass(frozen=True)
class Credential:
    """
    Long-lived identity of the client.
    Built once per client and only read afterwards, so it can be shared
    between threads.
    """
    access_key: str = ''
    secret_key: str = ''
    token: str = ''
    mode: AuthMode = AuthMode.AK_SK

    @classmethod
    def from_aksk(cls, access_key: str, secret_key: str) -> 'Credential':
        cred = cls(access_key=access_key or '', secret_key=secret_key or '', mode=AuthMode.AK_SK)
        cred.validate()
        return cred

    @classmethod
    def from_token(cls, token: str) -> 'Credential':
        cred = cls(token=token or '', mode=AuthMode.TOKEN)
        cred.validate()
        return cred

    def validate(self) -> None:
        if self.mode is AuthMode.AK_SK:
            if not self.access_key:
                raise ValidationError('access key is required for AK/SK authentication')
            if not self.secret_key:
                raise ValidationError('secret key is required for AK/SK authentication')
        elif self.mode is AuthMode.TOKEN:
            if not self.token:
                raise ValidationError('token is required for token authentication')
        else:
            raise ValidationError(f"unknown authentication mode: {self.mode!r}")

    def __repr__(self):
        # never leak secrets through repr()/logging
        return f"Credential(access_key={self.access_key!r}, mode={self.mode.name})"
