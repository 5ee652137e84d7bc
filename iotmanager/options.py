from dataclasses import dataclass

from .credentials import AuthMode, Credential
from .exceptions import ValidationError

DEFAULT_SERVER = 'iotda.cn-north-4.myhuaweicloud.com'
DEFAULT_PORT = 443
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class ClientOptions:
    """
    Everything an IoTDAClient needs. Build it with create() or
    from_profile(); both reject incomplete settings.
    """
    project_id: str
    credential: Credential
    server: str = DEFAULT_SERVER
    port: int = DEFAULT_PORT
    instance_id: str = ''
    timeout: float = DEFAULT_TIMEOUT
    verify: bool = True

    @classmethod
    def create(cls, project_id: str, credential: Credential, server: str = None, port: int = None,
               instance_id: str = None, timeout: float = None, verify: bool = True) -> 'ClientOptions':
        if not project_id:
            raise ValidationError('project id is required')
        if credential is None:
            raise ValidationError('credential is required')
        credential.validate()

        server = (server or DEFAULT_SERVER).strip()
        for scheme in ('https://', 'http://'):
            if server.startswith(scheme):
                server = server[len(scheme):]
        server = server.rstrip('/')
        if ':' in server:
            server, _, raw_port = server.partition(':')
            port = raw_port if port is None else port
        try:
            port = int(DEFAULT_PORT if port is None or port == '' else port)
        except (TypeError, ValueError):
            raise ValidationError(f"invalid port: {port!r}") from None
        if not 0 < port < 65536:
            raise ValidationError(f"invalid port: {port}")

        return cls(
            project_id=project_id,
            credential=credential,
            server=server,
            port=port,
            instance_id=instance_id or '',
            timeout=float(timeout) if timeout is not None else DEFAULT_TIMEOUT,
            verify=bool(verify),
        )

    @classmethod
    def from_profile(cls, conf: dict) -> 'ClientOptions':
        """Build options from a profile loaded by config.load_config()."""
        try:
            mode = AuthMode(str(conf.get('auth_mode', AuthMode.AK_SK.value)).lower())
        except ValueError:
            raise ValidationError(f"unknown auth_mode: {conf.get('auth_mode')!r}") from None

        if mode is AuthMode.AK_SK:
            credential = Credential.from_aksk(conf.get('access_key'), conf.get('secret_key'))
        else:
            credential = Credential.from_token(conf.get('token'))

        return cls.create(
            project_id=conf.get('project_id'),
            credential=credential,
            server=conf.get('server'),
            port=conf.get('port'),
            instance_id=conf.get('instance_id'),
            timeout=conf.get('timeout'),
            verify=conf.get('verify', True),
        )

    @property
    def base_url(self) -> str:
        return f"https://{self.server}:{self.port}"
