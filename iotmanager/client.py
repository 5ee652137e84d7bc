import json
import logging
from urllib.parse import quote

import requests

from .amqp import AccessCodeManager, AmqpQueueManager
from .application import ApplicationManager
from .auth import IoTDAAuth
from .certificate import CertificateManager
from .device import DeviceManager
from .device_group import DeviceGroupManager
from .exceptions import error_from_response
from .log import LogFlusher, SecretFilter
from .options import ClientOptions
from .shadow import ShadowManager
from .tag import TagManager

logger = logging.getLogger(__name__)

API_PREFIX = '/v5/iot/{project_id}'


class IoTDAClient:
    """
    Authenticated session against one IoTDA project.

        with IoTDAClient(options) as client:
            client.applications.list()

    close() (or leaving the with block) stops the background log flusher
    and releases the HTTP connections. The credential secrets registered
    with SecretFilter are unregistered at the same time.
    """

    def __init__(self, options: ClientOptions, session: requests.Session = None):
        self.options = options
        self.session = session or requests.Session()
        self.session.auth = IoTDAAuth(options.credential, instance_id=options.instance_id)
        self.session.verify = options.verify

        cred = options.credential
        self._secrets = [s for s in (cred.secret_key, cred.token) if s]
        for secret in self._secrets:
            SecretFilter.register_secret(secret)

        self.applications = ApplicationManager(self)
        self.devices = DeviceManager(self)
        self.device_groups = DeviceGroupManager(self)
        self.tags = TagManager(self)
        self.shadows = ShadowManager(self)
        self.amqp_queues = AmqpQueueManager(self)
        self.access_codes = AccessCodeManager(self)
        self.certificates = CertificateManager(self)

        self._flusher = LogFlusher()
        self._flusher.start()
        self._closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._flusher.stop()
        self.session.close()
        for secret in self._secrets:
            SecretFilter.unregister_secret(secret)

    @property
    def closed(self) -> bool:
        return self._closed

    def url(self, path: str, **path_params) -> str:
        """Build the full URL of `path`, relative to /v5/iot/{project_id}/."""
        params = {k: quote(str(v), safe='') for k, v in path_params.items()}
        params['project_id'] = quote(self.options.project_id, safe='')
        full = API_PREFIX + '/' + path.lstrip('/') if path else API_PREFIX
        return self.options.base_url + full.format(**params)

    def request(self, method: str, path: str, path_params: dict = None, params=None,
                body=None, headers: dict = None) -> requests.Response:
        url = self.url(path, **(path_params or {}))
        data = None
        if body is not None:
            data = json.dumps(body).encode('utf-8')
        logger.debug("%s %s", method, url)
        resp = self.session.request(method, url, params=params, data=data, headers=headers,
                                    timeout=self.options.timeout)
        logger.debug("%s %s -> %s", method, url, resp.status_code)
        if not 200 <= resp.status_code < 300:
            logger.warning("%s %s failed with status %s", method, url, resp.status_code)
            raise error_from_response(resp)
        return resp

    def request_json(self, method: str, path: str, **kwargs):
        resp = self.request(method, path, **kwargs)
        if not resp.content:
            return {}
        return resp.json()
