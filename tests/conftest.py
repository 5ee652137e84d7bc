import json
import logging
import threading

import pytest
import requests

from iotmanager.client import IoTDAClient
from iotmanager.credentials import Credential
from iotmanager.log import SecretFilter
from iotmanager.options import ClientOptions

ACCESS_KEY = "S4QUJL4COTKPPR2VIFTF"
SECRET_KEY = "hRsE5wFm31FpjCmQjxx9vqcodn7eFgDuE8q6eq5W"
PROJECT_ID = "25e1be7c374749e9b6a25bc4ad53393a"
SERVER = "iotda.cn-north-4.myhuaweicloud.com"


class FakeTransport:
    """Stands in for Session.send: records prepared requests, replays queued responses."""

    def __init__(self):
        self.requests = []
        self.send_kwargs = []
        self._responses = []
        self._lock = threading.Lock()

    def queue(self, status=200, body=None, text=None):
        if text is not None:
            content = text.encode("utf-8")
        elif body is not None:
            content = json.dumps(body).encode("utf-8")
        else:
            content = b""
        self._responses.append((status, content))

    def send(self, request, **kwargs):
        with self._lock:
            self.requests.append(request)
            self.send_kwargs.append(kwargs)
            status, content = self._responses.pop(0) if self._responses else (200, b"{}")
        resp = requests.Response()
        resp.status_code = status
        resp._content = content
        resp.headers["Content-Type"] = "application/json"
        resp.url = request.url
        resp.request = request
        resp.encoding = "utf-8"
        return resp

    @property
    def last(self):
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.body)


@pytest.fixture(autouse=True)
def _isolate_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    SecretFilter.clear_secrets()
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    SecretFilter.clear_secrets()


@pytest.fixture
def credential():
    return Credential.from_aksk(ACCESS_KEY, SECRET_KEY)


@pytest.fixture
def options(credential):
    return ClientOptions.create(project_id=PROJECT_ID, credential=credential, server=SERVER)


@pytest.fixture
def transport(monkeypatch):
    fake = FakeTransport()
    monkeypatch.setattr(requests.Session, "send", lambda session, request, **kw: fake.send(request, **kw))
    return fake


@pytest.fixture
def client(options, transport):
    c = IoTDAClient(options)
    yield c
    c.close()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        f"""
TEST:
  server: {SERVER}
  project_id: {PROJECT_ID}
  access_key: {ACCESS_KEY}
  secret_key: {SECRET_KEY}
  instance_id: inst-01
TOKEN:
  project_id: {PROJECT_ID}
  auth_mode: token
  token: my-iam-token
BROKEN:
  auth_mode: aksk
  project_id: {PROJECT_ID}
""",
        encoding="utf-8",
    )
    return str(path)
