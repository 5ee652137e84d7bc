from dataclasses import dataclass
from typing import List

from .models import Model


@dataclass
class Application(Model):
    app_id: str = ''
    app_name: str = ''
    create_time: str = ''
    default_app: bool = False


class ApplicationManager:
    """Resource spaces (applications) of the project."""

    def __init__(self, client):
        self.client = client

    def list(self) -> List[Application]:
        data = self.client.request_json('GET', 'apps')
        return [Application.from_dict(a) for a in data.get('applications', [])]

    def show(self, app_id: str) -> Application:
        data = self.client.request_json('GET', 'apps/{app_id}', path_params={'app_id': app_id})
        return Application.from_dict(data)

    def create(self, app_name: str) -> Application:
        data = self.client.request_json('POST', 'apps', body={'app_name': app_name})
        return Application.from_dict(data)

    def delete(self, app_id: str) -> bool:
        self.client.request('DELETE', 'apps/{app_id}', path_params={'app_id': app_id})
        return True
