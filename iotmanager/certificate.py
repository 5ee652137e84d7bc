from dataclasses import dataclass, field
from typing import List

from .models import Model, Page, compact, page_params


@dataclass
class Certificate(Model):
    certificate_id: str = ''
    cn_name: str = ''
    owner: str = ''
    status: bool = False
    verify_code: str = ''
    create_date: str = ''
    effective_date: str = ''
    expiry_date: str = ''


@dataclass
class CertificateList(Model):
    certificates: List[Certificate] = field(default_factory=list)
    page: Page = None

    _nested = {'certificates': Certificate, 'page': Page}


class CertificateManager:
    """Device CA certificates."""

    def __init__(self, client):
        self.client = client

    def list(self, app_id: str = None, limit: int = None, marker: str = None,
             offset: int = None) -> CertificateList:
        params = page_params(limit, marker, offset)
        if app_id:
            params['app_id'] = app_id
        return CertificateList.from_dict(self.client.request_json('GET', 'certificates', params=params))

    def upload(self, content: str, app_id: str = None) -> Certificate:
        body = compact({'content': content, 'app_id': app_id})
        return Certificate.from_dict(self.client.request_json('POST', 'certificates', body=body))

    def delete(self, certificate_id: str) -> bool:
        self.client.request('DELETE', 'certificates/{certificate_id}',
                            path_params={'certificate_id': certificate_id})
        return True

    def verify(self, certificate_id: str, verify_content: str) -> bool:
        self.client.request('POST', 'certificates/{certificate_id}/action',
                            path_params={'certificate_id': certificate_id},
                            params={'action_id': 'verify'},
                            body={'verify_content': verify_content})
        return True
