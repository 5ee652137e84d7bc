from dataclasses import dataclass, field
from typing import List

from .models import Model, Page, Tag, page_params

DEVICE_RESOURCE = 'device'


@dataclass
class TaggedResource(Model):
    resource_id: str = ''


@dataclass
class TaggedResourceList(Model):
    resources: List[TaggedResource] = field(default_factory=list)
    page: Page = None

    _nested = {'resources': TaggedResource, 'page': Page}


class TagManager:
    """Binds tags to resources (devices) and looks resources up by tag."""

    def __init__(self, client):
        self.client = client

    def bind(self, resource_id: str, tags: List[Tag], resource_type: str = DEVICE_RESOURCE) -> bool:
        body = {
            'resource_type': resource_type,
            'resource_id': resource_id,
            'tags': [t.to_dict() for t in tags],
        }
        self.client.request('POST', 'tags/bind-resource', body=body)
        return True

    def unbind(self, resource_id: str, tag_keys: List[str], resource_type: str = DEVICE_RESOURCE) -> bool:
        body = {
            'resource_type': resource_type,
            'resource_id': resource_id,
            'tag_keys': list(tag_keys),
        }
        self.client.request('POST', 'tags/unbind-resource', body=body)
        return True

    def list_resources(self, tags: List[Tag], resource_type: str = DEVICE_RESOURCE, limit: int = None,
                       marker: str = None, offset: int = None) -> TaggedResourceList:
        body = {'resource_type': resource_type, 'tags': [t.to_dict(omit_empty=True) for t in tags]}
        data = self.client.request_json('POST', 'tags/query-resources',
                                        params=page_params(limit, marker, offset), body=body)
        return TaggedResourceList.from_dict(data)
