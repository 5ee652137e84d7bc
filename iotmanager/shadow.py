from dataclasses import dataclass, field
from typing import List

from .models import Document, Model


@dataclass
class ShadowProperties(Model):
    properties: Document = None
    event_time: str = ''


@dataclass
class ShadowData(Model):
    service_id: str = ''
    desired: ShadowProperties = None
    reported: ShadowProperties = None
    version: int = 0

    _nested = {'desired': ShadowProperties, 'reported': ShadowProperties}


@dataclass
class DeviceShadow(Model):
    device_id: str = ''
    shadow: List[ShadowData] = field(default_factory=list)

    _nested = {'shadow': ShadowData}


@dataclass
class DesiredShadow(Model):
    """One service entry of a shadow update; `desired` is sent untouched."""
    service_id: str = ''
    desired: Document = None
    version: int = None


class ShadowManager:
    def __init__(self, client):
        self.client = client

    def show(self, device_id: str) -> DeviceShadow:
        data = self.client.request_json('GET', 'devices/{device_id}/shadow', path_params={'device_id': device_id})
        return DeviceShadow.from_dict(data)

    def update(self, device_id: str, shadow: List[DesiredShadow]) -> DeviceShadow:
        entries = []
        for s in shadow:
            entry = {'service_id': s.service_id, 'desired': s.desired}
            if s.version is not None:
                entry['version'] = s.version
            entries.append(entry)
        body = {'shadow': entries}
        data = self.client.request_json('PUT', 'devices/{device_id}/shadow',
                                        path_params={'device_id': device_id}, body=body)
        return DeviceShadow.from_dict(data)
