from dataclasses import dataclass, field
from typing import List

from .device import Device
from .models import Model, Page, compact, page_params


@dataclass
class DeviceGroup(Model):
    group_id: str = ''
    name: str = ''
    description: str = ''
    super_group_id: str = ''


@dataclass
class DeviceGroupList(Model):
    device_groups: List[DeviceGroup] = field(default_factory=list)
    page: Page = None

    _nested = {'device_groups': DeviceGroup, 'page': Page}


@dataclass
class GroupDeviceList(Model):
    devices: List[Device] = field(default_factory=list)
    page: Page = None

    _nested = {'devices': Device, 'page': Page}


class DeviceGroupManager:
    def __init__(self, client):
        self.client = client

    def list(self, limit: int = None, marker: str = None, offset: int = None,
             last_modified_time: str = None, app_id: str = None) -> DeviceGroupList:
        params = page_params(limit, marker, offset)
        if last_modified_time:
            params['last_modified_time'] = last_modified_time
        if app_id:
            params['app_id'] = app_id
        data = self.client.request_json('GET', 'device-group', params=params)
        return DeviceGroupList.from_dict(data)

    def create(self, name: str, description: str = None, super_group_id: str = None,
               app_id: str = None) -> DeviceGroup:
        body = compact({
            'name': name,
            'description': description,
            'super_group_id': super_group_id,
            'app_id': app_id,
        })
        return DeviceGroup.from_dict(self.client.request_json('POST', 'device-group', body=body))

    def show(self, group_id: str) -> DeviceGroup:
        data = self.client.request_json('GET', 'device-group/{group_id}', path_params={'group_id': group_id})
        return DeviceGroup.from_dict(data)

    def update(self, group_id: str, name: str, description: str = '') -> DeviceGroup:
        data = self.client.request_json('PUT', 'device-group/{group_id}', path_params={'group_id': group_id},
                                        body={'name': name, 'description': description})
        return DeviceGroup.from_dict(data)

    def delete(self, group_id: str) -> bool:
        self.client.request('DELETE', 'device-group/{group_id}', path_params={'group_id': group_id})
        return True

    def add_device(self, group_id: str, device_id: str) -> bool:
        return self._manage_devices(group_id, 'addDevice', device_id)

    def remove_device(self, group_id: str, device_id: str) -> bool:
        return self._manage_devices(group_id, 'removeDevice', device_id)

    def _manage_devices(self, group_id: str, action_id: str, device_id: str) -> bool:
        self.client.request('POST', 'device-group/{group_id}/action', path_params={'group_id': group_id},
                            params={'action_id': action_id, 'device_id': device_id})
        return True

    def list_devices(self, group_id: str, limit: int = None, marker: str = None,
                     offset: int = None) -> GroupDeviceList:
        data = self.client.request_json('GET', 'device-group/{group_id}/devices',
                                        path_params={'group_id': group_id},
                                        params=page_params(limit, marker, offset))
        return GroupDeviceList.from_dict(data)
