from dataclasses import dataclass, field
from typing import Dict, List

from .models import Document, Model, Page, Tag, compact


@dataclass
class AuthInfo(Model):
    auth_type: str = ''
    secure_access: bool = None
    fingerprint: str = ''
    secret: str = ''
    timeout: int = None


@dataclass
class Device(Model):
    app_id: str = ''
    app_name: str = ''
    device_id: str = ''
    node_id: str = ''
    gateway_id: str = ''
    device_name: str = ''
    node_type: str = ''
    description: str = ''
    fw_version: str = ''
    sw_version: str = ''
    auth_info: AuthInfo = None
    product_id: str = ''
    product_name: str = ''
    status: str = ''
    create_time: str = ''
    tags: List[Tag] = field(default_factory=list)
    extension_info: Document = None

    _nested = {'auth_info': AuthInfo, 'tags': Tag}


@dataclass
class DeviceList(Model):
    devices: List[Device] = field(default_factory=list)
    page: Page = None

    _nested = {'devices': Device, 'page': Page}


@dataclass
class DeviceSecret(Model):
    device_id: str = ''
    secret: str = ''


@dataclass
class DeviceMessage(Model):
    message_id: str = ''
    name: str = ''
    message: Document = None
    topic: str = ''
    status: str = ''
    created_time: str = ''
    finished_time: str = ''


@dataclass
class MessageResult(Model):
    status: str = ''
    created_time: str = ''
    finished_time: str = ''


@dataclass
class SendMessageResult(Model):
    message_id: str = ''
    result: MessageResult = None

    _nested = {'result': MessageResult}


@dataclass
class CommandResult(Model):
    command_id: str = ''
    response: Document = None


class DeviceManager:
    """Devices, plus their messages, commands and properties."""

    def __init__(self, client):
        self.client = client

    def _path(self, device_id: str, suffix: str = '') -> tuple:
        return 'devices/{device_id}' + suffix, {'device_id': device_id}

    def list(self, **query) -> DeviceList:
        """query: any filter IoTDA accepts (product_id, gateway_id, limit, marker, ...)."""
        params = {k: str(v) for k, v in query.items() if v is not None}
        data = self.client.request_json('GET', 'devices', params=params)
        return DeviceList.from_dict(data)

    def create(self, node_id: str, product_id: str, device_id: str = None, device_name: str = None,
               auth_info: AuthInfo = None, description: str = None, gateway_id: str = None,
               app_id: str = None, extension_info: Document = None, shadow: List[Dict] = None) -> Device:
        body = compact({
            'device_id': device_id,
            'node_id': node_id,
            'device_name': device_name,
            'product_id': product_id,
            'auth_info': auth_info.to_dict(omit_empty=True) if auth_info else None,
            'description': description,
            'gateway_id': gateway_id,
            'app_id': app_id,
            'extension_info': extension_info,
            'shadow': shadow,
        })
        return Device.from_dict(self.client.request_json('POST', 'devices', body=body))

    def show(self, device_id: str) -> Device:
        path, pp = self._path(device_id)
        return Device.from_dict(self.client.request_json('GET', path, path_params=pp))

    def update(self, device_id: str, device_name: str = None, description: str = None,
               extension_info: Document = None, secure_access: bool = None, timeout: int = None) -> Device:
        auth_info = compact({'secure_access': secure_access, 'timeout': timeout})
        body = compact({
            'device_name': device_name,
            'description': description,
            'extension_info': extension_info,
            'auth_info': auth_info or None,
        })
        path, pp = self._path(device_id)
        return Device.from_dict(self.client.request_json('PUT', path, path_params=pp, body=body))

    def delete(self, device_id: str) -> bool:
        path, pp = self._path(device_id)
        self.client.request('DELETE', path, path_params=pp)
        return True

    def freeze(self, device_id: str) -> bool:
        path, pp = self._path(device_id, '/freeze')
        self.client.request('POST', path, path_params=pp)
        return True

    def unfreeze(self, device_id: str) -> bool:
        path, pp = self._path(device_id, '/unfreeze')
        self.client.request('POST', path, path_params=pp)
        return True

    def reset_secret(self, device_id: str, secret: str = None, force_disconnect: bool = False) -> DeviceSecret:
        body = compact({'secret': secret})
        if force_disconnect:
            body['force_disconnect'] = True
        path, pp = self._path(device_id, '/action')
        data = self.client.request_json('POST', path, path_params=pp,
                                        params={'action_id': 'resetSecret'}, body=body)
        return DeviceSecret.from_dict(data)

    # messages

    def list_messages(self, device_id: str) -> List[DeviceMessage]:
        path, pp = self._path(device_id, '/messages')
        data = self.client.request_json('GET', path, path_params=pp)
        return [DeviceMessage.from_dict(m) for m in data.get('messages', [])]

    def show_message(self, device_id: str, message_id: str) -> DeviceMessage:
        path, pp = self._path(device_id, '/messages/{message_id}')
        pp['message_id'] = message_id
        return DeviceMessage.from_dict(self.client.request_json('GET', path, path_params=pp))

    def send_message(self, device_id: str, message: Document, message_id: str = None, name: str = None,
                     topic: str = None, topic_full_name: str = None) -> SendMessageResult:
        body = compact({
            'message_id': message_id,
            'name': name,
            'message': message,
            'topic': topic,
            'topic_full_name': topic_full_name,
        })
        path, pp = self._path(device_id, '/messages')
        return SendMessageResult.from_dict(self.client.request_json('POST', path, path_params=pp, body=body))

    # commands

    def send_command(self, device_id: str, command_name: str, paras: Document,
                     service_id: str = None) -> CommandResult:
        body = compact({'service_id': service_id, 'command_name': command_name})
        body['paras'] = paras
        path, pp = self._path(device_id, '/commands')
        return CommandResult.from_dict(self.client.request_json('POST', path, path_params=pp, body=body))

    # properties

    def query_properties(self, device_id: str, service_id: str) -> Document:
        path, pp = self._path(device_id, '/properties')
        return self.client.request_json('GET', path, path_params=pp, params={'service_id': service_id})

    def update_properties(self, device_id: str, services: Document) -> bool:
        path, pp = self._path(device_id, '/properties')
        self.client.request('PUT', path, path_params=pp, body=services)
        return True
