import logging
from dataclasses import dataclass, field
from typing import List

from .models import Model, Page, page_params

logger = logging.getLogger(__name__)


@dataclass
class AmqpQueue(Model):
    queue_id: str = ''
    queue_name: str = ''
    create_time: str = ''
    last_modify_time: str = ''


@dataclass
class AmqpQueueList(Model):
    queues: List[AmqpQueue] = field(default_factory=list)
    page: Page = None

    _nested = {'queues': AmqpQueue, 'page': Page}


@dataclass
class AccessCode(Model):
    access_key: str = ''
    access_code: str = ''


class AmqpQueueManager:
    def __init__(self, client):
        self.client = client

    def list(self, queue_name: str = None, limit: int = None, marker: str = None,
             offset: int = None) -> AmqpQueueList:
        params = page_params(limit, marker, offset)
        if queue_name:
            params['queue_name'] = queue_name
        return AmqpQueueList.from_dict(self.client.request_json('GET', 'amqp-queues', params=params))

    def create(self, queue_name: str) -> AmqpQueue:
        data = self.client.request_json('POST', 'amqp-queues', body={'queue_name': queue_name})
        return AmqpQueue.from_dict(data)

    def show(self, queue_id: str) -> AmqpQueue:
        data = self.client.request_json('GET', 'amqp-queues/{queue_id}', path_params={'queue_id': queue_id})
        return AmqpQueue.from_dict(data)

    def delete(self, queue_id: str) -> bool:
        logger.info("Deleting AMQP queue %s", queue_id)
        self.client.request('DELETE', 'amqp-queues/{queue_id}', path_params={'queue_id': queue_id})
        return True


class AccessCodeManager:
    """Access credentials for AMQP (or MQTT) subscription clients."""

    def __init__(self, client):
        self.client = client

    def create(self, access_type: str = 'AMQP') -> AccessCode:
        logger.info("Creating access code for type %s", access_type)
        data = self.client.request_json('POST', 'auth/accesscode', body={'type': access_type})
        return AccessCode.from_dict(data)
