from urllib.parse import parse_qs, urlsplit

import pytest

from iotmanager.application import Application
from iotmanager.device import AuthInfo, Device
from iotmanager.models import DEFAULT_LIMIT, Tag, compact, page_params
from iotmanager.shadow import DesiredShadow

from tests.conftest import PROJECT_ID, SERVER

BASE = f"https://{SERVER}:443/v5/iot/{PROJECT_ID}"


def query_of(request):
    return {k: v[0] for k, v in parse_qs(urlsplit(request.url).query, keep_blank_values=True).items()}


def path_of(request):
    return urlsplit(request.url).path


@pytest.mark.parametrize("limit,expected", [(None, 10), (0, 10), (1, 1), (50, 50), (51, 10), (-3, 10)])
def test_page_limit_clamp(limit, expected):
    assert page_params(limit=limit)["limit"] == str(expected)


@pytest.mark.parametrize("offset,expected", [(None, 0), (-1, 0), (0, 0), (500, 500), (501, 0)])
def test_page_offset_clamp(offset, expected):
    assert page_params(offset=offset)["offset"] == str(expected)


def test_page_marker_only_when_set():
    assert "marker" not in page_params()
    assert page_params(marker="abc")["marker"] == "abc"


def test_compact():
    assert compact({"a": None, "b": "", "c": 0, "d": False, "e": "x"}) == {"c": 0, "d": False, "e": "x"}


def test_nested_from_dict():
    device = Device.from_dict({
        "device_id": "d1",
        "auth_info": {"auth_type": "SECRET", "secure_access": True},
        "tags": [{"tag_key": "site", "tag_value": "paris"}],
        "unknown_field": 1,
    })
    assert device.auth_info == AuthInfo(auth_type="SECRET", secure_access=True)
    assert device.tags == [Tag("site", "paris")]


# applications

def test_applications_list(client, transport):
    transport.queue(body={"applications": [{"app_id": "a1", "app_name": "demo", "default_app": True}]})
    apps = client.applications.list()
    assert apps == [Application(app_id="a1", app_name="demo", default_app=True)]
    assert transport.last.method == "GET"
    assert transport.last.url == BASE + "/apps"


def test_application_model_round_trip():
    app = Application.from_dict({"app_id": "a1", "app_name": "demo", "create_time": "20210301T034714Z"})
    assert app.default_app is False
    assert app.to_dict(omit_empty=True) == {
        "app_id": "a1",
        "app_name": "demo",
        "create_time": "20210301T034714Z",
        "default_app": False,
    }
    assert Application.from_dict(None) == Application()


def test_applications_create_delete(client, transport):
    transport.queue(body={"app_id": "a2", "app_name": "new"})
    assert client.applications.create("new").app_id == "a2"
    assert transport.last_json() == {"app_name": "new"}
    assert client.applications.delete("a2") is True
    assert transport.last.method == "DELETE"
    assert transport.last.url == BASE + "/apps/a2"


# devices

def test_devices_create(client, transport):
    transport.queue(body={"device_id": "p_n1", "node_id": "n1", "product_id": "p"})
    device = client.devices.create("n1", "p", device_name="sensor", auth_info=AuthInfo(auth_type="SECRET", secret="s"))
    assert device.device_id == "p_n1"
    assert transport.last_json() == {
        "node_id": "n1",
        "product_id": "p",
        "device_name": "sensor",
        "auth_info": {"auth_type": "SECRET", "secret": "s"},
    }


def test_devices_list_filters(client, transport):
    transport.queue(body={"devices": [{"device_id": "d1"}], "page": {"count": 1, "marker": "m"}})
    result = client.devices.list(product_id="p", limit=5, marker=None)
    assert [d.device_id for d in result.devices] == ["d1"]
    assert result.page.count == 1
    assert query_of(transport.last) == {"product_id": "p", "limit": "5"}


def test_devices_freeze_unfreeze(client, transport):
    client.devices.freeze("d1")
    assert transport.last.method == "POST"
    assert path_of(transport.last).endswith("/devices/d1/freeze")
    client.devices.unfreeze("d1")
    assert path_of(transport.last).endswith("/devices/d1/unfreeze")


def test_devices_reset_secret(client, transport):
    transport.queue(body={"device_id": "d1", "secret": "new"})
    result = client.devices.reset_secret("d1", "new", force_disconnect=True)
    assert result.secret == "new"
    assert query_of(transport.last) == {"action_id": "resetSecret"}
    assert transport.last_json() == {"secret": "new", "force_disconnect": True}


def test_devices_send_command_keeps_empty_paras(client, transport):
    transport.queue(body={"command_id": "c1", "response": {"result_code": 0}})
    result = client.devices.send_command("d1", "reboot", {})
    assert result.command_id == "c1"
    assert result.response == {"result_code": 0}
    assert transport.last_json() == {"command_name": "reboot", "paras": {}}


def test_devices_send_message(client, transport):
    transport.queue(body={"message_id": "m1", "result": {"status": "PENDING"}})
    result = client.devices.send_message("d1", {"temp": 20}, topic="t")
    assert result.result.status == "PENDING"
    assert transport.last_json() == {"message": {"temp": 20}, "topic": "t"}


def test_devices_list_messages(client, transport):
    transport.queue(body={"device_id": "d1", "messages": [{"message_id": "m1"}, {"message_id": "m2"}]})
    assert [m.message_id for m in client.devices.list_messages("d1")] == ["m1", "m2"]


def test_devices_properties(client, transport):
    transport.queue(body={"response": {"services": []}})
    assert client.devices.query_properties("d1", "Temp") == {"response": {"services": []}}
    assert query_of(transport.last) == {"service_id": "Temp"}

    services = {"services": [{"service_id": "Temp", "properties": {"target": 21}}]}
    client.devices.update_properties("d1", services)
    assert transport.last.method == "PUT"
    assert transport.last_json() == services


# device groups

def test_group_add_remove_device(client, transport):
    client.device_groups.add_device("g1", "d1")
    assert path_of(transport.last).endswith("/device-group/g1/action")
    assert query_of(transport.last) == {"action_id": "addDevice", "device_id": "d1"}
    client.device_groups.remove_device("g1", "d1")
    assert query_of(transport.last)["action_id"] == "removeDevice"


def test_group_list(client, transport):
    transport.queue(body={"device_groups": [{"group_id": "g1", "name": "floor-1"}], "page": {"count": 1}})
    groups = client.device_groups.list(limit=100, app_id="a1")
    assert groups.device_groups[0].name == "floor-1"
    assert query_of(transport.last) == {"limit": str(DEFAULT_LIMIT), "offset": "0", "app_id": "a1"}


def test_group_list_devices(client, transport):
    transport.queue(body={"devices": [{"device_id": "d1"}]})
    assert client.device_groups.list_devices("g1").devices[0].device_id == "d1"
    assert path_of(transport.last).endswith("/device-group/g1/devices")


# tags

def test_tags_bind_unbind(client, transport):
    client.tags.bind("d1", [Tag("site", "paris")])
    assert path_of(transport.last).endswith("/tags/bind-resource")
    assert transport.last_json() == {
        "resource_type": "device",
        "resource_id": "d1",
        "tags": [{"tag_key": "site", "tag_value": "paris"}],
    }
    client.tags.unbind("d1", ("site",))
    assert transport.last_json()["tag_keys"] == ["site"]


def test_tags_query(client, transport):
    transport.queue(body={"resources": [{"resource_id": "d1"}], "page": {"count": 1}})
    result = client.tags.list_resources([Tag("site", "")], limit=20)
    assert [r.resource_id for r in result.resources] == ["d1"]
    assert transport.last_json() == {"resource_type": "device", "tags": [{"tag_key": "site"}]}
    assert query_of(transport.last)["limit"] == "20"


# shadows

def test_shadow_update_passes_desired_untouched(client, transport):
    transport.queue(body={"device_id": "d1", "shadow": [{"service_id": "Temp", "desired": {"properties": {}}}]})
    shadow = client.shadows.update("d1", [DesiredShadow("Temp", {}), DesiredShadow("Fan", {"on": True}, version=3)])
    assert transport.last_json() == {"shadow": [
        {"service_id": "Temp", "desired": {}},
        {"service_id": "Fan", "desired": {"on": True}, "version": 3},
    ]}
    assert shadow.shadow[0].service_id == "Temp"


def test_shadow_show(client, transport):
    transport.queue(body={"device_id": "d1", "shadow": [
        {"service_id": "Temp", "reported": {"properties": {"t": 20}, "event_time": "20210301T034714Z"}, "version": 2},
    ]})
    shadow = client.shadows.show("d1")
    assert shadow.shadow[0].reported.properties == {"t": 20}
    assert shadow.shadow[0].version == 2


# AMQP

def test_amqp_queues(client, transport):
    transport.queue(body={"queue_id": "q1", "queue_name": "telemetry"})
    assert client.amqp_queues.create("telemetry").queue_id == "q1"
    assert transport.last_json() == {"queue_name": "telemetry"}

    transport.queue(body={"queues": [{"queue_id": "q1"}]})
    client.amqp_queues.list("telemetry")
    assert query_of(transport.last)["queue_name"] == "telemetry"

    client.amqp_queues.delete("q1")
    assert transport.last.method == "DELETE"
    assert path_of(transport.last).endswith("/amqp-queues/q1")


def test_access_code(client, transport):
    transport.queue(body={"access_key": "ak", "access_code": "code"})
    code = client.access_codes.create()
    assert code.access_code == "code"
    assert path_of(transport.last).endswith("/auth/accesscode")
    assert transport.last_json() == {"type": "AMQP"}


# certificates

def test_certificates(client, transport):
    transport.queue(body={"certificate_id": "c1", "cn_name": "root"})
    assert client.certificates.upload("-----BEGIN CERTIFICATE-----").certificate_id == "c1"
    assert transport.last_json() == {"content": "-----BEGIN CERTIFICATE-----"}

    client.certificates.verify("c1", "proof")
    assert query_of(transport.last) == {"action_id": "verify"}
    assert transport.last_json() == {"verify_content": "proof"}
