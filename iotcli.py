import functools
import json
import logging
import sys

import click
import requests
import yaml

from iotmanager.client import IoTDAClient
from iotmanager.config import DEFAULT_CONFIG_FILE, load_config
from iotmanager.device import AuthInfo
from iotmanager.exceptions import IoTDAError
from iotmanager.log import configure_logging
from iotmanager.models import Tag
from iotmanager.options import ClientOptions
from iotmanager.printer import FORMATS, echo
from iotmanager.shadow import DesiredShadow

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR']


def api_command(f):
    """Report API and transport failures on stderr and exit 1."""
    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except (IoTDAError, requests.RequestException) as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
    return wrapper


def parse_json(ctx, param, value):
    if value is None:
        return None
    try:
        return json.loads(value)
    except ValueError as e:
        raise click.BadParameter(f"invalid JSON: {e}")


def parse_tags(ctx, param, values):
    tags = []
    for item in values:
        key, sep, value = item.partition('=')
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got '{item}'")
        tags.append(Tag(tag_key=key, tag_value=value))
    return tags


def _out(ctx, data):
    echo(data, ctx.obj['outfmt'])


@click.group(context_settings=dict(help_option_names=['--help']))
@click.option('--profile', required=True, help='Profile name from .config.yaml')
@click.option('--config', 'config_path', default=DEFAULT_CONFIG_FILE,
              help='Path to configuration file')
@click.option('--format', 'outfmt', default='json', type=click.Choice(FORMATS),
              help='Output format')
@click.option('--log-level', default='WARNING', type=click.Choice(LOG_LEVELS),
              help='Logging verbosity')
@click.pass_context
def cli(ctx, profile, config_path, outfmt, log_level):
    """CLI tool for managing IoTDA applications, devices and their resources."""
    configure_logging(getattr(logging, log_level))
    try:
        conf = load_config(profile, config_path)
        options = ClientOptions.from_profile(conf)
    except (OSError, ValueError, yaml.YAMLError) as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)

    client = IoTDAClient(options)
    ctx.call_on_close(client.close)
    ctx.obj = {
        'profile': profile,
        'options': options,
        'client': client,
        'outfmt': outfmt,
    }


@cli.command('sign')
@click.argument('method')
@click.argument('path')
@click.option('--query', '-q', multiple=True, help='Query parameter KEY=VALUE (repeatable)')
@click.option('--body', default=None, help='Raw request body')
@click.pass_context
@api_command
def sign_cmd(ctx, method, path, query, body):
    """Print the headers that would be sent for METHOD PATH (PATH relative to /v5/iot/{project_id})."""
    client = ctx.obj['client']
    params = []
    for item in query:
        key, _, value = item.partition('=')
        params.append((key, value))
    req = requests.Request(method.upper(), client.url(path), params=params,
                           data=body.encode('utf-8') if body is not None else None)
    prepared = client.session.prepare_request(req)
    _out(ctx, {'url': prepared.url, 'headers': dict(prepared.headers)})


# Applications

@cli.group()
def apps():
    """Resource spaces (applications)."""


@apps.command('list')
@click.pass_context
@api_command
def apps_list(ctx):
    _out(ctx, ctx.obj['client'].applications.list())


@apps.command('show')
@click.argument('app_id')
@click.pass_context
@api_command
def apps_show(ctx, app_id):
    _out(ctx, ctx.obj['client'].applications.show(app_id))


@apps.command('create')
@click.argument('name')
@click.pass_context
@api_command
def apps_create(ctx, name):
    _out(ctx, ctx.obj['client'].applications.create(name))


@apps.command('delete')
@click.argument('app_id')
@click.pass_context
@api_command
def apps_delete(ctx, app_id):
    ctx.obj['client'].applications.delete(app_id)
    _out(ctx, {'success': True, 'app_id': app_id})


# Devices

@cli.group()
def devices():
    """Devices, messages, commands and properties."""


@devices.command('list')
@click.option('--product-id')
@click.option('--gateway-id')
@click.option('--app-id')
@click.option('--limit', type=int)
@click.option('--marker')
@click.pass_context
@api_command
def devices_list(ctx, product_id, gateway_id, app_id, limit, marker):
    result = ctx.obj['client'].devices.list(product_id=product_id, gateway_id=gateway_id,
                                            app_id=app_id, limit=limit, marker=marker)
    _out(ctx, result.devices)


@devices.command('show')
@click.argument('device_id')
@click.pass_context
@api_command
def devices_show(ctx, device_id):
    _out(ctx, ctx.obj['client'].devices.show(device_id))


@devices.command('create')
@click.argument('node_id')
@click.argument('product_id')
@click.option('--device-id')
@click.option('--name', 'device_name')
@click.option('--secret', help='Device secret (secret authentication)')
@click.option('--app-id')
@click.option('--description')
@click.pass_context
@api_command
def devices_create(ctx, node_id, product_id, device_id, device_name, secret, app_id, description):
    auth_info = AuthInfo(auth_type='SECRET', secret=secret) if secret else None
    device = ctx.obj['client'].devices.create(node_id, product_id, device_id=device_id,
                                              device_name=device_name, auth_info=auth_info,
                                              app_id=app_id, description=description)
    _out(ctx, device)


@devices.command('update')
@click.argument('device_id')
@click.option('--name', 'device_name')
@click.option('--description')
@click.option('--secure-access/--no-secure-access', default=None)
@click.pass_context
@api_command
def devices_update(ctx, device_id, device_name, description, secure_access):
    _out(ctx, ctx.obj['client'].devices.update(device_id, device_name=device_name, description=description,
                                               secure_access=secure_access))


@devices.command('delete')
@click.argument('device_id')
@click.pass_context
@api_command
def devices_delete(ctx, device_id):
    ctx.obj['client'].devices.delete(device_id)
    _out(ctx, {'success': True, 'device_id': device_id})


@devices.command('freeze')
@click.argument('device_id')
@click.pass_context
@api_command
def devices_freeze(ctx, device_id):
    ctx.obj['client'].devices.freeze(device_id)
    _out(ctx, {'success': True, 'device_id': device_id, 'status': 'FROZEN'})


@devices.command('unfreeze')
@click.argument('device_id')
@click.pass_context
@api_command
def devices_unfreeze(ctx, device_id):
    ctx.obj['client'].devices.unfreeze(device_id)
    _out(ctx, {'success': True, 'device_id': device_id})


@devices.command('reset-secret')
@click.argument('device_id')
@click.option('--secret', help='New secret; generated by IoTDA when omitted')
@click.option('--force-disconnect', is_flag=True)
@click.pass_context
@api_command
def devices_reset_secret(ctx, device_id, secret, force_disconnect):
    _out(ctx, ctx.obj['client'].devices.reset_secret(device_id, secret, force_disconnect))


@devices.command('messages')
@click.argument('device_id')
@click.pass_context
@api_command
def devices_messages(ctx, device_id):
    _out(ctx, ctx.obj['client'].devices.list_messages(device_id))


@devices.command('send-message')
@click.argument('device_id')
@click.argument('message')
@click.option('--name')
@click.option('--topic')
@click.pass_context
@api_command
def devices_send_message(ctx, device_id, message, name, topic):
    _out(ctx, ctx.obj['client'].devices.send_message(device_id, message, name=name, topic=topic))


@devices.command('command')
@click.argument('device_id')
@click.argument('command_name')
@click.option('--service-id')
@click.option('--paras', callback=parse_json, default='{}', help='Command parameters as JSON')
@click.pass_context
@api_command
def devices_command(ctx, device_id, command_name, service_id, paras):
    _out(ctx, ctx.obj['client'].devices.send_command(device_id, command_name, paras,
                                                     service_id=service_id))


@devices.command('properties')
@click.argument('device_id')
@click.argument('service_id')
@click.pass_context
@api_command
def devices_properties(ctx, device_id, service_id):
    _out(ctx, ctx.obj['client'].devices.query_properties(device_id, service_id))


@devices.command('set-properties')
@click.argument('device_id')
@click.argument('services', callback=parse_json)
@click.pass_context
@api_command
def devices_set_properties(ctx, device_id, services):
    ctx.obj['client'].devices.update_properties(device_id, services)
    _out(ctx, {'success': True, 'device_id': device_id})


# Device groups

@cli.group()
def groups():
    """Device groups."""


@groups.command('list')
@click.option('--app-id')
@click.option('--limit', type=int)
@click.option('--marker')
@click.pass_context
@api_command
def groups_list(ctx, app_id, limit, marker):
    _out(ctx, ctx.obj['client'].device_groups.list(limit=limit, marker=marker, app_id=app_id).device_groups)


@groups.command('show')
@click.argument('group_id')
@click.pass_context
@api_command
def groups_show(ctx, group_id):
    _out(ctx, ctx.obj['client'].device_groups.show(group_id))


@groups.command('create')
@click.argument('name')
@click.option('--description')
@click.option('--super-group-id')
@click.option('--app-id')
@click.pass_context
@api_command
def groups_create(ctx, name, description, super_group_id, app_id):
    _out(ctx, ctx.obj['client'].device_groups.create(name, description=description,
                                                     super_group_id=super_group_id, app_id=app_id))


@groups.command('update')
@click.argument('group_id')
@click.argument('name')
@click.option('--description', default='')
@click.pass_context
@api_command
def groups_update(ctx, group_id, name, description):
    _out(ctx, ctx.obj['client'].device_groups.update(group_id, name, description))


@groups.command('delete')
@click.argument('group_id')
@click.pass_context
@api_command
def groups_delete(ctx, group_id):
    ctx.obj['client'].device_groups.delete(group_id)
    _out(ctx, {'success': True, 'group_id': group_id})


@groups.command('add-device')
@click.argument('group_id')
@click.argument('device_id')
@click.pass_context
@api_command
def groups_add_device(ctx, group_id, device_id):
    ctx.obj['client'].device_groups.add_device(group_id, device_id)
    _out(ctx, {'success': True, 'group_id': group_id, 'device_id': device_id})


@groups.command('remove-device')
@click.argument('group_id')
@click.argument('device_id')
@click.pass_context
@api_command
def groups_remove_device(ctx, group_id, device_id):
    ctx.obj['client'].device_groups.remove_device(group_id, device_id)
    _out(ctx, {'success': True, 'group_id': group_id, 'device_id': device_id})


@groups.command('devices')
@click.argument('group_id')
@click.option('--limit', type=int)
@click.option('--marker')
@click.pass_context
@api_command
def groups_devices(ctx, group_id, limit, marker):
    _out(ctx, ctx.obj['client'].device_groups.list_devices(group_id, limit=limit, marker=marker).devices)


# Tags

@cli.group()
def tags():
    """Device tags."""


@tags.command('bind')
@click.argument('device_id')
@click.argument('tags', nargs=-1, required=True, callback=parse_tags)
@click.pass_context
@api_command
def tags_bind(ctx, device_id, tags):
    ctx.obj['client'].tags.bind(device_id, tags)
    _out(ctx, {'success': True, 'device_id': device_id, 'tags': [t.to_dict() for t in tags]})


@tags.command('unbind')
@click.argument('device_id')
@click.argument('tag_keys', nargs=-1, required=True)
@click.pass_context
@api_command
def tags_unbind(ctx, device_id, tag_keys):
    ctx.obj['client'].tags.unbind(device_id, tag_keys)
    _out(ctx, {'success': True, 'device_id': device_id, 'tag_keys': list(tag_keys)})


@tags.command('query')
@click.argument('tags', nargs=-1, required=True, callback=parse_tags)
@click.option('--limit', type=int)
@click.option('--marker')
@click.pass_context
@api_command
def tags_query(ctx, tags, limit, marker):
    _out(ctx, ctx.obj['client'].tags.list_resources(tags, limit=limit, marker=marker).resources)


# Shadows

@cli.group()
def shadow():
    """Device shadows."""


@shadow.command('show')
@click.argument('device_id')
@click.pass_context
@api_command
def shadow_show(ctx, device_id):
    _out(ctx, ctx.obj['client'].shadows.show(device_id))


@shadow.command('update')
@click.argument('device_id')
@click.argument('service_id')
@click.argument('desired', callback=parse_json)
@click.option('--version', type=int)
@click.pass_context
@api_command
def shadow_update(ctx, device_id, service_id, desired, version):
    entry = DesiredShadow(service_id=service_id, desired=desired, version=version)
    _out(ctx, ctx.obj['client'].shadows.update(device_id, [entry]))


# AMQP queues and access codes

@cli.group()
def queues():
    """AMQP queues."""


@queues.command('list')
@click.option('--name', 'queue_name')
@click.option('--limit', type=int)
@click.option('--marker')
@click.pass_context
@api_command
def queues_list(ctx, queue_name, limit, marker):
    _out(ctx, ctx.obj['client'].amqp_queues.list(queue_name, limit=limit, marker=marker).queues)


@queues.command('create')
@click.argument('queue_name')
@click.pass_context
@api_command
def queues_create(ctx, queue_name):
    _out(ctx, ctx.obj['client'].amqp_queues.create(queue_name))


@queues.command('show')
@click.argument('queue_id')
@click.pass_context
@api_command
def queues_show(ctx, queue_id):
    _out(ctx, ctx.obj['client'].amqp_queues.show(queue_id))


@queues.command('delete')
@click.argument('queue_id')
@click.pass_context
@api_command
def queues_delete(ctx, queue_id):
    ctx.obj['client'].amqp_queues.delete(queue_id)
    _out(ctx, {'success': True, 'queue_id': queue_id})


@cli.command('access-code')
@click.option('--type', 'access_type', default='AMQP', type=click.Choice(['AMQP', 'MQTT']))
@click.pass_context
@api_command
def access_code_cmd(ctx, access_type):
    """Create an access code for AMQP/MQTT subscription clients."""
    _out(ctx, ctx.obj['client'].access_codes.create(access_type))


# CA certificates

@cli.group()
def certificates():
    """Device CA certificates."""


@certificates.command('list')
@click.option('--app-id')
@click.option('--limit', type=int)
@click.option('--marker')
@click.pass_context
@api_command
def certificates_list(ctx, app_id, limit, marker):
    _out(ctx, ctx.obj['client'].certificates.list(app_id, limit=limit, marker=marker).certificates)


@certificates.command('upload')
@click.argument('cert_file', type=click.File('r'))
@click.option('--app-id')
@click.pass_context
@api_command
def certificates_upload(ctx, cert_file, app_id):
    _out(ctx, ctx.obj['client'].certificates.upload(cert_file.read(), app_id=app_id))


@certificates.command('delete')
@click.argument('certificate_id')
@click.pass_context
@api_command
def certificates_delete(ctx, certificate_id):
    ctx.obj['client'].certificates.delete(certificate_id)
    _out(ctx, {'success': True, 'certificate_id': certificate_id})


@certificates.command('verify')
@click.argument('certificate_id')
@click.argument('verify_file', type=click.File('r'))
@click.pass_context
@api_command
def certificates_verify(ctx, certificate_id, verify_file):
    ctx.obj['client'].certificates.verify(certificate_id, verify_file.read())
    _out(ctx, {'success': True, 'certificate_id': certificate_id})


if __name__ == '__main__':
    cli()
