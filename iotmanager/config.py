import os

import yaml

DEFAULT_CONFIG_FILE = '.config.yaml'


def load_config(profile: str, config_file: str = DEFAULT_CONFIG_FILE) -> dict:
    """Load the configuration of a single profile from the YAML file."""
    path = os.path.expanduser(config_file)
    with open(path, 'r') as f:
        full_config = yaml.safe_load(f) or {}

    if not isinstance(full_config, dict) or profile not in full_config:
        raise ValueError(f"Profile '{profile}' not found in {config_file}")

    conf = full_config[profile] or {}
    if not isinstance(conf, dict):
        raise ValueError(f"Profile '{profile}' in {config_file} is not a mapping")
    return conf
