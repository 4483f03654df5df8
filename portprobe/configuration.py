# portprobe/configuration.py

"""
Configuration loader for portprobe.

Handles loading settings from config.yaml. If the file doesn't exist,
it creates one with default values.
"""

import sys
import yaml
from typing import Dict, Any, List, Optional

from .models import TargetPort

# This dictionary holds the default structure and values for our config.
# It will be used to generate the initial config.yaml.
DEFAULT_CONFIG: Dict[str, Any] = {
    'server_host': '45.146.81.208',
    'connect_timeout_ms': 2000,
    'packets_per_port': 5,
    'attempt_interval_ms': 50,
    # Report metadata
    'timezone': 'America/Sao_Paulo',
    'masked_server_label': 'NeonHost Server',
    # Probed in this order; results keep it.
    'target_ports': [
        {'port': 80, 'name': 'HTTP', 'description': 'Web Server'},
        {'port': 443, 'name': 'HTTPS', 'description': 'Secure Web Server'},
        {'port': 3306, 'name': 'MySQL', 'description': 'MySQL Database'},
        {'port': 30120, 'name': 'FiveM', 'description': 'FiveM Server'},
    ],
}

_HEADER = (
    "# portprobe Configuration File\n"
    "# You can edit these settings. They are read on the next run.\n\n"
)

def get_config_path() -> str:
    """Returns the path to the config file."""
    return "config.yaml"

def load_or_create_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Loads configuration from config.yaml.

    If the file doesn't exist, it creates it with default values.
    If the file is invalid, it reports the error and exits.
    """
    config_path = config_path or get_config_path()
    try:
        with open(config_path, 'r') as f:
            user_config = yaml.safe_load(f)

        # Merge user config with defaults to ensure all keys are present
        config = dict(DEFAULT_CONFIG)
        if user_config:
            if not isinstance(user_config, dict):
                print(f"FATAL: '{config_path}' must contain a mapping of settings.", file=sys.stderr)
                sys.exit(2)
            config.update(user_config)
        return config

    except FileNotFoundError:
        print(f"Configuration file not found. Creating '{config_path}' with default settings.", file=sys.stderr)
        try:
            with open(config_path, 'w') as f:
                f.write(_HEADER)
                yaml.dump(DEFAULT_CONFIG, f, sort_keys=False, default_flow_style=False, indent=2)
        except IOError as e:
            print(f"WARNING: Could not write default config file to '{config_path}': {e}", file=sys.stderr)
        return dict(DEFAULT_CONFIG)

    except yaml.YAMLError as e:
        print(f"FATAL: Error parsing '{config_path}': {e}", file=sys.stderr)
        sys.exit(2)

def target_ports_from_config(config: Dict[str, Any]) -> List[TargetPort]:
    """
    Builds the TargetPort list from the `target_ports` setting.

    Raises ValueError naming the offending entry when one is malformed.
    """
    entries = config.get('target_ports', DEFAULT_CONFIG['target_ports'])
    if not isinstance(entries, list) or not entries:
        raise ValueError("'target_ports' must be a non-empty list.")

    targets: List[TargetPort] = []
    seen = set()
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict) or 'port' not in entry:
            raise ValueError(f"target_ports[{index}] must be a mapping with at least a 'port' key.")
        port = entry['port']
        if isinstance(port, str) and port.strip().isdigit():
            port = int(port.strip())
        try:
            target = TargetPort(
                port=port,
                name=str(entry.get('name') or port),
                description=str(entry.get('description', '')),
            )
        except ValueError as e:
            raise ValueError(f"target_ports[{index}]: {e}") from e
        if target.port in seen:
            raise ValueError(f"target_ports[{index}]: port {target.port} is listed more than once.")
        seen.add(target.port)
        targets.append(target)
    return targets
