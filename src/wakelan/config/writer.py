"""Write the wakelan target config file."""

import os
from pathlib import Path
from typing import Any

import yaml

from wakelan.config.loader import TARGET_SECTION
from wakelan.core.wol import WolTarget

CONFIG_HEADER = (
    "# wakelan target machine.\n"
    "# mac_address: XX-XX-XX-XX-XX-XX, broadcast_ip: dotted IPv4, port: 1-65535\n"
)


def target_to_raw(target: WolTarget) -> dict[str, Any]:
    """Serialize a WolTarget back to the raw YAML dict format the loader expects."""
    return {
        TARGET_SECTION: {
            "mac_address": target.mac_address,
            "broadcast_ip": target.broadcast_ip,
            "port": target.port,
        }
    }


def render_config(target: WolTarget) -> str:
    """Return the config file text for a target, header comment included."""
    body = yaml.safe_dump(target_to_raw(target), default_flow_style=False, sort_keys=False)
    return CONFIG_HEADER + body


def write_config(path: Path, target: WolTarget) -> None:
    """
    Write a target to the config file at path.

    The text goes to a hidden sibling file first and is moved over path with
    os.replace, so readers see either the old file or the new one.

    Args:
        path: Destination config.yaml path; parent directories are created.
        target: Machine to record. Values are written as given.
    """
    text = render_config(target)
    path.parent.mkdir(parents=True, exist_ok=True)
    staging = path.with_name(f".{path.name}.tmp")
    try:
        staging.write_text(text, encoding="utf-8")
        os.replace(staging, path)
    except OSError:
        staging.unlink(missing_ok=True)
        raise
