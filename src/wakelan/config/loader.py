"""YAML configuration loader and validator."""

from pathlib import Path
from typing import Any, Optional

import yaml

from wakelan.core.errors import ConfigError, ConfigErrorCause, ValidationError
from wakelan.core.validate import validate_ipv4, validate_mac, validate_port
from wakelan.core.wol import DEFAULT_BROADCAST_IP, WolTarget

TARGET_SECTION = "target"

# YAML 1.1 reads `010` as octal 8 and `0b1001` as 9; the validators need the text as written.
_TYPED_SCALAR_TAGS = frozenset(
    {
        "tag:yaml.org,2002:bool",
        "tag:yaml.org,2002:int",
        "tag:yaml.org,2002:float",
        "tag:yaml.org,2002:timestamp",
    }
)


class TextScalarLoader(yaml.SafeLoader):
    """SafeLoader that keeps numbers, booleans and dates as plain strings."""


TextScalarLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _TYPED_SCALAR_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def load_config(path: Path) -> Optional[dict[str, Any]]:
    """
    Load configuration from a YAML file.

    Scalars are not typed: `port: 010` loads as the string "010". Only
    `null`, `~` and empty values become None.

    Args:
        path: Path to the YAML config file

    Returns:
        Parsed configuration dictionary, or None if file is empty

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
    """
    with open(path, encoding="utf-8") as f:
        result: Optional[dict[str, Any]] = yaml.load(f, Loader=TextScalarLoader)
        return result


def _raw_string(value: Any) -> str:
    # Dicts built in code may still hold ints.
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def validate_config(config: dict[str, Any]) -> list[str]:
    """
    Validate a loaded configuration dictionary.

    Returns:
        List of validation error messages (empty list = valid)
    """
    if not isinstance(config, dict):
        return ["Config root must be a YAML mapping"]

    section = config.get(TARGET_SECTION)
    if not section:
        return [f"'{TARGET_SECTION}' key is required and must be a non-empty mapping"]
    if not isinstance(section, dict):
        return [f"'{TARGET_SECTION}' must be a mapping"]

    errors: list[str] = []
    prefix = TARGET_SECTION

    mac = _raw_string(section.get("mac_address"))
    if not mac:
        errors.append(f"{prefix}: missing required field 'mac_address'")
    else:
        try:
            validate_mac(mac)
        except ValidationError as exc:
            errors.append(f"{prefix}: invalid mac_address '{mac}' ({exc.cause.value})")

    ip = _raw_string(section.get("broadcast_ip", DEFAULT_BROADCAST_IP))
    if not ip:
        errors.append(f"{prefix}: 'broadcast_ip' must not be empty")
    else:
        try:
            validate_ipv4(ip)
        except ValidationError as exc:
            errors.append(f"{prefix}: invalid broadcast_ip '{ip}' ({exc.cause.value})")

    port = _raw_string(section.get("port"))
    if not port:
        errors.append(f"{prefix}: missing required field 'port'")
    else:
        try:
            validate_port(port)
        except ValidationError as exc:
            errors.append(f"{prefix}: invalid port '{port}' ({exc.cause.value})")

    return errors


def target_from_config(config: dict[str, Any]) -> WolTarget:
    """
    Construct a WolTarget from a loaded config dict.

    The values are handed over as raw strings; validation happens when the
    packet is sent.

    Args:
        config: Parsed configuration dictionary

    Returns:
        WolTarget for the configured machine

    Raises:
        ConfigError: If a required field is missing or empty
    """
    section = config.get(TARGET_SECTION) if isinstance(config, dict) else None
    if not isinstance(section, dict):
        section = {}

    mac = _raw_string(section.get("mac_address"))
    if not mac:
        raise ConfigError(ConfigErrorCause.MISSING_MAC_ADDRESS)

    ip = _raw_string(section.get("broadcast_ip", DEFAULT_BROADCAST_IP))
    if not ip:
        raise ConfigError(ConfigErrorCause.MISSING_BROADCAST_IP)

    port = _raw_string(section.get("port"))
    if not port:
        raise ConfigError(ConfigErrorCause.MISSING_PORT)

    return WolTarget(mac_address=mac, broadcast_ip=ip, port=port)


def read_target(path: Path) -> WolTarget:
    """
    Load a config file and return its target.

    Raises:
        ConfigError: NOT_FOUND, UNREADABLE or MALFORMED for file problems,
            or a MISSING_* cause for absent fields
    """
    try:
        raw = load_config(path)
    except FileNotFoundError as exc:
        raise ConfigError(ConfigErrorCause.NOT_FOUND, str(path)) from exc
    except yaml.YAMLError as exc:
        raise ConfigError(ConfigErrorCause.MALFORMED, str(path)) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(ConfigErrorCause.UNREADABLE, str(path)) from exc
    return target_from_config(raw or {})
