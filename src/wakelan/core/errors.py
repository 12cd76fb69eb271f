"""Error taxonomy for configuration, validation and transport failures."""

from enum import Enum
from typing import Optional


class ConfigErrorCause(Enum):
    NOT_FOUND = "config file not found"
    UNREADABLE = "config file cannot be read"
    MALFORMED = "config file is not valid YAML"
    MISSING_MAC_ADDRESS = "mac_address is missing from the config"
    MISSING_BROADCAST_IP = "broadcast_ip is empty in the config"
    MISSING_PORT = "port is missing from the config"


class MacError(Enum):
    EMPTY_OR_TOO_LONG = "MAC address is empty or longer than 17 characters"
    TRUNCATED = "MAC address is shorter than 17 characters"
    INVALID_SEPARATOR = "MAC address separator must be '-'"
    INVALID_CHARACTER = "MAC address contains a non-hexadecimal character"


class IpError(Enum):
    WRONG_SEGMENT_COUNT = "broadcast IP must have exactly 4 dot-separated octets"
    EMPTY_OCTET = "broadcast IP contains an empty octet"
    TOO_LONG = "broadcast IP octet is longer than 3 digits"
    NON_DIGIT = "broadcast IP octet contains a non-digit character"
    LEADING_ZERO = "broadcast IP octet has a leading zero"
    OUT_OF_RANGE = "broadcast IP octet is outside 0-255"


class PortError(Enum):
    EMPTY = "port is empty"
    NOT_A_NUMBER = "port must contain decimal digits only"
    RESERVED = "port 0 is reserved"
    OUT_OF_RANGE = "port must be between 1 and 65535"


class SendError(Enum):
    TRANSPORT_INIT_FAILED = "network subsystem initialisation failed"
    SOCKET_CREATION_FAILED = "UDP socket creation failed"
    BROADCAST_SETUP_FAILED = "enabling broadcast on the socket failed"
    ADDRESS_CONVERSION_FAILED = "broadcast IP could not be converted to an address"
    PACKET_SEND_FAILED = "magic packet could not be sent"


class WolError(Exception):
    """Base class for every failure raised by wakelan."""

    def __init__(self, cause: Enum, value: Optional[str] = None) -> None:
        self.cause = cause
        self.value = value
        message = cause.value if value is None else f"{cause.value}: {value!r}"
        super().__init__(message)


class ConfigError(WolError):
    """Raised when the config file cannot be located, read or mapped to a target."""

    cause: ConfigErrorCause


class ValidationError(WolError):
    """Raised when an operator-supplied string fails syntactic validation."""


class InvalidMacAddress(ValidationError):
    cause: MacError


class InvalidBroadcastIp(ValidationError):
    cause: IpError


class InvalidPort(ValidationError):
    cause: PortError


class TransportError(WolError):
    """Raised when the magic packet cannot be handed to the local network stack."""

    cause: SendError
