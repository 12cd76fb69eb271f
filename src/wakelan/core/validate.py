"""Strict syntax checks for the MAC address, broadcast IP and port settings.

The accepted formats are deliberately narrow: a single separator for MAC
addresses, no leading zeros in IPv4 octets, and no whitespace trimming
anywhere. Operator typos fail loudly instead of being guessed at.
"""

import logging

from wakelan.core.errors import (
    InvalidBroadcastIp,
    InvalidMacAddress,
    InvalidPort,
    IpError,
    MacError,
    PortError,
)

logger = logging.getLogger(__name__)

MAC_ADDRESS_LENGTH = 17
MAC_SEPARATOR = "-"
MAC_SEPARATOR_POSITIONS = frozenset({2, 5, 8, 11, 14})

IPV4_DOT_COUNT = 3
IPV4_OCTET_MAX_LENGTH = 3
IPV4_OCTET_MAX_VALUE = 255

PORT_MIN = 1
PORT_MAX = 65535

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_DECIMAL_DIGITS = frozenset("0123456789")


def validate_mac(mac_address: str) -> None:
    """
    Check that a MAC address is written as ``XX-XX-XX-XX-XX-XX``.

    Args:
        mac_address: Raw MAC address string, e.g. "A0-36-BC-BB-EB-CC"

    Raises:
        InvalidMacAddress: With the cause of the first problem found
    """
    length = len(mac_address)
    if length == 0 or length > MAC_ADDRESS_LENGTH:
        raise InvalidMacAddress(MacError.EMPTY_OR_TOO_LONG, mac_address)

    for i, ch in enumerate(mac_address):
        if i in MAC_SEPARATOR_POSITIONS:
            if ch != MAC_SEPARATOR:
                raise InvalidMacAddress(MacError.INVALID_SEPARATOR, mac_address)
        elif ch not in _HEX_DIGITS:
            raise InvalidMacAddress(MacError.INVALID_CHARACTER, mac_address)

    if length != MAC_ADDRESS_LENGTH:
        raise InvalidMacAddress(MacError.TRUNCATED, mac_address)


def validate_ipv4(ip_address: str) -> None:
    """
    Check that an IPv4 address is four canonical decimal octets.

    Octets are checked left to right as each dot is reached, so a malformed
    first octet is reported even when the dot count is also wrong.

    Args:
        ip_address: Raw dotted-quad string, e.g. "192.168.0.255"

    Raises:
        InvalidBroadcastIp: With the cause of the first problem found
    """
    start = 0
    dot_count = 0
    length = len(ip_address)

    for i in range(length + 1):
        if i < length and ip_address[i] != ".":
            continue

        _validate_octet(ip_address[start:i], ip_address)
        start = i + 1

        if i < length:
            dot_count += 1
            if dot_count > IPV4_DOT_COUNT:
                raise InvalidBroadcastIp(IpError.WRONG_SEGMENT_COUNT, ip_address)

    if dot_count != IPV4_DOT_COUNT:
        raise InvalidBroadcastIp(IpError.WRONG_SEGMENT_COUNT, ip_address)


def _validate_octet(octet: str, ip_address: str) -> None:
    if not octet:
        raise InvalidBroadcastIp(IpError.EMPTY_OCTET, ip_address)
    if len(octet) > IPV4_OCTET_MAX_LENGTH:
        raise InvalidBroadcastIp(IpError.TOO_LONG, ip_address)
    if any(ch not in _DECIMAL_DIGITS for ch in octet):
        raise InvalidBroadcastIp(IpError.NON_DIGIT, ip_address)
    if len(octet) > 1 and octet[0] == "0":
        raise InvalidBroadcastIp(IpError.LEADING_ZERO, ip_address)

    # Conversion and range are checked on their own, apart from the digit scan.
    try:
        value = int(octet, 10)
    except ValueError:
        raise InvalidBroadcastIp(IpError.NON_DIGIT, ip_address) from None
    if not 0 <= value <= IPV4_OCTET_MAX_VALUE:
        raise InvalidBroadcastIp(IpError.OUT_OF_RANGE, ip_address)


def validate_port(raw_port: str) -> int:
    """
    Parse a UDP port written as plain decimal digits.

    Args:
        raw_port: Port as read from the config, e.g. "9"

    Returns:
        The port number, between 1 and 65535

    Raises:
        InvalidPort: If the string is empty, not purely decimal, 0 or too large
    """
    if not raw_port:
        raise InvalidPort(PortError.EMPTY, raw_port)
    if any(ch not in _DECIMAL_DIGITS for ch in raw_port):
        raise InvalidPort(PortError.NOT_A_NUMBER, raw_port)

    try:
        port = int(raw_port, 10)
    except ValueError:
        # Digit strings beyond the interpreter's int conversion limit.
        raise InvalidPort(PortError.OUT_OF_RANGE, raw_port) from None
    if port < PORT_MIN:
        raise InvalidPort(PortError.RESERVED, raw_port)
    if port > PORT_MAX:
        raise InvalidPort(PortError.OUT_OF_RANGE, raw_port)

    logger.debug("Port %r accepted as %d", raw_port, port)
    return port
