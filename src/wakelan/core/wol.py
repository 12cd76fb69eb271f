"""Wake-on-LAN functionality."""

import logging
from dataclasses import dataclass
from typing import Optional

from wakelan.core.packet import parse_mac
from wakelan.core.transport import BroadcastTransmitter
from wakelan.core.validate import validate_ipv4, validate_mac, validate_port

logger = logging.getLogger(__name__)

DEFAULT_BROADCAST_IP = "255.255.255.255"


@dataclass
class WolTarget:
    """The three raw settings that identify a machine to wake."""

    mac_address: str
    port: str
    broadcast_ip: str = DEFAULT_BROADCAST_IP


def send_magic_packet(
    mac_address: str,
    broadcast_ip: str,
    port_raw: str,
    transmitter: Optional[BroadcastTransmitter] = None,
) -> None:
    """
    Validate the settings and broadcast a Wake-on-LAN magic packet.

    All three settings are checked before any socket is opened, so invalid
    input never causes network activity.

    Args:
        mac_address: MAC address of the target machine (e.g., "A0-36-BC-BB-EB-CC")
        broadcast_ip: Broadcast IP address (e.g., "192.168.0.255")
        port_raw: UDP port as a decimal string (e.g., "9")
        transmitter: Transmitter to send with (default: a new BroadcastTransmitter)

    Raises:
        InvalidMacAddress: If the MAC address is malformed
        InvalidBroadcastIp: If the broadcast IP is malformed
        InvalidPort: If the port is malformed or out of range
        TransportError: If the packet cannot be handed to the network stack
    """
    validate_mac(mac_address)
    validate_ipv4(broadcast_ip)
    port = validate_port(port_raw)

    mac = parse_mac(mac_address)

    if transmitter is None:
        transmitter = BroadcastTransmitter()

    logger.info("Sending WOL magic packet to %s via %s:%d", mac, broadcast_ip, port)
    transmitter.send(mac, broadcast_ip, port)
    logger.debug("WOL packet sent successfully")


def wake(target: WolTarget, transmitter: Optional[BroadcastTransmitter] = None) -> None:
    """Send a magic packet to a target loaded from the config."""
    send_magic_packet(
        target.mac_address,
        target.broadcast_ip,
        target.port,
        transmitter=transmitter,
    )
