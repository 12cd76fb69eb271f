"""MAC address parsing and magic packet construction."""

from dataclasses import dataclass

from wakelan.core.validate import MAC_SEPARATOR, validate_mac

MAC_BYTES = 6
SYNC_BYTE = 0xFF
SYNC_LENGTH = 6
MAC_REPEAT_COUNT = 16
MAGIC_PACKET_LENGTH = SYNC_LENGTH + MAC_BYTES * MAC_REPEAT_COUNT  # 102


@dataclass(frozen=True)
class MacAddress:
    """Six raw hardware address bytes, in the order they are written."""

    octets: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.octets, (bytes, bytearray, memoryview)):
            raise TypeError(f"MAC address octets must be bytes, not {type(self.octets).__name__}")
        object.__setattr__(self, "octets", bytes(self.octets))
        if len(self.octets) != MAC_BYTES:
            raise ValueError(f"MAC address needs {MAC_BYTES} bytes, got {len(self.octets)}")

    def __bytes__(self) -> bytes:
        return self.octets

    def __str__(self) -> str:
        return MAC_SEPARATOR.join(f"{b:02X}" for b in self.octets)


def parse_mac(mac_address: str) -> MacAddress:
    """
    Convert a ``XX-XX-XX-XX-XX-XX`` string into a MacAddress.

    The string is validated again here, so a caller that skipped
    validate_mac gets the same InvalidMacAddress error instead of a
    half-parsed address.

    Args:
        mac_address: MAC address string, e.g. "A0-36-BC-BB-EB-CC"

    Returns:
        MacAddress holding the six bytes left to right

    Raises:
        InvalidMacAddress: If the string is not a valid MAC address
    """
    validate_mac(mac_address)
    return MacAddress(bytes(int(group, 16) for group in mac_address.split(MAC_SEPARATOR)))


def build_magic_packet(mac: MacAddress) -> bytes:
    """
    Build the 102-byte Wake-on-LAN payload for a MAC address.

    Layout: six 0xFF synchronisation bytes, then the MAC repeated 16 times.
    """
    return bytes([SYNC_BYTE]) * SYNC_LENGTH + mac.octets * MAC_REPEAT_COUNT
