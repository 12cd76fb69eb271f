"""Tests for Wake-on-LAN functionality."""

from unittest.mock import MagicMock, patch

import pytest

from conftest import FakeSocketFactory
from wakelan.core.errors import (
    InvalidBroadcastIp,
    InvalidMacAddress,
    InvalidPort,
    MacError,
    PortError,
    SendError,
    TransportError,
)
from wakelan.core.packet import MacAddress
from wakelan.core.transport import BroadcastTransmitter, NetworkEnvironment
from wakelan.core.wol import WolTarget, send_magic_packet, wake


def _transmitter(factory: FakeSocketFactory) -> BroadcastTransmitter:
    return BroadcastTransmitter(environment=NetworkEnvironment(), socket_factory=factory)


class TestSendMagicPacket:
    """Tests for send_magic_packet."""

    def test_end_to_end_packet_and_destination(self, socket_factory: FakeSocketFactory) -> None:
        """Should broadcast 6x FF + 16x MAC to the configured address and port."""
        send_magic_packet(
            "A0-36-BC-BB-EB-CC", "192.168.0.255", "9", transmitter=_transmitter(socket_factory)
        )

        (sock,) = socket_factory.created
        packet, destination = sock.sent[0]
        assert destination == ("192.168.0.255", 9)
        assert packet == b"\xff" * 6 + bytes.fromhex("A036BCBBEBCC") * 16

    def test_empty_mac_opens_no_socket(self, socket_factory: FakeSocketFactory) -> None:
        """Validation failures must happen before any network side effect."""
        with pytest.raises(InvalidMacAddress) as exc_info:
            send_magic_packet("", "192.168.0.255", "9", transmitter=_transmitter(socket_factory))

        assert exc_info.value.cause is MacError.EMPTY_OR_TOO_LONG
        assert socket_factory.created == []

    def test_invalid_ip_opens_no_socket(self, socket_factory: FakeSocketFactory) -> None:
        with pytest.raises(InvalidBroadcastIp):
            send_magic_packet(
                "A0-36-BC-BB-EB-CC", "192.168.0.256", "9", transmitter=_transmitter(socket_factory)
            )
        assert socket_factory.created == []

    def test_invalid_port_opens_no_socket(self, socket_factory: FakeSocketFactory) -> None:
        with pytest.raises(InvalidPort) as exc_info:
            send_magic_packet(
                "A0-36-BC-BB-EB-CC", "192.168.0.255", "0", transmitter=_transmitter(socket_factory)
            )
        assert exc_info.value.cause is PortError.RESERVED
        assert socket_factory.created == []

    def test_invalid_input_leaves_environment_untouched(self) -> None:
        startup = MagicMock()
        env = NetworkEnvironment(startup=startup)
        transmitter = BroadcastTransmitter(environment=env, socket_factory=FakeSocketFactory())

        with pytest.raises(InvalidMacAddress):
            send_magic_packet("00:11:22:AA:BB:CC", "192.168.0.255", "9", transmitter=transmitter)

        startup.assert_not_called()
        assert env.refcount == 0

    def test_transport_error_propagates(self) -> None:
        factory = FakeSocketFactory(sendto_error=OSError("ENETDOWN"))

        with pytest.raises(TransportError) as exc_info:
            send_magic_packet(
                "A0-36-BC-BB-EB-CC", "192.168.0.255", "9", transmitter=_transmitter(factory)
            )

        assert exc_info.value.cause is SendError.PACKET_SEND_FAILED

    def test_passes_parsed_values_to_transmitter(self) -> None:
        transmitter = MagicMock(spec=BroadcastTransmitter)

        send_magic_packet("a0-36-bc-bb-eb-cc", "10.0.0.255", "7", transmitter=transmitter)

        transmitter.send.assert_called_once_with(
            MacAddress(bytes.fromhex("A036BCBBEBCC")), "10.0.0.255", 7
        )

    @patch("wakelan.core.wol.BroadcastTransmitter")
    def test_default_transmitter_created(self, mock_cls: MagicMock) -> None:
        send_magic_packet("A0-36-BC-BB-EB-CC", "255.255.255.255", "9")

        mock_cls.assert_called_once_with()
        mock_cls.return_value.send.assert_called_once()


class TestWake:
    """Tests for wake."""

    def test_wake_sends_target(self, socket_factory: FakeSocketFactory) -> None:
        target = WolTarget(mac_address="A0-36-BC-BB-EB-CC", broadcast_ip="192.168.0.255", port="9")

        wake(target, transmitter=_transmitter(socket_factory))

        assert socket_factory.created[0].sent[0][1] == ("192.168.0.255", 9)

    def test_wake_default_broadcast(self, socket_factory: FakeSocketFactory) -> None:
        """Should use the global broadcast address when none is configured."""
        target = WolTarget(mac_address="A0-36-BC-BB-EB-CC", port="9")

        wake(target, transmitter=_transmitter(socket_factory))

        assert socket_factory.created[0].sent[0][1] == ("255.255.255.255", 9)
