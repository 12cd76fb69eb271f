"""UDP broadcast transmission of magic packets."""

import ctypes
import logging
import socket
import sys
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

from wakelan.core.errors import SendError, TransportError
from wakelan.core.packet import MacAddress, build_magic_packet

logger = logging.getLogger(__name__)

# _WSAIOW(IOC_VENDOR, 12)
SIO_UDP_CONNRESET = 0x9800000C

_ON_WINDOWS = sys.platform == "win32"


def _winsock() -> Any:
    return ctypes.windll.ws2_32  # type: ignore[attr-defined]


class NetworkEnvironment:
    """
    Process-wide handle on the platform networking subsystem.

    Holders acquire and release it around each send. The startup hook runs
    when the first holder acquires it and the cleanup hook runs when the last
    holder releases it. Python's socket module brings up the platform stack
    itself, so the default hooks do nothing; embedders and tests can pass
    their own.
    """

    def __init__(
        self,
        startup: Optional[Callable[[], None]] = None,
        cleanup: Optional[Callable[[], None]] = None,
    ) -> None:
        self._startup = startup
        self._cleanup = cleanup
        self._lock = threading.Lock()
        self._refcount = 0

    @property
    def refcount(self) -> int:
        with self._lock:
            return self._refcount

    def acquire(self) -> None:
        """
        Take one reference, starting the subsystem if this is the first.

        Raises:
            TransportError: TRANSPORT_INIT_FAILED if the startup hook fails
        """
        with self._lock:
            if self._refcount == 0 and self._startup is not None:
                try:
                    self._startup()
                except Exception as exc:
                    logger.error("Network subsystem startup failed: %s", exc)
                    raise TransportError(SendError.TRANSPORT_INIT_FAILED) from exc
            self._refcount += 1
            logger.debug("Network environment acquired (refcount=%d)", self._refcount)

    def release(self) -> None:
        """Drop one reference, shutting the subsystem down after the last one."""
        with self._lock:
            if self._refcount == 0:
                raise RuntimeError("network environment released more often than acquired")
            self._refcount -= 1
            logger.debug("Network environment released (refcount=%d)", self._refcount)
            if self._refcount == 0 and self._cleanup is not None:
                try:
                    self._cleanup()
                except Exception as exc:
                    logger.warning("Network subsystem cleanup failed: %s", exc)

    @contextmanager
    def session(self) -> Iterator["NetworkEnvironment"]:
        self.acquire()
        try:
            yield self
        finally:
            self.release()


default_environment = NetworkEnvironment()


class BroadcastTransmitter:
    """Sends one magic packet per call as a single UDP broadcast datagram."""

    def __init__(
        self,
        environment: Optional[NetworkEnvironment] = None,
        socket_factory: Optional[Callable[..., Any]] = None,
    ) -> None:
        self.environment = environment if environment is not None else default_environment
        self._socket_factory = socket_factory if socket_factory is not None else socket.socket

    def send(self, mac: MacAddress, destination_ip: str, port: int) -> None:
        """
        Broadcast the magic packet for a MAC address.

        Success only means the local network stack accepted the datagram.
        Nothing confirms that the target received it or woke up.

        Args:
            mac: Target hardware address
            destination_ip: Validated IPv4 broadcast address, e.g. "192.168.0.255"
            port: Validated UDP port (1-65535)

        Raises:
            TransportError: With the SendError cause of the failing step
        """
        with self.environment.session():
            packet = build_magic_packet(mac)
            sock = self._open_socket()
            try:
                self._enable_broadcast(sock)
                self._disable_connection_reset(sock)
                destination = self._resolve(destination_ip, port)
                self._transmit(sock, packet, destination)
            finally:
                sock.close()

        logger.debug("Magic packet for %s accepted for %s:%d", mac, destination_ip, port)

    def _open_socket(self) -> Any:
        try:
            return self._socket_factory(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        except OSError as exc:
            logger.error("UDP socket creation failed: %s", exc)
            raise TransportError(SendError.SOCKET_CREATION_FAILED) from exc

    def _enable_broadcast(self, sock: Any) -> None:
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
        except OSError as exc:
            logger.error("Enabling SO_BROADCAST failed: %s", exc)
            raise TransportError(SendError.BROADCAST_SETUP_FAILED) from exc

    def _disable_connection_reset(self, sock: Any) -> None:
        """
        Stop Windows from failing later calls after an ICMP port-unreachable.

        CPython's socket.ioctl rejects SIO_UDP_CONNRESET, so the call goes
        straight to WSAIoctl. Failure only costs the toggle and is logged.
        """
        if not _ON_WINDOWS:
            return
        try:
            ws2_32 = _winsock()
            new_behavior = ctypes.c_uint32(0)
            bytes_returned = ctypes.c_uint32(0)
            status = ws2_32.WSAIoctl(
                ctypes.c_size_t(sock.fileno()),
                ctypes.c_uint32(SIO_UDP_CONNRESET),
                ctypes.byref(new_behavior),
                ctypes.sizeof(new_behavior),
                None,
                0,
                ctypes.byref(bytes_returned),
                None,
                None,
            )
        except (AttributeError, OSError) as exc:
            logger.debug("Could not disable SIO_UDP_CONNRESET, continuing: %s", exc)
            return
        if status != 0:
            logger.debug(
                "WSAIoctl(SIO_UDP_CONNRESET) failed with error %d, continuing",
                ws2_32.WSAGetLastError(),
            )

    def _resolve(self, destination_ip: str, port: int) -> tuple[str, int]:
        try:
            socket.inet_pton(socket.AF_INET, destination_ip)
        except OSError as exc:
            logger.error("Cannot convert %r to an IPv4 address: %s", destination_ip, exc)
            raise TransportError(SendError.ADDRESS_CONVERSION_FAILED, destination_ip) from exc
        return destination_ip, port

    def _transmit(self, sock: Any, packet: bytes, destination: tuple[str, int]) -> None:
        logger.debug("Sending %d-byte magic packet to %s:%d", len(packet), *destination)
        try:
            sent = sock.sendto(packet, destination)
        except OSError as exc:
            logger.error("sendto %s:%d failed: %s", destination[0], destination[1], exc)
            raise TransportError(SendError.PACKET_SEND_FAILED) from exc
        if sent != len(packet):
            logger.error("Short send: %d of %d bytes", sent, len(packet))
            raise TransportError(SendError.PACKET_SEND_FAILED, f"{sent}/{len(packet)} bytes")
