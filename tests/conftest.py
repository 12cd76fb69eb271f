"""Shared fixtures: a recording stand-in for UDP sockets."""

from typing import Any, Optional

import pytest


class FakeSocket:
    """Records what a BroadcastTransmitter does with its socket."""

    def __init__(
        self,
        family: int,
        type_: int,
        proto: int,
        setsockopt_error: Optional[OSError] = None,
        sendto_error: Optional[OSError] = None,
        short_send: Optional[int] = None,
    ) -> None:
        self.family = family
        self.type = type_
        self.proto = proto
        self.options: list[tuple[int, int, Any]] = []
        self.sent: list[tuple[bytes, tuple[str, int]]] = []
        self.closed = False
        self._setsockopt_error = setsockopt_error
        self._sendto_error = sendto_error
        self._short_send = short_send

    def setsockopt(self, level: int, option: int, value: Any) -> None:
        if self._setsockopt_error is not None:
            raise self._setsockopt_error
        self.options.append((level, option, value))

    def fileno(self) -> int:
        return 3

    def sendto(self, data: bytes, address: tuple[str, int]) -> int:
        if self._sendto_error is not None:
            raise self._sendto_error
        self.sent.append((data, address))
        return self._short_send if self._short_send is not None else len(data)

    def close(self) -> None:
        self.closed = True


class FakeSocketFactory:
    """Callable used in place of socket.socket; keeps every socket it made."""

    def __init__(self, error: Optional[OSError] = None, **socket_kwargs: Any) -> None:
        self.error = error
        self.socket_kwargs = socket_kwargs
        self.created: list[FakeSocket] = []

    def __call__(self, family: int, type_: int, proto: int = 0) -> FakeSocket:
        if self.error is not None:
            raise self.error
        sock = FakeSocket(family, type_, proto, **self.socket_kwargs)
        self.created.append(sock)
        return sock


@pytest.fixture
def socket_factory() -> FakeSocketFactory:
    return FakeSocketFactory()
