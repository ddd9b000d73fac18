"""Asynchronous UDP endpoint exchanging text datagrams."""

from __future__ import annotations

import asyncio
import ipaddress
import logging
import re
from typing import Union

log = logging.getLogger(__name__)

DEFAULT_PORT = 8080
RECEIVE_BUFFER = 8192

_BRACKETED_V6 = re.compile(r"\[([^\]]+)\]:([0-9]+)")
_PORT = re.compile(r"[0-9]+")


def _check_port(text: str, addr: str) -> int:
    if not _PORT.fullmatch(text):
        raise ValueError(f"invalid address {addr!r}")
    port = int(text)
    if port > 0xFFFF:
        raise ValueError(f"invalid address {addr!r}")
    return port


def normalize_address(addr: str) -> tuple[str, int]:
    """Validate ``addr`` as ``ip:port`` and return ``(ip, port)``.

    An address without any colon gets the default port 8080. Host names are
    not accepted; IPv6 addresses must be written as ``[ip]:port``.
    """
    if ":" not in addr:
        addr = f"{addr.strip()}:{DEFAULT_PORT}"
    match = _BRACKETED_V6.fullmatch(addr)
    if match:
        host, port_text = match.groups()
        try:
            ipaddress.IPv6Address(host)
        except ValueError:
            raise ValueError(f"invalid address {addr!r}") from None
        return host, _check_port(port_text, addr)
    host, _, port_text = addr.rpartition(":")
    try:
        ipaddress.IPv4Address(host)
    except ValueError:
        raise ValueError(f"invalid address {addr!r}") from None
    return host, _check_port(port_text, addr)


class _DatagramQueue(asyncio.DatagramProtocol):
    def __init__(self) -> None:
        self.queue: asyncio.Queue = asyncio.Queue()

    def datagram_received(self, data: bytes, addr) -> None:
        self.queue.put_nowait((data, addr))

    def error_received(self, exc: Exception) -> None:
        self.queue.put_nowait(exc)

    def connection_lost(self, exc: Union[Exception, None]) -> None:
        self.queue.put_nowait(exc if exc is not None else OSError("socket closed"))


class UDP:
    """A bound UDP socket with broadcast enabled."""

    def __init__(self, transport: asyncio.DatagramTransport, protocol: _DatagramQueue) -> None:
        self._transport = transport
        self._protocol = protocol

    @classmethod
    async def create(cls, port: int = 0, address: str = "0.0.0.0") -> "UDP":
        """Bind a socket on ``address:port``."""
        loop = asyncio.get_running_loop()
        transport, protocol = await loop.create_datagram_endpoint(
            _DatagramQueue, local_addr=(address, port), allow_broadcast=True
        )
        log.debug("bound UDP socket on %s:%s", address, port)
        return cls(transport, protocol)

    async def __aenter__(self) -> "UDP":
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()

    async def send(self, message: str, addr: str) -> int:
        """Send ``message`` to ``addr``; return the bytes sent, 0 if sending failed.

        Raises ValueError when ``addr`` is not a valid socket address.
        """
        target = normalize_address(addr)
        data = message.encode("utf-8")
        log.debug("sending %s to %s", message, addr)
        try:
            self._transport.sendto(data, target)
        except OSError as exc:
            log.warning("failed to send to %s: %s", addr, exc)
            return 0
        return len(data)

    async def receive(self) -> tuple[str, str]:
        """Wait for one datagram; return its text and the sender's IP."""
        item = await self._protocol.queue.get()
        if isinstance(item, BaseException):
            raise item
        data, source = item
        text = data[:RECEIVE_BUFFER].decode("utf-8", errors="replace")
        return text, source[0]

    def close(self) -> None:
        """Close the socket."""
        self._transport.close()

    def port(self) -> int:
        """Local port the socket is bound to."""
        return self._transport.get_extra_info("sockname")[1]

    def address(self) -> str:
        """Local IP the socket is bound to."""
        return self._transport.get_extra_info("sockname")[0]