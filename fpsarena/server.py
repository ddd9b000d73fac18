"""Game server: registers players and relays their movements over UDP."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from .entities import Game, Player
from .messages import TypeMessage, create_move_resp, get_field, get_pos_player, message_type
from .udp import UDP

log = logging.getLogger(__name__)

SERVER_PORT = 8080
CLIENT_PORT = 8081
SPAWN_POSITION = (24.0, 3.0, 0.0)
STATUS_SUCCESS = "succes"
STATUS_FAILED = "failed"
USERNAME_TAKEN = "Nom d'utilisateur incorrect ou déjà utilisé"
MISSING_USERNAME = "Veuillez verifier le type"


class UsernameRejected(ConnectionError):
    """A connection request whose username is missing, empty or already taken."""


def _dumps(data: Mapping[str, str]) -> str:
    return json.dumps(dict(data), separators=(",", ":"), ensure_ascii=False)


def _parse_message(message: str) -> dict[str, str]:
    data = json.loads(message)
    if not isinstance(data, dict) or not all(isinstance(v, str) for v in data.values()):
        raise ValueError("expected a JSON object of string values")
    return data


@dataclass
class Server:
    """Holds the connected clients and players, and answers their datagrams."""

    network: UDP
    addr_clients: list[str] = field(default_factory=list)
    players: list[Player] = field(default_factory=list)
    game: Game = field(default_factory=Game)

    def _player(self, username: str) -> Optional[Player]:
        return next((p for p in self.players if p.username == username), None)

    async def check_username(self, data: Mapping[str, str], addr: str) -> None:
        """Accept or reject a connection request, replying to ``addr``.

        Raises UsernameRejected when the username is missing, empty or taken.
        """
        log.debug("checking username among %d players", len(self.players))
        username = data.get("username")
        if username is None:
            raise UsernameRejected(MISSING_USERNAME)
        if username == "" or self._player(username) is not None:
            await self.response(data, addr, USERNAME_TAKEN)
            raise UsernameRejected(USERNAME_TAKEN)
        await self.response(data, addr, STATUS_SUCCESS)

    async def accept(self, username: str, addr: str) -> None:
        """Register a new client and announce it to everyone."""
        self.addr_clients.append(addr)
        self.players.append(Player(username=username))
        log.info("new client %s from %s", username, addr)
        await self.broadcast(create_move_resp(username, *SPAWN_POSITION, TypeMessage.JOIN))

    async def broadcast(self, data: Mapping[str, str]) -> None:
        """Send ``data`` to every registered client."""
        for addr in self.addr_clients:
            await self.response(data, addr, STATUS_SUCCESS)

    async def response(self, data: Mapping[str, str], addr: str, status: str) -> None:
        """Send ``data`` with a ``status`` field to the client port of ``addr``."""
        msg = dict(data)
        msg["status"] = status
        await self.network.send(_dumps(msg), f"{addr}:{CLIENT_PORT}")

    def group_players_by_username(self, current: str) -> dict[str, str]:
        """Positions of every player but ``current``, keyed by username."""
        grouped = {
            player.username: player.position.to_json()
            for player in self.players
            if player.username.strip() != current.strip()
        }
        grouped["type"] = TypeMessage.PARTICIPANTS.value
        return grouped

    async def treatment_message(
        self, addr: str, message: TypeMessage, information: Mapping[str, str]
    ) -> None:
        """Act on one decoded message from ``addr``."""
        username = get_field(information, "username")
        if message is TypeMessage.CONNECTION:
            try:
                await self.check_username(information, addr)
            except UsernameRejected as exc:
                log.warning("connection refused for %r: %s", username, exc)
            else:
                await self.accept(username, addr)
        elif message is TypeMessage.MOVEMENT:
            pos = get_pos_player(information)
            player = self._player(username)
            if player is not None:
                player.position = pos
            await self.broadcast(
                create_move_resp(username, pos.x, pos.y, pos.z, TypeMessage.MOVEMENT)
            )
        elif message is TypeMessage.DISCONNECTION:
            log.info("disconnect from %s", addr)
        elif message is TypeMessage.UNKNOWN:
            log.info("unknown message from %s", addr)
        elif message is TypeMessage.PARTICIPANTS:
            await self.response(self.group_players_by_username(username), addr, STATUS_SUCCESS)
        else:
            raise ValueError(f"message type {message.value!r} is not accepted from clients")

    async def handle_datagram(self, message: str, addr: str) -> None:
        """Decode one datagram and act on it; malformed ones get a failure reply.

        Raises ValueError when a well-formed message has no ``type`` field.
        """
        try:
            information = _parse_message(message)
        except ValueError as exc:
            log.warning("bad message from %s: %s", addr, exc)
            await self.response({}, addr, STATUS_FAILED)
            return
        if "type" not in information:
            raise ValueError(f"message from {addr} has no type")
        await self.treatment_message(addr, message_type(information["type"]), information)

    async def run(self) -> None:
        """Serve datagrams forever."""
        while True:
            try:
                message, addr = await self.network.receive()
            except OSError as exc:
                log.error("receive failed: %s", exc)
                continue
            await self.handle_datagram(message, addr)


async def run_server(port: int = SERVER_PORT, address: str = "0.0.0.0") -> None:
    """Bind the server socket and serve forever."""
    network = await UDP.create(port, address)
    try:
        await Server(network).run()
    finally:
        network.close()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command-line entry point of the game server."""
    parser = argparse.ArgumentParser(description="Multiplayer FPS game server.")
    parser.add_argument("--host", default="0.0.0.0", help="address to bind")
    parser.add_argument("--port", type=int, default=SERVER_PORT, help="UDP port to bind")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    print(f"Multiplayer FPS server listening on {args.host}:{args.port}")
    try:
        asyncio.run(run_server(args.port, args.host))
    except KeyboardInterrupt:
        pass
    return 0