"""Game client: joins a server and mirrors the other players' positions."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional, Sequence

from .entities import Player, new_player
from .messages import TypeMessage, get_field, get_pos_player, message_type
from .udp import UDP
from .vector import Vec3, parse_vec3

log = logging.getLogger(__name__)

CLIENT_PORT = 8081
SPAWN_POSITION = Vec3(24.0, 3.0, 0.0)
SPAWN_HEIGHT = 3.0
MOVEMENT_SMOOTHING = 0.2
STATUS_SUCCESS = "succes"
SERVER_PROMPT = "Veuillez entrer votre l'addresse du server :"
USERNAME_PROMPT = "Veuillez entrer votre id de connexion:"


class ConnectionRefused(ConnectionError):
    """The server answered a connection request with a status other than success."""


def _dumps(data: Mapping[str, str]) -> str:
    return json.dumps(dict(data), separators=(",", ":"), ensure_ascii=False)


def _parse_message(message: str) -> dict[str, str]:
    data = json.loads(message)
    if not isinstance(data, dict) or not all(isinstance(v, str) for v in data.values()):
        raise ValueError("expected a JSON object of string values")
    return data


def collect(read: Callable[[str], str] = input) -> tuple[str, str]:
    """Ask for the server address, then the username; return ``(username, address)``."""
    ip_addr = read(SERVER_PROMPT + "\n").strip()
    username = read(USERNAME_PROMPT + "\n").strip()
    return username, ip_addr


@dataclass
class Client:
    """The local user: their name, their player and the server they talk to."""

    username: str
    server: str
    player: Player = field(default_factory=Player)

    async def connect(self, network: UDP) -> tuple[str, str]:
        """Ask the server to register this user and wait for its answer.

        Returns ``(username, server)``. Raises ConnectionRefused when the reply
        carries a status other than success, ValueError when it is not JSON.
        """
        request = {"type": TypeMessage.CONNECTION.value, "username": self.username}
        await network.send(_dumps(request), self.server)
        message, source = await network.receive()
        reply = json.loads(message)
        if isinstance(reply, dict) and "status" in reply:
            status = reply["status"]
            if status != STATUS_SUCCESS:
                raise ConnectionRefused(str(status))
        log.info("response from %s: %s", source, message)
        return self.username, self.server

    async def request_participants(self, network: UDP) -> int:
        """Ask the server for the players already in the game."""
        request = {"type": TypeMessage.PARTICIPANTS.value, "username": self.username}
        return await network.send(_dumps(request), self.server)


def deserialize_player_positions(player_map: Mapping[str, str]) -> dict[str, Vec3]:
    """Positions by username; ``type``/``status`` and malformed entries are skipped."""
    result: dict[str, Vec3] = {}
    for username, json_position in player_map.items():
        if username in ("type", "status"):
            continue
        try:
            result[username] = parse_vec3(json_position)
        except ValueError as exc:
            log.warning("cannot read position of %s: %s", username, exc)
    return result


@dataclass
class WorldState:
    """The players the client currently shows, in spawn order."""

    players: list[Player] = field(default_factory=list)

    def _spawn(self, username: str, position: Vec3) -> Player:
        player = new_player(username.strip())
        player.position = Vec3(position.x, SPAWN_HEIGHT, position.z)
        self.players.append(player)
        log.info("player added: %s", username)
        return player

    def apply(self, information: Mapping[str, str]) -> TypeMessage:
        """Update the world from one server message; return the message's kind."""
        kind = message_type(get_field(information, "type"))
        if kind is TypeMessage.JOIN:
            self._spawn(get_field(information, "username"), SPAWN_POSITION)
        elif kind is TypeMessage.MOVEMENT:
            username = information.get("username")
            if username is not None:
                target = get_pos_player(information)
                name = username.strip()
                player = next((p for p in self.players if p.username == name), None)
                if player is not None:
                    player.position = player.position.lerp(target, MOVEMENT_SMOOTHING)
        elif kind is TypeMessage.DISCONNECTION:
            username = information.get("username")
            if username is not None:
                name = username.strip()
                self.players = [p for p in self.players if p.username != name]
        elif kind is TypeMessage.PARTICIPANTS:
            for name, position in deserialize_player_positions(information).items():
                if name in ("type", "statut"):
                    continue
                self._spawn(name, position)
        else:
            log.info("unknown message type: %s", get_field(information, "type"))
        return kind


async def _session(client: Client, host: str, port: int, state: WorldState) -> None:
    async with await UDP.create(port, host) as network:
        await client.connect(network)
        await client.request_participants(network)
        while True:
            try:
                text, _ = await network.receive()
            except OSError as exc:
                log.error("receive failed: %s", exc)
                continue
            try:
                information = _parse_message(text)
            except ValueError as exc:
                log.warning("failed to decode message: %s", exc)
                continue
            print(f"data .. {information}")
            state.apply(information)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command-line entry point of the game client."""
    parser = argparse.ArgumentParser(description="Multiplayer FPS game client.")
    parser.add_argument("--server", help="server address, ip or ip:port")
    parser.add_argument("--username", help="name to join with")
    parser.add_argument("--host", default="0.0.0.0", help="local address to bind")
    parser.add_argument("--port", type=int, default=CLIENT_PORT, help="local UDP port")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    if args.server is None or args.username is None:
        username, server = collect()
        username = args.username if args.username is not None else username
        server = args.server if args.server is not None else server
    else:
        username, server = args.username, args.server

    client = Client(username=username, server=server)
    state = WorldState()
    try:
        asyncio.run(_session(client, args.host, args.port, state))
    except ConnectionRefused as exc:
        print(f"connection refused: {exc}")
        return 1
    except ValueError as exc:
        print(f"error: {exc}")
        return 1
    except KeyboardInterrupt:
        pass
    return 0