"""Game entities: players, walls, the maze and the game state."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from .vector import Vec3


@dataclass
class Player:
    """A participant; the defaults are those of an empty, zeroed player."""

    username: str = ""
    position: Vec3 = Vec3.ZERO
    dimension: Vec3 = Vec3.ZERO
    health: int = 0
    movement_speed: float = 0.0
    rotation_speed: float = 0.0


def new_player(username: str = "") -> Player:
    """A fresh player with full health and standard speeds."""
    return Player(
        username=username,
        health=1000,
        movement_speed=50.0,
        rotation_speed=math.radians(360.0),
    )


@dataclass
class PlayerGroup:
    """A set of players together with a message."""

    players: list[Player] = field(default_factory=list)
    message: str = ""


@dataclass
class Wall:
    """An axis-aligned wall block anchored at its minimum corner."""

    position: Vec3 = Vec3.ZERO
    width: float = 0.0
    height: float = 0.0

    def collides(self, position: Vec3) -> bool:
        """True when ``position`` lies in the cube of side ``width`` at the wall's corner."""
        low = self.position
        return (
            low.x <= position.x <= low.x + self.width
            and low.y <= position.y <= low.y + self.width
            and low.z <= position.z <= low.z + self.width
        )


@dataclass
class Maze:
    """Walls of the arena and its spawn point."""

    walls: list[Wall] = field(default_factory=list)
    spawn_points: Vec3 = Vec3.ZERO


@dataclass
class Game:
    """Overall game state."""

    players: list[Player] = field(default_factory=list)
    maze: Maze = field(default_factory=Maze)
    level: int = 0