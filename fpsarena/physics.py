"""Sphere collision detection, bullet tracers and mouse-look camera control."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Hashable, Iterable, Optional

from .vector import Vec3, _to_f32


class NatureKind(Enum):
    """What kind of object a collider belongs to."""

    BULLET = "bullet"
    PLAYER = "player"
    WALL = "wall"
    GROUND = "ground"
    SKY = "sky"


@dataclass(frozen=True)
class Nature:
    """Kind of a collider; players also carry their username."""

    kind: NatureKind
    username: str = ""


@dataclass
class CustomCollider:
    """A sphere collider and the entities it currently touches."""

    radius: float
    nature: Nature
    colliding_entities: list[tuple[Hashable, Nature]] = field(default_factory=list)


@dataclass
class Body:
    """An entity with a position, a collider and a linear velocity."""

    entity: Hashable
    position: Vec3
    collider: CustomCollider
    velocity: Vec3 = Vec3.ZERO


def detect_collisions(bodies: Iterable[Body]) -> dict[Hashable, list[tuple[Hashable, Nature]]]:
    """Record on every collider the bodies whose spheres overlap it.

    Each collider's previous contacts are replaced. Returns the contacts by entity.
    """
    bodies = list(bodies)
    contacts: dict[Hashable, list[tuple[Hashable, Nature]]] = {}
    for a in bodies:
        for b in bodies:
            if a.entity == b.entity:
                continue
            if a.position.distance(b.position) < a.collider.radius + b.collider.radius:
                contacts.setdefault(a.entity, []).append((b.entity, b.collider.nature))
    for body in bodies:
        body.collider.colliding_entities.clear()
        body.collider.colliding_entities.extend(contacts.get(body.entity, ()))
    return contacts


def handle_collisions(bodies: Iterable[Body]) -> None:
    """Stop every body that is touching something."""
    for body in bodies:
        if body.collider.colliding_entities:
            body.velocity = Vec3.ZERO


@dataclass
class BulletTracer:
    """A projectile moving in a straight line from start to end at a fixed speed."""

    start_position: Vec3
    end_position: Vec3
    speed: float
    lifetime: float = field(init=False)
    time_alive: float = field(init=False, default=0.0)

    def __post_init__(self) -> None:
        self.lifetime = _to_f32(self.start_position.distance(self.end_position) / self.speed)

    def advance(self, dt: float) -> Vec3:
        """Age the tracer by ``dt`` seconds and return its new position."""
        self.time_alive += dt
        if self.lifetime == 0:
            t = 1.0
        else:
            t = min(max(self.time_alive / self.lifetime, 0.0), 1.0)
        return self.start_position.lerp(self.end_position, t)

    def resolve_hit(
        self, collider: CustomCollider, username: str
    ) -> tuple[bool, Optional[Hashable]]:
        """Decide the outcome of the tracer's current contacts.

        Returns whether the bullet is to be removed and the entity it killed,
        if any. Only the first contact counts; the contacts are then cleared.
        """
        if not collider.colliding_entities:
            return False, None
        target, nature = collider.colliding_entities[0]
        is_enemy = nature.kind is NatureKind.PLAYER and nature.username != username
        wall_hit = (
            collider.nature.kind is NatureKind.BULLET and nature.kind is NatureKind.WALL
        )
        remove = self.time_alive > self.lifetime or wall_hit or is_enemy
        collider.colliding_entities.clear()
        return remove, (target if is_enemy else None)


@dataclass
class CameraController:
    """Mouse-look state: pitch (x) and yaw (y) in degrees."""

    sensitivity: float = 0.1
    rotation_lock: float = 45.0
    rotation_x: float = 0.0
    rotation_y: float = 0.0

    def apply_motion(self, dx: float, dy: float) -> tuple[float, float, float, float]:
        """Apply a mouse delta; return the camera rotation quaternion (x, y, z, w).

        Pitch is clamped to ``rotation_lock`` degrees either way.
        """
        self.rotation_y -= dx * self.sensitivity
        self.rotation_x -= dy * self.sensitivity
        self.rotation_x = min(max(self.rotation_x, -self.rotation_lock), self.rotation_lock)

        half_yaw = math.radians(self.rotation_y) / 2.0
        half_pitch = math.radians(self.rotation_x) / 2.0
        sy, cy = math.sin(half_yaw), math.cos(half_yaw)
        sx, cx = math.sin(half_pitch), math.cos(half_pitch)
        # yaw about Y composed with pitch about X
        return (cy * sx, sy * cx, -sy * sx, cy * cx)