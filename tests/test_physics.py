import math

import pytest

from fpsarena.physics import (
    Body,
    BulletTracer,
    CameraController,
    CustomCollider,
    Nature,
    NatureKind,
    detect_collisions,
    handle_collisions,
)
from fpsarena.vector import Vec3


def _body(entity, pos, radius, nature, velocity=Vec3.ZERO):
    return Body(entity, pos, CustomCollider(radius, nature), velocity)


def test_overlapping_bodies_record_each_other():
    wall = Nature(NatureKind.WALL)
    bob = Nature(NatureKind.PLAYER, "bob")
    a = _body(1, Vec3(0, 0, 0), 1.0, wall)
    b = _body(2, Vec3(1.5, 0, 0), 1.0, bob)
    contacts = detect_collisions([a, b])
    assert a.collider.colliding_entities == [(2, bob)]
    assert b.collider.colliding_entities == [(1, wall)]
    assert contacts == {1: [(2, bob)], 2: [(1, wall)]}


def test_separated_bodies_do_not_collide():
    a = _body(1, Vec3(0, 0, 0), 1.0, Nature(NatureKind.WALL))
    b = _body(2, Vec3(5, 0, 0), 1.0, Nature(NatureKind.GROUND))
    assert detect_collisions([a, b]) == {}
    assert a.collider.colliding_entities == []


def test_touching_exactly_is_not_a_collision():
    a = _body(1, Vec3(0, 0, 0), 1.0, Nature(NatureKind.WALL))
    b = _body(2, Vec3(2, 0, 0), 1.0, Nature(NatureKind.WALL))
    detect_collisions([a, b])
    assert a.collider.colliding_entities == []


def test_stale_contacts_are_replaced():
    a = _body(1, Vec3(0, 0, 0), 1.0, Nature(NatureKind.WALL))
    a.collider.colliding_entities.append((99, Nature(NatureKind.SKY)))
    detect_collisions([a])
    assert a.collider.colliding_entities == []


def test_handle_collisions_stops_only_colliding_bodies():
    moving = Vec3(1, 2, 3)
    a = _body(1, Vec3(0, 0, 0), 1.0, Nature(NatureKind.WALL), moving)
    b = _body(2, Vec3(0.5, 0, 0), 1.0, Nature(NatureKind.WALL), moving)
    c = _body(3, Vec3(50, 0, 0), 1.0, Nature(NatureKind.WALL), moving)
    bodies = [a, b, c]
    detect_collisions(bodies)
    handle_collisions(bodies)
    assert a.velocity == Vec3.ZERO
    assert b.velocity == Vec3.ZERO
    assert c.velocity == moving


def test_tracer_lifetime_matches_distance_over_speed():
    start, end = Vec3(0, 0, 0), Vec3(0, 0, 50)
    tracer = BulletTracer(start, end, 500.0)
    assert tracer.lifetime * 500.0 == pytest.approx(start.distance(end))
    assert tracer.time_alive == 0.0


def test_tracer_stops_at_end():
    start, end = Vec3(1, 2, 3), Vec3(1, 2, 53)
    tracer = BulletTracer(start, end, 500.0)
    assert tracer.advance(tracer.lifetime * 3) == end


def test_tracer_moves_along_segment():
    start, end = Vec3(0, 0, 0), Vec3(30, 40, 0)
    tracer = BulletTracer(start, end, 10.0)
    pos = tracer.advance(tracer.lifetime / 4)
    total = start.distance(end)
    assert pos.distance(start) + pos.distance(end) == pytest.approx(total, rel=1e-5)
    assert pos.distance(start) == pytest.approx(total / 4, rel=1e-5)


def _bullet_collider(*contacts):
    collider = CustomCollider(0.07, Nature(NatureKind.BULLET))
    collider.colliding_entities.extend(contacts)
    return collider


def test_bullet_hitting_wall_is_removed():
    tracer = BulletTracer(Vec3(0, 0, 0), Vec3(0, 0, 50), 500.0)
    collider = _bullet_collider((7, Nature(NatureKind.WALL)))
    assert tracer.resolve_hit(collider, "me") == (True, None)
    assert collider.colliding_entities == []


def test_bullet_hitting_enemy_kills_it():
    tracer = BulletTracer(Vec3(0, 0, 0), Vec3(0, 0, 50), 500.0)
    collider = _bullet_collider((8, Nature(NatureKind.PLAYER, "enemy")))
    assert tracer.resolve_hit(collider, "me") == (True, 8)


def test_bullet_touching_shooter_survives():
    tracer = BulletTracer(Vec3(0, 0, 0), Vec3(0, 0, 50), 500.0)
    collider = _bullet_collider((9, Nature(NatureKind.PLAYER, "me")))
    assert tracer.resolve_hit(collider, "me") == (False, None)
    assert collider.colliding_entities == []


def test_bullet_without_contacts_is_kept():
    tracer = BulletTracer(Vec3(0, 0, 0), Vec3(0, 0, 50), 500.0)
    tracer.advance(10.0)
    assert tracer.resolve_hit(_bullet_collider(), "me") == (False, None)


def test_expired_bullet_with_contact_is_removed():
    tracer = BulletTracer(Vec3(0, 0, 0), Vec3(0, 0, 50), 500.0)
    tracer.advance(tracer.lifetime * 2)
    collider = _bullet_collider((3, Nature(NatureKind.GROUND)))
    assert tracer.resolve_hit(collider, "me") == (True, None)


def test_camera_without_motion_is_identity():
    controller = CameraController()
    assert controller.apply_motion(0.0, 0.0) == (0.0, 0.0, 0.0, 1.0)


def test_camera_pitch_is_clamped():
    controller = CameraController()
    controller.apply_motion(0.0, 10_000.0)
    assert controller.rotation_x == -45.0
    controller.apply_motion(0.0, -100_000.0)
    assert controller.rotation_x == 45.0


def test_camera_yaw_accumulates_without_clamp():
    controller = CameraController(sensitivity=1.0)
    controller.apply_motion(-200.0, 0.0)
    controller.apply_motion(-200.0, 0.0)
    assert controller.rotation_y == 400.0


def test_camera_quaternion_is_unit():
    controller = CameraController()
    q = controller.apply_motion(123.0, -77.0)
    assert math.sqrt(sum(c * c for c in q)) == pytest.approx(1.0)


def test_camera_pure_yaw_rotates_about_y():
    controller = CameraController(sensitivity=1.0)
    x, y, z, w = controller.apply_motion(-90.0, 0.0)
    assert x == pytest.approx(0.0)
    assert z == pytest.approx(0.0)
    assert y == pytest.approx(w)