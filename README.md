# fpsarena

The game model and network side of a small multiplayer maze shooter. The package
contains:

- a UDP server that registers players and relays their movements to everyone,
- a text client that joins a server and tracks the other players' positions,
- a maze built from a text map,
- sphere collision detection, bullet tracers and a mouse-look camera controller.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Running a server

```
fpsarena-server [--host 0.0.0.0] [--port 8080]
```

The server binds a UDP socket, on `0.0.0.0:8080` unless told otherwise. It serves
datagrams until interrupted. Every message is a flat JSON object of string
values. The server acts on its `type` field as follows:

- `connection`: this registers `username`. If the username is empty or already
  taken, the reply's status is the rejection text. If the `username` field is
  missing, no reply is sent. Otherwise the reply has status `succes`, and a
  `join` message with the spawn position `24, 3, 0` is broadcast to every
  client.
- `movement`: this stores the player's new `x`, `y`, `z`. The position is then
  broadcast to every registered client.
- `participants`: the reply holds every other player's position as a JSON
  array `[x,y,z]`, keyed by username.
- `disconnection` and any unrecognised type: these are only logged.

Replies go to port 8081 of the sender's IP. Each reply carries a `status` field.
A datagram that is not a JSON object of strings is answered with status `failed`.

## Running a client

```
fpsarena-client [--server IP[:PORT]] [--username NAME] [--host 0.0.0.0] [--port 8081]
```

If `--server` or `--username` is not given, the client prompts for the server
address and then the username. A server address without a port uses 8080. Host
names are not accepted. Write IPv6 addresses as `[ip]:port`.

The client binds its own UDP socket, on port 8081 by default, and sends a
`connection` request. It exits with status 1 if the server answers with a status
other than `succes`. Once connected, it asks for the participants. It then prints
each message it receives (`data .. {...}`) and applies the message to a
`WorldState`:

- `join` and `participants` add players,
- `movement` moves a known player 20 % of the way towards the reported
  position,
- `disconnection` removes a player.

## Maps

Mazes are plain text files. Each `x` marks a wall cell, and any other character
marks open floor. Every character becomes one cell `cell_width` wide. The map is
centred on the origin.

```python
from fpsarena.map_gen import parse_map, gen_map

grid = parse_map("xx\nx.\n", 10.0, 20.0)
walls = [block for row in grid for block in row if block.is_valid()]

grid = gen_map(10.0, 20.0, "map.txt")  # read from a file; "map.txt" is the default
```

## Library overview

- `fpsarena.vector`: `Vec3`, a single-precision vector with `distance`, `lerp`
  and `to_json`, and `parse_vec3` to read one back.
- `fpsarena.messages`: `TypeMessage` and `TypeStatus`, plus these helpers:
  `message_type`, `status_type`, `create_move_resp`, `get_field`,
  `get_pos_player` and `format_float`.
- `fpsarena.entities`: `Player`, `new_player`, `PlayerGroup`, `Wall` (with
  `collides`), `Maze` and `Game`.
- `fpsarena.map_gen`: `MapBlock`, `parse_map` and `gen_map`.
- `fpsarena.physics`:
  - `detect_collisions` and `handle_collisions`, which work on `Body` objects
    that carry a `CustomCollider` and its `Nature`,
  - `BulletTracer`, with `advance` and `resolve_hit`,
  - `CameraController`, with `apply_motion`.
- `fpsarena.udp`: `UDP`, an asyncio endpoint with `create`, `send`, `receive`,
  `close`, `port` and `address`, and `normalize_address`. `UDP` can be used as
  an async context manager.
- `fpsarena.server`: `Server`, `UsernameRejected`, `run_server` and `main`.
- `fpsarena.client`: `Client`, `WorldState`, `ConnectionRefused`, `collect`,
  `deserialize_player_positions` and `main`.

## What this package does not do

There is no 3D view, window, keyboard or mouse handling. The client only prints
what it receives. It does not send movements of its own and cannot shoot.
The physics, tracer and camera classes form a model that a front end can drive,
but no front end is included.