"""Build the arena's wall blocks from a text map, where ``x`` marks a wall."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

WALL_CHAR = "x"
BLOCK_Y = 2.2


@dataclass
class MapBlock:
    """Centre and size of one map cell; open cells have zero size."""

    x: float
    y: float
    z: float
    w: float
    h: float
    d: float

    def is_valid(self) -> bool:
        """True when every dimension is non-zero."""
        return self.w != 0.0 and self.h != 0.0 and self.d != 0.0


def _lines(content: str) -> list[str]:
    if not content:
        return []
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def parse_map(content: str, cell_width: float, block_height: float) -> list[list[MapBlock]]:
    """Turn map text into rows of blocks centred on the origin."""
    mask = [[char == WALL_CHAR for char in line] for line in _lines(content)]
    rows = len(mask)
    cols = len(mask[0]) if mask else 0
    offset_x = cols * cell_width / 2.0
    offset_z = rows * cell_width / 2.0
    half = cell_width / 2.0

    matrix = []
    for row_index, row in enumerate(mask):
        blocks = []
        z = row_index * cell_width + half - offset_z
        for col_index, is_wall in enumerate(row):
            x = col_index * cell_width + half - offset_x
            w, h, d = (cell_width, block_height, cell_width) if is_wall else (0.0, 0.0, 0.0)
            blocks.append(MapBlock(x, BLOCK_Y, z, w, h, d))
        matrix.append(blocks)
    return matrix


def gen_map(
    cell_width: float, block_height: float, path: Union[str, Path] = "map.txt"
) -> list[list[MapBlock]]:
    """Read the map file at ``path`` and build its blocks."""
    content = Path(path).read_text(encoding="utf-8")
    return parse_map(content, cell_width, block_height)