"""Destructible terrain stored as a flat occupancy bitmap."""

from __future__ import annotations

import logging
import math
from typing import Iterator, Optional, Set, Tuple

from tanx_duel.core.noise import FractalNoise

logger = logging.getLogger(__name__)

I32_MAX = 2**31 - 1

EMPTY = 0
SOLID = 1

# Byte order of each exported pixel is always R, G, B, A.
TERRAIN_RGBA: Tuple[int, int, int, int] = (0, 189, 207, 255)
SKY_RGBA: Tuple[int, int, int, int] = (0, 0, 0, 0)


class InvalidDimensions(ValueError):
    """Raised when a terrain is requested with an unusable size."""


def _channel_table(solid_value: int, empty_value: int) -> bytes:
    table = bytearray(256)
    table[EMPTY] = empty_value
    table[SOLID] = solid_value
    return bytes(table)


_CHANNEL_TABLES = tuple(
    _channel_table(solid, empty) for solid, empty in zip(TERRAIN_RGBA, SKY_RGBA)
)


class Terrain:
    """Width x height grid of solid/empty cells with y growing downward."""

    def __init__(self, width: int, height: int) -> None:
        _validate_dimensions(width, height)
        self.width = width
        self.height = height
        self._cells = bytearray(width * height)
        self.noise = FractalNoise(seed=0, octaves=4, frequency=2.0 / width)
        self.amplitude = height / 2.0
        self.dx = 0
        self.changed = True
        self._pending: Set[int] = set()
        self.settling = False

    # ------------------------------------------------------------------
    # Generator configuration
    @property
    def seed(self) -> int:
        return self.noise.seed

    def set_seed(self, seed: int) -> None:
        self.noise.reseed(seed)

    def set_octaves(self, octaves: int) -> None:
        self.noise.octaves = max(1, int(octaves))

    def set_frequency(self, frequency: float) -> None:
        if frequency <= 0:
            raise ValueError("frequency must be positive")
        self.noise.frequency = frequency

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def occupancy(self) -> bytes:
        """Snapshot of the cells; mutate through :meth:`get_mutable_run`."""

        return bytes(self._cells)

    # ------------------------------------------------------------------
    # Generation
    def generate(self) -> None:
        """Rebuild every column from the height generator."""

        width, height = self.width, self.height
        y_center = height / 2.0
        for x in range(width):
            value = y_center + self.noise.sample(x + self.dx) * self.amplitude
            value = max(0.0, min(float(height), value))
            y = min(height, int(math.floor(value + 0.5)))
            self._cells[x::width] = bytes(y) + b"\x01" * (height - y)
        self._pending.clear()
        self.settling = False
        self.changed = True
        logger.debug(
            "Generated %dx%d terrain (seed=%d, octaves=%d, dx=%d)",
            width,
            height,
            self.noise.seed,
            self.noise.octaves,
            self.dx,
        )

    # ------------------------------------------------------------------
    # Queries
    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_not_empty(self, x: int, y: int) -> bool:
        if not self.is_inside(x, y):
            return False
        return self._cells[x + y * self.width] != EMPTY

    def column_surface(self, x: int) -> Optional[int]:
        """Return the first solid row of column ``x`` scanning downward."""

        if not 0 <= x < self.width:
            return None
        top = self._cells[x::self.width].find(SOLID)
        return top if top >= 0 else None

    def iter_filled_points(self) -> Iterator[Tuple[int, int]]:
        width = self.width
        for index, value in enumerate(self._cells):
            if value != EMPTY:
                yield index % width, index // width

    # ------------------------------------------------------------------
    # Mutation
    def get_mutable_run(
        self, point: Tuple[int, int], length: int
    ) -> Optional[memoryview]:
        """Writable view of up to ``length`` cells starting at ``point``.

        The run is clipped to the end of the row. Writes through the view
        change the bitmap directly; callers should set ``changed``.
        """

        x, y = point
        if not self.is_inside(x, y) or length <= 0:
            return None
        start = x + y * self.width
        length = min(length, self.width - x)
        return memoryview(self._cells)[start:start + length]

    def fill_run(self, point: Tuple[int, int], length: int, solid: bool) -> int:
        run = self.get_mutable_run(point, length)
        if run is None:
            return 0
        value = SOLID if solid else EMPTY
        run[:] = bytes([value]) * len(run)
        self.changed = True
        return len(run)

    # ------------------------------------------------------------------
    # Settling
    def subsidence(self) -> None:
        """Start a settling pass; cells are moved by :meth:`update`."""

        self._pending = set(range(self.width))
        self.settling = True
        logger.debug("Terrain subsidence started")

    def update(self) -> bool:
        """Let floating cells of every pending column fall one row.

        Returns ``True`` once no column has a solid cell above an empty one.
        """

        if not self._pending:
            self.settling = False
            return True
        width = self.width
        settled = []
        for x in self._pending:
            column = bytearray(self._cells[x::width])
            if not _drop_column(column):
                settled.append(x)
                continue
            self._cells[x::width] = column
            self.changed = True
        self._pending.difference_update(settled)
        if self._pending:
            return False
        self.settling = False
        logger.debug("Terrain subsidence finished")
        return True

    def is_stable(self) -> bool:
        width = self.width
        return not any(
            _has_floating(self._cells[x::width]) for x in range(width)
        )

    # ------------------------------------------------------------------
    # Export
    def to_pixel_buffer(self) -> bytes:
        """Return RGBA pixels, four bytes per cell, row-major."""

        cells = bytes(self._cells)
        pixels = bytearray(len(cells) * 4)
        for channel, table in enumerate(_CHANNEL_TABLES):
            pixels[channel::4] = cells.translate(table)
        return bytes(pixels)

    def render_rows(self) -> Iterator[str]:
        for y in range(self.height):
            row = self._cells[y * self.width:(y + 1) * self.width]
            yield "".join("#" if value else "." for value in row)


def _has_floating(column: bytes) -> bool:
    top = column.find(SOLID)
    return top >= 0 and column.rfind(EMPTY) > top


def _drop_column(column: bytearray) -> bool:
    """Shift everything above the lowest gap down one row, in place."""

    top = column.find(SOLID)
    if top < 0:
        return False
    gap = column.rfind(EMPTY)
    if gap < top:
        return False
    column[top + 1:gap + 1] = column[top:gap]
    column[top] = EMPTY
    return True


def _validate_dimensions(width: int, height: int) -> None:
    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidDimensions(f"'{name}' must be an integer, got {value!r}")
    if min(width, height) <= 0 or max(width, height) > I32_MAX:
        raise InvalidDimensions(
            f"'width' and 'height' must be greater than 0 and less or equal than {I32_MAX}"
        )
    if width * height > I32_MAX:
        raise InvalidDimensions(
            f"terrain of {width}x{height} cells exceeds {I32_MAX} cells"
        )


__all__ = [
    "InvalidDimensions",
    "SKY_RGBA",
    "TERRAIN_RGBA",
    "Terrain",
]
