"""Board entity models.

Defines the cube-coordinate value type shared by hexes, vertices and edges,
the terrain and resource enums, and the immutable records the
:class:`~hexboard.game_map.GameMap` stores: tiles, roads, settlements and
trading posts.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence

import pydantic

from ..errors import InvalidCoordinate


class TerrainType(enum.StrEnum):
    """Terrain of a hex tile; ``SEA`` is the "no terrain" default."""

    SEA = 'sea'
    DESERT = 'desert'
    FOREST = 'forest'  # produces wood
    HILLS = 'hills'  # produces brick
    PASTURE = 'pasture'  # produces sheep
    FIELDS = 'fields'  # produces wheat
    MOUNTAINS = 'mountains'  # produces ore


class ResourceType(enum.StrEnum):
    """The five tradeable resource types."""

    WOOD = 'wood'
    BRICK = 'brick'
    WHEAT = 'wheat'
    SHEEP = 'sheep'
    ORE = 'ore'


# Map from terrain type to the resource it produces (sea and desert excluded).
TILE_RESOURCE: dict[TerrainType, ResourceType] = {
    TerrainType.FOREST: ResourceType.WOOD,
    TerrainType.HILLS: ResourceType.BRICK,
    TerrainType.PASTURE: ResourceType.SHEEP,
    TerrainType.FIELDS: ResourceType.WHEAT,
    TerrainType.MOUNTAINS: ResourceType.ORE,
}


class SettlementLevel(enum.IntEnum):
    """Occupancy of a settlement site."""

    EMPTY = 0
    SETTLEMENT = 1
    CITY = 2


class Coord(pydantic.BaseModel):
    """Cube coordinate triplet used for hexes, vertices and edges alike.

    Which class a coordinate belongs to is decided by the predicates in
    :mod:`hexboard.grid.hex_utils`; the model itself accepts any triplet.
    Frozen, so it hashes and can key a dict directly.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    q: int
    r: int
    s: int

    def to_id(self) -> str:
        """Return the ``"q,r,s"`` display form."""
        return f'{self.q},{self.r},{self.s}'

    @classmethod
    def from_id(cls, text: str) -> Coord:
        """Parse a ``"q,r,s"`` identifier back into a coordinate."""
        parts = text.split(',')
        if len(parts) != 3:
            raise InvalidCoordinate(f'Malformed coordinate id: {text!r}')
        try:
            q, r, s = (int(part) for part in parts)
        except ValueError as exc:
            raise InvalidCoordinate(f'Malformed coordinate id: {text!r}') from exc
        return cls(q=q, r=r, s=s)

    @classmethod
    def from_value(cls, value: CoordLike) -> Coord:
        """Normalise a coordinate, id string, or 3-sequence of ints."""
        if isinstance(value, Coord):
            return value
        if isinstance(value, str):
            return cls.from_id(value)
        if isinstance(value, Sequence) and len(value) == 3:
            q, r, s = value
            if all(isinstance(c, int) and not isinstance(c, bool) for c in (q, r, s)):
                return cls(q=q, r=r, s=s)
        raise InvalidCoordinate(f'Not a coordinate triplet: {value!r}')

    def as_tuple(self) -> tuple[int, int, int]:
        """Return ``(q, r, s)``."""
        return (self.q, self.r, self.s)

    def __add__(self, other: Coord) -> Coord:
        return Coord(q=self.q + other.q, r=self.r + other.r, s=self.s + other.s)

    def __sub__(self, other: Coord) -> Coord:
        return Coord(q=self.q - other.q, r=self.r - other.r, s=self.s - other.s)

    def neighbors(self) -> list[Coord]:
        """Return the 6 neighbouring hex coordinates in direction order."""
        directions: list[tuple[int, int, int]] = [
            (1, -1, 0),
            (1, 0, -1),
            (0, 1, -1),
            (-1, 1, 0),
            (-1, 0, 1),
            (0, -1, 1),
        ]
        return [
            Coord(q=self.q + dq, r=self.r + dr, s=self.s + ds)
            for dq, dr, ds in directions
        ]


# Anything the public API accepts as a location.
CoordLike = Coord | str | Sequence[int]

ORIGIN = Coord(q=0, r=0, s=0)


class Tile(pydantic.BaseModel):
    """A single hex tile."""

    model_config = pydantic.ConfigDict(frozen=True)

    coord: Coord
    terrain_type: TerrainType = TerrainType.SEA
    number_token: int | None = pydantic.Field(default=None, ge=2, le=12)

    @pydantic.computed_field  # type: ignore[prop-decorator]
    @property
    def id(self) -> str:
        return self.coord.to_id()

    @property
    def resource(self) -> ResourceType | None:
        """Resource this tile produces, or None for sea and desert."""
        return TILE_RESOURCE.get(self.terrain_type)


class Road(pydantic.BaseModel):
    """A road placed on an edge."""

    model_config = pydantic.ConfigDict(frozen=True)

    coord: Coord
    owner_id: int | None = None

    @pydantic.computed_field  # type: ignore[prop-decorator]
    @property
    def id(self) -> str:
        return self.coord.to_id()


class Settlement(pydantic.BaseModel):
    """A settlement site record on a vertex.

    A missing record means the vertex is unoccupied, not that it is off-board.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    coord: Coord
    owner_id: int | None = None
    level: SettlementLevel = SettlementLevel.EMPTY

    @pydantic.computed_field  # type: ignore[prop-decorator]
    @property
    def id(self) -> str:
        return self.coord.to_id()


class TradingPost(pydantic.BaseModel):
    """A trading post attached to a hex and servicing some of its corners.

    ``index_list`` holds corner indices 0–5 of the hex (counter-clockwise,
    index ``i`` at ``30 + 60 * i`` degrees). An empty ``trade_list`` means the
    standard any-resource ratio, which is left to the trading rules.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    coord: Coord
    index_list: tuple[int, ...] = ()
    trade_list: dict[ResourceType, int] = pydantic.Field(default_factory=dict)

    @pydantic.field_validator('index_list')
    @classmethod
    def _indices_in_range(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        for index in value:
            if not 0 <= index <= 5:
                raise ValueError(f'Vertex index {index} is outside 0-5')
        return value

    @pydantic.computed_field  # type: ignore[prop-decorator]
    @property
    def id(self) -> str:
        return self.coord.to_id()
