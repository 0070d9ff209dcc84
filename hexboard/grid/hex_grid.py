"""Object wrappers for vertex and edge coordinates.

:class:`HexVertex` and :class:`HexEdge` validate their coordinate on
construction and expose the derivations from :mod:`.hex_utils` as methods.
"""

from __future__ import annotations

from ..errors import InvalidCoordinate
from ..models.board import Coord, CoordLike
from . import hex_utils


class HexVertex:
    """A corner shared by up to three hexes; a settlement site."""

    def __init__(self, coord: CoordLike) -> None:
        coord = Coord.from_value(coord)
        if not hex_utils.is_valid_vertex(coord):
            raise InvalidCoordinate(
                f'Invalid hex vertex coordinate: {coord.to_id()}. '
                'The sum of coordinates must be 1 or -1.'
            )
        self.coord = coord

    @property
    def id(self) -> str:
        return self.coord.to_id()

    def is_adjacent_vertex(self, other: HexVertex) -> bool:
        """True if *other* is one edge away."""
        return hex_utils.is_adjacent_vertex(self.coord, other.coord)

    def adjacent_vertices(self) -> list[HexVertex]:
        return [HexVertex(c) for c in hex_utils.get_adj_vertices_from_vertex(self.coord)]

    def adjacent_hex_coords(self) -> list[Coord]:
        """The three hex positions touching this corner, tiles or not."""
        return hex_utils.get_adj_hexes_from_vertex(self.coord)

    def hex_index(self, hex_coord: CoordLike) -> int | None:
        """Corner index of this vertex on *hex_coord*, or None if not a corner."""
        return hex_utils.get_index_of_vertex(hex_coord, self.coord)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, HexVertex) and other.coord == self.coord

    def __hash__(self) -> int:
        return hash(('vertex', self.coord))

    def __repr__(self) -> str:
        return f'HexVertex({self.id})'


class HexEdge:
    """A side shared by up to two hexes; a road site.

    The coordinate is the sum of the two endpoint vertex coordinates.
    """

    def __init__(self, coord: CoordLike) -> None:
        coord = Coord.from_value(coord)
        self.coord = coord
        # Raises InvalidCoordinate for anything but two-odd-one-even.
        first, second = hex_utils.get_vertices_from_edge(coord)
        self.v1 = HexVertex(first)
        self.v2 = HexVertex(second)

    @classmethod
    def from_vertices(cls, vertex_a: HexVertex, vertex_b: HexVertex) -> HexEdge:
        """Build the edge joining two adjacent vertices."""
        return cls(hex_utils.get_edge_from_vertices(vertex_a.coord, vertex_b.coord))

    @property
    def id(self) -> str:
        return self.coord.to_id()

    @property
    def vertices(self) -> tuple[HexVertex, HexVertex]:
        return (self.v1, self.v2)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, HexEdge) and other.coord == self.coord

    def __hash__(self) -> int:
        return hash(('edge', self.coord))

    def __repr__(self) -> str:
        return f'HexEdge({self.id})'
