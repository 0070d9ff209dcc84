"""Cube-coordinate geometry for hexes, vertices and edges.

Three coordinate classes share the ``(q, r, s)`` triplet:

* **Hex**: ``q + r + s == 0``; one tile.
* **Vertex**: ``|q + r + s| == 1``; a corner shared by up to three hexes.
  The corners of hex ``H`` are ``H`` plus one unit step along a single axis.
* **Edge**: two components odd, one even; a side shared by up to two hexes.
  An edge coordinate is the componentwise sum of its two endpoint vertices,
  and that sum is unique per edge.

Corner order around a hex
-------------------------
Index ``i`` is the corner at ``30 + 60 * i`` degrees, counter-clockwise with
y pointing up::

         1
      2 / \\ 0
       |   |
      3 \\ / 5
         4

    0: H + ( 1,  0,  0)
    1: H + ( 0, -1,  0)
    2: H + ( 0,  0,  1)
    3: H + (-1,  0,  0)
    4: H + ( 0,  1,  0)
    5: H + ( 0,  0, -1)

Edge ``i`` of a hex joins corner ``i`` to corner ``(i + 1) % 6``.  Trading
post index lists use the same numbering.

Derivation functions raise :class:`~hexboard.errors.InvalidCoordinate` when
handed a coordinate of the wrong class; they never return a silent ``None``.
"""

from __future__ import annotations

from ..errors import InvalidCoordinate
from ..models.board import Coord, CoordLike

# Corner offsets from a hex centre, indexed 0–5.
_VERTEX_OFFSETS: list[Coord] = [
    Coord(q=1, r=0, s=0),
    Coord(q=0, r=-1, s=0),
    Coord(q=0, r=0, s=1),
    Coord(q=-1, r=0, s=0),
    Coord(q=0, r=1, s=0),
    Coord(q=0, r=0, s=-1),
]

# Unit steps from a vertex; exactly three of them land on a hex.
_UNIT_OFFSETS: list[Coord] = [
    Coord(q=1, r=0, s=0),
    Coord(q=-1, r=0, s=0),
    Coord(q=0, r=1, s=0),
    Coord(q=0, r=-1, s=0),
    Coord(q=0, r=0, s=1),
    Coord(q=0, r=0, s=-1),
]

# Neighbour triads for vertices: one applies to sum == +1, the other to -1.
_DOWN_TRIAD: list[Coord] = [
    Coord(q=-1, r=-1, s=0),
    Coord(q=-1, r=0, s=-1),
    Coord(q=0, r=-1, s=-1),
]
_UP_TRIAD: list[Coord] = [
    Coord(q=1, r=0, s=1),
    Coord(q=0, r=1, s=1),
    Coord(q=1, r=1, s=0),
]

_ADJACENT_VERTEX_DIFFS: frozenset[tuple[int, int, int]] = frozenset(
    {(0, 1, 1), (1, 0, 1), (1, 1, 0), (0, -1, -1), (-1, 0, -1), (-1, -1, 0)}
)

# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------


def coord_to_id(coord: CoordLike) -> str:
    """Return the canonical ``"q,r,s"`` identifier of any coordinate."""
    return Coord.from_value(coord).to_id()


def id_to_coord(coord_id: str) -> Coord:
    """Parse a ``"q,r,s"`` identifier; exact inverse of :func:`coord_to_id`."""
    return Coord.from_id(coord_id)


# ---------------------------------------------------------------------------
# Validity predicates
# ---------------------------------------------------------------------------


def is_valid_hex(coord: CoordLike) -> bool:
    c = Coord.from_value(coord)
    return c.q + c.r + c.s == 0


def is_valid_vertex(coord: CoordLike) -> bool:
    c = Coord.from_value(coord)
    return abs(c.q + c.r + c.s) == 1


def is_valid_edge(coord: CoordLike) -> bool:
    """True if exactly two components are odd."""
    c = Coord.from_value(coord)
    odd = [abs(x) % 2 for x in (c.q, c.r, c.s)]
    return sum(odd) == 2


def require_hex(coord: CoordLike) -> Coord:
    c = Coord.from_value(coord)
    if not is_valid_hex(c):
        raise InvalidCoordinate(f'Invalid hex coordinate: {c.to_id()}')
    return c


def require_vertex(coord: CoordLike) -> Coord:
    c = Coord.from_value(coord)
    if not is_valid_vertex(c):
        raise InvalidCoordinate(f'Invalid hex vertex coordinate: {c.to_id()}')
    return c


def require_edge(coord: CoordLike) -> Coord:
    c = Coord.from_value(coord)
    if not is_valid_edge(c):
        raise InvalidCoordinate(
            f'Invalid hex edge coordinate: {c.to_id()}. '
            'A valid edge coordinate has two odd and one even component.'
        )
    return c


# ---------------------------------------------------------------------------
# Hex
# ---------------------------------------------------------------------------


def get_adj_hexes(hex_coord: CoordLike) -> list[Coord]:
    """Return the six hexes bordering *hex_coord*."""
    return require_hex(hex_coord).neighbors()


def get_vertices_from_hex(hex_coord: CoordLike) -> list[Coord]:
    """Return the six corners of a hex in index order 0–5."""
    h = require_hex(hex_coord)
    return [h + offset for offset in _VERTEX_OFFSETS]


def get_edges_from_hex(hex_coord: CoordLike) -> list[Coord]:
    """Return the six sides of a hex; side ``i`` joins corners ``i`` and ``i+1``."""
    corners = get_vertices_from_hex(hex_coord)
    return [corners[i] + corners[(i + 1) % 6] for i in range(6)]


# ---------------------------------------------------------------------------
# Vertex
# ---------------------------------------------------------------------------


def get_adj_hexes_from_vertex(vertex_coord: CoordLike) -> list[Coord]:
    """Return the three hex positions meeting at a vertex.

    All three candidates are returned whether or not a tile exists there.
    """
    v = require_vertex(vertex_coord)
    return [v + offset for offset in _UNIT_OFFSETS if is_valid_hex(v + offset)]


def get_adj_vertices_from_vertex(vertex_coord: CoordLike) -> list[Coord]:
    """Return the three vertices one edge away from *vertex_coord*."""
    v = require_vertex(vertex_coord)
    # Only one triad keeps |q + r + s| == 1.
    triad = _DOWN_TRIAD if is_valid_vertex(v + _DOWN_TRIAD[0]) else _UP_TRIAD
    return [v + offset for offset in triad]


def is_adjacent_vertex(vertex_a: CoordLike, vertex_b: CoordLike) -> bool:
    """True if the two vertices are joined by an edge."""
    diff = require_vertex(vertex_a) - require_vertex(vertex_b)
    return diff.as_tuple() in _ADJACENT_VERTEX_DIFFS


def get_index_of_vertex(hex_coord: CoordLike, vertex_coord: CoordLike) -> int | None:
    """Return the corner index (0–5) of a vertex on a hex, or None if not a corner."""
    diff = require_vertex(vertex_coord) - require_hex(hex_coord)
    try:
        return _VERTEX_OFFSETS.index(diff)
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Edge
# ---------------------------------------------------------------------------


def get_edge_from_vertices(vertex_a: CoordLike, vertex_b: CoordLike) -> Coord:
    """Return the edge joining two adjacent vertices."""
    if not is_adjacent_vertex(vertex_a, vertex_b):
        raise InvalidCoordinate(
            f'Vertices {coord_to_id(vertex_a)} and {coord_to_id(vertex_b)} '
            'do not form a hex edge'
        )
    return Coord.from_value(vertex_a) + Coord.from_value(vertex_b)


def get_vertices_from_edge(edge_coord: CoordLike) -> list[Coord]:
    """Return the two endpoint vertices of an edge.

    The even axis is shared by both endpoints (halved); the odd axes split
    into ``(x + 1) / 2`` and ``(x - 1) / 2``.
    """
    e = require_edge(edge_coord)
    q, r, s = e.as_tuple()
    if q % 2 == 0:
        return [
            Coord(q=q // 2, r=(r + 1) // 2, s=(s + 1) // 2),
            Coord(q=q // 2, r=(r - 1) // 2, s=(s - 1) // 2),
        ]
    if r % 2 == 0:
        return [
            Coord(q=(q + 1) // 2, r=r // 2, s=(s + 1) // 2),
            Coord(q=(q - 1) // 2, r=r // 2, s=(s - 1) // 2),
        ]
    return [
        Coord(q=(q + 1) // 2, r=(r + 1) // 2, s=s // 2),
        Coord(q=(q - 1) // 2, r=(r - 1) // 2, s=s // 2),
    ]
