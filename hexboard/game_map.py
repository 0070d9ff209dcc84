"""Authoritative store for every entity placed on the board.

The :class:`GameMap` keeps four coordinate-keyed stores (tiles, roads,
settlements, trading posts) plus the robber position.  Tiles are the only
source of truth for which vertices and edges are on the board: the legal
vertex and edge sets are derived from the tile store, cached, and dropped
whenever a tile is added or removed.

Records are frozen pydantic models.  Readers get the stored record back;
writers go through the ``update_*`` / ``remove_*`` methods, which swap in a
modified copy.  Only coordinate shape is validated here; game rules belong
to the caller.
"""

from __future__ import annotations

import enum
import logging
import typing
from collections.abc import Callable, Mapping, Sequence

from .errors import InvalidEntityKind
from .grid import hex_utils
from .models.board import (
    ORIGIN,
    Coord,
    CoordLike,
    ResourceType,
    Road,
    Settlement,
    SettlementLevel,
    TerrainType,
    Tile,
    TradingPost,
)

logger = logging.getLogger(__name__)


class EntityKind(enum.StrEnum):
    """Names of the four entity stores, as accepted by :meth:`GameMap.filter`."""

    TILES = 'tiles'
    ROADS = 'roads'
    SETTLEMENTS = 'settlements'
    TRADING_POSTS = 'trading_posts'


class _Unset(enum.Enum):
    UNSET = 'unset'


# Marks an update argument that was not supplied (as opposed to None).
UNSET = _Unset.UNSET


class GameMap:
    """Tiles, roads, settlements, trading posts and the robber for one board."""

    def __init__(self) -> None:
        self.tiles: dict[Coord, Tile] = {}
        self.roads: dict[Coord, Road] = {}
        self.settlements: dict[Coord, Settlement] = {}
        self.trading_posts: dict[Coord, TradingPost] = {}
        self._robber_coord: Coord = ORIGIN
        # Derived from the tile store; None means "recompute on next access".
        self._vertex_set: frozenset[Coord] | None = None
        self._edge_set: frozenset[Coord] | None = None

    def clone(self) -> GameMap:
        """Return a deep copy sharing no mutable state with this map."""
        copy = GameMap()
        copy.tiles = {k: v.model_copy(deep=True) for k, v in self.tiles.items()}
        copy.roads = {k: v.model_copy(deep=True) for k, v in self.roads.items()}
        copy.settlements = {
            k: v.model_copy(deep=True) for k, v in self.settlements.items()
        }
        copy.trading_posts = {
            k: v.model_copy(deep=True) for k, v in self.trading_posts.items()
        }
        copy._robber_coord = self._robber_coord
        # Frozensets of frozen coords are immutable and safe to share.
        copy._vertex_set = self._vertex_set
        copy._edge_set = self._edge_set
        return copy

    # ------------------------------------------------------------------
    # Geometry and validity
    # ------------------------------------------------------------------

    def get_all_vertex_id_set(self) -> frozenset[Coord]:
        """Every on-board vertex: the union of the corners of all tiles."""
        if self._vertex_set is None:
            self._vertex_set = frozenset(
                v
                for coord in self.tiles
                for v in hex_utils.get_vertices_from_hex(coord)
            )
            logger.debug(
                'Derived %d vertices from %d tiles',
                len(self._vertex_set),
                len(self.tiles),
            )
        return self._vertex_set

    def get_all_edge_id_set(self) -> frozenset[Coord]:
        """Every on-board edge: the union of the sides of all tiles."""
        if self._edge_set is None:
            self._edge_set = frozenset(
                e for coord in self.tiles for e in hex_utils.get_edges_from_hex(coord)
            )
            logger.debug(
                'Derived %d edges from %d tiles', len(self._edge_set), len(self.tiles)
            )
        return self._edge_set

    def invalidate_derived_sets(self) -> None:
        """Drop the cached vertex/edge sets so they are rebuilt from the tiles."""
        self._vertex_set = None
        self._edge_set = None

    def has_vertex(self, location: CoordLike) -> bool:
        """True if the vertex is part of the playable board."""
        return Coord.from_value(location) in self.get_all_vertex_id_set()

    def has_edge(self, location: CoordLike) -> bool:
        """True if the edge is part of the playable board."""
        return Coord.from_value(location) in self.get_all_edge_id_set()

    def get_tiles_at_vertex(self, location: CoordLike) -> list[Tile]:
        """Return the existing tiles touching a vertex (at most three)."""
        return [
            self.tiles[hex_coord]
            for hex_coord in hex_utils.get_adj_hexes_from_vertex(location)
            if hex_coord in self.tiles
        ]

    def get_neighbors_of_vertex(self, location: CoordLike) -> list[Coord]:
        return hex_utils.get_adj_vertices_from_vertex(location)

    # ------------------------------------------------------------------
    # Tiles
    # ------------------------------------------------------------------

    def get_tile(self, location: CoordLike) -> Tile | None:
        return self.tiles.get(Coord.from_value(location))

    def get_all_tiles(self) -> list[Tile]:
        return list(self.tiles.values())

    def update_tile(
        self,
        location: CoordLike,
        terrain_type: TerrainType | str | None | _Unset = UNSET,
        number_token: int | None | _Unset = UNSET,
    ) -> Tile:
        """Create a tile, or change only the supplied fields of an existing one.

        ``terrain_type=None`` is treated as omitted; ``number_token=None``
        clears the token.
        """
        coord = hex_utils.require_hex(location)
        existing = self.tiles.get(coord)
        fields: dict[str, object] = {}
        if existing is not None:
            fields = {
                'terrain_type': existing.terrain_type,
                'number_token': existing.number_token,
            }
        if terrain_type is not UNSET and terrain_type is not None:
            fields['terrain_type'] = TerrainType(terrain_type)
        if number_token is not UNSET:
            fields['number_token'] = number_token
        tile = Tile(coord=coord, **fields)  # type: ignore[arg-type]
        self.tiles[coord] = tile
        if existing is None:
            self.invalidate_derived_sets()
        return tile

    def remove_tile(self, location: CoordLike) -> None:
        """Delete a tile if present."""
        if self.tiles.pop(Coord.from_value(location), None) is not None:
            self.invalidate_derived_sets()

    # ------------------------------------------------------------------
    # Roads
    # ------------------------------------------------------------------

    def get_road(self, location: CoordLike) -> Road | None:
        return self.roads.get(Coord.from_value(location))

    def get_all_roads(self) -> list[Road]:
        return list(self.roads.values())

    def update_road(self, location: CoordLike, owner_id: int | None) -> Road:
        coord = hex_utils.require_edge(location)
        road = Road(coord=coord, owner_id=owner_id)
        self.roads[coord] = road
        return road

    def remove_road(self, location: CoordLike) -> None:
        self.roads.pop(Coord.from_value(location), None)

    def get_road_owner(self, location: CoordLike) -> int | None:
        road = self.get_road(location)
        return road.owner_id if road is not None else None

    # ------------------------------------------------------------------
    # Settlements
    # ------------------------------------------------------------------

    def get_settlement(self, location: CoordLike) -> Settlement | None:
        return self.settlements.get(Coord.from_value(location))

    def get_all_settlements(self) -> list[Settlement]:
        return list(self.settlements.values())

    def update_settlement(
        self,
        location: CoordLike,
        owner_id: int | None | _Unset = UNSET,
        level: SettlementLevel | int | _Unset = UNSET,
    ) -> Settlement:
        """Create a settlement record, or merge the supplied fields into one.

        A new record with an owner and no level starts as a plain settlement.
        """
        coord = hex_utils.require_vertex(location)
        existing = self.settlements.get(coord)
        if existing is not None:
            fields: dict[str, object] = {
                'coord': existing.coord,
                'owner_id': existing.owner_id,
                'level': existing.level,
            }
            if owner_id is not UNSET:
                fields['owner_id'] = owner_id
            if level is not UNSET:
                fields['level'] = SettlementLevel(level)
            settlement = Settlement.model_validate(fields)
        else:
            new_owner = None if owner_id is UNSET else owner_id
            if level is UNSET:
                new_level = (
                    SettlementLevel.EMPTY
                    if new_owner is None
                    else SettlementLevel.SETTLEMENT
                )
            else:
                new_level = SettlementLevel(level)
            settlement = Settlement(coord=coord, owner_id=new_owner, level=new_level)
        self.settlements[coord] = settlement
        return settlement

    def remove_settlement(self, location: CoordLike) -> None:
        self.settlements.pop(Coord.from_value(location), None)

    def get_settlement_owner(self, location: CoordLike) -> int | None:
        settlement = self.get_settlement(location)
        return settlement.owner_id if settlement is not None else None

    # ------------------------------------------------------------------
    # Trading posts
    # ------------------------------------------------------------------

    def get_trading_post(self, location: CoordLike) -> TradingPost | None:
        return self.trading_posts.get(Coord.from_value(location))

    def get_all_trading_posts(self) -> list[TradingPost]:
        return list(self.trading_posts.values())

    def update_trading_post(
        self,
        location: CoordLike,
        index_list: Sequence[int],
        trade_list: Mapping[ResourceType | str, int] | None = None,
    ) -> TradingPost:
        """Create or wholly replace the trading post at a hex."""
        coord = hex_utils.require_hex(location)
        post = TradingPost(
            coord=coord,
            index_list=tuple(index_list),
            trade_list=dict(trade_list or {}),  # type: ignore[arg-type]
        )
        self.trading_posts[coord] = post
        return post

    def remove_trading_post(self, location: CoordLike) -> None:
        self.trading_posts.pop(Coord.from_value(location), None)

    def get_trading_post_vertices(self, location: CoordLike) -> list[Coord]:
        """Resolve a trading post's corner indices to vertex coordinates."""
        post = self.get_trading_post(location)
        if post is None:
            return []
        corners = hex_utils.get_vertices_from_hex(post.coord)
        return [corners[index] for index in post.index_list]

    def get_trading_posts_at_vertex(self, location: CoordLike) -> list[TradingPost]:
        """Return the trading posts servicing a vertex."""
        vertex = Coord.from_value(location)
        return [
            post
            for post in self.trading_posts.values()
            if vertex in self.get_trading_post_vertices(post.coord)
        ]

    # ------------------------------------------------------------------
    # Robber
    # ------------------------------------------------------------------

    def get_robber_coord(self) -> Coord:
        return self._robber_coord

    def update_robber_coord(self, location: CoordLike) -> None:
        self._robber_coord = hex_utils.require_hex(location)

    # ------------------------------------------------------------------
    # Ownership queries
    # ------------------------------------------------------------------

    def get_player_settlement_vertices(self, owner_id: int) -> set[Coord]:
        """Vertices holding a settlement or city owned by *owner_id*."""
        return {
            coord
            for coord, settlement in self.settlements.items()
            if settlement.owner_id == owner_id
        }

    def get_player_road_vertices(self, owner_id: int) -> set[Coord]:
        """Endpoint vertices of every road owned by *owner_id*."""
        vertices: set[Coord] = set()
        for coord, road in self.roads.items():
            if road.owner_id == owner_id:
                vertices.update(hex_utils.get_vertices_from_edge(coord))
        return vertices

    def get_settlement_neighbor_set(self) -> set[Coord]:
        """Every vertex one edge away from any settlement record."""
        neighbors: set[Coord] = set()
        for coord in self.settlements:
            neighbors.update(hex_utils.get_adj_vertices_from_vertex(coord))
        return neighbors

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    def filter(
        self, kind: EntityKind | str, predicate: Callable[[typing.Any], bool]
    ) -> list[typing.Any]:
        """Return the entities of one store for which *predicate* is true."""
        try:
            store_kind = EntityKind(kind)
        except ValueError as exc:
            raise InvalidEntityKind(f'Invalid entity type {kind!r}') from exc
        store: Mapping[Coord, typing.Any] = {
            EntityKind.TILES: self.tiles,
            EntityKind.ROADS: self.roads,
            EntityKind.SETTLEMENTS: self.settlements,
            EntityKind.TRADING_POSTS: self.trading_posts,
        }[store_kind]
        return [item for item in store.values() if predicate(item)]

