"""Unit tests for the GameMap entity store."""

from __future__ import annotations

import unittest

import pydantic

from hexboard.errors import InvalidCoordinate, InvalidEntityKind
from hexboard.game_map import EntityKind, GameMap
from hexboard.grid import hex_utils
from hexboard.models.board import (
    Coord,
    ResourceType,
    SettlementLevel,
    TerrainType,
)

ORIGIN = Coord(q=0, r=0, s=0)


def _single_tile_map() -> GameMap:
    game_map = GameMap()
    game_map.update_tile(ORIGIN, TerrainType.FOREST, 8)
    return game_map


class TestDerivedSets(unittest.TestCase):
    """Tests for the on-board vertex and edge sets."""

    def test_single_tile_vertices(self) -> None:
        """A lone origin tile has exactly its 6 corners on the board."""
        game_map = _single_tile_map()
        vertices = game_map.get_all_vertex_id_set()
        self.assertEqual(len(vertices), 6)
        for vertex in hex_utils.get_vertices_from_hex(ORIGIN):
            self.assertTrue(game_map.has_vertex(vertex))

    def test_far_vertex_off_board(self) -> None:
        """A vertex two hexes away is not on a single-tile board."""
        game_map = _single_tile_map()
        self.assertTrue(hex_utils.is_valid_vertex((3, -2, 0)))
        self.assertFalse(game_map.has_vertex((3, -2, 0)))

    def test_single_tile_edges(self) -> None:
        game_map = _single_tile_map()
        self.assertEqual(len(game_map.get_all_edge_id_set()), 6)
        self.assertTrue(game_map.has_edge('1,-1,0'))

    def test_shared_corners_counted_once(self) -> None:
        """Two neighbouring tiles share 2 vertices and 1 edge."""
        game_map = _single_tile_map()
        game_map.update_tile((1, -1, 0))
        self.assertEqual(len(game_map.get_all_vertex_id_set()), 10)
        self.assertEqual(len(game_map.get_all_edge_id_set()), 11)

    def test_cache_invalidated_on_tile_add_and_remove(self) -> None:
        game_map = _single_tile_map()
        self.assertFalse(game_map.has_vertex((2, -1, 0)))
        game_map.update_tile((1, -1, 0))
        self.assertTrue(game_map.has_vertex((2, -1, 0)))
        game_map.remove_tile((1, -1, 0))
        self.assertFalse(game_map.has_vertex((2, -1, 0)))

    def test_cache_kept_on_attribute_change(self) -> None:
        """Changing an existing tile's terrain does not rebuild the sets."""
        game_map = _single_tile_map()
        before = game_map.get_all_vertex_id_set()
        game_map.update_tile(ORIGIN, TerrainType.HILLS)
        self.assertIs(game_map.get_all_vertex_id_set(), before)


class TestTiles(unittest.TestCase):
    """Tests for tile create/update/remove."""

    def test_update_creates_tile(self) -> None:
        game_map = GameMap()
        tile = game_map.update_tile('0,0,0', 'desert')
        self.assertEqual(tile.terrain_type, TerrainType.DESERT)
        self.assertIs(game_map.get_tile(ORIGIN), tile)

    def test_omitted_fields_unchanged(self) -> None:
        """Updating only the token leaves the terrain as it was."""
        game_map = _single_tile_map()
        game_map.update_tile(ORIGIN, number_token=5)
        tile = game_map.get_tile(ORIGIN)
        assert tile is not None
        self.assertEqual(tile.terrain_type, TerrainType.FOREST)
        self.assertEqual(tile.number_token, 5)

    def test_none_token_clears(self) -> None:
        game_map = _single_tile_map()
        game_map.update_tile(ORIGIN, number_token=None)
        self.assertIsNone(game_map.get_tile(ORIGIN).number_token)  # type: ignore[union-attr]

    def test_none_terrain_ignored(self) -> None:
        game_map = _single_tile_map()
        game_map.update_tile(ORIGIN, terrain_type=None)
        self.assertEqual(
            game_map.get_tile(ORIGIN).terrain_type,  # type: ignore[union-attr]
            TerrainType.FOREST,
        )

    def test_invalid_token_rejected(self) -> None:
        game_map = _single_tile_map()
        with self.assertRaises(pydantic.ValidationError):
            game_map.update_tile(ORIGIN, number_token=13)
        self.assertEqual(game_map.get_tile(ORIGIN).number_token, 8)  # type: ignore[union-attr]

    def test_tile_requires_hex(self) -> None:
        with self.assertRaises(InvalidCoordinate):
            GameMap().update_tile((1, 0, 0))

    def test_remove_is_idempotent(self) -> None:
        game_map = _single_tile_map()
        game_map.remove_tile(ORIGIN)
        game_map.remove_tile(ORIGIN)
        self.assertEqual(game_map.get_all_tiles(), [])

    def test_tiles_at_vertex(self) -> None:
        """Only existing tiles among the three candidates are returned."""
        game_map = _single_tile_map()
        game_map.update_tile((1, -1, 0), TerrainType.HILLS)
        tiles = game_map.get_tiles_at_vertex((1, 0, 0))
        self.assertEqual(
            {t.coord for t in tiles}, {ORIGIN, Coord(q=1, r=-1, s=0)}
        )

    def test_records_are_frozen(self) -> None:
        tile = _single_tile_map().get_tile(ORIGIN)
        with self.assertRaises(pydantic.ValidationError):
            tile.number_token = 3  # type: ignore[misc,union-attr]


class TestSettlementsAndRoads(unittest.TestCase):
    """Tests for settlement and road stores."""

    def test_settlement_merge(self) -> None:
        """A later update that omits the owner keeps it."""
        game_map = _single_tile_map()
        game_map.update_settlement((1, 0, 0), owner_id=1)
        game_map.update_settlement((1, 0, 0), level=2)
        settlement = game_map.get_settlement((1, 0, 0))
        assert settlement is not None
        self.assertEqual(settlement.owner_id, 1)
        self.assertEqual(settlement.level, SettlementLevel.CITY)

    def test_settlement_merge_validates_owner(self) -> None:
        """Merging a bad owner is rejected like creating one, and nothing is stored."""
        game_map = _single_tile_map()
        with self.assertRaises(pydantic.ValidationError):
            game_map.update_settlement((1, 0, 0), owner_id='not-an-int')  # type: ignore[arg-type]
        game_map.update_settlement((1, 0, 0), owner_id=1)
        with self.assertRaises(pydantic.ValidationError):
            game_map.update_settlement((1, 0, 0), owner_id='not-an-int')  # type: ignore[arg-type]
        self.assertEqual(game_map.get_settlement_owner((1, 0, 0)), 1)

    def test_new_settlement_with_owner_defaults_to_level_one(self) -> None:
        game_map = GameMap()
        settlement = game_map.update_settlement((0, -1, 0), owner_id=3)
        self.assertEqual(settlement.level, SettlementLevel.SETTLEMENT)

    def test_settlement_requires_vertex(self) -> None:
        with self.assertRaises(InvalidCoordinate):
            GameMap().update_settlement((0, 0, 0), owner_id=1)

    def test_road_requires_edge(self) -> None:
        with self.assertRaises(InvalidCoordinate):
            GameMap().update_road((2, 0, -2), 1)

    def test_owners(self) -> None:
        game_map = _single_tile_map()
        game_map.update_road((1, -1, 0), 0)
        game_map.update_settlement((1, 0, 0), owner_id=0)
        self.assertEqual(game_map.get_road_owner((1, -1, 0)), 0)
        self.assertEqual(game_map.get_settlement_owner((1, 0, 0)), 0)
        self.assertIsNone(game_map.get_road_owner((-1, 1, 0)))
        self.assertIsNone(game_map.get_settlement_owner((0, 0, 1)))

    def test_player_vertex_sets(self) -> None:
        game_map = _single_tile_map()
        game_map.update_road((1, -1, 0), 0)
        game_map.update_road((-1, 1, 0), 1)
        game_map.update_settlement((0, 0, 1), owner_id=0)
        self.assertEqual(
            game_map.get_player_road_vertices(0),
            {Coord(q=1, r=0, s=0), Coord(q=0, r=-1, s=0)},
        )
        self.assertEqual(game_map.get_player_settlement_vertices(0), {Coord(q=0, r=0, s=1)})
        self.assertEqual(game_map.get_player_settlement_vertices(1), set())

    def test_settlement_neighbor_set(self) -> None:
        game_map = _single_tile_map()
        game_map.update_settlement((1, 0, 0), owner_id=0)
        self.assertEqual(
            game_map.get_settlement_neighbor_set(),
            set(hex_utils.get_adj_vertices_from_vertex((1, 0, 0))),
        )

    def test_remove_settlement_and_road(self) -> None:
        game_map = _single_tile_map()
        game_map.update_settlement((1, 0, 0), owner_id=0)
        game_map.update_road((1, -1, 0), 0)
        game_map.remove_settlement((1, 0, 0))
        game_map.remove_road((1, -1, 0))
        game_map.remove_road((1, -1, 0))
        self.assertEqual(game_map.get_all_settlements(), [])
        self.assertEqual(game_map.get_all_roads(), [])


class TestTradingPosts(unittest.TestCase):
    """Tests for trading post storage and vertex lookup."""

    def test_replace_not_merge(self) -> None:
        game_map = GameMap()
        game_map.update_trading_post((0, 0, 0), [0, 1], {ResourceType.WOOD: 2})
        game_map.update_trading_post((0, 0, 0), [3])
        post = game_map.get_trading_post((0, 0, 0))
        assert post is not None
        self.assertEqual(post.index_list, (3,))
        self.assertEqual(post.trade_list, {})

    def test_post_vertices(self) -> None:
        game_map = GameMap()
        game_map.update_trading_post((3, -3, 0), [3, 4])
        self.assertEqual(
            game_map.get_trading_post_vertices((3, -3, 0)),
            [Coord(q=2, r=-3, s=0), Coord(q=3, r=-2, s=0)],
        )
        self.assertEqual(len(game_map.get_trading_posts_at_vertex((2, -3, 0))), 1)
        self.assertEqual(game_map.get_trading_posts_at_vertex((1, 0, 0)), [])

    def test_remove_trading_post(self) -> None:
        game_map = GameMap()
        game_map.update_trading_post((0, 0, 0), [0])
        game_map.remove_trading_post((0, 0, 0))
        self.assertEqual(game_map.get_all_trading_posts(), [])
        self.assertEqual(game_map.get_trading_post_vertices((0, 0, 0)), [])


class TestRobber(unittest.TestCase):
    """Tests for the robber position."""

    def test_starts_at_origin(self) -> None:
        self.assertEqual(GameMap().get_robber_coord(), ORIGIN)

    def test_move(self) -> None:
        game_map = GameMap()
        game_map.update_robber_coord('1,-1,0')
        self.assertEqual(game_map.get_robber_coord(), Coord(q=1, r=-1, s=0))

    def test_requires_hex(self) -> None:
        with self.assertRaises(InvalidCoordinate):
            GameMap().update_robber_coord((1, 0, 0))


class TestCloneAndFilter(unittest.TestCase):
    """Tests for clone() and filter()."""

    def test_clone_is_independent(self) -> None:
        """Mutating a clone's tile leaves the original untouched."""
        original = _single_tile_map()
        original.update_settlement((1, 0, 0), owner_id=1)
        copy = original.clone()
        copy.update_tile(ORIGIN, TerrainType.DESERT, None)
        copy.update_settlement((1, 0, 0), level=2)
        copy.update_tile((1, -1, 0))

        tile = original.get_tile(ORIGIN)
        assert tile is not None
        self.assertEqual(tile.terrain_type, TerrainType.FOREST)
        self.assertEqual(tile.number_token, 8)
        self.assertEqual(
            original.get_settlement((1, 0, 0)).level,  # type: ignore[union-attr]
            SettlementLevel.SETTLEMENT,
        )
        self.assertEqual(len(original.get_all_vertex_id_set()), 6)

    def test_filter(self) -> None:
        game_map = _single_tile_map()
        game_map.update_tile((1, -1, 0), TerrainType.SEA)
        land = game_map.filter(EntityKind.TILES, lambda t: t.terrain_type != 'sea')
        self.assertEqual([t.coord for t in land], [ORIGIN])
        self.assertEqual(game_map.filter('roads', lambda r: True), [])

    def test_filter_bad_kind(self) -> None:
        with self.assertRaises(InvalidEntityKind):
            GameMap().filter('players', lambda x: True)


if __name__ == '__main__':
    unittest.main()
