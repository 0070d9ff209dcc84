"""Board construction from templates, plus randomised attribute assignment.

A :class:`MapGenerator` owns one :class:`~hexboard.game_map.GameMap`.  Loading
a template builds a brand-new map and swaps it in only when every section
applied cleanly, so a broken template never leaves a half-populated board
behind.

Template sources
----------------
``load_map_from_template`` accepts any of:

* a :class:`~hexboard.models.template.MapTemplate` instance
* a plain ``dict`` in the JSON template shape
* a local file path (``str`` or :class:`pathlib.Path`)
* an ``http://`` or ``https://`` URL, fetched with :mod:`httpx`

Randomised assignment
---------------------
Distributions map a value to how many times it should appear, e.g.
``{TerrainType.FOREST: 4, TerrainType.HILLS: 3, ...}``.  The pool is expanded
in mapping order, shuffled with the generator's seeded :class:`random.Random`
and dealt to the target coordinates in the order given, so the same seed and
inputs always give the same board.
"""

from __future__ import annotations

import asyncio
import enum
import json
import logging
import pathlib
import random
import typing
from collections.abc import Mapping, Sequence

import httpx
import pydantic

from . import settings
from .errors import (
    InvalidAttributeKind,
    InvalidAttributeValue,
    InvalidTemplate,
    PoolSizeMismatch,
)
from .game_map import UNSET, GameMap
from .grid import hex_utils
from .models.board import Coord, CoordLike, TerrainType
from .models.template import (
    MapTemplate,
    RoadOverride,
    RoadSection,
    SettlementOverride,
    SettlementSection,
    TileOverride,
    TileSection,
    TradingPostOverride,
    TradingPostSection,
)

logger = logging.getLogger(__name__)

TemplateSource = MapTemplate | Mapping[str, typing.Any] | str | pathlib.Path

# ---------------------------------------------------------------------------
# Standard distributions
# ---------------------------------------------------------------------------

# Land tiles of the standard 19-hex board.
STANDARD_TERRAIN_DISTRIBUTION: dict[TerrainType, int] = {
    TerrainType.FOREST: 4,
    TerrainType.PASTURE: 4,
    TerrainType.FIELDS: 4,
    TerrainType.HILLS: 3,
    TerrainType.MOUNTAINS: 3,
    TerrainType.DESERT: 1,
}

# One token per non-desert land tile (18 total).
STANDARD_NUMBER_TOKEN_DISTRIBUTION: dict[int, int] = {
    2: 1,
    3: 2,
    4: 2,
    5: 2,
    6: 2,
    8: 2,
    9: 2,
    10: 2,
    11: 2,
    12: 1,
}


class AttributeKind(enum.StrEnum):
    """Tile attribute targeted by :meth:`MapGenerator.assign_terrain_attribute_random`."""

    TERRAIN_TYPE = 'terrainType'
    NUMBER_TOKEN = 'numberToken'


_ATTRIBUTE_KIND_ALIASES: dict[str, AttributeKind] = {
    'terrain_type': AttributeKind.TERRAIN_TYPE,
    'number_token': AttributeKind.NUMBER_TOKEN,
}


def _coerce_attribute_kind(kind: AttributeKind | str) -> AttributeKind:
    if isinstance(kind, str) and kind in _ATTRIBUTE_KIND_ALIASES:
        return _ATTRIBUTE_KIND_ALIASES[kind]
    try:
        return AttributeKind(kind)
    except ValueError as exc:
        raise InvalidAttributeKind(
            f"attribute_kind must be 'terrainType' or 'numberToken', got {kind!r}"
        ) from exc


MIN_NUMBER_TOKEN = 2
MAX_NUMBER_TOKEN = 12


def _build_pool(
    distribution: Mapping[typing.Any, int], kind: AttributeKind
) -> list[typing.Any]:
    """Expand *distribution* into a flat list of validated values."""
    pool: list[typing.Any] = []
    for value, count in distribution.items():
        try:
            if kind is AttributeKind.TERRAIN_TYPE:
                coerced: typing.Any = TerrainType(value)
            else:
                if isinstance(value, bool):
                    raise ValueError(value)
                coerced = int(value)
        except (TypeError, ValueError) as exc:
            raise InvalidAttributeValue(f'Invalid {kind} value: {value!r}') from exc
        if kind is AttributeKind.NUMBER_TOKEN and not (
            MIN_NUMBER_TOKEN <= coerced <= MAX_NUMBER_TOKEN
        ):
            raise InvalidAttributeValue(
                f'Number token {coerced} is outside '
                f'{MIN_NUMBER_TOKEN}-{MAX_NUMBER_TOKEN}'
            )
        pool.extend([coerced] * count)
    return pool


def _check_pool_size(
    pool: Sequence[typing.Any], targets: int, kind: AttributeKind
) -> None:
    if len(pool) != targets:
        raise PoolSizeMismatch(
            f'{kind} pool size ({len(pool)}) does not match target '
            f'coordinates size ({targets})'
        )


def _describe_source(source: TemplateSource) -> str:
    if isinstance(source, (str, pathlib.Path)):
        return str(source)
    return f'<{type(source).__name__}>'


# ---------------------------------------------------------------------------
# Template parsing
# ---------------------------------------------------------------------------


def parse_template(data: typing.Any) -> MapTemplate:
    """Validate raw template data, raising :class:`InvalidTemplate` on failure."""
    if isinstance(data, MapTemplate):
        return data
    try:
        return MapTemplate.model_validate(data)
    except pydantic.ValidationError as exc:
        raise InvalidTemplate(f'Invalid board template: {exc}') from exc


class MapGenerator:
    """Builds, loads and randomises the board held in :attr:`game_map`."""

    def __init__(
        self, game_map: GameMap | None = None, seed: int | str | None = None
    ) -> None:
        self.game_map = game_map if game_map is not None else GameMap()
        self._rng = random.Random(seed)
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        """True once a template has been loaded successfully."""
        return self._initialized

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load_map_from_template(self, source: TemplateSource) -> bool:
        """Fetch, validate and apply a template; return the initialized flag.

        Failures are logged and swallowed: the current map and flag are left
        exactly as they were, so callers check the return value (or
        :attr:`is_initialized`) instead of catching.
        """
        label = _describe_source(source)
        try:
            template = await self._read_template(source)
            self.apply_template(template)
        except (ValueError, OSError, httpx.HTTPError, httpx.InvalidURL):
            logger.exception('Failed to load board template from %s', label)
            return self._initialized
        logger.info(
            'Loaded board template from %s: %d tiles, %d trading posts',
            label,
            len(self.game_map.tiles),
            len(self.game_map.trading_posts),
        )
        return self._initialized

    async def load_standard_map(self) -> bool:
        """Load the bundled standard board."""
        return await self.load_map_from_template(settings.STANDARD_MAP_PATH)

    async def _read_template(self, source: TemplateSource) -> MapTemplate:
        if isinstance(source, MapTemplate):
            return source
        if isinstance(source, Mapping):
            return parse_template(source)

        location = str(source)
        if location.startswith(('http://', 'https://')):
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    location, timeout=settings.FETCH_TIMEOUT_SECONDS
                )
                response.raise_for_status()
                try:
                    data = response.json()
                except json.JSONDecodeError as exc:
                    raise InvalidTemplate(f'{location} is not valid JSON') from exc
        else:
            loop = asyncio.get_running_loop()
            text = await loop.run_in_executor(
                None, pathlib.Path(location).read_text, 'utf-8'
            )
            try:
                data = json.loads(text)
            except json.JSONDecodeError as exc:
                raise InvalidTemplate(f'{location} is not valid JSON') from exc
        return parse_template(data)

    def apply_template(self, template: MapTemplate | Mapping[str, typing.Any]) -> GameMap:
        """Build a fresh map from *template* and make it the current map.

        Raises instead of logging; the current map is only replaced when the
        whole template applied.
        """
        template = parse_template(template)
        game_map = GameMap()
        try:
            self._populate(game_map, template)
        except pydantic.ValidationError as exc:
            raise InvalidTemplate(f'Invalid board template: {exc}') from exc

        # Eager so the first legality query does not pay for it.
        game_map.get_all_vertex_id_set()
        game_map.get_all_edge_id_set()

        self.game_map = game_map
        self._initialized = True
        return game_map

    @staticmethod
    def _populate(game_map: GameMap, template: MapTemplate) -> None:
        tiles = template.tiles
        if tiles.range is not None and tiles.range.is_complete:
            q_min, q_max = tiles.range.q  # type: ignore[misc]
            r_min, r_max = tiles.range.r  # type: ignore[misc]
            s_min, s_max = tiles.range.s  # type: ignore[misc]
            for q in range(q_min, q_max + 1):
                for r in range(r_min, r_max + 1):
                    for s in range(s_min, s_max + 1):
                        if q + r + s == 0:
                            game_map.update_tile(
                                (q, r, s),
                                tiles.defaults.terrain_type,
                                tiles.defaults.number_token,
                            )

        for tile in tiles.overrides:
            game_map.update_tile(
                tile.coord,
                terrain_type=tile.terrain_type,
                number_token=(
                    tile.number_token
                    if 'number_token' in tile.model_fields_set
                    else UNSET
                ),
            )

        for post in template.tradingposts.overrides:
            game_map.update_trading_post(post.coord, post.index_list, post.trade_list)

        for road in template.roads.overrides:
            game_map.update_road(road.coord, road.owner)

        for settlement in template.settlements.overrides:
            game_map.update_settlement(
                settlement.coord,
                owner_id=(
                    settlement.owner if 'owner' in settlement.model_fields_set else UNSET
                ),
                level=settlement.level if settlement.level is not None else UNSET,
            )

        if template.robber is not None:
            game_map.update_robber_coord(template.robber)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def serialize_map_to_template(self) -> MapTemplate:
        """Export the current map as explicit override lists (no range)."""
        game_map = self.game_map
        return MapTemplate(
            tiles=TileSection(
                overrides=[
                    TileOverride(
                        coord=tile.coord.as_tuple(),
                        terrain_type=tile.terrain_type,
                        number_token=tile.number_token,
                    )
                    for tile in game_map.get_all_tiles()
                ]
            ),
            tradingposts=TradingPostSection(
                overrides=[
                    TradingPostOverride(
                        coord=post.coord.as_tuple(),
                        index_list=list(post.index_list),
                        trade_list=dict(post.trade_list),
                    )
                    for post in game_map.get_all_trading_posts()
                ]
            ),
            roads=RoadSection(
                overrides=[
                    RoadOverride(coord=road.coord.as_tuple(), owner=road.owner_id)
                    for road in game_map.get_all_roads()
                ]
            ),
            settlements=SettlementSection(
                overrides=[
                    SettlementOverride(
                        coord=settlement.coord.as_tuple(),
                        owner=settlement.owner_id,
                        level=settlement.level,
                    )
                    for settlement in game_map.get_all_settlements()
                ]
            ),
            robber=game_map.get_robber_coord().as_tuple(),
        )

    # ------------------------------------------------------------------
    # Randomised assignment
    # ------------------------------------------------------------------

    def assign_terrain_attribute_random(
        self,
        target_coords: Sequence[CoordLike],
        attribute_distribution: Mapping[typing.Any, int],
        attribute_kind: AttributeKind | str,
    ) -> None:
        """Deal a shuffled pool of attribute values onto *target_coords*.

        Raises:
            InvalidAttributeKind: *attribute_kind* is not terrain or token.
            InvalidAttributeValue: a pool value is not a terrain type, or is
                not a token between 2 and 12.
            PoolSizeMismatch: the distribution does not sum to the number of
                targets.
            InvalidCoordinate: a target is not a hex coordinate.

        Every check runs before the first tile is written.
        """
        kind = _coerce_attribute_kind(attribute_kind)
        assign_terrain = kind is AttributeKind.TERRAIN_TYPE

        pool = _build_pool(attribute_distribution, kind)
        _check_pool_size(pool, len(target_coords), kind)
        coords = [hex_utils.require_hex(coord) for coord in target_coords]

        self._rng.shuffle(pool)
        for coord, value in zip(coords, pool, strict=True):
            if assign_terrain:
                self.game_map.update_tile(coord, terrain_type=value)
            elif coord in self.game_map.tiles:
                self.game_map.update_tile(coord, number_token=value)
            else:
                self.game_map.update_tile(
                    coord, terrain_type=TerrainType.DESERT, number_token=value
                )

    def assign_terrain_types_random(
        self,
        target_coords: Sequence[CoordLike],
        type_distribution: Mapping[TerrainType | str, int],
    ) -> None:
        self.assign_terrain_attribute_random(
            target_coords, type_distribution, AttributeKind.TERRAIN_TYPE
        )

    def assign_number_tokens_random(
        self,
        target_coords: Sequence[CoordLike],
        token_distribution: Mapping[int, int],
    ) -> None:
        self.assign_terrain_attribute_random(
            target_coords, token_distribution, AttributeKind.NUMBER_TOKEN
        )

    def shuffle_land_tiles(
        self,
        terrain_distribution: Mapping[TerrainType | str, int] | None = None,
        token_distribution: Mapping[int, int] | None = None,
    ) -> None:
        """Re-deal terrain and tokens across every non-sea tile.

        Deserts are left without a token; every other land tile receives one.
        Defaults to the standard 19-tile distributions.  Both pools are checked
        before any tile changes.
        """
        if terrain_distribution is None:
            terrain_distribution = STANDARD_TERRAIN_DISTRIBUTION
        if token_distribution is None:
            token_distribution = STANDARD_NUMBER_TOKEN_DISTRIBUTION

        land: list[Coord] = [
            tile.coord
            for tile in self.game_map.get_all_tiles()
            if tile.terrain_type != TerrainType.SEA
        ]
        terrain_pool = _build_pool(terrain_distribution, AttributeKind.TERRAIN_TYPE)
        _check_pool_size(terrain_pool, len(land), AttributeKind.TERRAIN_TYPE)
        token_pool = _build_pool(token_distribution, AttributeKind.NUMBER_TOKEN)
        _check_pool_size(
            token_pool,
            sum(1 for terrain in terrain_pool if terrain != TerrainType.DESERT),
            AttributeKind.NUMBER_TOKEN,
        )

        self.assign_terrain_types_random(land, terrain_distribution)

        producing: list[Coord] = []
        for coord in land:
            if self.game_map.tiles[coord].terrain_type == TerrainType.DESERT:
                self.game_map.update_tile(coord, number_token=None)
            else:
                producing.append(coord)
        self.assign_number_tokens_random(producing, token_distribution)

    def swap_terrain_by_id(
        self,
        id_a: CoordLike,
        id_b: CoordLike,
        swap_terrain: bool = True,
        swap_token: bool = True,
    ) -> None:
        """Exchange terrain and/or token between two existing tiles."""
        tile_a = self.game_map.get_tile(id_a)
        tile_b = self.game_map.get_tile(id_b)
        if tile_a is None or tile_b is None:
            logger.warning(
                'Cannot swap: one or both tiles do not exist (%s, %s)',
                hex_utils.coord_to_id(id_a),
                hex_utils.coord_to_id(id_b),
            )
            return

        self.game_map.update_tile(
            tile_a.coord,
            terrain_type=tile_b.terrain_type if swap_terrain else UNSET,
            number_token=tile_b.number_token if swap_token else UNSET,
        )
        self.game_map.update_tile(
            tile_b.coord,
            terrain_type=tile_a.terrain_type if swap_terrain else UNSET,
            number_token=tile_a.number_token if swap_token else UNSET,
        )
