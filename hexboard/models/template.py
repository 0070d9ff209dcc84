"""Board template document models.

A template describes a board declaratively: an optional cube range of hexes
filled with default tile attributes, followed by explicit override lists for
tiles, trading posts, roads and settlements.  Field names on the wire are
camelCase (``terrainType``, ``numberToken``, ``indexList``, ``tradeList``);
unknown fields are ignored so older and newer documents stay loadable.
"""

from __future__ import annotations

import typing

import pydantic

from .board import ResourceType, SettlementLevel, TerrainType

CoordTriplet = tuple[pydantic.StrictInt, pydantic.StrictInt, pydantic.StrictInt]
NumberToken = typing.Annotated[pydantic.StrictInt, pydantic.Field(ge=2, le=12)]


class _TemplateModel(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(populate_by_name=True, extra='ignore')


class TileRange(_TemplateModel):
    """Inclusive ``[min, max]`` bounds per cube axis."""

    q: tuple[pydantic.StrictInt, pydantic.StrictInt] | None = None
    r: tuple[pydantic.StrictInt, pydantic.StrictInt] | None = None
    s: tuple[pydantic.StrictInt, pydantic.StrictInt] | None = None

    @property
    def is_complete(self) -> bool:
        """True when all three axes are bounded; otherwise the fill is skipped."""
        return self.q is not None and self.r is not None and self.s is not None


class TileDefaults(_TemplateModel):
    """Attributes given to every hex produced by the range fill."""

    terrain_type: TerrainType = pydantic.Field(
        default=TerrainType.SEA, alias='terrainType'
    )
    number_token: NumberToken | None = pydantic.Field(default=None, alias='numberToken')


class TileOverride(_TemplateModel):
    """An explicit tile entry.

    Omitted attributes leave an existing tile's value unchanged; an explicit
    ``null`` token clears it.
    """

    coord: CoordTriplet
    terrain_type: TerrainType | None = pydantic.Field(
        default=None,
        validation_alias=pydantic.AliasChoices('terrainType', 'type', 'terrain_type'),
        serialization_alias='terrainType',
    )
    number_token: NumberToken | None = pydantic.Field(default=None, alias='numberToken')


class TileSection(_TemplateModel):
    range: TileRange | None = None
    defaults: TileDefaults = pydantic.Field(default_factory=TileDefaults)
    overrides: list[TileOverride] = pydantic.Field(default_factory=list)


class TradingPostOverride(_TemplateModel):
    coord: CoordTriplet
    index_list: list[pydantic.StrictInt] = pydantic.Field(
        default_factory=list, alias='indexList'
    )
    trade_list: dict[ResourceType, pydantic.StrictInt] = pydantic.Field(
        default_factory=dict, alias='tradeList'
    )


class TradingPostSection(_TemplateModel):
    overrides: list[TradingPostOverride] = pydantic.Field(default_factory=list)


class RoadOverride(_TemplateModel):
    coord: CoordTriplet
    owner: int | None = None


class RoadSection(_TemplateModel):
    overrides: list[RoadOverride] = pydantic.Field(default_factory=list)


class SettlementOverride(_TemplateModel):
    coord: CoordTriplet
    owner: int | None = None
    level: SettlementLevel | None = None


class SettlementSection(_TemplateModel):
    overrides: list[SettlementOverride] = pydantic.Field(default_factory=list)


class MapTemplate(_TemplateModel):
    """A complete board template document."""

    tiles: TileSection = pydantic.Field(default_factory=TileSection)
    tradingposts: TradingPostSection = pydantic.Field(
        default_factory=TradingPostSection
    )
    roads: RoadSection = pydantic.Field(default_factory=RoadSection)
    settlements: SettlementSection = pydantic.Field(default_factory=SettlementSection)
    robber: CoordTriplet | None = None
