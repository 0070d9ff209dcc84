"""HTTP routes exposing the board to renderers and game-flow services.

Registers:

* ``GET /board``: load status and entity counts
* ``GET /board/template``: current board as a template
* ``GET /board/tiles``: every tile
* ``GET /board/tiles/{tile_id}``: one tile
* ``GET /board/vertices/{vertex_id}/tiles``: tiles touching a vertex
* ``GET /board/vertices/{vertex_id}/neighbors``: vertices one edge away
* ``PUT /board/settlements/{vertex_id}``: place or upgrade a settlement
* ``PUT /board/roads/{edge_id}``: place a road
* ``PUT /board/robber``: move the robber

Ids in paths are the ``"q,r,s"`` display form.  Coordinates of the wrong
shape are rejected with 422; well-formed coordinates that are not on the
board give 404.  Until a template has loaded, every route except
``GET /board`` answers 503.
"""

from __future__ import annotations

import typing

import fastapi
import pydantic

from .. import map_generator
from ..errors import HexBoardError
from ..game_map import UNSET, GameMap
from ..grid import hex_utils
from ..models import serializers
from ..models.board import Coord, Road, Settlement, SettlementLevel, Tile

router = fastapi.APIRouter(prefix='/board')


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class BoardSummary(pydantic.BaseModel):
    """Returned by GET /board."""

    initialized: bool
    tile_count: int
    road_count: int
    settlement_count: int
    trading_post_count: int
    vertex_count: int
    edge_count: int
    robber: str


class SettlementUpdate(pydantic.BaseModel):
    """Body of PUT /board/settlements/{vertex_id}; omitted fields are kept."""

    owner: int | None = None
    level: SettlementLevel | None = None


class RoadUpdate(pydantic.BaseModel):
    """Body of PUT /board/roads/{edge_id}."""

    owner: int | None = None


class RobberUpdate(pydantic.BaseModel):
    """Body of PUT /board/robber."""

    coord: str


class RobberResponse(pydantic.BaseModel):
    robber: str


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_generator(request: fastapi.Request) -> map_generator.MapGenerator:
    """Return the app's generator, or 503 if no board has been loaded."""
    generator: map_generator.MapGenerator | None = getattr(
        request.app.state, 'generator', None
    )
    if generator is None or not generator.is_initialized:
        raise fastapi.HTTPException(status_code=503, detail='Board is not loaded.')
    return generator


def get_game_map(
    generator: typing.Annotated[
        map_generator.MapGenerator, fastapi.Depends(get_generator)
    ],
) -> GameMap:
    return generator.game_map


Generator = typing.Annotated[map_generator.MapGenerator, fastapi.Depends(get_generator)]
Board = typing.Annotated[GameMap, fastapi.Depends(get_game_map)]


def _parse_coord(raw: str, kind: str) -> Coord:
    """Validate a path or body coordinate, mapping shape errors to 422."""
    validate = {
        'hex': hex_utils.require_hex,
        'vertex': hex_utils.require_vertex,
        'edge': hex_utils.require_edge,
    }[kind]
    try:
        return validate(raw)
    except HexBoardError as exc:
        raise fastapi.HTTPException(status_code=422, detail=str(exc)) from exc


# ---------------------------------------------------------------------------
# Read endpoints
# ---------------------------------------------------------------------------


@router.get('', response_model=BoardSummary)
async def board_summary(request: fastapi.Request) -> BoardSummary:
    """Report whether a board is loaded and how much is on it."""
    generator: map_generator.MapGenerator | None = getattr(
        request.app.state, 'generator', None
    )
    game_map = generator.game_map if generator is not None else GameMap()
    return BoardSummary(
        initialized=generator is not None and generator.is_initialized,
        tile_count=len(game_map.tiles),
        road_count=len(game_map.roads),
        settlement_count=len(game_map.settlements),
        trading_post_count=len(game_map.trading_posts),
        vertex_count=len(game_map.get_all_vertex_id_set()),
        edge_count=len(game_map.get_all_edge_id_set()),
        robber=game_map.get_robber_coord().to_id(),
    )


@router.get('/template')
async def board_template(generator: Generator) -> dict[str, typing.Any]:
    """Return the current board in template form."""
    return serializers.template_to_dict(generator.serialize_map_to_template())


@router.get('/tiles', response_model=list[Tile])
async def list_tiles(board: Board) -> list[Tile]:
    return board.get_all_tiles()


@router.get('/tiles/{tile_id}', response_model=Tile)
async def get_tile(tile_id: str, board: Board) -> Tile:
    """Return a single tile by its ``"q,r,s"`` id."""
    tile = board.get_tile(_parse_coord(tile_id, 'hex'))
    if tile is None:
        raise fastapi.HTTPException(
            status_code=404, detail=f'Tile {tile_id!r} not found'
        )
    return tile


@router.get('/vertices/{vertex_id}/tiles', response_model=list[Tile])
async def vertex_tiles(vertex_id: str, board: Board) -> list[Tile]:
    """Return the tiles touching a vertex."""
    vertex = _parse_coord(vertex_id, 'vertex')
    if not board.has_vertex(vertex):
        raise fastapi.HTTPException(
            status_code=404, detail=f'Vertex {vertex_id!r} is not on the board'
        )
    return board.get_tiles_at_vertex(vertex)


@router.get('/vertices/{vertex_id}/neighbors', response_model=list[str])
async def vertex_neighbors(vertex_id: str, board: Board) -> list[str]:
    """Return the ids of the on-board vertices one edge away."""
    vertex = _parse_coord(vertex_id, 'vertex')
    if not board.has_vertex(vertex):
        raise fastapi.HTTPException(
            status_code=404, detail=f'Vertex {vertex_id!r} is not on the board'
        )
    return [
        neighbor.to_id()
        for neighbor in board.get_neighbors_of_vertex(vertex)
        if board.has_vertex(neighbor)
    ]


# ---------------------------------------------------------------------------
# Write endpoints
# ---------------------------------------------------------------------------


@router.put('/settlements/{vertex_id}', response_model=Settlement)
async def put_settlement(
    vertex_id: str, body: SettlementUpdate, board: Board
) -> Settlement:
    """Create or update the settlement record at a vertex."""
    vertex = _parse_coord(vertex_id, 'vertex')
    if not board.has_vertex(vertex):
        raise fastapi.HTTPException(
            status_code=404, detail=f'Vertex {vertex_id!r} is not on the board'
        )
    return board.update_settlement(
        vertex,
        owner_id=body.owner if 'owner' in body.model_fields_set else UNSET,
        level=body.level if body.level is not None else UNSET,
    )


@router.put('/roads/{edge_id}', response_model=Road)
async def put_road(edge_id: str, body: RoadUpdate, board: Board) -> Road:
    """Create or update the road on an edge."""
    edge = _parse_coord(edge_id, 'edge')
    if not board.has_edge(edge):
        raise fastapi.HTTPException(
            status_code=404, detail=f'Edge {edge_id!r} is not on the board'
        )
    return board.update_road(edge, body.owner)


@router.put('/robber', response_model=RobberResponse)
async def put_robber(body: RobberUpdate, board: Board) -> RobberResponse:
    """Move the robber onto an existing tile."""
    hex_coord = _parse_coord(body.coord, 'hex')
    if board.get_tile(hex_coord) is None:
        raise fastapi.HTTPException(
            status_code=404, detail=f'Tile {body.coord!r} not found'
        )
    board.update_robber_coord(hex_coord)
    return RobberResponse(robber=hex_coord.to_id())
