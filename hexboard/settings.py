"""Board service settings read from environment variables."""

import os
import pathlib

MAPS_DIR: pathlib.Path = pathlib.Path(__file__).resolve().parent / 'maps'
STANDARD_MAP_PATH: pathlib.Path = MAPS_DIR / 'standard.json'

# File path or http(s) URL of the template loaded at startup.
TEMPLATE_SOURCE: str = os.environ.get('HEXBOARD_TEMPLATE') or str(STANDARD_MAP_PATH)

_seed = os.environ.get('HEXBOARD_SEED') or None
# Integer seeds are parsed; anything else seeds the generator as a string.
SEED: int | str | None = (
    int(_seed) if _seed is not None and _seed.lstrip('-').isdigit() else _seed
)

FETCH_TIMEOUT_SECONDS: float = float(os.environ.get('HEXBOARD_FETCH_TIMEOUT', '10.0'))

LOG_LEVEL: str = os.environ.get('LOG_LEVEL', 'INFO').upper()
