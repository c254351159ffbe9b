"""
BOUNDARY READER
---------------
Serves administrative boundaries from the downloaded GeoJSON files.

Per request: load the level's file -> hash it -> filter by parent code ->
strip attributes down to what the map needs -> respond with the
collection tagged with the content hash as its version.

Levels: 0 = countries, 1 = states/provinces, 2 = counties.
Parent codes: "US" selects the states of a country, "US-CA" the
counties of a state.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from .cache_service import CacheService
from .config import ServerConfig
from .datasets import DATASETS, DatasetDescriptor, get_dataset
from .errors import DataNotFoundError, InvalidParameterError
from .levels import COUNTRY_CODE, COUNTY, LEVELS, REGION_CODE, STATE, STATE_IDENTIFIERS

logger = logging.getLogger(__name__)

INVALID_LEVEL_MESSAGE = "Invalid level. Must be 0 (countries), 1 (states), or 2 (counties)"


def parse_level(raw: Any) -> int:
    """Accept 0, 1, 2 (or their string forms); anything else is rejected."""
    text = str(raw).strip()
    # ascii only: int() would also take other scripts' digits
    if not (text.isascii() and text.isdigit()):
        raise InvalidParameterError(INVALID_LEVEL_MESSAGE)
    level = int(text)
    if level not in LEVELS:
        raise InvalidParameterError(INVALID_LEVEL_MESSAGE)
    return level


def split_state_code(parent_code: str) -> tuple[str, str | None]:
    """Split US-CA into (US, CA); a bare US has no state part."""
    parts = parent_code.split("-")
    return parts[0], (parts[1] if len(parts) > 1 else None)


def in_country(props: Mapping[str, Any], country_code: str) -> bool:
    if COUNTRY_CODE(props) == country_code:
        return True
    region = REGION_CODE(props)
    return isinstance(region, str) and region.startswith(country_code + "-")


def in_state(props: Mapping[str, Any], country_code: str, state_code: str | None) -> bool:
    # with no state part, features lacking every state identifier match
    if COUNTRY_CODE(props) != country_code:
        return False
    return any(lookup(props) == state_code for lookup in STATE_IDENTIFIERS)


def filter_features(features: list[dict], level: int, parent_code: str | None) -> list[dict]:
    if not parent_code:
        return features

    if level == STATE:
        return [f for f in features if in_country(f.get("properties") or {}, parent_code)]

    if level == COUNTY:
        country_code, state_code = split_state_code(parent_code)
        return [f for f in features if in_state(f.get("properties") or {}, country_code, state_code)]

    # countries have no parent
    return features


def simplify_feature(feature: dict, level: int) -> dict:
    """Reduce a source feature to {code, name, level} plus its geometry."""
    lookups = LEVELS[level]
    props = feature.get("properties") or {}

    out = {
        "type": "Feature",
        "properties": {
            "code": lookups.code(props) or "UNKNOWN",
            "name": lookups.name(props) or "Unknown",
            "level": level,
        },
        "geometry": feature.get("geometry"),
    }
    if feature.get("bbox") is not None:
        out["bbox"] = feature["bbox"]
    return out


class BoundaryService:
    def __init__(
        self,
        config: ServerConfig,
        cache: CacheService,
        datasets: Mapping[str, DatasetDescriptor] | None = None,
    ):
        self.config = config
        self.cache = cache
        self.datasets = DATASETS if datasets is None else datasets

    @property
    def dataset(self) -> DatasetDescriptor:
        return get_dataset(self.config.boundary_dataset, self.datasets)

    def level_filename(self, level: int) -> str:
        dataset = self.dataset
        if level >= len(dataset.downloads):
            raise InvalidParameterError(f"Invalid boundary level: {level}")
        return dataset.stored_filename(dataset.downloads[level])

    def file_path(self, filename: str) -> Path:
        return self.config.data_dir / filename

    def get_boundaries(self, level: Any, parent_code: str | None = None) -> dict:
        level = parse_level(level)
        parent_code = parent_code or None

        filename = self.level_filename(level)
        path = self.file_path(filename)
        if not path.is_file():
            raise DataNotFoundError(
                f"Boundary data not available for level {level}. Please download the data first."
            )

        raw = path.read_bytes()
        geojson = json.loads(raw)
        version = self.cache.update_file_hash(filename, raw)

        features = filter_features(geojson.get("features") or [], level, parent_code)
        simplified = [simplify_feature(f, level) for f in features]
        logger.debug("level=%s parent=%s -> %d features from %s", level, parent_code, len(simplified), filename)

        return {
            "data": {"type": "FeatureCollection", "features": simplified},
            "version": version,
            "metadata": {
                "level": level,
                "parentCode": parent_code,
                "count": len(simplified),
                "sourceFile": filename,
            },
        }
