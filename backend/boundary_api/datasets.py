"""
DATASET REGISTRY
----------------
Static description of every downloadable dataset.

Each dataset has a key (e.g. NATURAL_EARTH), a file prefix and an
ordered list of resources. For the boundary dataset the order matters:
downloads[0] backs level 0 (countries), [1] level 1 (states), [2] level 2
(counties).
"""

from __future__ import annotations

from typing import Mapping

from pydantic import BaseModel, ConfigDict

from .errors import UnknownDatasetError

NE_BASE_URL = (
    "https://raw.githubusercontent.com/nvkelso/natural-earth-vector/"
    "master/geojson/"
)


class DownloadResource(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    filename: str
    description: str = ""


class DatasetDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    description: str = ""
    file_prefix: str = ""
    downloads: tuple[DownloadResource, ...] = ()

    def stored_filename(self, resource: DownloadResource) -> str:
        """Name of the resource on disk: file_prefix + filename."""
        return f"{self.file_prefix}{resource.filename}"

    def stored_filenames(self) -> list[str]:
        return [self.stored_filename(r) for r in self.downloads]


NATURAL_EARTH = DatasetDescriptor(
    key="NATURAL_EARTH",
    name="Natural Earth Boundaries",
    description=(
        "Global country, state/province, and county boundaries from Natural Earth. "
        "Public domain data optimized for web mapping."
    ),
    file_prefix="naturalearth_",
    downloads=(
        DownloadResource(
            url=NE_BASE_URL + "ne_110m_admin_0_countries.geojson",
            filename="countries.json",
            description="Country boundaries (110m scale)",
        ),
        DownloadResource(
            url=NE_BASE_URL + "ne_50m_admin_1_states_provinces_lakes.geojson",
            filename="states.json",
            description="State/province boundaries (50m scale)",
        ),
        DownloadResource(
            url=NE_BASE_URL + "ne_10m_admin_2_counties.geojson",
            filename="counties.json",
            description="County boundaries (10m scale, limited coverage)",
        ),
    ),
)

DATASETS: dict[str, DatasetDescriptor] = {
    NATURAL_EARTH.key: NATURAL_EARTH,
}


def get_dataset(key: str, datasets: Mapping[str, DatasetDescriptor] | None = None) -> DatasetDescriptor:
    registry = DATASETS if datasets is None else datasets
    try:
        return registry[key]
    except KeyError:
        raise UnknownDatasetError(key) from None
