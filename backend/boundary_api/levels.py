"""
ADMINISTRATIVE LEVELS
---------------------
Property lookups for each boundary level, kept as data.

Source boundary files name their attributes inconsistently across
providers and scales (ISO_A2 vs iso_a2, postal vs STUSPS, ...). Every
lookup here is an ordered list of candidate property names; the first
present value wins and values are never merged. Supporting a new source
format means adding names to these tuples, not new branches in the
service code.
"""

from __future__ import annotations

from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict

COUNTRY = 0
STATE = 1
COUNTY = 2


def first_present(props: Mapping[str, Any], names) -> Any:
    """First value among `names` that is neither missing, None nor ''."""
    for field in names:
        value = props.get(field)
        if value is not None and value != "":
            return value
    return None


class FieldLookup(BaseModel):
    model_config = ConfigDict(frozen=True)

    names: tuple[str, ...]
    # keep: value as found
    # suffix: "US-CA" -> "CA", plain values pass through
    # suffix_only: "US-CA" -> "CA", plain values -> None
    compound: Literal["keep", "suffix", "suffix_only"] = "keep"

    def __call__(self, props: Mapping[str, Any]) -> Any:
        value = first_present(props, self.names)
        if self.compound == "keep":
            return value
        if isinstance(value, str) and "-" in value:
            return value.split("-")[1]
        return value if self.compound == "suffix" else None


class LevelSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: int
    label: str
    code: FieldLookup
    name: FieldLookup


# parent matching
COUNTRY_CODE = FieldLookup(names=("ISO_A2", "iso_a2", "ADM0_A3", "adm0_a3"))
REGION_CODE = FieldLookup(names=("iso_3166_2", "ISO_3166_2"))
STATE_IDENTIFIERS: tuple[FieldLookup, ...] = (
    FieldLookup(names=("STUSPS", "STATE", "state", "POSTAL", "postal")),
    FieldLookup(names=("NAME_1", "name_1", "admin_1")),
    FieldLookup(names=("iso_3166_2", "ISO_3166_2"), compound="suffix_only"),
)

LEVELS: dict[int, LevelSpec] = {
    COUNTRY: LevelSpec(
        level=COUNTRY,
        label="countries",
        code=FieldLookup(names=("ISO_A2", "iso_a2")),
        name=FieldLookup(names=("NAME", "name", "NAME_EN", "ADMIN", "admin")),
    ),
    STATE: LevelSpec(
        level=STATE,
        label="states",
        code=FieldLookup(
            names=(
                "iso_3166_2", "ISO_3166_2",
                "postal", "POSTAL",
                "STUSPS", "code_hasc",
                "abbrev", "ABBREV",
            ),
            compound="suffix",
        ),
        name=FieldLookup(names=("NAME", "name", "NAME_1", "name_1", "ADMIN", "admin")),
    ),
    COUNTY: LevelSpec(
        level=COUNTY,
        label="counties",
        code=FieldLookup(names=("GEOID", "FIPS", "fips", "ADM2_CODE", "adm2_code", "CODE", "code")),
        name=FieldLookup(names=("NAME", "name", "NAME_2", "name_2", "ADMIN", "admin")),
    ),
}
