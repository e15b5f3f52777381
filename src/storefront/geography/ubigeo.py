"""Reference geography — department → province → district tree.

The tree is shipped as ``data/ubigeo.json`` and loaded once per process.
Lima province (in Lima department) and all of Callao form the metro area,
which is delivered door to door; everything else ships through an agency.
"""

import json
import os
from functools import lru_cache
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)

DATA_FILE = Path(__file__).parent / "data" / "ubigeo.json"

METRO_DEPARTMENTS = {"CALLAO"}
METRO_PROVINCES = {("LIMA", "LIMA")}


@lru_cache(maxsize=1)
def load_tree() -> dict:
    path = Path(os.environ.get("STOREFRONT_UBIGEO_FILE", DATA_FILE))
    with path.open(encoding="utf-8") as fh:
        tree = json.load(fh)
    logger.info("Geography loaded", path=str(path), departments=len(tree))
    return tree


def departments() -> list[str]:
    return sorted(load_tree())


def provinces(department: str) -> list[str]:
    return sorted(load_tree().get(department, {}))


def districts(department: str, province: str) -> list[str]:
    return sorted(load_tree().get(department, {}).get(province, {}))


def has_districts(department: str, province: str) -> bool:
    return bool(districts(department, province))


def district_info(department: str, province: str, district: str) -> dict | None:
    return load_tree().get(department, {}).get(province, {}).get(district)


def is_metro(department: str | None, province: str | None) -> bool:
    """Metro destinations are delivered locally and need no national ID."""
    if department in METRO_DEPARTMENTS:
        return True
    return (department, province) in METRO_PROVINCES
