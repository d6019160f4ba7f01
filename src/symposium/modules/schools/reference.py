"""
Reference School List

Regional schools bundled with the package, offered as suggestions during
advisor registration. Loaded once from `data/reference_schools.csv`.
"""

import csv
import logging
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources

logger = logging.getLogger(__name__)

DATA_FILE = "reference_schools.csv"


@dataclass(frozen=True)
class ReferenceSchool:
    name: str
    city: str
    state: str
    zip: str
    district: str
    address: str
    type: str  # "public" or "non-public"

    @property
    def display_address(self) -> str:
        parts = [self.address, self.city, f"{self.state} {self.zip}".strip()]
        return ", ".join(p for p in parts if p)


def _title_case(value: str) -> str:
    return " ".join(word.capitalize() for word in value.split())


@lru_cache
def load_reference_schools() -> tuple[ReferenceSchool, ...]:
    """Parse the bundled CSV. Duplicate names keep their first row."""
    source = resources.files("symposium.modules.schools").joinpath("data", DATA_FILE)
    seen: set[str] = set()
    schools: list[ReferenceSchool] = []

    with source.open("r", encoding="utf-8") as fh:
        for row in csv.DictReader(fh):
            name = (row.get("name") or "").strip()
            if not name or name.lower() in seen:
                continue
            seen.add(name.lower())
            school_type = (row.get("type") or "").strip().lower()
            schools.append(
                ReferenceSchool(
                    name=_title_case(name),
                    city=_title_case((row.get("city") or "").strip()),
                    state=(row.get("state") or "NJ").strip().upper(),
                    zip=(row.get("zip") or "").strip(),
                    district=_title_case((row.get("district") or "").strip()),
                    address=_title_case((row.get("address") or "").strip()),
                    type="non-public" if school_type == "non-public" else "public",
                )
            )

    schools.sort(key=lambda s: s.name)
    logger.info(f"Loaded {len(schools)} reference schools")
    return tuple(schools)


def search_reference_schools(query: str | None = None, limit: int = 20) -> list[ReferenceSchool]:
    """Case-insensitive substring match on school name or city."""
    schools = load_reference_schools()
    if not query or not query.strip():
        return list(schools[:limit])

    needle = query.strip().lower()
    matches = [s for s in schools if needle in s.name.lower() or needle in s.city.lower()]
    # Name prefix matches first
    matches.sort(key=lambda s: (not s.name.lower().startswith(needle), s.name))
    return matches[:limit]
