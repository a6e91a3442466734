"""
Symptom Catalog

Read-only table of symptoms, grouped into categories, looked up by id.

The catalog is built once at start-up and injected into the scoring
engine. A lookup miss is not an error: historical submissions may reference
a symptom that has since been retired, and those must still score.

Table format (JSON or dict):
    {
        "categories": [
            {
                "id": "mobility",
                "name": "Mobility & Falls",
                "symptoms": [
                    {"id": "fall", "label": "Had a fall", "points": 2}
                ]
            }
        ]
    }
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from carewatch.utils import get_logger
from carewatch.utils.exceptions import CatalogError

logger = get_logger(__name__)


@dataclass(frozen=True)
class Symptom:
    """A named observable condition and the risk points it carries."""
    id: str
    label: str
    points: int

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "label": self.label, "points": self.points}


@dataclass(frozen=True)
class SymptomCategory:
    """Presentation grouping only; order has no effect on scoring."""
    id: str
    name: str
    symptoms: Tuple[Symptom, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "symptoms": [s.to_dict() for s in self.symptoms],
        }


class SymptomCatalog:
    """
    Immutable symptom lookup table.

    Safe to share between concurrent scoring calls; nothing mutates it
    after construction.
    """

    def __init__(self, categories: List[SymptomCategory]):
        self._categories: Tuple[SymptomCategory, ...] = tuple(categories)
        self._index: Dict[str, Symptom] = {}

        for category in self._categories:
            for symptom in category.symptoms:
                if symptom.id in self._index:
                    raise CatalogError(
                        f"Duplicate symptom id '{symptom.id}' in category '{category.id}'",
                        symptom_id=symptom.id,
                    )
                if symptom.points < 0:
                    raise CatalogError(
                        f"Symptom '{symptom.id}' has negative points ({symptom.points})",
                        symptom_id=symptom.id,
                    )
                self._index[symptom.id] = symptom

        logger.debug(
            f"SymptomCatalog built: {len(self._categories)} categories, "
            f"{len(self._index)} symptoms"
        )

    # ── Lookup ────────────────────────────────────────────────────────────

    def lookup(self, symptom_id: str) -> Optional[Symptom]:
        """Return the symptom, or None when the id is unknown."""
        return self._index.get(symptom_id)

    def __contains__(self, symptom_id: object) -> bool:
        return symptom_id in self._index

    def __len__(self) -> int:
        return len(self._index)

    @property
    def categories(self) -> Tuple[SymptomCategory, ...]:
        return self._categories

    def symptoms(self) -> List[Symptom]:
        """All symptoms flattened, in presentation order."""
        return [s for c in self._categories for s in c.symptoms]

    def to_dict(self) -> Dict[str, Any]:
        return {"categories": [c.to_dict() for c in self._categories]}

    # ── Construction ──────────────────────────────────────────────────────

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SymptomCatalog":
        """Build a catalog from the table format described in the module docstring."""
        raw_categories = data.get("categories")
        if not isinstance(raw_categories, list):
            raise CatalogError("Catalog table must contain a 'categories' list")

        categories = []
        for raw_cat in raw_categories:
            try:
                symptoms = tuple(
                    Symptom(
                        id=str(raw["id"]),
                        label=str(raw["label"]),
                        points=int(raw["points"]),
                    )
                    for raw in raw_cat.get("symptoms", [])
                )
                categories.append(SymptomCategory(
                    id=str(raw_cat["id"]),
                    name=str(raw_cat["name"]),
                    symptoms=symptoms,
                ))
            except (KeyError, TypeError, ValueError) as exc:
                raise CatalogError(
                    f"Malformed catalog entry: {exc}",
                    details={"category": raw_cat.get("id") if isinstance(raw_cat, dict) else None},
                ) from exc

        return cls(categories)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "SymptomCatalog":
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise CatalogError(
                f"Could not read symptom catalog from {path}: {exc}",
                details={"path": str(path)},
            ) from exc

        catalog = cls.from_dict(data)
        logger.info(f"Loaded symptom catalog from {path} ({len(catalog)} symptoms)")
        return catalog


def load_catalog(path: Optional[Union[str, Path]] = None) -> SymptomCatalog:
    """Catalog from a JSON file when a path is given, else the bundled default."""
    if path:
        return SymptomCatalog.from_json_file(path)

    from .symptoms import default_catalog
    return default_catalog()
