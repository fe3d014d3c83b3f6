"""Essential oil reference catalog.

Loads the static oil list from JSON. The catalog is read-only at runtime.
"""

import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Optional

from domain.exceptions import InvalidCatalogError, OilNotFoundError
from domain.models import ChemicalComponent, EssentialOil


def oil_to_dict(oil: EssentialOil) -> Dict[str, Any]:
    """Convert EssentialOil to dictionary."""
    data: Dict[str, Any] = {
        "id": oil.id,
        "name": oil.name,
        "composition": [
            {"name": component.name, "percentage": str(component.percentage)}
            for component in oil.composition
        ],
    }
    if oil.description:
        data["description"] = oil.description
    return data


def dict_to_oil(data: Dict[str, Any]) -> EssentialOil:
    """Convert dictionary to EssentialOil.

    Raises:
        AttributeError, KeyError, TypeError, ValueError, InvalidOperation:
            On malformed data
    """
    composition = tuple(
        ChemicalComponent(
            name=entry["name"],
            percentage=Decimal(str(entry["percentage"])),
        )
        for entry in data.get("composition", [])
    )
    return EssentialOil(
        id=str(data["id"]),
        name=data["name"],
        composition=composition,
        description=data.get("description", "") or "",
    )


class OilCatalog:
    """In-memory catalog of essential oils, in file order."""

    def __init__(self, oils: List[EssentialOil]) -> None:
        self._oils = list(oils)
        self._by_id: Dict[str, EssentialOil] = {}
        for oil in self._oils:
            if oil.id in self._by_id:
                raise InvalidCatalogError(f"Duplicate oil id in catalog: {oil.id}")
            self._by_id[oil.id] = oil

    @classmethod
    def from_file(cls, path: Path | str) -> "OilCatalog":
        """Load catalog from a JSON file.

        Args:
            path: Path to a JSON list of oil records

        Raises:
            InvalidCatalogError: If the file is missing or malformed
        """
        file_path = Path(path)
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise InvalidCatalogError(f"Cannot read oil catalog: {file_path}") from exc

        if not isinstance(data, list):
            raise InvalidCatalogError(f"Oil catalog must be a list: {file_path}")

        try:
            oils = [dict_to_oil(entry) for entry in data]
        except (AttributeError, KeyError, TypeError, ValueError, InvalidOperation) as exc:
            raise InvalidCatalogError(f"Invalid oil record in catalog: {file_path}") from exc

        return cls(oils)

    def all(self) -> List[EssentialOil]:
        return list(self._oils)

    def find(self, oil_id: str) -> Optional[EssentialOil]:
        return self._by_id.get(oil_id)

    def get(self, oil_id: str) -> EssentialOil:
        """Get an oil by id.

        Raises:
            OilNotFoundError: If the id is unknown
        """
        oil = self._by_id.get(oil_id)
        if oil is None:
            raise OilNotFoundError(f"Oil not found: {oil_id}")
        return oil

    def __len__(self) -> int:
        return len(self._oils)
