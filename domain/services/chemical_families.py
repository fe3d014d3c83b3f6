"""Chemical family classification for composition display.

Families drive the slice colours of the composition chart. Components not
listed fall back to OTHER.
"""

from __future__ import annotations

from typing import Dict

MONOTERPENES = "MONOTERPENES"
MONOTERPENOLS = "MONOTERPENOLS"
ESTERS = "ESTERS"
OXIDES = "OXIDES"
KETONES = "KETONES"
PHENOLS = "PHENOLS"
SESQUITERPENES = "SESQUITERPENES"
SESQUITERPENOLS = "SESQUITERPENOLS"
ALDEHYDES = "ALDEHYDES"
OTHER = "OTHER"

FAMILY_COLORS: Dict[str, str] = {
    MONOTERPENES: "#ffc107",
    MONOTERPENOLS: "#4caf50",
    ESTERS: "#e91e63",
    OXIDES: "#2196f3",
    KETONES: "#00bcd4",
    PHENOLS: "#f44336",
    SESQUITERPENES: "#795548",
    SESQUITERPENOLS: "#673ab7",
    ALDEHYDES: "#8bc34a",
    OTHER: "#9e9e9e",
}

FAMILY_LABELS: Dict[str, str] = {
    MONOTERPENES: "모노테르펜",
    MONOTERPENOLS: "모노테르펜올",
    ESTERS: "에스테르",
    OXIDES: "옥사이드",
    KETONES: "케톤",
    PHENOLS: "페놀",
    SESQUITERPENES: "세스퀴테르펜",
    SESQUITERPENOLS: "세스퀴테르펜올",
    ALDEHYDES: "알데하이드",
    OTHER: "기타",
}

_MEMBERS: Dict[str, tuple[str, ...]] = {
    MONOTERPENES: (
        "Limonene", "α-Pinene", "β-Pinene", "γ-Terpinene", "Sabinene", "Myrcene",
        "Ocimene", "δ-3-Carene", "Camphene", "p-Cymene", "α-Terpinene",
        "β-Phellandrene",
    ),
    MONOTERPENOLS: (
        "Linalool", "Menthol", "Terpinen-4-ol", "Geraniol", "Citronellol",
        "α-Terpineol", "Nerol", "Sabinene hydrate",
    ),
    ESTERS: (
        "Linalyl acetate", "Lavandulyl acetate", "Menthyl acetate",
        "Geranyl acetate", "Isobutyl angelate", "Angelica tiglate",
        "Terpinyl acetate", "Benzyl acetate", "Neryl acetate", "Bornyl acetate",
        "Citronellyl formate", "Methyl salicylate",
    ),
    OXIDES: ("1,8-Cineole", "Rose oxide"),
    KETONES: (
        "Menthone", "Camphor", "Pinocarvone", "Isomenthone", "Fenchone",
        "Carvone", "Valeranone", "Jasmone", "Vetivone",
    ),
    PHENOLS: ("Thymol", "Carvacrol", "Eugenol"),
    SESQUITERPENES: (
        "β-Caryophyllene", "Germacrene", "Germacrene D", "Zingiberene",
        "ar-Curcumene", "β-Sesquiphellandrene", "α-Bulnesene", "α-Guaiene",
        "Seychellene", "Elemene", "γ-Curcumene", "Italicene", "Santalenes",
        "Cedrene", "Thujopsene", "β-Gurjunene", "Aristolene", "Calarene",
    ),
    SESQUITERPENOLS: (
        "Cedrol", "Globulol", "α-Santalol", "β-Santalol", "Widdrol",
        "Patchoulol", "Khusimol", "Vetiselinenol", "Isovalencenol",
        "Viridiflorol", "Nerolidol",
    ),
    ALDEHYDES: ("Geranial", "Neral", "Citronellal", "Cinnamaldehyde"),
}

CHEMICAL_FAMILY_MAP: Dict[str, str] = {
    name: family for family, names in _MEMBERS.items() for name in names
}


def family_of(component_name: str) -> str:
    """Return the family key for a component (OTHER when unknown)."""
    return CHEMICAL_FAMILY_MAP.get(component_name, OTHER)


def color_for(component_name: str) -> str:
    """Return the chart colour for a component."""
    return FAMILY_COLORS[family_of(component_name)]


def family_label(component_name: str) -> str:
    return FAMILY_LABELS[family_of(component_name)]
