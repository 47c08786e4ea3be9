"""
Shared fixtures: a small two-planet reference catalog and a Barren
extractor -> P1 -> P2 template.

    P0 100 -> P1 200 -> P2 300   (Barren)
    P0 110 -> P1 210 -> P2 310   (Temperate)
"""

import copy
import json
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from catalog import Catalog  # noqa: E402
from template import Configuration  # noqa: E402


BARREN = 2016
TEMPERATE = 11
GAS = 13

FACILITIES = {
    "2848": {"tier": "Extractor", "environmentType": BARREN, "description": "Barren Extractor Control Unit"},
    "2473": {"tier": "Basic", "environmentType": BARREN, "description": "Barren Basic Industry Facility"},
    "2474": {"tier": "Advanced", "environmentType": BARREN, "description": "Barren Advanced Industry Facility"},
    "3060": {"tier": "Extractor", "environmentType": TEMPERATE, "description": "Temperate Extractor Control Unit"},
    "2481": {"tier": "Basic", "environmentType": TEMPERATE, "description": "Temperate Basic Industry Facility"},
    "2480": {"tier": "Advanced", "environmentType": TEMPERATE, "description": "Temperate Advanced Industry Facility"},
    "3061": {"tier": "Extractor", "environmentType": GAS, "description": "Gas Extractor Control Unit"},
}

ENVIRONMENTS = {
    str(BARREN): {
        "name": "Barren",
        "availableBasicProducts": [300],
        "availableRawResources": [100],
    },
    str(TEMPERATE): {
        "name": "Temperate",
        "availableBasicProducts": [310],
        "availableRawResources": [110],
    },
    str(GAS): {
        "name": "Gas",
        "availableBasicProducts": [],
        "availableRawResources": [120],
    },
}

MATERIALS = {
    "100": {"tier": "P0", "description": "Base Metals"},
    "110": {"tier": "P0", "description": "Carbon Compounds"},
    "120": {"tier": "P0", "description": "Noble Gas"},
    "200": {"tier": "P1", "description": "Reactive Metals"},
    "210": {"tier": "P1", "description": "Biofuels"},
    "220": {"tier": "P1", "description": "Oxygen"},
    "300": {"tier": "P2", "description": "Mechanical Parts"},
    "310": {"tier": "P2", "description": "Livestock"},
}

RECIPES = [
    {"name": "Reactive Metals", "items": [
        {"materialId": 100, "isOutput": False},
        {"materialId": 200, "isOutput": True},
    ]},
    {"name": "Biofuels", "items": [
        {"materialId": 110, "isOutput": False},
        {"materialId": 210, "isOutput": True},
    ]},
    {"name": "Oxygen", "items": [
        {"materialId": 120, "isOutput": False},
        {"materialId": 220, "isOutput": True},
    ]},
    {"name": "Mechanical Parts", "items": [
        {"materialId": 200, "isOutput": False},
        {"materialId": 300, "isOutput": True},
    ]},
    {"name": "Livestock", "items": [
        {"materialId": 210, "isOutput": False},
        {"materialId": 310, "isOutput": True},
    ]},
]

TEMPLATE = {
    "CmdCtrLv": 4,
    "Cmt": "mech parts",
    "Diam": 5436.0,
    "Pln": BARREN,
    "P": [
        {"H": 0, "La": 1.1, "Lo": 2.2, "S": 100, "T": 2848},
        {"H": 0, "La": 1.2, "Lo": 2.3, "S": 100, "T": 2848},
        {"H": 0, "La": 1.3, "Lo": 2.4, "S": 200, "T": 2473},
        {"H": 0, "La": 1.4, "Lo": 2.5, "S": 300, "T": 2474},
        {"H": 0, "La": 1.5, "Lo": 2.6, "S": None, "T": 2544},
    ],
    "L": [
        {"D": 3, "Lv": 0, "S": 1},
        {"D": 3, "Lv": 0, "S": 2},
        {"D": 4, "Lv": 0, "S": 3},
        {"D": 5, "Lv": 0, "S": 4},
    ],
    "R": [
        {"P": [1, 3], "Q": 3000, "T": 100},
        {"P": [2, 3], "Q": 3000, "T": 100},
        {"P": [3, 4], "Q": 20, "T": 200},
        {"P": [4, 5], "Q": 5, "T": 300},
    ],
}


def reference_tables():
    return copy.deepcopy({
        "facilities": FACILITIES,
        "environments": ENVIRONMENTS,
        "materials": MATERIALS,
        "recipes": RECIPES,
    })


@pytest.fixture
def tables():
    return reference_tables()


@pytest.fixture
def catalog(tables):
    return Catalog(**tables)


@pytest.fixture
def template_data():
    return copy.deepcopy(TEMPLATE)


@pytest.fixture
def configuration(template_data):
    return Configuration.from_dict(template_data)


@pytest.fixture
def reference_dir(tmp_path, tables):
    path = tmp_path / "reference"
    path.mkdir()
    for (table, data) in tables.items():
        (path / f"{table}.json").write_text(json.dumps(data))
    return path


@pytest.fixture
def template_path(tmp_path, template_data):
    path = tmp_path / "mech.json"
    path.write_text(json.dumps(template_data))
    return path
