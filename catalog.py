import os
from dataclasses import dataclass
from types import MappingProxyType

from cytoolz import groupby

from util import slurp_json


FACILITY_TIERS = ("Extractor", "Basic", "Advanced")
MATERIAL_TIERS = ("P0", "P1", "P2")

EXTRACTOR = "Extractor"

CATALOG_FILES = {
    "facilities": "facilities.json",
    "environments": "environments.json",
    "materials": "materials.json",
    "recipes": "recipes.json",
}


class CatalogError(ValueError):
    pass


@dataclass(frozen=True)
class FacilityEntry:

    facility_type_id: int
    tier: str
    environment_type: int
    description: str = ""


@dataclass(frozen=True)
class EnvironmentEntry:

    environment_type: int
    name: str
    available_basic_products: frozenset
    available_raw_resources: frozenset


@dataclass(frozen=True)
class MaterialEntry:

    material_id: int
    tier: str
    description: str = ""


@dataclass(frozen=True)
class Recipe:

    name: str
    output: int
    inputs: frozenset


def _id(value, what):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise CatalogError(f"{what}: expected an integer id, got {value!r}")


def _require(entry, keys, what):
    if not isinstance(entry, dict):
        raise CatalogError(f"{what}: expected an object, got {entry!r}")
    missing = [k for k in keys if k not in entry]
    if missing:
        raise CatalogError(f"{what}: missing required keys {missing}")


def _require_mapping(table, what):
    if not isinstance(table, dict):
        raise CatalogError(
            f"{what}: expected an object keyed by id, got {type(table).__name__}"
        )
    return table


def _tier(value, allowed, what):
    if value not in allowed:
        raise CatalogError(f"{what}: unknown tier {value!r} (expected one of {allowed})")
    return value


def _parse_facility(key, entry):
    what = f"facility {key}"
    _require(entry, ["tier", "environmentType"], what)
    return FacilityEntry(
        facility_type_id=_id(key, what),
        tier=_tier(entry["tier"], FACILITY_TIERS, what),
        environment_type=_id(entry["environmentType"], what),
        description=entry.get("description", ""),
    )


def _parse_environment(key, entry):
    what = f"environment {key}"
    _require(entry, ["name", "availableBasicProducts", "availableRawResources"], what)
    for field in ("availableBasicProducts", "availableRawResources"):
        if not isinstance(entry[field], list):
            raise CatalogError(f"{what}: {field} must be a list")
    return EnvironmentEntry(
        environment_type=_id(key, what),
        name=entry["name"],
        available_basic_products=frozenset(
            _id(x, what) for x in entry["availableBasicProducts"]
        ),
        available_raw_resources=frozenset(
            _id(x, what) for x in entry["availableRawResources"]
        ),
    )


def _parse_material(key, entry):
    what = f"material {key}"
    _require(entry, ["tier"], what)
    return MaterialEntry(
        material_id=_id(key, what),
        tier=_tier(entry["tier"], MATERIAL_TIERS, what),
        description=entry.get("description", ""),
    )


def _parse_recipe(name, items):
    what = f"recipe {name!r}"
    if not isinstance(items, (list, tuple)):
        raise CatalogError(f"{what}: expected a list of line items")
    for item in items:
        _require(item, ["materialId", "isOutput"], what)
        if not isinstance(item["isOutput"], bool):
            raise CatalogError(
                f"{what}: isOutput must be true or false, got {item['isOutput']!r}"
            )
    outputs = [_id(x["materialId"], what) for x in items if x["isOutput"]]
    if len(outputs) != 1:
        raise CatalogError(
            f"{what}: expected exactly one output line item, found {len(outputs)}"
        )
    return Recipe(
        name=str(name),
        output=outputs[0],
        inputs=frozenset(_id(x["materialId"], what) for x in items if not x["isOutput"]),
    )


def _recipe_pairs(recipes):
    if isinstance(recipes, dict):
        return list(recipes.items())
    if not isinstance(recipes, (list, tuple)):
        raise CatalogError(
            f"recipes: expected a list or an object, got {type(recipes).__name__}"
        )
    pairs = []
    for (i, recipe) in enumerate(recipes):
        if isinstance(recipe, dict):
            _require(recipe, ["items"], f"recipe #{i}")
            pairs.append((recipe.get("name", f"#{i}"), recipe["items"]))
        else:
            pairs.append((f"#{i}", recipe))
    return pairs


class Catalog:
    """Read-only reference tables with the lookup indexes built once.

    `facilities`, `environments` and `materials` are mappings of id to raw
    entry dicts; `recipes` is either a mapping of recipe name to line items
    or a list of recipes. Any shape violation raises `CatalogError` here,
    before a conversion can touch a template.
    """

    def __init__(self, facilities, environments, materials, recipes):
        facilities = _require_mapping(facilities, "facilities")
        environments = _require_mapping(environments, "environments")
        materials = _require_mapping(materials, "materials")

        self.facilities = MappingProxyType({
            entry.facility_type_id: entry
            for entry in (_parse_facility(k, v) for (k, v) in facilities.items())
        })
        self.environments = MappingProxyType({
            entry.environment_type: entry
            for entry in (_parse_environment(k, v) for (k, v) in environments.items())
        })
        self.materials = MappingProxyType({
            entry.material_id: entry
            for entry in (_parse_material(k, v) for (k, v) in materials.items())
        })
        self.recipes = tuple(
            _parse_recipe(name, items) for (name, items) in _recipe_pairs(recipes)
        )

        facility_index = {}
        duplicates = {}
        for entry in self.facilities.values():
            pair = (entry.tier, entry.environment_type)
            if pair in facility_index:
                duplicates.setdefault(pair, []).append(entry.facility_type_id)
            else:
                facility_index[pair] = entry.facility_type_id
        self.facility_index = MappingProxyType(facility_index)
        self.duplicate_facility_pairs = MappingProxyType(duplicates)

        self.recipes_by_output = MappingProxyType(
            groupby(lambda r: r.output, self.recipes)
        )

    @classmethod
    def load(cls, directory):
        tables = {}
        for (table, filename) in CATALOG_FILES.items():
            path = os.path.join(directory, filename)
            try:
                tables[table] = slurp_json(path)
            except FileNotFoundError:
                raise CatalogError(f"Missing reference table: '{path}'")
            except ValueError as err:
                raise CatalogError(f"Malformed reference table '{path}': {err}")
        return cls(**tables)

    def facility(self, facility_type_id):
        return self.facilities[facility_type_id]

    def facility_tier(self, facility_type_id):
        entry = self.facilities.get(facility_type_id)
        return entry.tier if entry else None

    def material(self, material_id):
        return self.materials[material_id]

    def material_tier(self, material_id):
        entry = self.materials.get(material_id)
        return entry.tier if entry else None

    def material_name(self, material_id):
        entry = self.materials.get(material_id)
        if entry and entry.description:
            return f"{entry.description} [{material_id}]"
        return f"??? [{material_id}]"

    def environment(self, environment_type):
        return self.environments[environment_type]

    def find_environment(self, name_or_id):
        try:
            env_id = int(name_or_id)
        except (TypeError, ValueError):
            env_id = None
        if env_id in self.environments:
            return self.environments[env_id]
        matches = [
            env for env in self.environments.values()
            if env.name.lower() == str(name_or_id).strip().lower()
        ]
        if len(matches) == 1:
            return matches[0]
        elif not matches:
            raise LookupError(f"No environment matches '{name_or_id}'")
        else:
            raise LookupError(f"Ambiguous environment name '{name_or_id}'")
