"""Planetary-industry templates as exported by the game client.

Only the keys the converter edits are lifted into attributes; everything
else (pin coordinates, links, unknown keys) is carried through untouched so
that a converted template can be imported again.
"""
from dataclasses import dataclass, field

from cytoolz import groupby
from cytoolz import unique

from catalog import FACILITY_TIERS
from catalog import MATERIAL_TIERS
from util import dump_json
from util import slurp_json


class TemplateError(ValueError):
    pass


@dataclass
class Facility:

    facility_type_id: int
    output_material_id: int = None
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data, index):
        if not isinstance(data, dict) or "T" not in data:
            raise TemplateError(f"Facility #{index} has no facility type (T)")
        return cls(
            facility_type_id=_int(data["T"], f"Facility #{index} type"),
            output_material_id=(
                _int(data["S"], f"Facility #{index} output")
                if data.get("S") is not None else None
            ),
            extra=data,
        )

    def to_dict(self):
        result = {**self.extra, "T": self.facility_type_id}
        if self.output_material_id is not None or "S" in self.extra:
            result["S"] = self.output_material_id
        return result


@dataclass
class Route:

    path: list
    quantity: int
    material_id: int
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data, index, facility_count):
        what = f"Route #{index}"
        if not isinstance(data, dict):
            raise TemplateError(f"{what} is not an object")
        for key in ("P", "Q", "T"):
            if key not in data:
                raise TemplateError(f"{what} is missing '{key}'")
        if not isinstance(data["P"], list):
            raise TemplateError(f"{what} path must be a list")
        path = [_int(x, f"{what} path") for x in data["P"]]
        if not path:
            raise TemplateError(f"{what} has an empty path")
        outside = [x for x in path if not 1 <= x <= facility_count]
        if outside:
            raise TemplateError(
                f"{what} references facilities {outside} "
                f"(template has {facility_count})"
            )
        if not isinstance(data["Q"], int) or isinstance(data["Q"], bool):
            raise TemplateError(f"{what} quantity must be an integer, got {data['Q']!r}")
        return cls(
            path=path,
            quantity=data["Q"],
            material_id=_int(data["T"], f"{what} material"),
            extra=data,
        )

    def to_dict(self):
        return {**self.extra, "P": list(self.path), "Q": self.quantity, "T": self.material_id}


@dataclass
class Configuration:

    environment_type: int
    facilities: list
    routes: list
    level: int = None
    comment: str = None
    size: float = None
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise TemplateError("Template is not an object")
        for key in ("Pln", "P"):
            if key not in data:
                raise TemplateError(f"Template is missing '{key}'")
        for key in ("P", "R"):
            if not isinstance(data.get(key, []), list):
                raise TemplateError(f"Template '{key}' must be a list")
        facilities = [
            Facility.from_dict(pin, i) for (i, pin) in enumerate(data["P"], start=1)
        ]
        routes = [
            Route.from_dict(route, i, len(facilities))
            for (i, route) in enumerate(data.get("R", []), start=1)
        ]
        return cls(
            environment_type=_int(data["Pln"], "Template planet type"),
            facilities=facilities,
            routes=routes,
            level=data.get("CmdCtrLv"),
            comment=data.get("Cmt"),
            size=data.get("Diam"),
            extra=data,
        )

    def to_dict(self):
        result = {
            **self.extra,
            "Pln": self.environment_type,
            "P": [facility.to_dict() for facility in self.facilities],
            "R": [route.to_dict() for route in self.routes],
        }
        for (key, value) in (
            ("CmdCtrLv", self.level),
            ("Cmt", self.comment),
            ("Diam", self.size),
        ):
            if value is not None or key in self.extra:
                result[key] = value
        return result

    def route_materials(self):
        return list(unique(route.material_id for route in self.routes))

    def referencing(self, material_id):
        routes = [r for r in self.routes if r.material_id == material_id]
        facilities = [f for f in self.facilities if f.output_material_id == material_id]
        return (routes, facilities)


def _int(value, what):
    if isinstance(value, bool):
        raise TemplateError(f"{what}: expected an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise TemplateError(f"{what}: expected an integer, got {value!r}")


def load_template(path):
    try:
        data = slurp_json(path)
    except ValueError as err:
        raise TemplateError(f"Malformed template '{path}': {err}")
    return Configuration.from_dict(data)


def save_template(configuration, path):
    dump_json(configuration.to_dict(), path)


def summarize(configuration, catalog):
    by_tier = groupby(
        lambda f: catalog.facility_tier(f.facility_type_id) or "Unknown",
        configuration.facilities,
    )
    materials = configuration.route_materials()
    products = groupby(
        lambda m: catalog.material_tier(m) or "Unknown",
        materials,
    )
    env = catalog.environments.get(configuration.environment_type)
    return {
        "environment": env.name if env else f"??? [{configuration.environment_type}]",
        "level": configuration.level,
        "comment": configuration.comment,
        "facilities": {
            tier: len(by_tier[tier])
            for tier in FACILITY_TIERS + ("Unknown",) if tier in by_tier
        },
        "products": {
            tier: [catalog.material_name(m) for m in products[tier]]
            for tier in MATERIAL_TIERS + ("Unknown",) if tier in products
        },
        "routes": len(configuration.routes),
    }
