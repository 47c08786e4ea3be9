from catalog import EXTRACTOR
from decisions import P1
from decisions import P2
from planetary_industry import AmbiguousRecipe
from planetary_industry import NotProducible
from planetary_industry import UnsupportedRecipe


def substitute(configuration, old, new):
    (routes, facilities) = configuration.referencing(old)
    for route in routes:
        route.material_id = new
    for facility in facilities:
        facility.output_material_id = new
    return len(routes) + len(facilities)


class ChainRemapper:

    def __init__(self, catalog, resolver, decider):
        self.catalog = catalog
        self.resolver = resolver
        self.decider = decider

    def current(self, configuration, tier):
        return [
            m for m in configuration.route_materials()
            if self.catalog.material_tier(m) == tier
        ]

    def has_extractors(self, configuration):
        return any(
            self.catalog.facility_tier(f.facility_type_id) == EXTRACTOR
            for f in configuration.facilities
        )

    def p2_candidates(self, environment):
        return sorted(environment.available_basic_products)

    def remap(self, configuration, target_environment, report):
        environment = self.catalog.environment(target_environment)
        current_p2 = self.current(configuration, "P2")
        current_p1 = self.current(configuration, "P1")

        if not self.has_extractors(configuration):
            report.note(
                "skipped",
                "No extractor facilities; material chain left unchanged",
            )
        else:
            for old_p2 in current_p2:
                self._remap_p2(configuration, environment, old_p2, current_p1, report)

        report.raw_resources = sorted(environment.available_raw_resources)
        return report

    def _apply(self, configuration, kind, old, new, report):
        count = substitute(configuration, old, new)
        report.substitutions.append((kind, old, new))
        report.note(
            "substituted",
            f"{self.catalog.material_name(old)} -> "
            f"{self.catalog.material_name(new)} ({count} references)",
        )

    def _remap_p2(self, configuration, environment, old_p2, current_p1, report):
        name = self.catalog.material_name
        new_p2 = self.decider.choose(
            P2,
            f"Replacement for {name(old_p2)} on {environment.name}",
            self.p2_candidates(environment),
            name,
        )
        if new_p2 is None:
            report.note("declined", f"Kept {name(old_p2)}")
            return

        self._apply(configuration, "P2", old_p2, new_p2, report)

        try:
            required_p1 = sorted(self.resolver.inputs_for(new_p2))
        except NotProducible:
            report.note("skipped", f"{name(new_p2)} has no recipe; P1 inputs left unchanged")
            return
        except AmbiguousRecipe as err:
            report.note("ambiguous", str(err))
            return

        for new_p1 in required_p1:
            self._remap_p1(configuration, new_p1, current_p1, report)

    def _remap_p1(self, configuration, new_p1, current_p1, report):
        name = self.catalog.material_name
        old_p1 = self.decider.choose(
            P1,
            f"Which current P1 should {name(new_p1)} replace",
            list(current_p1),
            name,
        )
        if old_p1 is None:
            report.note("declined", f"No P1 replaced by {name(new_p1)}")
            return

        try:
            old_p0 = self.resolver.single_input_for(old_p1)
            new_p0 = self.resolver.single_input_for(new_p1)
        except NotProducible as err:
            report.note("skipped", f"{err}; kept {name(old_p1)}")
            return
        except AmbiguousRecipe as err:
            report.note("ambiguous", f"{err}; kept {name(old_p1)}")
            return
        except UnsupportedRecipe as err:
            report.note("unsupported", f"{err}; kept {name(old_p1)}")
            return

        current_p1.remove(old_p1)
        self._apply(configuration, "P1", old_p1, new_p1, report)
        self._apply(configuration, "P0", old_p0, new_p0, report)
