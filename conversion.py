from dataclasses import dataclass, field
from typing import Any

from decisions import ENVIRONMENT
from planetary_industry import RecipeResolver
from remap import ChainRemapper
from retarget import FacilityRetargeter


PROBLEM_KINDS = ("no-match", "unknown-facility", "ambiguous", "unsupported", "invalid")


@dataclass
class ConversionReport:

    configuration: Any = None
    notes: list = field(default_factory=list)
    substitutions: list = field(default_factory=list)
    facility_changes: list = field(default_factory=list)
    raw_resources: list = field(default_factory=list)

    def note(self, kind, message):
        self.notes.append((kind, message))

    def problems(self):
        return [(k, m) for (k, m) in self.notes if k in PROBLEM_KINDS]


class ConversionEngine:

    def __init__(self, catalog, decider):
        self.catalog = catalog
        self.decider = decider
        self.resolver = RecipeResolver(catalog)
        self.retargeter = FacilityRetargeter(catalog)
        self.remapper = ChainRemapper(catalog, self.resolver, decider)

    def choose_environment(self, exclude=None):
        candidates = [e for e in self.catalog.environments if e != exclude]
        return self.decider.choose(
            ENVIRONMENT,
            "New planet type",
            candidates,
            lambda e: self.catalog.environment(e).name,
        )

    def convert(self, configuration, target_environment):
        """Retarget `configuration` to `target_environment` in place.

        Facilities are swapped for their equivalents first, then the
        operator is walked through the P2 -> P1 -> P0 material chain. Each
        accepted substitution stays applied whatever happens after it.
        """
        if target_environment not in self.catalog.environments:
            raise LookupError(f"Unknown environment {target_environment}")

        report = ConversionReport(configuration=configuration)
        configuration.environment_type = target_environment
        self.retargeter.apply_to(configuration, target_environment, report)
        self.remapper.remap(configuration, target_environment, report)

        for (kind, raw, reason) in getattr(self.decider, "invalid", []):
            report.note("invalid", f"Answer {raw!r} for {kind} skipped: {reason}")

        return report
