class NoFacilityMatch(LookupError):
    pass


class FacilityRetargeter:

    def __init__(self, catalog):
        self.catalog = catalog

    def retarget(self, tier, target_environment):
        found = self.catalog.facility_index.get((tier, target_environment))
        if found is None:
            raise NoFacilityMatch(
                f"No {tier} facility for environment {target_environment}"
            )
        return found

    def apply_to(self, configuration, target_environment, report=None):
        changes = []
        for (i, facility) in enumerate(configuration.facilities, start=1):
            old = facility.facility_type_id
            tier = self.catalog.facility_tier(old)

            if tier is None:
                if report is not None:
                    report.note(
                        "unknown-facility",
                        f"Facility #{i}: unknown facility type {old}, left unchanged",
                    )
                continue

            try:
                new = self.retarget(tier, target_environment)
            except NoFacilityMatch as err:
                if report is not None:
                    report.note("no-match", f"Facility #{i}: {err}, left unchanged")
                continue

            facility.facility_type_id = new
            changes.append((i, old, new))

        if report is not None:
            report.facility_changes.extend(changes)
        return changes
