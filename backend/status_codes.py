from typing import Dict, Iterable, List, NamedTuple

from sensor_errors import UnsupportedStatusError
from sensor_models import MappedStatus, ServiceStatusItem

DEFAULT_VALUE_LOOKUP = "prtg.customlookups.m365.servicestatus"


class Severity(NamedTuple):
    code: int
    status: str
    label: str
    state: str          # PRTG lookup state: Ok, Warning, Error


SEVERITIES: List[Severity] = [
    Severity(0, "ServiceOperational", "Service operational", "Ok"),
    Severity(1, "ServiceRestored", "Service restored", "Ok"),
    Severity(2, "FalsePositive", "False positive", "Ok"),
    Severity(3, "PostIncidentReviewPublished", "Post-incident review published", "Ok"),
    Severity(4, "InvestigationSuspended", "Investigation suspended", "Warning"),
    Severity(5, "Resolved", "Resolved", "Ok"),
    Severity(6, "VerifyingService", "Verifying service", "Warning"),
    Severity(7, "RestoringService", "Restoring service", "Warning"),
    Severity(8, "ExtendedRecovery", "Extended recovery", "Warning"),
    Severity(9, "Mitigated", "Mitigated", "Warning"),
    Severity(10, "ServiceDegradation", "Service degradation", "Warning"),
    Severity(11, "ServiceInterruption", "Service interruption", "Error"),
    Severity(12, "Investigating", "Investigating", "Error"),
]

# further Graph serviceHealthStatus values, folded onto existing codes
STATUS_ALIASES: Dict[str, str] = {
    "MitigatedExternal": "Mitigated",
    "ResolvedExternal": "Resolved",
    "Confirmed": "Investigating",
    "Reported": "Investigating",
}

# Graph liefert camelCase, ServiceComms PascalCase
_BY_STATUS: Dict[str, Severity] = {s.status.lower(): s for s in SEVERITIES}
_BY_STATUS.update({alias.lower(): _BY_STATUS[target.lower()] for alias, target in STATUS_ALIASES.items()})


def severity_code(status: str) -> int:
    sev = _BY_STATUS.get(status.strip().lower())
    if sev is None:
        raise KeyError(status)
    return sev.code


def map_statuses(items: Iterable[ServiceStatusItem]) -> List[MappedStatus]:
    mapped: List[MappedStatus] = []
    for item in items:
        try:
            code = severity_code(item.status)
        except KeyError:
            raise UnsupportedStatusError(item.workload_display_name, item.status) from None
        mapped.append(MappedStatus(channel=item.workload_display_name, value=code))
    return mapped
