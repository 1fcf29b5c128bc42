from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict, dataclass, field
from itertools import combinations
from pathlib import Path
from typing import Optional, Sequence

from waitlist_core.core.config import settings
from waitlist_core.repositories.patient_repository import PatientRepository
from waitlist_core.schemas.patient import Patient
from waitlist_core.services.geo import distance

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@dataclass
class PatientRef:
    id: str
    name: str
    latitude: float
    longitude: float


@dataclass
class DatasetReport:
    total: int
    max_distance_km: float = 0.0
    farthest_pair: list[PatientRef] = field(default_factory=list)
    without_behavioral_data: list[PatientRef] = field(default_factory=list)
    missing_counts: dict[str, int] = field(default_factory=dict)


def _ref(patient: Patient) -> PatientRef:
    return PatientRef(
        id=patient.id,
        name=patient.name,
        latitude=patient.location.latitude,
        longitude=patient.location.longitude,
    )


def build_report(patients: Sequence[Patient]) -> DatasetReport:
    report = DatasetReport(
        total=len(patients),
        missing_counts={"acceptedOffers": 0, "canceledOffers": 0, "averageReplyTime": 0},
    )

    max_meters = 0.0
    pair: Optional[tuple[Patient, Patient]] = None
    for a, b in combinations(patients, 2):
        meters = distance(a.location, b.location)
        # NaN compares False, so malformed coordinates never win.
        if meters > max_meters:
            max_meters = meters
            pair = (a, b)

    report.max_distance_km = round(max_meters / 1000, 2)
    if pair:
        report.farthest_pair = [_ref(pair[0]), _ref(pair[1])]

    for patient in patients:
        missing = patient.missing_behavioral_fields()
        for name in missing:
            report.missing_counts[name] += 1
        if len(missing) == 3:
            report.without_behavioral_data.append(_ref(patient))

    return report


def log_report(report: DatasetReport) -> None:
    logger.info("Patients total=%s", report.total)
    logger.info("Max distance (kilometers): %.2f", report.max_distance_km)
    for ref in report.farthest_pair:
        logger.info("  between %s (%s) lat=%s lon=%s", ref.name, ref.id, ref.latitude, ref.longitude)

    logger.info("Missing field counts: %s", report.missing_counts)
    logger.info("Patients without behavioral data: %s", len(report.without_behavioral_data))
    for ref in report.without_behavioral_data:
        logger.info("  %s (%s) lat=%s lon=%s", ref.name, ref.id, ref.latitude, ref.longitude)


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Inspect the patient dataset used for ranking")
    parser.add_argument(
        "--data",
        default=None,
        help="Path to the patients JSON file (defaults to the configured dataset)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON instead of logging it",
    )
    args = parser.parse_args(argv)

    _configure_logging()

    path = Path(args.data) if args.data else settings.resolved_data_path
    report = build_report(PatientRepository(path).get_patients())

    if args.json:
        print(json.dumps(asdict(report), indent=2))
    else:
        log_report(report)


if __name__ == "__main__":
    main()
