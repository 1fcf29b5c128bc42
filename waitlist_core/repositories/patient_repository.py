from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from waitlist_core.core.config import settings
from waitlist_core.schemas.patient import Patient

logger = logging.getLogger(__name__)


class PatientDataLoadError(RuntimeError):
    pass


class PatientRepository:
    """Read-only access to the static patient dataset (a JSON array)."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._patients: Optional[tuple[Patient, ...]] = None

    def get_patients(self) -> tuple[Patient, ...]:
        if self._patients is None:
            self._patients = self._load()
        return self._patients

    def _load(self) -> tuple[Patient, ...]:
        if not self.path.exists():
            raise PatientDataLoadError(f"Patient data file not found: {self.path}")

        try:
            with open(self.path, encoding="utf-8") as f:
                records = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise PatientDataLoadError(f"Patient data file unreadable: {self.path}") from exc

        if not isinstance(records, list):
            raise PatientDataLoadError(f"Patient data must be a JSON array: {self.path}")

        patients: list[Patient] = []
        skipped = 0
        for index, record in enumerate(records):
            try:
                patients.append(Patient.model_validate(record))
            except ValidationError as exc:
                skipped += 1
                record_id = record.get("id") if isinstance(record, dict) else None
                logger.warning(
                    "Skipping invalid patient record index=%s id=%s errors=%s",
                    index,
                    record_id or "unknown",
                    exc.error_count(),
                )

        logger.info(
            "Patient dataset loaded path=%s patients=%s skipped=%s",
            self.path.as_posix(),
            len(patients),
            skipped,
        )
        return tuple(patients)


@lru_cache(maxsize=1)
def get_patient_repository() -> PatientRepository:
    return PatientRepository(settings.resolved_data_path)
