from __future__ import annotations

import logging

from waitlist_core.repositories.patient_repository import PatientDataLoadError, PatientRepository

logger = logging.getLogger(__name__)


def count_loaded_patients(repository: PatientRepository) -> int:
    """Return the number of loaded patients, 0 when the dataset is unavailable."""
    try:
        return len(repository.get_patients())
    except PatientDataLoadError:
        logger.exception("Failed to check patient dataset load state")
        return 0
