from __future__ import annotations

import logging

import uvicorn

from waitlist_core.core.config import settings
from waitlist_core.repositories.patient_repository import get_patient_repository
from waitlist_core.services.dataset_state import count_loaded_patients

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def bootstrap() -> int:
    _configure_logging()

    loaded = count_loaded_patients(get_patient_repository())
    if loaded <= 0:
        # Serve anyway; /patients answers 503 until data is available.
        logger.warning("Patient dataset unavailable path=%s", settings.resolved_data_path.as_posix())
    else:
        logger.info("Patient dataset ready patients=%s", loaded)
    return loaded


def main() -> None:
    bootstrap()
    logger.info("Starting Waitlist Core on %s:%s", settings.host, settings.port)
    uvicorn.run(
        "waitlist_core.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
