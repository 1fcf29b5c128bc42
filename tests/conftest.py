"""Pytest fixtures for scoring, ranking and API tests."""
import json

import pytest

from waitlist_core.schemas.patient import Location, Patient


class FixedRandom:
    """Random source that always draws the same value."""

    def __init__(self, value: float) -> None:
        self.value = value
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return self.value


@pytest.fixture
def target():
    return Location(latitude=37.7749, longitude=-122.4194)


@pytest.fixture
def make_patient(target):
    def _make(**overrides):
        record = {
            "id": overrides.pop("id", "p-1"),
            "name": overrides.pop("name", "Test Patient"),
            "location": overrides.pop(
                "location",
                {"latitude": target.latitude, "longitude": target.longitude},
            ),
        }
        record.update(overrides)
        return Patient.model_validate(record)

    return _make


@pytest.fixture
def fixed_random():
    return FixedRandom


@pytest.fixture
def patients_file(tmp_path):
    def _write(records):
        path = tmp_path / "patients.json"
        path.write_text(json.dumps(records), encoding="utf-8")
        return path

    return _write
