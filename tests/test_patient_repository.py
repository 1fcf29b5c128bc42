import pytest

from waitlist_core.core.config import Settings
from waitlist_core.repositories.patient_repository import PatientDataLoadError, PatientRepository
from waitlist_core.services.dataset_state import count_loaded_patients

VALID = {
    "id": "p-1",
    "name": "Ada Lovelace",
    "location": {"latitude": 51.5, "longitude": -0.12},
    "age": 36,
    "acceptedOffers": 0,
    "canceledOffers": 2,
    "averageReplyTime": 300,
    "insurance": "public",
}


def test_loads_patients_and_keeps_extra_fields(patients_file):
    repository = PatientRepository(patients_file([VALID]))
    patients = repository.get_patients()

    assert len(patients) == 1
    assert patients[0].accepted_offers == 0
    assert patients[0].model_dump(by_alias=True)["insurance"] == "public"


def test_invalid_records_are_skipped(patients_file, caplog):
    records = [VALID, {"id": "p-2", "name": "No Location"}, "not-a-record"]
    patients = PatientRepository(patients_file(records)).get_patients()

    assert [p.id for p in patients] == ["p-1"]
    assert "Skipping invalid patient record" in caplog.text


def test_numeric_strings_are_coerced(patients_file):
    record = {**VALID, "location": {"latitude": "51.5", "longitude": "-0.12"}}
    patient = PatientRepository(patients_file([record])).get_patients()[0]
    assert patient.location.latitude == 51.5


def test_dataset_is_read_once(patients_file):
    path = patients_file([VALID])
    repository = PatientRepository(path)
    first = repository.get_patients()

    path.write_text("[]", encoding="utf-8")
    assert repository.get_patients() is first


def test_missing_file_raises(tmp_path):
    with pytest.raises(PatientDataLoadError):
        PatientRepository(tmp_path / "missing.json").get_patients()


def test_non_array_raises(tmp_path):
    path = tmp_path / "patients.json"
    path.write_text('{"id": "p-1"}', encoding="utf-8")
    with pytest.raises(PatientDataLoadError):
        PatientRepository(path).get_patients()


def test_malformed_json_raises(tmp_path):
    path = tmp_path / "patients.json"
    path.write_text("[{", encoding="utf-8")
    with pytest.raises(PatientDataLoadError):
        PatientRepository(path).get_patients()


def test_bundled_sample_dataset_loads():
    repository = PatientRepository(Settings().resolved_data_path)
    assert len(repository.get_patients()) == 18


def test_settings_data_path_override(monkeypatch, tmp_path):
    monkeypatch.setenv("PATIENTS_DATA_PATH", str(tmp_path / "custom.json"))
    assert Settings().resolved_data_path == tmp_path / "custom.json"


def test_count_loaded_patients(patients_file, tmp_path):
    assert count_loaded_patients(PatientRepository(patients_file([VALID]))) == 1
    assert count_loaded_patients(PatientRepository(tmp_path / "missing.json")) == 0
