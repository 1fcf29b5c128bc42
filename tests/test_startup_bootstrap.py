from waitlist_core.repositories.patient_repository import PatientRepository
from waitlist_core.scripts import startup_bootstrap


def test_bootstrap_reports_loaded_patients(monkeypatch, patients_file):
    repository = PatientRepository(
        patients_file([{"id": "a", "name": "A", "location": {"latitude": 1, "longitude": 2}}])
    )
    monkeypatch.setattr(startup_bootstrap, "get_patient_repository", lambda: repository)

    assert startup_bootstrap.bootstrap() == 1


def test_bootstrap_tolerates_missing_dataset(monkeypatch, tmp_path):
    repository = PatientRepository(tmp_path / "missing.json")
    monkeypatch.setattr(startup_bootstrap, "get_patient_repository", lambda: repository)

    assert startup_bootstrap.bootstrap() == 0


def test_main_launches_uvicorn(monkeypatch):
    calls = []
    monkeypatch.setattr(startup_bootstrap, "bootstrap", lambda: 0)
    monkeypatch.setattr(startup_bootstrap.uvicorn, "run", lambda *args, **kwargs: calls.append((args, kwargs)))

    startup_bootstrap.main()

    assert calls[0][0] == ("waitlist_core.main:app",)
    assert calls[0][1]["port"] == startup_bootstrap.settings.port
