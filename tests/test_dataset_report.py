import json

from waitlist_core.scripts.dataset_report import build_report, main


def test_build_report(make_patient):
    patients = [
        make_patient(id="sf", name="SF", location={"latitude": 37.7749, "longitude": -122.4194}, acceptedOffers=1),
        make_patient(id="la", name="LA", location={"latitude": 34.0522, "longitude": -118.2437}),
        make_patient(id="syd", name="Sydney", location={"latitude": -33.8688, "longitude": 151.2093}, averageReplyTime=5),
    ]
    report = build_report(patients)

    assert report.total == 3
    assert {ref.id for ref in report.farthest_pair} == {"la", "syd"}
    assert report.max_distance_km > 11_000
    assert [ref.id for ref in report.without_behavioral_data] == ["la"]
    assert report.missing_counts == {"acceptedOffers": 2, "canceledOffers": 3, "averageReplyTime": 2}


def test_build_report_single_patient(make_patient):
    report = build_report([make_patient()])
    assert report.max_distance_km == 0
    assert report.farthest_pair == []


def test_main_prints_json(patients_file, capsys):
    path = patients_file(
        [
            {"id": "a", "name": "A", "location": {"latitude": 0, "longitude": 0}},
            {"id": "b", "name": "B", "location": {"latitude": 0, "longitude": 1}, "acceptedOffers": 0},
        ]
    )
    main(["--data", str(path), "--json"])
    report = json.loads(capsys.readouterr().out)

    assert report["total"] == 2
    assert report["max_distance_km"] == 111.32
    assert [p["id"] for p in report["without_behavioral_data"]] == ["a"]
