import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).parent.parent))

from smarthealth.config import Settings
from smarthealth.server import create_app

JANE = {"name": "Jane Doe", "age": 34, "gender": "Female", "contact": "9876543210"}
ANN = {"name": "Ann Lee", "specialization": "Cardiology", "contact": "1112223333"}


@pytest.fixture
def client(tmp_path: Path) -> TestClient:
    return TestClient(create_app(Settings(data_dir=tmp_path)))


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_patient_crud(client):
    response = client.post("/api/patients", json=JANE)
    assert response.status_code == 200
    assert response.json()["record_id"] == 1
    assert response.json()["status"] == "success"

    response = client.put("/api/patients/1", json={**JANE, "age": 35})
    assert response.status_code == 200

    response = client.get("/api/patients")
    assert response.json()["lines"] == ["ID: 1, Name: Jane Doe, Age: 35, Gender: Female, Contact: 9876543210"]

    assert client.delete("/api/patients/1").status_code == 200
    assert client.get("/api/patients").json()["message"] == "No patients found."


def test_validation_and_missing_records(client):
    response = client.post("/api/patients", json={**JANE, "name": "J"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid name."

    response = client.put("/api/doctors/3", json=ANN)
    assert response.status_code == 404
    assert response.json()["detail"] == "Doctor not found."

    response = client.post("/api/patients", json={**JANE, "age": "thirty"})
    assert response.status_code == 422


def test_appointments(client):
    client.post("/api/patients", json=JANE)
    client.post("/api/doctors", json=ANN)

    response = client.post("/api/appointments", json={
        "patient_id": 5, "doctor_id": 1, "date": "2024-03-15", "time": "10:30",
    })
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid patient ID."

    response = client.post("/api/appointments", json={
        "patient_id": 1, "doctor_id": 1, "date": "2024-03-15", "time": "10:30",
    })
    assert response.status_code == 200

    response = client.put("/api/appointments/1", json={"date": "2024-03-16", "time": "11:00"})
    assert response.status_code == 200

    listing = client.get("/api/appointments").json()
    assert listing["lines"] == ["ID: 1, Patient: Jane Doe, Doctor: Ann Lee, Date: 2024-03-16, Time: 11:00"]

    response = client.delete("/api/appointments/1")
    assert response.json()["message"] == "Appointment cancelled successfully."
