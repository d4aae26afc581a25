from typing import Dict, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from .config import Settings, load_settings
from .records.models import OutcomeStatus, ServiceResult
from .records.services import ClinicServices

HTTP_STATUS = {
    OutcomeStatus.INVALID: 400,
    OutcomeStatus.FOREIGN_KEY: 400,
    OutcomeStatus.NOT_FOUND: 404,
    OutcomeStatus.ERROR: 500,
}


class PatientRequest(BaseModel):
    name: str
    age: int
    gender: str
    contact: str


class DoctorRequest(BaseModel):
    name: str
    specialization: str
    contact: str


class AppointmentRequest(BaseModel):
    patient_id: int
    doctor_id: int
    date: str
    time: str


class AppointmentUpdateRequest(BaseModel):
    date: str
    time: str


def respond(result: ServiceResult) -> ServiceResult:
    if not result.ok:
        raise HTTPException(status_code=HTTP_STATUS[result.status], detail=result.message)
    return result


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    services = ClinicServices.from_settings(settings or load_settings())
    patients, doctors, appointments = services.patients, services.doctors, services.appointments

    app = FastAPI(
        title="Smart Health Records API",
        description="Patient, doctor and appointment records",
        version="1.0.0",
    )

    @app.get("/health")
    async def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/patients", response_model=ServiceResult)
    def list_patients():
        return respond(patients.list())

    @app.post("/api/patients", response_model=ServiceResult)
    def add_patient(req: PatientRequest):
        return respond(patients.add(req.name, req.age, req.gender, req.contact))

    @app.put("/api/patients/{patient_id}", response_model=ServiceResult)
    def update_patient(patient_id: int, req: PatientRequest):
        return respond(patients.update(patient_id, req.name, req.age, req.gender, req.contact))

    @app.delete("/api/patients/{patient_id}", response_model=ServiceResult)
    def delete_patient(patient_id: int):
        return respond(patients.delete(patient_id))

    @app.get("/api/doctors", response_model=ServiceResult)
    def list_doctors():
        return respond(doctors.list())

    @app.post("/api/doctors", response_model=ServiceResult)
    def add_doctor(req: DoctorRequest):
        return respond(doctors.add(req.name, req.specialization, req.contact))

    @app.put("/api/doctors/{doctor_id}", response_model=ServiceResult)
    def update_doctor(doctor_id: int, req: DoctorRequest):
        return respond(doctors.update(doctor_id, req.name, req.specialization, req.contact))

    @app.delete("/api/doctors/{doctor_id}", response_model=ServiceResult)
    def delete_doctor(doctor_id: int):
        return respond(doctors.delete(doctor_id))

    @app.get("/api/appointments", response_model=ServiceResult)
    def list_appointments():
        return respond(appointments.list())

    @app.post("/api/appointments", response_model=ServiceResult)
    def add_appointment(req: AppointmentRequest):
        return respond(appointments.add(req.patient_id, req.doctor_id, req.date, req.time))

    @app.put("/api/appointments/{appointment_id}", response_model=ServiceResult)
    def update_appointment(appointment_id: int, req: AppointmentUpdateRequest):
        return respond(appointments.update(appointment_id, req.date, req.time))

    @app.delete("/api/appointments/{appointment_id}", response_model=ServiceResult)
    def delete_appointment(appointment_id: int):
        return respond(appointments.delete(appointment_id))

    return app


def run() -> None:
    uvicorn.run(create_app(), host="127.0.0.1", port=8000)
