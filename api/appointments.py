"""/api/v1/appointments: booking endpoints.

Handlers are plain functions: the booking service blocks on the catalogue and
the database, so FastAPI runs them in its threadpool.
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Query, Request
from starlette.responses import JSONResponse, Response

from api.schemas import AppointmentResponse, SlotsResponse
from core.models import AppointmentCreate, AppointmentUpdate
from core.services.booking_service import BookingService


def _body(model, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=model.model_dump(mode="json", by_alias=True))


def create_appointments_router(booking: BookingService) -> APIRouter:
    router = APIRouter(prefix="/appointments")

    @router.post("")
    def create_appointment(request: Request, body: AppointmentCreate):
        appointment = booking.create(body)
        return _body(AppointmentResponse.from_appointment(appointment), status_code=201)

    @router.get("")
    def list_appointments(request: Request):
        appointments = booking.list_all()
        return JSONResponse(
            content=[
                AppointmentResponse.from_appointment(a).model_dump(mode="json", by_alias=True)
                for a in appointments
            ]
        )

    # Registered before /{appointment_id} so "slots" is not parsed as an id
    @router.get("/slots")
    def booked_slots(request: Request, day: date = Query(..., alias="date")):
        return _body(SlotsResponse(booked_slots=booking.booked_slots(day)))

    @router.get("/{appointment_id}")
    def get_appointment(request: Request, appointment_id: UUID):
        appointment = booking.get_by_id(appointment_id)
        return _body(AppointmentResponse.from_appointment(appointment))

    @router.put("/{appointment_id}")
    def update_appointment(request: Request, appointment_id: UUID, body: AppointmentUpdate):
        appointment = booking.update(appointment_id, body)
        return _body(AppointmentResponse.from_appointment(appointment))

    @router.delete("/{appointment_id}")
    def delete_appointment(request: Request, appointment_id: UUID):
        booking.delete(appointment_id)
        return Response(status_code=204)

    return router
