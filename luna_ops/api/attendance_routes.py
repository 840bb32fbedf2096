"""Staff check-in / check-out and today's roll call."""

from fastapi import APIRouter, Depends

from luna_ops.api.deps import get_services
from luna_ops.models.attendance import AttendanceCheck, AttendanceOut, AttendanceStatus
from luna_ops.services.container import Services

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.post("/check-in", response_model=AttendanceOut, status_code=201)
def check_in(body: AttendanceCheck, services: Services = Depends(get_services)):
    return services.attendance.check_in(body)


@router.post("/check-out", response_model=AttendanceOut)
def check_out(body: AttendanceCheck, services: Services = Depends(get_services)):
    return services.attendance.check_out(body)


@router.get("/today", response_model=list[AttendanceOut])
def todays_attendance(services: Services = Depends(get_services)):
    return services.attendance.todays_attendance()


@router.get("/status/{user_id}", response_model=AttendanceStatus)
def today_status(user_id: str, services: Services = Depends(get_services)):
    return services.attendance.today_status(user_id)
