from fastapi import APIRouter, Depends
from typing import List

from doctors_portal.schemas import DeleteResult, DoctorIn, DoctorOut, InsertResult
from doctors_portal.security import require_admin
from doctors_portal.services import doctor_service

router = APIRouter(prefix="/doctor", tags=["doctor"], dependencies=[Depends(require_admin)])


@router.get("", response_model=List[DoctorOut])
async def route_list_doctors():
    doctors = await doctor_service.list_doctors()
    return [
        DoctorOut(id=str(d.id), name=d.name, email=d.email, specialty=d.specialty, img=d.img)
        for d in doctors
    ]


@router.post("", response_model=InsertResult)
async def route_add_doctor(payload: DoctorIn):
    return await doctor_service.add_doctor(payload)


@router.delete("/{email}", response_model=DeleteResult)
async def route_delete_doctor(email: str):
    return await doctor_service.delete_doctor(email)
