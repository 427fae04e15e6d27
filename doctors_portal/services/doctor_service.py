from typing import List

from doctors_portal.models import Doctor
from doctors_portal.schemas import DeleteResult, DoctorIn, InsertResult
from doctors_portal.utils.logger import get_logger

logger = get_logger("doctors")


async def list_doctors() -> List[Doctor]:
    return await Doctor.find_all().to_list()


async def add_doctor(data: DoctorIn) -> InsertResult:
    doctor = Doctor(**data.model_dump())
    await doctor.insert()
    logger.info(f"Doctor added: {doctor.email}")
    return InsertResult(insertedId=str(doctor.id))


async def delete_doctor(email: str) -> DeleteResult:
    """Delete one doctor by email."""
    doctor = await Doctor.find_one(Doctor.email == email)
    if doctor is None:
        return DeleteResult(deletedCount=0)
    await doctor.delete()
    logger.info(f"Doctor deleted: {email}")
    return DeleteResult(deletedCount=1)
