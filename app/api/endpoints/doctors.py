from typing import Annotated

from fastapi import APIRouter, Path, Request, Response, status

from app.api.dependencies import doctor_repo_dep
from app.core import schemas
from app.core.responses import created_response, success_response, updated_response

router = APIRouter(prefix="/doctors", tags=["Doctors"])

doctor_id_path = Annotated[int, Path(gt=0)]


# List every Doctor with actor and first/last episode
@router.get("")
async def get_all_doctors(request: Request, repo: doctor_repo_dep):
    doctors = await repo.get_all()
    return success_response(
        request, [schemas.DoctorResponse.model_validate(d) for d in doctors]
    )


@router.get("/{id}")
async def get_doctor(id: doctor_id_path, request: Request, repo: doctor_repo_dep):
    doctor = await repo.get_by_id(id)
    return success_response(request, schemas.DoctorResponse.model_validate(doctor))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_doctor(
    doctor: schemas.DoctorCreate, request: Request, repo: doctor_repo_dep
):
    new_doctor = await repo.create(doctor.model_dump())
    return created_response(request, schemas.DoctorResponse.model_validate(new_doctor))


# Partial update, only the fields present in the body change
@router.put("/{id}")
async def update_doctor(
    id: doctor_id_path,
    doctor: schemas.DoctorUpdate,
    request: Request,
    repo: doctor_repo_dep,
):
    updated = await repo.update(id, doctor.model_dump(exclude_unset=True))
    return updated_response(request, schemas.DoctorResponse.model_validate(updated))


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_doctor(id: doctor_id_path, repo: doctor_repo_dep):
    await repo.delete(id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
