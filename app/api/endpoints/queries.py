from typing import Annotated, Optional

from fastapi import APIRouter, Path, Request

from app.api.dependencies import query_service_dep
from app.core import schemas
from app.core.queries.procedures import parse_threat_level
from app.core.responses import success_response, updated_response

router = APIRouter(prefix="/queries", tags=["Queries"])

positive_id = Annotated[int, Path(gt=0)]


# =========================
# JOINS
# =========================
@router.get("/join/doctor/{id}")
async def doctor_full_details(id: positive_id, request: Request, service: query_service_dep):
    """Doctor with actor, companions and every companion-linked episode."""
    details = await service.get_doctor_full_details(id)
    return success_response(request, details)


@router.get("/join/episode/{id}")
async def episode_full_details(
    id: positive_id, request: Request, service: query_service_dep
):
    details = await service.get_episode_with_all_details(id)
    return success_response(request, details)


# =========================
# VIEWS
# =========================
@router.get("/view/doctor-summary")
async def doctor_summary(request: Request, service: query_service_dep):
    return success_response(request, await service.doctor_episode_summary())


@router.get("/view/enemy-summary")
async def enemy_summary(request: Request, service: query_service_dep):
    return success_response(request, await service.enemy_appearance_summary())


# =========================
# PROCEDURES
# =========================
@router.get("/procedure/enemies/{threat_level}")
async def enemies_by_threat_level(
    threat_level: int, request: Request, service: query_service_dep
):
    level = parse_threat_level(threat_level)
    return success_response(request, await service.get_enemies_by_threat_level(level))


@router.get("/procedure/doctor/{incarnation}")
async def episodes_for_doctor(
    incarnation: positive_id, request: Request, service: query_service_dep
):
    return success_response(request, await service.get_episodes_for_doctor(incarnation))


@router.put("/update/enemy/{id}/threat-level")
async def update_threat_level(
    id: positive_id,
    request: Request,
    service: query_service_dep,
    body: Optional[schemas.ThreatLevelUpdate] = None,
):
    # A missing body is a bad threat level like any other
    threat_level = body.threat_level if body is not None else None
    enemy = await service.update_enemy_threat_level(id, threat_level)
    return updated_response(request, enemy)
