from typing import Annotated

from fastapi import APIRouter, Path, Request, Response, status

from app.api.dependencies import enemy_repo_dep
from app.core import schemas
from app.core.responses import created_response, success_response, updated_response

router = APIRouter(prefix="/enemies", tags=["Enemies"])

enemy_id_path = Annotated[int, Path(gt=0)]


@router.get("")
async def get_all_enemies(request: Request, repo: enemy_repo_dep):
    enemies = await repo.get_all()
    return success_response(
        request, [schemas.EnemyResponse.model_validate(e) for e in enemies]
    )


@router.get("/{id}")
async def get_enemy(id: enemy_id_path, request: Request, repo: enemy_repo_dep):
    enemy = await repo.get_by_id(id)
    return success_response(request, schemas.EnemyResponse.model_validate(enemy))


# threat_level outside 1..10 never reaches the database CHECK constraint
@router.post("", status_code=status.HTTP_201_CREATED)
async def create_enemy(
    enemy: schemas.EnemyCreate, request: Request, repo: enemy_repo_dep
):
    new_enemy = await repo.create(enemy.model_dump())
    return created_response(request, schemas.EnemyResponse.model_validate(new_enemy))


@router.put("/{id}")
async def update_enemy(
    id: enemy_id_path,
    enemy: schemas.EnemyUpdate,
    request: Request,
    repo: enemy_repo_dep,
):
    updated = await repo.update(id, enemy.model_dump(exclude_unset=True))
    return updated_response(request, schemas.EnemyResponse.model_validate(updated))


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_enemy(id: enemy_id_path, repo: enemy_repo_dep):
    await repo.delete(id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
