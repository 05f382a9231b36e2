from typing import Annotated

from fastapi import APIRouter, Path, Request, Response, status

from app.api.dependencies import episode_repo_dep
from app.core import schemas
from app.core.responses import created_response, success_response, updated_response

router = APIRouter(prefix="/episodes", tags=["Episodes"])

episode_id_path = Annotated[int, Path(gt=0)]


# Episodes in broadcast order, with season, writer and director
@router.get("")
async def get_all_episodes(request: Request, repo: episode_repo_dep):
    episodes = await repo.get_all()
    return success_response(
        request, [schemas.EpisodeResponse.model_validate(e) for e in episodes]
    )


@router.get("/{id}")
async def get_episode(id: episode_id_path, request: Request, repo: episode_repo_dep):
    episode = await repo.get_by_id(id)
    return success_response(request, schemas.EpisodeResponse.model_validate(episode))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_episode(
    episode: schemas.EpisodeCreate, request: Request, repo: episode_repo_dep
):
    new_episode = await repo.create(episode.model_dump())
    return created_response(
        request, schemas.EpisodeResponse.model_validate(new_episode)
    )


@router.put("/{id}")
async def update_episode(
    id: episode_id_path,
    episode: schemas.EpisodeUpdate,
    request: Request,
    repo: episode_repo_dep,
):
    updated = await repo.update(id, episode.model_dump(exclude_unset=True))
    return updated_response(request, schemas.EpisodeResponse.model_validate(updated))


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_episode(id: episode_id_path, repo: episode_repo_dep):
    await repo.delete(id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
