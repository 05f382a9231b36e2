import logging

from fastapi import APIRouter, Request

from app.api.dependencies import nl_service_dep
from app.core import schemas
from app.core.errors import BadRequestError, LLMNotConfiguredError
from app.core.responses import success_response

router = APIRouter(prefix="/llm", tags=["Natural Language"])


@router.post("/query")
async def natural_language_query(
    body: schemas.NaturalLanguageQuery, request: Request, service: nl_service_dep
):
    # Configuration is reported before input problems
    if service.client is None:
        raise LLMNotConfiguredError()

    if body.query is None or not body.query.strip():
        raise BadRequestError("Query is required")

    logging.info(f"Natural-language query: {body.query}")
    answer = await service.answer(body.query)
    return success_response(request, schemas.NaturalLanguageAnswer(**answer))
