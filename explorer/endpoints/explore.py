# Endpoints for explore content, one-shot and streamed as NDJSON
# explorer/endpoints/explore.py
import json

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from explorer.models.explore import ExploreRequest, ExploreResponse
from explorer.models.question import UserContext
from explorer.services.api import LearningApi, get_learning_api
from explorer.services.errors import GenerationFailure, RateLimitExceeded
from explorer.utils.logger import logger

router = APIRouter()

@router.post("/", response_model=ExploreResponse)
async def explore(request: ExploreRequest, api: LearningApi = Depends(get_learning_api)):
    logger.info(f"Explore requested for '{request.query}'")
    try:
        return await api.explore(request.query, UserContext(age=request.age))
    except RateLimitExceeded as e:
        raise HTTPException(status_code=429, detail=str(e))
    except GenerationFailure as e:
        raise HTTPException(status_code=502, detail=str(e))

@router.post("/stream")
async def explore_stream(request: ExploreRequest, api: LearningApi = Depends(get_learning_api)):
    """
    Streams newline-delimited StreamChunk objects. The rate limit is checked
    before the response starts so a rejection still gets a proper 429.
    """
    logger.info(f"Streamed explore requested for '{request.query}'")
    updates = api.iter_explore_content(request.query, UserContext(age=request.age))
    try:
        first = await updates.__anext__()
    except StopAsyncIteration:
        first = None
    except RateLimitExceeded as e:
        raise HTTPException(status_code=429, detail=str(e))
    except GenerationFailure as e:
        raise HTTPException(status_code=502, detail=str(e))

    async def body():
        if first is None:
            return
        yield first.model_dump_json() + "\n"
        try:
            async for update in updates:
                yield update.model_dump_json() + "\n"
        except GenerationFailure as e:
            # Headers are already sent; report the failure in-band.
            yield json.dumps({"error": str(e)}) + "\n"

    return StreamingResponse(body(), media_type="application/x-ndjson")
