from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool

from app.core.config import Settings, get_settings
from app.core.exceptions import SentinelException, MalformedRequestException
from app.core.logger import logger
from app.services.moderation_service import ContentModerationHandler

router = APIRouter(prefix="/api/v1", tags=["moderation"])


def get_moderation_handler(settings: Settings = Depends(get_settings)) -> ContentModerationHandler:
    return ContentModerationHandler(settings)


@router.options("/moderate-content")
async def moderate_content_preflight():
    """CORS preflight; headers are added by the application middleware."""
    return PlainTextResponse("ok")


@router.post("/moderate-content", status_code=200)
async def moderate_content(
    request: Request,
    handler: ContentModerationHandler = Depends(get_moderation_handler)
):
    """
    Moderate a post or comment and open a system report if it is flagged.

    The body must be a JSON object with content, author_id, entity_id,
    entity_type ("post" or "comment") and community_id.

    Returns:
        ``{"flagged": false, "action": "approved", ...}`` for clean content, or
        ``{"flagged": true, "action": "report_created", "report_id", "categories", "priority"}``

    Raises:
        SentinelException: Rendered by the application exception handler
    """
    try:
        payload = await request.json()
    except ValueError as e:
        raise MalformedRequestException(details={"error": str(e)})

    if not isinstance(payload, dict):
        raise MalformedRequestException(details={"error": "Request body must be a JSON object"})

    context = {
        "entity_id": payload.get("entity_id", "unknown"),
        "entity_type": payload.get("entity_type", "unknown"),
        "request_id": getattr(request.state, "request_id", "unknown"),
    }

    try:
        result = await run_in_threadpool(handler.handle, payload)
    except SentinelException:
        raise
    except Exception as e:
        logger.error(
            "Unexpected error in content moderation",
            extra={**context, "error": str(e)},
            exc_info=True
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": str(e),
                "error_code": "INTERNAL_SERVER_ERROR",
            }
        )

    logger.info(
        "Content moderation completed",
        extra={**context, "action": result["action"]}
    )
    return JSONResponse(status_code=200, content=result)
