import logging
from fastapi import APIRouter, Request

from clinic_router.models.tool_input import loads_body
from clinic_router.services.clock import get_time_data, resolve_timezone

logger = logging.getLogger(__name__)

router = APIRouter()


@router.api_route("/timenow", methods=["GET", "POST"])
async def timenow(request: Request):
    """
    Current time for a timezone. Query `timezone`, or JSON body `timezone`/`tz`.
    Falls back to UTC when the zone can't be resolved.
    """
    requested = request.query_params.get("timezone")
    if not requested and request.method == "POST":
        try:
            body = loads_body(await request.body())
        except ValueError:
            body = {}
        if isinstance(body, dict):
            requested = body.get("timezone") or body.get("tz")

    tz = resolve_timezone(requested, request.app.state.settings.default_timezone)
    try:
        return get_time_data(tz)
    except Exception as e:
        logger.error("timenow error: %s", e)
        return {"ok": True, "fallback": "Unexpected error; returning UTC.", **get_time_data("UTC")}
