import time
import logging
from typing import Optional
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from clinic_router.models.tool_input import ToolCall, loads_body
from clinic_router.services.router import ToolRouter, failure_envelope

logger = logging.getLogger(__name__)

router = APIRouter()


def get_tool_router(request: Request) -> ToolRouter:
    return request.app.state.tool_router


@router.post("/tools")
async def call_tool(request: Request):
    """
    Dispatch a tool call. Body: {"name": "<tool>", "arguments": {...}}
    Any content type is accepted; the body is always parsed as JSON.
    """
    start = time.time()
    raw = await request.body()

    try:
        payload = loads_body(raw)
        call = ToolCall.model_validate(payload if isinstance(payload, dict) else {})
    except (ValueError, ValidationError):
        return JSONResponse(
            status_code=400,
            content=failure_envelope("unknown", "Request body must be valid JSON", 400),
        )

    response = get_tool_router(request).dispatch(call.name, call.arguments)

    logger.info(
        "🔧 %s -> %d (%.2fms)",
        call.name, response.status_code, (time.time() - start) * 1000,
    )
    return JSONResponse(status_code=response.status_code, content=response.body)


@router.get("/tools")
async def list_tools(request: Request):
    """Registered tool names"""
    return {"tools": get_tool_router(request).tool_names}


@router.get("/tools/slots")
async def list_slots(request: Request):
    slots = get_tool_router(request).store.list_slots()
    return {"slots": [s.to_dict() for s in slots], "total": len(slots)}


@router.get("/tools/appointments")
async def list_appointments(request: Request):
    """
    Get all appointments (read-only snapshot)
    """
    appointments = get_tool_router(request).store.list_appointments()
    return {"appointments": [a.to_dict() for a in appointments], "total": len(appointments)}


@router.get("/tools/tickets")
async def list_tickets(request: Request, ticket_type: Optional[str] = Query(None, alias="type")):
    """
    Get refill/voicemail tickets, optionally filtered by type
    """
    tickets = get_tool_router(request).store.list_tickets(ticket_type)
    return {"tickets": tickets, "total": len(tickets)}
