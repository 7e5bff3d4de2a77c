import json
from pydantic import BaseModel
from typing import Any, Optional


def _reject_constant(name):
    raise ValueError(f"Non-standard JSON constant: {name}")


def loads_body(raw: bytes) -> Any:
    """Parse a request body as strict JSON (NaN/Infinity are rejected)"""
    return json.loads(raw or b"{}", parse_constant=_reject_constant)


class ToolCall(BaseModel):
    name: Optional[Any] = None
    arguments: Optional[Any] = None
