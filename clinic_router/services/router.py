import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from clinic_router.services.handlers import (
    HANDLERS,
    INVALID_ARGUMENT,
    NOT_FOUND,
    Handler,
    ToolContext,
    ToolFailure,
)
from clinic_router.services.notifications import LogNotifier
from clinic_router.services.store import ClinicStore

logger = logging.getLogger(__name__)

TOOL_NAMES = (
    "appt.search",
    "appt.book",
    "appt.modify",
    "intake.save",
    "insurance.verify",
    "refill.create",
    "message.send",
    "emergency.transfer",
    "voicemail.save",
)


@dataclass
class ToolResponse:
    status_code: int
    body: Dict[str, Any]


def failure_envelope(tool: str, message: str, code: int = INVALID_ARGUMENT) -> Dict[str, Any]:
    return {"tool": tool, "error": {"message": message, "code": code}}


class ToolRouter:
    """
    Single entry point for tool calls: looks up the handler by name, runs it
    against the store and wraps the outcome in the response envelope.
    """

    def __init__(
        self,
        store: ClinicStore,
        settings: Any,
        notifier: Optional[LogNotifier] = None,
        handlers: Optional[Mapping[str, Handler]] = None,
    ):
        handlers = dict(HANDLERS if handlers is None else handlers)

        missing = [name for name in TOOL_NAMES if name not in handlers]
        extra = [name for name in handlers if name not in TOOL_NAMES]
        if missing or extra:
            raise RuntimeError(f"Tool registry mismatch (missing={missing}, unexpected={extra})")

        self.store = store
        self.handlers = handlers
        self.context = ToolContext(store=store, settings=settings, notifier=notifier or LogNotifier())

    @property
    def tool_names(self):
        return list(TOOL_NAMES)

    def dispatch(self, name: Any, arguments: Any = None) -> ToolResponse:
        handler = self.handlers.get(name) if isinstance(name, str) else None
        if handler is None:
            logger.info("❓ Unknown tool requested: %r", name)
            return ToolResponse(200, failure_envelope("unknown", f"Unknown tool: {name}", NOT_FOUND))

        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            return ToolResponse(200, failure_envelope(name, "arguments must be a JSON object"))

        try:
            with self.store.lock:
                outcome = handler(self.context, dict(arguments))
        except Exception as e:
            logger.exception("❌ Tool %s failed unexpectedly", name)
            return ToolResponse(500, {"error": {"message": f"Internal error while running {name}: {e}"}})

        if isinstance(outcome, ToolFailure):
            return ToolResponse(200, failure_envelope(name, outcome.message, outcome.code))

        return ToolResponse(200, {"tool": name, "result": outcome})
