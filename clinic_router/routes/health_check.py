from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
def root():
    return "✅ clinic tool router running"


@router.get("/healthz", response_class=PlainTextResponse)
def healthz():
    return "ok"
