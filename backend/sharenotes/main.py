import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from sharenotes.api.notes import router as notes_router
from sharenotes.services.errors import NoteServiceError

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Share Notes API")
app.include_router(notes_router)


@app.exception_handler(NoteServiceError)
async def note_service_error_handler(request: Request, exc: NoteServiceError) -> JSONResponse:
    if exc.detail:
        # path is not logged: it carries the view id
        logger.warning("%s on %s: %s", type(exc).__name__, request.method, exc.detail)
    body = {"detail": exc.message}
    if exc.expose_detail and exc.detail:
        body["detail"] = f"{exc.message}: {exc.detail}"
    return JSONResponse(status_code=exc.status_code, content=body)


@app.get("/health")
def health():
    return {"ok": True}
