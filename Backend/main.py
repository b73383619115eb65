import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from studysprint.core.config import CORS_ORIGINS, GOALS_DATA_FILE, LOG_LEVEL, PORT
from studysprint.core.storage import JsonGoalStorage
from studysprint.goals import routes as goals_router
from studysprint.goals.service import GoalStore
from studysprint.system import routes as system_router

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(
    title="StudySprint API",
    version="1.0.0",
    description="Backend for StudySprint — goals with filtering, stats, archiving, import and export.",
)

# CORS config
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# Routers
app.include_router(system_router.router)
app.include_router(goals_router.router)


def _validation_message(exc: RequestValidationError) -> str:
    error = exc.errors()[0]
    original = error.get("ctx", {}).get("error")
    if original is not None:
        return str(original)
    field = ".".join(str(part) for part in error["loc"] if part != "body")
    if field:
        return f"{field}: {error['msg']}"
    if error["type"] == "missing":
        return "request body is required."
    return "request body must be a JSON object."


# Body and path errors are reported as 400 (or 404 for ids) instead of 422
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    if any(error["loc"] and error["loc"][0] == "path" for error in exc.errors()):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "Goal not found."})
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": _validation_message(exc)})


# Goal store
@app.on_event("startup")
def load_goal_store():
    if getattr(app.state, "goal_store", None) is None:
        app.state.goal_store = GoalStore(JsonGoalStorage(GOALS_DATA_FILE))
        logger.info(f"Goal store ready ({GOALS_DATA_FILE})")


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=PORT)
