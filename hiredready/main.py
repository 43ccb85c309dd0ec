from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
import logging

from hiredready.routers import code, coding, leaderboard, quiz, resume
from hiredready import auth
from hiredready.ai.client import GenerativeClient
from hiredready.config import CORS_ORIGINS, LOG_LEVEL, UPLOAD_DIR
from hiredready.db import init_db
from hiredready.errors import AppError
from hiredready.judge.runner import SimulatedJudge

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

UPLOAD_DIR.mkdir(parents=True, exist_ok=True)

app = FastAPI(title="HiredReady interview prep API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)
app.mount("/uploads", StaticFiles(directory=str(UPLOAD_DIR)), name="uploads")

app.include_router(auth.router)
app.include_router(coding.router)
app.include_router(code.router)
app.include_router(leaderboard.router)
app.include_router(quiz.router)
app.include_router(resume.router)


@app.on_event("startup")
async def on_startup():
    init_db()
    app.state.ai_client = GenerativeClient.from_env()
    app.state.judge = SimulatedJudge()


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse({"message": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = ", ".join(".".join(str(p) for p in err["loc"] if p != "body") for err in exc.errors())
    return JSONResponse({"message": f"Invalid or missing field(s): {fields}"}, status_code=400)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse({"message": "Server Error"}, status_code=500)


@app.get("/")
def index():
    return {"message": "HiredReady API is running"}


if __name__ == "__main__":
    import uvicorn
    import os
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", 8000)))
