from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from sqlmodel import Session
from pathlib import Path
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError
import aiofiles
import docx2txt
import logging
import re
import time
import zipfile

from hiredready.ai.client import GenerativeClient, get_ai_client
from hiredready.ai.parsing import parse_model
from hiredready.ai.prompts import resume_analysis_prompt, resume_guard_prompt
from hiredready.config import UPLOAD_DIR
from hiredready.db import engine
from hiredready.errors import InvalidInput, ServerError, UpstreamFormatError, UpstreamServiceError
from hiredready.models import Resume
from hiredready.schemas import ResumeCheck

router = APIRouter(prefix="/api/resume", tags=["resume"])
logger = logging.getLogger(__name__)

RESUME_DIR = UPLOAD_DIR / "resumes"
MIN_TEXT_CHARS = 50
PDF_TYPE = "application/pdf"
DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
ANALYSIS_FAILED = "An internal server error occurred. Please try again later."


def extract_text(path: Path, content_type: str) -> str:
    """Plain text of a PDF, DOCX or text upload."""
    suffix = path.suffix.lower()
    try:
        if content_type == PDF_TYPE or suffix == ".pdf":
            reader = PdfReader(str(path))
            return "\n".join(page.extract_text() or "" for page in reader.pages)
        if content_type == DOCX_TYPE or suffix == ".docx":
            return docx2txt.process(str(path)) or ""
    except (PdfReadError, zipfile.BadZipFile, KeyError) as e:
        logger.warning("Could not read %s: %s", path.name, e)
        return ""
    return path.read_text(encoding="utf-8", errors="ignore")


def _analyze(file_path: Path, original_name: str, content_type: str, ai_client: GenerativeClient):
    resume_text = extract_text(file_path, content_type)
    if len(resume_text.strip()) < MIN_TEXT_CHARS:
        raise InvalidInput("Could not extract sufficient text from the document.")

    try:
        check = parse_model(ai_client.complete(resume_guard_prompt(resume_text)), ResumeCheck)
        if not check.is_resume:
            return JSONResponse(status_code=400, content={
                "message": "The uploaded file does not appear to be a resume.",
                "reason": check.reason,
            })
        analysis = ai_client.complete(resume_analysis_prompt(resume_text))
    except (UpstreamFormatError, UpstreamServiceError) as e:
        logger.error("Error during resume analysis: %s", e)
        raise ServerError(ANALYSIS_FAILED)

    with Session(engine) as session:
        record = Resume(original_name=original_name, file_path=str(file_path), analysis=analysis)
        session.add(record)
        session.commit()
        session.refresh(record)
        return {"message": "Analysis complete", "analysis": analysis, "resumeId": record.id}


@router.post("/upload")
async def analyze_resume(
    resume: UploadFile = File(None),
    ai_client: GenerativeClient = Depends(get_ai_client),
):
    if resume is None or not resume.filename:
        raise InvalidInput("No file uploaded.")

    RESUME_DIR.mkdir(parents=True, exist_ok=True)
    safe_name = re.sub(r"[^A-Za-z0-9._-]", "-", Path(resume.filename).name)
    file_path = RESUME_DIR / f"{int(time.time() * 1000)}-{safe_name}"
    async with aiofiles.open(file_path, "wb") as f:
        await f.write(await resume.read())

    try:
        return await run_in_threadpool(_analyze, file_path, resume.filename, resume.content_type, ai_client)
    finally:
        try:
            file_path.unlink()
            logger.info("Deleted temporary file: %s", file_path)
        except OSError as e:
            logger.error("Error deleting temporary file %s: %s", file_path, e)
