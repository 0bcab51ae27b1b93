from fastapi import APIRouter, File, HTTPException, UploadFile

from app.core.config import settings
from app.core.exceptions import ExtractionError
from app.services.document_extraction import extract_text

upload_router = APIRouter(prefix="/api", tags=["Upload"])


@upload_router.post("/upload")
def upload(file: UploadFile = File(...)):
    data = file.file.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="File too large")

    try:
        text = extract_text(file.filename or "", data)
    except ExtractionError as exc:
        raise HTTPException(status_code=500, detail=f"Error extracting text: {exc}")
    return {"text": text}
