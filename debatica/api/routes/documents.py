"""Document upload routes"""

from fastapi import APIRouter, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from debatica.core.exceptions import UnsupportedFileError
from debatica.features.extractor import extract_pdf_text, is_pdf

router = APIRouter()


@router.post("/parse-pdf")
async def parse_pdf(file: UploadFile = File(...)):
    """Extract the text of an uploaded PDF"""
    if not is_pdf(file.content_type, file.filename):
        raise UnsupportedFileError(file.filename, file.content_type)

    data = await file.read()
    text = await run_in_threadpool(extract_pdf_text, data)
    return {"text": text, "filename": file.filename}
