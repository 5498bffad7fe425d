from fastapi import APIRouter, HTTPException
from fastapi.responses import HTMLResponse
from tvog.modules.preview.builder import build_preview, is_previewable
from tvog.modules.preview.schemas import PreviewRequest

router = APIRouter(prefix="/preview", tags=["preview"])

# Rendered documents run untrusted snippets; keep them in an opaque origin.
PREVIEW_HEADERS = {"Content-Security-Policy": "sandbox allow-scripts"}


@router.post("", response_class=HTMLResponse)
async def preview_code(request: PreviewRequest):
    """Live preview document for an html / css / js / jsx code block"""
    if not is_previewable(request.language):
        raise HTTPException(status_code=400, detail=f"Preview is not available for {request.language}")
    return HTMLResponse(build_preview(request.code, request.language), headers=PREVIEW_HEADERS)
