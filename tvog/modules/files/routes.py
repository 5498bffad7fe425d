from fastapi import APIRouter, Depends, UploadFile, File, Form
from fastapi.responses import Response
from tvog.modules.files.schemas import FileUploadResponse, SignedUrlResponse
from tvog.modules.files.service import FileService
from tvog.core.dependencies import get_user_supabase
from supabase import Client
from typing import Optional
from urllib.parse import quote

router = APIRouter(prefix="/files", tags=["files"])


def get_file_service(supabase: Client = Depends(get_user_supabase)) -> FileService:
    return FileService(supabase)


@router.post("", response_model=FileUploadResponse, status_code=201)
async def upload_file(
    conversation_id: str = Form(...),
    file: UploadFile = File(...),
    service: FileService = Depends(get_file_service)
):
    """Upload an attachment; send the returned metadata along with the message"""
    return await service.upload_file(conversation_id, file)


@router.get("/signed-url", response_model=SignedUrlResponse)
async def signed_url(
    path: str,
    expires_in: Optional[int] = None,
    service: FileService = Depends(get_file_service)
):
    return service.create_signed_url(path, expires_in)


@router.get("/download")
async def download_file(
    path: str,
    name: Optional[str] = None,
    service: FileService = Depends(get_file_service)
):
    content = service.download_file(path)
    filename = name or path.rsplit("/", 1)[-1]
    return Response(
        content=content,
        media_type="application/octet-stream",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )


@router.delete("", status_code=204)
async def delete_file(
    path: str,
    service: FileService = Depends(get_file_service)
):
    service.delete_file(path)
    return None
