from supabase import Client
from tvog.config.settings import settings
from tvog.modules.files.schemas import FileUploadResponse, SignedUrlResponse
from typing import Optional
from fastapi import HTTPException, UploadFile
import uuid
import logging

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def object_path(conversation_id: str, filename: str) -> str:
    """Storage key for an upload: <conversation_id>/<uuid>.<ext>"""
    extension = filename.rsplit(".", 1)[-1] if filename else ""
    return f"{conversation_id}/{uuid.uuid4()}.{extension}"


class FileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.bucket = settings.storage_bucket

    def _storage(self):
        return self.supabase.storage.from_(self.bucket)

    async def upload_file(self, conversation_id: str, file: UploadFile) -> FileUploadResponse:
        """Store an attachment for a conversation"""
        # At most one byte past the limit.
        file_content = await file.read(settings.max_file_size + 1)
        if len(file_content) > settings.max_file_size:
            raise HTTPException(
                status_code=413,
                detail=f"File too large. Maximum file size is {settings.max_file_size // (1024 * 1024)}MB"
            )

        filename = file.filename or "file"
        content_type = file.content_type or DEFAULT_CONTENT_TYPE
        path = object_path(conversation_id, filename)
        try:
            self._storage().upload(path, file_content, {"content-type": content_type})
            logger.info(f"Uploaded {filename} to {self.bucket}/{path}")
        except Exception as e:
            logger.error(f"Upload failed: {str(e)}")
            raise HTTPException(status_code=500, detail=f"Upload failed: {str(e)}")

        return FileUploadResponse(
            url=path,
            name=filename,
            type=content_type,
            size=len(file_content),
        )

    def download_file(self, path: str) -> bytes:
        try:
            return self._storage().download(path)
        except Exception as e:
            raise HTTPException(status_code=404, detail=f"Download failed: {str(e)}")

    def create_signed_url(self, path: str, expires_in: Optional[int] = None) -> SignedUrlResponse:
        expires_in = expires_in or settings.signed_url_ttl
        try:
            result = self._storage().create_signed_url(path, expires_in)
        except Exception as e:
            raise HTTPException(status_code=404, detail=f"Could not get file URL: {str(e)}")
        signed_url = (result or {}).get("signedURL") or (result or {}).get("signedUrl")
        if not signed_url:
            raise HTTPException(status_code=404, detail="Could not get file URL")
        return SignedUrlResponse(path=path, signed_url=signed_url, expires_in=expires_in)

    def delete_file(self, path: str) -> bool:
        try:
            removed = self._storage().remove([path])
            return bool(removed)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
