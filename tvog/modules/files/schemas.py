from pydantic import BaseModel
from typing import Optional


class FileUploadResponse(BaseModel):
    url: str
    name: str
    type: Optional[str] = None
    size: int
    message: str = "File uploaded successfully"


class SignedUrlResponse(BaseModel):
    path: str
    signed_url: str
    expires_in: int
