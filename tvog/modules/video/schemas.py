from pydantic import BaseModel
from typing import Optional


class VideoGenerateRequest(BaseModel):
    prompt: Optional[str] = None


class VideoGenerateResponse(BaseModel):
    prediction_id: str
    status: str
