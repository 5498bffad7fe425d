from pydantic import BaseModel
from typing import Optional


class PreviewRequest(BaseModel):
    code: str
    language: Optional[str] = "code"
