from typing import Optional

from pydantic import BaseModel


class DocumentResponse(BaseModel):
    success: bool
    url: Optional[str] = None
    filename: Optional[str] = None
    fallback: bool = False
    warning: Optional[str] = None
    preview_url: Optional[str] = None
    error: Optional[str] = None
