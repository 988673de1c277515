"""Photo domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class SelectPhotoRequest(BaseModel):
    notes: Optional[str] = ""


class SelectPhotoResponse(BaseModel):
    message: str
    selected: bool


class UploadedPhoto(BaseModel):
    id: int
    filename: str
    originalName: Optional[str] = None
    size: Optional[int] = None
    url: Optional[str] = None


class UploadResponse(BaseModel):
    message: str
    photos: list[UploadedPhoto]


class PhotoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    booking_id: int
    filename: str
    original_name: Optional[str] = None
    file_url: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    uploaded_by: Optional[str] = None
    upload_date: Optional[datetime] = None
    # The requesting user's selection of this photo, if any
    selection_id: Optional[int] = None
    selected_at: Optional[datetime] = None
    notes: Optional[str] = None
