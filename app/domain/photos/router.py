"""Photo router - uploads, galleries and client selections"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile
from sqlalchemy.orm import Session

from ...auth import Caller, get_current_caller, require_staff
from ...database import get_db
from ...schemas import MessageResponse
from ...shared.clock import Clock, get_clock
from ...shared.validators import parse_int_id
from .schemas import (
    PhotoResponse,
    SelectPhotoRequest,
    SelectPhotoResponse,
    UploadedPhoto,
    UploadResponse,
)
from .service import PhotoService, UploadItem
from .storage import PhotoStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/photos", tags=["Photos"])


def get_photo_storage(request: Request) -> PhotoStorage:
    return request.app.state.photo_storage


def get_photo_service(
    db: Session = Depends(get_db),
    storage: PhotoStorage = Depends(get_photo_storage),
    clock: Clock = Depends(get_clock),
) -> PhotoService:
    """Dependency injection for PhotoService"""
    return PhotoService(db, storage, clock)


@router.post("/upload/{booking_id}", response_model=UploadResponse, status_code=201)
async def upload_photos(
    booking_id: str,
    photos: Optional[list[UploadFile]] = File(None),
    caller: Caller = Depends(require_staff),
    service: PhotoService = Depends(get_photo_service),
):
    """Upload a batch of photos to a booking (admins and photographers)"""
    items = [
        UploadItem(
            filename=upload.filename or "",
            content_type=upload.content_type or "",
            data=await upload.read(),
        )
        for upload in photos or []
    ]
    uploaded = service.upload_photos(caller.uid, caller.role, parse_int_id(booking_id), items)
    return UploadResponse(
        message="Photos uploaded successfully",
        photos=[
            UploadedPhoto(
                id=p.id,
                filename=p.filename,
                originalName=p.original_name,
                size=p.file_size,
                url=p.file_url,
            )
            for p in uploaded
        ],
    )


@router.get("/booking/{booking_id}", response_model=list[PhotoResponse])
async def get_booking_photos(
    booking_id: str,
    caller: Caller = Depends(get_current_caller),
    service: PhotoService = Depends(get_photo_service),
):
    return service.list_booking_photos(caller.uid, caller.role, parse_int_id(booking_id))


@router.post("/{photo_id}/select", response_model=SelectPhotoResponse)
async def toggle_photo_selection(
    photo_id: str,
    data: Optional[SelectPhotoRequest] = None,
    caller: Caller = Depends(get_current_caller),
    service: PhotoService = Depends(get_photo_service),
):
    """Select or deselect a photo for the booking owner"""
    notes = data.notes if data else ""
    selected = service.toggle_selection(caller.uid, parse_int_id(photo_id, "photo"), notes)
    return SelectPhotoResponse(
        message="Photo selected" if selected else "Photo deselected",
        selected=selected,
    )


@router.get("/selections/{booking_id}", response_model=list[PhotoResponse])
async def get_selections(
    booking_id: str,
    caller: Caller = Depends(get_current_caller),
    service: PhotoService = Depends(get_photo_service),
):
    return service.list_selections(caller.uid, caller.role, parse_int_id(booking_id))


@router.delete("/{photo_id}", response_model=MessageResponse)
async def delete_photo(
    photo_id: str,
    caller: Caller = Depends(require_staff),
    service: PhotoService = Depends(get_photo_service),
):
    service.delete_photo(caller.role, parse_int_id(photo_id, "photo"))
    return MessageResponse(message="Photo deleted successfully")
