"""
HTTP routes for the Memory Box API.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, File, Form, UploadFile

from backend.dependencies import get_auth_service, get_memory_service
from backend.schemas import (
    AuthResponse,
    HealthResponse,
    MemoryResponse,
    MessageResponse,
)
from backend.service import AuthService, MemoryService, PhotoUpload

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok")


@router.post("/auth/login", response_model=AuthResponse)
def login(
    payload: Any = Body(None),
    service: AuthService = Depends(get_auth_service),
):
    return service.login(payload).to_json()


@router.post("/auth/register", response_model=AuthResponse, status_code=201)
def register(
    payload: Any = Body(None),
    service: AuthService = Depends(get_auth_service),
):
    return service.register(payload).to_json()


@router.get("/memories/{group_id}", response_model=list[MemoryResponse])
def list_memories(
    group_id: str, service: MemoryService = Depends(get_memory_service)
):
    """
    Lists a group's memories in insertion order, creating the group if needed.
    """
    return [record.to_json() for record in service.list_memories(group_id)]


@router.post("/memories/{group_id}", response_model=MemoryResponse, status_code=201)
def create_memory(
    group_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    date: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    service: MemoryService = Depends(get_memory_service),
):
    upload = None
    if photo is not None:
        # Read one byte past the limit so oversized files are detected
        # without buffering them entirely.
        upload = PhotoUpload(
            data=photo.file.read(service.max_photo_bytes + 1),
            content_type=photo.content_type,
            filename=photo.filename,
        )
    form = {"title": title, "description": description, "date": date}
    return service.create_memory(group_id, form, upload).to_json()


@router.get("/memories/{group_id}/{memory_id}", response_model=MemoryResponse)
def get_memory(
    group_id: str,
    memory_id: str,
    service: MemoryService = Depends(get_memory_service),
):
    return service.get_memory(group_id, memory_id).to_json()


@router.delete("/memories/{group_id}/{memory_id}", response_model=MessageResponse)
def delete_memory(
    group_id: str,
    memory_id: str,
    service: MemoryService = Depends(get_memory_service),
):
    return service.delete_memory(group_id, memory_id)
