# crm/api/v1/notes.py
from fastapi import APIRouter, Depends, Query
from typing import List

from crm.api.deps import get_notes_service, http_error, require_user
from crm.schemas.note import Note, NoteCreate, NoteUpdate
from crm.services.errors import CRMError
from crm.services.notes import NotesService

router = APIRouter(
    prefix="/students/{student_id}/notes",
    tags=["Notes"],
    dependencies=[Depends(require_user)],
)


@router.get("/", response_model=List[Note])
def list_notes(
    student_id: str,
    include_private: bool = Query(True, description="是否包含私密备注"),
    service: NotesService = Depends(get_notes_service),
):
    """
    学生的内部备注（最新的在前）
    """
    try:
        return service.list_notes(student_id, include_private=include_private)
    except CRMError as e:
        raise http_error(e)


@router.post("/", response_model=Note, status_code=201)
async def create_note(
    student_id: str,
    note: NoteCreate,
    service: NotesService = Depends(get_notes_service),
):
    try:
        return await service.create_note(student_id, note)
    except CRMError as e:
        raise http_error(e)


@router.put("/{note_id}", response_model=Note)
async def update_note(
    student_id: str,
    note_id: str,
    update: NoteUpdate,
    service: NotesService = Depends(get_notes_service),
):
    try:
        return await service.update_note(student_id, note_id, update)
    except CRMError as e:
        raise http_error(e)


@router.delete("/{note_id}")
async def delete_note(
    student_id: str,
    note_id: str,
    service: NotesService = Depends(get_notes_service),
):
    try:
        await service.delete_note(student_id, note_id)
        return {"success": True, "message": "Note deleted successfully"}
    except CRMError as e:
        raise http_error(e)
