import logging
from uuid import UUID

from fastapi import APIRouter, status

from rentshop.schemas.note import NoteRequest, NoteResponse
from rentshop.schemas.response import SuccessResponse
from rentshop.services.note_service import add_note, delete_note, list_notes

router = APIRouter()
log = logging.getLogger("uvicorn")


@router.get("/", response_model=SuccessResponse)
async def list_notes_endpoint():
    notes = await list_notes()
    return SuccessResponse(data=[NoteResponse.model_validate(n).model_dump() for n in notes])


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def add_note_endpoint(request_data: NoteRequest):
    note = await add_note(request_data.content)
    return SuccessResponse(data=NoteResponse.model_validate(note).model_dump())


@router.delete("/{note_id}", response_model=SuccessResponse)
async def delete_note_endpoint(note_id: UUID):
    await delete_note(note_id)
    log.info(f"Note {note_id} removed.")
    return SuccessResponse(data={"id": str(note_id), "deleted": True})
