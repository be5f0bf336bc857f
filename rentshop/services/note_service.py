import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentshop.core.db import in_transaction
from rentshop.core.errors import NotFound
from rentshop.models import Note
from rentshop.services.common import require_text

log = logging.getLogger(__name__)


async def add_note(content: str, conn: Optional[AsyncSession] = None) -> Note:
    note = Note(content=require_text(content, "content"))
    async with in_transaction(conn) as session:
        session.add(note)
        await session.flush()
    return note


async def list_notes(conn: Optional[AsyncSession] = None) -> List[Note]:
    """Newest note first."""
    async with in_transaction(conn) as session:
        result = await session.execute(select(Note).order_by(Note.created_at.desc()))
        return list(result.scalars().all())


async def delete_note(note_id: UUID, conn: Optional[AsyncSession] = None) -> None:
    async with in_transaction(conn) as session:
        note = await session.get(Note, note_id)
        if note is None:
            raise NotFound("Note", note_id)
        await session.delete(note)
    log.info(f"Note {note_id} deleted.")
