# crm/services/notes.py
from datetime import datetime
from typing import Callable, List, Optional
import logging
import uuid

from crm.schemas.common import utcnow
from crm.schemas.note import Note, NoteCreate, NoteUpdate
from crm.services.data_store import DataStore
from crm.services.errors import CRMError, NotFoundError, OperationFailedError
from crm.services.latency import Latency

logger = logging.getLogger(__name__)


class NotesService:
    """学生详情页的内部备注"""

    def __init__(
        self,
        store: DataStore,
        latency: Optional[Latency] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._store = store
        self._latency = latency or Latency.none()
        self._clock = clock

    def list_notes(self, student_id: str, include_private: bool = True) -> List[Note]:
        """某个学生的备注，最新的在前"""
        self._store.students.require(student_id)
        notes = [
            n for n in self._store.list_notes()
            if n.student_id == student_id and (include_private or not n.is_private)
        ]
        notes.sort(key=lambda n: n.timestamp, reverse=True)
        return notes

    def _require_note(self, student_id: str, note_id: str) -> Note:
        note = self._store.notes.get(note_id)
        if note is None or note.student_id != student_id:
            raise NotFoundError("Note", note_id)
        return note

    async def create_note(self, student_id: str, data: NoteCreate) -> Note:
        await self._latency()
        try:
            self._store.students.require(student_id)
            note = Note(
                id=str(uuid.uuid4()),
                student_id=student_id,
                timestamp=self._clock(),
                **data.model_dump(),
            )
            self._store.notes.insert(note)
        except CRMError:
            raise
        except Exception as e:
            logger.error(f"添加备注失败: {e}", exc_info=True)
            raise OperationFailedError("Failed to create note") from e

        logger.info(f"已为学生 {student_id} 添加备注: {note.id}")
        return note

    async def update_note(self, student_id: str, note_id: str, data: NoteUpdate) -> Note:
        await self._latency()
        try:
            self._require_note(student_id, note_id)
            note = self._store.notes.update(note_id, data.model_dump(exclude_unset=True))
        except CRMError:
            raise
        except Exception as e:
            logger.error(f"更新备注 {note_id} 失败: {e}", exc_info=True)
            raise OperationFailedError("Failed to update note") from e
        return note

    async def delete_note(self, student_id: str, note_id: str) -> Note:
        await self._latency()
        try:
            self._require_note(student_id, note_id)
            note = self._store.notes.remove(note_id)
        except CRMError:
            raise
        except Exception as e:
            logger.error(f"删除备注 {note_id} 失败: {e}", exc_info=True)
            raise OperationFailedError("Failed to delete note") from e

        logger.info(f"已删除备注: {note_id}")
        return note
