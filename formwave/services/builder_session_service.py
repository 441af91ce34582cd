import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from formwave.constants.error import ERROR
from formwave.exceptions import CustomException
from formwave.schema.builder_schema import BuilderSessionResponse
from formwave.schema.user_schema import RequestContext
from formwave.services.builder_state import BuilderState
from formwave.utils.logger_utils import log_info


@dataclass
class BuilderSession:
    id: str
    owner_id: str
    state: BuilderState
    form_id: Optional[str] = None
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    save_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def to_response(self) -> BuilderSessionResponse:
        editor = self.state.editor()
        return BuilderSessionResponse(
            id=self.id,
            form_id=self.form_id,
            fields=self.state.fields,
            selected_field_id=self.state.selected_field_id,
            is_editor_open=self.state.is_editor_open,
            can_remove_option=editor.can_remove_option if editor else False,
        )

    @contextmanager
    def single_flight_save(self):
        # A second save while one is running is refused, not queued
        if not self.save_lock.acquire(blocking=False):
            raise CustomException(status_code=409, message=ERROR.BUILDER_SAVE_IN_PROGRESS)
        try:
            yield
        finally:
            self.save_lock.release()

    def reload(self, form_id: str, questions: List[dict]) -> None:
        """Point the canvas at the saved form; field ids become the stored question ids"""
        selected_index = next(
            (index for index, field in enumerate(self.state.fields) if field.id == self.state.selected_field_id),
            None,
        )
        editor_open = self.state.is_editor_open

        state = BuilderState.from_questions(questions)
        if editor_open and selected_index is not None and selected_index < len(state.fields):
            state.select_field(state.fields[selected_index].id)

        self.form_id = form_id
        self.state = state


class BuilderSessionRegistry:
    """In-process builder sessions, one per open builder canvas"""

    def __init__(self):
        self._sessions: Dict[str, BuilderSession] = {}
        self._lock = threading.Lock()

    def open(self, context: RequestContext, state: BuilderState, form_id: Optional[str] = None) -> BuilderSession:
        session = BuilderSession(
            id=str(uuid.uuid4()),
            owner_id=context.caller_id,
            state=state,
            form_id=form_id,
        )
        with self._lock:
            self._sessions[session.id] = session
        log_info(context="BUILDER", message=f"Session {session.id} opened by {context.caller_id}")
        return session

    def get(self, context: RequestContext, session_id: str) -> BuilderSession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None or session.owner_id != context.caller_id:
            raise CustomException(status_code=404, message=ERROR.BUILDER_SESSION_NOT_FOUND)
        return session

    def close(self, context: RequestContext, session_id: str) -> None:
        session = self.get(context, session_id)
        with self._lock:
            self._sessions.pop(session.id, None)
        log_info(context="BUILDER", message=f"Session {session_id} closed")

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()


builder_sessions = BuilderSessionRegistry()
