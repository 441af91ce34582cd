from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from formwave.config.database_config import get_db
from formwave.constants.error import ERROR
from formwave.constants.messages import MESSAGE
from formwave.exceptions import CustomException
from formwave.middleware.auth_middleware import auth_middleware
from formwave.schema.builder_schema import (
    AddFieldRequest, BuilderSaveRequest, BuilderSessionCreate, EditorUpdate, FieldUpdate, OptionText, ReorderRequest
)
from formwave.schema.field_schema import FIELD_PALETTE
from formwave.schema.form_schema import FormResponse
from formwave.services.builder_session_service import builder_sessions
from formwave.services.builder_state import BuilderState
from formwave.services.form_publisher import FormPublisher
from formwave.services.table_store import StoreError, TableStore
from formwave.utils.logger_utils import handle_route_error

builder_controller = APIRouter(dependencies=[Depends(auth_middleware)])


def _session_response(session, message=MESSAGE.BUILDER_UPDATED, status_code=200):
    return {"statusCode": status_code, "message": message, "data": session.to_response()}


def _require_editor(state: BuilderState):
    editor = state.editor()
    if editor is None:
        raise CustomException(status_code=409, message=ERROR.BUILDER_NO_SELECTION)
    return editor


@builder_controller.get("/palette", response_model=dict)
def handle_palette():
    palette = [{"type": field_type.value, "label": label} for field_type, label in FIELD_PALETTE]
    return {"statusCode": 200, "message": MESSAGE.PALETTE_FOUND, "data": palette}


@builder_controller.post("/sessions", response_model=dict)
def handle_open_session(request: Request, data: BuilderSessionCreate, db: Session = Depends(get_db)):
    try:
        state = BuilderState()
        if data.form_id is not None:
            store = TableStore(db)
            FormPublisher(store).load_owned_form(request.state.user, data.form_id, ERROR.FORM_EDIT_FORBIDDEN)
            try:
                questions = store.select("questions", eq={"form_id": data.form_id}, order_by="position")
            except StoreError as e:
                raise CustomException(status_code=500, message=ERROR.FORM_LOAD_FAILED) from e
            state = BuilderState.from_questions(questions)

        session = builder_sessions.open(request.state.user, state, form_id=data.form_id)
        return _session_response(session, MESSAGE.BUILDER_SESSION_CREATED, 201)
    except Exception as e:
        handle_route_error(error=e, context="POST /builder/sessions")


@builder_controller.get("/sessions/{session_id}", response_model=dict)
def handle_get_session(request: Request, session_id: str):
    try:
        session = builder_sessions.get(request.state.user, session_id)
        return _session_response(session, MESSAGE.BUILDER_SESSION_FOUND)
    except Exception as e:
        handle_route_error(error=e, context=f"GET /builder/sessions/{session_id}")


@builder_controller.delete("/sessions/{session_id}", response_model=dict)
def handle_close_session(request: Request, session_id: str):
    try:
        builder_sessions.close(request.state.user, session_id)
        return {"statusCode": 200, "message": MESSAGE.BUILDER_SESSION_CLOSED, "data": None}
    except Exception as e:
        handle_route_error(error=e, context=f"DELETE /builder/sessions/{session_id}")


@builder_controller.post("/sessions/{session_id}/fields", response_model=dict)
def handle_add_field(request: Request, session_id: str, data: AddFieldRequest):
    try:
        session = builder_sessions.get(request.state.user, session_id)
        with session.lock:
            session.state.add_field(data.type)
            return _session_response(session)
    except Exception as e:
        handle_route_error(error=e, context=f"POST /builder/sessions/{session_id}/fields")


@builder_controller.post("/sessions/{session_id}/reorder", response_model=dict)
def handle_reorder(request: Request, session_id: str, data: ReorderRequest):
    try:
        session = builder_sessions.get(request.state.user, session_id)
        with session.lock:
            session.state.reorder(data.source_index, data.destination_index)
            return _session_response(session)
    except Exception as e:
        handle_route_error(error=e, context=f"POST /builder/sessions/{session_id}/reorder")


@builder_controller.patch("/sessions/{session_id}/fields/{field_id}", response_model=dict)
def handle_update_field(request: Request, session_id: str, field_id: str, data: FieldUpdate):
    try:
        session = builder_sessions.get(request.state.user, session_id)
        with session.lock:
            session.state.update_field(field_id, data.model_dump(exclude_unset=True))
            return _session_response(session)
    except Exception as e:
        handle_route_error(error=e, context=f"PATCH /builder/sessions/{session_id}/fields/{field_id}")


@builder_controller.delete("/sessions/{session_id}/fields/{field_id}", response_model=dict)
def handle_delete_field(request: Request, session_id: str, field_id: str):
    try:
        session = builder_sessions.get(request.state.user, session_id)
        with session.lock:
            session.state.delete_field(field_id)
            return _session_response(session)
    except Exception as e:
        handle_route_error(error=e, context=f"DELETE /builder/sessions/{session_id}/fields/{field_id}")


@builder_controller.post("/sessions/{session_id}/fields/{field_id}/select", response_model=dict)
def handle_select_field(request: Request, session_id: str, field_id: str):
    try:
        session = builder_sessions.get(request.state.user, session_id)
        with session.lock:
            session.state.select_field(field_id)
            return _session_response(session)
    except Exception as e:
        handle_route_error(error=e, context=f"POST /builder/sessions/{session_id}/fields/{field_id}/select")


@builder_controller.post("/sessions/{session_id}/editor/close", response_model=dict)
def handle_close_editor(request: Request, session_id: str):
    try:
        session = builder_sessions.get(request.state.user, session_id)
        with session.lock:
            session.state.close_editor()
            return _session_response(session)
    except Exception as e:
        handle_route_error(error=e, context=f"POST /builder/sessions/{session_id}/editor/close")


@builder_controller.patch("/sessions/{session_id}/editor", response_model=dict)
def handle_edit_selected(request: Request, session_id: str, data: EditorUpdate):
    try:
        session = builder_sessions.get(request.state.user, session_id)
        with session.lock:
            editor = _require_editor(session.state)
            setters = {
                "label": editor.set_label,
                "placeholder": editor.set_placeholder,
                "help_text": editor.set_help_text,
                "default_value": editor.set_default_value,
                "required": editor.set_required,
                "width": editor.set_width,
                "font_size": editor.set_font_size,
                "text_color": editor.set_text_color,
                "background_color": editor.set_background_color,
                "border_color": editor.set_border_color,
            }
            for name, value in data.model_dump(exclude_unset=True).items():
                setters[name](value)
            return _session_response(session)
    except Exception as e:
        handle_route_error(error=e, context=f"PATCH /builder/sessions/{session_id}/editor")


@builder_controller.post("/sessions/{session_id}/editor/options", response_model=dict)
def handle_add_option(request: Request, session_id: str):
    try:
        session = builder_sessions.get(request.state.user, session_id)
        with session.lock:
            _require_editor(session.state).add_option()
            return _session_response(session)
    except Exception as e:
        handle_route_error(error=e, context=f"POST /builder/sessions/{session_id}/editor/options")


@builder_controller.put("/sessions/{session_id}/editor/options/{index}", response_model=dict)
def handle_update_option(request: Request, session_id: str, index: int, data: OptionText):
    try:
        session = builder_sessions.get(request.state.user, session_id)
        with session.lock:
            _require_editor(session.state).update_option(index, data.text)
            return _session_response(session)
    except Exception as e:
        handle_route_error(error=e, context=f"PUT /builder/sessions/{session_id}/editor/options/{index}")


@builder_controller.delete("/sessions/{session_id}/editor/options/{index}", response_model=dict)
def handle_remove_option(request: Request, session_id: str, index: int):
    try:
        session = builder_sessions.get(request.state.user, session_id)
        with session.lock:
            _require_editor(session.state).remove_option(index)
            return _session_response(session)
    except Exception as e:
        handle_route_error(error=e, context=f"DELETE /builder/sessions/{session_id}/editor/options/{index}")


@builder_controller.post("/sessions/{session_id}/save", response_model=dict)
def handle_save(request: Request, session_id: str, data: BuilderSaveRequest, db: Session = Depends(get_db)):
    try:
        session = builder_sessions.get(request.state.user, session_id)
        store = TableStore(db)
        with session.single_flight_save():
            created = session.form_id is None
            form = session.state.save(
                FormPublisher(store),
                request.state.user,
                data,
                form_id=session.form_id,
                expected_version=data.expected_version,
            )
            try:
                questions = store.select("questions", eq={"form_id": form["id"]}, order_by="position")
            except StoreError as e:
                raise CustomException(status_code=500, message=ERROR.FORM_LOAD_FAILED) from e
            # The next save must see the stored question ids or it replaces every question
            with session.lock:
                session.reload(form["id"], questions)

        return {
            "statusCode": 201 if created else 200,
            "message": MESSAGE.FORM_CREATED if created else MESSAGE.FORM_UPDATED,
            "data": FormResponse(**form),
        }
    except Exception as e:
        handle_route_error(error=e, context=f"POST /builder/sessions/{session_id}/save")
