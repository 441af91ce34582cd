from __future__ import annotations

import pytest

from formwave.exceptions import CustomException
from formwave.schema.form_schema import FormDetails
from formwave.services.builder_session_service import BuilderSessionRegistry
from formwave.services.builder_state import BuilderState
from formwave.services.form_publisher import FormPublisher


def _questions(store, form_id):
    return store.select("questions", eq={"form_id": form_id}, order_by="position")


def test_second_save_while_saving_is_refused(owner):
    session = BuilderSessionRegistry().open(owner, BuilderState())

    with session.single_flight_save():
        with pytest.raises(CustomException) as exc:
            with session.single_flight_save():
                pass

    assert exc.value.status_code == 409
    with session.single_flight_save():
        pass


def test_reload_binds_fields_to_stored_questions(store, owner):
    state = BuilderState()
    state.add_field("text")
    state.add_field("checkbox")
    session = BuilderSessionRegistry().open(owner, state)

    form = state.save(FormPublisher(store), owner, FormDetails(title="Poll"))
    session.reload(form["id"], _questions(store, form["id"]))

    assert session.form_id == form["id"]
    assert [field.id for field in session.state.fields] == [q["id"] for q in _questions(store, form["id"])]
    assert session.state.selected_field_id == session.state.fields[1].id


def test_saving_a_reloaded_canvas_updates_questions_in_place(store, owner):
    state = BuilderState()
    state.add_field("radio")
    session = BuilderSessionRegistry().open(owner, state)
    publisher = FormPublisher(store)

    form = state.save(publisher, owner, FormDetails(title="Poll"))
    session.reload(form["id"], _questions(store, form["id"]))
    [before] = _questions(store, form["id"])

    session.state.save(publisher, owner, FormDetails(title="Poll"), form_id=session.form_id)

    [after] = _questions(store, form["id"])
    assert after["id"] == before["id"]
    assert store.calls_to("delete", "questions")[-1]["not_in"] == ("id", [before["id"]])
