from __future__ import annotations


def _open_builder(client, headers, **body):
    res = client.post("/builder/sessions", json=body, headers=headers)
    assert res.status_code == 200, res.text
    return res.json()["data"]


def _build_and_publish(client, headers):
    session = _open_builder(client, headers)
    sid = session["id"]

    client.post(f"/builder/sessions/{sid}/fields", json={"type": "text"}, headers=headers)
    client.patch(f"/builder/sessions/{sid}/editor", json={"label": "Name", "required": True}, headers=headers)

    client.post(f"/builder/sessions/{sid}/fields", json={"type": "radio"}, headers=headers)
    client.patch(f"/builder/sessions/{sid}/editor", json={"label": "Would you recommend us?"}, headers=headers)
    client.put(f"/builder/sessions/{sid}/editor/options/0", json={"text": "Yes"}, headers=headers)
    client.put(f"/builder/sessions/{sid}/editor/options/1", json={"text": "No"}, headers=headers)
    res = client.delete(f"/builder/sessions/{sid}/editor/options/2", headers=headers)
    assert res.json()["data"]["fields"][1]["options"] == ["Yes", "No"]

    res = client.post(
        f"/builder/sessions/{sid}/save",
        json={"title": "Customer Feedback", "description": "Quick survey", "type": "survey"},
        headers=headers,
    )
    assert res.status_code == 200, res.text
    assert res.json()["statusCode"] == 201
    return sid, res.json()["data"]


def test_signup_signin_and_session(client):
    res = client.post(
        "/user/signup",
        json={"email": "Maker@Example.com", "password": "secret123", "full_name": "Mia Maker"},
    )
    assert res.json()["statusCode"] == 201

    duplicate = client.post(
        "/user/signup",
        json={"email": "maker@example.com", "password": "secret123", "full_name": "Mia Again"},
    )
    assert duplicate.status_code == 409

    bad = client.post("/user/signin", json={"email": "maker@example.com", "password": "wrong-one"})
    assert bad.status_code == 401

    res = client.post("/user/signin", json={"email": "maker@example.com", "password": "secret123"})
    tokens = res.json()["data"]
    headers = {"Authorization": f"Bearer {tokens['authToken']}"}

    session = client.get("/user/session", headers=headers).json()["data"]
    assert session["user"]["email"] == "maker@example.com"

    refreshed = client.post("/user/refresh-token", json={"refresh_token": tokens["refreshToken"]})
    assert "authToken" in refreshed.json()["data"]


def test_routes_require_a_valid_token(client):
    assert client.get("/forms").status_code == 401
    assert client.get("/forms", headers={"Authorization": "Bearer nope"}).status_code == 401


def test_builder_reorder_and_palette(client, auth_headers):
    palette = client.get("/builder/palette", headers=auth_headers).json()["data"]
    assert palette[0] == {"type": "text", "label": "Text Input"}

    sid = _open_builder(client, auth_headers)["id"]
    for field_type in ("text", "email", "date"):
        client.post(f"/builder/sessions/{sid}/fields", json={"type": field_type}, headers=auth_headers)

    res = client.post(
        f"/builder/sessions/{sid}/reorder", json={"sourceIndex": 2, "destinationIndex": 0}, headers=auth_headers
    )
    assert [f["type"] for f in res.json()["data"]["fields"]] == ["date", "text", "email"]

    res = client.post(f"/builder/sessions/{sid}/reorder", json={"sourceIndex": 0}, headers=auth_headers)
    assert [f["type"] for f in res.json()["data"]["fields"]] == ["date", "text", "email"]


def test_builder_sessions_are_private(client, auth_headers, outsider_headers):
    sid = _open_builder(client, auth_headers)["id"]
    assert client.get(f"/builder/sessions/{sid}", headers=outsider_headers).status_code == 404


def test_builder_save_validation_errors(client, auth_headers):
    sid = _open_builder(client, auth_headers)["id"]

    res = client.post(f"/builder/sessions/{sid}/save", json={"title": ""}, headers=auth_headers)
    assert res.status_code == 400
    assert res.json()["message"] == [{"field": "title", "message": "Form title is required"}]

    res = client.post(f"/builder/sessions/{sid}/save", json={"title": "Survey"}, headers=auth_headers)
    assert res.status_code == 400
    assert res.json()["message"][0]["message"] == "You need to add at least one field"


def test_publish_fill_out_and_view_results(client, auth_headers):
    _sid, form = _build_and_publish(client, auth_headers)
    form_id = form["id"]

    public = client.get(f"/public/forms/{form_id}").json()["data"]
    name_q, recommend_q = public["questions"]
    assert recommend_q["type"] == "multiple_choice"
    assert recommend_q["field_type"] == "radio"

    res = client.post(f"/public/forms/{form_id}/submissions", json={"answers": {}})
    assert res.status_code == 400
    assert {e["field"] for e in res.json()["message"]} == {name_q["id"], recommend_q["id"]}

    for name, choice in (("Ann", "Yes"), ("Bob", "Yes"), ("Cy", "Yes"), ("Di", "No")):
        res = client.post(
            f"/public/forms/{form_id}/submissions",
            json={"answers": {name_q["id"]: name, recommend_q["id"]: [choice]}},
        )
        assert res.status_code == 200, res.text

    summary = client.get(f"/forms/{form_id}/results", headers=auth_headers).json()["data"]
    assert summary["response_count"] == 4
    recommend = summary["summaries"][1]
    assert recommend["total"] == 4
    assert recommend["breakdown"] == [
        {"option": "Yes", "count": 3, "percentage": 75},
        {"option": "No", "count": 1, "percentage": 25},
    ]

    responses = client.get(
        f"/forms/{form_id}/results", params={"view": "responses"}, headers=auth_headers
    ).json()["data"]["responses"]
    assert len(responses) == 4
    assert {r["answers"][0]["value"] for r in responses} == {"Ann", "Bob", "Cy", "Di"}

    listing = client.get("/forms", headers=auth_headers).json()["data"]
    assert [(f["id"], f["response_count"]) for f in listing] == [(form_id, 4)]
    assert listing[0]["share_url"].endswith(f"/{form_id}")


def test_results_and_edit_are_owner_only(client, auth_headers, outsider_headers):
    _sid, form = _build_and_publish(client, auth_headers)

    res = client.get(f"/forms/{form['id']}/results", headers=outsider_headers)
    assert res.status_code == 404
    assert res.json()["message"] == "Form not found or you do not have permission to view it"

    res = client.get(f"/forms/{form['id']}", headers=outsider_headers)
    assert res.status_code == 404
    assert client.delete(f"/forms/{form['id']}", headers=outsider_headers).status_code == 404


def test_edit_form_through_api(client, auth_headers):
    _sid, form = _build_and_publish(client, auth_headers)
    loaded = client.get(f"/forms/{form['id']}", headers=auth_headers).json()["data"]
    recommend_q = loaded["questions"][1]

    payload = {
        "title": "Customer Feedback v2",
        "type": "survey",
        "expected_version": loaded["version"],
        "questions": [
            {**recommend_q, "isNew": False},
            {"id": "new_1", "type": "text", "title": "Anything else?", "isNew": True},
        ],
    }
    res = client.put(f"/forms/{form['id']}", json=payload, headers=auth_headers)
    assert res.status_code == 200, res.text
    assert res.json()["data"]["version"] == loaded["version"] + 1

    reloaded = client.get(f"/forms/{form['id']}", headers=auth_headers).json()["data"]
    assert [q["title"] for q in reloaded["questions"]] == ["Would you recommend us?", "Anything else?"]
    assert reloaded["questions"][0]["settings"]["styles"]["width"] == "full"

    stale = client.put(f"/forms/{form['id']}", json=payload, headers=auth_headers)
    assert stale.status_code == 409


def test_saving_twice_from_one_canvas_updates_the_same_form(client, auth_headers):
    sid, form = _build_and_publish(client, auth_headers)

    client.post(f"/builder/sessions/{sid}/fields", json={"type": "textarea"}, headers=auth_headers)
    res = client.post(
        f"/builder/sessions/{sid}/save",
        json={"title": "Customer Feedback", "type": "survey"},
        headers=auth_headers,
    )
    assert res.json()["statusCode"] == 200
    assert res.json()["data"]["id"] == form["id"]

    loaded = client.get(f"/forms/{form['id']}", headers=auth_headers).json()["data"]
    assert [q["field_type"] for q in loaded["questions"]] == ["text", "radio", "textarea"]


def test_delete_form_removes_it_and_its_public_page(client, auth_headers):
    _sid, form = _build_and_publish(client, auth_headers)

    assert client.delete(f"/forms/{form['id']}", headers=auth_headers).status_code == 200
    assert client.get("/forms", headers=auth_headers).json()["data"] == []
    res = client.get(f"/public/forms/{form['id']}")
    assert res.status_code == 404
    assert res.json()["message"] == "Form not found or no longer available"


def test_resaving_from_the_builder_keeps_existing_answers(client, auth_headers):
    sid = _open_builder(client, auth_headers)["id"]
    client.post(f"/builder/sessions/{sid}/fields", json={"type": "text"}, headers=auth_headers)
    save = {"title": "Pulse check", "type": "survey"}
    assert client.post(f"/builder/sessions/{sid}/save", json=save, headers=auth_headers).json()["statusCode"] == 201

    client.post(f"/builder/sessions/{sid}/fields", json={"type": "radio"}, headers=auth_headers)
    res = client.post(f"/builder/sessions/{sid}/save", json=save, headers=auth_headers)
    form_id = res.json()["data"]["id"]

    questions = client.get(f"/public/forms/{form_id}").json()["data"]["questions"]
    radio = questions[1]
    session = client.get(f"/builder/sessions/{sid}", headers=auth_headers).json()["data"]
    assert [f["id"] for f in session["fields"]] == [q["id"] for q in questions]

    client.post(
        f"/public/forms/{form_id}/submissions",
        json={"answers": {questions[0]["id"]: "Fine", radio["id"]: ["Option 1"]}},
    )

    res = client.post(f"/builder/sessions/{sid}/save", json=save, headers=auth_headers)
    assert res.json()["statusCode"] == 200

    after = client.get(f"/public/forms/{form_id}").json()["data"]["questions"]
    assert [q["id"] for q in after] == [q["id"] for q in questions]
    summaries = client.get(f"/forms/{form_id}/results", headers=auth_headers).json()["data"]["summaries"]
    assert summaries[1]["answers"] == {"Option 1": 1}
    assert summaries[1]["total"] == 1


def test_builder_save_keeps_the_selected_field_open(client, auth_headers):
    sid = _open_builder(client, auth_headers)["id"]
    client.post(f"/builder/sessions/{sid}/fields", json={"type": "text"}, headers=auth_headers)
    client.post(f"/builder/sessions/{sid}/fields", json={"type": "email"}, headers=auth_headers)

    client.post(f"/builder/sessions/{sid}/save", json={"title": "Signup"}, headers=auth_headers)

    session = client.get(f"/builder/sessions/{sid}", headers=auth_headers).json()["data"]
    assert session["is_editor_open"] is True
    assert session["selected_field_id"] == session["fields"][1]["id"]
    assert session["form_id"] is not None
