from __future__ import annotations

import threading

import pytest

JSON = {"Accept": "application/json"}

LEAVES = [
    {"id": 1, "statut": "en_attente", "date_debut": "2024-05-01", "employe": {"nom": "Martin"}},
    {"id": 2, "statut": "approuve", "date_debut": "2024-03-01", "employe": {"nom": "Dupont"}},
    {"id": 3, "statut": "en_attente", "date_debut": "2024-04-01", "employe": {"nom": "Marchand"}},
]


@pytest.fixture
def admin(transport, login_as):
    transport.on("GET", "admin/conges", payload={"data": LEAVES})
    login_as("admin", "tok-admin")


def test_listing_json_applies_view_state(web, admin):
    response = web.get("/admin/conges?q=mar&status=en_attente&sort=date_debut&dir=desc", headers=JSON)

    body = response.get_json()
    assert response.status_code == 200
    assert [r["id"] for r in body["items"]] == [1, 3]
    assert body["total"] == 3
    assert body["error"] is None


def test_listing_html_renders_rows_and_actions(web, admin):
    response = web.get("/admin/conges")

    html = response.get_data(as_text=True)
    assert response.status_code == 200
    assert "Martin" in html and "Dupont" in html
    assert "/admin/conges/1/approve" in html
    assert "/admin/conges/2/approve" not in html


def test_listing_load_failure_shows_retry(web, transport, login_as):
    transport.on("GET", "admin/material", status=500, payload={"message": "Server Error"})
    login_as()

    html = web.get("/admin/materiel").get_data(as_text=True)

    assert "Server Error" in html
    assert "Réessayer" in html


def test_unknown_screen_is_not_found(web, login_as):
    login_as()

    assert web.get("/admin/inconnu", headers=JSON).status_code == 404


def test_row_action_json_reports_row_and_notification(web, transport, admin):
    transport.on("PUT", "admin/conges/1", payload={"message": "Congé approuvé", "data": {"id": 1, "statut": "approuve"}})

    response = web.post("/admin/conges/1/approve", headers=JSON)

    body = response.get_json()
    assert response.status_code == 200
    assert body["result"]["status"] == "succeeded"
    assert body["row"]["statut"] == "approuve"
    assert body["row"]["employe"] == {"nom": "Martin"}
    assert body["notification"]["kind"] == "success"
    assert body["notification"]["message"] == "Congé approuvé"
    assert transport.calls_to("PUT", "admin/conges/1")[0].token == "tok-admin"


def test_reject_without_reason_is_unprocessable(web, transport, admin):
    response = web.post("/admin/conges/1/reject", headers=JSON)

    assert response.status_code == 422
    assert response.get_json()["notification"]["kind"] == "warning"
    assert transport.calls_to("PUT", "admin/conges/1") == []


def test_api_failure_is_bad_gateway(web, transport, admin):
    transport.on("PUT", "admin/conges/3", status=500, payload={"message": "Erreur serveur"})

    response = web.post("/admin/conges/3/reject", data={"explication": "Non"}, headers=JSON)

    body = response.get_json()
    assert response.status_code == 502
    assert body["row"]["statut"] == "en_attente"
    assert body["notification"]["message"] == "Erreur serveur"
    assert body["notification"]["kind"] == "error"
    assert 0 < body["notification"]["expires_in"] <= 4.0


def test_html_action_flashes_and_keeps_view_args(web, transport, admin):
    transport.on("PUT", "admin/conges/1", payload={"message": "Congé approuvé"})

    response = web.post("/admin/conges/1/approve?q=mar&sort=date_debut&dir=desc")

    location = response.headers["Location"]
    assert response.status_code == 302
    assert "/admin/conges?" in location
    assert "q=mar" in location and "dir=desc" in location
    with web.session_transaction() as sess:
        assert ("success", "Congé approuvé") in sess["_flashes"]


def test_row_action_form_is_rendered_for_actions_with_fields(web, admin):
    response = web.get("/admin/conges/1/reject")

    assert response.status_code == 200
    assert 'name="explication"' in response.get_data(as_text=True)
    assert web.get("/admin/conges/1/approve").status_code == 404


def test_bulk_action_summarizes(web, transport, admin):
    transport.on("PUT", "admin/conges/1", payload={"message": "ok"})
    transport.on("PUT", "admin/conges/3", payload={"message": "ok"})

    response = web.post("/admin/conges/bulk/approve", json={"ids": [1, 3]}, headers=JSON)

    body = response.get_json()
    assert [r["status"] for r in body["results"]] == ["succeeded", "succeeded"]
    assert body["notification"]["message"] == "2 élément(s) traité(s) avec succès."


def test_bulk_action_from_html_checkboxes(web, transport, admin):
    transport.on("PUT", "admin/conges/1", payload={"message": "ok"})

    response = web.post("/admin/conges/bulk/approve", data={"ids": ["1", "2"]})

    assert response.status_code == 302
    assert len(transport.calls_to("PUT", "admin/conges/1")) == 1
    assert transport.calls_to("PUT", "admin/conges/2") == []
    with web.session_transaction() as sess:
        assert ("warning", "1 élément(s) traité(s), 1 échec(s).") in sess["_flashes"]


def test_create_json(web, transport, login_as):
    login_as("employe", "tok-emp")
    transport.on("GET", "employe/conges", payload=[])
    transport.on("POST", "employe/conges", status=201, payload={"data": {"id": 5, "statut": "en_attente"}})

    created = web.post(
        "/employe/conges/new",
        data={"date_debut": "2024-06-01", "date_fin": "2024-06-05", "motif": "Vacances"},
        headers=JSON,
    )
    refused = web.post(
        "/employe/conges/new",
        data={"date_debut": "2024-06-05", "date_fin": "2024-06-01", "motif": "Vacances"},
        headers=JSON,
    )

    assert created.status_code == 201
    assert refused.status_code == 422
    assert refused.get_json()["notification"]["kind"] == "warning"
    assert len(transport.calls_to("POST", "employe/conges")) == 1


def test_create_is_not_offered_on_read_only_screens(web, login_as):
    login_as("employe", "tok-emp")

    assert web.get("/employe/primes/new").status_code == 404


def test_command_sends_payslips(web, transport, login_as):
    login_as()
    transport.on("POST", "fiche-paie/send-all", payload={"message": "Fiches envoyées."})

    response = web.post("/admin/fiches-paie/commands/send_all", data={"mois": "05", "annee": "2024"}, headers=JSON)

    assert response.status_code == 200
    assert response.get_json()["notification"]["message"] == "Fiches envoyées."
    assert transport.calls_to("POST", "fiche-paie/send-all")[0].json == {"mois": "05", "annee": "2024"}


def test_dashboard_renders_tiles_even_when_one_fails(web, transport, admin):
    transport.on("GET", "admin/material", status=500, payload={"message": "Server Error"})

    response = web.get("/admin/dashboard")

    html = response.get_data(as_text=True)
    assert response.status_code == 200
    assert "Demandes de congé" in html
    assert "Server Error" in html


def test_second_request_for_a_running_action_is_busy(app, web, transport, admin):
    gate = threading.Event()
    route = transport.on("PUT", "admin/conges/1", payload={"message": "Congé approuvé"}, gate=gate)
    other = app.test_client()
    with other.session_transaction() as sess:
        sess["admin_token"] = "tok-admin"
    responses = []
    first = threading.Thread(
        target=lambda: responses.append(other.post("/admin/conges/1/approve", headers=JSON))
    )

    first.start()
    try:
        assert route.started.wait(2)
        again = web.post("/admin/conges/1/approve", headers=JSON)
        html = web.get("/admin/conges").get_data(as_text=True)
    finally:
        gate.set()
        first.join(5)

    assert again.status_code == 409
    assert again.get_json()["result"]["status"] == "busy"
    assert 'type="submit" disabled' in html
    assert responses[0].status_code == 200
    assert len(transport.calls_to("PUT", "admin/conges/1")) == 1
    assert 'type="submit" disabled' not in web.get("/admin/conges").get_data(as_text=True)


def test_row_action_after_failed_load_reports_the_load_error(web, transport, login_as):
    transport.on("GET", "admin/conges", status=500, payload={"message": "Server Error"})
    login_as()

    response = web.post("/admin/conges/1/approve", headers=JSON)

    body = response.get_json()
    assert response.status_code == 502
    assert body["result"] is None
    assert body["notification"]["kind"] == "error"
    assert body["notification"]["message"] == "Server Error"
    assert transport.calls_to("PUT", "admin/conges/1") == []


def test_bulk_action_after_failed_load_sends_nothing(web, transport, login_as):
    transport.on("GET", "admin/conges", status=500, payload={"message": "Server Error"})
    login_as()

    response = web.post("/admin/conges/bulk/approve", data={"ids": ["1"]})

    assert response.status_code == 302
    assert transport.calls == transport.calls_to("GET", "admin/conges")
    with web.session_transaction() as sess:
        assert ("error", "Server Error") in sess["_flashes"]
