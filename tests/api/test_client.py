from __future__ import annotations

import asyncio
import threading

import pytest

from hr_portal.api.client import ApiClient
from hr_portal.api.credentials import StaticCredentials
from hr_portal.api.transport import Attachment
from hr_portal.core.exceptions import ApiError, AuthenticationError, RequestTimeout


def test_json_call_carries_bearer_token(transport, client):
    transport.on("PUT", "admin/conges/1", payload={"message": "ok"})

    assert client.call("PUT", "admin/conges/1", json={"statut": "approuve"}) == {"message": "ok"}

    call = transport.calls[0]
    assert (call.method, call.token, call.json, call.data) == ("PUT", "tok-123", {"statut": "approuve"}, None)


def test_form_put_is_sent_as_post_with_method_override(transport, client):
    transport.on("POST", "employe/absences/3", payload={"message": "ok"})
    proof = Attachment("certificat.pdf", "application/pdf", b"%PDF")

    client.call("PUT", "employe/absences/3", form={"justifiee": True, "motif": "Malade", "vide": None}, files={"justificatif": proof})

    call = transport.calls[0]
    assert call.method == "POST"
    assert call.json is None
    assert call.data == {"justifiee": "1", "motif": "Malade", "_method": "PUT"}
    assert call.files == {"justificatif": proof}


def test_form_post_has_no_override(transport, client):
    transport.on("POST", "employe/remboursements", payload={"data": {"id": 1}})

    client.call("POST", "employe/remboursements", form={"type": "Taxi"})

    assert transport.calls[0].data == {"type": "Taxi"}


def test_error_response_raises_normalized_api_error(transport, client):
    transport.on("POST", "admin/primes", status=422, payload={"errors": {"montant": ["Montant invalide"]}})

    with pytest.raises(ApiError) as exc:
        client.call("POST", "admin/primes", json={"montant": -1}, fallback_error="Erreur ajout prime.")

    assert exc.value.status == 422
    assert exc.value.message == "Validation: Montant invalide"
    assert exc.value.errors == {"montant": ["Montant invalide"]}


def test_fallback_error_used_for_empty_body(transport, client):
    transport.on("GET", "admin/primes", status=500, payload=None)

    with pytest.raises(ApiError) as exc:
        client.call("GET", "admin/primes", fallback_error="Erreur chargement primes.")

    assert exc.value.message == "Erreur chargement primes."


def test_transport_failures_propagate(transport, client):
    transport.on("GET", "employes", raises=ApiError("Erreur réseau : serveur injoignable."))

    with pytest.raises(ApiError) as exc:
        client.call("GET", "employes")

    assert exc.value.status == 0


def test_missing_token_fails_before_any_request(transport):
    client = ApiClient(transport, StaticCredentials(""))

    with pytest.raises(AuthenticationError):
        client.call("GET", "employes")
    with pytest.raises(AuthenticationError):
        asyncio.run(client.acall("GET", "employes"))

    assert transport.calls == []


def test_public_call_skips_token(transport):
    transport.on("POST", "admin/login", payload={"access_token": "abc"})
    client = ApiClient(transport, StaticCredentials(None))

    client.call("POST", "admin/login", require_auth=False, json={"email": "a@b.c"})

    assert transport.calls[0].token is None


def test_acall_times_out_with_budget(transport, client):
    gate = threading.Event()
    transport.on("GET", "employes", payload=[], gate=gate)

    async def scenario():
        try:
            await client.acall("GET", "employes", timeout=0.05)
        finally:
            gate.set()

    with pytest.raises(RequestTimeout) as exc:
        asyncio.run(scenario())

    assert exc.value.message == "Le serveur n'a pas répondu à temps."
