from __future__ import annotations

import pytest
import requests

from hr_portal.api.transport import Attachment, RequestsTransport
from hr_portal.core.exceptions import ApiError, RequestTimeout


class FakeResponse:
    def __init__(self, status_code, body=b"", json_value=None):
        self.status_code = status_code
        self.content = body
        self.text = body.decode("utf-8")
        self._json = json_value

    def json(self):
        if self._json is None:
            raise ValueError("not json")
        return self._json


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.sent = []

    def request(self, method, url, **kwargs):
        self.sent.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def test_builds_url_headers_and_multipart_tuples():
    session = FakeSession(FakeResponse(200, b'{"ok": true}', {"ok": True}))
    transport = RequestsTransport("http://api.test/api/", session=session)
    pdf = Attachment("a.pdf", "application/pdf", b"%PDF")

    response = transport.request("post", "/admin/attestations/1/pdf", token="tok", data={"_method": "PUT"}, files={"pdf": pdf})

    method, url, kwargs = session.sent[0]
    assert (method, url) == ("POST", "http://api.test/api/admin/attestations/1/pdf")
    assert kwargs["headers"] == {"Accept": "application/json", "Authorization": "Bearer tok"}
    assert kwargs["files"] == {"pdf": ("a.pdf", b"%PDF", "application/pdf")}
    assert kwargs["data"] == {"_method": "PUT"}
    assert response.ok and response.payload == {"ok": True}


def test_decodes_empty_and_text_bodies():
    empty = RequestsTransport("http://api.test", session=FakeSession(FakeResponse(204)))
    text = RequestsTransport("http://api.test", session=FakeSession(FakeResponse(500, b"Server Error")))

    assert empty.request("DELETE", "x/1", token=None).payload is None
    response = text.request("GET", "x", token=None)
    assert response.status == 500 and response.payload == "Server Error"
    assert not response.ok


def test_network_errors_become_api_errors():
    slow = RequestsTransport("http://api.test", session=FakeSession(error=requests.exceptions.ReadTimeout("slow")))
    down = RequestsTransport("http://api.test", session=FakeSession(error=requests.exceptions.ConnectionError("refused")))

    with pytest.raises(RequestTimeout):
        slow.request("GET", "employes", token="t")
    with pytest.raises(ApiError) as exc:
        down.request("GET", "employes", token="t")

    assert exc.value.status == 0
    assert exc.value.message == "Erreur réseau : serveur injoignable."
