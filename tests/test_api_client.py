import json

import httpx
import pytest

from api_client import ApiError, CampaignApiClient
from config import settings
from models import VoteIntent
from search import VoterQuery


def make_client(handler, token=None):
    return CampaignApiClient(
        base_url="http://backend.test/api",
        token=token,
        transport=httpx.MockTransport(handler),
    )


def test_login_returns_token_and_profile_and_attaches_token():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/api/auth/login":
            assert json.loads(request.content) == {"email": "a@b.co", "password": "secret"}
            return httpx.Response(
                200, json={"token": "tok-1", "id": 1, "nombre": "Ana", "role": "admin"}
            )
        return httpx.Response(200, json=[])

    with make_client(handler) as client:
        token, user = client.login("a@b.co", "secret")
        client.list_zones()

    assert token == "tok-1"
    assert user.name == "Ana"
    assert user.role == "admin"
    assert "authorization" not in seen[0].headers
    assert seen[1].headers["authorization"] == "Bearer tok-1"


def test_login_error_uses_backend_message():
    def handler(request):
        return httpx.Response(401, json={"message": "Credenciales inválidas"})

    with make_client(handler) as client:
        with pytest.raises(ApiError) as exc_info:
            client.login("a@b.co", "bad")

    assert exc_info.value.message == "Credenciales inválidas"
    assert exc_info.value.status_code == 401


def test_error_without_message_falls_back_to_generic():
    def handler(request):
        return httpx.Response(500, text="Internal Server Error")

    with make_client(handler, token="t") as client:
        with pytest.raises(ApiError) as exc_info:
            client.create_voter({"nombre": "X"})

    assert exc_info.value.message == "Error al registrar elector"


def test_connection_error_becomes_api_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with make_client(handler) as client:
        with pytest.raises(ApiError) as exc_info:
            client.list_zones()

    assert exc_info.value.message == "Error de conexión"
    assert exc_info.value.status_code is None


def test_list_voters_sends_filters_and_parses_page():
    def handler(request):
        assert request.url.path == "/api/voters"
        params = dict(request.url.params)
        assert params == {"page": "2", "limit": "10", "search": "ana", "tipo_voto": "duro"}
        return httpx.Response(
            200,
            json={
                "electores": [{"id": 1, "nombre": "ANA", "cedula": "1", "tipo_voto": "duro"}],
                "pages": 3,
            },
        )

    with make_client(handler, token="t") as client:
        page = client.list_voters(VoterQuery(search="ana", vote_intent="duro", page=2))

    assert page.page == 2
    assert page.pages == 3
    assert page.items[0].vote_intent is VoteIntent.HARD


def test_assign_zone_uses_put_on_assign_path():
    calls = []

    def handler(request):
        calls.append((request.method, request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={"id": 5, "nombre": "KENNEDY", "meta": 300})

    with make_client(handler, token="t") as client:
        zone = client.assign_zone("5", {"gerenteId": "9", "meta_votos": 300})

    assert calls == [("PUT", "/api/zones/5/assign", {"gerenteId": "9", "meta_votos": 300})]
    assert zone.vote_target == 300


def test_delete_leader_with_empty_body():
    def handler(request):
        assert request.method == "DELETE"
        assert request.url.path == "/api/leaders/7"
        return httpx.Response(204)

    with make_client(handler, token="t") as client:
        assert client.delete_leader("7") is None


def test_get_dashboard_and_users():
    def handler(request):
        if request.url.path == "/api/dashboard":
            return httpx.Response(
                200, json={"resumen": {"electores_registrados": 10, "meta_campana": 40}}
            )
        return httpx.Response(200, json=[{"id": 2, "nombre": "Luis", "role": "gerente"}])

    with make_client(handler, token="t") as client:
        stats = client.get_dashboard()
        users = client.list_users()

    assert stats.progress_percent == "25.0%"
    assert [u.name for u in users] == ["Luis"]


def test_client_reads_settings_when_created(monkeypatch):
    monkeypatch.setattr(settings, "API_BASE_URL", "http://otro-backend.test/v2/")
    monkeypatch.setattr(settings, "REQUEST_TIMEOUT", 2.5)
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json=[])

    with CampaignApiClient(transport=httpx.MockTransport(handler)) as client:
        client.list_zones()
        assert client._client.timeout.read == 2.5

    assert seen == ["http://otro-backend.test/v2/zones"]
