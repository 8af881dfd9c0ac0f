"""
Cliente del backend REST de la campaña.

Cada llamada es atómica desde el punto de vista de la interfaz: o funciona
completa o lanza ApiError. No hay reintentos automáticos.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from config import settings
from models import DashboardStats, Leader, User, Voter, VoterPage, Zone
from search import VoterQuery
from utils import to_int

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Error de conexión"


class ApiError(Exception):
    """
    Fallo de una petición. `message` viene del backend cuando lo envía.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        for key in ("message", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return fallback


class CampaignApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.token = token
        self._client = httpx.Client(
            base_url=(base_url or settings.API_BASE_URL).rstrip("/"),
            timeout=settings.REQUEST_TIMEOUT if timeout is None else timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "CampaignApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def _request(
        self,
        method: str,
        path: str,
        fallback: str = GENERIC_ERROR,
        **kwargs: Any,
    ) -> Any:
        try:
            response = self._client.request(method, path, headers=self._headers(), **kwargs)
        except httpx.RequestError as exc:
            logger.error("%s %s falló: %s", method, path, exc)
            raise ApiError(GENERIC_ERROR) from exc

        if response.is_error:
            message = _error_message(response, fallback)
            logger.warning("%s %s -> %s: %s", method, path, response.status_code, message)
            raise ApiError(message, response.status_code)

        if not response.content:
            return None
        return response.json()

    # -- Autenticación --

    def login(self, email: str, password: str) -> Tuple[str, User]:
        """
        POST /auth/login. Devuelve el token y el perfil; el token queda
        adjunto al cliente para las siguientes peticiones.
        """
        data = self._request(
            "POST", "/auth/login", json={"email": email, "password": password}
        )
        data = dict(data or {})
        token = data.pop("token", None)
        if not token:
            raise ApiError("Respuesta de login sin token")
        self.token = token
        return token, User.from_api(data)

    # -- Zonas --

    def list_zones(self) -> List[Zone]:
        return [Zone.from_api(z) for z in self._request("GET", "/zones") or []]

    def create_zone(self, payload: Dict[str, Any]) -> Optional[Zone]:
        data = self._request(
            "POST", "/zones", fallback="Error al crear la zona. Verifica los datos.", json=payload
        )
        return Zone.from_api(data) if isinstance(data, dict) else None

    def assign_zone(self, zone_id: str, payload: Dict[str, Any]) -> Optional[Zone]:
        data = self._request("PUT", f"/zones/{zone_id}/assign", json=payload)
        return Zone.from_api(data) if isinstance(data, dict) else None

    # -- Líderes --

    def list_leaders(self) -> List[Leader]:
        return [Leader.from_api(item) for item in self._request("GET", "/leaders") or []]

    def get_leader(self, leader_id: str) -> Leader:
        return Leader.from_api(self._request("GET", f"/leaders/{leader_id}"))

    def create_leader(self, payload: Dict[str, Any]) -> None:
        self._request("POST", "/leaders", fallback="Verifica los datos", json=payload)

    def update_leader(self, leader_id: str, payload: Dict[str, Any]) -> None:
        self._request("PUT", f"/leaders/{leader_id}", fallback="Verifica los datos", json=payload)

    def delete_leader(self, leader_id: str) -> None:
        self._request("DELETE", f"/leaders/{leader_id}")

    # -- Electores --

    def list_voters(self, query: VoterQuery) -> VoterPage:
        data = self._request("GET", "/voters", params=query.to_params()) or {}
        return VoterPage(
            items=[Voter.from_api(v) for v in data.get("electores") or []],
            page=query.page,
            pages=max(to_int(data.get("pages"), 1), 1),
        )

    def get_voter(self, voter_id: str) -> Voter:
        return Voter.from_api(self._request("GET", f"/voters/{voter_id}"))

    def create_voter(self, payload: Dict[str, Any]) -> None:
        self._request("POST", "/voters", fallback="Error al registrar elector", json=payload)

    def update_voter(self, voter_id: str, payload: Dict[str, Any]) -> None:
        self._request(
            "PUT", f"/voters/{voter_id}", fallback="Error al actualizar elector", json=payload
        )

    def delete_voter(self, voter_id: str) -> None:
        self._request("DELETE", f"/voters/{voter_id}")

    # -- Usuarios y dashboard --

    def list_users(self) -> List[User]:
        return [User.from_api(u) for u in self._request("GET", "/users") or []]

    def get_dashboard(self) -> DashboardStats:
        return DashboardStats.from_api(self._request("GET", "/dashboard") or {})
