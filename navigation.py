from dataclasses import dataclass
from typing import FrozenSet, List, Optional

from models import User

LOGIN = "login"
DASHBOARD = "dashboard"
VOTERS = "voters"
ZONES = "zones"
LEADERS = "leaders"

ALL_ROLES: FrozenSet[str] = frozenset({"admin", "gerente", "digitador"})
MANAGEMENT_ROLES: FrozenSet[str] = frozenset({"admin", "gerente"})


@dataclass(frozen=True)
class NavEntry:
    target: str
    label: str
    icon: str
    allowed_roles: FrozenSet[str]


NAVIGATION: List[NavEntry] = [
    NavEntry(DASHBOARD, "Dashboard", ":material/dashboard:", ALL_ROLES),
    NavEntry(VOTERS, "Electores", ":material/groups:", ALL_ROLES),
    NavEntry(ZONES, "Zonas", ":material/map:", MANAGEMENT_ROLES),
    NavEntry(LEADERS, "Líderes", ":material/flag:", MANAGEMENT_ROLES),
]


def visible_entries(role: str) -> List[NavEntry]:
    """
    Entradas del menú que el rol puede ver.
    """
    return [entry for entry in NAVIGATION if role in entry.allowed_roles]


def can_access(target: str, role: str) -> bool:
    return any(entry.target == target for entry in visible_entries(role))


def resolve_route(target: Optional[str], user: Optional[User]) -> str:
    """
    Guardia de rutas:
    - sin sesión, siempre login
    - destino desconocido o no permitido para el rol, dashboard
    """
    if user is None:
        return LOGIN
    if target and can_access(target, user.role):
        return target
    return DASHBOARD
