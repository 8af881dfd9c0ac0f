"""
Entidades de la campaña tal como las maneja la interfaz.

Los campos derivados (avance de zona, efectividad de líder, avance global)
se recalculan siempre desde los conteos; nunca se guardan por separado.
El backend habla con claves en español; from_api/to_payload hacen la traducción.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from utils import optional_id, percent, to_int


class VoteIntent(str, Enum):
    HARD = "duro"
    SOFT = "blando"
    POSSIBLE = "posible"

    @property
    def label(self) -> str:
        return _INTENT_LABELS[self]

    @classmethod
    def parse(cls, value: Optional[str]) -> "VoteIntent":
        """
        Valores desconocidos o vacíos se tratan como 'posible'.
        """
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return cls.POSSIBLE


_INTENT_LABELS = {
    VoteIntent.HARD: "Voto Duro",
    VoteIntent.SOFT: "Voto Blando",
    VoteIntent.POSSIBLE: "Posible",
}


@dataclass
class User:
    id: Optional[str]
    name: str
    email: str = ""
    role: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=optional_id(data.get("id")),
            name=data.get("nombre") or data.get("name") or "",
            email=data.get("email") or "",
            role=(data.get("role") or data.get("rol") or "").lower(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "nombre": self.name, "email": self.email, "role": self.role}


@dataclass
class Zone:
    id: Optional[str]
    name: str
    comuna_id: str = ""
    municipality: str = ""
    vote_target: int = 0
    manager_id: Optional[str] = None
    manager_name: str = ""
    registered_count: int = 0

    @property
    def progress_percent(self) -> str:
        return percent(self.registered_count, self.vote_target)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Zone":
        manager = data.get("gerente") or {}
        return cls(
            id=optional_id(data.get("id")),
            name=data.get("nombre") or "",
            comuna_id=str(data.get("numero_comuna") or ""),
            municipality=data.get("municipio") or "",
            vote_target=to_int(data.get("meta", data.get("meta_votos"))),
            manager_id=optional_id(data.get("gerenteId") or manager.get("id")),
            manager_name=manager.get("nombre") or "",
            registered_count=to_int(data.get("registrados")),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "nombre": self.name,
            "municipio": self.municipality,
            "meta_votos": self.vote_target,
            "numero_comuna": self.comuna_id,
            "gerenteId": self.manager_id,
        }


@dataclass
class Leader:
    id: Optional[str]
    citizen_id: str
    full_name: str
    phone: str = ""
    email: str = ""
    birth_date: str = ""
    occupation: str = ""
    profession: str = ""
    barrio_name: str = ""
    comuna_id: str = ""
    zone_id: Optional[str] = None
    zone_name: str = ""
    address: str = ""
    vote_target: int = 0
    actual_votes: int = 0

    @property
    def effectiveness_percent(self) -> str:
        return percent(self.actual_votes, self.vote_target)

    @property
    def effectiveness_level(self) -> str:
        """
        Semáforo de efectividad: high >= 80%, medium >= 40%, low el resto.
        """
        if self.vote_target <= 0:
            return "low"
        ratio = self.actual_votes / self.vote_target * 100
        if ratio >= 80:
            return "high"
        if ratio >= 40:
            return "medium"
        return "low"

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Leader":
        return cls(
            id=optional_id(data.get("id")),
            citizen_id=str(data.get("cedula") or ""),
            full_name=data.get("nombre") or "",
            phone=data.get("telefono") or "",
            email=data.get("email") or "",
            birth_date=data.get("fecha_nacimiento") or "",
            occupation=data.get("oficio") or "",
            profession=data.get("profesion") or "",
            barrio_name=data.get("barrio") or "",
            comuna_id=str(data.get("numero_comuna") or ""),
            zone_id=optional_id(data.get("zoneId")),
            zone_name=data.get("zona_nombre") or "",
            address=data.get("direccion") or "",
            vote_target=to_int(data.get("meta_votos")),
            actual_votes=to_int(data.get("votos_reales")),
        )


@dataclass
class Voter:
    id: Optional[str]
    citizen_id: str
    full_name: str
    phone: str = ""
    barrio_name: str = ""
    zone_id: Optional[str] = None
    zone_name: str = ""
    address: str = ""
    vote_intent: VoteIntent = VoteIntent.POSSIBLE
    leader_id: Optional[str] = None
    leader_name: str = ""
    notes: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Voter":
        zone = data.get("Zone") or data.get("zona") or {}
        leader = data.get("lider") or {}
        return cls(
            id=optional_id(data.get("id")),
            citizen_id=str(data.get("cedula") or ""),
            full_name=data.get("nombre") or "",
            phone=data.get("telefono") or "",
            barrio_name=data.get("barrio") or "",
            zone_id=optional_id(data.get("zoneId") or zone.get("id")),
            zone_name=zone.get("nombre") or "",
            address=data.get("direccion") or "",
            vote_intent=VoteIntent.parse(data.get("tipo_voto")),
            leader_id=optional_id(data.get("leaderId") or leader.get("id")),
            leader_name=leader.get("nombre") or "",
            notes=data.get("notas_iniciales") or "",
        )


@dataclass
class VoterPage:
    items: List[Voter]
    page: int = 1
    pages: int = 1


@dataclass
class DashboardStats:
    registered: int = 0
    target: int = 0
    total_leaders: int = 0
    active_zones: int = 0
    segmentation: Dict[VoteIntent, int] = field(default_factory=dict)

    @property
    def progress_percent(self) -> str:
        return percent(self.registered, self.target)

    def days_to_election(self, election_date: Optional[date], today: date) -> Optional[int]:
        """
        Días restantes hasta la elección; None si no hay fecha configurada.
        Una fecha pasada da 0.
        """
        if election_date is None:
            return None
        return max((election_date - today).days, 0)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "DashboardStats":
        summary = data.get("resumen") or {}
        segments = data.get("segmentacion") or {}
        return cls(
            registered=to_int(summary.get("electores_registrados")),
            target=to_int(summary.get("meta_campana")),
            total_leaders=to_int(summary.get("total_lideres")),
            active_zones=to_int(summary.get("zonas_activas")),
            segmentation={intent: to_int(segments.get(intent.value)) for intent in VoteIntent},
        )
