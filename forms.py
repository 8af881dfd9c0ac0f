"""
Formularios de zonas, líderes y electores.

Validan antes de enviar (errores que se muestran en línea) y arman el
payload para el backend. La ubicación siempre pasa por el resolvedor de
barrios y la dirección por el compositor.

Política de zona faltante: si el barrio elegido no está habilitado como
zona, el formulario no se puede enviar; primero hay que crear la zona.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence

from models import Leader, VoteIntent, Voter, Zone
from reference_data import ReferenceCatalog
from resolver import BarrioResolution, resolve
from utils import digits_only, normalize_text, to_int


def missing_zone_message(barrio: str) -> str:
    return (
        f'El barrio "{barrio}" no ha sido habilitado como Zona en el sistema. '
        'Por favor vaya a "Zonas" y créela primero.'
    )


@dataclass
class LocationFields:
    """
    Barrio elegido más lo que el resolvedor derivó de él.
    """

    barrio: str = ""
    comuna_id: str = ""
    zone_id: str = ""
    address: str = ""

    def select_barrio(
        self,
        barrio: str,
        catalog: ReferenceCatalog,
        zones: Sequence[Zone],
        comuna_id: Optional[str] = None,
    ) -> "LocationFields":
        name = normalize_text(barrio)
        resolution: BarrioResolution = resolve(name, catalog, zones, comuna_id)
        return replace(
            self, barrio=name, comuna_id=resolution.comuna_id, zone_id=resolution.zone_id
        )

    def errors(self) -> List[str]:
        if not self.barrio:
            return ["Seleccione un barrio."]
        if not self.comuna_id:
            return [f'El barrio "{self.barrio}" no existe en el catálogo.']
        if not self.zone_id:
            return [missing_zone_message(self.barrio)]
        return []


@dataclass
class ZoneForm:
    comuna_id: str = ""
    name: str = ""
    municipality: str = ""
    vote_target: str = ""
    manager_id: Optional[str] = None

    def validate(self, catalog: ReferenceCatalog, zones: Sequence[Zone] = ()) -> List[str]:
        errors = []
        if not self.comuna_id:
            errors.append("Seleccione la comuna.")
        name = normalize_text(self.name)
        if not name:
            errors.append("El nombre del barrio / zona es obligatorio.")
        elif self.comuna_id and name not in catalog.list_barrios(self.comuna_id):
            errors.append(f'"{name}" no pertenece a {catalog.comuna_name(self.comuna_id)}.')
        elif any(
            normalize_text(z.name) == name and z.comuna_id == self.comuna_id for z in zones
        ):
            errors.append(f'La zona "{name}" ya está registrada.')
        if not self.municipality.strip():
            errors.append("El municipio es obligatorio.")
        if to_int(self.vote_target, -1) <= 0:
            errors.append("La meta de votos debe ser un número mayor que cero.")
        return errors

    def to_payload(self) -> Dict[str, Any]:
        return {
            "nombre": normalize_text(self.name),
            "municipio": self.municipality.strip(),
            "meta_votos": to_int(self.vote_target),
            "numero_comuna": self.comuna_id,
            "gerenteId": self.manager_id,
        }


@dataclass
class LeaderForm:
    citizen_id: str = ""
    full_name: str = ""
    phone: str = ""
    email: str = ""
    birth_date: str = ""
    occupation: str = ""
    profession: str = ""
    vote_target: str = ""
    location: LocationFields = field(default_factory=LocationFields)

    def __post_init__(self) -> None:
        self.citizen_id = digits_only(self.citizen_id)
        self.phone = digits_only(self.phone)[:10]
        self.full_name = normalize_text(self.full_name)

    @classmethod
    def from_leader(cls, leader: Leader) -> "LeaderForm":
        """
        Edición: el formulario se llena con el registro recién recargado.
        """
        return cls(
            citizen_id=leader.citizen_id,
            full_name=leader.full_name,
            phone=leader.phone,
            email=leader.email,
            birth_date=leader.birth_date,
            occupation=leader.occupation,
            profession=leader.profession,
            vote_target=str(leader.vote_target or ""),
            location=LocationFields(
                barrio=leader.barrio_name,
                comuna_id=leader.comuna_id,
                zone_id=leader.zone_id or "",
                address=leader.address,
            ),
        )

    def validate(self) -> List[str]:
        errors = []
        if not self.citizen_id:
            errors.append("La cédula es obligatoria.")
        if not self.full_name:
            errors.append("El nombre es obligatorio.")
        if self.email and "@" not in self.email:
            errors.append("El email no es válido.")
        if to_int(self.vote_target, -1) <= 0:
            errors.append("La meta de votos debe ser un número mayor que cero.")
        errors.extend(self.location.errors())
        return errors

    def to_payload(self) -> Dict[str, Any]:
        return {
            "cedula": self.citizen_id,
            "nombre": self.full_name,
            "telefono": self.phone,
            "email": self.email.strip(),
            "direccion": self.location.address,
            "zoneId": self.location.zone_id or None,
            "barrio": self.location.barrio,
            "comuna_display": self.location.comuna_id,
            "fecha_nacimiento": self.birth_date or None,
            "oficio": self.occupation.strip(),
            "profesion": self.profession.strip(),
            "meta_votos": to_int(self.vote_target),
        }


@dataclass
class VoterForm:
    citizen_id: str = ""
    full_name: str = ""
    phone: str = ""
    vote_intent: VoteIntent = VoteIntent.POSSIBLE
    leader_id: Optional[str] = None
    notes: str = ""
    location: LocationFields = field(default_factory=LocationFields)

    def __post_init__(self) -> None:
        self.citizen_id = digits_only(self.citizen_id)
        self.phone = digits_only(self.phone)[:10]
        self.full_name = normalize_text(self.full_name)

    @classmethod
    def from_voter(cls, voter: Voter) -> "VoterForm":
        return cls(
            citizen_id=voter.citizen_id,
            full_name=voter.full_name,
            phone=voter.phone,
            vote_intent=voter.vote_intent,
            leader_id=voter.leader_id,
            notes=voter.notes,
            location=LocationFields(
                barrio=voter.barrio_name,
                zone_id=voter.zone_id or "",
                address=voter.address,
            ),
        )

    def validate(self) -> List[str]:
        errors = []
        if not self.citizen_id:
            errors.append("La cédula es obligatoria.")
        if not self.full_name:
            errors.append("El nombre es obligatorio.")
        errors.extend(self.location.errors())
        return errors

    def to_payload(self) -> Dict[str, Any]:
        return {
            "nombre": self.full_name,
            "cedula": self.citizen_id,
            "telefono": self.phone,
            "direccion": self.location.address,
            "barrio": self.location.barrio,
            "tipo_voto": VoteIntent(self.vote_intent).value,
            "zoneId": self.location.zone_id or None,
            "leaderId": self.leader_id or None,
            "notas_iniciales": self.notes.strip(),
        }
