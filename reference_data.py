"""
Catálogo estático de comunas y barrios de Valledupar.

Se carga una sola vez al iniciar la app y nunca se modifica.
Los datos crudos tienen nombres repetidos (dentro de una misma comuna y entre
comunas distintas); el catálogo los normaliza y conserva el orden de
declaración, que es el que decide el desempate al resolver un barrio.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from utils import normalize_text

COMUNAS: List[Tuple[str, str]] = [
    ("1", "Comuna 1"),
    ("2", "Comuna 2"),
    ("3", "Comuna 3"),
    ("4", "Comuna 4"),
    ("5", "Comuna 5"),
    ("6", "Comuna 6"),
]

BARRIOS_POR_COMUNA: Dict[str, List[str]] = {
    "1": [
        "EL CENTRO", "LOPERENA", "ALTAGRACIA", "EL CARMEN", "LA GARITA", "GAITAN",
        "KENNEDY", "LA GRANJA", "SAN JORGE", "SOPERENA", "SANTO DOMINGO", "MIRAFLORES",
        "LAS DELICIAS", "HOSPITAL", "SAN ANTONIO", "PABLO VI", "GUATAPURI", "LAS PALMAS",
        "KENNEDY", "SAN JORGE", "CEREZO", "PARAISO", "NUEVA COLOMBIA", "11 DE NOVIEMBRE",
        "EL PESCAITO", "ESPERANZA ORIENTE", "9 DE MARZO", "ZAPATO EN MANO",
        "SANTA ANA (HERNANDO DE SANTANA)", "EL EDEN",
    ],
    "2": [
        "MAYALES", "SANTA RITA", "VILLA CLARA", "PANAMA", "LOS COCOS", "LOS MILAGROS",
        "12 DE OCTUBRE", "SAN FERNANDO", "VILLA CASTRO", "VERSALLES", "VILLA DEL ROSARIO",
        "CANDELARIA SUR", "VILLA CLARA", "SANTA RITA", "12 DE OCTUBRE",
        "SIMON BOLIVAR", "URB LOS MAYALES", "URB LAS AMERICAS", "AMANECERES DEL VALLE", "PANAMA",
        "SAN FERNANDO", " SAN JORGE", "URB LUIS CARLOS GALAN", "URB MARIA ELENA", "URB CASA E CAMPO",
        "URB BOSQUES DE RANCHO MIO",
    ],
    "3": [
        "PRIMERO DE MAYO", "SAN MARTIN", "VILLA LEONOR", "VALLE MEZA", "SIETE DE AGOSTO",
        "LOS FUNDADORES", "VILLA CASTRO", "25 DE DICIEMBRE",
    ],
    "4": [
        "LA VICTORIA", "LOS CACIQUES", "VILLA TAXI", "EL PROGRESO", "CICARON", "VILLA MIRIAM",
        "FRANCISCO DE PAULA", "LA MARIGUITA", "CIUDADELA 450 AÑOS", "POPULAR",
    ],
    "5": [
        "LA NEVADA", "DIVINO NIÑO", "BELLO HORIZONTE", "FUTURO DE LOS NIÑOS", "LA ROCA",
        "VILLA CONSUELO", "CAMPO ROMERO", "VILLA YANETH",
    ],
    "6": [
        "LOS AGUINALDOS", "UNIDOS", "NUEVO AMANECER", "EL ROCIO", "SAN JERONIMO",
    ],
}

# El orden es el de las opciones del selector de tipo de vía
TIPOS_VIA: Tuple[str, ...] = (
    "Calle", "Carrera", "Diagonal", "Transversal", "Avenida", "Manzana", "Circular",
)


@dataclass(frozen=True)
class Comuna:
    id: str
    name: str


@dataclass(frozen=True)
class Barrio:
    name: str
    comuna_id: str


class ReferenceCatalog:
    """
    Acceso de solo lectura al catálogo de comunas y barrios.
    """

    def __init__(
        self,
        comunas: Sequence[Tuple[str, str]],
        barrios_por_comuna: Dict[str, Sequence[str]],
    ) -> None:
        self._comunas: Tuple[Comuna, ...] = tuple(
            Comuna(id=str(cid), name=name) for cid, name in comunas
        )
        known_ids = {c.id for c in self._comunas}

        by_comuna: Dict[str, Tuple[str, ...]] = {}
        flat: List[Barrio] = []
        for comuna_id, names in barrios_por_comuna.items():
            comuna_id = str(comuna_id)
            if comuna_id not in known_ids:
                raise ValueError(
                    f"Barrios declarados para una comuna inexistente: {comuna_id}"
                )
            seen = []
            for raw in names:
                name = normalize_text(raw)
                if not name or name in seen:
                    continue
                seen.append(name)
                flat.append(Barrio(name=name, comuna_id=comuna_id))
            by_comuna[comuna_id] = tuple(seen)

        self._barrios_por_comuna = by_comuna
        self._flat: Tuple[Barrio, ...] = tuple(flat)

    def list_comunas(self) -> List[Comuna]:
        return list(self._comunas)

    def list_barrios(self, comuna_id: str) -> List[str]:
        """
        Barrios de una comuna en orden de declaración.
        Una comuna desconocida devuelve lista vacía, no un error.
        """
        return list(self._barrios_por_comuna.get(str(comuna_id), ()))

    def barrios(self) -> List[Barrio]:
        """
        Lista plana (barrio, comuna) en orden de declaración.
        """
        return list(self._flat)

    def barrio_options(self) -> List[Barrio]:
        """
        Lista plana ordenada alfabéticamente, para selectores.
        El orden es estable: los homónimos mantienen su orden de declaración.
        """
        return sorted(self._flat, key=lambda b: b.name)

    def comuna_name(self, comuna_id: str) -> str:
        for comuna in self._comunas:
            if comuna.id == str(comuna_id):
                return comuna.name
        return ""


def load_catalog() -> ReferenceCatalog:
    """
    Construye el catálogo de Valledupar a partir de las tablas estáticas.
    """
    return ReferenceCatalog(COMUNAS, BARRIOS_POR_COMUNA)
