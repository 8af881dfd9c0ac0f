from dataclasses import dataclass
from typing import List, Optional, Sequence

from rapidfuzz import fuzz, process

from models import Zone
from reference_data import Barrio, ReferenceCatalog
from utils import normalize_text


@dataclass(frozen=True)
class BarrioResolution:
    """
    Resultado de resolver un barrio: comuna dueña y zona registrada.
    Cadena vacía significa "sin resolver".
    """

    comuna_id: str = ""
    zone_id: str = ""


def find_comuna(
    barrio_name: str,
    catalog: ReferenceCatalog,
    comuna_id: Optional[str] = None,
) -> str:
    """
    Comuna a la que pertenece el barrio.
    Primera coincidencia en orden de declaración; si se pasa comuna_id,
    solo se busca dentro de esa comuna.
    """
    name = normalize_text(barrio_name)
    if not name:
        return ""
    for barrio in catalog.barrios():
        if comuna_id and barrio.comuna_id != str(comuna_id):
            continue
        if barrio.name == name:
            return barrio.comuna_id
    return ""


def find_zone(barrio_name: str, comuna_id: str, zones: Sequence[Zone]) -> str:
    """
    Zona registrada con el mismo nombre del barrio y en la misma comuna.
    """
    name = normalize_text(barrio_name)
    if not name or not comuna_id:
        return ""
    for zone in zones:
        if normalize_text(zone.name) == name and str(zone.comuna_id) == str(comuna_id):
            return zone.id or ""
    return ""


def resolve(
    barrio_name: str,
    catalog: ReferenceCatalog,
    zones: Sequence[Zone],
    comuna_id: Optional[str] = None,
) -> BarrioResolution:
    """
    Resuelve un barrio a (comuna, zona) con las listas ya cargadas en memoria.
    No hace llamadas de red y nunca lanza excepciones.
    """
    comuna = find_comuna(barrio_name, catalog, comuna_id)
    if not comuna:
        return BarrioResolution()
    return BarrioResolution(comuna_id=comuna, zone_id=find_zone(barrio_name, comuna, zones))


def suggest_barrios(
    text: str,
    catalog: ReferenceCatalog,
    limit: int = 5,
    threshold: int = 70,
) -> List[Barrio]:
    """
    Sugerencias de barrios para texto libre.

    Primero los barrios que contienen el texto tal cual ("SAN", "VILLA",
    "URB"), ordenados por parecido. Si sobran lugares se completan con
    coincidencias aproximadas (errores de tipeo, orden de palabras) por
    encima de `threshold`. Devuelve entradas del catálogo.
    """
    query = normalize_text(text)
    if not query:
        return []

    options = catalog.barrios()
    names = [b.name for b in options]

    containing = [i for i, name in enumerate(names) if query in name]
    picked: List[int] = []
    if containing:
        ranked = process.extract(
            query, [names[i] for i in containing], scorer=fuzz.WRatio, limit=limit
        )
        picked = [containing[index] for _, _, index in ranked]

    if len(picked) < limit:
        fuzzy = process.extract(
            query, names, scorer=fuzz.WRatio, limit=limit, score_cutoff=threshold
        )
        picked.extend(index for _, _, index in fuzzy if index not in picked)

    return [options[i] for i in picked[:limit]]
