from typing import List, Sequence

import pandas as pd

from models import DashboardStats, Leader, VoteIntent, Voter, Zone
from reference_data import ReferenceCatalog

ZONE_COLUMNS: List[str] = ["Nombre", "Municipio", "Comuna", "Gerente", "Registrados", "Meta", "Avance"]
LEADER_COLUMNS: List[str] = [
    "Líder", "Cédula", "Teléfono", "Comuna", "Zona", "Dirección", "Perfil",
    "Meta", "Real", "Efectividad", "Nivel",
]
VOTER_COLUMNS: List[str] = ["Elector", "Cédula", "Zona", "Dirección", "Teléfono", "Líder", "Clasificación"]

INTENT_COLORS = {
    VoteIntent.HARD: "#22c55e",
    VoteIntent.SOFT: "#eab308",
    VoteIntent.POSSIBLE: "#94a3b8",
}


def zones_frame(zones: Sequence[Zone], catalog: ReferenceCatalog) -> pd.DataFrame:
    rows = [
        {
            "Nombre": z.name,
            "Municipio": z.municipality,
            "Comuna": catalog.comuna_name(z.comuna_id) or "--",
            "Gerente": z.manager_name or "Sin asignar",
            "Registrados": z.registered_count,
            "Meta": z.vote_target,
            "Avance": z.progress_percent,
        }
        for z in zones
    ]
    return pd.DataFrame(rows, columns=ZONE_COLUMNS)


def leaders_frame(leaders: Sequence[Leader], catalog: ReferenceCatalog) -> pd.DataFrame:
    rows = [
        {
            "Líder": l.full_name,
            "Cédula": l.citizen_id,
            "Teléfono": l.phone or "--",
            "Comuna": catalog.comuna_name(l.comuna_id) or "Zona sin definir",
            "Zona": l.zone_name or l.barrio_name,
            "Dirección": l.address or "Sin dirección",
            "Perfil": l.profession or l.occupation or "--",
            "Meta": l.vote_target,
            "Real": l.actual_votes,
            "Efectividad": l.effectiveness_percent,
            "Nivel": l.effectiveness_level,
        }
        for l in leaders
    ]
    return pd.DataFrame(rows, columns=LEADER_COLUMNS)


def voters_frame(voters: Sequence[Voter]) -> pd.DataFrame:
    rows = [
        {
            "Elector": v.full_name,
            "Cédula": v.citizen_id,
            "Zona": v.zone_name or "Sin Zona",
            "Dirección": v.address,
            "Teléfono": v.phone or "--",
            "Líder": v.leader_name or "Sin líder",
            "Clasificación": v.vote_intent.value.upper(),
        }
        for v in voters
    ]
    return pd.DataFrame(rows, columns=VOTER_COLUMNS)


def segmentation_frame(stats: DashboardStats) -> pd.DataFrame:
    """
    Segmentación del voto para el gráfico de torta.
    Los segmentos en cero se omiten para que el gráfico no quede vacío.
    """
    rows = [
        {
            "Segmento": intent.label,
            "Votos": stats.segmentation.get(intent, 0),
            "Color": INTENT_COLORS[intent],
        }
        for intent in VoteIntent
    ]
    df = pd.DataFrame(rows, columns=["Segmento", "Votos", "Color"])
    return df[df["Votos"] > 0].reset_index(drop=True)
