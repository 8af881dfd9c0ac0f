from datetime import date

from models import DashboardStats, Leader, User, VoteIntent, Voter, Zone


def test_zone_from_api_and_progress_recomputed():
    zone = Zone.from_api(
        {
            "id": 4,
            "nombre": "EL CENTRO",
            "municipio": "Valledupar",
            "numero_comuna": "1",
            "meta": "200",
            "registrados": 50,
            "avance_porcentaje": "99.0%",
            "gerente": {"id": 7, "nombre": "ANA"},
        }
    )

    assert zone.id == "4"
    assert zone.comuna_id == "1"
    assert zone.manager_id == "7"
    assert zone.manager_name == "ANA"
    assert zone.progress_percent == "25.0%"

    zone.registered_count = 100
    assert zone.progress_percent == "50.0%"


def test_zone_without_target_has_zero_progress():
    assert Zone(id="1", name="X", registered_count=10).progress_percent == "0.0%"


def test_leader_effectiveness_and_level():
    leader = Leader.from_api(
        {"id": 1, "cedula": "123", "nombre": "PEDRO", "meta_votos": 100, "votos_reales": 85}
    )

    assert leader.effectiveness_percent == "85.0%"
    assert leader.effectiveness_level == "high"

    leader.actual_votes = 40
    assert leader.effectiveness_level == "medium"

    leader.actual_votes = 39
    assert leader.effectiveness_level == "low"


def test_leader_without_target_is_low():
    leader = Leader(id="1", citizen_id="1", full_name="X", actual_votes=5)

    assert leader.effectiveness_percent == "0.0%"
    assert leader.effectiveness_level == "low"


def test_voter_from_api_with_nested_zone_and_leader():
    voter = Voter.from_api(
        {
            "id": 9,
            "nombre": "JUAN",
            "cedula": 555,
            "tipo_voto": "duro",
            "Zone": {"id": 3, "nombre": "KENNEDY"},
            "lider": {"id": 2, "nombre": "PEDRO"},
        }
    )

    assert voter.citizen_id == "555"
    assert voter.vote_intent is VoteIntent.HARD
    assert voter.zone_id == "3"
    assert voter.zone_name == "KENNEDY"
    assert voter.leader_id == "2"


def test_voter_without_leader():
    voter = Voter.from_api({"id": 1, "nombre": "A", "cedula": "1", "tipo_voto": "raro"})

    assert voter.leader_id is None
    assert voter.vote_intent is VoteIntent.POSSIBLE


def test_user_role_is_lowercased():
    user = User.from_api({"id": 1, "nombre": "Admin", "email": "a@b.co", "role": "ADMIN"})

    assert user.role == "admin"
    assert User.from_api(user.to_dict()) == user


def test_dashboard_stats_from_api():
    stats = DashboardStats.from_api(
        {
            "resumen": {
                "electores_registrados": 250,
                "meta_campana": 1000,
                "avance_global": "1%",
                "total_lideres": 12,
                "zonas_activas": 4,
            },
            "segmentacion": {"duro": "100", "blando": 50},
        }
    )

    assert stats.progress_percent == "25.0%"
    assert stats.segmentation[VoteIntent.HARD] == 100
    assert stats.segmentation[VoteIntent.SOFT] == 50
    assert stats.segmentation[VoteIntent.POSSIBLE] == 0


def test_days_to_election():
    stats = DashboardStats()

    assert stats.days_to_election(None, date(2026, 1, 1)) is None
    assert stats.days_to_election(date(2026, 3, 8), date(2026, 3, 1)) == 7
    assert stats.days_to_election(date(2026, 3, 8), date(2026, 4, 1)) == 0
