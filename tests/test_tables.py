from models import DashboardStats, Leader, VoteIntent, Voter, Zone
from reference_data import load_catalog
from tables import LEADER_COLUMNS, leaders_frame, segmentation_frame, voters_frame, zones_frame

CATALOG = load_catalog()


def test_zones_frame_shows_recomputed_progress():
    zones = [Zone(id="1", name="KENNEDY", comuna_id="1", vote_target=200, registered_count=50)]

    df = zones_frame(zones, CATALOG)

    assert df.loc[0, "Avance"] == "25.0%"
    assert df.loc[0, "Gerente"] == "Sin asignar"
    assert df.loc[0, "Comuna"] == "Comuna 1"


def test_empty_frames_keep_columns():
    assert list(leaders_frame([], CATALOG).columns) == LEADER_COLUMNS
    assert voters_frame([]).empty


def test_leaders_frame_fallbacks():
    leaders = [
        Leader(id="1", citizen_id="1", full_name="ANA", barrio_name="GAITAN", vote_target=10, actual_votes=9)
    ]

    df = leaders_frame(leaders, CATALOG)

    assert df.loc[0, "Comuna"] == "Zona sin definir"
    assert df.loc[0, "Zona"] == "GAITAN"
    assert df.loc[0, "Efectividad"] == "90.0%"
    assert df.loc[0, "Nivel"] == "high"


def test_voters_frame_labels():
    df = voters_frame([Voter(id="1", citizen_id="2", full_name="JUAN", vote_intent=VoteIntent.SOFT)])

    assert df.loc[0, "Clasificación"] == "BLANDO"
    assert df.loc[0, "Líder"] == "Sin líder"
    assert df.loc[0, "Zona"] == "Sin Zona"


def test_segmentation_frame_drops_zero_segments():
    stats = DashboardStats(segmentation={VoteIntent.HARD: 10, VoteIntent.SOFT: 0, VoteIntent.POSSIBLE: 5})

    df = segmentation_frame(stats)

    assert list(df["Segmento"]) == ["Voto Duro", "Posible"]


def test_segmentation_frame_empty_when_no_data():
    assert segmentation_frame(DashboardStats()).empty
