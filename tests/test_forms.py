from forms import LeaderForm, LocationFields, VoterForm, ZoneForm, missing_zone_message
from models import Leader, VoteIntent, Voter, Zone
from reference_data import load_catalog

CATALOG = load_catalog()
ZONES = [Zone(id="z1", name="EL CENTRO", comuna_id="1")]


def located(barrio, zones=ZONES):
    location = LocationFields(address="Calle 1 # 2 - 3").select_barrio(barrio, CATALOG, zones)
    return location


def test_select_barrio_binds_zone():
    location = located("el centro")

    assert location.barrio == "EL CENTRO"
    assert location.comuna_id == "1"
    assert location.zone_id == "z1"
    assert location.address == "Calle 1 # 2 - 3"
    assert location.errors() == []


def test_leader_blocked_when_barrio_has_no_zone():
    form = LeaderForm(
        citizen_id="123",
        full_name="pedro perez",
        vote_target="50",
        location=located("LOPERENA"),
    )

    assert form.validate() == [missing_zone_message("LOPERENA")]


def test_leader_fields_are_cleaned():
    form = LeaderForm(citizen_id="1.234.567", full_name=" pedro perez ", phone="300-123-4567 ext 9")

    assert form.citizen_id == "1234567"
    assert form.full_name == "PEDRO PEREZ"
    assert form.phone == "3001234567"


def test_leader_payload():
    form = LeaderForm(
        citizen_id="123",
        full_name="Pedro",
        email="p@x.co",
        vote_target="80",
        location=located("EL CENTRO"),
    )

    assert form.validate() == []
    payload = form.to_payload()
    assert payload["zoneId"] == "z1"
    assert payload["barrio"] == "EL CENTRO"
    assert payload["comuna_display"] == "1"
    assert payload["direccion"] == "Calle 1 # 2 - 3"
    assert payload["meta_votos"] == 80
    assert payload["fecha_nacimiento"] is None


def test_leader_requires_target_and_identity():
    errors = LeaderForm(location=located("EL CENTRO")).validate()

    assert "La cédula es obligatoria." in errors
    assert "El nombre es obligatorio." in errors
    assert "La meta de votos debe ser un número mayor que cero." in errors


def test_leader_edit_starts_from_reloaded_record():
    leader = Leader(
        id="4",
        citizen_id="99",
        full_name="ANA",
        barrio_name="EL CENTRO",
        comuna_id="1",
        zone_id="z1",
        address="Carrera 5 # 6 - 7",
        vote_target=120,
    )

    form = LeaderForm.from_leader(leader)

    assert form.vote_target == "120"
    assert form.location.zone_id == "z1"
    assert form.to_payload()["direccion"] == "Carrera 5 # 6 - 7"


def test_voter_payload_and_unknown_barrio():
    form = VoterForm(
        citizen_id="77",
        full_name="juan",
        vote_intent=VoteIntent.SOFT,
        location=located("EL CENTRO"),
    )

    payload = form.to_payload()
    assert payload["tipo_voto"] == "blando"
    assert payload["leaderId"] is None
    assert payload["zoneId"] == "z1"

    form.location = located("NARNIA")
    assert form.validate() == ['El barrio "NARNIA" no existe en el catálogo.']


def test_voter_from_voter_keeps_leader_link():
    voter = Voter(id="1", citizen_id="5", full_name="X", leader_id="3", vote_intent=VoteIntent.HARD)

    form = VoterForm.from_voter(voter)

    assert form.leader_id == "3"
    assert form.vote_intent is VoteIntent.HARD


def test_zone_form_validation():
    form = ZoneForm(comuna_id="1", name="el centro", municipality="Valledupar", vote_target="300")

    assert form.validate(CATALOG) == []
    assert form.validate(CATALOG, ZONES) == ['La zona "EL CENTRO" ya está registrada.']
    assert form.to_payload()["nombre"] == "EL CENTRO"


def test_zone_form_rejects_barrio_from_other_comuna():
    form = ZoneForm(comuna_id="2", name="EL CENTRO", municipality="Valledupar", vote_target="10")

    assert form.validate(CATALOG) == ['"EL CENTRO" no pertenece a Comuna 2.']


def test_zone_form_missing_fields():
    errors = ZoneForm().validate(CATALOG)

    assert "Seleccione la comuna." in errors
    assert "El municipio es obligatorio." in errors
