from address import AddressParts, canonical_street_type, compose, edited_address


def test_compose_full_address():
    parts = AddressParts(
        street_type="Calle",
        number1="10",
        letter1="A",
        number2="20",
        letter2="B",
        plate_number="30",
        complement="APTO 201",
    )

    assert compose(parts) == "Calle 10A # 20B - 30 APTO 201"


def test_compose_keeps_empty_segments_and_internal_spacing():
    parts = AddressParts(street_type="Carrera", number2="5")

    assert compose(parts) == "Carrera  # 5 -"


def test_compose_all_empty_uses_default_street_type():
    assert compose(AddressParts()) == "Calle  #  -"


def test_compose_uppercases_free_text_but_not_street_type():
    parts = AddressParts(
        street_type="Avenida",
        number1="7",
        letter1="b",
        number2="12",
        plate_number="4",
        complement="edificio azul",
    )

    assert compose(parts) == "Avenida 7B # 12 - 4 EDIFICIO AZUL"


def test_compose_is_deterministic():
    parts = AddressParts(street_type="Diagonal", number1="3", complement="casa 2")

    assert compose(parts) == compose(parts)


def test_street_type_is_canonicalised_or_defaulted():
    assert canonical_street_type("CARRERA") == "Carrera"
    assert canonical_street_type("circular") == "Circular"
    assert canonical_street_type("Autopista") == "Calle"
    assert canonical_street_type("") == "Calle"


def test_compose_never_raises_on_unknown_street_type():
    parts = AddressParts(street_type="Autopista", number1="1")

    assert compose(parts) == "Calle 1 #  -"


def test_update_normalizes_each_field():
    parts = AddressParts().update("street_type", "transversal")
    parts = parts.update("letter1", "c")
    parts = parts.update("complement", "apto 3")

    assert parts.street_type == "Transversal"
    assert parts.letter1 == "C"
    assert parts.complement == "APTO 3"


def test_compose_keeps_inner_spacing_of_fields():
    parts = AddressParts(number1="1", number2="2", plate_number="3", complement="  apto")

    assert compose(parts) == "Calle 1 # 2 - 3   APTO"


def test_update_uppercases_without_trimming():
    parts = AddressParts().update("complement", " casa 2")

    assert parts.complement == " CASA 2"


def test_untouched_edit_keeps_current_address():
    assert edited_address(AddressParts(), "Carrera 5 # 6 - 7") == "Carrera 5 # 6 - 7"


def test_changing_only_street_type_recomposes_address():
    parts = AddressParts().update("street_type", "Diagonal")

    assert edited_address(parts, "Carrera 5 # 6 - 7") == "Diagonal  #  -"


def test_new_address_is_composed_even_when_untouched():
    assert edited_address(AddressParts()) == "Calle  #  -"
