from dataclasses import dataclass, fields, replace

from reference_data import TIPOS_VIA
from utils import normalize_text

DEFAULT_STREET_TYPE = "Calle"

_STREET_TYPES_BY_KEY = {t.upper(): t for t in TIPOS_VIA}


@dataclass(frozen=True)
class AddressParts:
    """
    Partes de la dirección tal como las captura el formulario.
    Nunca se persiste: solo se guarda el string compuesto.
    """

    street_type: str = DEFAULT_STREET_TYPE
    number1: str = ""
    letter1: str = ""
    number2: str = ""
    letter2: str = ""
    plate_number: str = ""
    complement: str = ""

    def update(self, field: str, value: str) -> "AddressParts":
        """
        Devuelve una copia con el campo cambiado y normalizado.
        El tipo de vía conserva el valor enumerado; el resto va en mayúsculas.
        """
        if field == "street_type":
            return replace(self, street_type=canonical_street_type(value))
        if field not in _FREE_TEXT_FIELDS:
            raise KeyError(field)
        return replace(self, **{field: _upper(value)})


_FREE_TEXT_FIELDS = {f.name for f in fields(AddressParts)} - {"street_type"}


def _upper(value: str) -> str:
    return (value or "").upper()


def canonical_street_type(value: str) -> str:
    """
    Tipo de vía con la grafía exacta del selector.
    Cualquier valor fuera del conjunto vuelve al valor por defecto.
    """
    return _STREET_TYPES_BY_KEY.get(normalize_text(value), DEFAULT_STREET_TYPE)


def compose(parts: AddressParts) -> str:
    """
    Arma la dirección estandarizada:

        "<Tipo> <Num1><Ltr1> # <Num2><Ltr2> - <Placa> <Complemento>"

    Solo se recortan los espacios de los extremos; los separadores '#' y '-'
    se mantienen aunque sus segmentos estén vacíos.
    Ej: Calle 10A # 20B - 30 APTO 201
    """
    street_type = canonical_street_type(parts.street_type)
    number1 = _upper(parts.number1)
    letter1 = _upper(parts.letter1)
    number2 = _upper(parts.number2)
    letter2 = _upper(parts.letter2)
    plate = _upper(parts.plate_number)
    complement = _upper(parts.complement)

    address = (
        f"{street_type} {number1}{letter1} # {number2}{letter2} - {plate} {complement}"
    )
    return address.strip()


def edited_address(parts: AddressParts, current: str = "") -> str:
    """
    Dirección a guardar desde el formulario de edición: si no se tocó
    ninguna parte (incluido el tipo de vía) se conserva la actual.
    """
    if current and parts == AddressParts():
        return current
    return compose(parts)
