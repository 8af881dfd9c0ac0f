import logging
import re
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """
    Configura el logging raíz de la aplicación.
    Streamlit re-ejecuta el script en cada interacción; basicConfig
    solo actúa la primera vez, así que no se duplican handlers.
    """
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
    )


def normalize_text(text: Optional[str]) -> str:
    """
    Normaliza texto libre para comparación y almacenamiento:
    - Elimina espacios iniciales/finales
    - Convierte a mayúsculas
    """
    if text is None:
        return ""
    return str(text).strip().upper()


def digits_only(value: Optional[str]) -> str:
    """
    Deja solo los dígitos (cédulas y teléfonos).
    """
    if not value:
        return ""
    return re.sub(r"[^0-9]", "", str(value))


def to_int(value: Union[str, int, float, None], default: int = 0) -> int:
    """
    Convierte valores numéricos del backend (a veces vienen como string).
    """
    if value is None or value == "":
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def percent(part: Union[int, float], whole: Union[int, float]) -> str:
    """
    Porcentaje formateado con un decimal. Una meta en cero da "0.0%".
    """
    if not whole or whole <= 0:
        return "0.0%"
    return f"{(part / whole) * 100:.1f}%"


def optional_id(value) -> Optional[str]:
    """
    Los ids llegan como int o string; vacío o None se trata como ausente.
    """
    if value is None or value == "":
        return None
    return str(value)
