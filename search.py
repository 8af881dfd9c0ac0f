"""
Búsqueda de electores: filtros, paginación, debounce y orden de respuestas.

El debounce agrupa cambios rápidos del texto de búsqueda en una sola
petición. El secuenciador evita que una respuesta vieja pise una más nueva.
"""

import logging
import time
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar

from models import VoteIntent

logger = logging.getLogger(__name__)

T = TypeVar("T")

ALL = ""


@dataclass(frozen=True)
class VoterQuery:
    search: str = ""
    vote_intent: str = ALL
    zone_id: str = ALL
    page: int = 1
    limit: int = 10

    def to_params(self) -> Dict[str, Any]:
        """
        Parámetros de GET /voters. Los filtros "todos" no se envían.
        """
        params: Dict[str, Any] = {
            "page": self.page,
            "limit": self.limit,
            "search": self.search.strip(),
        }
        if self.vote_intent:
            params["tipo_voto"] = VoteIntent(self.vote_intent).value
        if self.zone_id:
            params["zoneId"] = self.zone_id
        return params

    def with_filters(self, **changes: Any) -> "VoterQuery":
        """
        Cambiar cualquier filtro vuelve a la primera página.
        """
        return replace(self, page=1, **changes)

    def next_page(self, pages: int) -> "VoterQuery":
        return replace(self, page=min(self.page + 1, max(pages, 1)))

    def previous_page(self) -> "VoterQuery":
        return replace(self, page=max(self.page - 1, 1))


class Debouncer(Generic[T]):
    """
    Retiene el último valor empujado hasta que pasa `delay` segundos sin
    cambios. pop_due() lo entrega una sola vez.
    """

    def __init__(self, delay: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.delay = delay
        self._clock = clock
        self._pending: Optional[T] = None
        self._has_pending = False
        self._deadline = 0.0

    def push(self, value: T) -> None:
        self._pending = value
        self._has_pending = True
        self._deadline = self._clock() + self.delay

    def remaining(self) -> float:
        if not self._has_pending:
            return 0.0
        return max(self._deadline - self._clock(), 0.0)

    def pop_due(self) -> Optional[T]:
        if not self._has_pending or self._clock() < self._deadline:
            return None
        value = self._pending
        self._pending = None
        self._has_pending = False
        return value


class RequestSequencer:
    """
    Tokens crecientes por petición; solo la última emitida es vigente.
    """

    def __init__(self) -> None:
        self._latest = 0

    def next_token(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, token: int) -> bool:
        return token == self._latest

    def apply(self, token: int, setter: Callable[[T], None], value: T) -> bool:
        if not self.is_current(token):
            logger.debug("Respuesta descartada (token %s, vigente %s)", token, self._latest)
            return False
        setter(value)
        return True


class DebouncedVoterSearch:
    """
    Une debounce y secuenciador alrededor de la consulta de electores.

    request() registra la consulta y le asigna su token (las repetidas se
    ignoran salvo force). poll() dispara la petición cuando la consulta se
    asentó; si mientras tanto se registró otra, el resultado se descarta.
    """

    def __init__(self, delay: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._debouncer: Debouncer[Tuple[int, VoterQuery]] = Debouncer(delay, clock)
        self._sequencer = RequestSequencer()
        self.requested: Optional[VoterQuery] = None

    def request(self, query: VoterQuery, force: bool = False) -> bool:
        if not force and query == self.requested:
            return False
        self.requested = query
        self._debouncer.push((self._sequencer.next_token(), query))
        return True

    def refresh(self) -> None:
        """
        Vuelve a pedir la consulta vigente (tras crear, editar o borrar).
        """
        if self.requested is not None:
            self.request(self.requested, force=True)

    def remaining(self) -> float:
        return self._debouncer.remaining()

    def poll(self, fetch: Callable[[VoterQuery], T], on_result: Callable[[T], None]) -> bool:
        """
        Devuelve True si se emitió una petición. Los errores de `fetch`
        se propagan; el resultado anterior queda intacto.
        """
        due = self._debouncer.pop_due()
        if due is None:
            return False
        token, query = due
        result = fetch(query)
        self._sequencer.apply(token, on_result, result)
        return True
