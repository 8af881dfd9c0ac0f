"""
Sesión de usuario y preferencias persistidas entre recargas.

Cada navegador tiene su propio identificador (client_id) y todo lo que se
guarda queda bajo ese identificador: lo que un navegador inicia o cierra no
afecta a los demás.

En lugar de leer estado global implícito, las vistas reciben un AppContext
construido aquí en cada ejecución del script.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Optional, Tuple

from config import settings
from models import User
from storage import delete_value, get_value, init_db, put_value

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"
THEME_KEY = "theme"

THEMES = ("dark", "light")


@dataclass
class AppContext:
    client_id: str
    current_user: Optional[User]
    token: Optional[str]
    theme: str

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None and bool(self.token)

    @property
    def role(self) -> str:
        return self.current_user.role if self.current_user else ""


def new_client_id() -> str:
    return uuid.uuid4().hex


def _key(client_id: str, name: str) -> str:
    if not client_id:
        raise ValueError("client_id vacío")
    return f"{client_id}:{name}"


def save_session(client_id: str, token: str, user: User) -> None:
    put_value(_key(client_id, TOKEN_KEY), token)
    put_value(_key(client_id, USER_KEY), user.to_dict())
    logger.info("Sesión iniciada para %s (%s)", user.email or user.name, user.role)


def load_session(client_id: str) -> Optional[Tuple[str, User]]:
    """
    Devuelve (token, usuario) si este navegador tiene una sesión guardada completa.
    """
    token = get_value(_key(client_id, TOKEN_KEY))
    user_data = get_value(_key(client_id, USER_KEY))
    if not token or not user_data:
        return None
    return token, User.from_api(user_data)


def clear_session(client_id: str) -> None:
    """
    Cierra la sesión de este navegador. El tema elegido se conserva.
    """
    delete_value(_key(client_id, TOKEN_KEY))
    delete_value(_key(client_id, USER_KEY))
    logger.info("Sesión cerrada")


def get_theme(client_id: str) -> str:
    theme = get_value(_key(client_id, THEME_KEY), settings.DEFAULT_THEME)
    return theme if theme in THEMES else THEMES[0]


def set_theme(client_id: str, theme: str) -> None:
    if theme not in THEMES:
        raise ValueError(f"Tema desconocido: {theme}")
    put_value(_key(client_id, THEME_KEY), theme)


def load_context(client_id: str) -> AppContext:
    """
    Construye el contexto de la app para un navegador.
    """
    init_db()
    stored = load_session(client_id)
    token, user = stored if stored else (None, None)
    return AppContext(
        client_id=client_id, current_user=user, token=token, theme=get_theme(client_id)
    )
