import logging

import streamlit as st

from api_client import ApiError, CampaignApiClient
from config import settings
from navigation import DASHBOARD, LEADERS, LOGIN, VOTERS, ZONES, resolve_route, visible_entries
from session import (
    AppContext,
    clear_session,
    load_context,
    new_client_id,
    save_session,
    set_theme,
)
from utils import setup_logging
from views import show_dashboard, show_leaders, show_voters, show_zones


st.set_page_config(
    page_title="Política Pro",
    page_icon="🗳️",
    layout="wide",
)

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

CLIENT_PARAM = "sid"

PAGES = {
    DASHBOARD: show_dashboard,
    VOTERS: show_voters,
    ZONES: show_zones,
    LEADERS: show_leaders,
}

THEME_CSS = {
    "dark": """
        .stApp { background-color: #0f172a; color: #e2e8f0; }
        section[data-testid="stSidebar"] { background-color: #020617; }
    """,
    "light": """
        .stApp { background-color: #f8fafc; color: #0f172a; }
        section[data-testid="stSidebar"] { background-color: #0f172a; }
        section[data-testid="stSidebar"] * { color: #e2e8f0; }
    """,
}


def apply_theme(theme: str) -> None:
    st.markdown(f"<style>{THEME_CSS[theme]}</style>", unsafe_allow_html=True)


def browser_id() -> str:
    """
    Identificador de este navegador. Vive en la URL (?sid=...) para que la
    sesión sobreviva a una recarga sin mezclarse con la de otros navegadores.
    """
    sid = st.query_params.get(CLIENT_PARAM)
    if not sid:
        sid = new_client_id()
        st.query_params[CLIENT_PARAM] = sid
    return sid


def show_login(client_id: str) -> None:
    """
    Pantalla de acceso. Si el login funciona, la sesión queda persistida
    y se entra al dashboard.
    """
    _, center, _ = st.columns([1, 2, 1])
    with center:
        st.title("Política Pro")
        st.caption("Acceso al War Room Digital")

        with st.form("login_form"):
            email = st.text_input("Correo Electrónico", placeholder="admin@campana.com")
            password = st.text_input("Contraseña", type="password", placeholder="••••••••")
            submitted = st.form_submit_button(
                "Iniciar Sesión", type="primary", use_container_width=True
            )

        st.caption("Sistema de Gestión de Campaña V1.0 - Acceso Restringido")

    if not submitted:
        return
    if not email.strip() or not password:
        center.warning("Ingresa correo y contraseña.")
        return

    with st.spinner("Validando credenciales..."):
        try:
            with CampaignApiClient() as client:
                token, user = client.login(email.strip(), password)
        except ApiError as e:
            center.error(e.message)
            return

    save_session(client_id, token, user)
    st.session_state["route"] = DASHBOARD
    st.rerun()


def logout(client_id: str) -> None:
    clear_session(client_id)
    for key in list(st.session_state.keys()):
        del st.session_state[key]
    st.rerun()


def show_sidebar(ctx: AppContext, route: str) -> str:
    """
    Menú lateral filtrado por rol, tema y datos del usuario.
    Devuelve la ruta elegida.
    """
    st.sidebar.title("POLÍTICA PRO")

    entries = visible_entries(ctx.role)
    labels = {e.target: f"{e.icon} {e.label}" for e in entries}
    targets = list(labels)
    if route not in targets:
        route = targets[0] if targets else DASHBOARD

    choice = st.sidebar.radio(
        "Navegación",
        targets,
        index=targets.index(route) if route in targets else 0,
        format_func=lambda t: labels[t],
        label_visibility="collapsed",
    )

    st.sidebar.markdown("---")
    dark = st.sidebar.toggle("Modo oscuro", value=ctx.theme == "dark")
    theme = "dark" if dark else "light"
    if theme != ctx.theme:
        set_theme(ctx.client_id, theme)
        st.rerun()

    user = ctx.current_user
    st.sidebar.markdown(f"**{user.name}**  \n{user.role.capitalize()}")
    if st.sidebar.button("Cerrar Sesión", use_container_width=True):
        logout(ctx.client_id)

    return choice or route


def main() -> None:
    ctx = load_context(browser_id())
    apply_theme(ctx.theme)

    route = resolve_route(st.session_state.get("route", DASHBOARD), ctx.current_user)
    if route == LOGIN:
        show_login(ctx.client_id)
        return

    route = resolve_route(show_sidebar(ctx, route), ctx.current_user)
    st.session_state["route"] = route

    with CampaignApiClient(token=ctx.token) as client:
        try:
            PAGES[route](ctx, client)
        except ApiError as e:
            if e.status_code != 401:
                raise
            logger.info("Token rechazado por el backend, cerrando sesión")
            logout(ctx.client_id)


if __name__ == "__main__":
    main()
