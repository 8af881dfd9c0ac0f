"""
Vistas de la app: dashboard, zonas, líderes y electores.

Cada vista recibe el AppContext y el cliente REST de la ejecución actual.
Las lecturas de listas que fallan se registran en el log y se sigue
mostrando la última lista conocida; los envíos que fallan muestran el
mensaje del backend.
"""

import logging
import time
from datetime import date
from typing import Callable, List, Optional, Sequence, TypeVar

import plotly.express as px
import streamlit as st

from address import AddressParts, edited_address
from api_client import ApiError, CampaignApiClient
from config import settings
from forms import LeaderForm, LocationFields, VoterForm, ZoneForm
from models import Leader, User, VoteIntent, Voter, VoterPage, Zone
from reference_data import TIPOS_VIA, Barrio, ReferenceCatalog, load_catalog
from resolver import suggest_barrios
from search import ALL, DebouncedVoterSearch, VoterQuery
from session import AppContext
from tables import leaders_frame, segmentation_frame, voters_frame, zones_frame

logger = logging.getLogger(__name__)

T = TypeVar("T")

LEVEL_BADGES = {"high": "🟢", "medium": "🟡", "low": "🔴"}


@st.cache_resource(show_spinner=False)
def get_catalog() -> ReferenceCatalog:
    """
    El catálogo se construye una sola vez por proceso.
    """
    return load_catalog()


def plotly_template(ctx: AppContext) -> str:
    return "plotly_dark" if ctx.theme == "dark" else "plotly_white"


def safe_load(state_key: str, loader: Callable[[], T], default: T) -> T:
    """
    Lectura en segundo plano: si falla, se registra y se devuelve la última
    versión guardada en session_state. Un 401 se propaga para cerrar sesión.
    """
    try:
        data = loader()
    except ApiError as e:
        if e.status_code == 401:
            raise
        logger.warning("No se pudo refrescar %s: %s", state_key, e.message)
        return st.session_state.get(state_key, default)
    st.session_state[state_key] = data
    return data


def submit(action: Callable[[], None], success_message: str) -> bool:
    """
    Ejecuta un envío. Si falla, muestra el mensaje del backend.
    """
    try:
        action()
    except ApiError as e:
        if e.status_code == 401:
            raise
        st.error(e.message)
        return False
    st.toast(success_message)
    return True


def show_errors(errors: Sequence[str]) -> None:
    for error in errors:
        st.warning(error)


# =====================
# COMPONENTES
# =====================


def address_builder(prefix: str, current: str = "") -> str:
    """
    Generador de dirección estandarizada.
    En edición, si no se toca ningún campo se conserva la dirección actual.
    """
    st.markdown("**Generador de Dirección (Estandarizada)**")
    if current:
        st.caption(f"Dirección actual: {current}")

    cols = st.columns([3, 2, 1, 2, 1, 2])
    parts = AddressParts()
    parts = parts.update(
        "street_type", cols[0].selectbox("Tipo de vía", TIPOS_VIA, key=f"{prefix}_street_type")
    )
    parts = parts.update("number1", cols[1].text_input("Num", key=f"{prefix}_number1"))
    parts = parts.update("letter1", cols[2].text_input("Ltr", key=f"{prefix}_letter1"))
    parts = parts.update("number2", cols[3].text_input("# Num", key=f"{prefix}_number2"))
    parts = parts.update("letter2", cols[4].text_input("Ltr ", key=f"{prefix}_letter2"))
    parts = parts.update("plate_number", cols[5].text_input("- Placa", key=f"{prefix}_plate"))
    parts = parts.update(
        "complement",
        st.text_input(
            "Complemento",
            placeholder="Ej: Apto 201, Edificio Azul",
            key=f"{prefix}_complement",
        ),
    )

    address = edited_address(parts, current)
    if address != current:
        st.caption(f"Resultado: `{address}`")
    return address


def barrio_selector(
    prefix: str,
    catalog: ReferenceCatalog,
    zones: Sequence[Zone],
    initial: Optional[LocationFields] = None,
) -> LocationFields:
    """
    Selección del barrio primero; comuna y zona se derivan solas.
    """
    query = st.text_input(
        "Buscar barrio",
        placeholder="Escribe parte del nombre...",
        key=f"{prefix}_barrio_query",
    )
    options: List[Barrio] = (
        suggest_barrios(query, catalog, limit=10) if query.strip() else catalog.barrio_options()
    )

    index = None
    if initial and initial.barrio:
        for i, b in enumerate(options):
            if b.name == initial.barrio and (not initial.comuna_id or b.comuna_id == initial.comuna_id):
                index = i
                break

    col1, col2 = st.columns(2)
    selected: Optional[Barrio] = col1.selectbox(
        "Barrio (Zona de Influencia)",
        options,
        index=index,
        format_func=lambda b: f"{b.name} ({catalog.comuna_name(b.comuna_id)})",
        placeholder="Buscar Barrio...",
        key=f"{prefix}_barrio",
    )

    location = LocationFields(address=initial.address if initial else "")
    if selected is not None:
        location = location.select_barrio(selected.name, catalog, zones, selected.comuna_id)

    col2.text_input(
        "Comuna (Automática)",
        value=catalog.comuna_name(location.comuna_id),
        placeholder="Se asigna según barrio",
        disabled=True,
        key=f"{prefix}_comuna_display_{location.comuna_id}",
    )

    if location.barrio and not location.zone_id:
        st.warning(
            f'**Zona no habilitada:** El barrio "{location.barrio}" no ha sido creado '
            "como Zona en el sistema. No podrás guardar hasta crear la zona correspondiente."
        )
    return location


def confirm_delete(state_key: str, label: str, on_confirm: Callable[[], None]) -> None:
    """
    Paso de confirmación antes de borrar.
    """
    if st.session_state.get(state_key) is None:
        return
    st.error(f"¿Seguro que deseas eliminar a {label}? Esta acción no se puede deshacer.")
    col1, col2 = st.columns(2)
    if col1.button("Confirmar", type="primary", key=f"{state_key}_yes"):
        st.session_state[state_key] = None
        if submit(on_confirm, "Registro eliminado."):
            st.rerun()
    if col2.button("Cancelar", key=f"{state_key}_no"):
        st.session_state[state_key] = None
        st.rerun()


def parse_date(value: str) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


# =====================
# DASHBOARD
# =====================


def show_dashboard(ctx: AppContext, client: CampaignApiClient) -> None:
    st.title("War Room Digital")
    st.caption("Resumen estratégico y avance de metas.")

    with st.spinner("Cargando inteligencia de campaña..."):
        stats = safe_load("dashboard_stats", client.get_dashboard, None)
    if stats is None:
        st.info("No fue posible cargar el resumen de campaña.")
        return

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Electores", f"{stats.registered:,}")
    col2.metric("Meta de Campaña", f"{stats.target:,}", help="Votos objetivo totales")
    col3.metric("Avance General", stats.progress_percent, help="Progreso vs Meta")
    col4.metric("Red de Líderes", stats.total_leaders)
    col4.caption(f"En {stats.active_zones} zonas activas")

    left, right = st.columns([2, 1])
    with left:
        st.subheader("Segmentación del Voto")
        segments = segmentation_frame(stats)
        if segments.empty:
            st.info("No hay datos suficientes para graficar")
        else:
            fig = px.pie(
                segments,
                names="Segmento",
                values="Votos",
                color="Segmento",
                color_discrete_map=dict(zip(segments["Segmento"], segments["Color"])),
                hole=0.5,
                template=plotly_template(ctx),
            )
            st.plotly_chart(fig, use_container_width=True)

    with right:
        st.subheader("Estado de la Campaña")
        st.info(
            "**Objetivo Inmediato**\n\n"
            "Incrementar el registro de voto duro en las zonas con mayor abstención."
        )
        days = stats.days_to_election(settings.ELECTION_DATE, date.today())
        st.metric("Días para elecciones", days if days is not None else "--")


# =====================
# ZONAS
# =====================


def show_zones(ctx: AppContext, client: CampaignApiClient) -> None:
    catalog = get_catalog()
    st.title("Zonas Electorales")
    st.caption("Gestión de territorio y metas de votación.")

    zones = safe_load("zones", client.list_zones, [])

    with st.expander("➕ Nueva Zona"):
        comunas = catalog.list_comunas()
        comuna = st.selectbox(
            "Número de Comuna",
            comunas,
            index=None,
            format_func=lambda c: c.name,
            placeholder="Seleccionar...",
            key="zone_comuna",
        )
        comuna_id = comuna.id if comuna else ""
        name = st.selectbox(
            "Nombre del Barrio / Zona",
            catalog.list_barrios(comuna_id),
            index=None,
            placeholder="Seleccionar barrio...",
            key=f"zone_name_{comuna_id}",
        )
        municipality = st.text_input(
            "Municipio", value=settings.DEFAULT_MUNICIPALITY, key="zone_municipality"
        )
        target = st.number_input("Meta de Votos", min_value=0, step=50, key="zone_target")

        if st.button("Guardar Zona", type="primary", key="zone_submit"):
            form = ZoneForm(
                comuna_id=comuna_id,
                name=name or "",
                municipality=municipality,
                vote_target=str(int(target)),
            )
            errors = form.validate(catalog, zones)
            if errors:
                show_errors(errors)
            elif submit(lambda: client.create_zone(form.to_payload()), "Zona creada."):
                st.rerun()

    if ctx.role == "admin":
        show_zone_assignment(client, zones)

    if not zones:
        st.info("No hay zonas registradas. Comienza creando una.")
        return
    st.dataframe(zones_frame(zones, catalog), use_container_width=True, hide_index=True)


def show_zone_assignment(client: CampaignApiClient, zones: List[Zone]) -> None:
    """
    Asignación de gerente y ajuste de meta (PUT /zones/{id}/assign).
    """
    with st.expander("👤 Asignar gerente / ajustar meta"):
        if not zones:
            st.caption("Primero crea una zona.")
            return
        zone = st.selectbox("Zona", zones, format_func=lambda z: z.name, key="assign_zone")
        users = safe_load("users", client.list_users, [])
        manager: Optional[User] = st.selectbox(
            "Gerente",
            users,
            index=next((i for i, u in enumerate(users) if u.id == zone.manager_id), None),
            format_func=lambda u: f"{u.name} ({u.role})",
            placeholder="Sin asignar",
            key=f"assign_manager_{zone.id}",
        )
        target = st.number_input(
            "Meta de Votos",
            min_value=1,
            step=50,
            value=max(zone.vote_target, 1),
            key=f"assign_target_{zone.id}",
        )
        if st.button("Guardar asignación", key="assign_submit"):
            form = ZoneForm(
                comuna_id=zone.comuna_id,
                name=zone.name,
                municipality=zone.municipality,
                vote_target=str(int(target)),
                manager_id=manager.id if manager else None,
            )
            if submit(lambda: client.assign_zone(zone.id, form.to_payload()), "Zona actualizada."):
                st.rerun()


# =====================
# LÍDERES
# =====================


def leader_form_fields(
    prefix: str,
    catalog: ReferenceCatalog,
    zones: Sequence[Zone],
    initial: LeaderForm,
) -> LeaderForm:
    st.markdown("###### Identificación")
    col1, col2 = st.columns(2)
    citizen_id = col1.text_input("Cédula", value=initial.citizen_id, placeholder="12345678", key=f"{prefix}_cedula")
    full_name = col2.text_input(
        "Nombres y Apellidos", value=initial.full_name, placeholder="NOMBRE COMPLETO", key=f"{prefix}_nombre"
    )

    st.markdown("###### Ubicación Estratégica")
    location = barrio_selector(prefix, catalog, zones, initial.location)
    location.address = address_builder(prefix, initial.location.address)

    st.markdown("###### Perfil")
    col1, col2 = st.columns([1, 2])
    phone = col1.text_input("Celular", value=initial.phone, max_chars=10, placeholder="300...", key=f"{prefix}_telefono")
    email = col2.text_input("Email", value=initial.email, key=f"{prefix}_email")
    col1, col2, col3 = st.columns(3)
    birth_date = col1.date_input(
        "Cumpleaños",
        value=parse_date(initial.birth_date),
        min_value=date(1920, 1, 1),
        max_value=date.today(),
        key=f"{prefix}_fecha_nacimiento",
    )
    occupation = col2.text_input("Oficio", value=initial.occupation, key=f"{prefix}_oficio")
    profession = col3.text_input("Profesión", value=initial.profession, key=f"{prefix}_profesion")
    vote_target = st.number_input(
        "Meta de Votos",
        min_value=0,
        step=10,
        value=int(initial.vote_target or 0),
        key=f"{prefix}_meta",
    )

    return LeaderForm(
        citizen_id=citizen_id,
        full_name=full_name,
        phone=phone,
        email=email,
        birth_date=birth_date.isoformat() if birth_date else "",
        occupation=occupation,
        profession=profession,
        vote_target=str(int(vote_target)),
        location=location,
    )


def show_leaders(ctx: AppContext, client: CampaignApiClient) -> None:
    catalog = get_catalog()
    st.title("Red Política")
    st.caption("Directorio de Líderes y Auditoría de Metas.")

    leaders = safe_load("leaders", client.list_leaders, [])
    zones = safe_load("zones", client.list_zones, [])

    with st.expander("➕ Nuevo Líder"):
        form = leader_form_fields("new_leader", catalog, zones, LeaderForm())
        label = "Registrar Líder" if form.location.zone_id else "Zona no válida"
        if st.button(label, type="primary", disabled=not form.location.zone_id, key="new_leader_submit"):
            errors = form.validate()
            if errors:
                show_errors(errors)
            elif submit(lambda: client.create_leader(form.to_payload()), "Líder registrado."):
                st.rerun()

    show_leader_editor(client, catalog, zones, leaders)

    if not leaders:
        st.info("No hay registros.")
        return

    df = leaders_frame(leaders, catalog)
    df["Nivel"] = df["Nivel"].map(LEVEL_BADGES)
    st.dataframe(df, use_container_width=True, hide_index=True)


def show_leader_editor(
    client: CampaignApiClient,
    catalog: ReferenceCatalog,
    zones: Sequence[Zone],
    leaders: Sequence[Leader],
) -> None:
    """
    Edición y borrado. Antes de editar se recarga el registro del backend.
    """
    if not leaders:
        return
    with st.expander("✏️ Editar / eliminar líder"):
        leader = st.selectbox(
            "Líder",
            leaders,
            format_func=lambda l: f"{l.full_name} - CC {l.citizen_id}",
            key="edit_leader_pick",
        )
        col1, col2 = st.columns(2)
        if col1.button("Cargar para editar", key="edit_leader_load"):
            try:
                st.session_state["editing_leader"] = client.get_leader(leader.id)
            except ApiError as e:
                st.error(e.message)
        if col2.button("Eliminar", key="delete_leader_btn"):
            st.session_state["confirm_delete_leader"] = leader.id

        pending_id = st.session_state.get("confirm_delete_leader")
        pending = next((l for l in leaders if l.id == pending_id), leader)
        confirm_delete(
            "confirm_delete_leader",
            f"el líder {pending.full_name}. Sus electores quedarán sin líder",
            lambda: client.delete_leader(pending_id),
        )

        editing: Optional[Leader] = st.session_state.get("editing_leader")
        if editing is None:
            return
        st.divider()
        prefix = f"edit_leader_{editing.id}"
        form = leader_form_fields(prefix, catalog, zones, LeaderForm.from_leader(editing))
        if st.button("Guardar cambios", type="primary", key=f"{prefix}_submit"):
            errors = form.validate()
            if errors:
                show_errors(errors)
            elif submit(lambda: client.update_leader(editing.id, form.to_payload()), "Líder actualizado."):
                st.session_state["editing_leader"] = None
                st.rerun()


# =====================
# ELECTORES
# =====================


def voter_form_fields(
    prefix: str,
    catalog: ReferenceCatalog,
    zones: Sequence[Zone],
    leaders: Sequence[Leader],
    initial: VoterForm,
) -> VoterForm:
    col1, col2 = st.columns(2)
    full_name = col1.text_input("Nombre Completo", value=initial.full_name, placeholder="Juan Pérez", key=f"{prefix}_nombre")
    citizen_id = col2.text_input("Cédula / ID", value=initial.citizen_id, placeholder="12345678", key=f"{prefix}_cedula")
    phone = st.text_input("Teléfono", value=initial.phone, placeholder="300 123 4567", key=f"{prefix}_telefono")

    location = barrio_selector(prefix, catalog, zones, initial.location)
    location.address = address_builder(prefix, initial.location.address)

    col1, col2 = st.columns(2)
    leader: Optional[Leader] = col1.selectbox(
        "Líder Responsable",
        leaders,
        index=next((i for i, l in enumerate(leaders) if l.id == initial.leader_id), None),
        format_func=lambda l: l.full_name,
        placeholder="Sin líder asignado",
        key=f"{prefix}_leader",
    )
    intents = list(VoteIntent)
    intent = col2.radio(
        "Intención de Voto",
        intents,
        index=intents.index(initial.vote_intent),
        format_func=lambda i: i.label,
        horizontal=True,
        key=f"{prefix}_tipo_voto",
    )
    notes = st.text_area(
        "Notas Iniciales (Contexto)",
        value=initial.notes,
        placeholder="Ej: Necesita transporte el día D. Fue contactado en visita puerta a puerta.",
        key=f"{prefix}_notas",
    )

    return VoterForm(
        citizen_id=citizen_id,
        full_name=full_name,
        phone=phone,
        vote_intent=intent,
        leader_id=leader.id if leader else None,
        notes=notes,
        location=location,
    )


def voter_search_state() -> DebouncedVoterSearch:
    if "voter_search" not in st.session_state:
        st.session_state["voter_search"] = DebouncedVoterSearch(settings.SEARCH_DEBOUNCE_SECONDS)
    return st.session_state["voter_search"]


def show_voter_filters(zones: Sequence[Zone]) -> VoterQuery:
    col1, col2, col3 = st.columns([2, 1, 1])
    search = col1.text_input(
        "Buscar", placeholder="Buscar por nombre o cédula...", key="voter_filter_search"
    )
    zone_options = [ALL] + [z.id for z in zones]
    zone_names = {z.id: z.name for z in zones}
    zone_id = col2.selectbox(
        "Zona",
        zone_options,
        format_func=lambda zid: zone_names.get(zid, "Todas las Zonas"),
        key="voter_filter_zone",
    )
    intent = col3.selectbox(
        "Tipo de voto",
        [ALL] + [i.value for i in VoteIntent],
        format_func=lambda v: VoteIntent(v).label if v else "Todos los Votos",
        key="voter_filter_intent",
    )

    query = VoterQuery(
        search=search,
        vote_intent=intent,
        zone_id=zone_id,
        page=st.session_state.get("voter_page", 1),
        limit=settings.VOTERS_PAGE_SIZE,
    )
    previous = voter_search_state().requested
    if previous is not None and (
        (previous.search, previous.vote_intent, previous.zone_id)
        != (query.search, query.vote_intent, query.zone_id)
    ):
        query = query.with_filters()
        st.session_state["voter_page"] = 1
    return query


def show_voters(ctx: AppContext, client: CampaignApiClient) -> None:
    catalog = get_catalog()
    st.title("Base de Datos de Electores")
    st.caption("Gestión de contactos y fidelización.")

    zones = safe_load("zones", client.list_zones, [])
    leaders = safe_load("leaders", client.list_leaders, [])

    with st.expander("➕ Nuevo Elector"):
        form = voter_form_fields("new_voter", catalog, zones, leaders, VoterForm())
        if st.button("Registrar Elector", type="primary", disabled=not form.location.zone_id, key="new_voter_submit"):
            errors = form.validate()
            if errors:
                show_errors(errors)
            elif submit(lambda: client.create_voter(form.to_payload()), "Elector registrado."):
                voter_search_state().refresh()
                st.rerun()

    query = show_voter_filters(zones)
    search_state = voter_search_state()
    search_state.request(query)

    # Una nueva interacción interrumpe esta ejecución durante la espera,
    # así que solo la última consulta llega a emitirse.
    wait = search_state.remaining()
    if wait:
        time.sleep(wait)
    try:
        with st.spinner("Cargando datos..."):
            search_state.poll(
                client.list_voters,
                lambda result: st.session_state.__setitem__("voter_results", result),
            )
    except ApiError as e:
        if e.status_code == 401:
            raise
        logger.warning("No se pudo cargar electores: %s", e.message)

    page: VoterPage = st.session_state.get("voter_results", VoterPage(items=[]))
    if not page.items:
        st.info("No se encontraron electores con estos filtros.")
    else:
        st.dataframe(voters_frame(page.items), use_container_width=True, hide_index=True)

    col1, col2, col3 = st.columns([2, 1, 1])
    col1.caption(f"Página {query.page} de {page.pages or 1}")
    if col2.button("Anterior", disabled=query.page <= 1, key="voter_prev"):
        st.session_state["voter_page"] = query.previous_page().page
        st.rerun()
    if col3.button("Siguiente", disabled=query.page >= page.pages, key="voter_next"):
        st.session_state["voter_page"] = query.next_page(page.pages).page
        st.rerun()

    show_voter_editor(client, catalog, zones, leaders, page.items)


def show_voter_editor(
    client: CampaignApiClient,
    catalog: ReferenceCatalog,
    zones: Sequence[Zone],
    leaders: Sequence[Leader],
    voters: Sequence[Voter],
) -> None:
    if not voters:
        return
    search_state = voter_search_state()
    with st.expander("✏️ Editar / eliminar elector"):
        voter = st.selectbox(
            "Elector",
            voters,
            format_func=lambda v: f"{v.full_name} - CC {v.citizen_id}",
            key="edit_voter_pick",
        )
        col1, col2 = st.columns(2)
        if col1.button("Cargar para editar", key="edit_voter_load"):
            try:
                st.session_state["editing_voter"] = client.get_voter(voter.id)
            except ApiError as e:
                st.error(e.message)
        if col2.button("Eliminar", key="delete_voter_btn"):
            st.session_state["confirm_delete_voter"] = voter.id

        pending_id = st.session_state.get("confirm_delete_voter")

        def delete_pending() -> None:
            client.delete_voter(pending_id)
            search_state.refresh()

        pending = next((v for v in voters if v.id == pending_id), voter)
        confirm_delete("confirm_delete_voter", f"el elector {pending.full_name}", delete_pending)

        editing: Optional[Voter] = st.session_state.get("editing_voter")
        if editing is None:
            return
        st.divider()
        prefix = f"edit_voter_{editing.id}"
        form = voter_form_fields(prefix, catalog, zones, leaders, VoterForm.from_voter(editing))
        if st.button("Guardar cambios", type="primary", key=f"{prefix}_submit"):
            errors = form.validate()
            if errors:
                show_errors(errors)
            elif submit(lambda: client.update_voter(editing.id, form.to_payload()), "Elector actualizado."):
                st.session_state["editing_voter"] = None
                search_state.refresh()
                st.rerun()
