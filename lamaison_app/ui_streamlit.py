"""
Streamlit page - reservation widget in the main column, chat in the sidebar.
"""

import logging
import uuid

import streamlit as st

from .calendar_grid import CalendarController, weeks
from .chat import ChatPanel, InvalidCredentialError
from .config import RESTAURANT_NAME, RESTAURANT_ADDRESS, DRAFT_AUTOSAVE_SECONDS
from .drafts import DraftAutosave
from .reservation import ReservationForm, map_url
from .storage import init_storage, LocalStorage

logger = logging.getLogger(__name__)

WEEKDAY_HEADERS = ["일", "월", "화", "수", "목", "금", "토"]
SLOT_LABELS = {"available": "예약 가능", "limited": "잔여 소수", "full": "마감"}


@st.cache_resource
def get_storage_connection():
    return init_storage()


def _client_id() -> str:
    client = st.query_params.get("client")
    if not client:
        client = uuid.uuid4().hex
        st.query_params["client"] = client
    return client


def _init_state() -> None:
    if "calendar" in st.session_state:
        return

    storage = LocalStorage(get_storage_connection(), _client_id())
    calendar = CalendarController()
    form = ReservationForm(calendar)
    autosave = DraftAutosave(storage)

    draft = autosave.load()
    if draft:
        form.load(draft.to_dict())
        logger.info("Restored reservation draft for client %s", storage.client_id)

    st.session_state.calendar = calendar
    st.session_state.form = form
    st.session_state.autosave = autosave
    st.session_state.chat = ChatPanel(storage)
    _push_fields(form)


def _push_fields(form: ReservationForm) -> None:
    """Copy controller fields into widget state."""
    st.session_state.f_name = form.name
    st.session_state.f_phone = form.phone
    st.session_state.f_requests = form.requests
    st.session_state.f_marketing = form.marketing


def _pull_fields(form: ReservationForm) -> None:
    form.name = st.session_state.get("f_name", "")
    form.set_phone(st.session_state.get("f_phone", ""))
    form.requests = st.session_state.get("f_requests", "")
    form.marketing = st.session_state.get("f_marketing", False)


# --- Callbacks ---

def _on_phone_change():
    form = st.session_state.form
    st.session_state.f_phone = form.set_phone(st.session_state.f_phone)


def _pick_date(d):
    st.session_state.calendar.select_date(d)
    st.session_state.form.sync_selection()


def _pick_time(t):
    st.session_state.calendar.select_time_slot(t)
    st.session_state.form.sync_selection()


def _request_submit():
    st.session_state.submit_requested = True


def _save_api_key():
    try:
        st.session_state.chat.save_api_key(st.session_state.get("api_key_input", ""))
        st.session_state.chat_alert = None
    except InvalidCredentialError as e:
        st.session_state.chat_alert = str(e)


# --- Sections ---

def _run_submit(form: ReservationForm) -> None:
    """Submit outside a callback so the pending state is drawn, then rerun to reset widgets."""
    st.button("예약하기", key="submit_pending", type="primary", disabled=True, use_container_width=True)
    with st.spinner("예약을 처리하고 있습니다..."):
        _pull_fields(form)
        result = form.submit()
    if result and result.success:
        _push_fields(form)
    st.rerun()


def render_calendar(calendar: CalendarController) -> None:
    prev_col, label_col, next_col = st.columns([1, 3, 1])
    prev_col.button("◀", key="prev_month", on_click=calendar.previous_month)
    label_col.markdown(f"<h4 style='text-align:center;margin:0'>{calendar.label}</h4>", unsafe_allow_html=True)
    next_col.button("▶", key="next_month", on_click=calendar.next_month)

    for col, header in zip(st.columns(7), WEEKDAY_HEADERS):
        col.markdown(f"**{header}**")

    for w, week in enumerate(weeks(calendar.grid())):
        for c, (col, cell) in enumerate(zip(st.columns(7), week)):
            label = str(cell.day)
            if cell.today:
                label = f"•{label}"
            col.button(
                label,
                key=f"day_{w}_{c}",
                disabled=not cell.clickable,
                type="primary" if cell.selected else "secondary",
                on_click=_pick_date if cell.clickable else None,
                args=(cell.date,) if cell.clickable else None,
                use_container_width=True,
            )

    st.caption(calendar.date_display)


def render_time_slots(calendar: CalendarController) -> None:
    view = calendar.time_slots()
    if isinstance(view, str):
        st.info(view)
        return

    cols = st.columns(5)
    for i, slot in enumerate(view):
        cols[i % 5].button(
            f"{slot['time']} · {SLOT_LABELS[slot['status']]}",
            key=f"slot_{slot['time']}",
            disabled=not slot["selectable"],
            type="primary" if slot["highlighted"] else "secondary",
            on_click=_pick_time,
            args=(slot["time"],),
            use_container_width=True,
        )


def render_form(form: ReservationForm) -> None:
    if st.session_state.pop("submit_requested", False):
        _run_submit(form)

    st.text_input("예약자 성함", key="f_name")
    st.text_input("연락처", key="f_phone", placeholder="010-0000-0000", on_change=_on_phone_change)

    date_col, time_col = st.columns(2)
    date_col.text_input("날짜", value=form.date, disabled=True)
    time_col.text_input("시간", value=form.time, disabled=True)

    minus, count, plus = st.columns([1, 2, 1])
    minus.button("−", key="guests_minus", on_click=form.change_guests, args=(-1,))
    count.markdown(f"<p style='text-align:center'>인원 {form.guests.value}명</p>", unsafe_allow_html=True)
    plus.button("+", key="guests_plus", on_click=form.change_guests, args=(1,))

    st.text_area("요청사항", key="f_requests")
    st.checkbox("이벤트 및 프로모션 정보 수신에 동의합니다", key="f_marketing")

    st.button(
        "예약하기",
        key="submit_reservation",
        type="primary",
        on_click=_request_submit,
        use_container_width=True,
    )
    if form.error:
        st.error(form.error)


def render_modal(form: ReservationForm) -> None:
    modal = form.modal
    if not modal.visible:
        return
    with st.container(border=True):
        st.markdown("### 예약이 완료되었습니다")
        for label, value in modal.lines:
            st.markdown(f"**{label}:** {value}")
        st.button("닫기", key="close_modal", on_click=modal.dismiss, args=("close",))


def render_chat(chat: ChatPanel) -> None:
    with st.sidebar:
        st.markdown(f"### 💬 {RESTAURANT_NAME} 어시스턴트")
        st.button("채팅 닫기" if chat.is_open else "채팅 열기", key="toggle_chat", on_click=chat.toggle)
        if not chat.is_open:
            return

        if chat.show_key_prompt:
            st.text_input("OpenAI API Key", key="api_key_input", type="password")
            st.button("저장", key="save_api_key", on_click=_save_api_key)
            if st.session_state.get("chat_alert"):
                st.error(st.session_state.chat_alert)

        for message in chat.messages:
            with st.chat_message(message.role):
                st.markdown(message.content)

        if prompt := st.chat_input("메시지를 입력하세요"):
            with st.chat_message("user"):
                st.markdown(prompt)

            with st.spinner(""):
                thinking_placeholder = st.empty()
                if chat.api_key:
                    thinking_placeholder.markdown(
                        "<span class='typing-indicator'>🍷 답변을 준비하고 있습니다...</span>",
                        unsafe_allow_html=True
                    )
                chat.send_message(prompt)
                thinking_placeholder.empty()

            st.rerun()


@st.fragment(run_every=DRAFT_AUTOSAVE_SECONDS)
def autosave_tick() -> None:
    form = st.session_state.form
    _pull_fields(form)
    st.session_state.autosave.tick(form.values())


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    st.set_page_config(
        page_title=f"{RESTAURANT_NAME} - 예약",
        page_icon="🍷",
        layout="wide",
    )

    st.markdown("""
        <style>
        #MainMenu, footer, .stDeployButton {display: none !important;}
        .block-container {max-width: 1100px;}
        @keyframes pulse {
            0%, 100% { opacity: 1; }
            50% { opacity: 0.5; }
        }
        .typing-indicator {
            animation: pulse 1.5s infinite;
        }
        </style>
    """, unsafe_allow_html=True)

    _init_state()
    calendar = st.session_state.calendar
    form = st.session_state.form

    st.title(RESTAURANT_NAME)
    st.caption(RESTAURANT_ADDRESS)
    st.link_button("지도 보기", map_url())

    st.header("예약")
    render_modal(form)

    cal_col, form_col = st.columns([3, 2])
    with cal_col:
        render_calendar(calendar)
        st.subheader("시간 선택")
        render_time_slots(calendar)
    with form_col:
        render_form(form)

    render_chat(st.session_state.chat)
    autosave_tick()


if __name__ == "__main__":
    main()
