# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

"""
Memory Box web client.

Run with:
    streamlit run streamlit_app/app.py

The page is bound to a memory group through the "group" query parameter
(?group=<id>). Anonymous visitors get the login/register form and return to
the requested group after signing in.
"""

from datetime import date

import extra_streamlit_components as stx
import streamlit as st

from streamlit_app.api_client import ApiError, MemoryBoxClient
from streamlit_app.formatting import format_date
from streamlit_app.session import SessionStore

DEFAULT_GROUP_ID = "demo"
GRID_COLUMNS = 3

st.set_page_config(page_title="Anı Kutusu", page_icon="📷", layout="wide")


def init_session_state():
    st.session_state.setdefault("is_login", True)
    st.session_state.setdefault("error", None)
    st.session_state.setdefault("redirect_group", None)
    st.session_state.setdefault("show_new_memory", False)


def get_client() -> MemoryBoxClient:
    """Client bound to this browser's session."""
    cookies = stx.CookieManager(key="memorybox_cookies")
    return MemoryBoxClient(session=SessionStore(st.session_state, cookies))


def requested_group() -> str:
    return st.query_params.get("group") or DEFAULT_GROUP_ID


def show_error():
    if st.session_state["error"]:
        st.error(st.session_state["error"])


# ========================================
# LOGIN / REGISTER
# ========================================


def render_login(client: MemoryBoxClient):
    if st.session_state["redirect_group"] is None:
        st.session_state["redirect_group"] = requested_group()
    is_login = st.session_state["is_login"]

    _, center, _ = st.columns([1, 2, 1])
    with center:
        st.title("Anı Kutusu")
        show_error()
        with st.form("auth_form"):
            display_name = ""
            if not is_login:
                display_name = st.text_input("İsim", key="auth_display_name")
            email = st.text_input("E-posta", key="auth_email")
            password = st.text_input(
                "Şifre",
                type="password",
                key="auth_password",
                help=None if is_login else "En az 6 karakter olmalıdır",
            )
            submitted = st.form_submit_button(
                "Giriş Yap" if is_login else "Kayıt Ol", use_container_width=True
            )

        if submitted:
            st.session_state["error"] = None
            try:
                with st.spinner():
                    if is_login:
                        client.login(email, password)
                    else:
                        client.register(email, password, display_name)
            except ApiError as e:
                st.session_state["error"] = e.message
                st.rerun()
            st.query_params["group"] = st.session_state["redirect_group"]
            st.session_state["redirect_group"] = None
            st.rerun()

        st.divider()
        toggle_label = (
            "Hesabınız yok mu? Kayıt olun"
            if is_login
            else "Zaten hesabınız var mı? Giriş yapın"
        )
        if st.button(toggle_label, type="tertiary", key="auth_toggle"):
            st.session_state["is_login"] = not is_login
            st.session_state["error"] = None
            st.rerun()


# ========================================
# MEMORY GALLERY
# ========================================


@st.dialog("Yeni Anı Ekle")
def new_memory_dialog(client: MemoryBoxClient, group_id: str):
    with st.form("new_memory_form"):
        title = st.text_input("Başlık", max_chars=100, key="memory_title")
        description = st.text_area("Açıklama", max_chars=500, key="memory_description")
        memory_date = st.date_input(
            "Tarih", value=date.today(), format="DD.MM.YYYY", key="memory_date"
        )
        photo = st.file_uploader("Fotoğraf Seç", type=["jpg", "jpeg", "png", "gif", "webp"])
        submitted = st.form_submit_button("Kaydet")

    if st.button("Vazgeç", key="memory_cancel"):
        st.session_state["show_new_memory"] = False
        st.rerun()

    if submitted:
        photo_file = None
        if photo is not None:
            photo_file = (photo.name, photo.getvalue(), photo.type)
        try:
            client.create_memory(
                group_id, title, description, memory_date.isoformat(), photo_file
            )
        except ApiError as e:
            st.error(e.message)
            return
        st.session_state["show_new_memory"] = False
        st.session_state["error"] = None
        st.rerun()


def render_memory_card(client: MemoryBoxClient, group_id: str, memory: dict):
    with st.container(border=True):
        if memory.get("photoUrl"):
            st.image(memory["photoUrl"], use_container_width=True)
        st.subheader(memory.get("title", ""))
        st.caption(format_date(memory.get("date")))
        st.write(memory.get("description", ""))
        if st.button("Sil", key=f"delete-{memory['memoryId']}", icon="🗑️"):
            try:
                client.delete_memory(group_id, memory["memoryId"])
                st.session_state["error"] = None
            except ApiError as e:
                st.session_state["error"] = e.message
            st.rerun()


def render_memories(client: MemoryBoxClient, group_id: str):
    header, actions = st.columns([4, 1])
    with header:
        st.title("Anılarım")
    with actions:
        if st.button("Yeni Anı Ekle", icon="➕", use_container_width=True, key="new_memory"):
            st.session_state["show_new_memory"] = True
        user = client.session.get_user() or {}
        if st.button("Çıkış Yap", use_container_width=True, key="logout"):
            client.logout()
            st.session_state["show_new_memory"] = False
            st.rerun()
        if user.get("displayName"):
            st.caption(user["displayName"])

    if st.session_state["show_new_memory"]:
        new_memory_dialog(client, group_id)

    show_error()
    try:
        with st.spinner():
            memories = client.list_memories(group_id)
    except ApiError as e:
        st.error(e.message)
        return

    if not memories:
        st.info("Henüz hiç anı eklenmemiş.")
        return

    # Server order is insertion order; the grid does not re-sort by date.
    for start in range(0, len(memories), GRID_COLUMNS):
        row = st.columns(GRID_COLUMNS)
        for column, memory in zip(row, memories[start : start + GRID_COLUMNS]):
            with column:
                render_memory_card(client, group_id, memory)


def main():
    init_session_state()
    client = get_client()
    if client.session.is_authenticated():
        render_memories(client, requested_group())
    else:
        render_login(client)
    client.session.sync()


main()
