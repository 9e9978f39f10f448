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
Client session context: bearer token and cached user of one browser.

The values live in the browser tab's Streamlit session state and are
mirrored to a browser cookie, so a reload keeps the visitor signed in.
Every authenticated request path reads the token through SessionStore.
"""

import json
import logging
from datetime import datetime, timedelta
from typing import Any, MutableMapping, Optional

logger = logging.getLogger(__name__)

COOKIE_NAME = "memorybox_session"
# Sessions never expire; the cookie outlives any realistic visit.
COOKIE_LIFETIME = timedelta(days=3650)

TOKEN_KEY = "token"
USER_KEY = "user"

# Session state keys.
STATE_TOKEN = "session_token"
STATE_USER = "session_user"
STATE_SIGNED_OUT = "session_signed_out"
STATE_PENDING_COOKIE = "session_pending_cookie"

_COOKIE_SET = "set"
_COOKIE_DELETE = "delete"


def _decode_cookie(value: Any) -> dict:
    if not value:
        return {}
    if isinstance(value, dict):
        return value
    try:
        data = json.loads(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring unreadable session cookie")
        return {}
    return data if isinstance(data, dict) else {}


class SessionStore:
    """
    Durable per-browser session storage.

    Args:
        state: The browser session's state mapping (st.session_state).
        cookies: A cookie manager of the same browser, or None to keep the
            session only for the lifetime of `state`.
    """

    def __init__(
        self,
        state: Optional[MutableMapping[str, Any]] = None,
        cookies=None,
    ):
        self.state = state if state is not None else {}
        self.cookies = cookies
        self._restore()

    def _restore(self) -> None:
        if self.cookies is None or self.state.get(STATE_TOKEN):
            return
        if self.state.get(STATE_SIGNED_OUT):
            return
        saved = _decode_cookie(self.cookies.get(COOKIE_NAME))
        if saved.get(TOKEN_KEY):
            self.state[STATE_TOKEN] = saved[TOKEN_KEY]
            self.state[STATE_USER] = saved.get(USER_KEY) or {}

    def get_token(self) -> Optional[str]:
        return self.state.get(STATE_TOKEN)

    def get_user(self) -> Optional[dict]:
        return self.state.get(STATE_USER)

    def is_authenticated(self) -> bool:
        return bool(self.get_token())

    def save(self, token: str, user: dict) -> None:
        self.state[STATE_TOKEN] = token
        self.state[STATE_USER] = user
        self.state[STATE_SIGNED_OUT] = False
        self.state[STATE_PENDING_COOKIE] = _COOKIE_SET

    def clear(self) -> None:
        self.state.pop(STATE_TOKEN, None)
        self.state.pop(STATE_USER, None)
        self.state[STATE_SIGNED_OUT] = True
        self.state[STATE_PENDING_COOKIE] = _COOKIE_DELETE

    def sync(self) -> None:
        """Writes the pending save/clear to the browser cookie."""
        pending = self.state.pop(STATE_PENDING_COOKIE, None)
        if self.cookies is None or pending is None:
            return
        if pending == _COOKIE_SET:
            value = json.dumps(
                {TOKEN_KEY: self.get_token(), USER_KEY: self.get_user() or {}},
                ensure_ascii=False,
            )
            self.cookies.set(
                COOKIE_NAME,
                value,
                expires_at=datetime.now() + COOKIE_LIFETIME,
                key="session_cookie_set",
            )
        elif self.cookies.get(COOKIE_NAME) is not None:
            self.cookies.delete(COOKIE_NAME, key="session_cookie_delete")

    def auth_headers(self) -> dict:
        token = self.get_token()
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}
