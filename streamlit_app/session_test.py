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

import json
import unittest
from datetime import datetime, timedelta
from unittest.mock import MagicMock

from streamlit_app.session import COOKIE_NAME, SessionStore

USER = {"uid": "u1", "email": "ayse@example.com", "displayName": "Ayşe"}


def _cookie_manager(cookies=None):
    """Cookie manager double backed by a plain dict."""
    jar = dict(cookies or {})
    manager = MagicMock()
    manager.jar = jar
    manager.get.side_effect = jar.get
    manager.set.side_effect = lambda name, value, **kwargs: jar.__setitem__(
        name, value
    )
    manager.delete.side_effect = lambda name, **kwargs: jar.pop(name, None)
    return manager


class SessionStoreTest(unittest.TestCase):

    def test_anonymous_by_default(self):
        session = SessionStore({}, _cookie_manager())
        self.assertFalse(session.is_authenticated())
        self.assertIsNone(session.get_token())
        self.assertIsNone(session.get_user())
        self.assertEqual(session.auth_headers(), {})

    def test_save_then_sync_writes_cookie(self):
        cookies = _cookie_manager()
        session = SessionStore({}, cookies)

        session.save("token-1", USER)
        self.assertTrue(session.is_authenticated())
        self.assertEqual(session.auth_headers(), {"Authorization": "Bearer token-1"})
        cookies.set.assert_not_called()

        session.sync()
        name, value = cookies.set.call_args.args
        self.assertEqual(name, COOKIE_NAME)
        self.assertEqual(json.loads(value), {"token": "token-1", "user": USER})
        expires_at = cookies.set.call_args.kwargs["expires_at"]
        self.assertGreater(expires_at, datetime.now() + timedelta(days=365))

        # Nothing left to write.
        session.sync()
        self.assertEqual(cookies.set.call_count, 1)

    def test_reload_restores_from_cookie(self):
        cookies = _cookie_manager()
        first = SessionStore({}, cookies)
        first.save("token-1", USER)
        first.sync()

        reloaded = SessionStore({}, _cookie_manager(cookies.jar))
        self.assertTrue(reloaded.is_authenticated())
        self.assertEqual(reloaded.get_user(), USER)

    def test_separate_browsers_do_not_share_sessions(self):
        alice = SessionStore({}, _cookie_manager())
        alice.save("alice-token", USER)
        alice.sync()

        bob = SessionStore({}, _cookie_manager())
        self.assertFalse(bob.is_authenticated())
        self.assertEqual(bob.auth_headers(), {})

    def test_clear_deletes_cookie_and_stays_signed_out(self):
        state = {}
        cookies = _cookie_manager()
        session = SessionStore(state, cookies)
        session.save("token-1", USER)
        session.sync()

        session.clear()
        self.assertFalse(session.is_authenticated())
        # A rerun before the cookie is deleted must not sign the user back in.
        self.assertFalse(SessionStore(state, cookies).is_authenticated())

        session.sync()
        cookies.delete.assert_called_once()
        self.assertNotIn(COOKIE_NAME, cookies.jar)

    def test_clear_without_cookie_is_noop(self):
        cookies = _cookie_manager()
        session = SessionStore({}, cookies)
        session.clear()
        session.sync()
        cookies.delete.assert_not_called()

    def test_corrupt_cookie_is_anonymous(self):
        session = SessionStore({}, _cookie_manager({COOKIE_NAME: "{not json"}))
        self.assertFalse(session.is_authenticated())

    def test_without_cookie_manager(self):
        session = SessionStore()
        session.save("token-1", {})
        session.sync()
        self.assertTrue(session.is_authenticated())


if __name__ == "__main__":
    unittest.main()
