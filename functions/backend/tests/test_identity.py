import unittest
from unittest.mock import MagicMock, patch

from firebase_admin import auth as firebase_auth

from backend.identity import (
    EmailAlreadyExistsError,
    FirebaseIdentityGateway,
    InvalidCredentialsError,
)
from shared.types import UserAccount


def _user_record(uid="u1", email="ayse@example.com", display_name="Ayşe"):
    record = MagicMock()
    record.uid = uid
    record.email = email
    record.display_name = display_name
    return record


class FirebaseIdentityGatewayTests(unittest.TestCase):
    def setUp(self):
        patcher = patch("backend.identity.auth")
        self.mock_auth = patcher.start()
        self.addCleanup(patcher.stop)
        # Keep the real exception classes so except clauses still work.
        self.mock_auth.UserNotFoundError = firebase_auth.UserNotFoundError
        self.mock_auth.EmailAlreadyExistsError = firebase_auth.EmailAlreadyExistsError
        self.gateway = FirebaseIdentityGateway(web_api_key="web-key")

    def test_get_user_by_email(self):
        self.mock_auth.get_user_by_email.return_value = _user_record()
        self.assertEqual(
            self.gateway.get_user_by_email("ayse@example.com"),
            UserAccount(uid="u1", email="ayse@example.com", display_name="Ayşe"),
        )

    def test_unknown_email(self):
        self.mock_auth.get_user_by_email.side_effect = firebase_auth.UserNotFoundError(
            "no user"
        )
        with self.assertRaises(InvalidCredentialsError):
            self.gateway.get_user_by_email("ghost@example.com")

    @patch("backend.identity.requests.post")
    def test_verify_password(self, mock_post):
        mock_post.return_value = MagicMock(status_code=200)
        self.mock_auth.get_user_by_email.return_value = _user_record()

        user = self.gateway.verify_password("ayse@example.com", "secret1")

        self.assertEqual(user.uid, "u1")
        _, kwargs = mock_post.call_args
        self.assertEqual(kwargs["params"], {"key": "web-key"})
        self.assertEqual(kwargs["json"]["password"], "secret1")

    @patch("backend.identity.requests.post")
    def test_verify_wrong_password(self, mock_post):
        response = MagicMock(status_code=400)
        response.json.return_value = {"error": {"message": "INVALID_PASSWORD"}}
        mock_post.return_value = response

        with self.assertRaises(InvalidCredentialsError):
            self.gateway.verify_password("ayse@example.com", "nope")
        self.mock_auth.get_user_by_email.assert_not_called()

    @patch("backend.identity.requests.post")
    def test_verify_provider_error(self, mock_post):
        response = MagicMock(status_code=503)
        response.raise_for_status.side_effect = RuntimeError("503")
        mock_post.return_value = response

        with self.assertRaises(RuntimeError):
            self.gateway.verify_password("ayse@example.com", "secret1")

    def test_verify_requires_web_api_key(self):
        with self.assertRaises(RuntimeError):
            FirebaseIdentityGateway().verify_password("ayse@example.com", "secret1")

    def test_create_user(self):
        self.mock_auth.create_user.return_value = _user_record()

        user = self.gateway.create_user("ayse@example.com", "secret1", "Ayşe")

        self.assertEqual(user.display_name, "Ayşe")
        self.mock_auth.create_user.assert_called_once_with(
            email="ayse@example.com",
            password="secret1",
            display_name="Ayşe",
            email_verified=False,
            app=None,
        )

    def test_create_duplicate_user(self):
        self.mock_auth.create_user.side_effect = firebase_auth.EmailAlreadyExistsError(
            "exists", None, None
        )
        with self.assertRaises(EmailAlreadyExistsError):
            self.gateway.create_user("ayse@example.com", "secret1", "Ayşe")

    def test_create_token_decodes_bytes(self):
        self.mock_auth.create_custom_token.return_value = b"custom-token"
        self.assertEqual(self.gateway.create_token("u1"), "custom-token")


if __name__ == "__main__":
    unittest.main()
