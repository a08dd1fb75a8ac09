"""Tests for the app factory."""

import os
import unittest
from unittest.mock import patch

from flask import g, session

from tourneyhub import create_app
from tourneyhub.core.constants import (
    REASON_LOGIN_REQUIRED,
    SESSION_READY_TIMEOUT,
    STORE_MAX_RETRIES,
)
from tourneyhub.errors import UnauthorizedError
from tourneyhub.identity import current_identity

from .conftest import make_store


class AppFactoryTestCase(unittest.TestCase):
    """Test case for the app factory."""

    def test_404_error_handler(self):
        """Unknown routes answer with a JSON error."""
        app = create_app({"TESTING": True, "WTF_CSRF_ENABLED": False})

        with app.test_client() as client:
            response = client.get("/non_existent_page")
            self.assertEqual(response.status_code, 404)
            self.assertEqual(response.get_json(), {"error": "Not found."})

    def test_testing_mode_has_no_default_store(self):
        """No Realtime Database store is built while testing."""
        app = create_app({"TESTING": True})
        self.assertIsNone(app.extensions["tourneyhub"]["store"])
        self.assertIsNone(app.extensions["tourneyhub"]["session"])

    def test_config_from_environment(self):
        """Store and repair settings are read from the environment."""
        env_vars = {
            "TOURNAMENTS_PATH": "leagues",
            "STORE_MAX_RETRIES": "3",
            "STORE_RETRY_BACKOFF": "0.5",
            "REPAIR_MAX_WORKERS": "2",
        }
        with patch.dict(os.environ, env_vars):
            app = create_app({"TESTING": True})

        self.assertEqual(app.config["TOURNAMENTS_PATH"], "leagues")
        self.assertEqual(app.config["STORE_MAX_RETRIES"], 3)
        self.assertEqual(app.config["STORE_RETRY_BACKOFF"], 0.5)
        self.assertEqual(app.config["REPAIR_MAX_WORKERS"], 2)

    def test_config_defaults(self):
        """Unset settings fall back to the shared constants."""
        with patch.dict(os.environ, {}, clear=True):
            app = create_app({"TESTING": True})

        self.assertEqual(app.config["SESSION_READY_TIMEOUT"], SESSION_READY_TIMEOUT)
        self.assertEqual(app.config["STORE_MAX_RETRIES"], STORE_MAX_RETRIES)
        self.assertEqual(app.config["TOURNAMENTS_PATH"], "tournaments")

    def test_unauthorized_message(self):
        """The default login error uses the shared join reason."""
        self.assertEqual(UnauthorizedError().message, REASON_LOGIN_REQUIRED)
        self.assertEqual(UnauthorizedError().status_code, 401)

    def test_injected_store_starts_session(self):
        """A given store gets a started session over the configured path."""
        store, _ = make_store()
        app = create_app({"TESTING": True}, store=store)
        tournament_session = app.extensions["tourneyhub"]["session"]
        self.addCleanup(tournament_session.close)

        self.assertTrue(tournament_session.active)
        self.assertTrue(tournament_session.ready.done())
        self.assertEqual(tournament_session.collection, "tournaments")

    def test_identity_loaded_from_session(self):
        """``current_identity`` reflects the logged-in user."""
        app = create_app({"TESTING": True, "SECRET_KEY": "test"})
        with app.test_request_context("/"):
            session["user_id"] = "u1"
            session["email"] = "casey@example.com"
            app.preprocess_request()
            identity = current_identity()
        self.assertEqual(identity.uid, "u1")
        self.assertEqual(identity.display_name, "casey")

        with app.test_request_context("/"):
            app.preprocess_request()
            self.assertIsNone(g.identity)

    def test_csrf_error_handler(self):
        """A POST without a CSRF token is rejected with JSON."""
        store, _ = make_store()
        app = create_app({"TESTING": True, "WTF_CSRF_ENABLED": True}, store=store)
        self.addCleanup(app.extensions["tourneyhub"]["session"].close)

        with app.test_client() as client:
            response = client.post("/tournaments/", json={"name": "Spring Open"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("session may have expired", response.get_json()["error"])


if __name__ == "__main__":
    unittest.main()
