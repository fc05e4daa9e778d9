import os
import unittest
from unittest.mock import patch

from rest_describe import Configuration
from rest_describe.config import DEFAULT_TOKEN_PATH, DEFAULT_USER_AGENT


class TestConfiguration(unittest.TestCase):

    def test_defaults(self):
        config = Configuration()
        self.assertEqual(config.get_base_url(), "")
        self.assertEqual(config.get_user_agent(), DEFAULT_USER_AGENT)
        self.assertEqual(config.get_token_path(), DEFAULT_TOKEN_PATH)
        self.assertIsNone(config.get_access_token())
        self.assertIsNone(config.get_refresh_token())

    def test_setters_chain(self):
        config = Configuration().set_access_token("a").set_refresh_token("r").set_base_url("https://x.io/")
        self.assertEqual(config.get_tokens(), ("a", "r"))
        self.assertEqual(config.get_base_url(), "https://x.io")

    def test_set_and_reset_tokens(self):
        config = Configuration()
        config.set_tokens("a", "r")
        self.assertEqual(config.get_tokens(), ("a", "r"))
        config.reset_tokens()
        self.assertEqual(config.get_tokens(), (None, None))

    def test_from_env(self):
        env = {
            "REST_DESCRIBE_BASE_URL": "https://env.example.com/",
            "REST_DESCRIBE_CLIENT_ID": "env-id",
            "REST_DESCRIBE_CLIENT_SECRET": "env-secret",
            "REST_DESCRIBE_TIMEOUT": "5",
        }
        with patch.dict(os.environ, env, clear=True):
            config = Configuration.from_env(client_id="explicit-id", user_agent=None)

        self.assertEqual(config.get_base_url(), "https://env.example.com")
        self.assertEqual(config.get_client_id(), "explicit-id")
        self.assertEqual(config.get_client_secret(), "env-secret")
        self.assertEqual(config.get_timeout(), 5.0)
        self.assertEqual(config.get_user_agent(), DEFAULT_USER_AGENT)
        self.assertIsNone(config.get_ca_bundle())


if __name__ == '__main__':
    unittest.main()
