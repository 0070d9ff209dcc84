"""Unit tests for hexboard/settings.py."""

import importlib
import os
import unittest
import unittest.mock

from hexboard import settings

_ENV_VARS = ('HEXBOARD_TEMPLATE', 'HEXBOARD_SEED', 'HEXBOARD_FETCH_TIMEOUT', 'LOG_LEVEL')


class TestSettings(unittest.TestCase):
    """Tests for environment-driven settings."""

    def tearDown(self) -> None:
        importlib.reload(settings)

    def _reload_with(self, env: dict[str, str]) -> None:
        clean = {k: v for k, v in os.environ.items() if k not in _ENV_VARS}
        with unittest.mock.patch.dict(os.environ, {**clean, **env}, clear=True):
            importlib.reload(settings)

    def test_defaults(self) -> None:
        """With no env vars set, the bundled standard board is used."""
        self._reload_with({})
        self.assertEqual(settings.TEMPLATE_SOURCE, str(settings.STANDARD_MAP_PATH))
        self.assertIsNone(settings.SEED)
        self.assertEqual(settings.FETCH_TIMEOUT_SECONDS, 10.0)
        self.assertEqual(settings.LOG_LEVEL, 'INFO')

    def test_standard_map_is_bundled(self) -> None:
        self.assertTrue(settings.STANDARD_MAP_PATH.is_file())

    def test_template_from_env(self) -> None:
        self._reload_with({'HEXBOARD_TEMPLATE': 'https://boards.example.com/a.json'})
        self.assertEqual(settings.TEMPLATE_SOURCE, 'https://boards.example.com/a.json')

    def test_integer_seed(self) -> None:
        self._reload_with({'HEXBOARD_SEED': '-42'})
        self.assertEqual(settings.SEED, -42)

    def test_string_seed(self) -> None:
        self._reload_with({'HEXBOARD_SEED': 'friday-night'})
        self.assertEqual(settings.SEED, 'friday-night')

    def test_timeout_and_log_level(self) -> None:
        self._reload_with({'HEXBOARD_FETCH_TIMEOUT': '2.5', 'LOG_LEVEL': 'debug'})
        self.assertEqual(settings.FETCH_TIMEOUT_SECONDS, 2.5)
        self.assertEqual(settings.LOG_LEVEL, 'DEBUG')


if __name__ == '__main__':
    unittest.main()
