from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from tgbot_client import BotClient, load_bot_settings, mask_token
from tgbot_client.logging_utils import LOG_PATH_ENV, append_rotating_log_line, write_log_line


class ConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        patcher = patch("tgbot_client.event_logging.write_log_line")
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_load_defaults(self) -> None:
        settings = load_bot_settings({})
        self.assertEqual(settings.bot_token, "")
        self.assertEqual(settings.api_base_url, "https://api.telegram.org")
        self.assertEqual(settings.request_timeout_seconds, 90)
        self.assertEqual(settings.poll_limit, 100)
        self.assertEqual(settings.poll_timeout_seconds, 60)

    def test_load_custom_values(self) -> None:
        settings = load_bot_settings(
            {
                "TGBOT_TOKEN": " 123456:abc ",
                "TGBOT_API_BASE_URL": "http://localhost:8081/",
                "TGBOT_REQUEST_TIMEOUT_SECONDS": "30",
                "TGBOT_POLL_LIMIT": "25",
                "TGBOT_POLL_TIMEOUT_SECONDS": "0",
            }
        )
        self.assertEqual(settings.bot_token, "123456:abc")
        self.assertEqual(settings.api_base_url, "http://localhost:8081")
        self.assertEqual(settings.request_timeout_seconds, 30)
        self.assertEqual(settings.poll_limit, 25)
        self.assertEqual(settings.poll_timeout_seconds, 0)

    def test_invalid_values_fallback_to_defaults(self) -> None:
        settings = load_bot_settings(
            {
                "TGBOT_REQUEST_TIMEOUT_SECONDS": "abc",
                "TGBOT_POLL_LIMIT": "500",
                "TGBOT_POLL_TIMEOUT_SECONDS": "-1",
            }
        )
        self.assertEqual(settings.request_timeout_seconds, 90)
        self.assertEqual(settings.poll_limit, 100)
        self.assertEqual(settings.poll_timeout_seconds, 60)

    def test_loaded_token_is_never_logged_in_clear(self) -> None:
        token = "987654:very-secret-value"
        with patch("tgbot_client.event_logging.write_log_line") as mocked:
            load_bot_settings({"TGBOT_TOKEN": token})
            self.assertTrue(mocked.called)
            for call in mocked.call_args_list:
                self.assertNotIn(token, call.args[0])

    def test_settings_feed_client(self) -> None:
        settings = load_bot_settings({"TGBOT_TOKEN": "abc:def", "TGBOT_API_BASE_URL": "http://relay"})
        client = BotClient(settings)
        self.assertEqual(client.build_url("getMe"), "http://relay/botabc:def/getMe")

    def test_mask_token(self) -> None:
        self.assertEqual(mask_token(""), "-")
        self.assertEqual(mask_token("short"), "***")
        self.assertEqual(mask_token("123456:ABCDEF"), "123***DEF")


class LogWriterTests(unittest.TestCase):
    def test_write_log_line_honours_path_env(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            log_path = Path(temp_dir) / "nested" / "client.log"
            with patch.dict(os.environ, {LOG_PATH_ENV: str(log_path)}):
                write_log_line("component=test event=hello")
            content = log_path.read_text(encoding="utf-8")
            self.assertIn("component=test event=hello", content)
            self.assertTrue(content.startswith("["))

    def test_write_log_line_swallows_write_failures(self) -> None:
        with patch("tgbot_client.logging_utils.append_rotating_log_line", side_effect=OSError("disk-full")):
            write_log_line("component=test event=ignored")


class LogRotationTests(unittest.TestCase):
    def test_rotation_keeps_max_ten_files_total(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            log_path = Path(temp_dir) / "logs" / "tgbot-client.log"
            for index in range(120):
                append_rotating_log_line(
                    log_path,
                    f"[{index:03d}] {'x' * 260}\n",
                    max_bytes=1024,
                    backup_count=9,
                )

            files = sorted(log_path.parent.glob("tgbot-client.log*"))
            self.assertTrue(log_path.exists())
            self.assertLessEqual(len(files), 10)
            self.assertFalse((log_path.parent / "tgbot-client.log.10").exists())
            for item in files:
                self.assertLessEqual(item.stat().st_size, 1024)

    def test_rotation_removes_backups_over_limit_during_next_roll(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            log_path = Path(temp_dir) / "tgbot-client.log"
            log_path.write_text("A" * 1100, encoding="utf-8")
            (log_path.parent / "tgbot-client.log.9").write_text("old", encoding="utf-8")

            append_rotating_log_line(log_path, "[001] trigger rotate\n", max_bytes=1024, backup_count=9)

            self.assertEqual((log_path.parent / "tgbot-client.log.1").read_text(encoding="utf-8"), "A" * 1100)
            self.assertFalse((log_path.parent / "tgbot-client.log.9").exists())
            self.assertFalse((log_path.parent / "tgbot-client.log.10").exists())
            self.assertEqual(log_path.read_text(encoding="utf-8"), "[001] trigger rotate\n")

    def test_zero_backups_truncates_by_replacement(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            log_path = Path(temp_dir) / "tgbot-client.log"
            log_path.write_text("B" * 1100, encoding="utf-8")

            append_rotating_log_line(log_path, "fresh\n", max_bytes=1024, backup_count=0)

            self.assertEqual(log_path.read_text(encoding="utf-8"), "fresh\n")
            self.assertEqual(list(log_path.parent.glob("tgbot-client.log.*")), [])


if __name__ == "__main__":
    unittest.main()
