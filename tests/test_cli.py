"""Tests for the CLI: config validation rows and command wiring."""

import unittest

from typer.testing import CliRunner

import support  # noqa: F401

from luna_ops.cli import app
from luna_ops.cli.validate_config import check_settings


def _failed(rows):
    return [name for name, _, ok in rows if not ok]


class TestCheckSettings(unittest.TestCase):
    def test_complete_zeptomail_config(self):
        rows = check_settings("sk_live_0123456789", "zeptomail", "Zoho-enczapikey xyz987654", "sqlite:///x.sqlite", "https://shop.luna.co.ke")
        self.assertEqual(_failed(rows), [])
        secret = dict((name, value) for name, value, _ in rows)["PAYSTACK_SECRET_KEY"]
        self.assertEqual(secret, "sk_l...6789")

    def test_missing_secrets(self):
        rows = check_settings("", "zeptomail", "", "sqlite:///x.sqlite", "localhost:8000")
        self.assertEqual(_failed(rows), ["PAYSTACK_SECRET_KEY", "PUBLIC_BASE_URL", "ZEPTO_TOKEN"])

    def test_outbox_needs_no_token(self):
        rows = check_settings("sk_test_1", "outbox", "", "sqlite:///x.sqlite", "http://localhost:8000")
        self.assertNotIn("ZEPTO_TOKEN", [name for name, _, _ in rows])
        self.assertEqual(_failed(rows), [])

    def test_unknown_mail_provider(self):
        rows = check_settings("sk_test_1", "sendgrid", "", "sqlite:///x.sqlite", "http://localhost:8000")
        self.assertEqual(_failed(rows), ["MAIL_PROVIDER"])


class TestCliApp(unittest.TestCase):
    def test_add_user_rejects_unknown_role(self):
        result = CliRunner().invoke(app, ["add-user", "a@luna.co.ke", "Achieng", "--role", "wizard"])
        self.assertNotEqual(result.exit_code, 0)
        self.assertIn("Unknown role", result.output)


if __name__ == "__main__":
    unittest.main()
