"""
Tests for the command-line tools.
"""

import jwt
import pytest

from glidru.cli import main
from glidru.config import get_settings


@pytest.fixture(autouse=True)
def keep_test_logging(monkeypatch):
    """main() would replace the root handlers pytest installs."""
    monkeypatch.setattr("glidru.cli.configure_logging", lambda level=None: None)


class TestCli:
    def test_issue_token(self, capsys):
        assert main(["issue-token", "dave", "--email", "dave@example.com", "--role", "premium"]) == 0

        token = capsys.readouterr().out.strip()
        settings = get_settings()
        payload = jwt.decode(
            token, settings.local_token_secret, algorithms=[settings.local_token_algorithm]
        )
        assert payload["uid"] == "dave"
        assert payload["roles"] == ["premium"]

    def test_issue_token_unknown_role(self, capsys):
        assert main(["issue-token", "dave", "--role", "wizard"]) == 2
        assert "wizard" in capsys.readouterr().out

    def test_grant_unknown_role(self, capsys):
        assert main(["grant-role", "dave", "wizard"]) == 2
