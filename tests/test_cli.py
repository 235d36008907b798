"""End-to-end tests for the command-line entry point against a mock host."""

import logging
import re

import httpx
import pytest

from envsh.cli import main


def _parts(request: httpx.Request) -> set[str]:
    """Form field names in a recorded multipart request."""
    return {m.decode() for m in re.findall(rb'; name="([^"]+)"', request.content)}


# ── Submit command ───────────────────────────────────────────────────────────


class TestSubmit:
    def test_upload_file(self, tmp_path, mock_host, recorded, capsys):
        f = tmp_path / "hello.txt"
        f.write_text("hi", encoding="utf-8")

        code = main([str(f)], transport=mock_host())

        assert code == 0
        assert capsys.readouterr().out == "Succesful! https://envs.sh/Ej-.txt\n"
        assert _parts(recorded[0]) == {"file"}

    def test_remote_url(self, mock_host, recorded):
        assert main(["https://example.com/cat.png"], transport=mock_host()) == 0
        assert _parts(recorded[0]) == {"url"}

    def test_shorten(self, mock_host, recorded):
        assert main(["-s", "https://example.com/long/path"], transport=mock_host()) == 0
        assert _parts(recorded[0]) == {"shorten"}

    def test_secret_and_expires(self, mock_host, recorded):
        code = main(["-S", "-e", "24", "https://example.com/a"], transport=mock_host())
        assert code == 0
        assert _parts(recorded[0]) == {"url", "secret", "expires"}

    def test_display_secret_prints_expiry_and_token(self, mock_host, capsys):
        transport = mock_host(headers={"X-Token": "tok", "X-Expires": "1739112927476"})

        assert main(["-d", "https://example.com/a"], transport=transport) == 0

        assert capsys.readouterr().out.splitlines() == [
            "Succesful! https://envs.sh/Ej-.txt",
            "Expires at 2025-02-09 (Sunday), 14:55:27.476 [UTC]",
            "X-Token: tok",
        ]

    def test_missing_file_never_hits_network(self, tmp_path, mock_host, recorded, capsys):
        code = main([str(tmp_path / "missing.bin")], transport=mock_host())
        assert code == 1
        assert recorded == []
        assert "cannot read" in capsys.readouterr().err

    def test_bad_expiry_is_usage_error(self, mock_host, recorded, capsys):
        code = main(["-e", "tomorrow", "https://example.com/a"], transport=mock_host())
        assert code == 2
        assert recorded == []
        assert "invalid expiry" in capsys.readouterr().err

    def test_shorten_with_file_rejected(self, tmp_path, mock_host, recorded):
        f = tmp_path / "x.txt"
        f.write_text("x", encoding="utf-8")
        assert main(["-s", str(f)], transport=mock_host()) == 2
        assert recorded == []

    def test_display_secret_conflicts_with_shorten(self, mock_host, recorded):
        assert main(["-s", "-d", "https://example.com/a"], transport=mock_host()) == 2
        assert recorded == []

    def test_host_error(self, mock_host, capsys):
        transport = mock_host(status=400, body="Error: invalid url")
        assert main(["https://example.com/a"], transport=transport) == 1
        assert "[400] Error: invalid url" in capsys.readouterr().err

    def test_unreadable_expiry_still_reports_url(self, mock_host, capsys):
        transport = mock_host(headers={"X-Token": "tok", "X-Expires": "inf"})

        assert main(["-d", "https://example.com/a"], transport=transport) == 0

        assert capsys.readouterr().out.splitlines() == [
            "Succesful! https://envs.sh/Ej-.txt",
            "X-Token: tok",
        ]

    def test_transport_error(self, capsys):
        def handler(request):
            raise httpx.ConnectError("name resolution failed", request=request)

        assert main(["https://example.com/a"], transport=httpx.MockTransport(handler)) == 1
        assert "name resolution failed" in capsys.readouterr().err


# ── Manage command ───────────────────────────────────────────────────────────


class TestManage:
    URL = "https://envs.sh/Ej-.txt"

    def test_delete(self, mock_host, recorded, capsys):
        assert main(["manage", self.URL, "tok", "-d"], transport=mock_host(body="")) == 0
        assert capsys.readouterr().out == "Change accepted!\n"
        assert str(recorded[0].url) == self.URL
        assert _parts(recorded[0]) == {"token", "delete"}

    def test_set_expiry(self, mock_host, recorded):
        assert main(["manage", self.URL, "tok", "-e", "5"], transport=mock_host(body="")) == 0
        assert _parts(recorded[0]) == {"token", "expires"}

    def test_both_flags_rejected(self, mock_host, recorded, capsys):
        code = main(["manage", self.URL, "tok", "-e", "5", "-d"], transport=mock_host())
        assert code == 2
        assert recorded == []
        assert "mutually exclusive" in capsys.readouterr().err

    def test_neither_flag_rejected(self, mock_host, recorded):
        assert main(["manage", self.URL, "tok"], transport=mock_host()) == 2
        assert recorded == []

    @pytest.mark.parametrize("url", [
        "http://envs.sh/Ej-.txt",
        "https://example.com/Ej-.txt",
        "not a url",
    ])
    def test_foreign_url_rejected(self, url, mock_host, recorded):
        assert main(["manage", url, "tok", "-d"], transport=mock_host()) == 2
        assert recorded == []

    def test_wrong_token(self, mock_host, capsys):
        transport = mock_host(status=401, body="invalid token")
        assert main(["manage", self.URL, "bad", "-d"], transport=transport) == 1
        assert "[401] invalid token" in capsys.readouterr().err

    @pytest.mark.parametrize("url", [
        "https://envs.sh:443/Ej-.txt",
        "https://user@envs.sh/Ej-.txt",
        "https://ENVS.SH/Ej-.txt",
    ])
    def test_equivalent_host_spellings_accepted(self, url, mock_host, recorded):
        assert main(["manage", url, "tok", "-d"], transport=mock_host(body="")) == 0
        assert len(recorded) == 1


# ── Configuration and logging ────────────────────────────────────────────────


class TestRuntime:
    def test_verbose_enables_debug(self, mock_host):
        assert main(["-v", "https://example.com/a"], transport=mock_host()) == 0
        assert logging.getLogger().level == logging.DEBUG

    def test_manage_verbose(self, mock_host):
        assert main(["manage", "https://envs.sh/a", "t", "-d", "-v"], transport=mock_host(body="")) == 0
        assert logging.getLogger().level == logging.DEBUG

    def test_default_level_from_settings(self, mock_host):
        assert main(["https://example.com/a"], transport=mock_host()) == 0
        assert logging.getLogger().level == logging.WARNING

    def test_noisy_libraries_held_at_warning(self, mock_host):
        main(["-v", "https://example.com/a"], transport=mock_host())
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_bad_timezone_reported_without_request(self, monkeypatch, mock_host, recorded, capsys):
        monkeypatch.setenv("ENVSH_DISPLAY_TIMEZONE", "Not/AZone")

        code = main(["https://example.com/a"], transport=mock_host())

        assert code == 2
        assert recorded == []
        assert "invalid configuration" in capsys.readouterr().err
