"""End-to-end tests for main.py with fake tools and a fake HTTP layer."""

import json
import signal
from pathlib import Path

import pytest

import main as cli
from imgup.sources.resolver import STAGING_PREFIX

from conftest import PNG_BYTES

SUCCESS_BODY = json.dumps({"success": True, "data": {"url": "https://x/y.png"}})


class FakeResponse:
    def __init__(self, text):
        self.text = text
        self.status_code = 200


@pytest.fixture
def api(monkeypatch):
    state = {"body": SUCCESS_BODY, "calls": 0}

    def fake_request(method, url, data=None, headers=None, timeout=None, **kwargs):
        state["calls"] += 1
        data.read()
        return FakeResponse(state["body"])

    monkeypatch.setattr("imgup.uploaders.imgbb.requests.request", fake_request)
    return state


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("IMGBB_API_KEY", "test-key")


@pytest.fixture
def tmp_root(monkeypatch, tmp_path):
    root = tmp_path / "tmp"
    root.mkdir()
    monkeypatch.setattr("tempfile.tempdir", str(root))
    return root


def run_main(argv):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(argv)
        raise SystemExit(0)
    return exc_info.value.code


def test_file_upload_prints_markdown(api_key, api, fake_tools, png_file, capsys):
    assert run_main([str(png_file), "--markdown", "--no-copy"]) == 0
    out, _ = capsys.readouterr()
    assert out == "![](https://x/y.png)\n"
    assert api["calls"] == 1


def test_file_upload_prints_org(api_key, api, fake_tools, png_file, capsys):
    assert run_main([str(png_file), "--org", "--no-copy"]) == 0
    assert capsys.readouterr().out == "[[https://x/y.png][]]\n"


def test_result_copied_to_clipboard(api_key, api, fake_tools, png_file, capsys):
    fake_tools.installed.add("xclip")
    assert run_main([str(png_file)]) == 0
    assert capsys.readouterr().out == "https://x/y.png\n"
    assert fake_tools.calls == [["xclip", "-selection", "clipboard", "-in"]]


def test_missing_clipboard_writer_only_warns(api_key, api, fake_tools, png_file, capsys):
    assert run_main([str(png_file)]) == 0
    out, err = capsys.readouterr()
    assert out == "https://x/y.png\n"
    assert "xclip" in err


def test_api_failure_exits_with_message(api_key, api, fake_tools, png_file, capsys):
    api["body"] = json.dumps({"success": False, "error": {"message": "boom"}})
    assert run_main([str(png_file), "--no-copy"]) == 1
    out, err = capsys.readouterr()
    assert out == ""
    assert "boom" in err


def test_null_url_is_failure(api_key, api, fake_tools, png_file, capsys):
    api["body"] = json.dumps({"success": True, "data": {"url": "null"}})
    assert run_main([str(png_file), "--no-copy"]) == 1
    out, err = capsys.readouterr()
    assert out == ""
    assert "Could not parse image URL" in err


def test_invalid_expiration_makes_no_request(api_key, api, fake_tools, png_file, capsys):
    assert run_main([str(png_file), "-e", "200d"]) == 1
    assert api["calls"] == 0
    assert "200d" in capsys.readouterr().err


def test_conflicting_sources_invoke_nothing(api_key, api, fake_tools, png_file, capsys):
    fake_tools.installed.update({"flameshot", "maim"})
    assert run_main(["-s", "-M", "0"]) == 1
    assert fake_tools.calls == []
    assert api["calls"] == 0


def test_unknown_flag_prints_usage(api_key, api, fake_tools, capsys):
    assert run_main(["--frobnicate"]) == 1
    err = capsys.readouterr().err
    assert "usage:" in err
    assert "--frobnicate" in err


def test_help_exits_zero_without_api_key(api, fake_tools, capsys):
    assert run_main(["--help"]) == 0
    assert "usage:" in capsys.readouterr().out


def test_missing_api_key(api, fake_tools, png_file, capsys):
    assert run_main([str(png_file)]) == 1
    assert "API key not found" in capsys.readouterr().err
    assert api["calls"] == 0


def test_api_key_from_config_file(monkeypatch, tmp_path, api, fake_tools, png_file, capsys):
    config = tmp_path / "imgup.conf"
    config.write_text("IMGBB_API_KEY=file-key\nOUTPUT_FORMAT=org\n", encoding="utf-8")
    monkeypatch.setenv("IMGUP_CONFIG", str(config))
    assert run_main([str(png_file), "--no-copy"]) == 0
    assert capsys.readouterr().out == "[[https://x/y.png][]]\n"


def test_missing_tool_fails_before_acquisition(api_key, api, fake_tools, capsys):
    assert run_main(["--select"]) == 1
    assert "flameshot" in capsys.readouterr().err
    assert fake_tools.calls == []
    assert api["calls"] == 0


def test_region_tool_failure(api_key, api, fake_tools, capsys):
    fake_tools.installed.add("flameshot")
    fake_tools.responses["flameshot"] = lambda args: (1, b"", b"")
    assert run_main(["--select", "--no-copy"]) == 1
    err = capsys.readouterr().err
    assert "flameshot" in err or "Region screenshot failed" in err
    assert "exit status 1" in err
    assert api["calls"] == 0


def test_clipboard_upload(api_key, api, fake_tools, capsys):
    fake_tools.installed.add("xclip")

    def xclip(args):
        if "-out" in args:
            return 0, PNG_BYTES, b""
        return 0, b"", b""

    fake_tools.responses["xclip"] = xclip
    assert run_main([]) == 0
    assert capsys.readouterr().out == "https://x/y.png\n"
    assert api["calls"] == 1


def test_empty_clipboard(api_key, api, fake_tools, capsys):
    fake_tools.installed.add("xclip")
    fake_tools.responses["xclip"] = lambda args: (1, b"", b"target not available")
    assert run_main(["--no-copy"]) == 1
    assert "No image data found in clipboard" in capsys.readouterr().err
    assert api["calls"] == 0


def write_monitor_capture(args):
    Path(args[args.index("--path") + 1]).write_bytes(PNG_BYTES)
    return 0, b"", b""


def test_monitor_staging_removed_after_success(api_key, api, fake_tools, tmp_root, capsys):
    fake_tools.installed.add("flameshot")
    fake_tools.responses["flameshot"] = write_monitor_capture
    assert run_main(["-M", "1", "--no-copy"]) == 0
    assert capsys.readouterr().out == "https://x/y.png\n"
    assert list(tmp_root.glob(f"{STAGING_PREFIX}*")) == []


def test_monitor_staging_removed_after_api_failure(api_key, api, fake_tools, tmp_root, capsys):
    api["body"] = "not json"
    fake_tools.installed.add("flameshot")
    fake_tools.responses["flameshot"] = write_monitor_capture
    assert run_main(["-M", "1", "--no-copy"]) == 1
    assert "Unknown API error" in capsys.readouterr().err
    assert list(tmp_root.glob(f"{STAGING_PREFIX}*")) == []


def test_monitor_staging_removed_after_transport_failure(
    api_key, fake_tools, tmp_root, monkeypatch, capsys
):
    import requests

    def fail(*args, **kwargs):
        raise requests.exceptions.ConnectionError("network unreachable")

    monkeypatch.setattr("imgup.uploaders.imgbb.requests.request", fail)
    fake_tools.installed.add("flameshot")
    fake_tools.responses["flameshot"] = write_monitor_capture
    assert run_main(["-M", "0", "--no-copy"]) == 1
    assert "network unreachable" in capsys.readouterr().err
    assert list(tmp_root.glob(f"{STAGING_PREFIX}*")) == []


def test_failure_notification_sent(api_key, api, fake_tools, png_file, capsys):
    fake_tools.installed.add("notify-send")
    api["body"] = json.dumps({"success": False, "error": {"message": "boom"}})
    assert run_main([str(png_file), "--no-copy"]) == 1
    notifications = [call for call in fake_tools.calls if call[0].endswith("notify-send")]
    assert len(notifications) == 1
    assert "boom" in notifications[0][-1]


def test_no_notify_flag(api_key, api, fake_tools, png_file, capsys):
    fake_tools.installed.add("notify-send")
    assert run_main([str(png_file), "--no-copy", "--no-notify"]) == 0
    assert fake_tools.calls == []


def test_monitor_staging_removed_on_sigterm(api_key, api, fake_tools, tmp_root, capsys):
    def capture_then_terminate(args):
        write_monitor_capture(args)
        assert len(list(tmp_root.glob(f"{STAGING_PREFIX}*"))) == 1
        handler = signal.getsignal(signal.SIGTERM)
        handler(signal.SIGTERM, None)
        return 0, b"", b""

    fake_tools.installed.add("flameshot")
    fake_tools.responses["flameshot"] = capture_then_terminate
    assert run_main(["-M", "0", "--no-copy"]) == 1
    assert list(tmp_root.glob(f"{STAGING_PREFIX}*")) == []
    assert api["calls"] == 0


def test_config_error_sends_notification(monkeypatch, tmp_path, api_key, api, fake_tools, capsys):
    config = tmp_path / "imgup.conf"
    config.write_text("SCREENSHOT_TOOL=spectacle\n", encoding="utf-8")
    monkeypatch.setenv("IMGUP_CONFIG", str(config))
    fake_tools.installed.add("notify-send")
    assert run_main(["--select"]) == 1
    assert "spectacle" in capsys.readouterr().err
    notifications = [call for call in fake_tools.calls if call[0].endswith("notify-send")]
    assert len(notifications) == 1
    assert "spectacle" in notifications[0][-1]


def test_argument_error_sends_notification(api_key, api, fake_tools, capsys):
    fake_tools.installed.add("notify-send")
    assert run_main(["--frobnicate"]) == 1
    notifications = [call for call in fake_tools.calls if call[0].endswith("notify-send")]
    assert len(notifications) == 1


def test_no_notify_flag_silences_config_errors(monkeypatch, tmp_path, api_key, api, fake_tools, capsys):
    config = tmp_path / "imgup.conf"
    config.write_text("NOTIFY=sometimes\n", encoding="utf-8")
    monkeypatch.setenv("IMGUP_CONFIG", str(config))
    fake_tools.installed.add("notify-send")
    assert run_main(["--no-notify"]) == 1
    assert fake_tools.calls == []
