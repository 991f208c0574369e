"""Tests for dailyfocus/workspace.py: settings and timezone resolution."""

from zoneinfo import ZoneInfo

from dailyfocus.workspace import (
    Settings,
    get_user_timezone,
    load_settings,
    store_dir,
    today_str,
    workspace_root,
)


def test_workspace_root_from_env(workspace):
    assert workspace_root() == workspace.resolve()
    assert store_dir() == workspace.resolve() / "store"


def test_load_settings_from_profile(workspace):
    s = load_settings(workspace)
    assert s.timezone == "UTC"
    assert s.focus_minutes == 50
    assert s.break_minutes == 10
    assert s.prompt_hour == 21
    assert s.store_prefix == "df_"


def test_missing_profile_uses_defaults(tmp_path):
    assert load_settings(tmp_path) == Settings()


def test_malformed_profile_uses_defaults(tmp_path):
    (tmp_path / "profile.yaml").write_text("timezone: [unclosed\n", encoding="utf-8")
    assert load_settings(tmp_path) == Settings()


def test_settings_are_clamped():
    s = Settings.from_dict({"focus_minutes": 0, "break_minutes": "x", "prompt_hour": 30})
    assert s.focus_minutes == 1
    assert s.break_minutes == 5
    assert s.prompt_hour == 23


def test_unknown_timezone_falls_back(tmp_path):
    (tmp_path / "profile.yaml").write_text("timezone: Mars/Olympus\n", encoding="utf-8")
    assert get_user_timezone(tmp_path) == ZoneInfo("UTC")


def test_configured_timezone(tmp_path):
    (tmp_path / "profile.yaml").write_text("timezone: Asia/Jakarta\n", encoding="utf-8")
    assert get_user_timezone(tmp_path) == ZoneInfo("Asia/Jakarta")
    assert len(today_str(tmp_path)) == 10


def test_undecodable_profile_uses_defaults(tmp_path):
    (tmp_path / "profile.yaml").write_bytes(b"timezone: \xff\xfe\n")
    assert load_settings(tmp_path) == Settings()
