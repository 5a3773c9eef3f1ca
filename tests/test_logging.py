import os

from infrastructure.logging import find_latest_log_file, get_log_directory


def test_windows_log_directory_uses_localappdata(monkeypatch):
    monkeypatch.setenv("LOCALAPPDATA", r"C:\Users\me\AppData\Local")
    assert get_log_directory("win32") == os.path.join(
        r"C:\Users\me\AppData\Local", "PhotoTagger", "logs"
    )


def test_linux_log_directory_follows_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path))
    assert get_log_directory("linux") == os.path.join(str(tmp_path), "phototagger", "logs")


def test_linux_log_directory_defaults_under_home(monkeypatch):
    monkeypatch.delenv("XDG_STATE_HOME", raising=False)
    expected = os.path.join(".local", "state", "phototagger", "logs")
    assert get_log_directory("linux").endswith(expected)


def test_find_latest_log_file(tmp_path):
    assert find_latest_log_file(str(tmp_path / "missing")) is None
    old = tmp_path / "app_20240101.log"
    new = tmp_path / "app_20240102.log"
    old.write_text("a", encoding="utf-8")
    new.write_text("b", encoding="utf-8")
    os.utime(old, (1_000_000, 1_000_000))
    os.utime(new, (2_000_000, 2_000_000))
    assert find_latest_log_file(str(tmp_path)) == new
