import json

from PIL import Image
import pytest

import main
from infrastructure.exif_reader import TAG_DATETIME


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    main.logger.remove()


def _photo(path, date_text):
    exif = Image.Exif()
    exif[TAG_DATETIME] = date_text
    Image.new("RGB", (8, 8)).save(path, "JPEG", exif=exif.tobytes())


def test_cli_prints_clusters(tmp_path, capsys):
    photos = tmp_path / "photos"
    photos.mkdir()
    for i in range(3):
        _photo(photos / f"img{i}.jpg", f"2017:06:01 12:0{i}:00")
    (photos / "notes.txt").write_text("skip me", encoding="utf-8")

    settings = tmp_path / "settings.json"
    settings.write_text(
        json.dumps({"clustering": {"temporal": {"epsilon_s": 600, "min_neighbors": 2}}}),
        encoding="utf-8",
    )

    code = main.main(
        [
            str(photos),
            "--settings",
            str(settings),
            "--no-lookup",
            "--log-dir",
            str(tmp_path / "logs"),
        ]
    )

    out = capsys.readouterr().out
    assert code == 0
    assert "== Places ==" in out
    assert "== Events ==" in out
    assert "unknown" in out
    assert "img2.jpg" in out
    assert "notes.txt" not in out


def test_cli_reports_broken_location_history(tmp_path):
    photos = tmp_path / "photos"
    photos.mkdir()
    history = tmp_path / "history.json"
    history.write_text("{broken", encoding="utf-8")

    code = main.main(
        [str(photos), "-l", str(history), "--no-lookup", "--log-dir", str(tmp_path / "logs")]
    )

    assert code == 1


def test_cli_reports_missing_folder(tmp_path):
    code = main.main(
        [str(tmp_path / "missing"), "--no-lookup", "--log-dir", str(tmp_path / "logs")]
    )
    assert code == 1
