import pytest

from PIL import Image
from pathlib import Path
from img_resizer.settings import Settings

ENV_VARS = (
    "IMG_RESIZER_WATCH_IN_DIR",
    "IMG_RESIZER_WATCH_OUT_DIR",
    "IMG_RESIZER_WORKERS",
    "IMG_RESIZER_EVENT_BUFFER",
    "IMG_RESIZER_POLL_INTERVAL",
    "IMG_RESIZER_SETTLE_TIME",
    "IMG_RESIZER_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def make_image():
    def _make_image(path: Path, size=(400, 300), mode="RGB", color="red") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new(mode, size, color).save(path)
        return path

    return _make_image


@pytest.fixture
def settings(tmp_path):
    settings = Settings(cwd=tmp_path)
    settings.POLL_INTERVAL = 0.05
    settings.SETTLE_TIME = 0.1
    settings.WORKERS = 2
    return settings
