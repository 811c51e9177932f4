import pytest
from pathlib import Path
from PIL import Image

from image_organizer.config import OrganizerSettings


@pytest.fixture
def make_image():
    """Writes a real image of the given size; returns its path."""
    def _make(path: Path, size=(800, 600), color=(200, 30, 30)):
        path.parent.mkdir(parents=True, exist_ok=True)
        fmt = {'.jpg': 'JPEG', '.jpeg': 'JPEG', '.png': 'PNG', '.gif': 'GIF',
               '.bmp': 'BMP', '.tiff': 'TIFF'}[path.suffix.lower()]
        Image.new("RGB", size, color).save(path, fmt)
        return path
    return _make


@pytest.fixture
def root(tmp_path):
    r = tmp_path / "photos"
    r.mkdir()
    return r


@pytest.fixture
def settings(root, tmp_path):
    """Settings with the action log kept outside the organized tree."""
    return OrganizerSettings(root=root, log_file=tmp_path / "logs" / "organizer.log")
