"""
Pytest configuration and fixtures for thumbkit tests.
"""
import pytest
import tempfile
import shutil
from pathlib import Path
from PIL import Image
import numpy as np


def _write_image(path: Path, size, color, fmt: str = "JPEG", mode: str = "RGB", **save_args) -> Path:
    img = Image.new(mode, size, color=color)
    if fmt == "JPEG":
        save_args.setdefault("quality", 90)
    img.save(path, fmt, **save_args)
    return path


@pytest.fixture
def temp_dir():
    """Scratch directory removed after each test."""
    temp_path = Path(tempfile.mkdtemp(prefix="thumbkit_test_"))
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sample_image(temp_dir) -> Path:
    """800x600 landscape JPEG."""
    return _write_image(temp_dir / "test_image.jpg", (800, 600), "blue")


@pytest.fixture
def portrait_image(temp_dir) -> Path:
    """600x800 portrait JPEG."""
    return _write_image(temp_dir / "portrait.jpg", (600, 800), "green")


@pytest.fixture
def png_image(temp_dir) -> Path:
    """Half-transparent 400x400 PNG."""
    return _write_image(
        temp_dir / "transparent.png", (400, 400), (255, 0, 0, 128), fmt="PNG", mode="RGBA"
    )


@pytest.fixture
def sample_image_set(temp_dir) -> Path:
    """Folder of five JPEGs, image_0.jpg .. image_4.jpg, in assorted sizes."""
    set_dir = temp_dir / "test_set"
    set_dir.mkdir()

    specs = [
        ((800, 600), "red"),
        ((1024, 768), "green"),
        ((640, 480), "blue"),
        ((1920, 1080), "yellow"),
        ((600, 800), "purple"),
    ]
    for i, (size, color) in enumerate(specs):
        _write_image(set_dir / f"image_{i}.jpg", size, color)
    return set_dir


@pytest.fixture
def exif_rotated_image(temp_dir) -> Path:
    """
    JPEG stored as 200x100 with EXIF orientation 6 (displayed rotated 90
    degrees clockwise, i.e. 100x200). The left half is red, the right half
    blue.
    """
    image_path = temp_dir / "rotated.jpg"
    img = Image.new("RGB", (200, 100), color="blue")
    img.paste((255, 0, 0), (0, 0, 100, 100))
    exif = Image.Exif()
    exif[0x0112] = 6
    img.save(image_path, "JPEG", quality=95, exif=exif)
    return image_path


@pytest.fixture
def bitmap() -> Image.Image:
    """In-memory 800x600 RGB image."""
    return Image.new("RGB", (800, 600), color="orange")


@pytest.fixture
def array_image() -> np.ndarray:
    """Numpy array holding a 300x200 RGB image."""
    return np.full((200, 300, 3), 128, dtype=np.uint8)


@pytest.fixture
def empty_dir(temp_dir) -> Path:
    """Empty folder inside temp_dir."""
    empty = temp_dir / "empty"
    empty.mkdir()
    return empty
