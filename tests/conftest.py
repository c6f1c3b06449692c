"""
Shared fixtures for deletion engine tests.
Creates isolated trusted/unknown trees with controlled file contents.
"""
import pytest
import tempfile
from pathlib import Path
from typing import Dict


def write_file(path: Path, content: bytes) -> Path:
    """Writes content to path, creating parent folders as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


class ReportCollector:
    """Report sink that keeps every line for later assertions."""

    def __init__(self):
        self.lines = []

    def __call__(self, text: str) -> None:
        self.lines.append(text)

    def contains(self, fragment: str) -> bool:
        return any(fragment in line for line in self.lines)


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def report():
    return ReportCollector()


@pytest.fixture
def roots(temp_dir) -> Dict[str, Path]:
    """Empty trusted and unknown folders side by side."""
    trusted = temp_dir / "trusted"
    unknown = temp_dir / "unknown"
    trusted.mkdir()
    unknown.mkdir()
    return {"trusted": trusted, "unknown": unknown}


@pytest.fixture
def photo_scenario(roots) -> Dict[str, Path]:
    """
    trusted/photo.jpg        1000 bytes, content H1
    unknown/photo_copy.jpg   1000 bytes, content H1 (duplicate)
    unknown/other.jpg        1000 bytes, content H2 (same size, unique)
    """
    h1 = b"P" * 1000
    h2 = b"Q" * 1000
    files = dict(roots)
    files["photo"] = write_file(roots["trusted"] / "photo.jpg", h1)
    files["photo_copy"] = write_file(roots["unknown"] / "photo_copy.jpg", h1)
    files["other"] = write_file(roots["unknown"] / "other.jpg", h2)
    return files
