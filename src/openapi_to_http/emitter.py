"""Writes rendered request files to an output directory."""

import shutil
from pathlib import Path

from openapi_to_http.errors import OutputExistsError


def write_documents(files: dict[str, str], output_dir: Path, overwrite: bool = False) -> list[Path]:
    """Write {filename: content} below output_dir, creating folders as needed.

    Returns the written paths in the order of `files`.
    """
    written = []
    output_dir.mkdir(parents=True, exist_ok=True)
    for filename, content in files.items():
        file_path = output_dir / filename
        if file_path.exists() and not overwrite:
            raise OutputExistsError(f"{file_path} already exists")
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
        written.append(file_path)
    return written


def is_empty_dir(path: Path) -> bool:
    return not path.exists() or next(path.iterdir(), None) is None


def clear_directory(path: Path) -> None:
    """Remove everything inside path, keeping the directory itself."""
    for child in path.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()
