"""File handling utilities."""
import uuid
from pathlib import Path
from typing import BinaryIO


def safe_child_path(base_dir: Path, relative: str) -> Path:
    """Resolve a path under base_dir, refusing traversal outside it."""
    resolved = (base_dir / relative).resolve()
    if base_dir.resolve() not in resolved.parents and resolved != base_dir.resolve():
        raise ValueError("Invalid path")
    return resolved


def get_file_size(file: BinaryIO) -> int:
    """Get file size by seeking to end."""
    file.seek(0, 2)
    size = file.tell()
    file.seek(0)
    return size


def save_stream(stream: BinaryIO, target_dir: Path, filename: str | None) -> Path:
    """Save a file stream to target directory without overwriting."""
    target_dir.mkdir(parents=True, exist_ok=True)
    safe_name = Path(filename or "upload").name
    candidate = target_dir / safe_name
    if candidate.exists():
        suffix = candidate.suffix
        candidate = target_dir / f"{candidate.stem}_{uuid.uuid4().hex[:8]}{suffix}"
    with candidate.open("wb") as out:
        while chunk := stream.read(1024 * 1024):
            out.write(chunk)
    return candidate
