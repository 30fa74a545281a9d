"""
Local storage for resume images (thumbnails and profile photos).

Files live flat in settings.upload_dir and are served under /uploads/.
Stored links are full URLs; only their basename maps back to a file.
"""

import re
import time
from pathlib import Path
from urllib.parse import urlparse

from resume_builder.config import get_settings

ALLOWED_IMAGE_TYPES = {"image/png", "image/jpeg", "image/jpg", "image/webp"}


def upload_dir() -> Path:
    path = Path(get_settings().upload_dir)
    path.mkdir(parents=True, exist_ok=True)
    return path


def _clean_filename(name: str, fallback: str = "image") -> str:
    """'My Photo (1).png' -> 'My-Photo-1-.png'. Keeps names safe for URLs and paths."""
    name = Path(name or "").name.strip()
    cleaned = re.sub(r"[^A-Za-z0-9._-]+", "-", name).strip(".")
    return cleaned or fallback


def save_bytes(data: bytes, original_name: str) -> str:
    """Write data under a timestamped name. Returns the stored filename."""
    filename = f"{int(time.time() * 1000)}-{_clean_filename(original_name)}"
    (upload_dir() / filename).write_bytes(data)
    print(f"[uploads] Stored {filename} ({len(data)} bytes)")
    return filename


def public_url(base_url: str, filename: str) -> str:
    return f"{base_url.rstrip('/')}/uploads/{filename}"


def delete_stored(link: str | None) -> bool:
    """Delete the file a stored link points to. Missing files are ignored."""
    if not link:
        return False
    name = Path(urlparse(link).path).name
    if not name:
        return False
    path = upload_dir() / name
    if not path.is_file():
        return False
    try:
        path.unlink()
    except OSError as e:
        print(f"[uploads] Failed to delete {name}: {e}")
        return False
    print(f"[uploads] Deleted {name}")
    return True
