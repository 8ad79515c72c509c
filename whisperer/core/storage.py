# whisperer/core/storage.py
"""
Object storage for uploaded files and profile images.

Objects live on local disk at <STORAGE_ROOT>/<bucket>/<path>; rows in the
database only ever hold the <path> part.
"""
import logging
import os

from whisperer.core.config import get_settings

logger = logging.getLogger(__name__)


def bucket_root() -> str:
    settings = get_settings()
    return os.path.join(settings.storage_root, settings.storage_bucket)


def _full_path(path: str) -> str:
    root = os.path.abspath(bucket_root())
    full = os.path.abspath(os.path.join(root, path))
    if os.path.commonpath([root, full]) != root:
        raise ValueError(f"Path escapes the storage bucket: {path}")
    return full


def save_object(path: str, data: bytes) -> str:
    full = _full_path(path)
    os.makedirs(os.path.dirname(full), exist_ok=True)
    with open(full, "wb") as buffer:
        buffer.write(data)
    logger.info("Stored object %s (%d bytes)", path, len(data))
    return path


def read_object(path: str) -> bytes:
    with open(_full_path(path), "rb") as f:
        return f.read()


def delete_object(path: str) -> None:
    full = _full_path(path)
    if os.path.exists(full):
        os.remove(full)
        logger.info("Deleted object %s", path)


def object_status(path: str) -> dict:
    """
    Reports whether an object exists, for deletion checks.

    Mirrors a bucket listing: the last path segment is the name searched for
    inside the folder formed by the rest.
    """
    parts = path.split("/")
    file_name = parts.pop()
    if not file_name:
        return {"path": path, "status": "invalid_path"}

    folder = _full_path("/".join(parts)) if parts else _full_path("")
    found = os.path.isdir(folder) and file_name in os.listdir(folder)
    return {"path": path, "status": "present" if found else "missing"}
