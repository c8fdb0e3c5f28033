from __future__ import annotations

from beyondcdn.core.errors import PathTraversalError


def normalize_path(path: str) -> str:
    """Collapse a storage path into ``a/b/c`` form (no leading or trailing slash)."""
    parts: list[str] = []
    for segment in path.replace("\\", "/").split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if not parts:
                raise PathTraversalError(f"Path is outside of the defined root, path: [{path}]")
            parts.pop()
            continue
        parts.append(segment)
    return "/".join(parts)


def split_path(path: str) -> tuple[str, str]:
    """Return ``(dirname, basename)``; dirname is empty for top-level entries."""
    normalized = normalize_path(path)
    dirname, _, basename = normalized.rpartition("/")
    return dirname, basename


def prepend_prefix(path: str, prefix: str) -> str:
    if prefix == "":
        return path
    if path == prefix or path.startswith(f"{prefix}/"):
        return path
    return f"{prefix}/{path}"


def remove_prefix(path: str, prefix: str) -> str:
    if prefix == "":
        return path
    if not path.startswith(f"{prefix}/"):
        return path
    return path[len(prefix) + 1:]


def join_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"
