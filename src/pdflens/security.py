"""
Sandboxed path resolution.

Turns an untrusted path reference (a ``file://`` URI, an absolute path, or a
path relative to one of the permitted roots) into a canonical path that is
guaranteed to lie inside the current root set.

Security hardening:
- Containment is checked on the canonical path (symlinks and '..' resolved),
  never on the raw string.
- Containment is segment-aligned: root '/ws' does not admit '/ws-evil'.
- Relative references are re-checked against the root they were joined to,
  so '../../etc/passwd' cannot escape through a matching root.
- URIs with a scheme other than ``file`` are never tried as local paths.
"""

from __future__ import annotations

import errno
import json
import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlsplit
from urllib.request import url2pathname

from pdflens.errors import NotFoundError, PermissionDeniedError

logger = logging.getLogger(__name__)

# A scheme followed by '//' (http://, s3://, ...). Single letters are left
# alone so Windows drive paths like C:/docs are not mistaken for URIs.
_URI_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]+)://")

_LOCAL_HOSTS = {"", "localhost"}


@dataclass(frozen=True)
class FileUri:
    """A ``file:`` URI decoded to a local path. Always resolved as absolute."""

    path: Path


@dataclass(frozen=True)
class PlainPath:
    """A plain filesystem path, absolute or relative."""

    path: Path


@dataclass(frozen=True)
class ForeignUri:
    """A URI whose scheme is not ``file``."""

    scheme: str


PathReference = FileUri | PlainPath | ForeignUri


def file_uri_to_path(uri: str) -> Path | None:
    """Decode a ``file:`` URI to a local path, or None if it is not one."""
    try:
        parts = urlsplit(uri)
    except ValueError:
        return None
    if parts.scheme.lower() != "file":
        return None
    if parts.netloc.lower() not in _LOCAL_HOSTS:
        return None
    if not parts.path:
        return None
    return Path(url2pathname(parts.path))


def path_to_uri(path: Path | str) -> str:
    """Render an absolute path as a percent-encoded ``file://`` URI."""
    return Path(path).absolute().as_uri()


def quote_path(path: Path | str) -> str:
    """Quote a path for an error message, escaping control characters."""
    return json.dumps(str(path), ensure_ascii=False)


def format_roots(roots: Iterable[Path]) -> str:
    uris = [path_to_uri(root) for root in roots]
    return ", ".join(uris) if uris else "(none)"


def classify_reference(reference: str) -> PathReference:
    """Classify a caller-supplied reference as a file URI, foreign URI or plain path."""
    if reference[:5].lower() == "file:":
        path = file_uri_to_path(reference)
        if path is None:
            return ForeignUri(scheme="file")
        return FileUri(path)

    match = _URI_RE.match(reference)
    if match:
        return ForeignUri(scheme=match.group(1).lower())

    return PlainPath(Path(reference))


def is_within(path: Path, root: Path) -> bool:
    """True if ``path`` equals ``root`` or lies below it, by whole path segments."""
    return path == root or path.is_relative_to(root)


def _canonicalize(path: Path) -> Path | None:
    """Canonical form of an existing path, or None if it cannot be reached."""
    try:
        return path.resolve(strict=True)
    except (FileNotFoundError, NotADirectoryError):
        return None
    except ValueError:
        # embedded NUL byte
        return None
    except RuntimeError:
        # symlink loop before Python 3.13
        return None
    except OSError as e:
        if e.errno == errno.ELOOP:
            return None
        raise


def resolve_reference(reference: str, roots: Sequence[Path]) -> Path:
    """
    Resolve a path reference to a canonical path inside one of ``roots``.

    Args:
        reference: Untrusted file URI, absolute path or root-relative path
        roots: Current permitted roots, canonical, in priority order

    Returns:
        Canonical absolute path contained in some root

    Raises:
        NotFoundError: Nothing exists at the reference under any root, or the
            reference uses a non-file URI scheme
        PermissionDeniedError: The reference resolves outside every root
        OSError: Any other failure while canonicalizing an absolute reference
    """
    ref = classify_reference(reference)

    if isinstance(ref, ForeignUri):
        raise NotFoundError(
            f"Unsupported URI scheme '{ref.scheme}' in {quote_path(reference)}. "
            "Use a file:/// URI or a path relative to one of the roots: "
            f"{format_roots(roots)}"
        )

    if isinstance(ref, FileUri) or ref.path.is_absolute():
        canonical = _canonicalize(ref.path)
        if canonical is None:
            raise NotFoundError(f"File not found: {quote_path(ref.path)}")
        if not any(is_within(canonical, root) for root in roots):
            raise PermissionDeniedError(
                f"Access denied: {quote_path(canonical)} is outside the permitted roots: "
                f"{format_roots(roots)}"
            )
        return canonical

    for root in roots:
        canonical = _canonicalize(root / ref.path)
        if canonical is None:
            continue
        if is_within(canonical, root):
            return canonical
        logger.debug("Reference %s escapes root %s", quote_path(reference), root)

    raise NotFoundError(
        f"File {quote_path(reference)} not found in any of the roots: {format_roots(roots)}"
    )


def read_secure_file(reference: str, roots: Sequence[Path]) -> bytes:
    """Resolve ``reference`` against ``roots`` and return the file's bytes."""
    path = resolve_reference(reference, roots)
    if not path.is_file():
        raise NotFoundError(f"Not a file: {quote_path(path)}")
    return path.read_bytes()
