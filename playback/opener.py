# playback/opener.py
"""Resolve a trace URI to a readable line stream.

Supported forms:

    resource://42                 bundled trace with id 42 (see TRACE_RESOURCE_DIR)
    file:///var/traces/drive.trace
    /var/traces/drive.trace       plain path (relative paths work too)
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import BinaryIO, Optional
from urllib.parse import unquote, urlparse

from .errors import TraceOpenError

logger = logging.getLogger(__name__)

RESOURCE_SCHEME = "resource"
FILE_SCHEME = "file"


def trace_scheme(uri: str) -> str:
    """Return the resolution scheme tag for ``uri`` ("resource" or "file")."""
    scheme = urlparse(str(uri)).scheme.lower()
    # "C:\traces\x.trace" parses with scheme "c"
    if not scheme or len(scheme) == 1:
        return FILE_SCHEME
    return scheme


def _open_lines(path: Path, uri: str) -> BinaryIO:
    # bytes: parse_line decodes each line on its own
    try:
        return open(path, "rb")
    except FileNotFoundError as e:
        raise TraceOpenError(f"Couldn't open the trace file {uri}: no such file {path}") from e
    except PermissionError as e:
        raise TraceOpenError(f"Couldn't open the trace file {uri}: permission denied") from e
    except OSError as e:
        raise TraceOpenError(f"Couldn't open the trace file {uri}: {e}") from e
    except ValueError as e:
        # embedded NUL in the path
        raise TraceOpenError(f"Couldn't open the trace file {uri}: {e}") from e


def resolve_resource(uri: str, resource_dir: Optional[Path] = None) -> Path:
    """Map ``resource://<id>`` to a file inside ``resource_dir``.

    A resource matches when its file name is ``<id>`` or its stem is ``<id>``
    (``42`` or ``42.trace``).
    """
    if resource_dir is None:
        from config import TRACE_RESOURCE_DIR
        resource_dir = TRACE_RESOURCE_DIR
    resource_dir = Path(resource_dir)

    authority = urlparse(uri).netloc or urlparse(uri).path.lstrip("/")
    try:
        res_id = int(authority)
    except ValueError:
        raise TraceOpenError(f"Trace resource id must be numeric: {uri}") from None

    exact = resource_dir / str(res_id)
    if exact.is_file():
        return exact
    candidates = sorted(p for p in resource_dir.glob(f"{res_id}.*") if p.is_file())
    if not candidates:
        raise TraceOpenError(f"Unable to find a trace resource with URI {uri} in {resource_dir}")
    if len(candidates) > 1:
        logger.warning("Several resources match %s, using %s", uri, candidates[0].name)
    return candidates[0]


def resolve_file(uri: str) -> Path:
    parsed = urlparse(uri)
    if parsed.scheme.lower() == FILE_SCHEME:
        if parsed.netloc not in ("", "localhost"):
            raise TraceOpenError(f"Remote file URIs are not supported: {uri}")
        return Path(unquote(parsed.path))
    return Path(os.path.expanduser(uri))


def open_trace(uri: str, resource_dir: Optional[Path] = None) -> BinaryIO:
    """Open the trace named by ``uri`` for line reading.

    Lines come back as bytes. A relative file name with a colon in it
    ("run:1.trace") is taken as a path when it exists.

    Raises TraceOpenError for anything that cannot be resolved or opened.
    """
    uri = str(uri)
    scheme = trace_scheme(uri)
    if scheme == RESOURCE_SCHEME:
        path = resolve_resource(uri, resource_dir)
    elif scheme == FILE_SCHEME:
        path = resolve_file(uri)
    elif Path(uri).is_file():
        path = Path(uri)
    else:
        raise TraceOpenError(f"Unsupported trace URI scheme '{scheme}': {uri}")

    logger.debug("Opening trace %s -> %s", uri, path)
    return _open_lines(path, uri)
