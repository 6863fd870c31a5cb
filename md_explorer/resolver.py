import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote, unquote

from .errors import Forbidden, IoFailure, NotFound

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServerRoot:
    """The configured root directory and its canonical form."""

    configured: Path
    canonical: Path

    @classmethod
    def from_path(cls, root) -> "ServerRoot":
        """
        Canonicalize `root` once at startup.
        Raises OSError if it does not exist and NotADirectoryError if it is a file.
        """
        configured = Path(root)
        canonical = configured.resolve(strict=True)
        if not canonical.is_dir():
            raise NotADirectoryError(f"Root is not a directory: {canonical}")
        return cls(configured=configured, canonical=canonical)


@dataclass(frozen=True)
class ResolvedPath:
    path: Path
    is_dir: bool


def decode_request_path(request_path: str) -> str:
    """Percent-decode a URL path; malformed UTF-8 becomes U+FFFD."""
    return unquote(request_path, encoding="utf-8", errors="replace")


def resolve(root: ServerRoot, request_path: str) -> ResolvedPath:
    """
    Map a raw (percent-encoded) request path to a confined filesystem path.

    Entry point for callers holding the undecoded path. The Flask route gets
    a path the WSGI layer already decoded and calls resolve_decoded instead.
    """
    if request_path == "/":
        return ResolvedPath(root.canonical, True)
    return resolve_decoded(root, decode_request_path(request_path))


def resolve_decoded(root: ServerRoot, decoded: str) -> ResolvedPath:
    """
    Resolve an already decoded request path inside `root`.

    Raises NotFound if nothing is there, Forbidden if the real path lies
    outside the canonical root, IoFailure if canonicalization fails.
    """
    if decoded == "/":
        return ResolvedPath(root.canonical, True)

    clean = decoded[1:] if decoded.startswith("/") else decoded
    if clean in ("", "."):
        return ResolvedPath(root.canonical, True)

    # Empty segments dropped so "//etc" cannot become an absolute join.
    segments = [seg for seg in clean.split("/") if seg]
    candidate = root.configured.joinpath(*segments)

    try:
        st = candidate.stat()
    except (OSError, ValueError) as e:
        log.debug("No metadata for %s: %s", candidate, e)
        raise NotFound()

    try:
        real = candidate.resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise IoFailure(e)

    try:
        real.relative_to(root.canonical)
    except ValueError:
        log.info("Rejected path outside root: %r", decoded)
        raise Forbidden()

    return ResolvedPath(real, stat.S_ISDIR(st.st_mode))


def relative_to_root(root: ServerRoot, path: Path) -> str:
    """Root-relative POSIX path of a confined path ("" for the root itself)."""
    try:
        rel = path.relative_to(root.canonical)
    except ValueError:
        return ""
    rel = rel.as_posix()
    return "" if rel == "." else rel


def url_for_path(root: ServerRoot, path: Path) -> str:
    """Leading-slash URL for a confined path, each segment encoded on its own."""
    rel = relative_to_root(root, path)
    # Encode the on-disk bytes so undecodable names (surrogate escapes) still link
    return "/" + "/".join(quote(os.fsencode(seg), safe="") for seg in rel.split("/") if seg)


def display_name(text: str) -> str:
    """Printable form of a filesystem name; undecodable bytes become U+FFFD."""
    return os.fsencode(text).decode("utf-8", "replace")
