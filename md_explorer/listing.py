import logging
import os
import stat
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import Forbidden
from .resolver import (
    ResolvedPath,
    ServerRoot,
    display_name,
    relative_to_root,
    url_for_path,
)

log = logging.getLogger(__name__)

HIDDEN_MARKER = "."


@dataclass(frozen=True)
class DirEntry:
    name: str
    is_dir: bool


@dataclass(frozen=True)
class ListingLink:
    name: str
    href: str
    is_dir: bool


@dataclass
class ListingPage:
    title: str
    up: Optional[ListingLink] = None
    entries: List[ListingLink] = field(default_factory=list)


def sort_key(entry: DirEntry):
    """Return tuple for sorting: (category, lowercase name)"""
    # order: folder → file
    return (0 if entry.is_dir else 1, entry.name.lower())


def read_entries(directory) -> List[DirEntry]:
    """
    Visible children of `directory` in listing order.

    Hidden names are dropped. Entries whose metadata cannot be read (dangling
    symlinks, permission revoked) are skipped. Raises OSError if the
    directory itself cannot be enumerated.
    """
    entries = []
    with os.scandir(directory) as it:
        for entry in it:
            if entry.name.startswith(HIDDEN_MARKER):
                continue
            try:
                is_dir = stat.S_ISDIR(entry.stat().st_mode)
            except OSError as e:
                log.debug("Skipping %s: %s", entry.path, e)
                continue
            entries.append(DirEntry(entry.name, is_dir))

    # sort() is stable, so equal keys keep scandir order
    entries.sort(key=sort_key)
    return entries


def list_directory(root: ServerRoot, directory: ResolvedPath) -> ListingPage:
    """Build the listing page for a confined directory."""
    try:
        entries = read_entries(directory.path)
    except OSError as e:
        log.error("read_dir failed for %s: %r", directory.path, e)
        raise Forbidden("Cannot read directory")

    rel = relative_to_root(root, directory.path)
    page = ListingPage(title="/" + display_name(rel))

    if directory.path != root.canonical:
        page.up = ListingLink("Up", url_for_path(root, directory.path.parent), True)

    for entry in entries:
        child = directory.path / entry.name
        link = ListingLink(display_name(entry.name), url_for_path(root, child), entry.is_dir)
        page.entries.append(link)

    return page
