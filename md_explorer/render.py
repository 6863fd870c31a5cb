import enum
import mimetypes
from dataclasses import dataclass
from pathlib import PurePath
from typing import Union

from flask import render_template
from markdown_it import MarkdownIt
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

from .errors import IoFailure, NotFound
from .resolver import ResolvedPath, ServerRoot, display_name, relative_to_root

MARKDOWN_EXTENSIONS = {"md", "markdown"}
HTML_CONTENT_TYPE = "text/html; charset=utf-8"
FALLBACK_CONTENT_TYPE = "application/octet-stream"


class ContentKind(enum.Enum):
    MARKDOWN = "markdown"
    RAW = "raw"


@dataclass(frozen=True)
class RenderedBody:
    body: Union[str, bytes]
    content_type: str


def classify(name: str) -> ContentKind:
    """Pick the rendering path from the filename extension, ignoring case."""
    ext = PurePath(name).suffix.lower().lstrip(".")
    if ext in MARKDOWN_EXTENSIONS:
        return ContentKind.MARKDOWN
    return ContentKind.RAW


def guess_content_type(name: str) -> str:
    mimetype, _ = mimetypes.guess_type(name, strict=False)
    return mimetype or FALLBACK_CONTENT_TYPE


def _markdown_parser() -> MarkdownIt:
    return (
        MarkdownIt("commonmark", {"html": True})
        .enable("table")
        .enable("strikethrough")
        .use(footnote_plugin)
        .use(tasklists_plugin)
    )


_md = _markdown_parser()


def render_markdown(text: str) -> str:
    """Convert Markdown source to an HTML fragment."""
    return _md.render(text)


def render_file(root: ServerRoot, file: ResolvedPath) -> RenderedBody:
    """
    Produce the response body for a confined file.

    Markdown files (.md, .markdown) are converted and wrapped in the page
    shell; anything else is returned byte for byte with a guessed type.
    """
    name = file.path.name
    if classify(name) is ContentKind.MARKDOWN:
        return _render_markdown_page(root, file)
    return _read_raw(file)


def _render_markdown_page(root: ServerRoot, file: ResolvedPath) -> RenderedBody:
    try:
        text = file.path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise IoFailure(e, "Failed to read file")

    page = render_template(
        "markdown.html",
        title=display_name(file.path.name),
        subtitle="/" + display_name(relative_to_root(root, file.path)),
        content=render_markdown(text),
    )
    return RenderedBody(page, HTML_CONTENT_TYPE)


def _read_raw(file: ResolvedPath) -> RenderedBody:
    try:
        data = file.path.read_bytes()
    except FileNotFoundError:
        raise NotFound()
    except OSError as e:
        raise IoFailure(e, "Failed to read file")

    return RenderedBody(data, guess_content_type(file.path.name))
