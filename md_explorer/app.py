from flask import Blueprint, Flask, Response, current_app, render_template
from werkzeug.exceptions import HTTPException

from .errors import ExplorerError, present
from .listing import list_directory
from .render import HTML_CONTENT_TYPE, render_file
from .resolver import ResolvedPath, ServerRoot, resolve_decoded

explorer = Blueprint("explorer", __name__)


def server_root() -> ServerRoot:
    return current_app.config["SERVER_ROOT"]


@explorer.route("/")
def index():
    # Always list the *canonical* root for "/"
    root = server_root()
    return _listing_response(root, ResolvedPath(root.canonical, True))


@explorer.route("/<path:subpath>")
def handle_any(subpath):
    # The WSGI layer already percent-decoded the path (invalid UTF-8 replaced)
    root = server_root()
    resolved = resolve_decoded(root, subpath)
    if resolved.is_dir:
        return _listing_response(root, resolved)

    rendered = render_file(root, resolved)
    return Response(rendered.body, content_type=rendered.content_type)


def _listing_response(root: ServerRoot, directory: ResolvedPath) -> Response:
    page = list_directory(root, directory)
    html = render_template("listing.html", page=page)
    return Response(html, content_type=HTML_CONTENT_TYPE)


def handle_explorer_error(error: ExplorerError):
    status, body = present(error)
    return Response(body, status=status, content_type=HTML_CONTENT_TYPE)


def handle_http_error(error: HTTPException):
    """Framework errors (unknown method etc.) share the explorer's failure page."""
    body = render_template("error.html", status=error.code, message=error.name)
    response = error.get_response()
    response.set_data(body)
    response.content_type = HTML_CONTENT_TYPE
    return response


def create_app(root: ServerRoot) -> Flask:
    """Build the explorer application serving `root`."""
    app = Flask(__name__)
    app.config["SERVER_ROOT"] = root
    app.register_blueprint(explorer)
    app.register_error_handler(ExplorerError, handle_explorer_error)
    app.register_error_handler(HTTPException, handle_http_error)
    return app
