import os

import pytest

from md_explorer import ServerRoot, create_app


def make_symlink(target, link, target_is_directory=False):
    try:
        os.symlink(target, link, target_is_directory=target_is_directory)
    except (OSError, NotImplementedError) as e:
        pytest.skip(f"symlinks unavailable: {e}")


@pytest.fixture
def content(tmp_path):
    root = tmp_path / "content"
    root.mkdir()
    (root / "a").mkdir()
    (root / "a" / "nested.md").write_text("# Nested\n", encoding="utf-8")
    (root / "B.md").write_text("# Bee\n\nSome *text*.\n", encoding="utf-8")
    (root / "c.txt").write_text("plain text\n", encoding="utf-8")
    (root / ".hidden").write_text("secret\n", encoding="utf-8")
    return root


@pytest.fixture
def server_root(content):
    return ServerRoot.from_path(content)


@pytest.fixture
def app(server_root):
    app = create_app(server_root)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def write_bytes_name(directory, name: bytes, data=b"x"):
    """Create a file whose on-disk name is not valid UTF-8."""
    try:
        with open(os.path.join(os.fsencode(directory), name), "wb") as f:
            f.write(data)
    except (OSError, ValueError) as e:
        pytest.skip(f"filesystem rejects non-UTF-8 names: {e}")
