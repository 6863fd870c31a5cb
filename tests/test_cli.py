import argparse

import pytest
from flask import Flask

from md_explorer import cli


def test_bind_address_parses_host_and_port():
    assert cli.bind_address("127.0.0.1:3000") == ("127.0.0.1", 3000)
    assert cli.bind_address("[::1]:8080") == ("::1", 8080)


@pytest.mark.parametrize("value", ["3000", ":3000", "host:http", "host:70000"])
def test_bind_address_rejects_malformed(value):
    with pytest.raises(argparse.ArgumentTypeError):
        cli.bind_address(value)


def test_parser_defaults():
    args = cli.build_parser().parse_args([])

    assert str(args.root) == "content"
    assert args.addr == ("0.0.0.0", 3000)
    assert args.log_level is None


def test_prepare_root_creates_missing_directory(tmp_path):
    root = cli.prepare_root(tmp_path / "new" / "content")

    assert root.canonical == (tmp_path / "new" / "content").resolve()
    assert root.canonical.is_dir()


def test_prepare_root_exits_when_root_is_a_file(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli.prepare_root(blocker)

    assert excinfo.value.code == 1


def test_main_serves_canonical_root(tmp_path, monkeypatch):
    calls = {}

    def fake_run(self, host=None, port=None, **kwargs):
        calls.update(app=self, host=host, port=port, **kwargs)

    monkeypatch.setattr(Flask, "run", fake_run)
    monkeypatch.setattr(cli, "setup_logging", lambda level=None: None)

    cli.main(["--root", str(tmp_path / "docs"), "--addr", "127.0.0.1:4000"])

    assert calls["host"] == "127.0.0.1"
    assert calls["port"] == 4000
    assert calls["threaded"] is True
    assert calls["app"].config["SERVER_ROOT"].canonical == (tmp_path / "docs").resolve()
