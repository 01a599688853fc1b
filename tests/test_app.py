from __future__ import annotations

import json
import logging

import pytest

import app


@pytest.fixture
def config_path(tmp_path) -> str:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "channel": "@memes",
                "valid_file_extensions": ["png"],
                "valid_domain_names": ["imgur.com"],
            }
        ),
        encoding="utf-8",
    )
    return str(path)


def test_check_keeps_permitted_link(config_path, capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        app.main(["--config", config_path, "check", "https://imgur.com/a"])

    assert exc_info.value.code == 0
    assert capsys.readouterr().out.startswith("keep")


def test_check_deletes_chit_chat(config_path, capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        app.main(["--config", config_path, "check", "hello friends"])

    assert exc_info.value.code == 2
    assert "delete (Not a link or media file)" in capsys.readouterr().out


def test_check_with_attachment_and_mention(config_path) -> None:
    with pytest.raises(SystemExit) as exc_info:
        app.main(["--config", config_path, "check", "-a", "cat.png"])
    assert exc_info.value.code == 0

    with pytest.raises(SystemExit) as exc_info:
        app.main(["--config", config_path, "check", "hi @bob", "-m", "@bob"])
    assert exc_info.value.code == 0


def test_missing_config_exits_with_error(tmp_path, capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        app.main(["--config", str(tmp_path / "nope.json"), "check", "x"])

    assert exc_info.value.code == 1
    assert "Config file not found" in capsys.readouterr().err


def test_redacting_formatter_masks_secrets() -> None:
    formatter = app._RedactingFormatter(["s3cr3t"], fmt="%(message)s")
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "token=%s", ("s3cr3t",), None)
    assert formatter.format(record) == "token=***"
