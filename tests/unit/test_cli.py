"""Tests for the administrative CLI argument parsing."""

import pytest

from smilehub.cli import build_parser, cmd_create_tenant, cmd_init_db, cmd_version


def test_init_db_accepts_demo_flag() -> None:
    args = build_parser().parse_args(["init-db", "--demo"])

    assert args.func is cmd_init_db
    assert args.demo is True


def test_create_tenant_requires_email() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["create-tenant"])


def test_create_tenant_rejects_short_password(capsys) -> None:
    args = build_parser().parse_args(["create-tenant", "-e", "clinic@example.com", "-p", "123"])

    assert cmd_create_tenant(args) == 1
    assert "at least 6 characters" in capsys.readouterr().err


def test_create_tenant_rejects_bad_email(capsys) -> None:
    args = build_parser().parse_args(["create-tenant", "-e", "clinic", "-p", "secret123"])

    assert cmd_create_tenant(args) == 1
    assert "Invalid email format" in capsys.readouterr().err


def test_version_command(capsys) -> None:
    args = build_parser().parse_args(["version"])

    assert args.func(args) == 0
    assert args.func is cmd_version
    assert "SmileHub" in capsys.readouterr().out
