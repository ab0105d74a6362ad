"""Pytest configuration and shared fixtures."""

import logging

import pytest

from canrbac.core.rbac.compiler import build_roles


ROLES_YAML = """\
admin:
  users:
    abilities: [all]
    resource: user
  comments:
    abilities: [all]
user:
  users:
    abilities: [read]
    routes: ["42", comments]
    resource: user
  comments:
    abilities: [read, create, update]
    routes: [mine]
    resource: comment
  health:
    abilities: [skip]
guest:
  index:
    abilities: [read]
"""


@pytest.fixture
def disk_roles():
    """Role definitions in the on-disk shape."""
    return {
        "admin": {
            "users": {"abilities": ["all"], "resource": "user"},
        },
        "user": {
            "users": {"abilities": ["read"], "routes": ["42"], "resource": "user"},
            "comments": {
                "abilities": ["read", "create", "update"],
                "routes": ["mine"],
                "resource": "comment",
            },
            "health": {"abilities": ["skip"]},
        },
    }


@pytest.fixture
def roles(disk_roles):
    """Compiled roles for disk_roles."""
    return build_roles(disk_roles)


@pytest.fixture
def roles_yaml():
    return ROLES_YAML


@pytest.fixture
def roles_file(tmp_path):
    """Role definitions written to a YAML file."""
    path = tmp_path / "rbac.yml"
    path.write_text(ROLES_YAML)
    return path


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo any package logging configuration a test applied."""
    yield
    logger = logging.getLogger("canrbac")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
