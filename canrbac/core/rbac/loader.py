"""Load compiled Roles from YAML.

The path is always supplied by the caller; there is no default location.
Decode and read errors propagate unchanged and no partial Roles value is
ever returned.
"""

from pathlib import Path
from typing import IO, Union

import yaml

from ...common.config import ensure_mapping
from ...common.logger import get_logger
from .compiler import build_roles
from .permissions import Roles

logger = get_logger("rbac_loader")


def load_roles(stream: Union[IO[bytes], IO[str], bytes, str], strict: bool = False) -> Roles:
    """Decode a YAML (or JSON) role document and compile it.

    Args:
        stream: Readable byte/text stream, or the document itself
        strict: Passed through to the compiler

    Returns:
        A freshly built Roles mapping

    Raises:
        yaml.YAMLError: If the document is not valid YAML
        TypeError: If the document root is not a mapping
        RoleConfigError: If a role definition is malformed
    """
    document = yaml.safe_load(stream)
    return build_roles(ensure_mapping(document), strict=strict)


def open_file(filename: Union[str, Path], strict: bool = False) -> Roles:
    """Load Roles from a YAML file.

    Args:
        filename: Path to the role definitions file
        strict: Passed through to the compiler

    Returns:
        A freshly built Roles mapping

    Raises:
        OSError: If the file can't be read (e.g. FileNotFoundError)
        yaml.YAMLError: If the file is invalid YAML
        TypeError: If the document root is not a mapping
        RoleConfigError: If a role definition is malformed
    """
    with open(filename, "rb") as f:
        roles = load_roles(f, strict=strict)

    logger.info(f"Loaded {len(roles)} roles from {filename}")
    return roles
