# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Locate and load contract bundle files from disk."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Iterator, Optional, Union

import yaml

from ..exceptions import ConfigurationError
from .bundle import ContractBundle

logger = logging.getLogger(__name__)

CONTRACT_FILE_ENV = "REQCHECK_CONTRACT_FILE"
_SUFFIXES = (".yaml", ".yml", ".json")


def _config_home() -> Path:
    configured = os.getenv("XDG_CONFIG_HOME")
    if configured:
        return Path(configured)
    return Path.home() / ".config"


def iter_contract_candidates(cwd: Path) -> Iterator[Path]:
    """Yield every location a contract file may live at, in priority order."""

    override = os.getenv(CONTRACT_FILE_ENV)
    if override:
        yield Path(override).expanduser()

    for suffix in _SUFFIXES:
        yield cwd / f"reqcheck-contract{suffix}"

    config_dir = _config_home() / "reqcheck"
    for suffix in _SUFFIXES:
        yield config_dir / f"contract{suffix}"


def locate_contract_file(contract_path: Optional[Union[str, Path]] = None) -> Path:
    """Return the contract file to load.

    An explicit *contract_path* always wins, then ``REQCHECK_CONTRACT_FILE``.
    Among the default locations exactly one file may exist.
    """

    if contract_path is not None:
        path = Path(contract_path).expanduser()
        if not path.is_file():
            raise ConfigurationError(f"Contract file not found: {path}")
        return path

    override = os.getenv(CONTRACT_FILE_ENV)
    if override:
        path = Path(override).expanduser()
        if not path.is_file():
            raise ConfigurationError(f"{CONTRACT_FILE_ENV} points to a missing file: {path}")
        return path

    found = [candidate for candidate in iter_contract_candidates(Path.cwd()) if candidate.is_file()]
    if not found:
        raise ConfigurationError(
            "No contract file found. Pass a path, set "
            f"{CONTRACT_FILE_ENV}, or create reqcheck-contract.yaml in the working directory."
        )
    if len(found) > 1:
        listing = ", ".join(str(p) for p in found)
        logger.error("Multiple contract files found: %s", listing)
        raise ConfigurationError(f"Multiple contract files found ({listing}); keep exactly one.")
    return found[0]


def load_contract_file(path: Union[str, Path]) -> ContractBundle:
    """Read *path* (YAML or JSON, by suffix) into a ``ContractBundle``."""

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read contract file {path}: {exc}") from exc

    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            raw = yaml.safe_load(text)
        else:
            raw = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Cannot parse contract file {path}: {exc}") from exc

    if raw is None:
        raw = {}
    logger.debug("Loaded contract file %s", path)
    return ContractBundle(raw_bundle=raw, source=str(path))


__all__ = [
    "CONTRACT_FILE_ENV",
    "iter_contract_candidates",
    "load_contract_file",
    "locate_contract_file",
]
