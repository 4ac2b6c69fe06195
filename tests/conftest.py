"""Shared fixtures for filechecksum tests."""

import logging
import os

import pytest


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Keep ConfigLoader away from real user, system and env configuration."""
    user_dir = tmp_path / "user_config"
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setattr(
        "filechecksum.common.config.platformdirs.user_config_dir",
        lambda *args, **kwargs: str(user_dir),
    )
    monkeypatch.setattr(
        "filechecksum.common.config.ConfigLoader._load_system_config",
        lambda self: None,
    )
    for key in list(os.environ):
        if key.startswith("FILECHECKSUM_"):
            monkeypatch.delenv(key)
    return user_dir


@pytest.fixture
def restore_root_logger():
    """Undo setup_logging() changes to the root logger after a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
