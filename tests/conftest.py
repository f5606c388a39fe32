"""Shared pytest fixtures for all tests."""

import logging

import pytest

from cli.config import Config
from filler.types import FillPolicy, FillSpec, SizeUnit


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .largefill directory
    """
    config_dir = tmp_path / '.largefill'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance.

    Args:
        temp_config_dir: Temporary config directory fixture

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def staging_dir(tmp_path):
    """
    Create a dedicated staging directory so leftover staging files are easy to spot.

    Returns:
        Path to empty staging directory
    """
    directory = tmp_path / 'staging'
    directory.mkdir()
    return directory


@pytest.fixture
def target_path(tmp_path):
    """
    Path of the file under test (not created).

    Returns:
        Path inside a dedicated output directory
    """
    output_dir = tmp_path / 'output'
    output_dir.mkdir()
    return output_dir / 'target.txt'


@pytest.fixture
def make_spec(target_path):
    """
    Factory for FillSpec instances targeting target_path.

    Returns:
        Callable accepting FillSpec keyword overrides
    """
    def _make_spec(**overrides) -> FillSpec:
        values = {
            'path': target_path,
            'size': 8,
            'unit': SizeUnit.B,
            'policy': FillPolicy.FIXED,
            'template': '1234',
            'append': False,
        }
        values.update(overrides)
        return FillSpec(**values)

    return _make_spec


@pytest.fixture(autouse=True)
def reset_component_loggers():
    """Drop handlers added by setup_logging so they never outlive a test's captured streams."""
    yield
    for name in ('cli', 'filler'):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.propagate = True
