from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.feature_builder import FeatureTreeBuilder


@pytest.fixture
def feature_builder(tmp_path: Path) -> FeatureTreeBuilder:
    """Provide a reusable feature tree builder rooted at the pytest tmp_path."""
    return FeatureTreeBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _reset_featuredocs_logger() -> Iterator[None]:
    """Undo CLI logging configuration so caplog sees featuredocs records."""
    yield
    logger = logging.getLogger("featuredocs")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
