"""
Pytest configuration and fixtures for Sakata tests.
"""

import os
import random
import tempfile
from decimal import Decimal
from pathlib import Path
from typing import Generator, List, Sequence, Tuple

import pytest
from unittest.mock import patch

from sakata.config import Config
from sakata.models.market_data import Bar


def make_bar(open_price, high, low, close) -> Bar:
    """Create a test bar from plain numbers (converted via str to stay exact)."""
    return Bar(
        open=Decimal(str(open_price)),
        high=Decimal(str(high)),
        low=Decimal(str(low)),
        close=Decimal(str(close)),
    )


def make_bars(rows: Sequence[Tuple]) -> List[Bar]:
    return [make_bar(*row) for row in rows]


def warmup_bars(count: int = 20) -> List[Bar]:
    """Identical small up candles: body 2, so the body average settles at exactly 2."""
    return [make_bar(100, 103, 99, 102) for _ in range(count)]


def random_walk_bars(count: int = 50, seed: int = 7) -> List[Bar]:
    """Deterministic pseudo-random OHLC series."""
    rng = random.Random(seed)
    bars = []
    price = 100.0
    for _ in range(count):
        open_price = round(price + rng.uniform(-1.5, 1.5), 2)
        close = round(open_price + rng.uniform(-3, 3), 2)
        high = round(max(open_price, close) + rng.uniform(0, 1.5), 2)
        low = round(min(open_price, close) - rng.uniform(0, 1.5), 2)
        bars.append(make_bar(open_price, high, low, close))
        price = close
    return bars


@pytest.fixture
def warmup() -> List[Bar]:
    return warmup_bars()


@pytest.fixture
def random_series() -> List[Bar]:
    return random_walk_bars()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def mock_env_vars() -> Generator[dict, None, None]:
    """Mock environment variables for testing."""
    test_env = {
        "LOG_LEVEL": "DEBUG",
        "LOG_MAX_SIZE": "5MB",
        "LOG_BACKUP_COUNT": "2",
        "BODY_AVG_PERIOD": "10",
    }

    with patch.dict(os.environ, test_env, clear=False):
        yield test_env


@pytest.fixture
def test_config(mock_env_vars: dict) -> Config:
    """Create a test configuration instance."""
    return Config.load_from_env()
