"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from typing import Any

import pytest

from coda_client.types import SubscriptionResponse

DEFAULT_STATE_HASH = "3NKeMoncuHab5ScarV5ViyF16cJPT4taWNSaTLS64Dp67wuXigPZ"


def _new_block_frame(state_hash: str = DEFAULT_STATE_HASH) -> dict[str, Any]:
    return {
        "type": "data",
        "id": "1",
        "payload": {"data": {"newBlock": {"creator": "4vsRCVNep", "stateHash": state_hash}}},
    }


@pytest.fixture
def make_frame() -> Callable[..., dict[str, Any]]:
    """Factory for newBlock frames as the daemon sends them."""
    return _new_block_frame


@pytest.fixture
def frame() -> SubscriptionResponse:
    """A decoded newBlock frame."""
    return SubscriptionResponse.model_validate(_new_block_frame())
