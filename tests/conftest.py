import logging

import pytest
import requests

from ethereum_tx_builder.logging import UTCFormatter
from tests.helpers import FakeNode


@pytest.fixture
def fake_node(monkeypatch: pytest.MonkeyPatch) -> FakeNode:
    node = FakeNode()
    monkeypatch.setattr(requests, "post", node.post)
    return node


@pytest.fixture(autouse=True)
def remove_configured_log_handlers():
    """
    Drop the handlers installed on the root logger by `configure_logging`.
    """
    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        if isinstance(handler.formatter, UTCFormatter):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)
