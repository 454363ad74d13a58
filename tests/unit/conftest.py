from collections.abc import Callable
from typing import Any

import pytest

from tests.unit.fakes import FakeInboxConversation


@pytest.fixture
def make_conversation() -> Callable[..., FakeInboxConversation]:
    def factory(**overrides: Any) -> FakeInboxConversation:
        return FakeInboxConversation(**overrides)

    return factory
