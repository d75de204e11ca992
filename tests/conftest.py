import pytest

from tests.fakes import Harness, build_harness


@pytest.fixture()
def harness() -> Harness:
    return build_harness()
