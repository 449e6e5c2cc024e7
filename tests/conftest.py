import pytest

from builders import FakeAPI
from poclidex.core.logging import logger
from poclidex.services.generation import GenerationSession

@pytest.fixture
def api() -> FakeAPI:
    return FakeAPI()

@pytest.fixture
def session() -> GenerationSession:
    return GenerationSession()

@pytest.fixture(autouse=True)
def quiet_logger():
    logger.set_level("ERROR")
    yield
    logger.set_level("WARN")
