import pytest
import sys
from pathlib import Path

# Add src directory to Python path
src_path = str(Path(__file__).parent.parent.parent / "src")
if src_path not in sys.path:
    sys.path.append(src_path)

from procexit.modules.shutdown.coordinator import ExitCoordinator
from tests.utils.fake_runtime import create_fake_runtime
from tests.utils.test_logger import create_test_logger


@pytest.fixture
def runtime():
    return create_fake_runtime()


@pytest.fixture
def test_logger():
    return create_test_logger()


@pytest.fixture
def coordinator(runtime, test_logger):
    return ExitCoordinator(runtime=runtime, logger=test_logger)
