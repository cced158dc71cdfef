import pytest

import idfexp
from idfexp.logging.nulllogger import NullLogger

from .fixtures.idf_fixture import model_dir, recording_logger


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    idfexp.logging.logger.instance = NullLogger()
