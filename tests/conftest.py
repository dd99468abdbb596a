import io

import pytest

from factories import make_model_config
from harness.reporting import create_console


@pytest.fixture
def console():
    """Rich console writing to a buffer, readable via console.export_text()."""
    return create_console(file=io.StringIO(), record=True, width=160, color_system=None)


@pytest.fixture
def model_config():
    return make_model_config()
