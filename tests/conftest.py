import shutil

import pytest


@pytest.fixture
def cleanup():
    """Collect paths created outside tmp_path and remove them afterwards."""
    paths = []
    yield paths
    for path in paths:
        shutil.rmtree(path, ignore_errors=True)
