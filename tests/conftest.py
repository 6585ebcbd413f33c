import os
import sys

import pytest

# Path setup before any project imports to satisfy E402
ROOT = os.path.abspath(os.path.dirname(__file__))
PARENT = os.path.abspath(os.path.join(ROOT, ".."))
if PARENT not in sys.path:  # pragma: no cover - environment dependent
    sys.path.insert(0, PARENT)
if ROOT not in sys.path:  # pragma: no cover - environment dependent
    sys.path.insert(0, ROOT)

from _client_utils import ADMIN_IP, OUTSIDER_IP, make_app, remote_client  # noqa: E402


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def app(data_dir):
    return make_app(data_dir)


@pytest.fixture
def client(app):
    """Local client (localhost / 127.0.0.1): always passes the admin gate."""
    return app.test_client()


@pytest.fixture
def admin_client(app):
    return remote_client(app, ADMIN_IP)


@pytest.fixture
def outsider_client(app):
    return remote_client(app, OUTSIDER_IP)


@pytest.fixture
def store(app):
    return app.store


@pytest.fixture
def service(app):
    return app.collections
