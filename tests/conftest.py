import sys
from pathlib import Path

import pytest

# Add project root to sys.path
# This ensures that 'forklift' is importable as a top-level module during tests
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

FIXTURES_DIR = project_root / "tests" / "fixtures"
FAKE_ENGINE = FIXTURES_DIR / "fake_aptos.py"
MESSAGE_PACKAGE = FIXTURES_DIR / "move_packages" / "message"


@pytest.fixture
def temp_workspace_root(tmp_path):
    from forklift.config import config

    old_root = config.WORKSPACE.ROOT

    config.defrost()
    config.WORKSPACE.ROOT = str(tmp_path / "workspaces")
    config.freeze()

    try:
        yield tmp_path / "workspaces"
    finally:
        config.defrost()
        config.WORKSPACE.ROOT = old_root
        config.freeze()


@pytest.fixture
def fake_engine():
    from forklift.process import ProcessInvoker

    return ProcessInvoker([sys.executable, str(FAKE_ENGINE)])


@pytest.fixture
def local_harness(temp_workspace_root, fake_engine):
    from forklift.harness import Harness

    harness = Harness.create_local(invoker=fake_engine)
    try:
        yield harness
    finally:
        harness.cleanup()


@pytest.fixture
def message_package():
    return MESSAGE_PACKAGE
