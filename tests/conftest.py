"""
Pytest configuration and shared fixtures.

Provides fixtures for:
- A canonical sandbox root inside pytest's tmp_path
- A second, sibling directory that lies outside the sandbox
- A configured session-scoped PathResolver with automatic cleanup
"""
import sys
import uuid
from pathlib import Path
from typing import Generator

import pytest

# Add project root to path before importing project modules
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.core.path_resolver import (  # noqa: E402
    PathResolver,
    cleanup_path_resolver,
    configure_path_resolver,
)


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "unit: marks tests as unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers",
        "security: marks sandbox escape and containment tests"
    )


@pytest.fixture
def sandbox(tmp_path: Path) -> Path:
    """Canonical sandbox root directory."""
    root = tmp_path / "sandbox"
    root.mkdir()
    return root.resolve()


@pytest.fixture
def outside(tmp_path: Path) -> Path:
    """Canonical directory next to the sandbox, not covered by it."""
    other = tmp_path / "outside"
    other.mkdir()
    (other / "secret.txt").write_text("top secret")
    return other.resolve()


@pytest.fixture
def resolver(sandbox: Path) -> PathResolver:
    return PathResolver([sandbox], max_depth=10)


@pytest.fixture
def session_id(sandbox: Path) -> Generator[str, None, None]:
    """Session with a resolver rooted at the sandbox fixture."""
    sid = f"test-{uuid.uuid4().hex[:8]}"
    configure_path_resolver(sid, [sandbox], max_depth=10)
    yield sid
    cleanup_path_resolver(sid)
