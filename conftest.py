import os
import sys
from pathlib import Path
from typing import Callable, List, Optional

import pytest

# Ensure repo-local imports (e.g., `import enginebench`) resolve without extra setup.
src_dir = os.path.abspath(os.path.dirname(__file__))
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

FAKE_ENGINE = Path(src_dir) / "tests" / "fake_engine.py"


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "-E",
        "--external-engine",
        action="store",
        default=None,
        dest="external_engine",
        help="Path to a real UCI engine; enables tests marked @pytest.mark.external_engine",
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    if not config.getoption("external_engine"):
        skip_external = pytest.mark.skip(
            reason="use -E/--external-engine PATH to run against a real engine"
        )
        for item in items:
            if "external_engine" in item.keywords:
                item.add_marker(skip_external)


@pytest.fixture
def external_engine(request: pytest.FixtureRequest) -> str:
    return request.config.getoption("external_engine")


@pytest.fixture
def fake_engine(tmp_path: Path) -> Callable[..., List[str]]:
    """Return a factory building the command line for the scripted test engine."""

    def build(mode: str = "normal", log: Optional[Path] = None) -> List[str]:
        command = [sys.executable, str(FAKE_ENGINE), mode]
        if log is not None:
            command.append(str(log))
        return command

    return build
