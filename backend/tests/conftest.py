import asyncio
import inspect
import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from carteira.config import AppSettings  # noqa: E402
from carteira.core.reporting import RecordingReporter  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers used in the suite."""

    config.addinivalue_line("markers", "asyncio: mark test as running in an asyncio event loop")


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute async test functions without requiring pytest-asyncio."""

    test_function = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_function):
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            arguments = {name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames}
            loop.run_until_complete(test_function(**arguments))
        finally:
            asyncio.set_event_loop(None)
            loop.close()
        return True
    return None


@pytest.fixture()
def workdir(tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "downloads"
    path.mkdir()
    return path


@pytest.fixture()
def settings(workdir: pathlib.Path) -> AppSettings:
    return AppSettings(
        database_url="sqlite+aiosqlite://",
        cvm_base_url="https://cvm.test/DADOS",
        tmp_dir=str(workdir),
    )


@pytest.fixture()
def reporter() -> RecordingReporter:
    return RecordingReporter()
