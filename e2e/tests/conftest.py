import os

import pytest
from playwright.sync_api import sync_playwright

from casebook.core.config import RunConfig
from casebook.core.logs import configure_logging
from casebook.core.playwright_factory import close_context, create_context, launch_browser
from casebook.recording.recorder import ExecutionRecorder


@pytest.fixture(scope="session", autouse=True)
def _logging():
    configure_logging(os.getenv("LOG_LEVEL", "INFO"), json_format=bool(os.getenv("LOG_JSON")))


@pytest.fixture(scope="session")
def run_config() -> RunConfig:
    return RunConfig.from_env()


@pytest.fixture(scope="session")
def pw():
    with sync_playwright() as p:
        yield p


@pytest.fixture(scope="session")
def browsers(pw, run_config):
    """
    browser 名 -> Browser。使うものだけ遅延起動する。
    """
    launched = {}

    def _get(name: str):
        if name not in launched:
            launched[name] = launch_browser(pw, name, run_config)
        return launched[name]

    yield _get

    for b in launched.values():
        try:
            b.close()
        except Exception:
            pass


@pytest.fixture(scope="session")
def recorder(run_config) -> ExecutionRecorder:
    return ExecutionRecorder(run_config.results_file, run_config)


@pytest.fixture(scope="session")
def artifacts_base_dir(run_config):
    base = run_config.artifact_dir
    base.mkdir(parents=True, exist_ok=True)
    return base


@pytest.fixture()
def unit_page(request, browsers, run_config):
    """
    unit ごとに新しい context + page（unit 間で cookie/カートを共有しない）
    """
    unit = request.node.callspec.params["unit"]
    bundle = create_context(browsers(unit.environment.browser), run_config)
    page = bundle.context.new_page()
    yield page
    close_context(bundle)
