# e2e/casebook/flows/runner.py
from __future__ import annotations

import re
import time
from datetime import datetime
from typing import Optional

from playwright.sync_api import Page

from casebook.core.artifacts import Artifacts, video_path
from casebook.core.logs import get_logger
from casebook.core.types import ApplicationActions, ExecutableUnit, ExecutionRecord, Status
from casebook.flows.steps import StepInterpreter
from casebook.recording.recorder import ExecutionRecorder

log = get_logger(__name__)


def execution_id_for(unit: ExecutableUnit, now_ms: Optional[int] = None) -> str:
    ms = now_ms if now_ms is not None else time.time_ns() // 1_000_000
    value = re.sub(r"[^a-zA-Z0-9]", "_", unit.value.text)
    return f"EXEC_{ms}_{unit.case.id}_{value}_{unit.environment.browser}"


def run_unit(
    unit: ExecutableUnit,
    actions: ApplicationActions,
    recorder: ExecutionRecorder,
    artifacts: Artifacts,
    page: Optional[Page] = None,
) -> ExecutionRecord:
    """
    unit 1件を実行して結果を1行記録する。
    失敗時はスクショ（と trace）を残して FAIL を記録し、例外はそのまま投げ直す
    （pytest 側で FAIL 扱いにするため）。
    """
    started = datetime.now()
    execution_id = execution_id_for(unit)
    browser = unit.environment.browser
    ulog = log.bind(execution_id=execution_id, case_id=unit.case.id, browser=browser, value=unit.value.text)
    ulog.info("unit started", name=unit.display_name)

    base = ExecutionRecord(
        execution_id=execution_id,
        test_case_id=unit.case.id,
        browser=browser,
        environment=unit.environment.name,
        execution_date=started.strftime("%Y-%m-%d"),
        start_time=started.strftime("%H:%M:%S"),
    )

    try:
        StepInterpreter(actions).execute(unit.intents, unit.value, unit.expected_message)
    except Exception as e:
        screenshot = artifacts.save_failure(page, execution_id, browser)
        trace = artifacts.save_trace(page, execution_id, browser)
        ended = datetime.now()
        base.end_time = ended.strftime("%H:%M:%S")
        base.status = Status.FAIL.value
        base.error_message = str(e) or type(e).__name__
        base.screenshot_path = screenshot
        base.video_path = video_path(page)
        base.duration_seconds = str(round((ended - started).total_seconds()))
        base.notes = f"Failed on {browser} with data: {unit.value.text}"
        ulog.error("unit failed", error=base.error_message, screenshot=screenshot, trace=trace)
        recorder.record(base)
        raise

    ended = datetime.now()
    base.end_time = ended.strftime("%H:%M:%S")
    base.status = Status.PASS.value
    base.video_path = video_path(page)
    base.duration_seconds = str(round((ended - started).total_seconds()))
    base.notes = f"Successfully executed on {browser} with data: {unit.value.text}"
    ulog.info("unit passed", seconds=base.duration_seconds)
    return recorder.record(base)
