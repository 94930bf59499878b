from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Union

from casebook.core.types import Status
from casebook.recording.recorder import ExecutionRecorder


def generate_report(path: Union[str, Path]) -> Dict[str, Any]:
    results = ExecutionRecorder(path).read_records()

    total = len(results)
    passed = sum(1 for r in results if r.status == Status.PASS.value)
    failed = sum(1 for r in results if r.status == Status.FAIL.value)
    pass_rate = f"{passed / total * 100:.2f}" if total else "0"

    return {
        "summary": {
            "total": total,
            "passed": passed,
            "failed": failed,
            "pass_rate": f"{pass_rate}%",
        },
        "results": results,
        "generated_at": datetime.now().isoformat(),
    }
