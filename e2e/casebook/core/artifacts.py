from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from playwright.sync_api import Page

from .text import safe_name


@dataclass
class Artifacts:
    base_dir: Path
    unit_id: str
    trace: bool = False

    @property
    def out_dir(self) -> Path:
        d = self.base_dir / safe_name(self.unit_id)
        d.mkdir(parents=True, exist_ok=True)
        return d

    def path(self, filename: str) -> Path:
        return self.out_dir / filename

    def save_failure(self, page: Optional[Page], execution_id: str, browser: str) -> str:
        """
        Full-page screenshot for a failed unit. Returns the path, or "" when
        there is no page or the screenshot itself failed.
        """
        if page is None:
            return ""
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        p = self.path(f"failure-{safe_name(execution_id)}-{browser}-{ts}.png")
        try:
            page.screenshot(path=str(p), full_page=True)
        except Exception:
            return ""
        # HTML
        try:
            p.with_suffix(".html").write_text(page.content(), encoding="utf-8")
        except Exception:
            pass
        return str(p)

    def save_trace(self, page: Optional[Page], execution_id: str, browser: str) -> str:
        """
        Stop the context trace into trace-<id>-<browser>.zip. "" when tracing
        is off or could not be saved.
        """
        if page is None or not self.trace:
            return ""
        p = self.path(f"trace-{safe_name(execution_id)}-{browser}.zip")
        try:
            page.context.tracing.stop(path=str(p))
        except Exception:
            return ""
        return str(p)


def video_path(page: Optional[Page]) -> str:
    if page is None or page.video is None:
        return ""
    try:
        return str(page.video.path())
    except Exception:
        return ""
