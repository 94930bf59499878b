from __future__ import annotations

import time

from playwright.sync_api import Page, TimeoutError as PlaywrightTimeoutError

from .errors import ActionUnavailable


def goto(page: Page, base_url: str, path: str = "") -> None:
    url = path if path.startswith("http") else f"{base_url}{path}"
    page.goto(url)


def safe_click(locator, timeout_ms: int = 10000, retries: int = 3, name: str = "click") -> None:
    """
    clickが詰まる場合に備えて押し切る。
    wait -> scroll -> click を retries 回、最後に force。
    """
    try:
        locator.first.wait_for(state="visible", timeout=timeout_ms)
    except PlaywrightTimeoutError as e:
        raise ActionUnavailable(name, timeout_ms) from e

    try:
        locator.first.scroll_into_view_if_needed(timeout=timeout_ms)
    except Exception:
        pass

    last_err: Exception | None = None
    for i in range(retries):
        try:
            locator.first.click(timeout=timeout_ms)
            return
        except Exception as e:
            last_err = e
            time.sleep(0.5 * (i + 1))

    try:
        locator.first.click(timeout=timeout_ms, force=True)
        return
    except Exception as e:
        raise ActionUnavailable(name, timeout_ms) from (last_err or e)


def safe_fill(locator, text: str, timeout_ms: int = 10000, retries: int = 3, name: str = "fill") -> None:
    """
    fill して inputValue で確認。合わなければ retries 回やり直す。
    """
    try:
        locator.first.wait_for(state="visible", timeout=timeout_ms)
    except PlaywrightTimeoutError as e:
        raise ActionUnavailable(name, timeout_ms) from e

    got = None
    for _ in range(retries):
        try:
            locator.first.fill("", timeout=timeout_ms)
            locator.first.fill(text, timeout=timeout_ms)
            got = locator.first.input_value(timeout=timeout_ms)
            if got == text:
                return
        except PlaywrightTimeoutError:
            pass
        time.sleep(0.1)

    raise ActionUnavailable(f"{name} (expected {text!r}, got {got!r})", timeout_ms)
