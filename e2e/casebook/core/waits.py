import time

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError


def visible_within(locator, timeout_ms: int) -> bool:
    try:
        locator.first.wait_for(state="visible", timeout=timeout_ms)
        return True
    except PlaywrightTimeoutError:
        return False


def wait_until_count(locator, minimum: int = 1, timeout_sec: float = 10.0, interval_sec: float = 0.2) -> int:
    end = time.time() + timeout_sec
    n = locator.count()
    while n < minimum and time.time() < end:
        time.sleep(interval_sec)
        n = locator.count()
    return n
