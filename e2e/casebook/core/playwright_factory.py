from __future__ import annotations

from dataclasses import dataclass

from playwright.sync_api import Browser, BrowserContext, Playwright

from .config import RunConfig

BROWSER_TYPES = ("chromium", "firefox", "webkit")


@dataclass
class PWContextBundle:
    browser: Browser
    context: BrowserContext


def launch_browser(pw: Playwright, browser_name: str, config: RunConfig) -> Browser:
    if browser_name not in BROWSER_TYPES:
        raise ValueError(f"Unknown browser '{browser_name}', expected one of {BROWSER_TYPES}")

    launch_kwargs = {"headless": config.headless}
    # channel は chromium 系のみ（"chrome", "msedge" 等）
    if config.channel and browser_name == "chromium":
        launch_kwargs["channel"] = config.channel

    return getattr(pw, browser_name).launch(**launch_kwargs)


def create_context(browser: Browser, config: RunConfig) -> PWContextBundle:
    """
    unit ごとに新規 context。unit 間で状態（cookie/カート）を共有しない。
    """
    context_kwargs = {
        "base_url": config.base_url,
        "ignore_https_errors": True,
        "viewport": {"width": 1920, "height": 1080},
    }
    if config.record_video:
        context_kwargs["record_video_dir"] = str(config.artifact_dir / "videos")

    context = browser.new_context(**context_kwargs)

    context.set_default_timeout(config.timeout_ms)
    context.set_default_navigation_timeout(config.nav_timeout_ms)

    if config.record_trace:
        # 保存は失敗時だけ（Artifacts.save_trace）
        context.tracing.start(screenshots=True, snapshots=True, sources=True)

    return PWContextBundle(browser=browser, context=context)


def close_context(bundle: PWContextBundle) -> None:
    try:
        bundle.context.tracing.stop()
    except Exception:
        pass
    try:
        bundle.context.close()
    except Exception:
        pass
