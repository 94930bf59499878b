from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml
from dotenv import load_dotenv

from .text import split_list

DEFAULT_BASE_URL = "http://www.automationpractice.pl"
RESULTS_FILENAME = "Test_Execution_Results.csv"


def _truthy(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    return str(v or "").strip().lower() in ("1", "true", "yes", "y", "on")


@dataclass(frozen=True)
class RunConfig:
    """
    Everything a run needs from its surroundings. Built once (from env or a
    YAML run file) and handed to the loader, materializer, recorder and page.
    """

    base_url: str = DEFAULT_BASE_URL
    catalog_dir: Path = Path("e2e/test-management")
    results_file: Path = Path("e2e/test-management/Test_Execution_Results.csv")
    artifact_dir: Path = Path("artifacts")
    browsers: Tuple[str, ...] = ("chromium",)
    environment: str = "staging"
    executed_by: str = "Automated Test"
    headless: bool = False
    channel: Optional[str] = None
    timeout_ms: int = 30000
    nav_timeout_ms: int = 45000
    action_timeout_ms: int = 10000
    lenient_steps: bool = False
    record_video: bool = False
    record_trace: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RunConfig":
        if environ is None:
            load_dotenv()
            environ = os.environ
        env = environ

        is_ci = _truthy(env.get("CI"))
        headless = _truthy(env.get("PW_HEADLESS")) if env.get("PW_HEADLESS") is not None else is_ci
        catalog_dir = Path(env.get("CATALOG_DIR", "e2e/test-management"))
        results = env.get("RESULTS_FILE")

        return cls(
            base_url=env.get("BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            catalog_dir=catalog_dir,
            results_file=Path(results) if results else catalog_dir / RESULTS_FILENAME,
            artifact_dir=Path(env.get("ARTIFACT_DIR", "artifacts")),
            browsers=split_list(env.get("BROWSERS", "chromium")) or ("chromium",),
            environment=env.get("ENV", "staging"),
            executed_by=env.get("EXECUTED_BY", "Automated Test"),
            headless=headless,
            channel=env.get("PW_CHANNEL") or None,
            timeout_ms=int(env.get("PW_TIMEOUT_MS", "30000")),
            nav_timeout_ms=int(env.get("PW_NAV_TIMEOUT_MS", "45000")),
            action_timeout_ms=int(env.get("PW_ACTION_TIMEOUT_MS", "10000")),
            lenient_steps=_truthy(env.get("E2E_LENIENT_STEPS")),
            record_video=_truthy(env.get("PW_RECORD_VIDEO")),
            record_trace=_truthy(env.get("PW_TRACE")),
        )

    @classmethod
    def from_yaml(cls, path: str | Path, environ: Optional[Mapping[str, str]] = None) -> "RunConfig":
        """
        run.yaml keys are the field names (base_url, browsers, ...).
        Keys left out fall back to the env-derived value.
        """
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"Run config not found: {p.resolve()}")

        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"{p.name} must be a mapping")

        return cls.from_env(environ).merged(raw)

    def merged(self, overrides: Dict[str, Any]) -> "RunConfig":
        known = set(self.__dataclass_fields__)
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ValueError(f"Unknown run config keys: {unknown}")

        kw: Dict[str, Any] = {}
        for k, v in overrides.items():
            if k in ("catalog_dir", "results_file", "artifact_dir"):
                kw[k] = Path(v)
            elif k == "browsers":
                kw[k] = tuple(v) if isinstance(v, (list, tuple)) else split_list(str(v))
            elif k in ("headless", "lenient_steps", "record_video", "record_trace"):
                kw[k] = _truthy(v)
            elif k.endswith("_ms"):
                kw[k] = int(v)
            elif k == "base_url":
                kw[k] = str(v).rstrip("/")
            else:
                kw[k] = v

        # results_file が catalog_dir から導出されていたなら追従させる
        derived = self.results_file == self.catalog_dir / RESULTS_FILENAME
        if "catalog_dir" in kw and "results_file" not in kw and derived:
            kw["results_file"] = kw["catalog_dir"] / RESULTS_FILENAME
        return replace(self, **kw)
