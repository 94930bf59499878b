import re


def normalize_text(s: str) -> str:
    return (s or "").strip().replace("\u3000", " ").replace("\r\n", " ").replace("\r", " ").replace("\n", " ")


def split_list(s: str, sep: str = ",") -> tuple:
    return tuple(t.strip() for t in (s or "").split(sep) if t.strip())


def safe_name(s: str, limit: int = 120) -> str:
    s = re.sub(r"[^a-zA-Z0-9_.-]+", "_", s or "")
    s = s.strip("_")
    return s[:limit] if s else "unit"
