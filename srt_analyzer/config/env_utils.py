import os
from pathlib import Path


def env_bool(name: str, default: bool = False) -> bool:
    """환경 변수에서 bool 타입을 안전하게 읽는다."""
    v = os.getenv(name)
    if v is None:
        return default
    return str(v).strip().lower() in ("1", "true", "yes", "y", "on")


def env_int(name: str, default: int) -> int:
    """환경 변수에서 int 값을 읽는다. 파싱 실패 시 default."""
    v = os.getenv(name)
    if v is None or not str(v).strip():
        return default
    try:
        return int(str(v).strip())
    except ValueError:
        return default


def env_float(name: str, default: float) -> float:
    """환경 변수에서 float 값을 읽는다. 파싱 실패 시 default."""
    v = os.getenv(name)
    if v is None or not str(v).strip():
        return default
    try:
        return float(str(v).strip())
    except ValueError:
        return default


def env_path(name: str, default: Path) -> Path:
    """환경 변수에서 파일 경로를 Path 객체로 변환."""
    v = os.getenv(name)
    return Path(v) if v else default
