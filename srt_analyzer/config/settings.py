from __future__ import annotations
import os
from pathlib import Path

from dotenv import load_dotenv

from srt_analyzer.config.env_utils import env_bool, env_float, env_int, env_path


# ─────────────────────────────────────────────────────────
# Project root 탐색
#   - .git / pyproject.toml 중 하나가 보이는 최상단을 루트로 간주
#   - 실패 시 BASE_DIR 환경변수 사용
# ─────────────────────────────────────────────────────────
def find_project_root() -> Path:
    cur = Path(__file__).resolve()
    for parent in cur.parents:
        if any((parent / m).exists() for m in (".git", "pyproject.toml")):
            return parent
    env_root = os.getenv("BASE_DIR")
    if env_root:
        return Path(env_root).resolve()
    # 설치된 패키지(site-packages)에서 실행되는 경우 CWD 기준
    return Path.cwd().resolve()


ROOT: Path = find_project_root()

# ─────────────────────────────────────────────────────────
# .env 로딩
#   - ENV_FILE 지정 시 우선
#   - 없으면 ROOT/.env.<ENV> → 없으면 ROOT/.env
# ─────────────────────────────────────────────────────────
_DEFAULT_ENV = os.getenv("ENV", "test")
_env_file_candidate = ROOT / f".env.{_DEFAULT_ENV}"
_ENV_FILE = (
    Path(os.getenv("ENV_FILE")).resolve()
    if os.getenv("ENV_FILE")
    else (_env_file_candidate if _env_file_candidate.exists() else (ROOT / ".env"))
)
load_dotenv(dotenv_path=_ENV_FILE, override=False)


def _default_pose_workers() -> int:
    # 프레임 단위 포즈 추정 동시성 상한 (코어 수 기준, 최대 8)
    return max(1, min(8, os.cpu_count() or 1))


class Settings:
    # ── App / Runtime ─────────────────────────────────────
    ENV: str = os.getenv("ENV", _DEFAULT_ENV)
    APP_VERSION: str = os.getenv("APP_VERSION", "1.0.0")
    FASTAPI_PORT: int = env_int("FASTAPI_PORT", 8000)
    DEBUG_MODE: bool = env_bool("DEBUG_MODE", False)

    # ── Base Paths ────────────────────────────────────────
    ROOT: Path = ROOT
    DATA_DIR: Path = env_path("DATA_DIR", ROOT / "data")

    # ── Standard data subdirs (모두 DATA_DIR 기준) ────────
    FRAMES_DIR: Path = env_path("FRAMES_DIR", DATA_DIR / "frames")
    REPORTS_DIR: Path = env_path("REPORTS_DIR", DATA_DIR / "reports")
    LOG_DIR: Path = DATA_DIR / "logs"

    # 업로드(외부 입력) 기본 폴더
    UPLOADS_DIR: Path = env_path("UPLOADS_DIR", ROOT / "uploads")

    # ── Video decoding (ffmpeg) ───────────────────────────
    FFMPEG_TIMEOUT_SEC: float = env_float("FFMPEG_TIMEOUT_SEC", 60.0)
    VIDEO_SCALE_FACTOR: int = env_int("VIDEO_SCALE_FACTOR", 2)
    VIDEO_DENOISE: float = env_float("VIDEO_DENOISE", 1.5)
    VIDEO_JPEG_QUALITY: int = env_int("VIDEO_JPEG_QUALITY", 3)

    # ── Pose estimation ───────────────────────────────────
    POSE_MAX_WORKERS: int = env_int("POSE_MAX_WORKERS", _default_pose_workers())
    POSE_MODEL_COMPLEXITY: int = env_int("POSE_MODEL_COMPLEXITY", 1)
    POSE_MIN_DETECTION_CONFIDENCE: float = env_float("POSE_MIN_DETECTION_CONFIDENCE", 0.3)

    # ── API ───────────────────────────────────────────────
    # 동시에 실행 가능한 분석 작업 수 (ffmpeg + 포즈 추정 부하 제한)
    ANALYSIS_CONCURRENCY: int = env_int("ANALYSIS_CONCURRENCY", 2)
    # 업로드 검증 (크기 상한 / 허용 MIME)
    MAX_UPLOAD_BYTES: int = env_int("MAX_UPLOAD_BYTES", 50 * 1024 * 1024)
    UPLOAD_CHUNK_BYTES: int = env_int("UPLOAD_CHUNK_BYTES", 1024 * 1024)
    ALLOWED_VIDEO_TYPES: tuple = ("video/mp4", "video/webm", "video/quicktime")

    def __init__(self) -> None:
        # 자주 쓰는 디렉토리 존재 보장
        dirs = [
            self.UPLOADS_DIR,
            self.FRAMES_DIR,
            self.REPORTS_DIR,
            self.LOG_DIR,
        ]
        for d in dirs:
            Path(d).mkdir(parents=True, exist_ok=True)


# 전역 싱글톤처럼 사용
settings = Settings()
