"""
ffmpeg / ffprobe 래퍼 (비디오 디코딩 유틸)

- probe_duration: 원본 길이(초) 조회
- extract_frames: 지정 FPS + 필터로 JPEG 프레임 추출 → 번호순 정렬된 경로 리스트

디코딩/코덱 자체는 ffmpeg 에 위임한다. 모든 호출은 timeout 을 가진다.
"""
import json
import logging
import re
import shutil
import subprocess
from pathlib import Path
from typing import Optional

from srt_analyzer.schemas.video_dto import FrameExtractionRequest, FrameFilters

logger = logging.getLogger(__name__)

_FRAME_PATTERN = "frame-%d.jpg"
_FRAME_NUM = re.compile(r"(\d+)")


def build_video_filters(filters: FrameFilters) -> list[str]:
    """FrameFilters → ffmpeg -vf 체인"""
    vf = [f"scale=iw/{filters.scale_factor}:-2"]
    if filters.normalize:
        vf.append("normalize")
    if filters.denoise > 0:
        vf.append(f"hqdn3d={filters.denoise:g}")
    return vf


class FFmpegVideoDecoder:
    """ffmpeg CLI 기반 디코더"""

    def __init__(self, timeout: float = 60.0):
        self.timeout = timeout

    def probe_duration(self, path: str) -> Optional[float]:
        """
        ffprobe 로 길이(초) 조회. 길이를 알 수 없으면 None.
        파일이 없으면 FileNotFoundError, ffprobe 실패 시 RuntimeError.
        """
        if not Path(path).exists():
            raise FileNotFoundError(path)
        if shutil.which("ffprobe") is None:
            raise RuntimeError("ffprobe not found in PATH. Please install ffmpeg.")

        cmd = [
            "ffprobe", "-v", "error",
            "-print_format", "json",
            "-show_format",
            path,
        ]
        out = self._run(cmd, capture=True)
        try:
            info = json.loads(out or "{}")
        except json.JSONDecodeError as e:
            raise RuntimeError(f"ffprobe returned invalid json for {path}") from e

        raw = (info.get("format") or {}).get("duration")
        try:
            return float(raw) if raw is not None else None
        except (TypeError, ValueError):
            return None

    def extract_frames(self, request: FrameExtractionRequest) -> list[str]:
        """요청된 FPS/필터로 프레임을 추출하고 번호순으로 정렬된 경로를 반환"""
        if shutil.which("ffmpeg") is None:
            raise RuntimeError("ffmpeg not found in PATH. Please install ffmpeg.")

        out_dir = Path(request.output_dir)
        out_dir.mkdir(parents=True, exist_ok=True)

        cmd = [
            "ffmpeg", "-y", "-hide_banner", "-loglevel", "error",
            "-i", request.file_path,
            "-vf", ",".join([f"fps={request.target_fps:g}"] + build_video_filters(request.filters)),
            "-q:v", str(request.filters.jpeg_quality),
            "-pix_fmt", "yuvj420p",
            str(out_dir / _FRAME_PATTERN),
        ]
        self._run(cmd)
        return list_frame_files(out_dir)

    def _run(self, cmd: list[str], capture: bool = False) -> Optional[str]:
        logger.debug(f"[FFMPEG] {' '.join(cmd)}")
        try:
            proc = subprocess.run(
                cmd,
                check=True,
                capture_output=capture,
                text=capture,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise RuntimeError(f"{cmd[0]} timed out after {self.timeout}s") from e
        except subprocess.CalledProcessError as e:
            raise RuntimeError(f"{cmd[0]} failed: {' '.join(cmd)}") from e
        return proc.stdout if capture else None


def list_frame_files(frames_dir: Path) -> list[str]:
    """디렉토리 내 .jpg 프레임을 파일명 숫자 기준으로 정렬"""
    files = [p for p in Path(frames_dir).iterdir() if p.suffix.lower() == ".jpg"]

    def _num(p: Path) -> int:
        m = _FRAME_NUM.search(p.stem)
        return int(m.group(1)) if m else 0

    return [str(p) for p in sorted(files, key=_num)]
