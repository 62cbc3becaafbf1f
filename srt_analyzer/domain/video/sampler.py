"""
프레임 샘플링 Domain Logic
비디오 길이에 따라 추출 FPS 를 조절하고, 최대 프레임 수를 넘으면 균등 간격으로 줄인다.
"""
import logging
import math
from typing import Protocol, Optional

from srt_analyzer.common.errors import DecodeError
from srt_analyzer.config.analysis_config import AnalysisConfig, DEFAULT_ANALYSIS_CONFIG
from srt_analyzer.domain.angle.geometry import clamp
from srt_analyzer.schemas.video_dto import FrameExtractionRequest, FrameFilters, SampledFrames

logger = logging.getLogger(__name__)


class VideoDecoder(Protocol):
    """비디오 디코딩 유틸 계약 (FFmpegVideoDecoder 가 구현)"""

    def probe_duration(self, path: str) -> Optional[float]: ...

    def extract_frames(self, request: FrameExtractionRequest) -> list[str]: ...


class FrameSampler:
    """길이 적응형 프레임 샘플러"""

    def __init__(
        self,
        decoder: VideoDecoder,
        config: AnalysisConfig = DEFAULT_ANALYSIS_CONFIG,
        filters: Optional[FrameFilters] = None,
    ):
        self.decoder = decoder
        self.config = config
        self.filters = filters or FrameFilters()

    def sample(self, video_path: str, frames_dir: str) -> SampledFrames:
        """
        비디오 → 분석용 프레임 경로 리스트

        Process:
        1. 길이 조회 (실패 시 DecodeError)
        2. fps = clamp(MAX_FRAMES / duration, BASE_FPS, 10)
        3. 필터(축소/정규화/노이즈 제거) 적용해 추출
        4. MAX_FRAMES 초과 시 첫/마지막 프레임을 보존하며 다운샘플링

        최소 프레임 검사는 여기서 하지 않는다 (포즈 검출 이후 오케스트레이터에서).
        """
        try:
            duration = self.decoder.probe_duration(video_path)
        except (FileNotFoundError, RuntimeError) as e:
            raise DecodeError(f"Cannot open video: {video_path} ({e})") from e

        if duration is None or not math.isfinite(duration) or duration <= 0:
            raise DecodeError(f"Cannot determine video duration: {video_path}")

        fps = self.optimal_fps(duration)

        request = FrameExtractionRequest(
            file_path=video_path,
            output_dir=frames_dir,
            target_fps=fps,
            filters=self.filters,
        )
        try:
            extracted = self.decoder.extract_frames(request)
        except (FileNotFoundError, RuntimeError) as e:
            raise DecodeError(f"Frame extraction failed: {video_path} ({e})") from e

        frames = self.downsample(extracted)
        logger.info(
            f"[SAMPLER] duration={duration:.2f}s fps={fps:.2f} "
            f"extracted={len(extracted)} kept={len(frames)}"
        )

        return SampledFrames(
            frames=frames,
            duration=duration,
            fps=fps,
            extracted_count=len(extracted),
        )

    def optimal_fps(self, duration: float) -> float:
        """목표 프레임 수(MAX_FRAMES)에 맞춘 FPS, [BASE_FPS, max_fps] 범위로 제한"""
        return clamp(self.config.max_frames / duration, self.config.base_fps, self.config.max_fps)

    def downsample(self, frames: list[str]) -> list[str]:
        """
        MAX_FRAMES 초과 시 균등 stride 로 축소.
        첫 프레임은 무조건, 중간은 step 간격, 마지막 프레임은 명시적으로 추가.
        """
        max_frames = self.config.max_frames
        if len(frames) <= max_frames:
            return list(frames)

        step = math.ceil(len(frames) / max_frames)
        sampled = [frames[0]]
        sampled.extend(frames[i] for i in range(step, len(frames) - step, step))
        sampled.append(frames[-1])
        return sampled
