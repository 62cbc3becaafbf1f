from typing import Optional

from srt_analyzer.config.analysis_config import AnalysisConfig, DEFAULT_ANALYSIS_CONFIG
from srt_analyzer.config.settings import settings
from srt_analyzer.domain.feedback.synthesizer import FeedbackSynthesizer
from srt_analyzer.domain.phase.segmenter import PhaseSegmenter
from srt_analyzer.domain.phase.support import SupportDetector
from srt_analyzer.domain.pose.extractor import (
    MediaPipePoseSource,
    PoseModelHandle,
    PoseSource,
    build_mediapipe_pose,
)
from srt_analyzer.domain.scoring.aggregator import ScoreAggregator
from srt_analyzer.domain.scoring.metrics import GeometricScorer
from srt_analyzer.domain.video.sampler import FrameSampler
from srt_analyzer.infrastructure.video.ffmpeg_client import FFmpegVideoDecoder
from srt_analyzer.schemas.video_dto import FrameFilters
from srt_analyzer.services.srt_analysis_service import SrtAnalysisService


def create_pose_model_handle() -> PoseModelHandle:
    """MediaPipe 모델 핸들 (실제 모델 생성은 첫 추론 시점까지 지연)"""
    return PoseModelHandle(
        lambda: build_mediapipe_pose(
            model_complexity=settings.POSE_MODEL_COMPLEXITY,
            min_detection_confidence=settings.POSE_MIN_DETECTION_CONFIDENCE,
        )
    )


def create_srt_analysis_service(
        pose_handle: Optional[PoseModelHandle] = None,
        pose_source: Optional[PoseSource] = None,
        config: AnalysisConfig = DEFAULT_ANALYSIS_CONFIG,
) -> SrtAnalysisService:
    """
    SrtAnalysisService 인스턴스 생성

    Args:
        pose_handle: 공유 모델 핸들 (앱 lifespan 이 소유)
        pose_source: 포즈 추정기 직접 주입 (지정 시 pose_handle 무시)
        config: 분석 상수

    Returns:
        SrtAnalysisService 인스턴스
    """
    if pose_source is None:
        if pose_handle is None:
            raise ValueError("pose_handle or pose_source is required")
        pose_source = MediaPipePoseSource(pose_handle)

    # Infrastructure 컴포넌트 초기화
    decoder = FFmpegVideoDecoder(timeout=settings.FFMPEG_TIMEOUT_SEC)
    filters = FrameFilters(
        scale_factor=settings.VIDEO_SCALE_FACTOR,
        denoise=settings.VIDEO_DENOISE,
        jpeg_quality=settings.VIDEO_JPEG_QUALITY,
    )

    # Domain 컴포넌트 초기화
    return SrtAnalysisService(
        frame_sampler=FrameSampler(decoder, config=config, filters=filters),
        pose_source=pose_source,
        segmenter=PhaseSegmenter(config),
        support_detector=SupportDetector(config),
        scorer=GeometricScorer(config),
        aggregator=ScoreAggregator(config),
        feedback_synthesizer=FeedbackSynthesizer(config),
        frames_root=settings.FRAMES_DIR,
        config=config,
        max_workers=settings.POSE_MAX_WORKERS,
    )
