"""
Pytest Configuration & Shared Fixtures

이 파일은 모든 테스트에서 재사용 가능한 fixture를 정의합니다.
"""
import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock

from srt_analyzer.config.analysis_config import DEFAULT_ANALYSIS_CONFIG, AnalysisConfig
from srt_analyzer.domain.feedback.synthesizer import FeedbackSynthesizer
from srt_analyzer.domain.phase.segmenter import PhaseSegmenter
from srt_analyzer.domain.phase.support import SupportDetector
from srt_analyzer.domain.scoring.aggregator import ScoreAggregator
from srt_analyzer.domain.scoring.metrics import GeometricScorer
from srt_analyzer.infrastructure.storage.report_store import ReportStore
from srt_analyzer.schemas.video_dto import SampledFrames
from srt_analyzer.services.srt_analysis_service import SrtAnalysisService
from tests.test_helpers import srt_sequence


# ========================================
# Config / Domain Fixtures
# ========================================

@pytest.fixture
def config() -> AnalysisConfig:
    return DEFAULT_ANALYSIS_CONFIG


@pytest.fixture
def segmenter(config):
    return PhaseSegmenter(config)


@pytest.fixture
def support_detector(config):
    return SupportDetector(config)


@pytest.fixture
def scorer(config):
    return GeometricScorer(config)


@pytest.fixture
def aggregator(config):
    return ScoreAggregator(config)


@pytest.fixture
def feedback_synthesizer(config):
    return FeedbackSynthesizer(config)


@pytest.fixture
def srt_poses():
    """30프레임 앉기→일어서기 포즈 시퀀스"""
    return srt_sequence(30)


# ========================================
# Mock Collaborators
# ========================================

@pytest.fixture
def frame_paths(tmp_path):
    return [str(tmp_path / f"frame-{i}.jpg") for i in range(1, 31)]


@pytest.fixture
def mock_frame_sampler(frame_paths):
    """FrameSampler Mock (30프레임 반환)"""
    sampler = Mock()
    sampler.sample.return_value = SampledFrames(
        frames=frame_paths,
        duration=6.0,
        fps=6.67,
        extracted_count=len(frame_paths),
    )
    return sampler


@pytest.fixture
def mock_pose_source(srt_poses):
    """PoseSource Mock (프레임 순번 → 합성 포즈)"""
    source = Mock()
    source.estimate.side_effect = lambda path, index=0: srt_poses[index]
    return source


@pytest.fixture
def frames_root(tmp_path):
    root = tmp_path / "frames"
    root.mkdir()
    return root


@pytest.fixture
def analysis_service(
    mock_frame_sampler,
    mock_pose_source,
    segmenter,
    support_detector,
    scorer,
    aggregator,
    feedback_synthesizer,
    frames_root,
    config,
):
    """테스트용 Service 인스턴스 (샘플러/포즈 추정만 Mock)"""
    return SrtAnalysisService(
        frame_sampler=mock_frame_sampler,
        pose_source=mock_pose_source,
        segmenter=segmenter,
        support_detector=support_detector,
        scorer=scorer,
        aggregator=aggregator,
        feedback_synthesizer=feedback_synthesizer,
        frames_root=frames_root,
        config=config,
        max_workers=4,
    )


@pytest.fixture
def report_store(tmp_path):
    return ReportStore(tmp_path / "reports")


# ========================================
# Application Fixtures
# ========================================

@pytest.fixture(scope="session")
def app():
    """FastAPI 애플리케이션 인스턴스"""
    from srt_analyzer.main import app as fastapi_app
    return fastapi_app


@pytest.fixture
def client(app, analysis_service, report_store, tmp_path):
    """
    FastAPI TestClient (API 테스트용)
    lifespan 은 실행하지 않고 의존성을 테스트 객체로 교체 (MediaPipe 불필요)
    """
    from srt_analyzer.common.dependencies import (
        get_analysis_service,
        get_file_service,
        get_report_store,
    )
    from srt_analyzer.services.file_service import FileService

    file_service = FileService(upload_dir=tmp_path / "uploads")
    app.dependency_overrides[get_analysis_service] = lambda: analysis_service
    app.dependency_overrides[get_report_store] = lambda: report_store
    app.dependency_overrides[get_file_service] = lambda: file_service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
