"""
SRT 분석 Service Layer
Domain 컴포넌트들을 조합하여 전체 분석 파이프라인 실행
"""
import logging
import os
import shutil
import tempfile
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Union

from srt_analyzer.common.errors import InsufficientFramesError
from srt_analyzer.config.analysis_config import AnalysisConfig, DEFAULT_ANALYSIS_CONFIG
from srt_analyzer.domain.feedback.synthesizer import FeedbackSynthesizer
from srt_analyzer.domain.phase.segmenter import PhaseSegmenter
from srt_analyzer.domain.phase.support import SupportDetector
from srt_analyzer.domain.pose.extractor import PoseSource
from srt_analyzer.domain.scoring.aggregator import ScoreAggregator
from srt_analyzer.domain.scoring.metrics import GeometricScorer
from srt_analyzer.domain.video.sampler import FrameSampler
from srt_analyzer.schemas.pose_dto import PoseData
from srt_analyzer.schemas.report_dto import PerformanceStats, ScoreReport

logger = logging.getLogger(__name__)
if not logging.getLogger().handlers:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


class SrtAnalysisService:
    """
    SRT 분석 메인 서비스

    책임:
    - 전체 분석 파이프라인 오케스트레이션 (순서를 아는 유일한 컴포넌트)
    - 프레임 단위 포즈 추정 병렬화 + join barrier
    - 실행 시간 측정 / 임시 프레임 정리

    실패:
    - DecodeError, InsufficientFramesError (AnalysisError) 만 의도적으로 발생
    - 그 밖의 협력자 예외는 삼키지 않고 그대로 전파
    """

    def __init__(
        self,
        frame_sampler: FrameSampler,
        pose_source: PoseSource,
        segmenter: PhaseSegmenter,
        support_detector: SupportDetector,
        scorer: GeometricScorer,
        aggregator: ScoreAggregator,
        feedback_synthesizer: FeedbackSynthesizer,
        frames_root: Union[str, Path],
        config: AnalysisConfig = DEFAULT_ANALYSIS_CONFIG,
        max_workers: int = 4,
    ):
        """
        Args:
            frame_sampler: 프레임 샘플러
            pose_source: 포즈 추정기 (외부 모델)
            segmenter: 페이즈 분할기
            support_detector: 지지 감지기
            scorer: 프레임별 지표 계산기
            aggregator: 점수 집계기
            feedback_synthesizer: 피드백 생성기
            frames_root: 실행별 임시 프레임 디렉토리의 상위 경로
            config: 분석 상수
            max_workers: 포즈 추정 동시 실행 상한
        """
        self.frame_sampler = frame_sampler
        self.pose_source = pose_source
        self.segmenter = segmenter
        self.support_detector = support_detector
        self.scorer = scorer
        self.aggregator = aggregator
        self.feedback_synthesizer = feedback_synthesizer
        self.frames_root = Path(frames_root)
        self.config = config
        self.max_workers = max(1, max_workers)

    def analyze(self, video_path: str) -> ScoreReport:
        """
        SRT 분석 파이프라인 실행

        Process:
        1. 실행별 임시 프레임 디렉토리 생성
        2. 프레임 샘플링
        3. 포즈 추정 (병렬) → join barrier
        4. 최소 포즈 수 검사
        5. 페이즈 분할 → 지표 → 지지 → 집계 → 피드백
        6. 성능 예산 초과 시 경고
        7. 임시 프레임 정리 (항상)

        Raises:
            DecodeError: 비디오를 열 수 없음
            InsufficientFramesError: 사용 가능한 포즈 부족
        """
        started = time.perf_counter()
        self.frames_root.mkdir(parents=True, exist_ok=True)
        run_dir = tempfile.mkdtemp(prefix="srt_", dir=str(self.frames_root))
        logger.info(f"[SRT] analysis started: {video_path}")

        try:
            # ========== Step 1: 프레임 샘플링 ==========
            sampled = self.frame_sampler.sample(video_path, run_dir)

            # ========== Step 2: 포즈 추정 ==========
            poses, frame_times = self._estimate_poses(sampled.frames)

            required = self.config.min_total_poses
            if len(poses) < required:
                raise InsufficientFramesError(found=len(poses), required=required)

            # ========== Step 3: 페이즈 분할 ==========
            segmentation = self.segmenter.segment(poses)

            # ========== Step 4: 프레임별 지표 ==========
            sitting_metrics = self.scorer.score_sitting(segmentation.sitting)
            rising_metrics = self.scorer.score_rising(segmentation.rising)

            # ========== Step 5: 지지 감지 ==========
            supports = self.support_detector.summarize(poses, segmentation)

            # ========== Step 6: 집계 + 피드백 ==========
            scores = self.aggregator.aggregate(sitting_metrics, rising_metrics, supports)
            feedback = self.feedback_synthesizer.synthesize(scores, supports)

            # ========== Step 7: 성능 ==========
            total_ms = (time.perf_counter() - started) * 1000.0
            avg_frame_ms = sum(frame_times) / len(frame_times) if frame_times else 0.0
            self._check_budgets(avg_frame_ms, total_ms)

            report = ScoreReport(
                video_path=video_path,
                sit_score=scores.sit_score,
                rise_score=scores.rise_score,
                total_score=scores.total_score,
                postural_control=scores.components.postural_control,
                balance=scores.components.balance,
                coordination=scores.components.coordination,
                sitting_phase=scores.sitting_phase,
                rising_phase=scores.rising_phase,
                feedback=feedback,
                support_points_used=supports.per_frame,
                risk_level=scores.risk_level,
                key_frames=[os.path.basename(f) for f in sampled.frames],
                performance=PerformanceStats(
                    frame_count=len(sampled.frames),
                    pose_count=len(poses),
                    total_time_ms=round(total_ms, 2),
                    average_frame_time_ms=round(avg_frame_ms, 2),
                    transition_frame=segmentation.transition_index,
                ),
            )
            logger.info(
                f"[SRT] analysis completed: sit={report.sit_score} rise={report.rise_score} "
                f"total={report.total_score} risk={report.risk_level}"
            )
            return report

        finally:
            self._cleanup(run_dir)

    def _estimate_poses(self, frames: list[str]) -> tuple[list[PoseData], list[float]]:
        """
        프레임별 포즈 추정 (bounded parallel).
        executor.map 은 입력 순서대로 결과를 돌려주며, 전부 소비한 뒤에야 반환 (join barrier).
        검출 실패(None) 프레임은 순서를 유지한 채 제외.
        """
        if not frames:
            return [], []

        def _timed(item: tuple[int, str]) -> tuple[Optional[PoseData], float]:
            index, path = item
            t0 = time.perf_counter()
            pose = self.pose_source.estimate(path, index)
            return pose, (time.perf_counter() - t0) * 1000.0

        workers = min(self.max_workers, len(frames))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pose") as executor:
            results = list(executor.map(_timed, enumerate(frames)))

        poses = [pose for pose, _ in results if pose is not None]
        frame_times = [ms for _, ms in results]
        logger.info(f"[POSE] frames={len(frames)} detected={len(poses)} workers={workers}")
        return poses, frame_times

    def _check_budgets(self, avg_frame_ms: float, total_ms: float) -> None:
        """성능 예산 초과는 경고만 (실패 아님)"""
        if avg_frame_ms > self.config.frame_budget_ms:
            logger.warning(
                f"[PERF] average frame time {avg_frame_ms:.1f}ms exceeds "
                f"{self.config.frame_budget_ms:.0f}ms budget"
            )
        if total_ms > self.config.run_budget_ms:
            logger.warning(
                f"[PERF] total analysis time {total_ms:.1f}ms exceeds "
                f"{self.config.run_budget_ms:.0f}ms budget"
            )

    @staticmethod
    def _cleanup(run_dir: str) -> None:
        try:
            shutil.rmtree(run_dir)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"[CLEANUP] failed to remove {run_dir}: {e}")
