"""
프레임별 기하 지표 계산 Domain Logic

각 지표 함수는 PoseData 1개를 받아 MetricScore(angle, score, available)를 반환한다.
- 오른쪽 랜드마크를 기준 측으로 사용
- 필요한 랜드마크가 없거나 신뢰도 미달이면 MetricUnavailable → 기본 점수로 대체
  (대부분 0, hip drive 는 신호 없음 기본값 0.3)
"""
import logging
import math

from srt_analyzer.common.errors import MetricUnavailable
from srt_analyzer.config.analysis_config import AnalysisConfig, DEFAULT_ANALYSIS_CONFIG
from srt_analyzer.domain.angle.geometry import angle, clamp
from srt_analyzer.schemas.metric_dto import MetricScore, RisingFrameMetrics, SittingFrameMetrics
from srt_analyzer.schemas.pose_dto import Keypoint, Landmark, PoseData

logger = logging.getLogger(__name__)

SHOULDER = Landmark.right_shoulder
HIP = Landmark.right_hip
KNEE = Landmark.right_knee
ANKLE = Landmark.right_ankle


class GeometricScorer:
    """관절 각도 기반 지표 계산기"""

    def __init__(self, config: AnalysisConfig = DEFAULT_ANALYSIS_CONFIG):
        self.config = config

    # ---------- 페이즈 단위 ----------
    def score_sitting(self, poses: list[PoseData]) -> list[SittingFrameMetrics]:
        return [
            SittingFrameMetrics(
                frame_index=pose.frame_index,
                knee_flexion=self.knee_flexion(pose),
                hip_control=self.hip_control(pose),
                spinal_alignment=self.spinal_alignment(pose),
            )
            for pose in poses
        ]

    def score_rising(self, poses: list[PoseData]) -> list[RisingFrameMetrics]:
        return [
            RisingFrameMetrics(
                frame_index=pose.frame_index,
                knee_extension=self.knee_extension(pose),
                hip_drive=self.hip_drive(pose),
                stability=self.stability(pose),
            )
            for pose in poses
        ]

    # ---------- 프레임 단위 지표 ----------
    def knee_flexion(self, pose: PoseData) -> MetricScore:
        """엉덩이-무릎-발목 각도. 90도 초과면 만점, 아니면 angle/90"""
        try:
            hip, knee, ankle = self._require(pose, "knee_flexion", HIP, KNEE, ANKLE)
        except MetricUnavailable as e:
            return self._unavailable(e)

        full = self.config.knee_flexion_full_angle
        deg = angle(hip, knee, ankle)
        return MetricScore(angle=deg, score=1.0 if deg > full else deg / full)

    def knee_extension(self, pose: PoseData) -> MetricScore:
        """엉덩이-무릎-발목 각도. 160도 초과면 만점 (무릎 펴짐 정도)"""
        try:
            hip, knee, ankle = self._require(pose, "knee_extension", HIP, KNEE, ANKLE)
        except MetricUnavailable as e:
            return self._unavailable(e)

        full = self.config.knee_extension_full_angle
        deg = angle(hip, knee, ankle)
        return MetricScore(angle=deg, score=1.0 if deg > full else deg / full)

    def spinal_alignment(self, pose: PoseData) -> MetricScore:
        """어깨-엉덩이-무릎 각도. |180 - angle| / 180"""
        try:
            shoulder, hip, knee = self._require(pose, "spinal_alignment", SHOULDER, HIP, KNEE)
        except MetricUnavailable as e:
            return self._unavailable(e)

        deg = angle(shoulder, hip, knee)
        return MetricScore(angle=deg, score=clamp(abs(180.0 - deg) / 180.0, 0.0, 1.0))

    def hip_control(self, pose: PoseData) -> MetricScore:
        """어깨-엉덩이-무릎 각도. 30도 미만 만점, 이후 (90 - angle) / 60 으로 감소"""
        try:
            shoulder, hip, knee = self._require(pose, "hip_control", SHOULDER, HIP, KNEE)
        except MetricUnavailable as e:
            return self._unavailable(e)

        cfg = self.config
        deg = angle(shoulder, hip, knee)
        raw = 1.0 if deg < cfg.hip_control_upright_angle else (cfg.hip_control_limit_angle - deg) / cfg.hip_control_range
        return MetricScore(angle=deg, score=clamp(raw, 0.0, 1.0))

    def hip_drive(self, pose: PoseData) -> MetricScore:
        """
        일어설 때 엉덩이 추진력.

        progress    = clamp((ankleY - hipY) / (ankleY - shoulderY), 0, 1)
        misalign    = |hipX - ankleX| / width
        trunk       = angle(shoulder, hip, knee)
        score       = 0.5*progress + 0.3*(trunk/180) + 0.2*(1 - misalign)

        랜드마크 부족 / 전체 높이 0 이하 / 비유한 값 → 기본값 0.3 (성능 0점과 구분)
        """
        default = self.config.default_metric_score
        try:
            shoulder, hip, knee, ankle = self._require(pose, "hip_drive", SHOULDER, HIP, KNEE, ANKLE)
        except MetricUnavailable as e:
            return self._unavailable(e, score=default)

        total_height = ankle.y - shoulder.y
        if total_height <= 0:
            logger.debug(f"[METRIC] hip_drive: non-positive body height ({total_height:.2f})")
            return MetricScore(angle=0.0, score=default, available=False)

        weights = self.config.hip_drive
        progress = clamp((ankle.y - hip.y) / total_height, 0.0, 1.0)
        misalignment = abs(hip.x - ankle.x) / pose.width
        trunk = angle(shoulder, hip, knee)
        angle_score = clamp(trunk / 180.0, 0.0, 1.0)

        score = (
            progress * weights.progress
            + angle_score * weights.trunk_angle
            + (1.0 - misalignment) * weights.alignment
        )
        if not math.isfinite(score) or score < 0.0 or score > 1.0:
            return MetricScore(angle=trunk, score=default)
        return MetricScore(angle=trunk, score=score)

    def stability(self, pose: PoseData) -> MetricScore:
        """어깨-엉덩이-발목 수평 편차(px). max(0, 1 - deviation/100)"""
        try:
            shoulder, hip, ankle = self._require(pose, "stability", SHOULDER, HIP, ANKLE)
        except MetricUnavailable as e:
            return self._unavailable(e)

        deviation = abs(shoulder.x - hip.x) + abs(hip.x - ankle.x)
        score = max(0.0, 1.0 - deviation / self.config.stability_deviation_scale)
        return MetricScore(angle=deviation, score=min(1.0, score))

    # ---------- 내부 유틸 ----------
    def _require(self, pose: PoseData, metric: str, *landmarks: Landmark) -> list[Keypoint]:
        """필요한 keypoint 를 모두 꺼내거나 MetricUnavailable"""
        threshold = self.config.confidence_threshold
        found = []
        missing = []
        for landmark in landmarks:
            kp = pose.confident(landmark, threshold)
            if kp is None:
                missing.append(landmark.value)
            else:
                found.append(kp)
        if missing:
            raise MetricUnavailable(metric, missing)
        return found

    @staticmethod
    def _unavailable(err: MetricUnavailable, score: float = 0.0) -> MetricScore:
        logger.debug(f"[METRIC] {err}")
        return MetricScore(angle=0.0, score=score, available=False)
