"""
지지(support) 감지 Domain Logic
손/무릎으로 바닥을 짚었는지 프레임별로 판단하고, 페이즈별 감점을 계산한다.
"""
from srt_analyzer.config.analysis_config import AnalysisConfig, DEFAULT_ANALYSIS_CONFIG
from srt_analyzer.schemas.phase_dto import (
    PhaseSegmentation,
    SupportSummary,
    SupportType,
    ordered_supports,
)
from srt_analyzer.schemas.pose_dto import Landmark, PoseData

_WRISTS = (Landmark.left_wrist, Landmark.right_wrist)
_KNEES = (Landmark.left_knee, Landmark.right_knee)


class SupportDetector:
    """손/무릎 지지 감지기"""

    def __init__(self, config: AnalysisConfig = DEFAULT_ANALYSIS_CONFIG):
        self.config = config

    def detect(self, pose: PoseData) -> list[SupportType]:
        """
        단일 프레임 지지 감지

        - 지면 기준선: 신뢰도 임계값을 넘는 keypoint 중 가장 아래(y 최대)
        - HAND: 손목 y > 지면 - 0.3 * 프레임 높이
        - KNEE: 무릎 y > 지면 - 0.2 * 프레임 높이
        """
        threshold = self.config.confidence_threshold
        confident = pose.confident_keypoints(threshold)
        if not confident:
            return []

        ground = max(kp.y for kp in confident)
        hand_line = ground - pose.height * self.config.hand_support_ratio
        knee_line = ground - pose.height * self.config.knee_support_ratio

        supports = []
        if self._any_below(pose, _WRISTS, hand_line):
            supports.append(SupportType.HAND)
        if self._any_below(pose, _KNEES, knee_line):
            supports.append(SupportType.KNEE)
        return supports

    def summarize(self, poses: list[PoseData], segmentation: PhaseSegmentation) -> SupportSummary:
        """
        전체 프레임 감지 + 페이즈별 합집합/감점.
        페이즈 구간은 segmentation 과 동일한 프레임 범위를 사용한다.
        """
        per_frame = [self.detect(pose) for pose in poses]

        sitting_end = len(segmentation.sitting)
        rising_start = len(poses) - len(segmentation.rising)

        sitting = self._union(per_frame[:sitting_end])
        rising = self._union(per_frame[rising_start:])

        return SupportSummary(
            per_frame=per_frame,
            sitting=sitting,
            rising=rising,
            sitting_penalty=self.penalty(sitting),
            rising_penalty=self.penalty(rising),
        )

    def penalty(self, supports) -> float:
        """HAND 1.0 + KNEE 0.5 (페이즈당 최대 1.5)"""
        total = 0.0
        if SupportType.HAND in supports:
            total += self.config.hand_penalty
        if SupportType.KNEE in supports:
            total += self.config.knee_penalty
        return total

    def _any_below(self, pose: PoseData, landmarks, line: float) -> bool:
        threshold = self.config.confidence_threshold
        for landmark in landmarks:
            kp = pose.confident(landmark, threshold)
            if kp is not None and kp.y > line:
                return True
        return False

    @staticmethod
    def _union(frames: list[list[SupportType]]) -> list[SupportType]:
        seen = set()
        for supports in frames:
            seen.update(supports)
        return ordered_supports(seen)
