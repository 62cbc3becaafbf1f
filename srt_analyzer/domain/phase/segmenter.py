"""
페이즈 분할 Domain Logic
엉덩이(hip) Y좌표 궤적으로 앉기 → 일어서기 전환점을 찾는다.
"""
import logging

import numpy as np

from srt_analyzer.config.analysis_config import AnalysisConfig, DEFAULT_ANALYSIS_CONFIG
from srt_analyzer.schemas.phase_dto import PhaseSegmentation
from srt_analyzer.schemas.pose_dto import Landmark, PoseData

logger = logging.getLogger(__name__)


class PhaseSegmenter:
    """앉기/일어서기 2단계 페이즈 분할기"""

    def __init__(self, config: AnalysisConfig = DEFAULT_ANALYSIS_CONFIG):
        self.config = config

    def segment(self, poses: list[PoseData]) -> PhaseSegmentation:
        """
        전체 포즈 시퀀스 → (앉기 포즈, 일어서기 포즈)

        앉기 = poses[0 : max(minFramesPerPhase, t)]
        일어서기 = poses[min(n - minFramesPerPhase, t) :]
        전환점 부근은 의도적으로 겹친다 (짧은 시퀀스에서도 페이즈당 최소 프레임 보장).
        """
        n = len(poses)
        per_phase = self.config.min_frames_per_phase
        transition = self.detect_transition(poses)

        sitting = poses[: max(per_phase, transition)]
        rising = poses[max(0, min(n - per_phase, transition)):]

        logger.info(
            f"[PHASE] transition={transition} sitting={len(sitting)} rising={len(rising)} total={n}"
        )
        return PhaseSegmentation(transition_index=transition, sitting=sitting, rising=rising)

    def detect_transition(self, poses: list[PoseData]) -> int:
        """
        연속 3프레임(prev, cur, next)의 hip 을 훑어
        (a) 이웃 간 수직 이동량 최대 프레임
        (b) hip 이 가장 낮은(y 최대) 프레임
        을 찾는다. 두 후보가 transition_window 미만으로 가까우면 (b), 아니면 (a).
        신뢰도 충족 트리플이 하나도 없으면 시퀀스 중앙.
        """
        n = len(poses)
        midpoint = n // 2
        hip = self.hip_landmark(poses)
        threshold = self.config.confidence_threshold

        max_move_frame = midpoint
        max_move = 0.0
        lowest_frame = 0
        lowest_y = -np.inf
        found = False

        for i in range(1, n - 1):
            prev_hip = poses[i - 1].confident(hip, threshold)
            cur_hip = poses[i].confident(hip, threshold)
            next_hip = poses[i + 1].confident(hip, threshold)
            if prev_hip is None or cur_hip is None or next_hip is None:
                continue

            found = True
            movement = abs(next_hip.y - prev_hip.y)
            if movement > max_move:
                max_move = movement
                max_move_frame = i

            if cur_hip.y > lowest_y:
                lowest_y = cur_hip.y
                lowest_frame = i

        if not found:
            logger.debug("[PHASE] no confident hip triple; using midpoint")
            return midpoint

        if abs(lowest_frame - max_move_frame) < self.config.transition_window:
            # 최저점이 분명함
            return lowest_frame
        # 빠른 움직임 우선
        return max_move_frame

    def hip_landmark(self, poses: list[PoseData]) -> Landmark:
        """시퀀스 평균 신뢰도가 높은 쪽 hip (동률이면 오른쪽)"""
        right = self._mean_confidence(poses, Landmark.right_hip)
        left = self._mean_confidence(poses, Landmark.left_hip)
        return Landmark.left_hip if left > right else Landmark.right_hip

    @staticmethod
    def _mean_confidence(poses: list[PoseData], landmark: Landmark) -> float:
        if not poses:
            return 0.0
        vals = []
        for pose in poses:
            kp = pose.get(landmark)
            # 검출되지 않은 프레임은 신뢰도 0 으로 취급
            vals.append(kp.confidence if kp is not None else 0.0)
        return float(np.mean(vals))
