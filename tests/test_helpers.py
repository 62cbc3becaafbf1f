"""
Test Helper Utilities

합성 포즈 / 지표 생성 헬퍼 모음.
좌표계: 640x480 프레임 픽셀, y 는 아래로 증가.
"""
import math
from typing import Dict, Iterable, List, Optional, Tuple

from srt_analyzer.schemas.metric_dto import MetricScore, RisingFrameMetrics, SittingFrameMetrics
from srt_analyzer.schemas.pose_dto import Keypoint, Landmark, PoseData

FRAME_W = 640
FRAME_H = 480

# 정면을 보고 똑바로 선 자세 (팔은 가슴 앞에 교차)
STANDING: Dict[Landmark, Tuple[float, float]] = {
    Landmark.nose: (320.0, 60.0),
    Landmark.left_shoulder: (300.0, 100.0),
    Landmark.right_shoulder: (320.0, 100.0),
    Landmark.left_elbow: (300.0, 140.0),
    Landmark.right_elbow: (340.0, 140.0),
    Landmark.left_wrist: (330.0, 150.0),
    Landmark.right_wrist: (310.0, 150.0),
    Landmark.left_hip: (300.0, 220.0),
    Landmark.right_hip: (320.0, 220.0),
    Landmark.left_knee: (300.0, 330.0),
    Landmark.right_knee: (320.0, 330.0),
    Landmark.left_ankle: (300.0, 440.0),
    Landmark.right_ankle: (320.0, 440.0),
}


# ========================================
# Pose Data Generators
# ========================================

def make_pose(
    points: Optional[Dict[Landmark, Tuple[float, float]]] = None,
    frame_index: int = 0,
    confidence: float = 0.95,
    confidences: Optional[Dict[Landmark, float]] = None,
    missing: Iterable[Landmark] = (),
    width: float = FRAME_W,
    height: float = FRAME_H,
) -> PoseData:
    """
    랜드마크 좌표 dict → PoseData

    Args:
        points: 덮어쓸 좌표 (나머지는 STANDING)
        confidence: 기본 신뢰도
        confidences: 랜드마크별 신뢰도
        missing: 검출되지 않은 것으로 취급할 랜드마크
    """
    coords = dict(STANDING)
    coords.update(points or {})
    confidences = confidences or {}
    missing = set(missing)

    keypoints = tuple(
        Keypoint(
            landmark=lm,
            x=x,
            y=y,
            confidence=confidences.get(lm, confidence),
        )
        for lm, (x, y) in coords.items()
        if lm not in missing
    )
    return PoseData(frame_index=frame_index, width=width, height=height, keypoints=keypoints)


def with_hip_y(hip_y: float, frame_index: int = 0, **kwargs) -> PoseData:
    """양쪽 hip 의 y 만 바꾼 포즈"""
    return make_pose(
        {
            Landmark.left_hip: (300.0, hip_y),
            Landmark.right_hip: (320.0, hip_y),
        },
        frame_index=frame_index,
        **kwargs,
    )


def hip_sequence(hip_ys: List[float], **kwargs) -> List[PoseData]:
    return [with_hip_y(y, frame_index=i, **kwargs) for i, y in enumerate(hip_ys)]


def srt_sequence(n: int = 30, depth: float = 100.0, **kwargs) -> List[PoseData]:
    """앉았다 일어서는 동작: hip 이 사인 곡선으로 내려갔다 올라옴"""
    return hip_sequence(
        [220.0 + depth * math.sin(math.pi * i / (n - 1)) for i in range(n)],
        **kwargs,
    )


def knee_at_angle(degrees: float, knee=(320.0, 330.0), shin: float = 110.0, thigh: float = 110.0):
    """
    무릎 각도가 degrees 가 되도록 hip/knee/ankle 좌표 생성 (오른쪽 다리).
    발목은 무릎 바로 아래, 엉덩이는 발목 방향에서 degrees 만큼 회전.
    """
    kx, ky = knee
    ankle = (kx, ky + shin)
    theta = math.radians(90.0 - degrees)
    hip = (kx + thigh * math.cos(theta), ky + thigh * math.sin(theta))
    return {
        Landmark.right_hip: hip,
        Landmark.right_knee: (kx, ky),
        Landmark.right_ankle: ankle,
    }


def extended_rise_pose(frame_index: int = 0, knee_degrees: float = 170.0) -> PoseData:
    """
    거의 다 일어선 자세 (오른쪽)
    어깨/엉덩이/발목은 x=320 일직선, 엉덩이는 어깨 바로 아래(2px)라 progress≈1,
    무릎만 뒤로 빠져 무릎 각도 knee_degrees (허벅지/정강이가 절반씩 꺾임).
    """
    shoulder_y, hip_y, ankle_y = 20.0, 22.0, 470.0
    half = (ankle_y - hip_y) / 2
    offset = half * math.tan(math.radians((180.0 - knee_degrees) / 2))
    return make_pose(
        {
            Landmark.right_shoulder: (320.0, shoulder_y),
            Landmark.right_hip: (320.0, hip_y),
            Landmark.right_knee: (320.0 - offset, hip_y + half),
            Landmark.right_ankle: (320.0, ankle_y),
        },
        frame_index=frame_index,
        confidence=1.0,
    )


# ========================================
# Metric Generators
# ========================================

def ms(score: float, available: bool = True, angle: float = 0.0) -> MetricScore:
    return MetricScore(angle=angle, score=score, available=available)


def sitting_frames(n: int, kf: float, hc: float, sa: float, available: bool = True) -> List[SittingFrameMetrics]:
    return [
        SittingFrameMetrics(
            frame_index=i,
            knee_flexion=ms(kf, available),
            hip_control=ms(hc, available),
            spinal_alignment=ms(sa, available),
        )
        for i in range(n)
    ]


def rising_frames(n: int, ke: float, hd: float, st: float, available: bool = True) -> List[RisingFrameMetrics]:
    return [
        RisingFrameMetrics(
            frame_index=i,
            knee_extension=ms(ke, available),
            hip_drive=ms(hd, available),
            stability=ms(st, available),
        )
        for i in range(n)
    ]
