"""
포즈 관련 DTO
PoseSource 출력 → 페이즈 분할/지표 계산 입력
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Landmark(str, Enum):
    """분석에 사용하는 해부학적 랜드마크 식별자"""
    nose = "nose"
    left_shoulder = "left_shoulder"
    right_shoulder = "right_shoulder"
    left_elbow = "left_elbow"
    right_elbow = "right_elbow"
    left_wrist = "left_wrist"
    right_wrist = "right_wrist"
    left_hip = "left_hip"
    right_hip = "right_hip"
    left_knee = "left_knee"
    right_knee = "right_knee"
    left_ankle = "left_ankle"
    right_ankle = "right_ankle"


class Keypoint(BaseModel):
    """검출된 랜드마크 1개 (프레임 픽셀 좌표)"""
    model_config = ConfigDict(frozen=True)

    landmark: Landmark
    x: float = Field(..., description="X 좌표 (px)")
    y: float = Field(..., description="Y 좌표 (px, 아래로 증가)")
    confidence: float = Field(..., ge=0.0, le=1.0, description="검출 신뢰도")


class PoseData(BaseModel):
    """1개 프레임의 포즈 (검출된 keypoint + 프레임 크기)"""
    model_config = ConfigDict(frozen=True)

    frame_index: int = Field(..., ge=0, description="샘플링된 프레임 순번")
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    keypoints: tuple[Keypoint, ...] = Field(default_factory=tuple)

    def get(self, landmark: Landmark) -> Optional[Keypoint]:
        """랜드마크 조회. 검출되지 않았으면 None (0 좌표로 대체하지 않는다)"""
        for kp in self.keypoints:
            if kp.landmark == landmark:
                return kp
        return None

    def confident(self, landmark: Landmark, threshold: float) -> Optional[Keypoint]:
        """신뢰도가 threshold 를 넘는 keypoint 만 반환, 아니면 None"""
        kp = self.get(landmark)
        if kp is None or kp.confidence <= threshold:
            return None
        return kp

    def confident_keypoints(self, threshold: float) -> list[Keypoint]:
        return [kp for kp in self.keypoints if kp.confidence > threshold]
