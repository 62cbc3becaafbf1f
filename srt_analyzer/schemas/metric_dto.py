"""
프레임별 지표 DTO
GeometricScorer 출력 → ScoreAggregator 입력
"""
from pydantic import BaseModel, ConfigDict, Field


class MetricScore(BaseModel):
    """단일 지표 측정값: 원시 각도(또는 편차)와 0~1 점수"""
    model_config = ConfigDict(frozen=True)

    angle: float = Field(0.0, description="점수를 만든 원시 각도(도). stability 는 수평 편차(px)")
    score: float = Field(0.0, ge=0.0, le=1.0)
    # False: 필요한 랜드마크가 없어 기본 점수(0 또는 0.3)로 대체됨. 평균에는 그 점수 그대로 포함
    available: bool = True


class SittingFrameMetrics(BaseModel):
    """앉기 페이즈 1프레임 지표"""
    model_config = ConfigDict(frozen=True)

    frame_index: int
    knee_flexion: MetricScore
    hip_control: MetricScore
    spinal_alignment: MetricScore


class RisingFrameMetrics(BaseModel):
    """일어서기 페이즈 1프레임 지표"""
    model_config = ConfigDict(frozen=True)

    frame_index: int
    knee_extension: MetricScore
    hip_drive: MetricScore
    stability: MetricScore
