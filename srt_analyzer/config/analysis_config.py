"""
분석 파이프라인 상수 모음 (불변)

프레임 범위, keypoint 신뢰도 임계값, 점수 가중치, 피드백 임계값 등을
하나의 frozen 모델로 묶어 각 컴포넌트 생성자에 주입한다.
테스트에서는 DEFAULT_ANALYSIS_CONFIG.model_copy(update={...}) 로 덮어쓴다.

주의: 가중치/배수/클램프 값은 외부에 노출되는 채점 기준이므로 임의로 바꾸지 않는다.
"""
from pydantic import BaseModel, ConfigDict, Field


class SitWeights(BaseModel):
    """앉기 페이즈 점수 가중치"""
    model_config = ConfigDict(frozen=True)

    knee_flexion: float = 0.35
    hip_control: float = 0.35
    spinal_alignment: float = 0.30


class RiseWeights(BaseModel):
    """일어서기 페이즈 점수 가중치"""
    model_config = ConfigDict(frozen=True)

    knee_extension: float = 0.30
    hip_drive: float = 0.40
    stability: float = 0.30


class HipDriveWeights(BaseModel):
    """hip drive 조합 가중치 (수직 진행 / 몸통 각도 / 정렬)"""
    model_config = ConfigDict(frozen=True)

    progress: float = 0.5
    trunk_angle: float = 0.3
    alignment: float = 0.2


class CompositeMultipliers(BaseModel):
    """복합 지표(자세 제어/균형/협응) 계산용 배수"""
    model_config = ConfigDict(frozen=True)

    postural_spinal_alignment: float = 1.3
    postural_stability: float = 1.2
    balance_hip_control: float = 1.4
    balance_stability: float = 1.3
    coordination_knee_flexion: float = 1.1
    coordination_knee_extension: float = 1.1
    coordination_hip_drive: float = 1.2


class AnalysisConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    # ── Frame sampling ────────────────────────────────────
    min_frames: int = Field(20, ge=1)
    max_frames: int = Field(40, ge=2)
    base_fps: float = Field(5.0, gt=0)
    max_fps: float = Field(10.0, gt=0)

    # ── Pose / phase ──────────────────────────────────────
    confidence_threshold: float = Field(0.3, ge=0.0, le=1.0)
    min_frames_per_phase: int = Field(10, ge=1)
    # 최대 이동 프레임과 최저점 프레임이 이 거리 미만이면 최저점을 전환점으로 채택
    transition_window: int = Field(5, ge=0)

    # ── Support detection ─────────────────────────────────
    hand_support_ratio: float = 0.3
    knee_support_ratio: float = 0.2
    hand_penalty: float = 1.0
    knee_penalty: float = 0.5

    # ── Per-frame metric formulas ─────────────────────────
    knee_flexion_full_angle: float = 90.0
    knee_extension_full_angle: float = 160.0
    hip_control_upright_angle: float = 30.0
    hip_control_limit_angle: float = 90.0
    hip_control_range: float = 60.0
    stability_deviation_scale: float = 100.0
    hip_drive: HipDriveWeights = HipDriveWeights()

    # ── Aggregation ───────────────────────────────────────
    default_metric_score: float = 0.3
    min_valid_samples: int = Field(3, ge=1)
    max_phase_score: float = 5.0
    min_phase_score: float = 1.5
    penalty_factor: float = 0.6
    min_total_score: float = 2.0
    max_total_score: float = 10.0
    sit_weights: SitWeights = SitWeights()
    rise_weights: RiseWeights = RiseWeights()
    composite: CompositeMultipliers = CompositeMultipliers()

    # 위험도 구간 (총점 기준)
    low_risk_total: float = 8.0
    moderate_risk_total: float = 6.0

    # ── Feedback thresholds ───────────────────────────────
    excellent_threshold: float = 0.8
    good_threshold: float = 0.6
    improvement_threshold: float = 0.4

    # ── Performance budgets (경고만, 실패 아님) ────────────
    frame_budget_ms: float = 500.0
    run_budget_ms: float = 10_000.0

    @property
    def min_total_poses(self) -> int:
        """분석에 필요한 최소 포즈 수 (MIN_FRAMES, 페이즈당 최소 프레임 × 2 보다 작을 수 없음)"""
        return max(self.min_frames, self.min_frames_per_phase * 2)


DEFAULT_ANALYSIS_CONFIG = AnalysisConfig()
