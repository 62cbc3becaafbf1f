"""
피드백 생성 Domain Logic
집계 점수 → 강점 / 개선점 / 권장 운동 (규칙 기반)

생성 순서(무릎 → 엉덩이 → 균형 → 자세 → 지지)는 출력 리스트 순서를 결정하며
소비측이 그대로 표시할 수 있으므로 바꾸지 않는다.
"""
from srt_analyzer.config.analysis_config import AnalysisConfig, DEFAULT_ANALYSIS_CONFIG
from srt_analyzer.schemas.phase_dto import SupportSummary, SupportType
from srt_analyzer.schemas.report_dto import AggregatedScores, Feedback


class FeedbackSynthesizer:
    """임계값 기반 피드백 생성기"""

    def __init__(self, config: AnalysisConfig = DEFAULT_ANALYSIS_CONFIG):
        self.config = config

    def synthesize(self, scores: AggregatedScores, supports: SupportSummary) -> Feedback:
        excellent = self.config.excellent_threshold
        good = self.config.good_threshold
        low = self.config.improvement_threshold

        strengths: list[str] = []
        improvements: list[str] = []
        recommendations: list[str] = []

        sitting = scores.sitting_phase
        rising = scores.rising_phase
        components = scores.components

        # 앉기: 무릎 제어
        if sitting.knee_flexion > excellent:
            strengths.append("Excellent knee control during sitting")
        elif sitting.knee_flexion < low:
            improvements.append("Work on controlled descent while sitting")
            recommendations.append("Practice slow, controlled squats with proper form")

        # 일어서기: 엉덩이 추진
        if rising.hip_drive > excellent:
            strengths.append("Strong hip drive during rising")
        elif rising.hip_drive < low:
            improvements.append("Need to improve hip drive strength")
            recommendations.append("Practice hip thrust exercises to build strength")

        # 균형
        if components.balance < good:
            if components.balance < low:
                improvements.append("Significant balance improvement needed")
                recommendations.append("Start with supported single-leg stance exercises")
            else:
                improvements.append("Balance needs some improvement")
                recommendations.append("Practice single-leg standing exercises")

        # 자세 제어 (척추 정렬이 원인인지에 따라 문구 분기)
        if components.postural_control < good:
            if sitting.spinal_alignment < low:
                improvements.append("Focus on maintaining spinal alignment")
                recommendations.append("Practice wall sits with proper back alignment")
            else:
                improvements.append("Work on maintaining better posture")
                recommendations.append("Practice plank exercises for core strength")

        # 지지 사용 (감점과 같은 페이즈 합집합 사용)
        used = supports.used
        if not used:
            strengths.append("Excellent form - no supports needed")
        else:
            improvements.append(f"Used {' and '.join(t.value for t in used)} for support")
            recommendations.append(
                "Practice the movement with arms crossed over chest"
                if SupportType.HAND in used
                else "Practice the movement without knee support"
            )

        return Feedback(
            strengths=strengths,
            improvements=improvements,
            recommendations=recommendations,
        )
