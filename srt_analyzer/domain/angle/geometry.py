"""
기하 계산 유틸 (상태 없음)
모든 프레임 지표 함수가 공유하는 각도/벡터 계산과 퇴화 입력 가드.
"""
import math
from typing import Iterable, Optional

import numpy as np

# 두 점 사이 거리가 이 값(px) 미만이면 각도를 의미 없는 값으로 본다
MIN_SEGMENT_PX = 1.0


def angle(p1, p2, p3) -> float:
    """
    p2 를 꼭짓점으로 하는 각도(도, 0~360).
    두 광선의 atan2 각도 차이의 절대값.

    - 좌표가 숫자가 아니거나(NaN/inf 포함)
    - |p1-p2| 또는 |p2-p3| 가 1px 미만이면
    0 을 반환한다. (호출측은 별도 처리하지 않는다: 0도는 낮은 점수로 귀결)
    """
    pts = [_xy(p) for p in (p1, p2, p3)]
    if any(p is None for p in pts):
        return 0.0
    a, b, c = pts

    if _dist(a, b) < MIN_SEGMENT_PX or _dist(b, c) < MIN_SEGMENT_PX:
        return 0.0

    radians = math.atan2(c[1] - b[1], c[0] - b[0]) - math.atan2(a[1] - b[1], a[0] - b[0])
    deg = abs(math.degrees(radians))
    return clamp(deg, 0.0, 360.0)


def clamp(v: float, lo: float, hi: float) -> float:
    """간단 클램프"""
    return max(lo, min(hi, v))


def safe_mean(values: Iterable[float], min_count: int, default: float) -> float:
    """
    유한한 값만 평균. 유효 표본이 min_count 미만이면 default.
    (표본이 너무 적은 페이즈를 0점으로 만들지 않기 위한 정책)
    """
    vals = [float(v) for v in values if v is not None and math.isfinite(float(v))]
    if len(vals) < min_count:
        return default
    return float(np.mean(vals))


# 내부 유틸
def _xy(p) -> Optional[tuple[float, float]]:
    """x/y 속성(또는 dict 키)을 float 튜플로. 숫자가 아니면 None"""
    if p is None:
        return None
    try:
        if isinstance(p, dict):
            x, y = float(p["x"]), float(p["y"])
        else:
            x, y = float(p.x), float(p.y)
    except (AttributeError, KeyError, TypeError, ValueError):
        return None
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    return x, y


def _dist(a: tuple[float, float], b: tuple[float, float]) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])
