import asyncio
from contextlib import asynccontextmanager

from srt_analyzer.config.settings import settings

# 분석(ffmpeg + 포즈 추정) 동시 실행 상한
ANALYSIS_CONCURRENCY_LIMIT = max(1, settings.ANALYSIS_CONCURRENCY)
_analysis_semaphore = asyncio.Semaphore(ANALYSIS_CONCURRENCY_LIMIT)


@asynccontextmanager
async def analysis_slot():
    """
    분석 작업의 동시 실행 개수를 제한 (CPU 과점유 방지, 서버 안정성↑)
    """
    await _analysis_semaphore.acquire()
    try:
        yield
    finally:
        _analysis_semaphore.release()
