from fastapi import APIRouter

from srt_analyzer.utils.sysload import ffmpeg_available

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check():
    return {"status": "ok", "ffmpeg": ffmpeg_available()}


ROUTERS = [router]
