import shutil


def ffmpeg_available() -> bool:
    """ffmpeg/ffprobe가 PATH에 있는지 간단히 확인"""
    return shutil.which("ffmpeg") is not None and shutil.which("ffprobe") is not None
