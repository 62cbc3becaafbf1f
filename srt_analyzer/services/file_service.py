import logging
import os
import uuid
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Union

from fastapi import UploadFile

from srt_analyzer.common.errors import InvalidUploadError
from srt_analyzer.config.settings import settings

logger = logging.getLogger(__name__)

INVALID_FORMAT_MESSAGE = "Invalid video format. Supported formats: MP4, WebM, MOV"


class FileService:
    """업로드 비디오 검증/저장/삭제 서비스"""

    def __init__(
        self,
        upload_dir: Optional[Union[str, Path]] = None,
        max_bytes: Optional[int] = None,
        allowed_types: Optional[Iterable[str]] = None,
        chunk_size: Optional[int] = None,
    ):
        self.upload_dir = str(upload_dir or settings.UPLOADS_DIR)
        self.max_bytes = max_bytes if max_bytes is not None else settings.MAX_UPLOAD_BYTES
        self.allowed_types = tuple(allowed_types or settings.ALLOWED_VIDEO_TYPES)
        self.chunk_size = chunk_size or settings.UPLOAD_CHUNK_BYTES
        os.makedirs(self.upload_dir, exist_ok=True)

    def validate_content_type(self, file: UploadFile) -> None:
        """MIME 타입 검사 (저장 전)"""
        content_type = (file.content_type or "").split(";")[0].strip().lower()
        if content_type not in self.allowed_types:
            raise InvalidUploadError(INVALID_FORMAT_MESSAGE)

    def size_limit_message(self) -> str:
        return f"File size exceeds {self.max_bytes // (1024 * 1024)}MB limit"

    async def save_uploaded_file(self, file: UploadFile) -> str:
        """
        업로드된 파일 검증 후 청크 단위로 저장

        Args:
            file: FastAPI UploadFile 객체

        Returns:
            저장된 파일의 절대 경로

        Raises:
            InvalidUploadError: 허용되지 않은 MIME 타입 또는 크기 초과 (부분 파일은 삭제)
        """
        self.validate_content_type(file)

        # 파일명 생성 (타임스탬프 + UUID + 원본 파일명), 경로 구분자는 제거
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        unique_id = uuid.uuid4().hex[:8]
        original = os.path.basename(file.filename or "video.mp4")
        filepath = os.path.join(self.upload_dir, f"{timestamp}_{unique_id}_{original}")

        written = 0
        try:
            with open(filepath, "wb") as f:
                while True:
                    chunk = await file.read(self.chunk_size)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise InvalidUploadError(self.size_limit_message())
                    f.write(chunk)
        except (InvalidUploadError, OSError):
            self.delete_file(filepath)
            raise

        return os.path.abspath(filepath)

    def delete_file(self, filepath: str) -> bool:
        """
        파일 삭제 (실패해도 예외를 올리지 않음)

        Returns:
            삭제 성공 여부
        """
        try:
            if os.path.exists(filepath):
                os.remove(filepath)
                return True
        except OSError as e:
            logger.warning(f"[CLEANUP] upload delete failed: {filepath} ({e})")
        return False
