from unittest.mock import Mock

import pytest

from srt_analyzer.common.errors import DecodeError
from srt_analyzer.domain.video.sampler import FrameSampler
from srt_analyzer.infrastructure.video.ffmpeg_client import build_video_filters, list_frame_files
from srt_analyzer.schemas.video_dto import FrameFilters


def _frames(n):
    return [f"/tmp/frames/frame-{i}.jpg" for i in range(1, n + 1)]


@pytest.fixture
def decoder():
    d = Mock()
    d.probe_duration.return_value = 6.0
    d.extract_frames.return_value = _frames(30)
    return d


class TestFrameSampler:
    """길이 적응형 프레임 샘플링"""

    @pytest.mark.parametrize(
        "duration,expected",
        [
            (2.0, 10.0),   # 40/2 = 20 → 상한 10
            (6.0, 40 / 6),
            (20.0, 5.0),   # 40/20 = 2 → 하한 5
        ],
    )
    def test_optimal_fps_is_clamped(self, decoder, duration, expected):
        assert FrameSampler(decoder).optimal_fps(duration) == pytest.approx(expected)

    def test_sample_passes_fps_and_filters(self, decoder, tmp_path):
        filters = FrameFilters(scale_factor=2, denoise=1.5)
        result = FrameSampler(decoder, filters=filters).sample("video.mp4", str(tmp_path))

        request = decoder.extract_frames.call_args.args[0]
        assert request.file_path == "video.mp4"
        assert request.output_dir == str(tmp_path)
        assert request.target_fps == pytest.approx(40 / 6)
        assert request.filters == filters
        assert result.frames == _frames(30)
        assert result.extracted_count == 30

    @pytest.mark.parametrize("count", [41, 59, 60, 100, 237])
    def test_downsample_keeps_first_and_last(self, decoder, count):
        frames = _frames(count)
        sampled = FrameSampler(decoder).downsample(frames)

        assert len(sampled) <= 40
        assert sampled[0] == frames[0]
        assert sampled[-1] == frames[-1]
        # 순서 보존
        assert sampled == sorted(sampled, key=frames.index)

    def test_downsample_stride(self, decoder):
        frames = _frames(100)
        sampled = FrameSampler(decoder).downsample(frames)
        # step = ceil(100/40) = 3 → 0, 3, 6, ..., 96, 99
        assert sampled[:3] == [frames[0], frames[3], frames[6]]
        assert sampled[-2:] == [frames[96], frames[99]]

    def test_no_downsample_under_limit(self, decoder):
        frames = _frames(40)
        assert FrameSampler(decoder).downsample(frames) == frames

    @pytest.mark.parametrize("duration", [None, 0.0, -1.0, float("nan")])
    def test_invalid_duration_raises_decode_error(self, decoder, duration, tmp_path):
        decoder.probe_duration.return_value = duration
        with pytest.raises(DecodeError):
            FrameSampler(decoder).sample("video.mp4", str(tmp_path))
        decoder.extract_frames.assert_not_called()

    def test_missing_file_raises_decode_error(self, decoder, tmp_path):
        decoder.probe_duration.side_effect = FileNotFoundError("video.mp4")
        with pytest.raises(DecodeError):
            FrameSampler(decoder).sample("video.mp4", str(tmp_path))

    def test_extraction_failure_raises_decode_error(self, decoder, tmp_path):
        decoder.extract_frames.side_effect = RuntimeError("ffmpeg timed out after 60s")
        with pytest.raises(DecodeError):
            FrameSampler(decoder).sample("video.mp4", str(tmp_path))


class TestFFmpegHelpers:
    def test_build_video_filters(self):
        vf = build_video_filters(FrameFilters(scale_factor=2, normalize=True, denoise=1.5))
        assert vf == ["scale=iw/2:-2", "normalize", "hqdn3d=1.5"]

    def test_build_video_filters_without_optional(self):
        vf = build_video_filters(FrameFilters(scale_factor=3, normalize=False, denoise=0))
        assert vf == ["scale=iw/3:-2"]

    def test_list_frame_files_sorts_numerically(self, tmp_path):
        for i in (10, 2, 1, 33):
            (tmp_path / f"frame-{i}.jpg").write_bytes(b"")
        (tmp_path / "notes.txt").write_text("x")

        names = [p.rsplit("/", 1)[-1] for p in list_frame_files(tmp_path)]
        assert names == ["frame-1.jpg", "frame-2.jpg", "frame-10.jpg", "frame-33.jpg"]
