import logging
from pathlib import Path
from typing import Union

from api_uploader.exceptions.exceptions import TranscodingError
from api_uploader.services.process_runner import ProcessRunner

logger = logging.getLogger(__name__)


PROCESSED_SUFFIX = ".processed"


class FastStartTranscoder:
    """Remuxes MP4 files so the moov atom sits ahead of the media data."""

    def __init__(self, runner: ProcessRunner, ffmpeg_binary: str = "ffmpeg"):
        self.runner = runner
        self.ffmpeg_binary = ffmpeg_binary

    def build_command(self, input_path: Path, output_path: Path) -> list[str]:
        return [
            self.ffmpeg_binary,
            "-y",
            "-i", str(input_path),
            "-movflags", "faststart",
            "-codec", "copy",  # Copy without re-encoding
            "-f", "mp4",
            str(output_path),
        ]

    def process_for_fast_start(self, input_path: Union[str, Path]) -> Path:
        input_path = Path(input_path)
        output_path = input_path.with_name(input_path.name + PROCESSED_SUFFIX)

        logger.info(f"Relocating container index of {input_path} for fast start")
        result = self.runner.run(self.build_command(input_path, output_path))

        if result.exit_code != 0:
            output_path.unlink(missing_ok=True)
            logger.error(f"FFmpeg exited with {result.exit_code}: {result.stderr}")
            raise TranscodingError(f"FFmpeg error: {result.stderr}")

        logger.info(f"Fast start output written to {output_path}")
        return output_path
