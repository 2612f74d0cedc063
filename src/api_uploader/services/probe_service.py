import json
import logging
from pathlib import Path
from typing import Union

from api_uploader.exceptions.exceptions import ProbeError
from api_uploader.services.process_runner import ProcessRunner
from api_uploader.storage.path_generator import AspectRatio

logger = logging.getLogger(__name__)


LANDSCAPE_RATIO = 16 / 9
PORTRAIT_RATIO = 9 / 16
RATIO_TOLERANCE = 0.05


def classify_ratio(ratio: float) -> AspectRatio:
    if abs(ratio - LANDSCAPE_RATIO) < RATIO_TOLERANCE:
        return AspectRatio.LANDSCAPE
    if abs(ratio - PORTRAIT_RATIO) < RATIO_TOLERANCE:
        return AspectRatio.PORTRAIT
    return AspectRatio.OTHER


def classify_aspect_ratio(width: int, height: int) -> AspectRatio:
    return classify_ratio(width / height)


def parse_dimensions(output: str) -> tuple[int, int]:
    """Pull width and height of the first stream out of ffprobe's JSON output."""
    try:
        stream = json.loads(output)["streams"][0]
        width = int(stream["width"])
        height = int(stream["height"])
    except (ValueError, TypeError, KeyError, IndexError) as e:
        raise ProbeError(f"ffprobe returned no usable video stream: {output!r}") from e

    if width <= 0 or height <= 0:
        raise ProbeError(f"ffprobe reported invalid dimensions {width}x{height}")
    return width, height


class VideoProber:

    def __init__(self, runner: ProcessRunner, ffprobe_binary: str = "ffprobe"):
        self.runner = runner
        self.ffprobe_binary = ffprobe_binary

    def build_command(self, file_path: Path) -> list[str]:
        return [
            self.ffprobe_binary,
            "-v", "error",
            "-select_streams", "v:0",
            "-show_entries", "stream=width,height",
            "-of", "json",
            str(file_path),
        ]

    def get_dimensions(self, file_path: Union[str, Path]) -> tuple[int, int]:
        result = self.runner.run(self.build_command(Path(file_path)))
        if result.exit_code != 0:
            logger.error(f"ffprobe exited with {result.exit_code}: {result.stderr}")
            raise ProbeError(f"ffprobe error: {result.stderr}")
        return parse_dimensions(result.stdout)

    def get_aspect_ratio(self, file_path: Union[str, Path]) -> AspectRatio:
        width, height = self.get_dimensions(file_path)
        aspect_ratio = classify_aspect_ratio(width, height)
        logger.info(f"Classified {file_path} ({width}x{height}) as {aspect_ratio.value}")
        return aspect_ratio
