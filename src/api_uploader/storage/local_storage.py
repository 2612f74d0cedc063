"""Local disk staging for uploaded assets."""

import logging
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Union

from api_uploader.exceptions.exceptions import OsException

logger = logging.getLogger(__name__)


class LocalAssetStorage:
    def __init__(self, assets_root: Union[str, Path]):
        self.base = Path(assets_root)

    def ensure_root(self) -> None:
        self.base.mkdir(parents=True, exist_ok=True)

    def path_for(self, asset_name: str) -> Path:
        return self.base / asset_name

    def write(self, asset_name: str, content: Union[bytes, BinaryIO]) -> Path:
        """
        Write `content` to `asset_name` under the root. A file object is copied
        in chunks from its current position. A failed write leaves nothing behind.
        """
        path = self.path_for(asset_name)
        try:
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                with path.open("wb") as out:
                    shutil.copyfileobj(content, out)
        except OSError as e:
            self.delete(path)
            raise OsException(f"Couldn't write {path}: {e}") from e
        logger.info(f"Staged {path}")
        return path

    def delete(self, path: Union[str, Path]) -> None:
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Error removing staged file {path}: {e}")

    @contextmanager
    def staged(self, path: Union[str, Path]) -> Iterator[Path]:
        """Yield `path` and remove it on exit, whether the block succeeded or not."""
        try:
            yield Path(path)
        finally:
            self.delete(path)
