"""
Atomic Store module for crash-safe reading and writing of feed files.
"""
import logging
import os
import tempfile

from linkleaf.exceptions import FeedIOError, FeedNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_FILE_MODE = 0o644
DEFAULT_DIR_MODE = 0o755
TEMP_PREFIX = '.tmp-'


class AtomicStore:
    """
    Reads and writes whole files so that readers never see a partial write.

    Writes go to a temporary file in the target's directory which is then
    renamed over the target. The temporary file is removed on every path.
    Concurrent writers are not coordinated: the last rename wins.
    """

    def __init__(self, file_mode: int = DEFAULT_FILE_MODE, dir_mode: int = DEFAULT_DIR_MODE):
        """
        Initialize the store.

        Args:
            file_mode: Permission bits applied to written files
            dir_mode: Permission bits for parent directories created on write
        """
        self.file_mode = file_mode
        self.dir_mode = dir_mode

        logger.debug(f"AtomicStore initialized (file_mode={oct(file_mode)}, dir_mode={oct(dir_mode)})")

    def read(self, path: str) -> bytes:
        """
        Read the full contents of a file.

        Args:
            path: File to read

        Returns:
            File contents

        Raises:
            FeedNotFoundError: If the path does not exist
            FeedIOError: For any other read failure
        """
        try:
            with open(path, 'rb') as f:
                data = f.read()
        except FileNotFoundError as e:
            raise FeedNotFoundError(f"Feed file not found: {path}", path=path) from e
        except OSError as e:
            logger.error(f"Error reading {path}: {e}")
            raise FeedIOError(f"Failed to read {path}: {e}", path=path) from e

        logger.debug(f"Read {len(data)} bytes from {path}")
        return data

    def write(self, path: str, data: bytes) -> None:
        """
        Atomically replace a file with new contents.

        Missing parent directories are created first.

        Args:
            path: File to write
            data: Complete new contents

        Raises:
            FeedIOError: If the directory, temporary file or rename fails
        """
        directory = os.path.dirname(os.path.abspath(path))

        try:
            os.makedirs(directory, mode=self.dir_mode, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create directory {directory}: {e}")
            raise FeedIOError(f"Failed to create directory {directory}: {e}", path=path) from e

        try:
            fd, tmp_path = tempfile.mkstemp(prefix=TEMP_PREFIX, dir=directory)
        except OSError as e:
            logger.error(f"Failed to create temporary file in {directory}: {e}")
            raise FeedIOError(f"Failed to create temporary file in {directory}: {e}", path=path) from e

        try:
            with os.fdopen(fd, 'wb') as tmp:
                tmp.write(data)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.chmod(tmp_path, self.file_mode)
            os.replace(tmp_path, path)
        except OSError as e:
            logger.error(f"Error writing {path}: {e}")
            raise FeedIOError(f"Failed to write {path}: {e}", path=path) from e
        finally:
            self._remove_temp(tmp_path)

        logger.debug(f"Wrote {len(data)} bytes to {path}")

    def _remove_temp(self, tmp_path: str) -> None:
        """Remove a leftover temporary file; after a successful rename there is none."""
        try:
            os.remove(tmp_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove temporary file {tmp_path}: {e}")
