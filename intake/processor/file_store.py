import re
import tempfile
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from intake.logging.logger import Log
from intake.processor.exceptions import FileReadError
from intake.processor.models import StoredFile

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class UploadStore:
    """Keeps uploaded bytes on local disk and maps ``/uploads/<file>`` urls to paths."""

    URL_PREFIX = "/uploads/"

    def __init__(self, upload_dir: Path) -> None:
        self._upload_dir = upload_dir

    @property
    def upload_dir(self) -> Path:
        return self._upload_dir

    def save(self, name: str, content: bytes) -> StoredFile:
        self._upload_dir.mkdir(parents=True, exist_ok=True)
        filename = self._unique_filename(name)
        path = self._upload_dir / filename
        path.write_bytes(content)
        return StoredFile(url=f"{self.URL_PREFIX}{filename}", path=str(path), size=len(content))

    def resolve(self, url: str) -> Path:
        """Return the local path for an upload url.

        Raises:
            FileReadError: if the url is not an upload url or the file is gone.
        """
        if not url.startswith(self.URL_PREFIX):
            raise FileReadError(f"Not a local upload url: {url}")
        filename = url[len(self.URL_PREFIX):]
        if not filename or Path(filename).name != filename:
            raise FileReadError(f"Invalid upload url: {url}")
        path = self._upload_dir / filename
        if not path.is_file():
            raise FileReadError(f"File not found: {path}")
        return path

    def delete(self, url: str) -> bool:
        """Remove the file behind ``url``. Returns False when nothing was removed."""
        try:
            path = self.resolve(url)
            path.unlink()
        except (FileReadError, OSError) as exc:
            Log.warning(f"Could not remove upload {url}: {exc}")
            return False
        return True

    @contextmanager
    def temporary(self, name: str, content: bytes) -> Iterator[Path]:
        """Write ``content`` to a temporary file that is removed after the block."""
        suffix = Path(name).suffix
        with tempfile.TemporaryDirectory(prefix="intake-") as directory:
            path = Path(directory) / f"upload{suffix}"
            path.write_bytes(content)
            yield path

    @staticmethod
    def _unique_filename(name: str) -> str:
        original = Path(name).name
        safe = _UNSAFE_CHARS.sub("_", original).strip("._") or "file"
        return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{safe}"
