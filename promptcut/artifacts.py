"""Output artifact naming, single-use retrieval and cleanup."""

import logging
import os
import time
import uuid
from pathlib import Path
from typing import Iterable

from promptcut.errors import ArtifactNotFoundError
from promptcut.models import Artifact

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
_CLAIM_MARKER = ".retrieving-"


class ArtifactStore:
    """Owns the files in ``output_dir`` from allocation until first download.

    An artifact nobody downloads stays on disk until :meth:`purge_expired`
    removes it; the web app calls that before each processing request.
    """

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)

    def allocate(self, kind: str, suffix: str = ".mp4") -> Path:
        """Return a fresh output path for an artifact of ``kind``.

        The name carries a millisecond timestamp plus a random token, so two
        allocations in the same millisecond still differ. The file itself is
        not created.
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        millis = time.time_ns() // 1_000_000
        path = self.output_dir / f"{kind}_{millis}_{uuid.uuid4().hex[:6]}{suffix}"
        logger.debug("Allocated %s", path.name)
        return path

    def register(self, path: Path) -> Artifact:
        return Artifact(name=path.name, path=path)

    def _resolve(self, name: str) -> Path:
        if (
            not name
            or name != Path(name).name
            or name.startswith(".")
            or "\\" in name
            or _CLAIM_MARKER in name
        ):
            raise ArtifactNotFoundError(f"Artifact not found: {name}")
        return self.output_dir / name

    def size(self, name: str) -> int:
        """Byte size of an unclaimed artifact, without claiming it."""
        path = self._resolve(name)
        try:
            return path.stat().st_size
        except FileNotFoundError:
            raise ArtifactNotFoundError(f"Artifact not found: {name}") from None

    def retrieve(self, name: str) -> "ArtifactStream":
        """Claim the artifact and return a stream over its bytes.

        The claim (a rename to a private name) happens before this returns, so
        any later ``retrieve`` of the same name raises ArtifactNotFoundError.
        """
        path = self._resolve(name)
        claimed = path.with_name(f".{path.name}{_CLAIM_MARKER}{uuid.uuid4().hex[:8]}")
        try:
            os.rename(path, claimed)
        except FileNotFoundError:
            raise ArtifactNotFoundError(f"Artifact not found: {name}") from None

        logger.debug("Claimed %s for download", name)
        try:
            return ArtifactStream(claimed, name)
        except OSError:
            _delete(claimed, name)
            raise ArtifactNotFoundError(f"Artifact not found: {name}") from None

    def discard(self, artifacts: Iterable[Artifact]) -> None:
        """Delete artifacts that must not reach the caller."""
        for artifact in artifacts:
            _delete(artifact.path, artifact.name)

    def purge_expired(self, max_age: float) -> int:
        """Delete unclaimed artifacts older than ``max_age`` seconds.

        Files mid-download (hidden claimed names) are left alone. Returns the
        number of artifacts removed.
        """
        if not self.output_dir.is_dir():
            return 0
        cutoff = time.time() - max_age
        purged = 0
        for path in self.output_dir.iterdir():
            if path.name.startswith(".") or not path.is_file():
                continue
            try:
                expired = path.stat().st_mtime < cutoff
            except FileNotFoundError:
                continue
            if expired:
                _delete(path, path.name)
                purged += 1
        if purged:
            logger.info("Purged %d expired artifact(s) from %s", purged, self.output_dir)
        return purged


def _delete(path: Path, name: str) -> None:
    try:
        path.unlink(missing_ok=True)
        logger.debug("Deleted %s", name)
    except OSError:
        logger.warning("Could not delete artifact %s", name, exc_info=True)


class ArtifactStream:
    """Chunked reader over a claimed artifact that deletes it on close.

    Exhausting the stream, calling ``close()`` (WSGI servers do this on client
    disconnect) or a read error all remove the file, whether or not
    iteration ever started.
    """

    def __init__(self, path: Path, name: str):
        self.name = name
        self._path = path
        self._file = open(path, "rb")
        self._closed = False

    def __iter__(self) -> "ArtifactStream":
        return self

    def __next__(self) -> bytes:
        if self._closed:
            raise StopIteration
        try:
            chunk = self._file.read(CHUNK_SIZE)
        except OSError:
            self.close()
            raise
        if not chunk:
            self.close()
            raise StopIteration
        return chunk

    def read(self) -> bytes:
        """Consume the whole stream."""
        return b"".join(self)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._file.close()
        _delete(self._path, self.name)

    def __enter__(self) -> "ArtifactStream":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
