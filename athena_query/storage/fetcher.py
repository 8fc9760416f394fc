"""
Result file download from S3
"""

import asyncio
import functools
import os
import stat
import tempfile
from pathlib import Path
from typing import Optional, Callable

from botocore.exceptions import BotoCoreError, ClientError

from ..core import InvalidResultUri, LocalIOError, ServiceError
from .locator import ResultAddress, ResultLocator

# Read size for the streaming body (1 MiB)
CHUNK_SIZE = 1024 * 1024

# Process umask, applied to new files since mkstemp always creates them 0600
_UMASK = os.umask(0)
os.umask(_UMASK)


class ObjectFetcher:
    """
    Downloads a result object to a local directory

    The body is streamed into a temporary file next to the target, then
    renamed over it, so the target is either the previous file or the
    complete new one.
    """

    def __init__(self, s3_client, locator: Optional[ResultLocator] = None,
                 progress: Optional[Callable[[str], None]] = print,
                 name: str = 's3', profile: Optional[str] = None):
        """
        Initialize fetcher

        Args:
            s3_client: boto3 S3 client
            locator: URI resolver used by fetch()
            progress: Sink for progress lines (None to silence)
            name: Prefix for progress lines
            profile: AWS profile, used in credential hints
        """
        self.s3_client = s3_client
        self.locator = locator or ResultLocator()
        self.progress = progress
        self.name = name
        self.profile = profile

    def _emit(self, message: str):
        if self.progress:
            self.progress(f"[{self.name}] {message}")

    async def fetch(self, uri: str, destination_dir: str) -> Path:
        """Resolve a result URI and download it"""
        address = self.locator.resolve(uri)
        return await self.download(address, destination_dir)

    async def download(self, address: ResultAddress, destination_dir: str) -> Path:
        """
        Download one object

        Args:
            address: Bucket and key to fetch
            destination_dir: Directory to write into (created if missing)

        Returns:
            Absolute path of the written file

        Raises:
            InvalidResultUri: Key has no file name
            LocalIOError: Directory could not be created or file not written
            ServiceError: S3 request failed
        """
        filename = address.filename
        if filename is None:
            raise InvalidResultUri(str(address), "could not extract a file name from the object key")

        target_dir = Path(destination_dir)
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise LocalIOError(str(target_dir), f"Failed to create output directory ({e})") from e

        target = (target_dir / filename).resolve()
        self._emit(f"Downloading {address} -> {target}")

        loop = asyncio.get_running_loop()
        size = await loop.run_in_executor(
            None, functools.partial(self._download_sync, address, target)
        )

        self._emit(f"Downloaded {size} bytes to {target}")
        return target

    def _download_sync(self, address: ResultAddress, target: Path) -> int:
        """Blocking download, run in the default executor"""
        try:
            response = self.s3_client.get_object(Bucket=address.bucket, Key=address.key)
        except (BotoCoreError, ClientError) as e:
            raise ServiceError('GetObject', e, profile=self.profile) from e

        body = response['Body']
        try:
            return self._write_atomically(body, target)
        finally:
            body.close()

    def _write_atomically(self, body, target: Path) -> int:
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix='.part',
                                            dir=str(target.parent))
        except OSError as e:
            raise LocalIOError(str(target), f"Failed to create output file ({e})") from e

        size = 0
        try:
            with os.fdopen(fd, 'wb') as f:
                for chunk in body.iter_chunks(CHUNK_SIZE):
                    f.write(chunk)
                    size += len(chunk)
            os.chmod(tmp_name, _target_mode(target))
            os.replace(tmp_name, target)
        except (BotoCoreError, ClientError) as e:
            _discard(tmp_name)
            raise ServiceError('GetObject', e, profile=self.profile) from e
        except OSError as e:
            _discard(tmp_name)
            raise LocalIOError(str(target), f"Failed to write data to file ({e})") from e

        return size


def _target_mode(target: Path) -> int:
    """Permission bits for the final file: keep an existing file's, else 0666 minus umask"""
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        return 0o666 & ~_UMASK


def _discard(path: str):
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
