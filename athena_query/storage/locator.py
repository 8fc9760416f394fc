"""
Result location parsing

Athena reports result locations as S3 URIs, but users paste console and
HTTPS links too. Three shapes are accepted, tried in order:

1. s3://bucket/key
2. https://bucket.s3.<region>.amazonaws.com/key   (virtual-hosted)
3. https://s3.<region>.amazonaws.com/bucket/key   (path-style)
"""

import re
from dataclasses import dataclass
from typing import Optional, Callable, Tuple
from urllib.parse import urlsplit, unquote, quote

from ..core import InvalidResultUri

STORE_SCHEMES = ('s3://', 's3a://', 's3n://')

# bucket label(s), then the S3 service label, then region/dualstack labels
VIRTUAL_HOST_PATTERN = re.compile(
    r'^(?P<bucket>.+?)\.s3(?:[.-][a-z0-9-]+)*\.amazonaws\.com(?:\.cn)?$'
)


@dataclass(frozen=True)
class ResultAddress:
    """
    Resolved S3 object location

    Attributes:
        bucket: S3 bucket name
        key: Object key inside the bucket
    """
    bucket: str
    key: str

    @property
    def filename(self) -> Optional[str]:
        """Last key segment, or None when the key ends with '/'"""
        name = self.key.rsplit('/', 1)[-1]
        return name or None

    def to_uri(self, style: str = 's3', region: Optional[str] = None) -> str:
        """
        Render the address in one of the supported shapes

        Args:
            style: 's3', 'virtual' or 'path'
            region: Region label for the HTTPS forms (global endpoint if None)

        Returns:
            URI string
        """
        host = f"s3.{region}.amazonaws.com" if region else "s3.amazonaws.com"
        if style == 's3':
            return f"s3://{self.bucket}/{self.key}"
        if style == 'virtual':
            return f"https://{self.bucket}.{host}/{quote(self.key)}"
        if style == 'path':
            return f"https://{host}/{self.bucket}/{quote(self.key)}"
        raise ValueError(f"Unknown URI style: {style}")

    def __str__(self) -> str:
        return self.to_uri('s3')


def _match_store_scheme(uri: str) -> Optional[ResultAddress]:
    """s3://bucket/key"""
    for scheme in STORE_SCHEMES:
        if uri.startswith(scheme):
            remainder = uri[len(scheme):]
            if '/' not in remainder:
                raise InvalidResultUri(uri, "missing object key")
            bucket, key = remainder.split('/', 1)
            return ResultAddress(bucket, key)
    return None


def _match_virtual_hosted(uri: str) -> Optional[ResultAddress]:
    """https://bucket.s3.region.amazonaws.com/key"""
    parts = urlsplit(uri)
    if parts.scheme not in ('http', 'https') or not parts.hostname:
        return None
    match = VIRTUAL_HOST_PATTERN.match(parts.hostname)
    if not match:
        return None
    return ResultAddress(match.group('bucket'), unquote(parts.path.lstrip('/')))


def _match_path_style(uri: str) -> Optional[ResultAddress]:
    """https://s3.region.amazonaws.com/bucket/key"""
    parts = urlsplit(uri)
    if parts.scheme not in ('http', 'https') or not parts.hostname:
        return None
    segments = parts.path.lstrip('/').split('/')
    bucket, key_segments = segments[0], segments[1:]
    return ResultAddress(bucket, unquote('/'.join(key_segments)))


# Priority order matters: virtual-hosted before path-style
URI_SHAPES: Tuple[Callable[[str], Optional[ResultAddress]], ...] = (
    _match_store_scheme,
    _match_virtual_hosted,
    _match_path_style,
)


def resolve(uri: str) -> ResultAddress:
    """
    Parse a result location URI into bucket and key

    Args:
        uri: S3 or HTTPS URI

    Returns:
        ResultAddress

    Raises:
        InvalidResultUri: No shape matched, or bucket/key is empty
    """
    uri = uri.strip()
    for shape in URI_SHAPES:
        address = shape(uri)
        if address is None:
            continue
        if not address.bucket:
            raise InvalidResultUri(uri, "empty bucket name")
        if not address.key:
            raise InvalidResultUri(uri, "empty object key")
        return address
    raise InvalidResultUri(uri, "not an S3 or HTTPS S3 URL")


class ResultLocator:
    """Resolves result locations; a thin object wrapper around resolve()"""

    def resolve(self, uri: str) -> ResultAddress:
        return resolve(uri)
