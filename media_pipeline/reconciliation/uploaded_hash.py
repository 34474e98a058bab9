import httpx

from media_pipeline.logging.logger import Log
from media_pipeline.media.exceptions import UploadedHashError
from media_pipeline.processing.hashing import sha256_hex


class UploadedHashFetcher:
    """Downloads a hosted file and hashes the bytes the server actually stores."""

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = httpx.Timeout(timeout_seconds)
        self._transport = transport

    async def fetch(self, url: str) -> str:
        """Return the SHA-256 hex digest of the body served at url.

        Raises:
            UploadedHashError: on transport errors or a non-2xx response.
        """
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise UploadedHashError(f"Could not fetch {url}: {exc}") from exc

        Log.debug(f"Fetched {len(response.content)} bytes from {url} for hashing")
        return sha256_hex(response.content)
