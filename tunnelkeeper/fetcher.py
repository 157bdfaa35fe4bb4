"""
Release archive download.

Streams a remote file to disk over HTTPS. Redirects (301/302) are followed
by an explicit bounded loop rather than by the HTTP client, so a runaway
redirect chain fails with TooManyRedirects.
"""

import logging
from pathlib import Path

import httpx

from .errors import DownloadError, TooManyRedirects

logger = logging.getLogger(__name__)

REDIRECT_CODES = (301, 302)


def _remove_partial(path: Path):
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove partial download {path}: {e}")


async def _download(client: httpx.AsyncClient, url: str, destination: Path, max_redirects: int):
    current = httpx.URL(url)
    redirects = 0

    while True:
        async with client.stream("GET", current) as response:
            if response.status_code in REDIRECT_CODES:
                location = response.headers.get("location")
                if not location:
                    raise DownloadError(
                        f"Redirect {response.status_code} without Location header",
                        status_code=response.status_code,
                    )
                redirects += 1
                if redirects > max_redirects:
                    raise TooManyRedirects(
                        f"Exceeded {max_redirects} redirects",
                        status_code=response.status_code,
                    )
                current = current.join(location)
                logger.debug(f"Following redirect to {current}")
                continue

            if not response.is_success:
                raise DownloadError(
                    f"Download failed: HTTP {response.status_code}",
                    status_code=response.status_code,
                )

            # The file only exists once a 2xx response is being written
            with open(destination, "wb") as out:
                async for chunk in response.aiter_bytes():
                    out.write(chunk)
            return


async def fetch(
    url: str,
    destination: Path,
    *,
    client: httpx.AsyncClient = None,
    max_redirects: int = 5,
    timeout: float | None = None,
) -> Path:
    """
    Download ``url`` into ``destination``.

    Returns the destination path once the file has been written and closed.
    Raises DownloadError on a bad status, a network failure or an I/O error,
    removing any partially written file first.
    """
    destination = Path(destination)
    logger.info("Downloading release archive...")

    try:
        if client is not None:
            await _download(client, url, destination, max_redirects)
        else:
            async with httpx.AsyncClient(follow_redirects=False, timeout=timeout) as own_client:
                await _download(own_client, url, destination, max_redirects)
    except DownloadError:
        _remove_partial(destination)
        raise
    except httpx.HTTPError as e:
        _remove_partial(destination)
        raise DownloadError(f"Network error: {e}") from e
    except OSError as e:
        _remove_partial(destination)
        raise DownloadError(f"Could not write {destination}: {e}") from e

    logger.info(f"Release archive downloaded ({destination.stat().st_size} bytes)")
    return destination
