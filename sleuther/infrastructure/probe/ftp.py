"""FTP adapter for the Prober port.

ftplib is blocking, so each probe runs in a worker thread. FTP replies are
mapped onto the HTTP status taxonomy the link checker classifies.
"""

import asyncio
import ftplib
import logging
from urllib.parse import unquote, urlsplit

from sleuther.domain.linkcheck.model.value import ProbeResponse
from sleuther.domain.linkcheck.port.prober import Prober
from sleuther.domain.shared.error import ProbeFailedError

logger = logging.getLogger(__name__)

FTP_FILE_UNAVAILABLE = "550"


def _reply_code(error: ftplib.Error) -> str:
    return str(error)[:3]


class FtpProber(Prober):
    """Checks that an FTP path exists using an anonymous session."""

    def __init__(self, timeout: float = 10.0) -> None:
        self._timeout = timeout

    async def probe(self, url: str) -> ProbeResponse:
        return await asyncio.to_thread(self._probe_blocking, url)

    def _probe_blocking(self, url: str) -> ProbeResponse:
        try:
            parts = urlsplit(url)
            host = parts.hostname
            port = parts.port or 21
        except ValueError as e:
            raise ProbeFailedError(url, f"invalid URL: {e}") from e
        if not host:
            raise ProbeFailedError(url, "missing host")
        path = unquote(parts.path) or "/"

        try:
            with ftplib.FTP(timeout=self._timeout) as ftp:
                ftp.connect(host, port)
                ftp.login(unquote(parts.username or "anonymous"), unquote(parts.password or ""))
                return ProbeResponse(status_code=self._check_path(ftp, path))
        except ftplib.error_temp as e:
            # 4xx replies: transient, the checker retries them as errors
            logger.debug(f"FTP transient failure for {url}: {e}")
            return ProbeResponse(status_code=503)
        except ftplib.error_perm as e:
            if _reply_code(e) == FTP_FILE_UNAVAILABLE:
                return ProbeResponse(status_code=404)
            return ProbeResponse(status_code=403)
        except (ftplib.Error, OSError, EOFError) as e:
            raise ProbeFailedError(url, f"{type(e).__name__}: {e}") from e

    def _check_path(self, ftp: ftplib.FTP, path: str) -> int:
        if path.endswith("/"):
            ftp.cwd(path)
            return 200
        try:
            ftp.voidcmd("TYPE I")
            ftp.size(path)
            return 200
        except ftplib.error_perm as e:
            if _reply_code(e) != FTP_FILE_UNAVAILABLE:
                raise
        # SIZE fails on directories and on servers without the command
        if ftp.nlst(path):
            return 200
        return 404
