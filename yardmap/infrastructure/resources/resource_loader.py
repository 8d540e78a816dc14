# yardmap/infrastructure/resources/resource_loader.py
"""
Loader for the region definition resource.

The resource is static: a JSON file next to the map or served over HTTP.
It is fetched once; failures are reported, never retried.
"""
import os
from typing import Optional
from urllib.parse import urlparse, unquote
from urllib.request import url2pathname

import requests

from yardmap.domain.common.errors import ResourceError
from yardmap.domain.common.result import Result
from yardmap.domain.services.i_logger_service import ILoggerService
from yardmap.domain.services.i_resource_loader_service import IResourceLoaderService

LOCAL_ACCESS_HINT = (
    "Serve the map folder through a local web server (for example "
    "'python -m http.server') or use a relative path such as 'interactiveAreas.json'."
)


def file_url_to_path(url: str) -> str:
    """file:///C:/maps/areas.json -> C:/maps/areas.json on Windows, /maps/... elsewhere."""
    parsed = urlparse(url)
    path = unquote(parsed.path)
    if len(path) > 2 and path[0] == "/" and path[2] == ":":
        return path[1:]
    return url2pathname(path) if os.name == "nt" else path


class RequestsResourceLoader(IResourceLoaderService):
    """Fetches http(s) resources with requests and reads local files directly."""

    def __init__(self, logger: ILoggerService, timeout_seconds: float = 10.0,
                 session: Optional[requests.Session] = None):
        self.logger = logger
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def fetch_text(self, location: str) -> Result[str]:
        if location.startswith(("http://", "https://")):
            return self._fetch_http(location)

        path = file_url_to_path(location) if location.startswith("file://") else location
        return self._read_file(path)

    def _fetch_http(self, url: str) -> Result[str]:
        self.logger.debug(f"Fetching {url}", timeout=self.timeout_seconds)
        try:
            response = self.session.get(url, timeout=self.timeout_seconds)
        except requests.RequestException as e:
            error = ResourceError(
                message=f"Request failed: {e}",
                details={"location": url},
                inner_error=e
            )
            self.logger.error(str(error))
            return Result.fail(error)

        if not response.ok:
            error = ResourceError(
                message=f"Response status: {response.status_code}",
                details={"location": url, "status": response.status_code}
            )
            self.logger.error(str(error))
            return Result.fail(error)

        if response.encoding is None:
            response.encoding = "utf-8"
        return Result.ok(response.text)

    def _read_file(self, path: str) -> Result[str]:
        resolved = os.path.abspath(path)
        try:
            with open(resolved, "r", encoding="utf-8-sig") as f:
                return Result.ok(f.read())
        except OSError as e:
            error = ResourceError(
                message=f"Unable to read {resolved}: {e.strerror or e}",
                details={"location": resolved, "hint": LOCAL_ACCESS_HINT},
                inner_error=e
            )
            self.logger.error(str(error))
            self.logger.warning(LOCAL_ACCESS_HINT)
            return Result.fail(error)
        except UnicodeDecodeError as e:
            error = ResourceError(
                message=f"Unable to read {resolved}: not valid UTF-8 ({e.reason} at byte {e.start})",
                details={"location": resolved},
                inner_error=e
            )
            self.logger.error(str(error))
            return Result.fail(error)
