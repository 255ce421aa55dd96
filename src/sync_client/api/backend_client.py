"""HTTP client for the sync backend."""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar
from urllib.parse import quote

import aiohttp
import backoff

from sync_client.config.api import APIConfig
from sync_client.data.models import DirectoryEntry, JobStatus, RemoteConfig, SyncRequest

from .error_handling import BackendError, ErrorCategory, ResourceNotFoundError, categorize_error

T = TypeVar("T")

# Module-level logger for the backoff handler
_module_logger = logging.getLogger(__name__)

# Transport failures worth retrying for idempotent reads
RETRYABLE_ERRORS = (aiohttp.ClientConnectionError, asyncio.TimeoutError)

NOT_FOUND_MARKER = "not found"


def _backoff_handler(details):
    """Log backoff attempts with error categorization."""
    exception = details["exception"]
    error_category = categorize_error(exception)
    _module_logger.warning(
        f"Backing off {details['wait']:.1f}s after {error_category.value} error "
        f"(attempt {details['tries']}/{APIConfig.MAX_RETRIES}): {exception}"
    )


class BackendClient:
    """
    Async client for the sync backend's JSON API.

    Every response is wrapped in a ``{success, data, error}`` envelope. A
    failure envelope or transport error is raised as ``BackendError``; a
    missing resource is raised as ``ResourceNotFoundError``. Reads are
    retried on transport errors, writes never are.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[aiohttp.ClientSession] = None,
        logger_obj: Optional[logging.Logger] = None,
        request_timeout: float = APIConfig.REQUEST_TIMEOUT,
    ):
        self.base_url = base_url or APIConfig.BASE_URL
        self.logger = logger_obj or logging.getLogger(__name__)
        self.request_timeout = request_timeout
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "BackendClient":
        self._get_session()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the underlying HTTP session if this client created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _request(
        self,
        method: str,
        route: str,
        params: Optional[Dict[str, str]] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send one request and unwrap the response envelope."""
        url = APIConfig.get_url(route, self.base_url)
        timeout = aiohttp.ClientTimeout(total=self.request_timeout)
        session = self._get_session()

        try:
            async with session.request(method, url, params=params, json=payload, timeout=timeout) as resp:
                if resp.status == 404:
                    raise ResourceNotFoundError(f"{method} {route} not found", status=404)
                resp.raise_for_status()
                body = await resp.json(content_type=None)
        except BackendError:
            raise
        except RETRYABLE_ERRORS:
            raise
        except (aiohttp.ClientError, ValueError) as e:
            error_category = categorize_error(e)
            self.logger.error(f"{method} {route} failed with {error_category.value} error: {e}")
            raise BackendError(str(e), error_category, getattr(e, "status", None)) from e

        return self._unwrap(body, route)

    def _unwrap(self, body: Any, route: str) -> Any:
        if not isinstance(body, dict) or "success" not in body:
            raise BackendError(f"Malformed response from {route}", ErrorCategory.DATA)

        if body.get("success"):
            return body.get("data")

        message = str(body.get("error") or "Unknown backend error")
        if NOT_FOUND_MARKER in message.lower():
            raise ResourceNotFoundError(message, status=None)
        raise BackendError(message, ErrorCategory.SERVER)

    @backoff.on_exception(
        backoff.expo,
        RETRYABLE_ERRORS,
        max_tries=APIConfig.MAX_RETRIES,
        on_backoff=_backoff_handler,
        jitter=backoff.full_jitter,
        base=APIConfig.RETRY_BASE_DELAY,
        max_value=APIConfig.RETRY_MAX_DELAY,
    )
    async def _get_with_retry(self, route: str, params: Optional[Dict[str, str]] = None) -> Any:
        return await self._request("GET", route, params=params)

    async def _get(self, route: str, params: Optional[Dict[str, str]] = None) -> Any:
        try:
            return await self._get_with_retry(route, params)
        except RETRYABLE_ERRORS as e:
            error_category = categorize_error(e)
            self.logger.error(f"GET {route} gave up after {APIConfig.MAX_RETRIES} attempts: {e}")
            raise BackendError(str(e) or error_category.value, error_category) from e

    async def _send(self, method: str, route: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        try:
            return await self._request(method, route, payload=payload)
        except RETRYABLE_ERRORS as e:
            error_category = categorize_error(e)
            self.logger.error(f"{method} {route} failed with {error_category.value} error: {e}")
            raise BackendError(str(e) or error_category.value, error_category) from e

    @staticmethod
    def _parse(data: Any, parser: Callable[[Any], T], route: str) -> T:
        try:
            return parser(data)
        except (KeyError, TypeError, ValueError) as e:
            raise BackendError(f"Unexpected payload from {route}: {e}", ErrorCategory.DATA) from e

    # Directory listings

    async def list_local_files(self, path: str) -> List[DirectoryEntry]:
        """List a directory of the backend host's local tree."""
        data = await self._get(APIConfig.LOCAL_FILES_PATH, params={"path": path})
        return self._parse(data, lambda items: [DirectoryEntry.from_dict(item) for item in items], APIConfig.LOCAL_FILES_PATH)

    async def list_remote_files(self, remote_id: str, path: str) -> List[DirectoryEntry]:
        """List a directory of a configured remote."""
        data = await self._get(APIConfig.REMOTE_FILES_PATH, params={"remote": remote_id, "path": path})
        return self._parse(data, lambda items: [DirectoryEntry.from_dict(item) for item in items], APIConfig.REMOTE_FILES_PATH)

    # Transfer jobs

    async def submit_sync(self, request: SyncRequest) -> str:
        """Launch a transfer job and return its id."""
        self.logger.info(f"Submitting sync {request.source_path} -> {request.remote_name}:{request.remote_path}")
        data = await self._send("POST", APIConfig.SYNC_PATH, payload=request.to_payload())
        return self._parse(data, _parse_job_id, APIConfig.SYNC_PATH)

    async def get_job_status(self, job_id: str) -> JobStatus:
        route = APIConfig.get_job_route(quote(job_id, safe=""))
        data = await self._get(route)
        return self._parse(data, JobStatus.from_dict, route)

    async def list_jobs(self) -> List[JobStatus]:
        data = await self._get(APIConfig.SYNC_PATH)
        return self._parse(data, lambda items: [JobStatus.from_dict(item) for item in items], APIConfig.SYNC_PATH)

    async def delete_job(self, job_id: str) -> str:
        """Delete a finished job and its server-side log."""
        route = APIConfig.get_job_route(quote(job_id, safe=""))
        data = await self._send("DELETE", route)
        return str(data or "")

    async def get_job_log(self, job_id: str) -> str:
        route = APIConfig.get_job_log_route(quote(job_id, safe=""))
        data = await self._get(route)
        return str(data or "")

    # Remote configurations

    async def list_configs(self) -> List[RemoteConfig]:
        data = await self._get(APIConfig.CONFIGS_PATH)
        return self._parse(data, lambda items: [RemoteConfig.from_dict(item) for item in items], APIConfig.CONFIGS_PATH)

    async def create_config(self, config: Dict[str, Any]) -> str:
        data = await self._send("POST", APIConfig.CONFIGS_PATH, payload=config)
        return str(data or "")

    async def delete_config(self, name: str) -> str:
        data = await self._send("DELETE", APIConfig.get_config_route(quote(name, safe="")))
        return str(data or "")

    async def persist_configs(self) -> str:
        data = await self._send("POST", APIConfig.CONFIGS_PERSIST_PATH)
        return str(data or "")


def _parse_job_id(value: Any) -> str:
    if not value:
        raise ValueError("missing job id")
    return str(value)
