"""
Transport - the four remote calls of the playground workflow

Each call returns parsed data or raises one of:
    NetworkUnavailable: no response was received
    RequestFailed: a non-2xx status was received
    MalformedResponse: the body could not be interpreted

The httpx.AsyncClient is injectable so tests can drive the transport with
httpx.MockTransport.
"""

from typing import Any, Dict, Optional, Tuple, Union
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from imagefx.config import API_BASE_URL, HTTP_TIMEOUT_SECONDS, USER_ID
from imagefx.core import (
    get_logger,
    MalformedResponse,
    NetworkUnavailable,
    RequestFailed,
)
from imagefx.models import JobStatusResponse, SubmitJobRequest, SubmitJobResponse

logger = get_logger(__name__, component="transport")

JSON_ACCEPT = "application/json, text/plain, */*"


class ApiTransport:
    """Async client for the image effect API and its storage"""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        base_url: str = API_BASE_URL,
        user_id: str = USER_ID,
        timeout: float = HTTP_TIMEOUT_SECONDS,
    ):
        self.base_url = base_url.rstrip("/")
        self.user_id = user_id
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "ApiTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            logger.warning("Request produced no response", extra={
                "method": method,
                "url": url,
                "error": str(e),
            })
            raise NetworkUnavailable(url, str(e)) from e

        if not response.is_success:
            logger.warning("Request rejected", extra={
                "method": method,
                "url": url,
                "status_code": response.status_code,
            })
            raise RequestFailed(response.status_code, response.reason_phrase, url=url)
        return response

    @staticmethod
    def _json_object(response: httpx.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponse(f"Response from {response.request.url} is not JSON") from e
        if not isinstance(data, dict):
            raise MalformedResponse(f"Expected a JSON object from {response.request.url}")
        return data

    async def request_upload_slot(self, file_name: str) -> str:
        """Ask for a writable URL for `file_name`; the body is the URL as text."""
        response = await self._send(
            "GET",
            f"{self.base_url}/get-emd-upload-url",
            params={"fileName": file_name},
        )
        write_url = response.text.strip()
        if not write_url:
            raise MalformedResponse("Upload slot response was empty")
        return write_url

    async def put_bytes(self, write_url: str, content: bytes, content_type: str) -> None:
        await self._send(
            "PUT",
            write_url,
            content=content,
            headers={"Content-Type": content_type},
        )

    async def submit_job(self, payload: Union[SubmitJobRequest, Dict[str, Any]]) -> SubmitJobResponse:
        body = payload.model_dump() if isinstance(payload, SubmitJobRequest) else payload
        response = await self._send(
            "POST",
            f"{self.base_url}/image-gen",
            json=body,
            headers={"Accept": JSON_ACCEPT, "Content-Type": "application/json"},
        )
        data = self._json_object(response)
        try:
            return SubmitJobResponse.model_validate(data)
        except ValidationError as e:
            raise MalformedResponse("Submission response has no job id") from e

    async def fetch_job_status(self, job_id: str) -> JobStatusResponse:
        response = await self._send(
            "GET",
            f"{self.base_url}/image-gen/{quote(self.user_id, safe='')}/{quote(job_id, safe='')}/status",
            headers={"Accept": JSON_ACCEPT},
        )
        return JobStatusResponse.model_validate(self._json_object(response))

    async def fetch_bytes(self, url: str) -> Tuple[bytes, str]:
        """Download `url`; returns the body and its content type."""
        response = await self._send("GET", url, follow_redirects=True)
        return response.content, response.headers.get("content-type", "application/octet-stream")
