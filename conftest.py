from unittest.mock import AsyncMock, MagicMock

import pytest

from imagefx.config import USER_ID
from imagefx.models import JobStatusResponse, SubmitJobResponse
from imagefx.services.transport import ApiTransport


@pytest.fixture
def fake_transport():
    """ApiTransport stand-in with every remote call as an AsyncMock"""
    transport = MagicMock(spec=ApiTransport)
    transport.user_id = USER_ID
    transport.base_url = "https://api.test"
    transport.request_upload_slot = AsyncMock(return_value="https://storage.test/put?sig=abc")
    transport.put_bytes = AsyncMock(return_value=None)
    transport.submit_job = AsyncMock(return_value=SubmitJobResponse.model_validate({"jobId": "J1"}))
    transport.fetch_job_status = AsyncMock(
        return_value=JobStatusResponse.model_validate(
            {"status": "completed", "result": {"image": "https://x/out.jpg"}}
        )
    )
    transport.fetch_bytes = AsyncMock(return_value=(b"jpeg-bytes", "image/jpeg"))
    return transport
