from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from imagefx.core import NetworkUnavailable
from imagefx.main import app
from imagefx.models import WorkflowPhase
from imagefx.routes.playground import get_controller
from imagefx.services.use_cases import GenerationUseCase, UploadUseCase
from imagefx.services.workflow import PlaygroundController, WorkflowState, WorkflowStateMachine

ARTIFACT = "https://x/out.jpg"


def make_controller(transport):
    return PlaygroundController(
        transport,
        upload=UploadUseCase(transport, content_base="https://cdn.test"),
        generation=GenerationUseCase(transport, poll_interval=0, sleep=AsyncMock()),
    )


@pytest.fixture
def controller(fake_transport):
    return make_controller(fake_transport)


@pytest.fixture
def client(controller):
    app.dependency_overrides[get_controller] = lambda: controller
    with TestClient(app) as client:
        yield client
        client.portal.call(controller.shutdown)
    app.dependency_overrides.clear()


def start_in(controller, state):
    controller.state_machine = WorkflowStateMachine(state)


def png_upload(content=b"\x89PNG data"):
    return {"file": ("photo.png", content, "image/png")}


def complete_state():
    return WorkflowState(
        phase=WorkflowPhase.COMPLETE,
        uploaded_reference="https://cdn.test/a.png",
        artifact_reference=ARTIFACT,
    )


# --- State / health ---
def test_initial_state(client):
    response = client.get("/state")

    assert response.status_code == 200
    data = response.json()
    assert data["phase"] == "idle"
    assert data["action_label"] == "GENERATE MUGSHOT"
    assert data["can_generate"] is False
    assert data["can_download"] is False


def test_health_and_root(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert "version" in client.get("/").json()


def test_request_id_echoed(client):
    response = client.get("/state", headers={"X-Request-ID": "req-1"})

    assert response.headers["X-Request-ID"] == "req-1"


# --- Upload ---
def test_upload_makes_ready(client, fake_transport):
    response = client.post("/upload", files=png_upload())

    assert response.status_code == 200
    data = response.json()
    assert data["phase"] == "ready"
    assert data["status_text"] == "READY"
    assert data["can_generate"] is True
    assert data["uploaded_reference"].startswith("https://cdn.test/")
    fake_transport.put_bytes.assert_awaited_once()


def test_upload_failure_is_reported_in_state(client, fake_transport):
    fake_transport.put_bytes.side_effect = NetworkUnavailable("https://storage.test/put")

    response = client.post("/upload", files=png_upload())

    assert response.status_code == 200
    data = response.json()
    assert data["phase"] == "error"
    assert "transfer" in data["last_error"]
    assert data["uploaded_reference"] is None


def test_upload_non_image_is_reported_in_state(client, fake_transport):
    response = client.post("/upload", files={"file": ("notes.txt", b"hello", "text/plain")})

    assert response.json()["phase"] == "error"
    fake_transport.request_upload_slot.assert_not_awaited()


def test_upload_too_large(client, fake_transport):
    with patch("imagefx.routes.playground.MAX_UPLOAD_SIZE", 4):
        response = client.post("/upload", files=png_upload(b"0123456789"))

    assert response.status_code == 413
    fake_transport.request_upload_slot.assert_not_awaited()


def test_upload_rejected_while_processing(client, controller):
    start_in(controller, WorkflowState(
        phase=WorkflowPhase.PROCESSING,
        uploaded_reference="https://cdn.test/a.png",
        generation=1,
    ))

    response = client.post("/upload", files=png_upload())

    assert response.status_code == 409
    assert "processing" in response.json()["detail"]


# --- Generate ---
def test_generate_accepted(client):
    client.post("/upload", files=png_upload())

    response = client.post("/generate")

    assert response.status_code == 202
    data = response.json()
    assert data["phase"] == "submitting"
    assert data["can_generate"] is False
    assert data["action_label"] == "SUBMITTING JOB..."


def test_generate_without_upload_conflicts(client, fake_transport):
    response = client.post("/generate")

    assert response.status_code == 409
    fake_transport.submit_job.assert_not_awaited()


# --- Reset ---
def test_reset_returns_idle(client, controller):
    start_in(controller, complete_state())

    response = client.post("/reset")

    assert response.status_code == 200
    data = response.json()
    assert data["phase"] == "idle"
    assert data["artifact_reference"] is None
    assert data["uploaded_reference"] is None


# --- Download ---
def test_download_attachment(client, controller, fake_transport):
    start_in(controller, complete_state())

    response = client.get("/download")

    assert response.status_code == 200
    assert response.content == b"jpeg-bytes"
    assert response.headers["content-type"] == "image/jpeg"
    assert response.headers["content-disposition"].startswith('attachment; filename="mugshot_result_')
    requested = fake_transport.fetch_bytes.await_args.args[0]
    assert requested.startswith(f"{ARTIFACT}?t=")


def test_download_falls_back_to_redirect(client, controller, fake_transport):
    start_in(controller, complete_state())
    fake_transport.fetch_bytes.side_effect = NetworkUnavailable(ARTIFACT)

    response = client.get("/download", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == ARTIFACT


def test_download_without_artifact_conflicts(client):
    response = client.get("/download")

    assert response.status_code == 409
