"""
Playground routes

Each endpoint maps to one controller command and answers with the state
snapshot. Workflow failures are part of the state (phase `error`), not HTTP
errors; only commands issued in the wrong phase are rejected (409).
"""

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.responses import RedirectResponse, Response

from ..config import MAX_UPLOAD_SIZE
from ..core import get_logger, guess_content_type, ActionNotAllowed
from ..models import SourceFile, WorkflowStateResponse
from ..services.workflow import PlaygroundController

logger = get_logger(__name__, component="playground_routes")

router = APIRouter(tags=["playground"])

UPLOAD_CHUNK_SIZE = 1024 * 1024


def get_controller(request: Request) -> PlaygroundController:
    return request.app.state.controller


def _conflict(error: ActionNotAllowed) -> HTTPException:
    logger.info("Command rejected", extra={"action": error.action, "phase": error.phase})
    return HTTPException(status_code=409, detail=str(error))


@router.get("/state", response_model=WorkflowStateResponse)
async def get_state(controller: PlaygroundController = Depends(get_controller)):
    return controller.state.to_response()


@router.post("/upload", response_model=WorkflowStateResponse)
async def upload_image(
    file: UploadFile = File(...),
    controller: PlaygroundController = Depends(get_controller),
):
    """Select a file: upload it and move to ready (or error)."""
    size = 0
    chunks = []
    while True:
        chunk = await file.read(UPLOAD_CHUNK_SIZE)
        if not chunk:
            break
        size += len(chunk)
        if size > MAX_UPLOAD_SIZE:
            logger.warning("File too large", extra={
                "size": size,
                "max_size": MAX_UPLOAD_SIZE,
                "file_name": file.filename,
            })
            raise HTTPException(
                status_code=413,
                detail=f"File too large. Maximum size: {MAX_UPLOAD_SIZE / (1024 * 1024):.0f}MB",
            )
        chunks.append(chunk)

    file_name = file.filename or "upload"
    source = SourceFile(
        name=file_name,
        content=b"".join(chunks),
        content_type=file.content_type or guess_content_type(file_name),
    )
    try:
        state = await controller.select_file(source)
    except ActionNotAllowed as e:
        raise _conflict(e)
    return state.to_response()


@router.post("/generate", response_model=WorkflowStateResponse, status_code=202)
async def generate(controller: PlaygroundController = Depends(get_controller)):
    """Submit the job; polling continues in the background. Watch GET /state."""
    try:
        controller.start_generate()
    except ActionNotAllowed as e:
        raise _conflict(e)
    return controller.state.to_response()


@router.post("/reset", response_model=WorkflowStateResponse)
async def reset(controller: PlaygroundController = Depends(get_controller)):
    return controller.reset().to_response()


@router.get("/download")
async def download(controller: PlaygroundController = Depends(get_controller)):
    """The artifact as an attachment, or a redirect to it when fetching failed."""
    try:
        result = await controller.download()
    except ActionNotAllowed as e:
        raise _conflict(e)

    if result.fallback:
        return RedirectResponse(result.url, status_code=307)
    return Response(
        content=result.content,
        media_type=result.content_type or "image/jpeg",
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
    )
