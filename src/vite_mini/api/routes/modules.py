from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, Response

from vite_mini.api.dependencies import get_dispatcher
from vite_mini.core.dispatcher import Dispatcher
from vite_mini.models import ResponseKind

router = APIRouter()


@router.get("/{request_path:path}")
async def serve(request_path: str, dispatcher: Dispatcher = Depends(get_dispatcher)) -> Response:
    result = await dispatcher.dispatch("/" + request_path)
    if result.kind is ResponseKind.RAW:
        assert result.file_path is not None
        return FileResponse(result.file_path)
    return Response(
        content=result.body,
        status_code=result.status_code,
        media_type=result.media_type,
        headers={"Cache-Control": "no-cache"},
    )
