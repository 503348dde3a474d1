"""
Consultas en vivo expuestas como Server-Sent Events.
"""
import asyncio
from typing import AsyncIterator, Awaitable, Callable
from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from photovault.services import LiveQuery, QueryService
from photovault.api.dependencies import get_query_service

router = APIRouter(prefix="/live", tags=["Live"])

KEEPALIVE_SECONDS = 15.0

async def live_events(
        live: LiveQuery,
        is_disconnected: Callable[[], Awaitable[bool]],
        keepalive: float = KEEPALIVE_SECONDS
    ) -> AsyncIterator[str]:
    """
    Traduce una LiveQuery a eventos SSE: el valor actual y después cada cambio.

    Las emisiones llegan desde el hilo del escritor, así que se pasan al event loop
    con call_soon_threadsafe. La suscripción se cancela al cerrar el generador.

    Args:
        live (LiveQuery): Consulta a observar; sus valores son modelos pydantic.
        is_disconnected (Callable[[], Awaitable[bool]]): Indica si el cliente se fue.
        keepalive (float): Segundos sin cambios antes de enviar un comentario.

    Yields:
        str: Eventos con formato 'data: <json>'.
    """
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def push(value) -> None:
        loop.call_soon_threadsafe(queue.put_nowait, value)

    subscription = await asyncio.to_thread(live.subscribe, push)
    try:
        while not await is_disconnected():
            try:
                value = await asyncio.wait_for(queue.get(), timeout=keepalive)
            except asyncio.TimeoutError:
                yield ": keep-alive\n\n"
                continue
            yield f"data: {value.model_dump_json()}\n\n"
    finally:
        subscription.cancel()

def _event_stream(request: Request, live: LiveQuery) -> StreamingResponse:
    return StreamingResponse(
        live_events(live, request.is_disconnected),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"}
    )

@router.get("/albums")
async def stream_albums(request: Request, query_service: QueryService = Depends(get_query_service)):
    """Lista de álbumes visibles cada vez que cambia."""
    return _event_stream(request, query_service.live_albums())

@router.get("/albums/{album_id}/photos")
async def stream_album_photos(
        album_id: int,
        request: Request,
        query_service: QueryService = Depends(get_query_service)
    ):
    return _event_stream(request, query_service.live_album_photos(album_id))

@router.get("/bin")
async def stream_bin(request: Request, query_service: QueryService = Depends(get_query_service)):
    return _event_stream(request, query_service.live_bin())

@router.get("/favorites")
async def stream_favorites(request: Request, query_service: QueryService = Depends(get_query_service)):
    return _event_stream(request, query_service.live_favorites())
