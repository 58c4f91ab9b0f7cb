"""
Temporary video server service.

Serves an in-memory video buffer over HTTP on an OS-assigned local port so the
headless browser can load it into a <video> element. The server lives for one
thumbnail run only and runs uvicorn on the caller's event loop.
"""

import asyncio
import logging
import socket
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Union

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response


logger = logging.getLogger("thumbnailer")


def create_video_app(video_bytes: bytes, mime_type: str) -> FastAPI:
    """
    Build the FastAPI app that answers every path with the full video buffer.

    No range support and no request differentiation: GET/HEAD on any path
    returns the same bytes with permissive CORS headers.
    """
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)

    app.add_middleware(CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.api_route("/{path:path}", methods=["GET", "HEAD"])
    async def serve_video(path: str) -> Response:
        return Response(
            content=video_bytes,
            media_type=mime_type,
            headers={"Access-Control-Allow-Origin": "*"},
        )

    return app


class VideoServer:
    """
    One-shot uvicorn server bound to port 0.

    start() binds and waits until uvicorn is accepting connections.
    stop() is synchronous and idempotent; wait_closed() awaits the shutdown.
    """

    def __init__(self, video_bytes: bytes, mime_type: str, host: str = "127.0.0.1"):
        self.app = create_video_app(video_bytes, mime_type)
        self.mime_type = mime_type
        self.host = host
        self.port: Optional[int] = None
        self._socket: Optional[socket.socket] = None
        self._server: Optional[uvicorn.Server] = None
        self._task: Optional[asyncio.Task] = None
        self._stopped = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done() and not self._stopped

    def _bind(self) -> socket.socket:
        family = socket.AF_INET6 if ":" in self.host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((self.host, 0))
        except OSError:
            sock.close()
            raise
        sock.set_inheritable(True)
        return sock

    async def start(self) -> int:
        """Bind to an OS-assigned port, start serving and return the port."""
        if self._task is not None or self._stopped:
            raise RuntimeError("VideoServer instances can only be started once")

        self._socket = self._bind()
        self.port = self._socket.getsockname()[1]

        config = uvicorn.Config(
            self.app,
            host=self.host,
            port=self.port,
            log_config=None,
            log_level="warning",
            access_log=False,
            lifespan="off",
            timeout_graceful_shutdown=5,
        )
        self._server = uvicorn.Server(config)
        self._task = asyncio.create_task(self._server.serve(sockets=[self._socket]))

        while not self._server.started:
            if self._task.done():
                cause = None if self._task.cancelled() else self._task.exception()
                raise RuntimeError(
                    f"Temporary video server failed to start on {self.host}:{self.port}"
                ) from cause
            await asyncio.sleep(0.01)

        logger.debug(f"Temporary video server listening on {self.host}:{self.port}")
        return self.port

    def url_for(self, extension: str = "", host: str = "localhost") -> str:
        """URL of the served video, e.g. http://localhost:54321/video.mp4"""
        if self.port is None:
            raise RuntimeError("VideoServer has not been started")
        return f"http://{host}:{self.port}/video{extension}"

    def stop(self) -> bool:
        """
        Stop accepting connections and ask uvicorn to shut down.

        Returns True on the first call and False on every later call.
        """
        if self._stopped:
            return False
        self._stopped = True

        if self._server is not None and self._task is not None and not self._task.done():
            self._server.should_exit = True
            # Close listeners now; uvicorn's own shutdown tolerates closed servers
            for server in getattr(self._server, "servers", []):
                server.close()
        elif self._socket is not None:
            self._socket.close()

        return True

    async def wait_closed(self) -> None:
        """Wait for uvicorn to finish its shutdown after stop()."""
        if self._task is not None and not self._task.done():
            await self._task


@asynccontextmanager
async def serve_video(
    video_bytes: bytes,
    mime_type: str,
    host: str = "127.0.0.1",
    log: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None
) -> AsyncIterator[VideoServer]:
    """
    Run a VideoServer for the duration of the block.

    The server is stopped exactly once on every exit path, success or failure.

    Example:
        >>> async with serve_video(data, "video/mp4") as server:
        ...     url = server.url_for(".mp4")
    """
    log = log or logger
    server = VideoServer(video_bytes, mime_type, host=host)
    try:
        await server.start()
        yield server
    except BaseException:
        await _shutdown(server, log, keep_error=True)
        raise
    else:
        await _shutdown(server, log, keep_error=False)


async def _shutdown(
    server: VideoServer,
    log: Union[logging.Logger, logging.LoggerAdapter],
    keep_error: bool
) -> None:
    if not server.stop():
        return
    try:
        await server.wait_closed()
    except Exception as e:
        if not keep_error:
            raise
        # The error raised inside the block takes precedence
        log.warning(f"⚠ Temporary server shutdown error: {e}")
    # Nothing was listening when binding failed
    if server.port is not None:
        log.info("🛑 Temporary server stopped")
