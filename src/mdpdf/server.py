"""FastAPI live-preview server.

Watches a markdown file, rebuilds its PDF on change and pushes build status
to connected browser tabs over server-sent events.
"""

import asyncio
import contextlib
import html
import json
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncIterator, Literal

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import FileResponse, HTMLResponse, StreamingResponse
from pydantic import BaseModel

from .config import PreviewSettings
from .convert import ConversionError, convert_markdown_to_pdf
from .logger import log_context, logger

# Seconds between keep-alive comments on an idle event stream
KEEPALIVE_SECONDS = 15.0


# --- Response Models ---


class BuildEvent(BaseModel):
    type: Literal["built", "error"]
    build_count: int | None = None
    output_path: str | None = None
    timestamp: str | None = None
    message: str | None = None


class HealthResponse(BaseModel):
    ok: bool
    build_count: int
    input_path: str
    output_path: str
    error: str | None = None


# --- Build State ---


class PreviewState:
    """Build bookkeeping shared by the watcher and the HTTP handlers.

    Builds are serialized by a lock, so the output file has one writer at
    a time. A failed build keeps the previous PDF in place.
    """

    def __init__(self, settings: PreviewSettings):
        self.settings = settings
        self.build_count = 0
        self.error: str | None = None
        self._subscribers: set[asyncio.Queue] = set()
        self._lock = asyncio.Lock()
        self._pending: asyncio.Task | None = None
        self._building: asyncio.Task | None = None

    @property
    def input_path(self) -> Path:
        return self.settings.input_path

    @property
    def output_path(self) -> Path:
        return self.settings.output_path

    def current_event(self) -> BuildEvent:
        if self.error is not None:
            return BuildEvent(type="error", message=self.error)
        return BuildEvent(
            type="built",
            build_count=self.build_count,
            output_path=str(self.output_path),
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers.discard(queue)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, event: BuildEvent) -> None:
        for queue in self._subscribers:
            queue.put_nowait(event)

    async def build(self) -> BuildEvent:
        """Run one conversion in a worker thread and broadcast the outcome."""
        async with self._lock:
            try:
                with log_context(build=self.build_count + 1):
                    await asyncio.to_thread(
                        convert_markdown_to_pdf, self.input_path, self.output_path
                    )
            except ConversionError as e:
                self.error = e.message
                logger.error("build failed", error=e.message)
            except Exception as e:
                self.error = str(e) or type(e).__name__
                logger.exception("build crashed", error=self.error)
            else:
                self.error = None
                self.build_count += 1
                logger.info(
                    "build complete",
                    build_count=self.build_count,
                    output_path=str(self.output_path),
                )
            event = self.current_event()
            self.publish(event)
            return event

    def schedule_build(self) -> asyncio.Task:
        """Debounce: restart the countdown to the next build."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = asyncio.create_task(self._delayed_build())
        return self._pending

    async def _delayed_build(self) -> None:
        await asyncio.sleep(self.settings.debounce_seconds)
        # Once started, a build runs to completion even if superseded
        self._building = asyncio.create_task(self.build())
        await asyncio.shield(self._building)

    def _input_mtime(self) -> int | None:
        try:
            return self.input_path.stat().st_mtime_ns
        except OSError:
            return None

    async def watch(self) -> None:
        """Poll the input file and schedule a rebuild whenever it changes."""
        last = self._input_mtime()
        while True:
            await asyncio.sleep(self.settings.poll_interval)
            current = self._input_mtime()
            if current != last:
                last = current
                logger.debug("input changed", input_path=str(self.input_path))
                self.schedule_build()

    async def close(self) -> None:
        """Drop any pending debounce and wait for a build already running."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._pending
        if self._building is not None:
            await self._building


def _sse(event: BuildEvent) -> str:
    return f"data: {json.dumps(event.model_dump(exclude_none=True))}\n\n"


async def event_stream(state: PreviewState, request: Request) -> AsyncIterator[str]:
    """Yield the current build state, then every broadcast event, as SSE frames.

    Ends once the client disconnects.
    """
    queue = state.subscribe()
    try:
        yield _sse(state.current_event())
        while not await request.is_disconnected():
            try:
                event = await asyncio.wait_for(queue.get(), KEEPALIVE_SECONDS)
            except asyncio.TimeoutError:
                yield ": keep-alive\n\n"
                continue
            yield _sse(event)
    finally:
        state.unsubscribe(queue)


def _preview_html(state: PreviewState) -> str:
    input_path = html.escape(str(state.input_path))
    output_path = html.escape(str(state.output_path))
    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>Markdown PDF Live Preview</title>
  <style>
    body {{ margin: 0; min-height: 100vh; display: grid; grid-template-rows: auto 1fr;
           font-family: ui-sans-serif, -apple-system, "Segoe UI", sans-serif;
           color: #1f1b17; background: #f7f4ef; }}
    header {{ padding: 0.9rem 1.1rem; border-bottom: 1px solid #d6cec3; background: #fffdf8; }}
    .title {{ font-size: 1rem; font-weight: 700; margin: 0; }}
    .meta {{ margin: 0; color: #6a6259; font-size: 0.88rem; display: flex; gap: 1rem; flex-wrap: wrap; }}
    .status.ok {{ color: #1565c0; font-weight: 700; }}
    .status.error {{ color: #b00020; font-weight: 700; }}
    main {{ padding: 1rem; display: flex; justify-content: center; }}
    iframe {{ border: 1px solid #d6cec3; border-radius: 14px; width: min(1100px, 100%);
              min-height: 72vh; background: white; }}
  </style>
</head>
<body>
  <header>
    <h1 class="title">Markdown to PDF Live Preview</h1>
    <p class="meta">
      <span>Input: <code>{input_path}</code></span>
      <span>Output: <code>{output_path}</code></span>
      <span id="status" class="status ok">Connected</span>
    </p>
  </header>
  <main>
    <iframe id="preview" src="/pdf?t={state.build_count}"></iframe>
  </main>
  <script>
    const preview = document.getElementById("preview");
    const status = document.getElementById("status");
    const events = new EventSource("/events");

    events.onmessage = (event) => {{
      let payload;
      try {{
        payload = JSON.parse(event.data);
      }} catch (error) {{
        status.className = "status error";
        status.textContent = "Preview event parse failed";
        return;
      }}
      if (payload.type === "built") {{
        status.className = "status ok";
        status.textContent = "Built " + new Date(payload.timestamp).toLocaleTimeString();
        preview.src = "/pdf?t=" + Date.now();
      }} else if (payload.type === "error") {{
        status.className = "status error";
        status.textContent = "Build error: " + payload.message;
      }}
    }};

    events.onerror = () => {{
      status.className = "status error";
      status.textContent = "Disconnected from preview server";
    }};
  </script>
</body>
</html>"""


def create_app(settings: PreviewSettings) -> FastAPI:
    """Create a preview app bound to one input/output pair."""
    state = PreviewState(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "starting preview server",
            input_path=str(settings.input_path),
            output_path=str(settings.output_path),
        )
        await state.build()
        watcher = asyncio.create_task(state.watch())

        yield

        watcher.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await watcher
        await state.close()
        logger.info("preview server shutdown")

    app = FastAPI(
        title="Markdown PDF Live Preview",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.preview = state

    @app.get("/", response_class=HTMLResponse)
    async def index():
        return HTMLResponse(_preview_html(state))

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(
            ok=state.error is None,
            build_count=state.build_count,
            input_path=str(state.input_path),
            output_path=str(state.output_path),
            error=state.error,
        )

    @app.get("/pdf")
    async def pdf():
        if not state.output_path.is_file():
            raise HTTPException(status_code=404, detail="PDF output not found yet.")
        return FileResponse(
            state.output_path,
            media_type="application/pdf",
            headers={"Cache-Control": "no-store, max-age=0"},
        )

    @app.get("/events")
    async def events(request: Request):
        return StreamingResponse(
            event_stream(state, request),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache, no-transform", "X-Accel-Buffering": "no"},
        )

    return app
