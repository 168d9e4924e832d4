"""
Dev Mode Bridge — 與本機 Figma Dev Mode 輔助程式溝通

請求以 POST 送到 /messages，回應由 server-sent event stream 回傳，以 id 對應。
多個請求可同時進行；每個請求 30 秒逾時，連線 5 秒逾時。
環境沒有 event stream 時（factory 為 None），connect 直接丟 BridgeUnavailable。
"""

import asyncio
import json
import threading
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Protocol

import requests
import structlog

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:3845"
PROTOCOL_VERSION = "2.0"


class BridgeError(Exception):
    """Bridge 錯誤基底."""


class BridgeUnavailable(BridgeError):
    pass


class NotConnected(BridgeError):
    pass


class RequestTimeout(BridgeError, TimeoutError):
    pass


class RemoteError(BridgeError):
    """輔助程式回傳 error 物件；訊息原樣保留."""

    def __init__(self, message: str, error: Optional[dict] = None):
        super().__init__(message)
        self.error = error or {}


class ClientClosed(BridgeError):
    pass


class BridgeState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


# ─── event stream ───

class EventSource(Protocol):
    """SSE 來源：start 後以 callback 回報 open / message / error；callback 必須在 event loop 執行緒呼叫。"""

    def start(
        self,
        on_open: Callable[[], None],
        on_message: Callable[[str], None],
        on_error: Callable[[BaseException], None],
    ) -> None: ...

    def close(self) -> None: ...


EventSourceFactory = Callable[[str], EventSource]


def iter_sse_data(lines: Iterable[Any]) -> Iterator[str]:
    """text/event-stream 行 → 每個事件的 data 文字（多行 data 以換行合併）."""
    buffer = []
    for raw in lines:
        line = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        if not line:
            if buffer:
                yield "\n".join(buffer)
                buffer = []
            continue
        if line.startswith(":"):
            continue
        field_name, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field_name == "data":
            buffer.append(value)
    if buffer:
        yield "\n".join(buffer)


class RequestsEventSource:
    """以 requests 串流讀取 SSE。

    讀取在 daemon 執行緒進行；所有 callback 透過 call_soon_threadsafe 交回 event loop，
    pending map 因此只在 loop 執行緒被存取。
    """

    def __init__(self, url: str, session: Optional[requests.Session] = None, connect_timeout: float = 5.0):
        self.url = url
        self.session = session or requests.Session()
        self.connect_timeout = connect_timeout
        self._closed = threading.Event()
        self._response = None
        self._loop = None
        self._thread = None

    def start(self, on_open: Callable, on_message: Callable, on_error: Callable) -> None:
        self._loop = asyncio.get_running_loop()
        self._thread = threading.Thread(
            target=self._run, args=(on_open, on_message, on_error), daemon=True
        )
        self._thread.start()

    def close(self) -> None:
        self._closed.set()
        if self._response is not None:
            self._response.close()

    def _dispatch(self, callback: Callable, *args) -> None:
        if self._closed.is_set():
            return
        try:
            self._loop.call_soon_threadsafe(callback, *args)
        except RuntimeError:
            # loop 已關閉
            logger.debug("event_source_loop_closed", url=self.url)

    def _run(self, on_open: Callable, on_message: Callable, on_error: Callable) -> None:
        try:
            response = self.session.get(
                self.url,
                stream=True,
                headers={"Accept": "text/event-stream"},
                timeout=(self.connect_timeout, None),
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            self._dispatch(on_error, exc)
            return

        self._response = response
        self._dispatch(on_open)
        try:
            for data in iter_sse_data(response.iter_lines()):
                if self._closed.is_set():
                    return
                self._dispatch(on_message, data)
        except requests.RequestException as exc:
            self._dispatch(on_error, exc)
            return
        finally:
            response.close()
        self._dispatch(on_error, ConnectionError("event stream ended"))


class DevModeBridge:
    """Dev Mode 輔助程式客戶端；生命週期由呼叫端管理。"""

    _DEFAULT_FACTORY = object()

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        events_url: Optional[str] = None,
        event_source_factory: Optional[EventSourceFactory] = _DEFAULT_FACTORY,  # type: ignore[assignment]
        session: Optional[requests.Session] = None,
        connect_timeout: float = 5.0,
        request_timeout: float = 30.0,
        health_timeout: float = 2.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.events_url = events_url or f"{self.base_url}/sse"
        self.session = session or requests.Session()
        if event_source_factory is self._DEFAULT_FACTORY:
            event_source_factory = self._requests_event_source
        self.event_source_factory = event_source_factory
        self.connect_timeout = connect_timeout
        self.request_timeout = request_timeout
        self.health_timeout = health_timeout

        self.state = BridgeState.DISCONNECTED
        self._next_id = 0
        self._pending: Dict[int, asyncio.Future] = {}
        self._event_source: Optional[EventSource] = None
        self._connecting: Optional[asyncio.Future] = None

    @property
    def is_connected(self) -> bool:
        return self.state is BridgeState.CONNECTED

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def __aenter__(self) -> "DevModeBridge":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()

    def _requests_event_source(self, url: str) -> RequestsEventSource:
        return RequestsEventSource(url, session=self.session, connect_timeout=self.connect_timeout)

    # ─── connect / disconnect ───

    async def connect(self) -> None:
        if self.is_connected:
            return
        if self._connecting is not None:
            # 已有 connect 進行中，共用同一個結果
            await asyncio.shield(self._connecting)
            return
        self._connecting = asyncio.ensure_future(self._connect())
        try:
            await self._connecting
        finally:
            self._connecting = None
            if not self.is_connected:
                self.state = BridgeState.DISCONNECTED

    async def _connect(self) -> None:
        self.state = BridgeState.CONNECTING

        if await self._probe_health():
            self.state = BridgeState.CONNECTED
            logger.info("bridge_connected", transport="http", base_url=self.base_url)
            return

        if self.event_source_factory is None:
            raise BridgeUnavailable(
                f"Dev Mode helper at {self.base_url} did not answer /health and no event stream is available"
            )

        opened = asyncio.get_running_loop().create_future()
        try:
            source = self.event_source_factory(self.events_url)
            self._event_source = source
            source.start(
                lambda: self._on_stream_open(source, opened),
                lambda data: self._on_stream_message(source, data),
                lambda exc: self._on_stream_error(source, opened, exc),
            )
        except Exception:
            self._close_stream()
            raise

        try:
            await asyncio.wait_for(opened, self.connect_timeout)
        except asyncio.TimeoutError:
            self._close_stream()
            raise RequestTimeout(
                f"event stream {self.events_url} did not open within {self.connect_timeout}s"
            ) from None
        except BridgeUnavailable:
            self._close_stream()
            raise

        self.state = BridgeState.CONNECTED
        logger.info("bridge_connected", transport="sse", events_url=self.events_url)

    async def disconnect(self) -> None:
        self._close_stream()
        self._fail_pending(ClientClosed, "client closed")
        was_connected = self.is_connected
        self.state = BridgeState.DISCONNECTED
        if was_connected:
            logger.info("bridge_disconnected", base_url=self.base_url)

    async def _probe_health(self) -> bool:
        try:
            response = await asyncio.to_thread(
                self.session.get, f"{self.base_url}/health", timeout=self.health_timeout
            )
        except requests.RequestException as exc:
            logger.debug("bridge_health_unreachable", error=str(exc))
            return False
        return bool(response.ok)

    def _close_stream(self) -> None:
        source, self._event_source = self._event_source, None
        if source is not None:
            source.close()

    def _fail_pending(self, error_cls: type, message: str) -> None:
        pending, self._pending = self._pending, {}
        for request_id, future in pending.items():
            if not future.done():
                future.set_exception(error_cls(f"{message} (request {request_id})"))

    # ─── stream callbacks（皆在 loop 執行緒）───

    def _on_stream_open(self, source: Any, opened: asyncio.Future) -> None:
        if source is self._event_source and not opened.done():
            opened.set_result(None)

    def _on_stream_error(self, source: Any, opened: asyncio.Future, exc: BaseException) -> None:
        if source is not self._event_source:
            return
        if not opened.done():
            opened.set_exception(BridgeUnavailable(f"event stream failed before open: {exc}"))
            return
        logger.warning("bridge_stream_error", error=str(exc), events_url=self.events_url)
        self._close_stream()
        self.state = BridgeState.DISCONNECTED
        self._fail_pending(BridgeUnavailable, f"event stream lost: {exc}")

    def _on_stream_message(self, source: Any, data: str) -> None:
        if source is not self._event_source:
            return
        self.handle_message(data)

    def handle_message(self, data: str) -> None:
        """單一事件的 data → 對應 pending 請求；無法對應的事件丟棄."""
        try:
            message = json.loads(data)
        except (TypeError, ValueError):
            logger.debug("bridge_event_ignored", reason="invalid_json")
            return
        if not isinstance(message, dict):
            logger.debug("bridge_event_ignored", reason="not_an_object")
            return

        request_id = message.get("id")
        known = isinstance(request_id, int) and not isinstance(request_id, bool)
        future = self._pending.pop(request_id, None) if known else None
        if future is None:
            logger.debug("bridge_event_ignored", reason="unknown_id", id=request_id)
            return
        if future.done():
            return

        error = message.get("error")
        if error:
            text = error.get("message") if isinstance(error, dict) else None
            future.set_exception(
                RemoteError(text or "Dev Mode error", error if isinstance(error, dict) else {"detail": error})
            )
        else:
            future.set_result(message.get("result"))

    # ─── requests ───

    async def request(self, method: str, params: Optional[dict] = None) -> Any:
        if not self.is_connected:
            raise NotConnected(f"not connected to Dev Mode helper at {self.base_url}")

        self._next_id += 1
        request_id = self._next_id
        future = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future
        envelope = {
            "protocol": PROTOCOL_VERSION,
            "id": request_id,
            "method": method,
            "params": params or {},
        }

        try:
            # POST 與等待回應共用同一個期限
            return await asyncio.wait_for(self._send_and_wait(envelope, future), self.request_timeout)
        except asyncio.TimeoutError:
            raise RequestTimeout(
                f"request {request_id} ({method}) timed out after {self.request_timeout}s"
            ) from None
        finally:
            self._pending.pop(request_id, None)

    async def _send_and_wait(self, envelope: dict, future: asyncio.Future) -> Any:
        await asyncio.to_thread(self._post, envelope)
        return await future

    def _post(self, envelope: dict) -> None:
        response = self.session.post(
            f"{self.base_url}/messages",
            json=envelope,
            headers={"Content-Type": "application/json"},
            timeout=self.request_timeout,
        )
        response.raise_for_status()

    async def call_tool(self, name: str, arguments: Optional[dict] = None) -> Any:
        return await self.request("tools/call", {"name": name, "arguments": arguments or {}})

    async def get_code(self, node_id: Optional[str] = None, format: Optional[str] = None) -> Any:
        arguments = {}
        if node_id:
            arguments["node_id"] = node_id
        if format:
            arguments["format"] = format
        return await self.call_tool("get_code", arguments)

    async def get_variable_defs(self, node_id: Optional[str] = None) -> Any:
        return await self.call_tool("get_variable_defs", {"node_id": node_id} if node_id else {})

    async def get_assets(self, node_id: Optional[str] = None) -> Any:
        return await self.call_tool("get_assets", {"node_id": node_id} if node_id else {})
