# runner/line_server.py
import asyncio
import json
from typing import Optional
from . import config
from .logger import log

MAX_LINE_BYTES = 1024 * 1024

class LineServer:
    """
    Line-delimited JSON transport: one request per line in, one response per
    line out. Connections are served concurrently. A malformed or failing
    request gets an error response and the connection stays open; only a
    line over MAX_LINE_BYTES is answered with an error and then closed.
    """

    def __init__(self, toolset, host: str = None, port: int = None):
        self.toolset = toolset
        self.host = host or config.BRIDGE_HOST
        self.port = config.BRIDGE_PORT if port is None else port
        self._server: Optional[asyncio.AbstractServer] = None

    async def start(self):
        try:
            self._server = await asyncio.start_server(self._handle_client, self.host, self.port, limit=MAX_LINE_BYTES)
        except OSError as e:
            log("ERROR", "bridge_listen_failed", f"Failed to listen on {self.host}:{self.port}", error=str(e))
            raise
        # port 0 asks the OS for a free one
        self.port = self._server.sockets[0].getsockname()[1]
        log("INFO", "bridge_listening", f"Bridge listening on {self.host}:{self.port}", host=self.host, port=self.port)

    async def serve_forever(self):
        if self._server is None:
            await self.start()
        async with self._server:
            await self._server.serve_forever()

    async def stop(self):
        if self._server is None:
            return
        self._server.close()
        await self._server.wait_closed()
        self._server = None
        log("INFO", "bridge_stopped", "Bridge stopped")

    async def _send(self, writer: asyncio.StreamWriter, response: dict):
        writer.write(json.dumps(response, default=str).encode("utf-8") + b"\n")
        await writer.drain()

    async def _handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        peer = writer.get_extra_info("peername")
        log("INFO", "bridge_client_connected", "Client connected", peer=peer)
        try:
            while True:
                try:
                    line = await reader.readline()
                except ValueError:
                    await self._send(writer, {"error": "Request line too long", "kind": "invalid_parameters", "retryable": False})
                    break
                if not line:
                    break
                text = line.decode("utf-8", errors="replace")
                if not text.strip():
                    continue
                try:
                    response = await self.toolset.handle_line(text)
                except Exception as e:
                    log("ERROR", "bridge_request_failed", "Request handling crashed", peer=peer, error=str(e))
                    response = {"error": f"Internal error: {e}", "kind": "internal_error", "retryable": False}
                await self._send(writer, response)
        except ConnectionError as e:
            log("WARN", "bridge_client_error", "Client connection error", peer=peer, error=str(e))
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except ConnectionError:
                pass
            log("INFO", "bridge_client_disconnected", "Client disconnected", peer=peer)
