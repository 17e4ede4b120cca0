import os
import sys
# Add project root to path
sys.path.append(os.getcwd())

import asyncio
import uvicorn
from api.main import create_app
from demo_session import build_demo_viewport
from introspect.bridge.session import BridgeSession
from introspect.tools import Toolset
from runner.line_server import LineServer

async def main():
    viewport = build_demo_viewport()
    line_server = LineServer(Toolset(BridgeSession(viewport)))
    await line_server.start()

    app = create_app(viewport)
    server = uvicorn.Server(uvicorn.Config(app, host="127.0.0.1", port=8000, log_level="info"))
    try:
        await server.serve()
    finally:
        await line_server.stop()

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nStopped by user.")
