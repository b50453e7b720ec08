"""
Static asset fallback mounted under every path the router does not claim.
"""
import os

from starlette import status
from starlette.staticfiles import StaticFiles
from starlette.websockets import WebSocketClose


class StaticAssets(StaticFiles):
    """StaticFiles in html mode that refuses websocket handshakes"""

    def __init__(self, directory):
        super().__init__(directory=directory, html=True, check_dir=False)

    async def check_config(self):
        # A missing asset root answers 404s instead of failing the request
        if self.directory is not None and not os.path.isdir(self.directory):
            return
        await super().check_config()

    async def __call__(self, scope, receive, send):
        if scope["type"] == "websocket":
            await WebSocketClose(code=status.WS_1008_POLICY_VIOLATION)(scope, receive, send)
            return
        await super().__call__(scope, receive, send)
