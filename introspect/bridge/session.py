import logging
import uuid
from typing import Any, Optional
from runner.action_executor import ActionExecutor
from runner.host import ViewportHost
from runner.input_dispatcher import InputDispatcher
from runner.screenshot_service import ScreenshotService
from introspect.bridge.profile import BridgeProfile
from introspect.scene.service import SceneQueryService

logger = logging.getLogger(__name__)

class BridgeSession:
    """
    Wires the query engine, the action façade and the screenshot delegate to
    one live viewport. Building a session does not touch the viewport.
    """

    def __init__(self, viewport: Any, profile: Optional[BridgeProfile] = None, session_id: Optional[str] = None):
        self.profile = profile or BridgeProfile()
        self.session_id = session_id or uuid.uuid4().hex
        self.host = ViewportHost(
            viewport,
            timeout_sec=self.profile.host_timeout_sec,
            input_timeout_sec=self.profile.input_timeout_sec,
        )
        self.query_service = SceneQueryService(
            self.host,
            root_key=self.profile.root_graph_key,
            max_depth=self.profile.max_depth,
        )
        self.dispatcher = InputDispatcher(self.host, hold_sec=self.profile.click_hold_sec)
        self.executor = ActionExecutor(self.query_service, self.dispatcher, session_id=self.session_id)
        self.screenshots = ScreenshotService(
            self.host,
            max_width=self.profile.screenshot_max_width,
            max_height=self.profile.screenshot_max_height,
            quality=self.profile.screenshot_quality,
        )
        logger.info(f"Bridge session {self.session_id} created for {self.profile.app_name}")
