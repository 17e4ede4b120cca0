from pydantic import BaseModel, ConfigDict, Field
from runner import config

class BridgeProfile(BaseModel):
    """
    Configuration for one bridge session against a viewport.
    """
    model_config = ConfigDict(extra='ignore')

    root_graph_key: str = config.ROOT_GRAPH_KEY
    max_depth: int = Field(default=config.MAX_HIERARCHY_DEPTH, ge=1)

    # Host access
    host_timeout_sec: float = Field(default=config.HOST_TIMEOUT_SEC, gt=0)
    input_timeout_sec: float = Field(default=config.INPUT_TIMEOUT_SEC, gt=0)
    click_hold_sec: float = Field(default=config.CLICK_HOLD_SEC, ge=0)

    # Screenshots
    screenshot_max_width: int = 1920
    screenshot_max_height: int = 1080
    screenshot_quality: int = Field(default=80, ge=1, le=95)

    app_name: str = config.APP_NAME
