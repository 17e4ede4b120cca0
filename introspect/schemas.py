from pydantic import BaseModel, ConfigDict, model_validator
from typing import Literal, Optional

ELEMENT_ACTIONS = ("click_element", "hover_element")
POINTER_ACTIONS = ("send_mouse_move", "send_mouse_click")

class Command(BaseModel):
    model_config = ConfigDict(extra='ignore')

    action: str
    filter: Optional[str] = None
    element_id: Optional[str] = None
    x: Optional[float] = None
    y: Optional[float] = None
    button: str = "left"
    format: Literal["path", "base64"] = "path"
    filename: Optional[str] = None

    @model_validator(mode='after')
    def validate_action_requirements(self):
        act = self.action
        if act in ELEMENT_ACTIONS and not self.element_id:
            raise ValueError("must provide 'element_id' parameter")
        if act in POINTER_ACTIONS and (self.x is None or self.y is None):
            raise ValueError("must provide 'x' and 'y' coordinates")
        return self
