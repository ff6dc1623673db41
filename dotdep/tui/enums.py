from enum import Enum

from dotdep.models import ActionStatus


class UIStyle(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    CYAN = "cyan"
    DIM = "dim"


ACTION_STATUS_STYLE = {
    ActionStatus.SUCCESS: UIStyle.GREEN.value,
    ActionStatus.SKIP: UIStyle.DIM.value,
    ActionStatus.ERROR: UIStyle.RED.value,
}
