from enum import Enum

from cc_switch.status import AppSyncStatus


class UIStyle(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    CYAN = "cyan"
    MAGENTA = "magenta"
    DIM = "dim"
    WHITE = "white"


APP_STATUS_STYLE = {
    AppSyncStatus.ACTIVE: UIStyle.GREEN.value,
    AppSyncStatus.ADDITIVE: UIStyle.CYAN.value,
    AppSyncStatus.NO_PROVIDER: UIStyle.YELLOW.value,
    AppSyncStatus.NOT_INSTALLED: UIStyle.DIM.value,
}
