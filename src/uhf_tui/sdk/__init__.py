"""Reader and push collaborators used by the console."""

from uhf_tui.sdk.reader import ReaderClient, SimulatedReader, TagCallback
from uhf_tui.sdk.push import PushClient, push_status

__all__ = ["ReaderClient", "SimulatedReader", "TagCallback", "PushClient", "push_status"]
