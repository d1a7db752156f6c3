"""State layer.

:class:`DisplayState` is the single place received digest values are
merged into on the watch side.
"""

from sunwear.state.display import DisplayState

__all__ = ["DisplayState"]
