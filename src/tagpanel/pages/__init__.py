"""NiceGUI pages for tagpanel.

Import this module to register all page routes with NiceGUI.
"""

from tagpanel.pages import tag_panel

__all__ = ["tag_panel"]

# Touch module to prevent linter from removing the "unused" import.
# The import registers @ui.page decorators as a side effect.
_PAGES = (tag_panel,)
