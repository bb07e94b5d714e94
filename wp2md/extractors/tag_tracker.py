from __future__ import annotations

from typing import Dict, List, Optional

from wp2md.models.post import CategoryInProgress

ITEM = "item"
POST_META = "wp:postmeta"
CATEGORY = "category"


class TagPathTracker:
    """Element nesting state for the item currently being read.

    Only elements opened inside an ``<item>`` are tracked; everything at the
    channel level is invisible to the tracker.  Flags are set exclusively by
    the matching open event and cleared by the matching close event.
    """

    def __init__(self) -> None:
        self.inside_item = False
        self.inside_post_meta = False
        self.active_category: Optional[CategoryInProgress] = None
        self._path: List[str] = []

    @property
    def current_tag(self) -> str:
        return self._path[-1] if self._path else ""

    @property
    def path(self) -> List[str]:
        return list(self._path)

    def is_open(self, name: str) -> bool:
        return name in self._path

    def reset(self) -> None:
        self.inside_item = False
        self.inside_post_meta = False
        self.active_category = None
        self._path = []

    def open(self, name: str, attributes: Optional[Dict[str, str]] = None) -> None:
        if name == ITEM:
            # Items do not nest: a new item replaces whatever was open.
            self.reset()
            self.inside_item = True
            self._path.append(name)
            return
        if not self.inside_item:
            return
        self._path.append(name)
        if name == POST_META:
            self.inside_post_meta = True
        elif name == CATEGORY:
            attributes = attributes or {}
            self.active_category = CategoryInProgress(
                domain=attributes.get("domain", ""),
                nicename=attributes.get("nicename", ""),
            )

    def close(self, name: str) -> bool:
        """Pop ``name`` off the path, unwinding any element left open inside it.

        Returns ``False`` and changes nothing when ``name`` is not open.
        """
        if name not in self._path:
            return False
        while self._path:
            popped = self._path.pop()
            if popped == POST_META:
                self.inside_post_meta = False
            elif popped == CATEGORY:
                self.active_category = None
            elif popped == ITEM:
                self.inside_item = False
            if popped == name:
                break
        return True
