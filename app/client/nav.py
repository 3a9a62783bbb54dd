"""Navigation highlighting for in-page section links."""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from app.client.events import EventSource, SubscriptionGroup

logger = logging.getLogger(__name__)

DEFAULT_HEADER_HEIGHT = 88
ACTIVE_OFFSET = 8
SCROLL_OFFSET = 12


@dataclass(frozen=True)
class Section:
    id: str
    offset_top: float


@dataclass
class NavLink:
    href: str
    active: bool = False
    aria_current: Optional[str] = None


def active_section(sections: Sequence[Section], scroll_y: float, header_height: Optional[float] = None) -> Optional[str]:
    """Return the hash of the last section whose top has scrolled past the header."""
    top = scroll_y + (header_height if header_height is not None else DEFAULT_HEADER_HEIGHT) + ACTIVE_OFFSET
    current = None
    for section in sections:
        if section.offset_top <= top:
            current = f"#{section.id}"
    return current


def scroll_target_top(target_top: float, scroll_y: float, header_height: Optional[float] = None) -> float:
    """Compute the scroll position that puts a target just below the sticky header.

    Args:
        target_top: Target's top relative to the viewport
        scroll_y: Current scroll position
        header_height: Height of the sticky header, default when absent
    """
    height = header_height if header_height is not None else DEFAULT_HEADER_HEIGHT
    return max(0, target_top + scroll_y - height - SCROLL_OFFSET)


class NavHighlighter:
    """Keeps nav links in sync with the section currently in view."""

    def __init__(
        self,
        links: List[NavLink],
        sections: Callable[[], Sequence[Section]],
        header_height: Callable[[], Optional[float]] = lambda: None,
    ):
        self.links = links
        self._sections = sections
        self._header_height = header_height
        self.scroll_y: float = 0

    def refresh(self, scroll_y: Optional[float] = None) -> Optional[str]:
        if scroll_y is not None:
            self.scroll_y = scroll_y
        current = active_section(self._sections(), self.scroll_y, self._header_height())
        for link in self.links:
            if link.href == current:
                link.active = True
                link.aria_current = "true"
            else:
                link.active = False
                link.aria_current = None
        return current

    def scroll_to_hash(self, hash_: str) -> Optional[float]:
        """Return where to scroll for ``#id``, or None when there is no such section."""
        if not hash_ or not hash_.startswith("#"):
            return None
        for section in self._sections():
            if f"#{section.id}" == hash_:
                return scroll_target_top(section.offset_top - self.scroll_y, self.scroll_y, self._header_height())
        return None

    def attach(
        self,
        scroll: EventSource,
        resize: EventSource,
        hashchange: EventSource,
        scroll_to: Callable[[float], None],
    ) -> SubscriptionGroup:
        """Subscribe to window events; dispose the returned group to detach."""
        group = SubscriptionGroup()

        def on_hashchange(hash_: str):
            top = self.scroll_to_hash(hash_)
            if top is not None:
                scroll_to(top)

        group.add(scroll.subscribe(lambda scroll_y: self.refresh(scroll_y)))
        group.add(resize.subscribe(lambda *_: self.refresh()))
        group.add(hashchange.subscribe(on_hashchange))
        return group
