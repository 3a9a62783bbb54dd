from app.client.events import EventSource
from app.client.nav import (
    DEFAULT_HEADER_HEIGHT,
    NavHighlighter,
    NavLink,
    Section,
    active_section,
    scroll_target_top,
)

SECTIONS = [Section("about", 0), Section("services", 600), Section("contact", 1400)]


class TestActiveSection:
    def test_first_section_at_top(self):
        assert active_section(SECTIONS, 0, 88) == "#about"

    def test_section_becomes_active_once_under_header(self):
        assert active_section(SECTIONS, 600 - 88 - 8, 88) == "#services"
        assert active_section(SECTIONS, 600 - 88 - 9, 88) == "#about"

    def test_default_header_height(self):
        assert active_section(SECTIONS, 1400 - DEFAULT_HEADER_HEIGHT - 8) == "#contact"

    def test_no_sections(self):
        assert active_section([], 500, 88) is None


class TestScrollTargetTop:
    def test_offsets_header_and_margin(self):
        assert scroll_target_top(700, 100, 88) == 700 + 100 - 88 - 12

    def test_never_negative(self):
        assert scroll_target_top(10, 0, 88) == 0


class TestNavHighlighter:
    def make(self):
        links = [NavLink("#about"), NavLink("#services"), NavLink("#contact"), NavLink("/careers")]
        return NavHighlighter(links, lambda: SECTIONS, lambda: 88), links

    def test_refresh_marks_active_link(self):
        highlighter, links = self.make()

        assert highlighter.refresh(700) == "#services"
        assert [link.active for link in links] == [False, True, False, False]
        assert links[1].aria_current == "true"
        assert links[0].aria_current is None

    def test_events_drive_highlighting_until_disposed(self):
        highlighter, links = self.make()
        scroll, resize, hashchange = EventSource("scroll"), EventSource("resize"), EventSource("hashchange")
        scrolled_to = []

        group = highlighter.attach(scroll, resize, hashchange, scrolled_to.append)
        scroll.emit(1500)
        assert links[2].active

        hashchange.emit("#services")
        assert scrolled_to == [600 - 88 - 12]

        hashchange.emit("#missing")
        assert len(scrolled_to) == 1

        group.dispose_all()
        assert scroll.listener_count == resize.listener_count == hashchange.listener_count == 0

        scroll.emit(0)
        assert links[2].active

    def test_resize_recomputes_with_last_scroll(self):
        highlighter, links = self.make()
        resize = EventSource("resize")
        highlighter.attach(EventSource("scroll"), resize, EventSource("hashchange"), lambda top: None)
        highlighter.scroll_y = 1500

        resize.emit()

        assert links[2].active
