from notesplus.services.document_controller import DocumentController
from notesplus.ui.editor_panel import MarkdownEditorPanel, event_modifiers
from notesplus.ui.html_view import HtmlLineView


class FakeMarkdown:
    def render_line(self, raw):  # noqa: ANN001
        return raw or "&nbsp;"

    def page(self, fragment):  # noqa: ANN001
        return fragment


def make_panel(text=""):
    changes = []
    ctrl = DocumentController(markdown=FakeMarkdown())
    panel = MarkdownEditorPanel(None, controller=ctrl, on_change=changes.append)
    panel.set_content(text)
    return panel, ctrl, changes


def test_event_modifiers():
    assert event_modifiers(0) == ()
    assert event_modifiers(0x4) == ("Control",)
    assert event_modifiers(0x1 | 0x8) == ("Shift", "Alt")
    assert event_modifiers(0x20000) == ("Alt",)


def test_rows_follow_logical_lines():
    panel, ctrl, changes = make_panel("one\n```\ncode\n```\ntwo")
    assert len(ctrl) == 3
    assert all(panel.row_for(line) is not None for line in ctrl.lines)
    assert panel.get_content() == "one\n```\ncode\n```\ntwo"
    assert changes == []


def test_enter_in_row_adds_a_row():
    panel, ctrl, changes = make_panel("one\ntwo")
    panel.activate_line(ctrl.lines[1])
    assert ctrl.active_index == 1
    row = panel.row_for(ctrl.lines[1])
    assert panel.handle_key(row, "Return", ()) is True
    assert len(ctrl) == 3
    assert panel.row_for(ctrl.lines[2]) is not None
    assert panel.get_content() == "one\ntwo\n"
    assert changes == ["one\ntwo\n"]


def test_merged_row_is_dropped():
    panel, ctrl, _ = make_panel("a\nb")
    merged_away = ctrl.lines[1]
    panel.activate_line(merged_away, 0)
    assert panel.handle_key(panel.row_for(merged_away), "BackSpace", ()) is True
    assert panel.row_for(merged_away) is None
    assert panel.get_content() == "ab"


def test_buffer_sync_edits_the_line():
    panel, ctrl, changes = make_panel("abc")
    line = ctrl.lines[0]
    panel.activate_line(line)
    row = panel.row_for(line)
    row.buffer_text = lambda: "abcd"
    row.buffer_cursor = lambda: 4
    panel.sync_buffer(row)
    assert line.current_text == "abcd"
    assert changes == ["abcd"]


def test_background_click_edits_last_line():
    panel, ctrl, _ = make_panel("a\nb\nc")
    panel._on_background_click()
    assert ctrl.active_index == 2


def test_request_focus_activates_first_line():
    panel, ctrl, _ = make_panel("a\nb")
    panel.request_focus()
    assert ctrl.active_index == 0


class FakeHtmlFrame:
    def __init__(self):
        self.loaded = []
        self.selection = ""
        self.select_all_calls = 0

    def load_html(self, html):  # noqa: ANN001
        self.loaded.append(html)

    def get_currently_selected_text(self):
        return self.selection

    def select_all(self):
        self.select_all_calls += 1

    def winfo_reqheight(self):
        return 40

    def bind(self, sequence, func):  # noqa: ANN001
        return None

    def pack(self, **kwargs):  # noqa: ANN003
        return None

    def pack_forget(self):
        return None


def make_panel_with_views(text):
    frames = []

    def factory(master):  # noqa: ANN001
        frames.append(FakeHtmlFrame())
        return HtmlLineView(widget=frames[-1])

    ctrl = DocumentController(markdown=FakeMarkdown())
    panel = MarkdownEditorPanel(None, controller=ctrl, view_factory=factory)
    panel.set_content(text)
    return panel, ctrl


def test_rendered_rows_show_the_styled_page():
    panel, ctrl = make_panel_with_views("hello")
    row = panel.row_for(ctrl.lines[0])
    assert row.rendered.widget.loaded[-1] == "hello"


def test_release_without_selection_starts_editing():
    panel, ctrl = make_panel_with_views("a\nb")
    row = panel.row_for(ctrl.lines[1])
    row._on_rendered_release()
    assert ctrl.active_index == 1


def test_release_with_selection_keeps_rendered_view_for_copying():
    panel, ctrl = make_panel_with_views("a\nb")
    row = panel.row_for(ctrl.lines[1])
    row.rendered.widget.selection = "b"
    row._on_rendered_release()
    assert ctrl.active_index is None
    assert row._on_select_all() == "break"
    assert row.rendered.widget.select_all_calls == 1


def test_measure_uses_rendered_height():
    panel, ctrl = make_panel_with_views("a")
    row = panel.row_for(ctrl.lines[0])
    row.frame.winfo_exists = lambda: True
    row.measure()
    assert ctrl.lines[0].rendered_height == 40
