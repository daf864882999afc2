import pytest

from notesplus.services.markdown_service import (
    BLANK_PLACEHOLDER,
    MarkdownService,
    ParagraphUnwrapPolicy,
)


@pytest.fixture
def md():
    return MarkdownService()


@pytest.mark.parametrize("raw", ["", "   ", "\t"])
def test_blank_lines_render_placeholder(md, raw):
    assert md.render_line(raw) == BLANK_PLACEHOLDER


def test_simple_paragraph_is_unwrapped(md):
    assert md.render_line("plain text") == "plain text"


def test_heading(md):
    html = md.render_line("# Title")
    assert html.startswith("<h1")
    assert "Title" in html


def test_emphasis_keeps_paragraph_under_strict_policy(md):
    assert md.render_line("**bold**") == "<p><strong>bold</strong></p>"


def test_strike_task_list_and_table(md):
    assert "gone" in md.render_line("~~gone~~")
    assert any(t in md.render_line("~~gone~~") for t in ("<s>", "<del>", "<strike>"))
    assert "checkbox" in md.render_line("- [ ] todo")
    assert "<table" in md.render_line("| a | b |\n|---|---|\n| 1 | 2 |")


def test_bare_urls_become_links(md):
    html = md.render_line("see https://example.com/path for details")
    assert 'href="https://example.com/path"' in html
    explicit = md.render_line("[site](https://example.com)")
    assert explicit.count("<a ") == 1


def test_fenced_block_renders_as_code(md):
    html = md.render_line("```python\nx = 1\n```")
    assert "<pre" in html
    assert "x" in html


def test_page_embeds_fragment_with_styles(md):
    page = md.page("<b>hi</b>")
    assert page.startswith("<html><head><style>")
    assert "<body><b>hi</b></body>" in page
    assert ".codehilite" in page
    assert "#0056b3" in page


def test_unwrap_policies():
    strict = ParagraphUnwrapPolicy()
    assert strict.apply("<p>hi</p>") == "hi"
    assert strict.apply("<p><em>hi</em> and <b>x</b></p>") == "<p><em>hi</em> and <b>x</b></p>"
    assert strict.apply("<p>a<ul><li>b</li></ul></p>").startswith("<p>")
    assert strict.apply("<h2>x</h2>") == "<h2>x</h2>"

    single = ParagraphUnwrapPolicy("single-line")
    assert single.apply("<p><em>hi</em> <b>x</b></p>") == "<em>hi</em> <b>x</b>"
    assert single.apply("<p>a\nb</p>") == "<p>a\nb</p>"

    never = ParagraphUnwrapPolicy("never")
    assert never.apply("<p>hi</p>") == "<p>hi</p>"


def test_configured_policy_is_used():
    md = MarkdownService(unwrap_policy=ParagraphUnwrapPolicy("never"))
    assert md.render_line("plain") == "<p>plain</p>"
