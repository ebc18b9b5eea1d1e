"""Tests for mdview.services.assembler.render_markdown."""

import re

from mdview.models.config import MarkdownConfig
from mdview.services.assembler import render_markdown

_ARTICLE_HTML = """
<!DOCTYPE html>
<html lang="en">
<head>
  <title>Guide</title>
  <meta name="description" content="A short guide.">
  <style>body { color: red; }</style>
  <script type="application/ld+json">{"@context": "https://schema.org", "@type": "Article"}</script>
  <script type="application/ld+json">{broken</script>
</head>
<body>
  <nav class="site-nav"><a href="/">Home</a><a href="/docs">Docs</a></nav>
  <main>
    <h1>Getting started</h1>
    <p>Install the package and read the <a href="/docs/intro">introduction</a>.</p>
    <ul><li>First step</li><li>Second step</li></ul>
    <pre><code class="language-python">print("hello")</code></pre>
    <table>
      <thead><tr><th>Name</th><th>Value</th></tr></thead>
      <tbody><tr><td>alpha</td><td>1</td></tr></tbody>
    </table>
    <div class="no-markdown">Subscribe to our newsletter!</div>
  </main>
  <footer><p>Copyright 2024 Example Corp.</p></footer>
  <script>window.analytics = true;</script>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------

class TestConversion:
    def test_heading_only_document(self):
        md = render_markdown("<h1>X</h1>")
        assert "# X" in md
        assert 'language: "en"' in md

    def test_headings(self):
        md = render_markdown("<html><body><h1>Title</h1><h2>Sub</h2></body></html>")
        assert "# Title" in md
        assert "## Sub" in md

    def test_links(self):
        md = render_markdown('<p><a href="/about">About</a></p>')
        assert "[About](/about)" in md

    def test_images(self):
        md = render_markdown('<p><img src="/img.png" alt="Image" /></p>')
        assert "![Image](/img.png)" in md

    def test_lists_use_dash_bullets(self):
        md = render_markdown(_ARTICLE_HTML)
        assert "- First step" in md
        assert "- Second step" in md

    def test_code_blocks_are_fenced(self):
        md = render_markdown(_ARTICLE_HTML)
        assert "```python" in md
        assert 'print("hello")' in md

    def test_tables_are_preserved(self):
        md = render_markdown(_ARTICLE_HTML)
        assert "| Name | Value |" in md
        assert "| alpha | 1 |" in md

    def test_head_text_is_not_in_body(self):
        md = render_markdown(_ARTICLE_HTML, MarkdownConfig(include_frontmatter=False))
        assert "Guide" not in md

    def test_line_breaks_stay_hard_breaks(self):
        md = render_markdown("<p>line one<br>line two</p>", MarkdownConfig(include_frontmatter=False))
        assert "line one\\\nline two" in md

    def test_code_block_content_is_untouched(self):
        html = "<pre><code>a\n\n\n\nb   \n</code></pre>"
        md = render_markdown(html, MarkdownConfig(include_frontmatter=False))
        assert md.startswith("```")
        assert "a\n\n\n\nb   " in md

    def test_scripts_and_styles_dropped_without_selectors(self):
        html = (
            "<html><body><p>Visible</p><script>var secret = 1;</script>"
            "<style>.x { color: red; }</style><noscript>Enable JS</noscript></body></html>"
        )
        md = render_markdown(html, MarkdownConfig(clean_selectors=()))
        assert "Visible" in md
        assert "secret" not in md
        assert "color" not in md
        assert "Enable JS" not in md


# ---------------------------------------------------------------------------
# Cleaning
# ---------------------------------------------------------------------------

class TestCleaning:
    def test_default_selectors_remove_boilerplate(self):
        md = render_markdown(_ARTICLE_HTML)
        assert "Getting started" in md
        assert "Home" not in md
        assert "Copyright 2024" not in md
        assert "newsletter" not in md

    def test_custom_selectors(self):
        html = "<nav>Skip</nav><main><p>Keep</p></main>"
        md = render_markdown(html, MarkdownConfig(clean_selectors=("nav",)))
        assert "Skip" not in md
        assert "Keep" in md

    def test_unmatched_selector_changes_nothing(self):
        base = render_markdown(_ARTICLE_HTML)
        extra = MarkdownConfig(clean_selectors=MarkdownConfig().clean_selectors + (".nothing-here",))
        assert render_markdown(_ARTICLE_HTML, extra) == base

    def test_invalid_selector_does_not_abort(self):
        md = render_markdown(_ARTICLE_HTML, MarkdownConfig(clean_selectors=("][", "footer")))
        assert "Getting started" in md
        assert "Copyright 2024" not in md

    def test_frontmatter_reflects_original_document(self):
        config = MarkdownConfig(clean_selectors=("title", "meta", "head"))
        md = render_markdown(_ARTICLE_HTML, config)
        assert 'title: "Guide"' in md
        assert 'description: "A short guide."' in md


# ---------------------------------------------------------------------------
# Transformers
# ---------------------------------------------------------------------------

class TestTransformers:
    def test_applies_transformer(self):
        config = MarkdownConfig(transformers=(lambda s: s.replace("Hello", "Hi"),))
        assert "Hi" in render_markdown("<p>Hello</p>", config)

    def test_transformers_run_in_order(self):
        config = MarkdownConfig(
            transformers=(lambda s: s + "\n\nA", lambda s: s.replace("A", "B")),
        )
        md = render_markdown("<p>Body</p>", config)
        assert md.endswith("B")

    def test_transformers_do_not_touch_frontmatter(self):
        config = MarkdownConfig(transformers=(lambda s: s.upper(),))
        md = render_markdown("<html><head><title>quiet</title></head><body><p>loud</p></body></html>", config)
        assert 'title: "quiet"' in md
        assert "LOUD" in md


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------

class TestAssembly:
    def test_frontmatter_comes_first(self):
        md = render_markdown(_ARTICLE_HTML)
        assert md.startswith('---\ntitle: "Guide"\ndescription: "A short guide."\nlanguage: "en"\n---\n\n')

    def test_frontmatter_can_be_disabled(self):
        md = render_markdown(_ARTICLE_HTML, MarkdownConfig(include_frontmatter=False))
        assert not md.startswith("---")
        assert "language:" not in md

    def test_single_valid_json_ld_block(self):
        md = render_markdown(_ARTICLE_HTML)
        assert "## Structured Data (JSON-LD)" in md
        assert md.count("```json") == 1
        assert '"@type": "Article"' in md
        assert "broken" not in md

    def test_structured_data_follows_body(self):
        md = render_markdown(_ARTICLE_HTML)
        assert md.index("Getting started") < md.index("## Structured Data (JSON-LD)")
        assert md.endswith("```")

    def test_no_structured_data_section_without_json_ld(self):
        assert "Structured Data" not in render_markdown("<p>Plain</p>")

    def test_output_is_trimmed(self):
        md = render_markdown("<p>  Text  </p>\n\n", MarkdownConfig(include_frontmatter=False))
        assert md == md.strip()


# ---------------------------------------------------------------------------
# Debug mode
# ---------------------------------------------------------------------------

_DEBUG_RE = re.compile(
    r"^<!-- mdview: html_size=(\d+) bytes, markdown_size=(\d+) bytes, reduction=(-?\d+)% -->$"
)


class TestDebug:
    def test_debug_comment_is_first_line(self):
        md = render_markdown(_ARTICLE_HTML, MarkdownConfig(debug_enabled=True))
        first_line = md.splitlines()[0]
        assert "html_size=" in first_line
        assert "markdown_size=" in first_line
        assert "reduction=" in first_line
        match = _DEBUG_RE.match(first_line)
        assert match is not None
        html_size, md_size, reduction = (int(g) for g in match.groups())
        assert html_size == len(_ARTICLE_HTML.encode("utf-8"))
        assert md_size <= html_size
        assert 0 <= reduction <= 100

    def test_markdown_size_covers_whole_document(self):
        plain = render_markdown(_ARTICLE_HTML)
        md = render_markdown(_ARTICLE_HTML, MarkdownConfig(debug_enabled=True))
        match = _DEBUG_RE.match(md.splitlines()[0])
        assert int(match.group(2)) == len(plain.encode("utf-8"))
        assert md.endswith(plain)

    def test_reported_html_size_can_be_overridden(self):
        md = render_markdown("<p>x</p>", MarkdownConfig(debug_enabled=True), html_size=1000)
        assert "html_size=1000 bytes" in md

    def test_zero_html_size_reports_zero_reduction(self):
        md = render_markdown("<p>x</p>", MarkdownConfig(debug_enabled=True), html_size=0)
        assert "reduction=0%" in md

    def test_no_comment_by_default(self):
        assert "<!--" not in render_markdown(_ARTICLE_HTML)
