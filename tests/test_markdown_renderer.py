"""Tests for the restricted markdown renderer."""

from app.documents.markdown import render_markdown


def test_headings_use_level_of_hashes():
    assert render_markdown("# Título") == "<h1>Título</h1>"
    assert render_markdown("### Fase 2") == "<h3>Fase 2</h3>"


def test_bold_italic_and_strikethrough():
    html = render_markdown("Texto **fuerte**, *suave* y ~~viejo~~")
    assert html == "Texto <strong>fuerte</strong>, <em>suave</em> y <del>viejo</del>"


def test_underscore_emphasis_only_at_word_boundaries():
    assert render_markdown("__clave__ y _nota_") == "<strong>clave</strong> y <em>nota</em>"
    assert render_markdown("snake_case_name") == "snake_case_name"


def test_plain_text_is_escaped():
    assert render_markdown("a < b & <script>") == "a &lt; b &amp; &lt;script&gt;"


def test_fenced_code_keeps_markers_literal_and_escaped():
    html = render_markdown("```python\nx = a**b**c < 1\n```")
    assert html == '<pre><code class="language-python">x = a**b**c &lt; 1</code></pre>'


def test_inline_code_is_not_interpreted():
    assert render_markdown("Usa `a*b*c` aquí") == "Usa <code>a*b*c</code> aquí"


def test_bullet_list_with_continuation_line():
    html = render_markdown("- uno\n  sigue\n- dos")
    assert html == "<ul>\n<li>uno<br>sigue</li>\n<li>dos</li>\n</ul>"


def test_numbered_list_renders_ordered():
    assert render_markdown("1. a\n2. b") == "<ol>\n<li>a</li>\n<li>b</li>\n</ol>"


def test_deeper_indent_opens_nested_list():
    html = render_markdown("- a\n  - b")
    assert html == "<ul>\n<li>a\n<ul>\n<li>b</li>\n</ul></li>\n</ul>"


def test_line_breaks_between_text_and_collapsed_blank_lines():
    assert render_markdown("uno\ndos") == "uno<br>dos"
    assert render_markdown("uno\n\n\n\ndos") == "uno<br><br>dos"


def test_no_break_next_to_block_elements():
    assert render_markdown("# T\ntexto") == "<h1>T</h1>\ntexto"
    assert render_markdown("intro\n- a") == "intro\n<ul>\n<li>a</li>\n</ul>"


def test_unmatched_markers_stay_literal():
    assert render_markdown("**abierto") == "**abierto"
    assert render_markdown("") == ""


def test_bold_then_italic_are_independent_spans():
    assert render_markdown("**a** *b*") == "<strong>a</strong> <em>b</em>"


def test_code_content_escapes_quotes():
    html = render_markdown("```\nprint(\"a\" + 'b')\n```")
    assert html == "<pre><code>print(&quot;a&quot; + &#x27;b&#x27;)</code></pre>"


def test_ordered_list_keeps_start_number():
    assert render_markdown("3. c\n4. d") == '<ol start="3">\n<li>c</li>\n<li>d</li>\n</ol>'


def test_links_and_rules_are_not_part_of_the_dialect():
    assert render_markdown("[guía](http://x.org)") == "[guía](http://x.org)"
    assert render_markdown("uno\n---") == "uno<br>---"
