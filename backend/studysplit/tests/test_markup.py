"""
Markup Segmenter Tests
======================
Tests for HTML parsing, content-root resolution and structure-preserving
segmentation.
"""

import os
import sys

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from studysplit.segmentation import (
    segment_markup,
    parse_fragment,
    resolve_content_root,
    extract_plain_text,
    count_words,
    ElementNode,
    TextNode,
    CommentNode,
)
from studysplit.segmentation.markup import content_children, is_decomposable, text_content


def words(count: int, prefix: str = "w") -> str:
    return " ".join(f"{prefix}{i}" for i in range(count))


# =============================================================================
# PARSING TESTS
# =============================================================================

def test_parse_fragment_node_types():
    """Elements, text and comments become the matching node types."""
    root = parse_fragment('<p class="lead">Hi</p>tail<!-- note -->')

    assert len(root.children) == 3
    element, text, comment = root.children
    assert isinstance(element, ElementNode)
    assert element.tag == "p"
    assert element.attributes == (("class", "lead"),)
    assert element.children == (TextNode(content="Hi"),)
    assert text == TextNode(content="tail")
    assert isinstance(comment, CommentNode)
    print("[PASS] parse_fragment test passed")


def test_resolve_content_root_descends_wrappers():
    """Lone generic wrappers are unwrapped, whitespace between tags ignored."""
    root = parse_fragment("<div>\n  <div><p>a</p><p>b</p></div>\n</div>")
    resolved = resolve_content_root(root)

    assert resolved.tag == "div"
    assert len(content_children(resolved)) == 2
    print("[PASS] Wrapper descent test passed")


def test_resolve_content_root_stops_at_content():
    """A lone non-wrapper child is content, not a wrapper."""
    root = parse_fragment("<div><p>only</p></div>")
    resolved = resolve_content_root(root)

    assert resolved.tag == "div"
    print("[PASS] Wrapper stop test passed")


def test_is_decomposable():
    """Single-text chains cannot be split; multiple children can."""
    root = parse_fragment("<p>one two</p><ul><li>a</li><li>b</li></ul><div><p><em>x y</em></p></div>")
    paragraph, listing, nested = root.children

    assert is_decomposable(paragraph) is False
    assert is_decomposable(listing) is True
    assert is_decomposable(nested) is False
    print("[PASS] is_decomposable test passed")


def test_text_content_pads_block_children():
    """Adjacent block elements do not glue their words together."""
    root = parse_fragment("<section><p>a</p><p>b</p></section>")

    assert count_words(text_content(root.children[0])) == 2
    print("[PASS] Block padding test passed")


def test_extract_plain_text():
    """Paragraph texts are trimmed and separated by blank lines."""
    markup = "<div><p>One</p><span>skip me</span><p>  Two </p><p>   </p></div>"

    assert extract_plain_text(markup) == "One\n\nTwo"
    assert extract_plain_text("") == ""
    assert extract_plain_text(None) == ""
    print("[PASS] extract_plain_text test passed")


# =============================================================================
# SEGMENTATION TESTS
# =============================================================================

def test_empty_markup():
    """Nothing to segment yields no segments."""
    assert segment_markup("", 10) == []
    assert segment_markup(None, 10) == []
    assert segment_markup("   \n ", 10) == []
    assert segment_markup("<!-- only a comment -->", 10) == []
    print("[PASS] Empty markup test passed")


def test_oversized_single_paragraph_kept_whole():
    """A lone paragraph over budget is emitted intact with its markup."""
    markup = "<p>" + "word " * 50 + "</p>"
    segments = segment_markup(markup, 10)

    assert len(segments) == 1
    assert segments[0].word_count == 50
    assert segments[0].html == markup
    assert segments[0].text == " ".join(["word"] * 50)
    print("[PASS] Oversized paragraph test passed")


def test_paragraphs_packed_greedily():
    """Three two-word paragraphs with a budget of four give two segments."""
    segments = segment_markup("<p>a b</p><p>c d</p><p>e f</p>", 4)

    assert [s.html for s in segments] == ["<p>a b</p><p>c d</p>", "<p>e f</p>"]
    assert [s.word_count for s in segments] == [4, 2]
    assert segments[0].text == "a b c d"
    print("[PASS] Greedy packing test passed")


def test_wrappers_unwrapped():
    """Segments hold the paragraphs, not the surrounding wrappers."""
    segments = segment_markup("<div><article>\n<p>a b</p>\n<p>c d</p>\n</article></div>", 2)

    assert [s.html for s in segments] == ["<p>a b</p>", "<p>c d</p>"]
    print("[PASS] Wrapper unwrapping test passed")


def test_oversized_section_decomposed():
    """An oversized container is split into its children; packing continues after it."""
    markup = "<section><p>one two three</p><p>four five six</p></section><p>tail</p>"
    segments = segment_markup(markup, 4)

    assert [s.html for s in segments] == [
        "<p>one two three</p>",
        "<p>four five six</p><p>tail</p>",
    ]
    assert [s.word_count for s in segments] == [3, 4]
    print("[PASS] Section decomposition test passed")


def test_oversized_leaf_flushes_open_segment():
    """An indivisible oversized unit closes the open segment and stands alone."""
    markup = f"<p>a b</p><pre>{words(20)}</pre><p>c</p>"
    segments = segment_markup(markup, 5)

    assert [s.word_count for s in segments] == [2, 20, 1]
    assert segments[1].html.startswith("<pre>")
    print("[PASS] Oversized leaf test passed")


def test_non_content_skipped():
    """Scripts, styles and comments never appear in segments."""
    markup = "<style>p { color: red; }</style><p>a b</p><!-- c --><script>track()</script><p>c d</p>"
    segments = segment_markup(markup, 10)

    assert len(segments) == 1
    assert segments[0].html == "<p>a b</p><p>c d</p>"
    assert segments[0].word_count == 4
    print("[PASS] Non-content skip test passed")


def test_script_inside_paragraph_not_counted():
    """Forbidden descendants contribute no words."""
    segments = segment_markup("<p>one two<script>var x = 1;</script></p>", 10)

    assert segments[0].word_count == 2
    assert segments[0].text == "one two"
    print("[PASS] Nested script test passed")


def test_text_nodes_escaped():
    """Bare text is re-escaped when serialized."""
    segments = segment_markup("Fish &amp; chips", 10)

    assert segments[0].html == "Fish &amp; chips"
    assert segments[0].text == "Fish & chips"
    assert segments[0].word_count == 3
    print("[PASS] Text escaping test passed")


def test_inline_markup_preserved():
    """Inline elements stay inside their paragraph's markup."""
    markup = '<p>Read <a href="/x">this link</a> now</p>'
    segments = segment_markup(markup, 10)

    assert segments[0].html == markup
    assert segments[0].word_count == 4
    print("[PASS] Inline markup test passed")


def test_full_document_uses_body():
    """Head content of a full document is ignored."""
    markup = "<html><head><title>Ignored title</title></head><body><p>a b</p></body></html>"
    segments = segment_markup(markup, 10)

    assert [s.html for s in segments] == ["<p>a b</p>"]
    print("[PASS] Full document test passed")


def test_block_padding_in_segment_text():
    """Block children of a packed container are word-separated."""
    segments = segment_markup("<section><p>a</p><p>b</p></section><p>c</p>", 10)

    assert len(segments) == 1
    assert segments[0].text == "a b c"
    assert segments[0].word_count == 3
    print("[PASS] Segment text padding test passed")


def test_custom_forbidden_tags():
    """Callers can extend the set of dropped elements."""
    markup = "<p>a b</p><figure>c d e</figure>"
    segments = segment_markup(markup, 10, forbidden_tags={"script", "figure"})

    assert segments[0].html == "<p>a b</p>"
    assert segments[0].word_count == 2
    print("[PASS] Custom forbidden tags test passed")


def test_markup_coverage_and_budget():
    """All words appear once, in order; only single units exceed the budget."""
    sizes = [4, 9, 2, 30, 6, 1, 7, 3]
    paragraphs = [words(size, prefix=f"p{n}_") for n, size in enumerate(sizes)]
    markup = "<article>" + "".join(f"<p>{p}</p>" for p in paragraphs) + "</article>"
    budget = 10

    segments = segment_markup(markup, budget)

    all_words = [w for segment in segments for w in segment.text.split()]
    assert all_words == " ".join(paragraphs).split()
    assert sum(s.word_count for s in segments) == sum(sizes)
    for segment in segments:
        assert segment.word_count <= budget or segment.html.count("<p>") == 1
    print("[PASS] Markup coverage test passed")


def test_deeply_nested_wrappers():
    """Nesting far past the interpreter's recursion limit is handled."""
    markup = "<div>" * 1200 + "hello world" + "</div>" * 1200
    segments = segment_markup(markup, 10)

    assert len(segments) == 1
    assert segments[0].word_count == 2
    assert segments[0].text == "hello world"

    markup = "<div>" * 400 + "<p>a b</p><p>c d</p>" + "</div>" * 400
    segments = segment_markup(markup, 2)

    assert [s.html for s in segments] == ["<p>a b</p>", "<p>c d</p>"]
    print("[PASS] Deep wrapper nesting test passed")


def test_deeply_nested_decomposition():
    """Each nested level can be split without running out of stack."""
    depth = 1000
    markup = "".join(f"<section><p>w{i} x</p>" for i in range(depth)) + "</section>" * depth
    segments = segment_markup(markup, 3)

    assert len(segments) == depth
    assert all(s.word_count == 2 for s in segments)
    assert segments[0].html == "<p>w0 x</p>"
    assert [w for s in segments for w in s.text.split()][-2:] == [f"w{depth - 1}", "x"]
    assert text_content(parse_fragment(markup)).split()[:2] == ["w0", "x"]
    print("[PASS] Deep decomposition test passed")


def test_word_free_markup_yields_nothing():
    """Elements without words never become segments of their own."""
    assert segment_markup("<p></p>", 10) == []
    assert segment_markup("<hr/><p>   </p>", 10) == []
    assert segment_markup("<img src='a.png'/>", 10) == []
    print("[PASS] Word-free markup test passed")


def test_word_free_units_folded_into_neighbours():
    """Markup without words rides along with the nearest segment that has words."""
    segments = segment_markup("<hr/><p>a b</p>", 10)
    assert len(segments) == 1
    assert segments[0].html == "<hr/><p>a b</p>"
    assert segments[0].word_count == 2

    segments = segment_markup(f"<p>a b</p><pre>{words(8)}</pre><p></p>", 4)
    assert [s.word_count for s in segments] == [2, 8]
    assert segments[-1].html.endswith("<p></p>")
    assert all(s.word_count > 0 for s in segments)
    print("[PASS] Word-free folding test passed")


def test_glued_inline_words_not_split():
    """A word spread over a text run and an inline element stays in one segment."""
    markup = "<p>" + "alpha beta " * 6 + "foo<b>bar</b> end</p>"
    segments = segment_markup(markup, 5)

    all_words = [w for segment in segments for w in segment.text.split()]
    assert all_words == ("alpha beta " * 6 + "foobar end").split()
    assert sum(s.word_count for s in segments) == 14
    assert any("foo<b>bar</b>" in s.html for s in segments)
    print("[PASS] Glued inline word test passed")


def test_separated_inline_siblings_split():
    """Whitespace between inline siblings is a valid place to cut."""
    markup = "<p>" + words(4, "a") + " <em>" + words(4, "b") + "</em> " + words(4, "c") + "</p>"
    segments = segment_markup(markup, 4)

    assert [s.word_count for s in segments] == [4, 4, 4]
    assert segments[1].html == "<em>" + words(4, "b") + "</em>"
    print("[PASS] Separated inline sibling test passed")


def test_element_markup_serialized_on_demand():
    """Nodes keep their parsed element and render it only when asked."""
    root = parse_fragment('<p class="lead">Hi <b>there</b></p>')
    paragraph = root.children[0]

    assert paragraph.markup == '<p class="lead">Hi <b>there</b></p>'
    assert paragraph.children[1].markup == "<b>there</b>"
    assert ElementNode(tag="p", attributes=(), children=()).markup == ""
    print("[PASS] On-demand markup test passed")


def run_all_tests():
    """Run all markup segmenter tests."""
    print("\n" + "="*60)
    print("MARKUP SEGMENTER TESTS")
    print("="*60 + "\n")

    print("\n--- Parsing Tests ---")
    test_parse_fragment_node_types()
    test_resolve_content_root_descends_wrappers()
    test_resolve_content_root_stops_at_content()
    test_is_decomposable()
    test_text_content_pads_block_children()
    test_extract_plain_text()

    print("\n--- Segmentation Tests ---")
    test_empty_markup()
    test_oversized_single_paragraph_kept_whole()
    test_paragraphs_packed_greedily()
    test_wrappers_unwrapped()
    test_oversized_section_decomposed()
    test_oversized_leaf_flushes_open_segment()
    test_non_content_skipped()
    test_script_inside_paragraph_not_counted()
    test_text_nodes_escaped()
    test_inline_markup_preserved()
    test_full_document_uses_body()
    test_block_padding_in_segment_text()
    test_custom_forbidden_tags()
    test_markup_coverage_and_budget()
    test_deeply_nested_wrappers()
    test_deeply_nested_decomposition()
    test_word_free_markup_yields_nothing()
    test_word_free_units_folded_into_neighbours()
    test_glued_inline_words_not_split()
    test_separated_inline_siblings_split()
    test_element_markup_serialized_on_demand()

    print("\n" + "="*60)
    print("ALL MARKUP SEGMENTER TESTS PASSED")
    print("="*60 + "\n")


if __name__ == "__main__":
    run_all_tests()
