"""
Markup Segmenter Module
=======================
Word-budgeted segmentation of an HTML fragment that keeps each unit's
original markup, so every segment can be rendered as rich content.

The fragment is parsed once with BeautifulSoup and converted into an
immutable node tree (ElementNode / TextNode / CommentNode). Word counting,
text extraction and serialization are plain functions over that tree.
Every walk uses an explicit stack, so nesting depth is bounded only by
memory.

Algorithm:
1. Resolve the content root: descend through lone generic wrappers
   (<div><div>...</div></div>) that carry no segment boundary.
2. Group the root's children into units, skipping comments, whitespace-only
   text and script/style/noscript/template elements. Inline siblings that
   touch without whitespace (foo<b>bar</b>) form one unit, so a word is
   never cut in two.
3. A unit that fits the budget is packed greedily into the open segment.
4. A unit that alone exceeds the budget is split by descending into its
   children when it has more than one unit to offer; otherwise it is
   emitted as its own oversized segment after flushing the open one.
5. Units without words (<hr>, <img>, empty paragraphs) never stand alone:
   they are folded into a neighbouring segment, and a fragment with no
   words at all yields no segments.

An empty fragment, or one without words, yields no segments, which tells
the caller to fall back to the plain-text segmenter.
"""

import html as html_lib
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from bs4 import BeautifulSoup
from bs4.element import (
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    ProcessingInstruction,
    Tag,
)

from .accumulator import Accumulator
from .words import collapse_whitespace, count_words
from ..models import StructuredSegment

logger = logging.getLogger(__name__)

DEFAULT_WRAPPER_TAGS = frozenset({"div", "section", "article", "main", "body", "span"})
DEFAULT_FORBIDDEN_TAGS = frozenset({"script", "style", "noscript", "template"})

# Elements whose text is separated from its neighbours when flattened
BLOCK_TAGS = frozenset({
    "address", "article", "aside", "blockquote", "br", "dd", "div", "dl", "dt",
    "figcaption", "figure", "footer", "h1", "h2", "h3", "h4", "h5", "h6",
    "header", "hr", "li", "main", "nav", "ol", "p", "pre", "section", "table",
    "tbody", "td", "tfoot", "th", "thead", "tr", "ul",
})

FRAGMENT_TAG = "#fragment"


# =============================================================================
# NODE TREE
# =============================================================================

@dataclass(frozen=True)
class TextNode:
    """A run of character data (already unescaped)."""
    content: str


@dataclass(frozen=True)
class CommentNode:
    """A comment, doctype or other non-rendered declaration."""
    content: str


@dataclass(frozen=True)
class ElementNode:
    """
    An element of the parsed fragment.

    Attributes:
        tag: Lower-case tag name (FRAGMENT_TAG for the parse root)
        attributes: (name, value) pairs in source order
        children: Child nodes in source order
        source: The parsed bs4 Tag, serialized only when the element
                becomes part of a segment
    """
    tag: str
    attributes: Tuple[Tuple[str, str], ...]
    children: Tuple["Node", ...]
    source: Any = field(default=None, compare=False, repr=False)

    @property
    def markup(self) -> str:
        """The element's original HTML."""
        return str(self.source) if self.source is not None else ""


Node = Union[ElementNode, TextNode, CommentNode]


def _leaf(item) -> Optional[Node]:
    if isinstance(item, (Comment, Doctype, Declaration, ProcessingInstruction)):
        return CommentNode(content=str(item))
    if isinstance(item, NavigableString):
        return TextNode(content=str(item))
    return None


def _element(item: Tag, children: List[Node], tag: Optional[str] = None) -> ElementNode:
    attributes = tuple(
        (name, " ".join(value) if isinstance(value, list) else str(value))
        for name, value in (item.attrs or {}).items()
    )
    return ElementNode(
        tag=tag or item.name.lower(),
        attributes=attributes,
        children=tuple(children),
        source=item,
    )


def _build_tree(container: Tag, root_tag: str) -> ElementNode:
    """Convert a bs4 subtree bottom-up with an explicit stack."""
    stack = [(container, iter(container.children), [])]
    while True:
        item, pending, converted = stack[-1]
        child = next(pending, None)

        if child is not None:
            if isinstance(child, Tag):
                stack.append((child, iter(child.children), []))
            else:
                node = _leaf(child)
                if node is not None:
                    converted.append(node)
            continue

        stack.pop()
        if not stack:
            return _element(item, converted, tag=root_tag)
        stack[-1][2].append(_element(item, converted))


def parse_fragment(markup: str) -> ElementNode:
    """
    Parse an HTML fragment into an immutable node tree.

    A full document is reduced to its <body>; the returned root is a
    synthetic FRAGMENT_TAG element whose children are the top-level nodes.
    """
    soup = BeautifulSoup(markup or "", "html.parser")
    container = soup.body if soup.body is not None else soup
    return _build_tree(container, FRAGMENT_TAG)


# =============================================================================
# PURE FUNCTIONS OVER THE TREE
# =============================================================================

def is_discarded(node: Node, forbidden_tags: Iterable[str] = DEFAULT_FORBIDDEN_TAGS) -> bool:
    """Comments, whitespace-only text and forbidden elements never reach a segment."""
    if isinstance(node, CommentNode):
        return True
    if isinstance(node, TextNode):
        return not node.content.strip()
    return node.tag in forbidden_tags


def is_block(node: Node) -> bool:
    return isinstance(node, ElementNode) and node.tag in BLOCK_TAGS


def content_children(node: ElementNode, forbidden_tags: Iterable[str] = DEFAULT_FORBIDDEN_TAGS) -> List[Node]:
    return [child for child in node.children if not is_discarded(child, forbidden_tags)]


def text_content(node: Node, forbidden_tags: Iterable[str] = DEFAULT_FORBIDDEN_TAGS) -> str:
    """Rendered text of a node; forbidden descendants and comments contribute nothing."""
    parts = []
    stack: List[Union[Node, str]] = [node]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, TextNode):
            parts.append(item.content)
        elif isinstance(item, ElementNode) and item.tag not in forbidden_tags:
            for child in reversed(item.children):
                if is_block(child):
                    stack.extend((" ", child, " "))
                else:
                    stack.append(child)
    return "".join(parts)


def serialize(node: Node) -> str:
    """Markup for a node as it should appear inside a segment."""
    if isinstance(node, TextNode):
        return html_lib.escape(node.content, quote=False)
    if isinstance(node, CommentNode):
        return ""
    return node.markup


def resolve_content_root(
    node: ElementNode,
    wrapper_tags: Iterable[str] = DEFAULT_WRAPPER_TAGS,
    forbidden_tags: Iterable[str] = DEFAULT_FORBIDDEN_TAGS,
) -> ElementNode:
    """Descend while the node's only content child is a generic wrapper element."""
    wrapper_tags = frozenset(wrapper_tags)
    while True:
        children = content_children(node, forbidden_tags)
        if len(children) != 1:
            return node
        child = children[0]
        if not isinstance(child, ElementNode) or child.tag not in wrapper_tags:
            return node
        node = child


def is_decomposable(node: Node, forbidden_tags: Iterable[str] = DEFAULT_FORBIDDEN_TAGS) -> bool:
    """
    True when descending into the node can yield more than one unit.

    A lone text run, an empty element, or a chain of single-child elements
    ending in a lone text run cannot be split any further.
    """
    while isinstance(node, ElementNode):
        children = content_children(node, forbidden_tags)
        if len(children) != 1:
            return len(children) > 1
        node = children[0]
    return False


def iter_elements(node: Node, tag: str) -> Iterator[ElementNode]:
    """Yield every descendant element (document order) with the given tag."""
    if not isinstance(node, ElementNode):
        return
    stack = list(reversed(node.children))
    while stack:
        child = stack.pop()
        if isinstance(child, ElementNode):
            if child.tag == tag:
                yield child
            stack.extend(reversed(child.children))


def extract_plain_text(markup: Optional[str]) -> str:
    """Text of every <p> in the fragment, trimmed, joined by blank lines."""
    if not markup or not markup.strip():
        return ""
    root = parse_fragment(markup)
    paragraphs = (text_content(p).strip() for p in iter_elements(root, "p"))
    return "\n\n".join(p for p in paragraphs if p)


# =============================================================================
# UNITS
# =============================================================================

@dataclass(frozen=True)
class _Unit:
    """One or more adjacent sibling nodes placed as a whole."""
    nodes: Tuple[Node, ...]
    text: str
    block: bool

    @property
    def words(self) -> int:
        return count_words(self.text)

    @property
    def markup(self) -> str:
        return "".join(serialize(node) for node in self.nodes)

    def splittable(self, forbidden_tags: Iterable[str]) -> bool:
        return len(self.nodes) == 1 and is_decomposable(self.nodes[0], forbidden_tags)


def _glued(left: str, right: str) -> bool:
    """True when two texts meet without whitespace between them."""
    return not (left[-1:].isspace() or right[:1].isspace())


def group_units(children: Sequence[Node], forbidden_tags: Iterable[str] = DEFAULT_FORBIDDEN_TAGS) -> List[_Unit]:
    """
    Group sibling nodes into placement units.

    Block elements are always their own unit. Inline siblings (text runs and
    inline elements) are merged while they touch without whitespace, since
    the boundary between them falls inside a word.
    """
    units: List[_Unit] = []
    broken = True

    for node in children:
        if isinstance(node, TextNode) and not node.content.strip():
            broken = True
            continue
        if is_discarded(node, forbidden_tags):
            continue

        text = text_content(node, forbidden_tags)
        block = is_block(node)
        previous = units[-1] if units else None

        if previous and not broken and not block and not previous.block and _glued(previous.text, text):
            units[-1] = _Unit(nodes=previous.nodes + (node,), text=previous.text + text, block=False)
        else:
            units.append(_Unit(nodes=(node,), text=text, block=block))
        broken = False

    return units


# =============================================================================
# SEGMENTATION
# =============================================================================

def _close(accumulator: Accumulator) -> StructuredSegment:
    closed = accumulator.drain()
    markup = "".join(unit.markup for unit in closed.units)
    text = collapse_whitespace(" ".join(unit.text for unit in closed.units))
    return StructuredSegment(html=markup, text=text, word_count=closed.word_sum)


def _merge(segments: Sequence[StructuredSegment]) -> StructuredSegment:
    return StructuredSegment(
        html="".join(s.html or "" for s in segments),
        text=collapse_whitespace(" ".join(s.text for s in segments)),
        word_count=sum(s.word_count for s in segments),
    )


def fold_empty_segments(segments: Sequence[StructuredSegment]) -> List[StructuredSegment]:
    """
    Attach word-free segments to the next segment with words (or the last
    one, at the end). Without any words at all the result is empty.
    """
    folded: List[StructuredSegment] = []
    pending: List[StructuredSegment] = []

    for segment in segments:
        if segment.word_count == 0:
            pending.append(segment)
            continue
        folded.append(_merge(pending + [segment]) if pending else segment)
        pending = []

    if pending and folded:
        folded[-1] = _merge([folded[-1]] + pending)

    return folded


def _pack(
    children: Sequence[Node],
    word_budget: int,
    forbidden_tags: frozenset,
) -> List[StructuredSegment]:
    segments: List[StructuredSegment] = []
    accumulator = Accumulator()
    stack = [iter(group_units(children, forbidden_tags))]

    while stack:
        unit = next(stack[-1], None)
        if unit is None:
            stack.pop()
            continue

        words = unit.words

        if words > word_budget:
            if unit.splittable(forbidden_tags):
                stack.append(iter(group_units(unit.nodes[0].children, forbidden_tags)))
                continue

            if not accumulator.is_empty():
                segments.append(_close(accumulator))
            accumulator.add(unit, words)
            segments.append(_close(accumulator))
            logger.debug(f"Oversized unit passed through ({words} > {word_budget} words)")
            continue

        if accumulator.would_exceed(words, word_budget):
            segments.append(_close(accumulator))
        accumulator.add(unit, words)

    if not accumulator.is_empty():
        segments.append(_close(accumulator))

    return segments


def segment_markup(
    markup: Optional[str],
    word_budget: int,
    wrapper_tags: Iterable[str] = DEFAULT_WRAPPER_TAGS,
    forbidden_tags: Iterable[str] = DEFAULT_FORBIDDEN_TAGS,
) -> List[StructuredSegment]:
    """
    Split an HTML fragment into word-budgeted segments that keep their markup.

    Args:
        markup: HTML fragment (or full document; only <body> is used)
        word_budget: Maximum words per segment (positive)
        wrapper_tags: Generic containers unwrapped at the root
        forbidden_tags: Elements dropped together with their content

    Returns:
        List of StructuredSegment, each with at least one word; empty for
        empty, whitespace-only or word-free input
    """
    if not markup or not markup.strip():
        return []

    forbidden_tags = frozenset(forbidden_tags)
    root = resolve_content_root(parse_fragment(markup), wrapper_tags, forbidden_tags)

    return fold_empty_segments(_pack(root.children, word_budget, forbidden_tags))
