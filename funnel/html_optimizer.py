"""
HTML Optimizer - Reduce raw HTML to compact text for LLM analysis.

Two strategies for the same job:
- Tree mode (optimize_html): parses with BeautifulSoup, prunes unwanted
  elements, attributes, comments and empty containers bottom-up
- Lightweight mode (optimize_html_lightweight): regex substitution only,
  strips every tag and truncates to a fixed character budget

Both are pure functions and never raise on malformed markup.
"""

import html as html_lib
import re
from dataclasses import dataclass, field

from bs4 import BeautifulSoup, Comment, NavigableString, Tag
from bs4.builder import ParserRejectedMarkup
from bs4.element import CData, Declaration, Doctype, ProcessingInstruction

# Maximum characters returned by the lightweight mode
LIGHTWEIGHT_MAX_LENGTH = 8000

DEFAULT_PRESERVE_ATTRIBUTES = ("href", "src", "alt", "title")

# Void/self-closing tags are meaningful even without content
VOID_TAGS = frozenset({
    "img", "br", "hr", "input", "area", "base",
    "col", "embed", "source", "track", "wbr",
})

# Never useful for analysis, removed regardless of options
ALWAYS_REMOVED_TAGS = frozenset({"noscript", "template"})

# Non-content nodes dropped when remove_comments is set
NOISE_NODE_TYPES = (Comment, Doctype, Declaration, CData, ProcessingInstruction)


@dataclass
class OptimizationOptions:
    """Switches for tree-mode optimization. Everything is on by default."""
    remove_meta_tags: bool = True      # meta, link, title
    remove_script_tags: bool = True
    remove_style_tags: bool = True
    remove_empty_tags: bool = True
    remove_attributes: bool = True
    preserve_attributes: tuple[str, ...] = field(default=DEFAULT_PRESERVE_ATTRIBUTES)
    remove_comments: bool = True
    minify_whitespace: bool = True

    def tags_to_remove(self) -> frozenset[str]:
        """Tag names whose elements are dropped together with their content."""
        tags = set(ALWAYS_REMOVED_TAGS)
        if self.remove_meta_tags:
            tags.update({"meta", "link", "title"})
        if self.remove_script_tags:
            tags.add("script")
        if self.remove_style_tags:
            tags.add("style")
        return frozenset(tags)


def optimize_html(html: str, options: OptimizationOptions | None = None) -> str:
    """
    Optimize HTML for AI processing, keeping content and structure.

    Args:
        html: Raw HTML, possibly malformed
        options: Optimization switches (defaults to everything enabled)

    Returns:
        The reduced markup. Empty string for empty or content-free input.
    """
    if not html or not html.strip():
        return ""

    opts = options or OptimizationOptions()

    try:
        soup = BeautifulSoup(html, "html.parser")
        _process_element(
            soup,
            opts,
            opts.tags_to_remove(),
            {name.lower() for name in opts.preserve_attributes},
        )
        optimized = soup.decode()
    except (ParserRejectedMarkup, RecursionError):
        # Markup the parser refuses, or nesting too deep to walk
        return optimize_html_lightweight(html, max_length=len(html))

    if opts.minify_whitespace:
        optimized = minify_whitespace(optimized)

    return optimized


def _process_element(
    element: Tag,
    opts: OptimizationOptions,
    remove_tags: frozenset[str],
    preserve: set[str],
) -> None:
    """Prune an element's children in place, depth first."""
    for child in list(element.children):
        if isinstance(child, Tag):
            if child.name.lower() in remove_tags:
                child.decompose()
                continue

            if opts.remove_attributes:
                _strip_attributes(child, preserve)

            _process_element(child, opts, remove_tags, preserve)

            # Children are done, so a container emptied by them goes now
            if opts.remove_empty_tags and _is_empty(child):
                child.decompose()

        elif opts.remove_comments and _is_noise(child):
            child.extract()


def _strip_attributes(element: Tag, preserve: set[str]) -> None:
    """Drop every attribute not in the preserve list."""
    element.attrs = {
        name: value
        for name, value in element.attrs.items()
        if name.lower() in preserve
    }


def _is_noise(node) -> bool:
    """Comments, doctypes, declarations and whitespace-only text."""
    if isinstance(node, NOISE_NODE_TYPES):
        return True
    return isinstance(node, NavigableString) and not node.strip()


def _is_empty(element: Tag) -> bool:
    """True if an element has no text and no child elements (void tags never are)."""
    if element.name.lower() in VOID_TAGS:
        return False

    if element.get_text().strip():
        return False

    for child in element.children:
        if isinstance(child, Tag):
            return False
        if isinstance(child, NavigableString) and not isinstance(child, NOISE_NODE_TYPES):
            if child.strip():
                return False

    return True


def minify_whitespace(text: str) -> str:
    """Collapse whitespace: none between tags, single spaces elsewhere, trimmed ends."""
    text = re.sub(r">\s+<", "><", text)
    text = re.sub(r"\s+", " ", text)
    return text.strip()


# ─────────────────────────────────────────────────────────────
# Lightweight (regex) mode
# ─────────────────────────────────────────────────────────────

# Block elements removed with their content; an unclosed block runs to the end
_BLOCK_PATTERNS = [
    re.compile(rf"<{tag}\b[^>]*>.*?(?:</{tag}\s*>|$)", re.IGNORECASE | re.DOTALL)
    for tag in ("title", "script", "style", "noscript", "template")
]

_DOCTYPE_PATTERN = re.compile(r"<!DOCTYPE[^>]*>", re.IGNORECASE)
_META_PATTERN = re.compile(r"<meta\b[^>]*>", re.IGNORECASE)
_LINK_PATTERN = re.compile(r"<link\b[^>]*>", re.IGNORECASE)
_COMMENT_PATTERN = re.compile(r"<!--.*?(?:-->|$)", re.DOTALL)
_BODY_PATTERN = re.compile(r"<body[^>]*>(.*?)</body\s*>", re.IGNORECASE | re.DOTALL)
_TAG_PATTERN = re.compile(r"<[^>]*>")


def optimize_html_lightweight(
    html: str,
    extract_body: bool = True,
    max_length: int = LIGHTWEIGHT_MAX_LENGTH,
) -> str:
    """
    Reduce HTML to plain text without building a tree.

    Cheaper and more forgiving than optimize_html, at the cost of structure.

    Args:
        html: Raw HTML, possibly malformed
        extract_body: Keep only the <body> content when a body is present
        max_length: Character budget for the returned text

    Returns:
        Whitespace-collapsed text of at most max_length characters
    """
    if not html:
        return ""

    text = _DOCTYPE_PATTERN.sub("", html)
    text = _META_PATTERN.sub("", text)
    text = _LINK_PATTERN.sub("", text)
    for pattern in _BLOCK_PATTERNS:
        text = pattern.sub("", text)
    # Comments last: script and style text may contain a bare "<!--"
    text = _COMMENT_PATTERN.sub("", text)

    if extract_body:
        if body_match := _BODY_PATTERN.search(text):
            text = body_match.group(1)

    # Every remaining tag becomes a word break
    text = _TAG_PATTERN.sub(" ", text)
    text = html_lib.unescape(text)
    text = re.sub(r"\s+", " ", text).strip()

    return text[:max_length].rstrip()
