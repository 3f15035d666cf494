"""Case-insensitive memo search over title, category, headings and body lines."""

from typing import Callable

from .documents import MemoDocument
from .models.results import SearchMatch

QueryExpander = Callable[[str], list[str]]


def identity_expander(word: str) -> list[str]:
    """Default expander: the word itself. Romaji conversion plugs in here."""
    return [word]


def expand_query(query: str, expander: QueryExpander = identity_expander) -> list[list[str]]:
    """Split ``query`` on whitespace and expand each word into its variants."""
    groups = []
    for word in query.split():
        variants = [v.lower() for v in expander(word) if v.strip()]
        groups.append(variants or [word.lower()])
    return groups


def contains_all_words(text: str, word_groups: list[list[str]]) -> bool:
    """True if every word group has a variant occurring in ``text``."""
    lowered = text.lower()
    return all(any(variant in lowered for variant in group) for group in word_groups)


def _clean(text: str) -> str:
    return text.replace("\t", " ").strip()


def match_memo(memo: MemoDocument, word_groups: list[list[str]]) -> list[SearchMatch]:
    """Every title, category path, heading or body line of ``memo`` containing all words.

    Body excerpts are prefixed with ``"<heading> > "`` when they sit under a heading.
    Duplicate excerpts of the same kind are reported once.
    """
    if not word_groups:
        return []

    found: list[SearchMatch] = []
    seen: set[tuple[str, str]] = set()

    def add(label: str, excerpt: str) -> None:
        if (label, excerpt) not in seen:
            seen.add((label, excerpt))
            found.append(SearchMatch(label=label, excerpt=excerpt))

    if contains_all_words(memo.title, word_groups):
        add("Title", _clean(memo.title))

    category = "/".join(memo.category_tree)
    if category and contains_all_words(category, word_groups):
        add("Category", category)

    for block in memo.heading_blocks:
        if contains_all_words(block.heading_text, word_groups):
            add("Heading", _clean(block.heading_text))

    sections = [("", memo.top_level_body.content_text if memo.top_level_body else "")]
    sections.extend((block.heading_text, block.content_text) for block in memo.heading_blocks)
    for heading, content in sections:
        for line in content.split("\n"):
            if line.strip() and contains_all_words(line, word_groups):
                excerpt = _clean(line)
                if heading:
                    excerpt = f"{_clean(heading)} > {excerpt}"
                add("Body", excerpt)

    return found


def search_memos(
    memos: list[MemoDocument],
    query: str,
    expander: QueryExpander = identity_expander,
) -> list[tuple[MemoDocument, list[SearchMatch]]]:
    """Memos with at least one match for ``query``, in input order."""
    word_groups = expand_query(query, expander)
    results = []
    for memo in memos:
        matches = match_memo(memo, word_groups)
        if matches:
            results.append((memo, matches))
    return results
