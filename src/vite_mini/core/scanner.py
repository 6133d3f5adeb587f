import logging
from functools import lru_cache
from pathlib import Path
from typing import cast

from tree_sitter import Node, Query, QueryCursor
from tree_sitter_language_pack import SupportedLanguage, get_language, get_parser

from vite_mini.models import ImportSpecifierOccurrence

logger = logging.getLogger(__name__)

_LANGUAGE = "javascript"
_STRING_NODE_TYPES = frozenset({"string", "template_string"})


@lru_cache(maxsize=None)
def _load_query(language: str, query_type: str) -> Query:
    queries_dir = Path(__file__).parent.parent / "queries"
    query_path = queries_dir / f"{language}_{query_type}.scm"
    if not query_path.exists():
        raise FileNotFoundError(f"Query file not found: {query_path}")
    query_text = query_path.read_text(encoding="utf-8")
    return Query(get_language(cast(SupportedLanguage, language)), query_text)


def _literal_span(node: Node) -> tuple[int, int]:
    """Return the span of a specifier, excluding the quotes of string literals."""
    if node.type in _STRING_NODE_TYPES and not _has_substitution(node):
        return node.start_byte + 1, node.end_byte - 1
    return node.start_byte, node.end_byte


def _has_substitution(node: Node) -> bool:
    return any(child.type == "template_substitution" for child in node.children)


def scan_imports(source: str) -> list[ImportSpecifierOccurrence]:
    """Find every import specifier in an ES module, ordered by position.

    Offsets index into ``source.encode("utf-8")``.
    """
    source_bytes = source.encode("utf-8")
    parser = get_parser(cast(SupportedLanguage, _LANGUAGE))
    tree = parser.parse(source_bytes)
    if tree.root_node.has_error:
        logger.warning("Module has syntax errors; scanning recoverable imports only")

    cursor = QueryCursor(_load_query(_LANGUAGE, "imports"))
    spans: dict[int, ImportSpecifierOccurrence] = {}
    for _, captures in cursor.matches(tree.root_node):
        for capture_name, nodes in captures.items():
            for node in nodes:
                start, end = _literal_span(node)
                if start >= end:
                    continue
                spans[start] = ImportSpecifierOccurrence(
                    start=start,
                    end=end,
                    text=source_bytes[start:end].decode("utf-8"),
                    is_dynamic=capture_name == "import.dynamic",
                )

    return [spans[start] for start in sorted(spans)]
