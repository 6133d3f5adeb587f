from __future__ import annotations

import logging
from typing import cast

from tree_sitter import Node
from tree_sitter_language_pack import SupportedLanguage, get_parser

from vite_mini.errors import ComponentParseError
from vite_mini.models import ComponentDescriptor

logger = logging.getLogger(__name__)

_LANGUAGE = "vue"
_BLOCK_TYPES = frozenset({"script_element", "template_element"})


def _child_of_type(node: Node, node_type: str) -> Node | None:
    for child in node.children:
        if child.type == node_type:
            return child
    return None


def _attribute_names(start_tag: Node, source: bytes) -> set[str]:
    names: set[str] = set()
    for attribute in start_tag.children:
        if attribute.type != "attribute":
            continue
        name = _child_of_type(attribute, "attribute_name")
        if name is not None:
            names.add(source[name.start_byte : name.end_byte].decode("utf-8"))
    return names


def _block_key(block: Node, start_tag: Node, source: bytes) -> str:
    if block.type == "template_element":
        return "template"
    return "script_setup" if "setup" in _attribute_names(start_tag, source) else "script"


class TreeSitterComponentParser:
    """Split a ``.vue`` file into its top-level blocks using the tree-sitter Vue grammar.

    Implements the ``ComponentParser`` protocol.
    """

    async def parse(self, source: str, filename: str) -> ComponentDescriptor:
        return self.parse_blocks(source, filename)

    def parse_blocks(self, source: str, filename: str) -> ComponentDescriptor:
        source_bytes = source.encode("utf-8")
        tree = get_parser(cast(SupportedLanguage, _LANGUAGE)).parse(source_bytes)
        if tree.root_node.type == "ERROR":
            raise ComponentParseError(f"{filename}: not a single-file component")

        blocks: dict[str, str] = {}
        for node in tree.root_node.children:
            if node.type == "ERROR":
                row, column = node.start_point
                raise ComponentParseError(f"{filename}:{row + 1}:{column + 1}: unexpected content")
            if node.type not in _BLOCK_TYPES:
                continue

            start_tag = _child_of_type(node, "start_tag")
            end_tag = _child_of_type(node, "end_tag")
            if start_tag is None or end_tag is None or end_tag.is_missing:
                row, _ = node.start_point
                raise ComponentParseError(f"{filename}:{row + 1}: element is missing end tag")

            key = _block_key(node, start_tag, source_bytes)
            if key in blocks:
                row, _ = node.start_point
                raise ComponentParseError(f"{filename}:{row + 1}: duplicate {key.replace('_', ' ')} block")
            blocks[key] = source_bytes[start_tag.end_byte : end_tag.start_byte].decode("utf-8")

        logger.debug("Parsed %s blocks: %s", filename, sorted(blocks))
        return ComponentDescriptor(**blocks)
