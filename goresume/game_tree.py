# game_tree.py
# Minimal SGF parser/serializer used for game backups.
#
# - Parse SGF into a tree of Node objects preserving property order and multiple values.
# - Variations are kept as additional children; the mainline is the first child chain.
# - Serialize back to SGF preserving structure and property ordering.
#
# The parser is strict: anything that is not well-formed SGF raises SgfSyntaxError
# instead of being skipped, so a truncated or damaged file is never half-read.
import re
from typing import Dict, List, Optional, Tuple

DEBUG = False

_PROP_RE = re.compile(r"[A-Z]+")


class SgfSyntaxError(ValueError): pass


# -------------------------
# Node model
# -------------------------
class Node:
    """
    Represents a single SGF node (a semicolon entry).
    - props: list of (key, [values]) preserving insertion order and multiple values
    - children: first child continues the mainline, the rest are variations
    """
    __slots__ = ("props", "children", "parent")

    def __init__(self, parent: Optional["Node"] = None):
        self.props: List[Tuple[str, List[str]]] = []
        self.children: List["Node"] = []
        self.parent: Optional["Node"] = parent

    def get_prop(self, key: str) -> Optional[List[str]]:
        for k, vals in self.props:
            if k == key:
                return vals
        return None

    def props_dict(self) -> Dict[str, List[str]]:
        d: Dict[str, List[str]] = {}
        for k, vals in self.props:
            d.setdefault(k, []).extend(vals)
        return d

    def __repr__(self):
        pd = self.props_dict()
        mv = None
        if "B" in pd:
            mv = f"B {pd['B']}"
        elif "W" in pd:
            mv = f"W {pd['W']}"
        return f"<Node move={mv} props={{{', '.join(pd.keys())}}} children={len(self.children)}>"


# -------------------------
# GameTree wrapper
# -------------------------
class GameTree:
    """
    root: a synthetic root Node whose children are the top-level game trees.
    The synthetic root itself does not correspond to a semicolon in the SGF.
    """

    def __init__(self):
        self.root: Node = Node(parent=None)

    @classmethod
    def from_sgf(cls, sgf_text: str) -> "GameTree":
        gt = cls()
        gt.load_sgf(sgf_text)
        return gt

    # -------------------------
    # Parsing
    # -------------------------
    def load_sgf(self, sgf_text: str):
        """
        Parse SGF text into this tree. Tokens are '(', ')', ';', property
        identifiers and bracketed values; whitespace between tokens is ignored.
        """
        text = sgf_text
        n = len(text)
        i = 0

        def skip_ws(idx: int) -> int:
            while idx < n and text[idx].isspace():
                idx += 1
            return idx

        def read_bracket_value(idx: int) -> Tuple[str, int]:
            # assumes text[idx] == '['
            start = idx
            idx += 1
            buf_chars = []
            while idx < n:
                ch = text[idx]
                if ch == "\\":
                    # escape next char; an escaped newline is a soft line break
                    idx += 1
                    if idx < n and text[idx] != "\n":
                        buf_chars.append(text[idx])
                    idx += 1
                    continue
                if ch == "]":
                    return "".join(buf_chars), idx + 1
                buf_chars.append(ch)
                idx += 1
            raise SgfSyntaxError(f"Unterminated property value starting at offset {start}")

        # parent for the next '(' or ';'; one entry per open parenthesis
        stack: List[Node] = []
        current: Optional[Node] = None
        # nodes seen since the current '(' was opened
        seq_len: List[int] = []

        i = skip_ws(i)
        if i >= n:
            raise SgfSyntaxError("Empty SGF")
        while True:
            i = skip_ws(i)
            if i >= n:
                break
            ch = text[i]
            if ch == "(":
                if stack and seq_len[-1] == 0:
                    raise SgfSyntaxError(f"Game tree without nodes at offset {i}")
                parent = current if stack else self.root
                stack.append(parent)
                seq_len.append(0)
                current = parent
                i += 1
            elif ch == ")":
                if not stack:
                    raise SgfSyntaxError(f"Unbalanced ')' at offset {i}")
                if seq_len[-1] == 0:
                    raise SgfSyntaxError(f"Game tree without nodes at offset {i}")
                current = stack.pop()
                seq_len.pop()
                i += 1
            elif ch == ";":
                if not stack:
                    raise SgfSyntaxError(f"Node outside game tree at offset {i}")
                node = Node(parent=current)
                current.children.append(node)
                current = node
                seq_len[-1] += 1
                i += 1
                i = self._read_props(text, i, node, read_bracket_value, skip_ws)
            else:
                raise SgfSyntaxError(f"Unexpected character {ch!r} at offset {i}")
        if stack:
            raise SgfSyntaxError("Unexpected end of SGF: missing ')'")
        if DEBUG:
            print("[GameTree] parsed top-level trees:", len(self.root.children))

    @staticmethod
    def _read_props(text, i, node, read_bracket_value, skip_ws) -> int:
        n = len(text)
        while True:
            i = skip_ws(i)
            if i >= n or text[i] in ";()":
                return i
            m = _PROP_RE.match(text, i)
            if not m:
                raise SgfSyntaxError(f"Invalid property identifier at offset {i}")
            prop_id = m.group(0)
            i = skip_ws(m.end())
            values: List[str] = []
            while i < n and text[i] == "[":
                val, i = read_bracket_value(i)
                values.append(val)
                i = skip_ws(i)
            if not values:
                raise SgfSyntaxError(f"Property {prop_id} without value at offset {m.start()}")
            node.props.append((prop_id, values))

    # -------------------------
    # Utilities
    # -------------------------
    def game_nodes(self) -> List[Node]:
        """Top-level game root nodes."""
        return list(self.root.children)

    def mainline(self, start: Optional[Node] = None) -> List[Node]:
        """Nodes from `start` (default: first game root) following first children."""
        cur = start if start is not None else (self.root.children[0] if self.root.children else None)
        nodes: List[Node] = []
        while cur is not None:
            nodes.append(cur)
            cur = cur.children[0] if cur.children else None
        return nodes

    def new_game_node(self) -> Node:
        node = Node(parent=self.root)
        self.root.children.append(node)
        return node

    def add_move(self, parent: Node, color: str, coord: str) -> Node:
        if color not in ("B", "W"):
            raise ValueError("color must be 'B' or 'W'")
        node = Node(parent=parent)
        node.props.append((color, [coord]))
        parent.children.append(node)
        return node

    # -------------------------
    # Serialization
    # -------------------------
    @staticmethod
    def _escape_value(v: str) -> str:
        v = v.replace("\\", "\\\\")
        v = v.replace("]", "\\]")
        return v

    def _serialize_node_props(self, node: Node) -> str:
        parts: List[str] = []
        for key, vals in node.props:
            vs = "".join(f"[{self._escape_value(v)}]" for v in vals)
            parts.append(f"{key}{vs}")
        return "".join(parts)

    def _serialize_subtree(self, node: Node) -> str:
        """Mainline inline, additional children of any mainline node as variations."""
        seq_parts: List[str] = []
        var_parts: List[str] = []
        cur = node
        while cur is not None:
            seq_parts.append(";" + self._serialize_node_props(cur))
            for variation in cur.children[1:]:
                var_parts.append("(" + self._serialize_subtree(variation) + ")")
            if var_parts:
                # variations close the sequence in SGF; the mainline child becomes one of them
                if cur.children:
                    var_parts.insert(0, "(" + self._serialize_subtree(cur.children[0]) + ")")
                break
            cur = cur.children[0] if cur.children else None
        return "".join(seq_parts) + "".join(var_parts)

    def to_sgf(self) -> str:
        return "".join("(" + self._serialize_subtree(ch) + ")" for ch in self.root.children)
