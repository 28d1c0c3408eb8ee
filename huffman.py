import heapq
from typing import Dict, Iterator, Optional, Tuple


class HuffmanError(Exception):
    pass

class SymbolLookupError(HuffmanError, KeyError): # message symbol missing from the code map
    def __str__(self):
        return str(self.args[0]) if self.args else ""

class InvalidCodeMapError(HuffmanError, ValueError):
    pass

class CorruptStreamError(HuffmanError, ValueError):
    def __init__(self, message: str, offset: int):
        super().__init__(f"{message} at offset {offset}")
        self.offset = offset


class HuffmanNode: # Node for Huffman tree
    def __init__(self, symbol, weight, left=None, right=None):
        self.symbol = symbol    # character or None
        self.weight = weight
        self.left = left
        self.right = right

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __lt__(self, other):
        return self.weight < other.weight # allows heapq to maintain the min-heap property based on weight

    def __repr__(self):
        if self.is_leaf():
            return f"HuffmanNode({self.symbol!r}, {self.weight})"
        return f"HuffmanNode(weight={self.weight})"


def build_frequency_table(message: str) -> Dict[str, int]:
    frequency_table: Dict[str, int] = {}
    for symbol in message:
        frequency_table[symbol] = frequency_table.get(symbol, 0) + 1
    return frequency_table

def build_huffman_tree(frequency_table: Dict[str, int]) -> Optional[HuffmanNode]: # frequency_table: dict of symbol -> frequency
    """
    Merge the two lightest nodes until one remains; that node is the root.

    Returns None for an empty table. With a single symbol the loop never runs
    and the lone leaf is the root. Ties between equal weights are resolved by
    heapq and are not deterministic by symbol.
    """
    priority_queue = [HuffmanNode(symbol, weight) for symbol, weight in frequency_table.items()]
    if not priority_queue:
        return None
    heapq.heapify(priority_queue)

    while len(priority_queue) > 1:
        left = heapq.heappop(priority_queue)
        right = heapq.heappop(priority_queue)
        merged_node = HuffmanNode(None, left.weight + right.weight, left, right) # internal node with combined weight
        heapq.heappush(priority_queue, merged_node)

    return priority_queue[0] # root of the tree

def build_tree(message: str) -> Tuple[Optional[HuffmanNode], Dict[str, int]]:
    frequency_table = build_frequency_table(message)
    return build_huffman_tree(frequency_table), frequency_table


def iter_codes(node: Optional[HuffmanNode], prefix: str = "") -> Iterator[Tuple[str, str]]:
    """
    Depth-first walk yielding (symbol, code) for every leaf under `node`.

    Left edges append '0' and right edges append '1'. A leaf reached with an
    empty path (a root that is itself a leaf) is given the code '0' so that a
    message with one distinct symbol still has a usable code.
    """
    if node is None:
        return

    # skewed trees can be deeper than the recursion limit
    stack = [(node, prefix)]
    while stack:
        current, code = stack.pop()
        if current.is_leaf():
            yield current.symbol, code or "0"
            continue
        # right pushed first so the left subtree is visited first
        if current.right is not None:
            stack.append((current.right, code + "1"))
        if current.left is not None:
            stack.append((current.left, code + "0"))

def annotate(symbol_to_code: Dict[str, str], code_to_symbol: Dict[str, str],
             node: Optional[HuffmanNode], prefix: str = "") -> Optional[bool]:
    if node is None:
        return None

    for symbol, code in iter_codes(node, prefix):
        # first assignment wins
        symbol_to_code.setdefault(symbol, code)
        code_to_symbol.setdefault(code, symbol)
    return True

def generate_huffman_codes(root: Optional[HuffmanNode]) -> Tuple[Dict[str, str], Dict[str, str]]:
    symbol_to_code: Dict[str, str] = {}
    code_to_symbol: Dict[str, str] = {}
    annotate(symbol_to_code, code_to_symbol, root)
    return symbol_to_code, code_to_symbol

def is_prefix_free(codes) -> bool:
    # after sorting, a code that prefixes another sorts directly before some code it prefixes
    ordered = sorted(codes)
    return all(not b.startswith(a) for a, b in zip(ordered, ordered[1:]))


def compress(message: str, symbol_to_code: Dict[str, str]) -> str:
    compression = []
    for position, symbol in enumerate(message):
        try:
            compression.append(symbol_to_code[symbol])
        except KeyError:
            raise SymbolLookupError(f"no code for symbol {symbol!r} at position {position}") from None
    return "".join(compression)


class DecodeNode: # Node of the prefix tree rebuilt from a code -> symbol map
    __slots__ = ("symbol", "children")

    def __init__(self):
        self.symbol = None
        self.children = [None, None] # indexed by bit

def build_decode_tree(code_to_symbol: Dict[str, str]) -> DecodeNode:
    root = DecodeNode()
    for code, symbol in code_to_symbol.items():
        if not code:
            raise InvalidCodeMapError(f"empty code for symbol {symbol!r}")
        node = root
        for ch in code:
            if ch not in "01":
                raise InvalidCodeMapError(f"code {code!r} contains {ch!r}, expected only '0' and '1'")
            if node.symbol is not None:
                raise InvalidCodeMapError(f"code map is not prefix-free: {code!r} extends a shorter code")
            bit = 1 if ch == "1" else 0
            if node.children[bit] is None:
                node.children[bit] = DecodeNode()
            node = node.children[bit]
        if node.symbol is not None or node.children != [None, None]:
            raise InvalidCodeMapError(f"code map is not prefix-free: {code!r} collides with another code")
        node.symbol = symbol
    return root

def decompress(compressed: str, code_to_symbol: Dict[str, str]) -> str:
    if not compressed:
        return ""

    root = build_decode_tree(code_to_symbol)
    decompression = []
    node = root
    code_start = 0
    for index, ch in enumerate(compressed):
        if ch == "0":
            node = node.children[0]
        elif ch == "1":
            node = node.children[1]
        else:
            raise CorruptStreamError(f"unexpected character {ch!r} in compressed stream", index)

        if node is None:
            raise CorruptStreamError("no code matches the remaining stream", code_start)
        if node.symbol is not None: # reached a leaf
            decompression.append(node.symbol)
            node = root # reset to the root for the next symbol
            code_start = index + 1

    if node is not root:
        raise CorruptStreamError("compressed stream ends in the middle of a code", code_start)
    return "".join(decompression)
