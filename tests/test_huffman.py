import pytest

import huffman as huff


ALNUM_MESSAGES = [
    "PT3IPpBdlYhrAxlO3eYN",
    "ezVRhK7Daqprm8RuYlQr",
    "7DY5boVpKeeHnluOOQ6v",
    "p1btee56FfZ9U72q6CJg",
    "WHC7rNNqdPIUsGhUHkmP",
    "IKnqUswKwjUvkS31NVVQ",
]

UNICODE_MESSAGES = [
    "Iζ慸,ޛӹﴡ䕖惂ϾEϲO$,ôzᐖ夥ݵʗ枒ქ㬣",
    "Ɇかsᷨ쮢vRƅ駴Ǌ(Xڠퟺ%1刻XɾHǱ,䧺ڟ",
    "naïve café 😀🚀 漢字 한국어",
]


def codes_for(message):
    root, _ = huff.build_tree(message)
    return huff.generate_huffman_codes(root)

def roundtrip(message):
    symbol_to_code, code_to_symbol = codes_for(message)
    return huff.decompress(huff.compress(message, symbol_to_code), code_to_symbol)

def internal_nodes(node):
    stack = [node]
    while stack:
        n = stack.pop()
        if not n.is_leaf():
            yield n
            stack.extend([n.left, n.right])

def leaves(node):
    stack = [node]
    while stack:
        n = stack.pop()
        if n.is_leaf():
            yield n
        else:
            stack.extend([n.left, n.right])

def weight_shape(node):
    if node.is_leaf():
        return node.weight
    return (node.weight, tuple(sorted([weight_shape(node.left), weight_shape(node.right)], key=repr)))


@pytest.mark.parametrize("message", ALNUM_MESSAGES + UNICODE_MESSAGES)
def test_roundtrip(message):
    assert roundtrip(message) == message


def test_frequency_table_conserves_symbols():
    message = "mississippi river"
    ft = huff.build_frequency_table(message)
    assert sum(ft.values()) == len(message)
    assert set(ft) == set(message)
    assert ft["s"] == 4
    assert ft["i"] == 5


def test_build_tree_weights():
    message = "abracadabra alakazam"
    root, ft = huff.build_tree(message)
    assert root.weight == len(message)
    for node in internal_nodes(root):
        assert node.symbol is None
        assert node.weight == node.left.weight + node.right.weight
    leaf_list = list(leaves(root))
    assert len(leaf_list) == len(ft)
    assert {leaf.symbol: leaf.weight for leaf in leaf_list} == ft


def test_codes_are_prefix_free_and_inverse():
    symbol_to_code, code_to_symbol = codes_for("the quick brown fox jumps over the lazy dog")
    assert huff.is_prefix_free(symbol_to_code.values())
    assert len(symbol_to_code) == len(code_to_symbol)
    for symbol, code in symbol_to_code.items():
        assert code and set(code) <= {"0", "1"}
        assert code_to_symbol[code] == symbol


def test_more_frequent_symbols_get_shorter_codes():
    message = "a" * 50 + "b" * 20 + "c" * 5 + "d"
    symbol_to_code, _ = codes_for(message)
    assert len(symbol_to_code["a"]) <= len(symbol_to_code["b"]) <= len(symbol_to_code["c"])
    assert len(symbol_to_code["a"]) == 1


def test_explore_the_universe():
    message = "Explore the universe!"
    symbol_to_code, code_to_symbol = codes_for(message)
    compressed = huff.compress(message, symbol_to_code)
    assert set(compressed) <= {"0", "1"}
    assert len(compressed) == sum(len(symbol_to_code[s]) for s in message)
    assert huff.decompress(compressed, code_to_symbol) == message


def test_same_frequencies_different_symbols():
    root_a, _ = huff.build_tree("aaabbc")
    root_b, _ = huff.build_tree("xxxyyz")
    assert weight_shape(root_a) == weight_shape(root_b)

    codes_a, _ = huff.generate_huffman_codes(root_a)
    codes_b, _ = huff.generate_huffman_codes(root_b)
    assert set(codes_a) == {"a", "b", "c"}
    assert set(codes_b) == {"x", "y", "z"}
    assert sorted(map(len, codes_a.values())) == sorted(map(len, codes_b.values()))


def test_empty_message():
    root, ft = huff.build_tree("")
    assert root is None
    assert ft == {}

    symbol_to_code, code_to_symbol = {}, {}
    assert huff.annotate(symbol_to_code, code_to_symbol, root) is None
    assert symbol_to_code == {} and code_to_symbol == {}
    assert huff.compress("", {}) == ""
    assert huff.decompress("", {}) == ""


def test_single_distinct_symbol():
    message = "aaaa"
    root, _ = huff.build_tree(message)
    assert root.is_leaf()
    assert root.weight == 4

    symbol_to_code, code_to_symbol = huff.generate_huffman_codes(root)
    assert symbol_to_code == {"a": "0"}
    assert code_to_symbol == {"0": "a"}
    compressed = huff.compress(message, symbol_to_code)
    assert compressed == "0000"
    assert huff.decompress(compressed, code_to_symbol) == message


def test_annotate_keeps_first_assignment():
    symbol_to_code = {"a": "111"}
    code_to_symbol = {"111": "a"}
    root, _ = huff.build_tree("ab")
    assert huff.annotate(symbol_to_code, code_to_symbol, root) is True
    assert symbol_to_code["a"] == "111"
    assert code_to_symbol["111"] == "a"
    assert symbol_to_code["b"] in ("0", "1")


def test_annotate_prefix():
    root, _ = huff.build_tree("ab")
    symbol_to_code = {}
    huff.annotate(symbol_to_code, {}, root, "10")
    assert sorted(symbol_to_code.values()) == ["100", "101"]


def test_deep_tree_codes():
    # Fibonacci weights give a maximally skewed tree
    fib = [1, 1]
    while len(fib) < 20:
        fib.append(fib[-1] + fib[-2])
    message = "".join(chr(0x4E00 + i) * w for i, w in enumerate(fib))
    symbol_to_code, code_to_symbol = codes_for(message)
    assert max(len(c) for c in symbol_to_code.values()) == len(fib) - 1
    assert huff.decompress(huff.compress(message, symbol_to_code), code_to_symbol) == message


def test_compress_unknown_symbol():
    symbol_to_code, _ = codes_for("abc")
    with pytest.raises(huff.SymbolLookupError) as excinfo:
        huff.compress("abd", symbol_to_code)
    assert isinstance(excinfo.value, KeyError)
    assert "'d'" in str(excinfo.value)
    assert "position 2" in str(excinfo.value)


def test_decompress_rejects_non_binary():
    with pytest.raises(huff.CorruptStreamError) as excinfo:
        huff.decompress("01x1", {"0": "a", "1": "b"})
    assert excinfo.value.offset == 2


def test_decompress_rejects_unmatched_path():
    # "11" leads off the code tree
    with pytest.raises(huff.CorruptStreamError) as excinfo:
        huff.decompress("0011", {"0": "a", "10": "b"})
    assert excinfo.value.offset == 2


def test_decompress_rejects_truncated_stream():
    symbol_to_code, code_to_symbol = codes_for("abcdefgh")
    compressed = huff.compress("abcdefgh", symbol_to_code)
    with pytest.raises(huff.CorruptStreamError):
        huff.decompress(compressed[:-1], code_to_symbol)


@pytest.mark.parametrize("code_map", [
    {"0": "a", "01": "b"},
    {"01": "b", "0": "a"},
    {"": "a", "1": "b"},
    {"0": "a", "12": "b"},
])
def test_invalid_code_maps(code_map):
    with pytest.raises(huff.InvalidCodeMapError):
        huff.decompress("0", code_map)


def test_is_prefix_free():
    assert huff.is_prefix_free(["0", "10", "11"])
    assert not huff.is_prefix_free(["0", "01", "11"])
    assert not huff.is_prefix_free(["10", "11", "1"])
    assert huff.is_prefix_free([])
