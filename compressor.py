"""
Command line front end for the Huffman text codec.

Compress:
  python compressor.py message.txt message.huf
Decompress:
  python compressor.py message.huf restored.txt --decompress

The compressed file holds the code as a text of '0'/'1' characters. The
code -> symbol table needed to decode it is stored next to it in a JSON
side-channel file (huffman_metadata.json unless --metadata is given).
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

import huffman as huff

DEFAULT_METADATA = "huffman_metadata.json"


class MetadataError(ValueError):
    pass


# Persistence

def save_metadata(path: Path, code_to_symbol: Dict[str, str]) -> None:
    with path.open("w", encoding="utf-8") as f:
        json.dump(code_to_symbol, f, ensure_ascii=False, indent=2, sort_keys=True)

def load_metadata(path: Path) -> Dict[str, str]:
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise MetadataError(f"{path}: expected a JSON object of code -> symbol pairs")
    for code, symbol in data.items():
        if not isinstance(symbol, str) or len(symbol) != 1:
            raise MetadataError(f"{path}: code {code!r} must map to a single character, got {symbol!r}")
    return data


# Commands

def read_text(path: Path) -> str:
    # newline="" keeps "\r\n" and lone "\r" exactly as they are in the file
    with path.open("r", encoding="utf-8", newline="") as f:
        return f.read()

def write_text(path: Path, text: str) -> None:
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(text)

def compress_file(input_path: Path, output_path: Path, metadata_path: Path, quiet: bool = False) -> None:
    message = read_text(input_path)

    root, frequency_table = huff.build_tree(message)
    symbol_to_code: Dict[str, str] = {}
    code_to_symbol: Dict[str, str] = {}
    if huff.annotate(symbol_to_code, code_to_symbol, root) is None:
        # Nothing to compress; still leave a valid (empty) pair of files behind
        compressed = ""
    else:
        compressed = huff.compress(message, symbol_to_code)

    # code table first, a compressed file without one cannot be decoded
    save_metadata(metadata_path, code_to_symbol)
    try:
        write_text(output_path, compressed)
    except OSError:
        metadata_path.unlink(missing_ok=True)
        raise

    if not quiet:
        original_bits = len(message) * 8
        ratio = len(compressed) / max(1, original_bits)
        print(f"Read {len(message)} symbols ({len(frequency_table)} distinct) from {input_path}")
        print(f"Wrote {len(compressed)} code digits to {output_path} (ratio vs 8-bit chars: {ratio:.3f})")
        print(f"Wrote code table to {metadata_path}")

def decompress_file(input_path: Path, output_path: Path, metadata_path: Path, quiet: bool = False) -> None:
    compressed = read_text(input_path)
    code_to_symbol = load_metadata(metadata_path)

    message = huff.decompress(compressed, code_to_symbol)
    write_text(output_path, message)

    if not quiet:
        print(f"Decoded {len(message)} symbols from {input_path} using {metadata_path}")
        print(f"Wrote {output_path}")


# Main

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Huffman coding based text compressor")
    ap.add_argument("input", type=str, help="File to read")
    ap.add_argument("output", type=str, help="File to write")
    ap.add_argument("--decompress", action="store_true", help="Decode INPUT instead of encoding it")
    ap.add_argument("--metadata", type=str, default=DEFAULT_METADATA,
                    help=f"Code table side-channel file (default: {DEFAULT_METADATA})")
    ap.add_argument("--quiet", action="store_true", help="Do not print the summary lines")
    return ap

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    input_path = Path(args.input)
    output_path = Path(args.output)
    metadata_path = Path(args.metadata)

    try:
        if args.decompress:
            decompress_file(input_path, output_path, metadata_path, quiet=args.quiet)
        else:
            compress_file(input_path, output_path, metadata_path, quiet=args.quiet)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, MetadataError, huff.HuffmanError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
