"""
Huffman file compressor (CLI)
=============================
    python Data_Compression.py -e FROM_FILE TO_FILE [--tree-out TREE] [--show-metrics]
    python Data_Compression.py -d FROM_FILE TO_FILE [--tree TREE]

Exit status 0 on success, 1 on a usage error or any compression failure.
"""

import argparse, json, logging, os, sys
from pathlib import Path
from typing import Dict, Tuple

import numpy as np

from Data_Decoder import decode
from Data_Incoder import encode
from Huffman_Errors import HuffmanError, HuffmanIOError
from Huffman_Tree import Tree, build_tree, build_tree_from_text, code_table, count_file
from Tree_Codec import deserialize_tree, serialize_tree

__all__ = [
    'build_tree_from_text', 'encode', 'decode', 'serialize_tree', 'deserialize_tree',
    'compress_file', 'decompress_file', 'analyze', 'main',
]

logger = logging.getLogger('huffman')

PART_SUFFIX = '.part'
LOG_FORMAT = "%(levelname)-8s %(name)s>> %(message)s"

# -------------------------------------------------
# 1. 데이터 특성 분석
# -------------------------------------------------

def entropy(freqs: Dict[int, int]) -> float:
    """Shannon entropy in bits/byte, the lower bound on the average code length."""
    counts = np.fromiter(freqs.values(), dtype=np.float64)
    p = counts / counts.sum()
    return float(-(p * np.log2(p)).sum())


def analyze(freqs: Dict[int, int], tree: Tree, dst: Path) -> Dict[str, float]:
    """Report for an already-compressed file, from the counts and tree used to encode it."""
    codes = code_table(tree)
    total = sum(freqs.values())
    avg_len = sum(freqs[s] * len(codes[s]) for s in freqs) / total
    comp_size = dst.stat().st_size
    return {
        'original_size': total,
        'distinct_symbols': len(freqs),
        'entropy': entropy(freqs),
        'avg_code_length': avg_len,
        'compressed_size': comp_size,
        'ratio': round(comp_size / total * 100, 2),
    }

# -------------------------------------------------
# 2. 파일 단위 압축/복원
# -------------------------------------------------

def _replace_on_success(to_path: Path, work):
    """Run `work(tmp)` against TO_FILE.part and move it over TO_FILE only if it succeeds."""
    tmp = to_path.with_name(to_path.name + PART_SUFFIX)
    try:
        work(tmp)
        try:
            os.replace(tmp, to_path)
        except OSError as e:
            raise HuffmanIOError('replace', to_path, e) from e
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def compress_file(src: Path, dst: Path, tree_out: Path = None) -> Tuple[Dict[int, int], Tree]:
    """Compress `src` into `dst`; the tree file, if asked for, is written first."""
    freqs = count_file(src)
    tree = build_tree(freqs)
    logger.info("%s: %d distinct symbols", src, tree.leaves)
    if tree_out is not None:
        serialize_tree(tree, tree_out)
        logger.info("tree written → %s", tree_out)
    try:
        _replace_on_success(dst, lambda tmp: encode(tree, src, tmp))
    except BaseException:
        if tree_out is not None:
            tree_out.unlink(missing_ok=True)
        raise
    return freqs, tree


def decompress_file(src: Path, dst: Path, tree_file: Path = None) -> None:
    tree = deserialize_tree(tree_file) if tree_file is not None else None
    _replace_on_success(dst, lambda tmp: decode(tree, src, tmp))

# -------------------------------------------------
# 3. CLI
# -------------------------------------------------

class _ArgParser(argparse.ArgumentParser):
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    ap = _ArgParser(description="Huffman 압축기 (encode / decode)")
    mode = ap.add_mutually_exclusive_group(required=True)
    mode.add_argument('-e', dest='mode', action='store_const', const='encode', help='compress FROM_FILE')
    mode.add_argument('-d', dest='mode', action='store_const', const='decode', help='decompress FROM_FILE')
    ap.add_argument('from_file', metavar='FROM_FILE', type=Path)
    ap.add_argument('to_file', metavar='TO_FILE', type=Path)
    ap.add_argument('--tree-out', type=Path, help='also write the tree to this file (-e)')
    ap.add_argument('--tree', type=Path, help='decode with the tree stored in this file (-d)')
    ap.add_argument('--show-metrics', action='store_true')
    ap.add_argument('-v', '--verbose', action='store_true')
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()],
    )

    if not args.from_file.is_file():
        print(f"[오류] 파일을 찾을 수 없습니다: {args.from_file}", file=sys.stderr)
        return 1
    encoded = None
    try:
        if args.mode == 'encode':
            encoded = compress_file(args.from_file, args.to_file, args.tree_out)
        else:
            decompress_file(args.from_file, args.to_file, args.tree)
    except HuffmanError as e:
        logger.debug("%s failed", args.mode, exc_info=True)
        print(f"[오류] {args.mode} 실패: {e}", file=sys.stderr)
        return 1

    size_in = args.from_file.stat().st_size
    size_out = args.to_file.stat().st_size
    print(f"{args.mode} 완료 → {args.to_file} ({size_in:,} → {size_out:,} bytes)")
    if args.show_metrics and encoded is not None:
        m = analyze(*encoded, args.to_file)
        print(json.dumps(m, indent=2, ensure_ascii=False))
    return 0


if __name__ == '__main__':
    sys.exit(main())
