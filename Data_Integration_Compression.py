"""compression_benchmark
CLI 스크립트: 파일마다 Huffman 압축→복원을 수행하여
압축률·엔트로피 하한·복원 정확도·소요 시간을 표로 출력한다.

    python Data_Integration_Compression.py FILE... [--json OUT.json] [--plot OUT.png]
"""

from __future__ import annotations
import argparse, hashlib, json, logging, math, sys, tempfile, time
from pathlib import Path
from typing import List, Dict

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from Data_Compression import LOG_FORMAT, entropy
from Data_Decoder import decode
from Data_Incoder import encode
from Huffman_Errors import HuffmanError
from Huffman_Tree import build_tree, count_file

logger = logging.getLogger('huffman.benchmark')

# ────────────────────────────────────────────────────────────────────────────────

def sha256(path: Path) -> str:
    """파일의 SHA‑256 해시 반환"""
    h = hashlib.sha256()
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(1 << 16), b''):
            h.update(chunk)
    return h.hexdigest()


def benchmark_one(src: Path, workdir: Path) -> Dict:
    raw_size = src.stat().st_size
    comp = workdir / (src.name + '.huff')
    restored = workdir / (src.name + '.restored')

    # ── 압축 ───────────────────────────────────────────────────────────
    t0 = time.perf_counter()
    freqs = count_file(src)
    tree = build_tree(freqs)
    encode(tree, src, comp)
    enc_ms = (time.perf_counter() - t0) * 1000
    comp_size = comp.stat().st_size

    # ── 복원 ───────────────────────────────────────────────────────────
    t0 = time.perf_counter()
    decode(None, comp, restored)
    dec_ms = (time.perf_counter() - t0) * 1000

    return {
        "file": src.name,
        "enc_ms": round(enc_ms, 1),
        "dec_ms": round(dec_ms, 1),
        "raw_size": raw_size,
        "size": comp_size,
        "ratio": round(comp_size / raw_size * 100, 1),
        "entropy_bound": math.ceil(entropy(freqs) * raw_size / 8),
        "restored_ok": sha256(restored) == sha256(src),
    }


def benchmark(paths: List[Path]) -> List[Dict]:
    results: List[Dict] = []
    with tempfile.TemporaryDirectory(prefix='huffbench-') as tmp:
        for src in paths:
            try:
                results.append(benchmark_one(src, Path(tmp)))
            except HuffmanError as e:
                logger.warning("%s skipped: %s", src, e)
    return results


def plot_results(results: List[Dict], out: Path) -> None:
    names = [r['file'] for r in results]
    ratios = [r['ratio'] for r in results]
    enc_times = [r['enc_ms'] for r in results]
    dec_times = [r['dec_ms'] for r in results]

    fig, axs = plt.subplots(1, 3, figsize=(15, 4))

    # 압축률
    axs[0].bar(names, ratios, color='skyblue')
    axs[0].set_title("ratio (%)")
    axs[0].set_ylim(0, max(ratios) * 1.2)

    # 인코딩/디코딩 시간
    width = 0.35
    x = range(len(names))
    axs[1].bar([i - width / 2 for i in x], enc_times, width, label='encode(ms)', color='orange')
    axs[1].bar([i + width / 2 for i in x], dec_times, width, label='decode(ms)', color='green')
    axs[1].set_xticks(list(x))
    axs[1].set_xticklabels(names)
    axs[1].legend()

    # 실제 크기 vs 엔트로피 하한
    axs[2].bar([i - width / 2 for i in x], [r['size'] for r in results], width, label='huffman')
    axs[2].bar([i + width / 2 for i in x], [r['entropy_bound'] for r in results], width, label='entropy')
    axs[2].set_xticks(list(x))
    axs[2].set_xticklabels(names)
    axs[2].set_title('bytes')
    axs[2].legend()

    fig.tight_layout()
    fig.savefig(out)
    plt.close(fig)


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Huffman 압축 벤치마크")
    ap.add_argument('files', nargs='+', type=Path)
    ap.add_argument('--json', type=Path, help='write results as JSON')
    ap.add_argument('--plot', type=Path, help='save a chart (png/svg/pdf)')
    args = ap.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    results = benchmark([p for p in args.files if p.is_file()])
    if not results:
        print("[오류] 벤치마크할 파일이 없습니다.", file=sys.stderr)
        return 1

    for r in results:
        print(f"{r['file']:<24} {r['raw_size']:>10,} → {r['size']:>10,} bytes "
              f"({r['ratio']:5.1f}%, bound {r['entropy_bound']:,}) "
              f"enc {r['enc_ms']}ms dec {r['dec_ms']}ms {'OK' if r['restored_ok'] else 'FAIL'}")

    if args.json:
        args.json.write_text(json.dumps(results, indent=2, ensure_ascii=False))
        print(f"세부 결과 → {args.json}")
    if args.plot:
        plot_results(results, args.plot)
        print(f"그래프 → {args.plot}")
    return 0 if all(r['restored_ok'] for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
