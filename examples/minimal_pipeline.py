import asyncio
import sys
from collections import Counter
from pathlib import Path

from chunkwise import ChunkProcessor, ProcessingOptions, load_processing_options
from chunkwise.utils import setup_logging


async def count_words(chunk: str, index: int) -> Counter:
    # Stand-in for a slow per-chunk call (tokenizer, model, remote API)
    await asyncio.sleep(0.01)
    return Counter(chunk.lower().split())


async def main() -> None:
    setup_logging("INFO")

    if len(sys.argv) < 2:
        raise SystemExit("usage: python examples/minimal_pipeline.py FILE [CONFIG.yaml]")

    content = Path(sys.argv[1]).read_text(encoding="utf-8")
    options = (
        load_processing_options(sys.argv[2])
        if len(sys.argv) > 2
        else ProcessingOptions(chunk_size=20_000)
    )

    processor = ChunkProcessor(options)

    print("▶ Running chunkwise minimal pipeline...")
    report = await processor.run(content, count_words)

    totals = processor.combine(report.results, lambda acc, cur: acc + cur) or Counter()

    print(f"Chunks: {report.stats.chunk_count} (concurrency {report.concurrency})")
    print(f"Throughput: {report.stats.throughput} bytes/ms")
    print("\nTop words:")
    for word, count in totals.most_common(10):
        print(f"- {word}: {count}")

    suggestions = processor.suggest_optimizations(report.stats)
    if suggestions:
        print("\nSuggestions:")
        for suggestion in suggestions:
            print(f"- {suggestion}")


if __name__ == "__main__":
    asyncio.run(main())
