"""Command line interface for the vocabulary engine"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from .config.settings import AppSettings, settings
from .core.factory import create_vocabulary_engine
from .core.orchestrator import VocabularyEngine
from .exceptions import VocabEngineError
from .logging_config import configure_from_settings, get_logger
from .models.results import BatchEnrichmentResult, LookupMode
from .models.vocabulary import VocabularyRecord

logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser"""
    prog_name = Path(sys.argv[0]).name
    parser = argparse.ArgumentParser(
        prog=prog_name,
        description="Resolve German words into enriched vocabulary records",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  vocab-engine Haus Schönheit          # Enrich words (heuristic fallback allowed)
  vocab-engine --search Saft           # Search only, no fallback
  vocab-engine words.txt Apfel         # Mix words and .txt files
  vocab-engine --quiz 5 --level A1     # Random quiz words
  vocab-engine --stats                 # Cache, quota and database statistics
        """,
    )

    parser.add_argument("words", nargs="*", help="Words and/or .txt files to resolve")

    lookup_group = parser.add_argument_group("lookup options")
    lookup_group.add_argument(
        "--search",
        action="store_true",
        help="Search mode: report words no provider knows instead of guessing",
    )
    lookup_group.add_argument(
        "--json", action="store_true", help="Print records as JSON"
    )

    quiz_group = parser.add_argument_group("quiz options")
    quiz_group.add_argument(
        "--quiz", type=int, metavar="COUNT", help="Print COUNT random words"
    )
    quiz_group.add_argument("--level", help="Filter quiz words by CEFR level")
    quiz_group.add_argument("--category", help="Filter quiz words by category")

    maintenance_group = parser.add_argument_group("maintenance options")
    maintenance_group.add_argument(
        "--prefetch", action="store_true", help="Prefetch common German words"
    )
    maintenance_group.add_argument(
        "--auto-enrich",
        type=int,
        nargs="?",
        const=0,
        metavar="MAX",
        help="Enrich popular cached words missing from the store",
    )
    maintenance_group.add_argument(
        "--sweep", action="store_true", help="Remove expired cache entries"
    )
    maintenance_group.add_argument(
        "--clear-cache", action="store_true", help="Clear both cache tiers"
    )
    maintenance_group.add_argument(
        "--include-store",
        action="store_true",
        help="With --clear-cache, also clear the permanent vocabulary store",
    )

    info_group = parser.add_argument_group("information options")
    info_group.add_argument(
        "--stats", action="store_true", help="Show cache, quota and database stats"
    )
    info_group.add_argument(
        "--check-providers", action="store_true", help="Show provider configuration"
    )
    info_group.add_argument(
        "--probe",
        action="store_true",
        help="With --check-providers, send a test query to each provider",
    )

    log_group = parser.add_argument_group("logging options")
    log_group.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )
    log_group.add_argument("--debug", action="store_true", help="Enable debug logging")
    log_group.add_argument("--log-file", type=Path, help="Write logs to file")

    return parser


def _is_text_file(path: Path, sample_size: int = 4096) -> bool:
    """Heuristic to detect UTF-8 text files"""
    if not path.is_file():
        return False
    try:
        with open(path, "rb") as f:
            chunk = f.read(sample_size)
    except OSError:
        return False
    if b"\x00" in chunk:
        return False
    try:
        chunk.decode("utf-8")
        return True
    except UnicodeDecodeError:
        return False


def read_word_file(path: Path) -> list[str]:
    """One word or phrase per line; blank lines and # comments are ignored"""
    words = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            words.append(line)
    return words


def collect_words(tokens: list[str]) -> list[str]:
    """Expand positional inputs: existing .txt files become their lines"""
    words: list[str] = []
    for token in tokens:
        path = Path(token)
        if path.suffix.lower() == ".txt":
            if not path.exists():
                logger.error(f"File not found (ignored): {token}")
                continue
            if not _is_text_file(path):
                logger.error(f"File '{token}' is not a valid UTF-8 text file.")
                continue
            words.extend(read_word_file(path))
        else:
            words.append(token)
    return words


def format_record(record: VocabularyRecord) -> str:
    parts = [f"{record.display_word} = {record.translation or '?'}"]
    if record.pronunciation:
        parts.append(f"[{record.pronunciation}]")
    parts.append(f"({record.word_type.value}, {record.level.value}, {record.category})")
    parts.append(f"source={record.source} confidence={record.confidence:.2f}")
    line = " ".join(parts)
    if record.example_sentence:
        line += f"\n    {record.example_sentence}"
    return line


def print_records(records: list[VocabularyRecord], as_json: bool = False) -> None:
    if as_json:
        print(json.dumps([r.model_dump(mode="json") for r in records], indent=2,
                         ensure_ascii=False))
        return
    for record in records:
        print(format_record(record))


def print_batch_results(result: BatchEnrichmentResult) -> None:
    """Print formatted batch enrichment results"""
    print("\n" + "=" * 60)
    print("📊 ENRICHMENT SUMMARY")
    print("=" * 60)
    print(f"Total words: {len(result.outcomes)} in {result.batches} batches")
    print(f"✅ Successful: {result.successful}")
    print(f"❌ Failed: {result.failed}")
    print(f"📈 Success rate: {result.success_rate:.1f}%")
    for error in result.errors:
        print(f"  - {error['word']}: {error['reason']}")
    print("=" * 60)


def print_mapping(title: str, data: dict[str, Any]) -> None:
    print(f"\n{title}")
    print("=" * 40)
    print(json.dumps(data, indent=2, default=str, ensure_ascii=False))


async def run_lookups(
    engine: VocabularyEngine, words: list[str], args: argparse.Namespace
) -> int:
    """Resolve the given words; returns the number of failures"""
    if args.search:
        missing = 0
        for word in words:
            try:
                resolution = await engine.lookup(word, LookupMode.SEARCH)
            except VocabEngineError as e:
                logger.error(e.message)
                missing += 1
                continue
            if resolution.status.found:
                print_records(resolution.records, args.json)
            else:
                print(f"{word}: no result ({resolution.status.value})")
                missing += 1
        return missing

    result = await engine.batch_enrich(words)
    print_records(result.results, args.json)
    if len(words) > 1 or result.failed:
        print_batch_results(result)
    return result.failed


async def run(args: argparse.Namespace, app_settings: AppSettings) -> int:
    """Run the requested commands against one engine instance"""
    engine = create_vocabulary_engine(app_settings)
    async with engine:
        failures = 0

        if args.clear_cache:
            engine.clear_cache(include_store=args.include_store)
            logger.info("✅ Cache cleared")

        if args.sweep:
            removed = engine.cleanup_cache()
            logger.info(f"🧹 Removed {removed} expired cache entries")

        if args.prefetch:
            records = await engine.prefetch_common_words()
            logger.info(f"Prefetched {len(records)} records")

        if args.auto_enrich is not None:
            result = await engine.auto_enrich(args.auto_enrich or None)
            print_batch_results(result)

        words = collect_words(args.words)
        if words:
            failures += await run_lookups(engine, words, args)

        if args.quiz:
            quiz = engine.get_quiz_vocabulary(args.quiz, args.level, args.category)
            print_records(quiz, args.json)

        if args.check_providers:
            report = await engine.check_providers(probe=args.probe)
            print_mapping("🔌 PROVIDERS", report)

        if args.stats:
            print_mapping("📊 STATISTICS", engine.get_stats())

        return failures


def main() -> None:
    """Main entry point for the CLI"""
    parser = create_parser()

    if len(sys.argv) == 1:
        parser.print_help()
        sys.exit(0)

    args = parser.parse_args()

    configure_from_settings(
        settings.logging, debug=args.debug or args.verbose, log_file=args.log_file
    )

    try:
        settings.create_directories()
        failures = asyncio.run(run(args, settings))
        if failures:
            sys.exit(1)
    except VocabEngineError as e:
        logger.error(f"Engine error: {e}")
        if args.debug:
            logger.exception("Full traceback:")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        sys.exit(130)


if __name__ == "__main__":
    main()
