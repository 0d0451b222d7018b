"""
Transaction Toolkit - Command Line Entry Point

Commands:
- report [PATH]: load a JSON transaction export and log the standard
  set of aggregate and filter queries
- word [--once]: fetch a random word every poll interval and log it

Settings come from config/settings.yaml (see settings.yaml.example);
environment variables in .env override them.
"""

import argparse
import logging
import sys
from typing import List, Optional, Tuple

from dotenv import load_dotenv

# Load .env file if it exists (for local development)
load_dotenv()

from config.settings import Settings, load_settings
from src.loader import TransactionFileError, load_store
from src.models.transaction import MalformedRecordError
from src.transaction_store import TransactionStore
from src.word_fetcher import WordPoller, get_random_word

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)


def build_report(store: TransactionStore) -> List[Tuple[str, object]]:
    """
    Run the standard report queries against a store.

    Returns:
        List of (label, result) pairs in display order
    """
    return [
        ("All transactions", [t.to_dict() for t in store.all()]),
        ("Unique transaction types", sorted(store.unique_types())),
        ("Total amount", store.total_amount()),
        ("Total amount on 2019-01-01", store.total_amount_by_date(2019, 1, 1)),
        ("Debit transactions", [t.id for t in store.by_type('debit')]),
        ("Transactions 2019-01-01 .. 2019-01-03",
         [t.id for t in store.by_date_range('2019-01-01', '2019-01-03')]),
        ("Transactions at SuperMart", [t.id for t in store.by_merchant('SuperMart')]),
        ("Average amount", store.average_amount()),
        ("Transactions between 90 and 100", [t.id for t in store.by_amount_range(90, 100)]),
        ("Total debit amount", store.total_debit_amount()),
        ("Month with most transactions", store.most_frequent_month()),
        ("Month with most debit transactions", store.most_frequent_debit_month()),
        ("Dominant transaction type", store.dominant_type()),
        ("Transactions before 2019-01-03", [t.id for t in store.before_date('2019-01-03')]),
        ("Transaction with id 2", store.find_by_id('2')),
        ("Descriptions", store.descriptions()),
    ]


def run_report(settings: Settings, path: Optional[str] = None) -> int:
    """Load the transactions file and log every report line. Returns exit code."""
    source = path or settings.transactions_file

    try:
        store = load_store(source)
    except TransactionFileError as e:
        logger.error(f"Could not read transactions: {e}")
        return 1
    except MalformedRecordError as e:
        logger.error(f"Malformed transaction record: {e}")
        return 1

    if store.duplicate_ids:
        logger.warning(f"Duplicate transaction ids: {sorted(store.duplicate_ids)}")

    logger.info("=" * 50)
    logger.info(f"Transaction report - {len(store)} transaction(s)")
    logger.info("=" * 50)
    for number, (label, result) in enumerate(build_report(store), start=1):
        logger.info(f"{number}. {label}: {result}")
    logger.info("=" * 50)
    return 0


def run_word_poller(settings: Settings, once: bool = False) -> int:
    """Fetch words on the configured interval until interrupted."""
    def fetch() -> str:
        return get_random_word(
            url=settings.word_api_url,
            timeout=settings.request_timeout_seconds,
            max_retries=settings.max_retries,
            base_delay=settings.retry_base_delay_seconds,
        )

    poller = WordPoller(fetch=fetch, interval=settings.poll_interval_seconds)
    logger.info(f"Polling {settings.word_api_url} every {settings.poll_interval_seconds:.0f}s")

    try:
        poller.poll(lambda word: logger.info(f"Word: {word}"), iterations=1 if once else None)
    except KeyboardInterrupt:
        logger.info("Stopped")
    return 0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Transaction query toolkit")
    subparsers = parser.add_subparsers(dest="command", required=True)

    report = subparsers.add_parser("report", help="Run the transaction report")
    report.add_argument("path", nargs="?", help="JSON file (defaults to settings)")

    word = subparsers.add_parser("word", help="Poll the random word API")
    word.add_argument("--once", action="store_true", help="Fetch a single word and exit")

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        settings = load_settings()
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Configuration error: {e}")
        return 1

    logging.getLogger().setLevel(settings.log_level.upper())

    if args.command == "report":
        return run_report(settings, args.path)
    return run_word_poller(settings, once=args.once)


if __name__ == "__main__":
    sys.exit(main())
