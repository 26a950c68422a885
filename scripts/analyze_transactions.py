#!/usr/bin/env python3
"""Evaluate transactions with the risk engine and export the verdicts.

Input is either a JSON Lines file of transaction payloads (``--input``) or
synthetic traffic produced by the traffic simulation (``--simulate``).

History is kept in memory by default, or in PostgreSQL with
``--store postgres``. Evaluated transactions are exported to the selected
sink (console, JSON file or Kafka).
"""

import argparse
import json
import sys
import time
from collections import Counter
from pathlib import Path
from typing import Any

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from antifraud.api import parse_transaction
from antifraud.config import AntifraudConfig
from antifraud.engine import RiskEngine
from antifraud.exceptions import AntifraudError, InvalidTransactionError, SinkError
from antifraud.logging import get_logger, setup_logging
from antifraud.models import Transaction
from antifraud.scenarios import TrafficSimulation
from antifraud.store import InMemoryHistoryStore

logger = get_logger("antifraud.scripts.analyze")


def build_store(args: argparse.Namespace, config: AntifraudConfig) -> Any:
    """Create the history store selected on the command line."""
    if args.store == "postgres":
        from antifraud.store.postgres import PostgresHistoryStore

        store = PostgresHistoryStore(args.postgres_url or config.postgres.connection_string)
        store.create_schema()
        return store
    return InMemoryHistoryStore()


def build_sink(args: argparse.Namespace, config: AntifraudConfig) -> Any:
    """Create the output sink selected on the command line."""
    if args.sink == "console":
        from antifraud.sinks import ConsoleSink

        return ConsoleSink(pretty=config.output.pretty, max_records=args.max_print)
    if args.sink == "json":
        from antifraud.sinks import JsonFileSink

        return JsonFileSink(args.output_dir or config.output.output_dir)
    if args.sink == "kafka":
        from antifraud.sinks import KafkaSink

        if args.kafka_bootstrap:
            config.kafka.bootstrap_servers = args.kafka_bootstrap
        return KafkaSink(config.kafka)
    raise SinkError(f"Unknown sink: {args.sink}")


def evaluate_file(engine: RiskEngine, path: Path) -> tuple[list[Transaction], int]:
    """Evaluate every payload of a JSON Lines file.

    Malformed lines are logged and skipped; store failures abort the run.

    Returns
    -------
    tuple[list[Transaction], int]
        Evaluated transactions and the number of rejected lines.
    """
    evaluated: list[Transaction] = []
    rejected = 0
    with open(path, encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                transaction = parse_transaction(json.loads(line))
            except (json.JSONDecodeError, InvalidTransactionError) as e:
                logger.warning("Line %d rejected: %s", line_no, e)
                rejected += 1
                continue
            evaluated.append(engine.evaluate(transaction))
    return evaluated, rejected


def print_summary(evaluated: list[Transaction], rejected: int, elapsed: float) -> None:
    """Log verdict counts per risk reason."""
    suspicious = sum(1 for tx in evaluated if tx.is_suspicious)
    reasons = Counter(tx.risk_reason for tx in evaluated)

    logger.info("=" * 60)
    logger.info("Analysis Complete! (%.1fs total)", elapsed)
    logger.info("=" * 60)
    logger.info("Evaluated: %d", len(evaluated))
    logger.info("Suspicious: %d", suspicious)
    logger.info("Approved: %d", len(evaluated) - suspicious)
    if rejected:
        logger.info("Rejected payloads: %d", rejected)
    logger.info("By reason:")
    for reason, count in reasons.most_common():
        logger.info("  - %s %d", f"{reason}:", count)
    logger.info("=" * 60)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Evaluate transactions against the fraud-risk rules"
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--input",
        type=Path,
        help="JSON Lines file with one transaction payload per line",
    )
    source.add_argument(
        "--simulate",
        type=int,
        metavar="ACCOUNTS",
        help="Generate synthetic traffic for this many sender accounts",
    )
    parser.add_argument(
        "--transactions-per-account",
        type=int,
        default=12,
        help="Routine transactions per simulated account (default: 12)",
    )
    parser.add_argument(
        "--fraud-rate",
        type=float,
        default=0.2,
        help="Share of simulated accounts receiving a fraud pattern (default: 0.2)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for the simulation (default: 42)",
    )
    parser.add_argument(
        "--store",
        choices=["memory", "postgres"],
        default="memory",
        help="History store backend (default: memory)",
    )
    parser.add_argument(
        "--postgres-url",
        help="PostgreSQL connection URL (default: from POSTGRES_* environment)",
    )
    parser.add_argument(
        "--sink",
        choices=["console", "json", "kafka"],
        default="console",
        help="Where to export evaluated transactions (default: console)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Output directory for the json sink (default: OUTPUT_DIR)",
    )
    parser.add_argument(
        "--max-print",
        type=int,
        default=20,
        help="Maximum records printed by the console sink (default: 20)",
    )
    parser.add_argument(
        "--kafka-bootstrap",
        help="Kafka bootstrap servers (default: KAFKA_BOOTSTRAP_SERVERS)",
    )
    parser.add_argument(
        "--serialize-by-sender",
        action="store_true",
        help="Serialize evaluations of the same sender account",
    )

    args = parser.parse_args()

    try:
        config = AntifraudConfig.from_env()
    except AntifraudError as e:
        parser.error(str(e))

    setup_logging(config.log_level, config.log_format)

    start = time.perf_counter()
    sink = build_sink(args, config)
    store = None

    rejected = 0
    try:
        store = build_store(args, config)
        engine = RiskEngine(
            store,
            thresholds=config.thresholds,
            serialize_by_sender=args.serialize_by_sender or config.serialize_by_sender,
        )
        if args.input:
            evaluated, rejected = evaluate_file(engine, args.input)
        else:
            simulation = TrafficSimulation(
                num_accounts=args.simulate,
                transactions_per_account=args.transactions_per_account,
                fraud_rate=args.fraud_rate,
                seed=args.seed,
            )
            result = simulation.run(engine)
            evaluated = [item.transaction for item in result.evaluated]
            summary = result.summary()
            logger.info(
                "Simulation: %d fraud triggers, %d missed, %d false positives",
                summary["fraud_triggers"],
                summary["missed"],
                summary["false_positives"],
            )

        topic = config.kafka.verdict_topic if args.sink == "kafka" else "transactions"
        sink.write_batch(topic, evaluated)
    finally:
        sink.close()
        if store is not None and hasattr(store, "close"):
            store.close()

    print_summary(evaluated, rejected, time.perf_counter() - start)


if __name__ == "__main__":
    main()
