"""JSON Lines sink for evaluated transactions."""

import logging
from pathlib import Path
from typing import Any

from antifraud.exceptions import SinkError
from antifraud.sinks.serialization import to_json

logger = logging.getLogger(__name__)


class JsonFileSink:
    """Append records to ``<topic>.jsonl`` files, one JSON document per line.

    Snake-case field names are kept, so an exported file can be fed back to
    the analyzer as input.
    """

    def __init__(self, output_dir: str | Path) -> None:
        """Initialize JSON Lines sink.

        Parameters
        ----------
        output_dir : str | Path
            Directory receiving one file per topic, created if missing.
        """
        self.output_dir = Path(output_dir)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SinkError(f"Cannot create output directory {self.output_dir}: {e}") from e
        self._counts: dict[str, int] = {}

    def path_for(self, topic: str) -> Path:
        return self.output_dir / f"{topic}.jsonl"

    def write_batch(self, topic: str, records: list[Any]) -> None:
        """Append a batch of records to the topic file."""
        with open(self.path_for(topic), "a", encoding="utf-8") as f:
            for record in records:
                f.write(to_json(record))
                f.write("\n")

        self._counts[topic] = self._counts.get(topic, 0) + len(records)
        logger.debug("Appended %d records to %s", len(records), self.path_for(topic))

    def close(self) -> None:
        """Log the files written."""
        for topic, count in self._counts.items():
            logger.info("Wrote %d records to %s", count, self.path_for(topic))
