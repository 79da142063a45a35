"""JSON snapshot storage for a ledger."""

import logging
from pathlib import Path

from pydantic import ValidationError

from .exceptions import LedgerLoadError
from .models import Ledger

logger = logging.getLogger(__name__)


class LedgerStore:
    """Reads and writes a single ledger snapshot file."""

    def __init__(self, path: Path):
        """Initialize the store."""
        self.path = Path(path)

    def load(self) -> Ledger:
        """
        Load the ledger snapshot.

        Raises:
            LedgerLoadError: If the file is missing or not a valid ledger
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise LedgerLoadError(f"Ledger file not found: {self.path}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise LedgerLoadError(f"Cannot read ledger file {self.path}: {e}") from e

        try:
            ledger = Ledger.model_validate_json(raw)
        except ValidationError as e:
            raise LedgerLoadError(f"Invalid ledger file {self.path}:\n{e}") from e

        logger.debug(
            f"Loaded ledger for group '{ledger.group.name}' "
            f"with {len(ledger.expenses)} expenses"
        )
        return ledger

    def save(self, ledger: Ledger) -> None:
        """Write the ledger snapshot, creating parent directories if needed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(ledger.model_dump_json(indent=2), encoding="utf-8")
        logger.info(f"Saved ledger with {len(ledger.expenses)} expenses to {self.path}")
