"""Factory for creating result reporters based on the destination."""

import logging
from pathlib import Path

from cgnbench.evaluation.result_reporter import JsonResultReporter, PickleResultReporter
from cgnbench.evaluation.result_reporter_interface import ResultReporterInterface

# Try to import database support
try:
    from cgnbench.database.availability import DATABASE_AVAILABLE

    if DATABASE_AVAILABLE:
        from cgnbench.evaluation.database_result_reporter import DatabaseResultReporter
except ImportError:
    DATABASE_AVAILABLE = False

logger = logging.getLogger(__name__)

PICKLE_SUFFIXES = (".pkl", ".pickle")
STORAGE_TYPES = ("json", "pickle", "database")


class ResultReporterFactory:
    """Factory for creating appropriate result reporter instances."""

    @staticmethod
    def infer_storage_type(destination: str | Path) -> str:
        """Guess the storage type from a destination path or URL."""
        text = str(destination)
        if "://" in text:
            return "database"
        if Path(text).suffix.lower() in PICKLE_SUFFIXES:
            return "pickle"
        return "json"

    @staticmethod
    def create(
        destination: str | Path | None,
        storage_type: str | None = None,
    ) -> ResultReporterInterface:
        """Create a result reporter for a destination.

        Args:
            destination: File path, or a database URL (None only for database
                storage, which then reads its URL from the environment)
            storage_type: "json", "pickle" or "database"; inferred when None

        Returns:
            Appropriate reporter instance

        Raises:
            ValueError: If required parameters are missing or storage_type is invalid
        """
        if storage_type is None:
            if destination is None:
                raise ValueError("destination is required when storage_type is not given")
            storage_type = ResultReporterFactory.infer_storage_type(destination)

        if storage_type not in STORAGE_TYPES:
            raise ValueError(
                f"Invalid storage_type '{storage_type}'. Must be one of {', '.join(STORAGE_TYPES)}"
            )

        if storage_type == "database":
            if DATABASE_AVAILABLE:
                return DatabaseResultReporter(None if destination is None else str(destination))

            logger.warning(
                "Database dependencies not available. Falling back to JSON output. "
                "Install database support with: pip install 'cgnbench[database]'"
            )
            if destination is None or "://" in str(destination):
                raise ValueError("A file destination is required for the JSON fallback")
            return JsonResultReporter(destination)

        if destination is None:
            raise ValueError(f"destination is required for {storage_type} storage")
        if storage_type == "pickle":
            return PickleResultReporter(destination)
        return JsonResultReporter(destination)

    @staticmethod
    def get_supported_types() -> list[str]:
        """Get list of supported storage types."""
        types = ["json", "pickle"]
        if DATABASE_AVAILABLE:
            types.append("database")
        return types

    @staticmethod
    def is_database_available() -> bool:
        """Check if database dependencies are available."""
        return DATABASE_AVAILABLE
