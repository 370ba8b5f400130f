from intake.infra.sources.csv_source import CsvTabularSource
from intake.infra.sources.csv_utils import CsvFormatError
from intake.infra.sources.memory_source import MemoryTabularSource

__all__ = [
    "CsvTabularSource",
    "CsvFormatError",
    "MemoryTabularSource",
]
