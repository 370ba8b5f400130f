from __future__ import annotations

import logging

from intake.datasets.registry import VariantRegistry
from intake.datasets.variant import SchemaVariant
from intake.domain.ports.sources import TabularSource
from intake.infra.logging.setup import logEvent


class DetectUseCase:
    """
    Назначение/ответственность:
        Определение варианта схемы файла по заголовку (строка 0).
    """

    def __init__(self, registry: VariantRegistry) -> None:
        self.registry = registry

    def run(
        self,
        source: TabularSource,
        logger: logging.Logger,
        run_id: str,
        report,
    ) -> SchemaVariant | None:
        header = source.fetch_row(0)
        variant = self.registry.detect(header)
        report.set_context("header", {"raw": list(header)})
        report.set_context("detection", {"tried": self.registry.names(), "matched": variant.name if variant else None})
        if variant is None:
            logEvent(logger, logging.WARNING, run_id, "detect", f"No schema variant matches header: {list(header)}")
            return None
        report.set_meta(variant=variant.name)
        logEvent(logger, logging.INFO, run_id, "detect", f"Detected schema variant: {variant.name}")
        return variant
