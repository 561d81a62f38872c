"""Maintenance Runner — executes the database, kafka and s3 plans in sequence.

Invariants:
    - Systems visited in ExternalSystem order: database → kafka → s3
    - Steps run one at a time, each awaited before the next starts
    - Fail-fast: the first raised error propagates, later steps never run
    - No retries and no hidden fallthrough between run and cleanup plans

Design Decisions:
    - Executor resolves plan operation names on the injected client, so the
      order lives in core/maintenance_plan.py and the latency in infrastructure
"""

import logging
from dataclasses import dataclass, field

from stockswap.core.domain_types import ExternalSystem, MaintenanceMode
from stockswap.core.maintenance_plan import (
    DEFAULT_TOPICS_TO_CLEAN,
    PlannedStep,
    build_plan,
)
from stockswap.core.repository_protocols import (
    DatabaseClient,
    ObjectStoreClient,
    QueueClient,
)

logger = logging.getLogger(__name__)

_SYSTEM_LABELS = {
    ExternalSystem.DATABASE: "Database",
    ExternalSystem.QUEUE: "Kafka",
    ExternalSystem.OBJECT_STORE: "S3",
}


@dataclass
class MaintenanceReport:
    """Steps that completed, in execution order."""
    mode: MaintenanceMode
    completed: list[PlannedStep] = field(default_factory=list)


async def run_steps(
    client: object, steps: list[PlannedStep], report: MaintenanceReport,
) -> None:
    """Run each step on client in order. Exceptions propagate unchanged."""
    for step in steps:
        if step.description:
            logger.info(step.description, extra={
                "system": step.system.value, "step": step.operation,
            })
        await getattr(client, step.operation)(*step.args)
        report.completed.append(step)


class MaintenanceRunner:
    """Sequences maintenance plans across the simulated external systems."""

    def __init__(
        self,
        database: DatabaseClient,
        queue: QueueClient,
        object_store: ObjectStoreClient,
        topics: tuple[str, ...] = DEFAULT_TOPICS_TO_CLEAN,
    ):
        self.clients = {
            ExternalSystem.DATABASE: database,
            ExternalSystem.QUEUE: queue,
            ExternalSystem.OBJECT_STORE: object_store,
        }
        self.topics = tuple(topics)

    async def run(self, mode: MaintenanceMode = MaintenanceMode.RUN) -> MaintenanceReport:
        report = MaintenanceReport(mode=mode)
        kind = "cleanup" if mode == MaintenanceMode.CLEANUP else "maintenance"
        for system in ExternalSystem:
            label = _SYSTEM_LABELS[system]
            logger.debug(f"Running {label.lower()} {kind}", extra={"system": system.value})
            steps = build_plan(system, mode, self.topics)
            await run_steps(self.clients[system], steps, report)
            logger.debug(f"{label} {kind} completed", extra={"system": system.value})
        return report
