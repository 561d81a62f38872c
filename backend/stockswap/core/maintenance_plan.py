"""Maintenance Plans — the ordered step lists the runner executes per system and mode.

Invariants:
    - Plans are data: (description, operation name, args) with no callables
    - A step without a description runs silently; the kafka run plan logs its
      topic header once, the queue client logs each topic it cleans
    - Every operation name exists on the matching Protocol in repository_protocols
    - Cleanup mode replaces the run list entirely (no shared prefix, no fallthrough)

Design Decisions:
    - Pure plan builder + separate executor: order is testable without clocks or fakes
"""

from dataclasses import dataclass

from stockswap.core.domain_types import ExternalSystem, MaintenanceMode

DEFAULT_TOPICS_TO_CLEAN = (
    "user-events",
    "stock-events",
    "trade-events",
    "notification-events",
    "maintenance-events",
)


@dataclass(frozen=True)
class PlannedStep:
    """One call into an external system, with the line logged before it (if any)."""
    system: ExternalSystem
    operation: str
    description: str | None
    args: tuple[str, ...] = ()


def _database_plan(mode: MaintenanceMode) -> list[PlannedStep]:
    db = ExternalSystem.DATABASE
    if mode == MaintenanceMode.CLEANUP:
        return [
            PlannedStep(db, "check_for_deadlocks", "Cleaning up half performed maintenance"),
            PlannedStep(db, "stop_hung_queries", "Stopping hung queries"),
        ]
    return [
        PlannedStep(db, "init_client", "Starting maintenance script"),
        PlannedStep(db, "modify_index_triggers", "Modifying index triggers"),
        PlannedStep(db, "update_indexes", "Updating indexes"),
        PlannedStep(db, "vacuum_database", "Vacuuming database"),
        PlannedStep(db, "check_for_deadlocks", "Checking for deadlocks"),
    ]


def _queue_plan(
    mode: MaintenanceMode, topics: tuple[str, ...],
) -> list[PlannedStep]:
    queue = ExternalSystem.QUEUE
    if mode == MaintenanceMode.CLEANUP:
        return [
            PlannedStep(queue, "cleanup_topics", "Cleaning up half performed maintenance for kafka"),
            PlannedStep(queue, "stop_consumers", "Stopping hung kafka consumers"),
        ]
    return [
        PlannedStep(queue, "init_client", "Starting maintenance script for kafka"),
        *(
            PlannedStep(
                queue, "clean_topic",
                "Cleaning kafka topics" if i == 0 else None,
                (topic,),
            )
            for i, topic in enumerate(topics)
        ),
        PlannedStep(queue, "validate_cleaned", "Asserting kafka topics are cleaned"),
    ]


def _object_store_plan(mode: MaintenanceMode) -> list[PlannedStep]:
    s3 = ExternalSystem.OBJECT_STORE
    if mode == MaintenanceMode.CLEANUP:
        return [
            PlannedStep(s3, "stop_hung_uploads", "Cleaning up half performed maintenance for s3"),
        ]
    return [
        PlannedStep(s3, "init_client", "Starting maintenance script for s3"),
        PlannedStep(s3, "move_large_blobs_to_glacier", "Moving large blobs to glacier"),
        PlannedStep(s3, "clean_up_old_blobs", "Cleaning up old blobs"),
    ]


def build_plan(
    system: ExternalSystem,
    mode: MaintenanceMode,
    topics: tuple[str, ...] = DEFAULT_TOPICS_TO_CLEAN,
) -> list[PlannedStep]:
    """Ordered steps for one system in one mode."""
    if system == ExternalSystem.DATABASE:
        return _database_plan(mode)
    if system == ExternalSystem.QUEUE:
        return _queue_plan(mode, topics)
    return _object_store_plan(mode)
