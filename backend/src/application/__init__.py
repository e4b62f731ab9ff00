from backend.src.application.batch_orchestrator import BatchOrchestrator
from backend.src.application.queue_service import QueueService

__all__ = [
    "BatchOrchestrator",
    "QueueService",
]
