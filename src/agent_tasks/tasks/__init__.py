"""
Background task subsystem.

Components:
- task_models.py: outcome types (Success, Failure, Cancelled) and TaskState
- interrupts.py: cooperative interruption visible to running work
- background_task.py: BackgroundTask handle around one computation
- task_repository.py: concurrent id -> handle registry that owns the worker pool
- worker_pool.py: daemon-thread executor backing the owned pool
"""
