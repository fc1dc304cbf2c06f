from .build_worker import BuildWorker

__all__ = ["BuildWorker"]
