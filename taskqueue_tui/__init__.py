"""State, update logic and rendering for a terminal dashboard of task queue projects, tasks, actions and schedules."""

__version__ = "0.1.0"

__all__ = ["app", "help", "log", "models", "schedules", "styles", "tasks"]