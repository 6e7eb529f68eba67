"""TaskTrack: personal task tracking with subtasks."""

__version__ = "0.1.0"
