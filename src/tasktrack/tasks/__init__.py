"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Subtask, TaskStatus) + validation
- task_engine.py: pure mutation functions over one owner's task collection
- task_view.py: filtering/ordering/progress for display
- task_board.py: one owner's session (persist first, then apply)
- task_store.py: SQLite-backed TaskRepo
"""
