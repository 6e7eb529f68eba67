# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets; keep them in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKTRACK_APP_NAME": "App display name (default: tasktrack).",
    "TASKTRACK_LOG_LEVEL": "Console logging level (default: INFO).",
    # Session
    "TASKTRACK_OWNER_ID": "Signed-in owner id. Unset => not signed in.",
    # Paths (gitignored)
    "TASKTRACK_DATA_DIR": "Local data directory for logs and the db (default: .local/tasktrack).",
    "TASKTRACK_TASKS_DB_PATH": "TaskStore SQLite path (default: <data_dir>/tasks.sqlite3).",
    # LLM / OpenRouter (subtask suggestions)
    "TASKTRACK_OPENROUTER_API_KEY": "OpenRouter API key (OPENROUTER_API_KEY also accepted).",
    "TASKTRACK_OPENROUTER_BASE_URL": "OpenRouter base URL (default: https://openrouter.ai/api/v1).",
    "TASKTRACK_LLM_MODELS": "Comma/space separated list of models to try in order.",
    "TASKTRACK_HTTP_REFERER": "Optional OpenRouter metadata header.",
    "TASKTRACK_APP_TITLE": "Optional OpenRouter metadata header title.",
    "TASKTRACK_LLM_FIRST_TOKEN_TIMEOUT_SECONDS": "Per-model first token timeout (default: 20).",
    "TASKTRACK_LLM_READ_TIMEOUT_SECONDS": "HTTP read timeout (default: 25).",
    "TASKTRACK_LLM_CONNECT_TIMEOUT_SECONDS": "HTTP connect timeout (default: 5).",
    "TASKTRACK_SUGGESTION_MAX_ITEMS": "Max suggested subtasks shown (default: 8).",
}
