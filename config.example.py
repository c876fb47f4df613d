# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real tokens. Use .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "DAYPLANNER_APP_NAME": "App display name (default: day-planner).",
    "DAYPLANNER_LOG_LEVEL": "Console logging level (default: INFO).",
    # Connectors
    "DAYPLANNER_CONSOLE_ENABLED": "Run the console REPL (true/false, default: true).",
    # Paths (gitignored)
    "DAYPLANNER_DATA_DIR": "Local data directory (default: .local/day_planner).",
    "DAYPLANNER_DB_PATH": "Key-value SQLite path (default: <data_dir>/planner.sqlite3).",
    # Remote backup
    "DAYPLANNER_GITHUB_API_URL": "GitHub API base URL (default: https://api.github.com).",
    "DAYPLANNER_GITHUB_TOKEN": (
        "Optional token (ghp_... or github_pat_...) used to seed the local credential slot."
    ),
    "DAYPLANNER_SYNC_TIMEOUT_SECONDS": "HTTP timeout for backup requests (default: 15).",
    "DAYPLANNER_GIST_DESCRIPTION": "Label of the backup gist (default: Todo App Data Backup).",
    "DAYPLANNER_GIST_FILENAME": "File inside the backup gist (default: todo-data.json).",
}
