import os

# Settings and the engine are built at import time; point them at SQLite before anything imports them.
os.environ["POSTGRES_URL"] = "sqlite://"
os.environ["NEWS_CACHE_BACKEND"] = "memory"
for key in (
    "NEWSDATA_API_KEY",
    "GNEWS_API_KEY",
    "MEDIASTACK_API_KEY",
    "GUARDIAN_API_KEY",
    "DEFAULT_AUTHOR_ID",
    "OPENAI_API_KEY",
    "OPEN_API",
):
    os.environ[key] = ""
