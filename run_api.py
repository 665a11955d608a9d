"""FastAPI server launcher.

Usage:
    python run_api.py

Host, port and auto-reload come from the environment / .env:
API_HOST (default 0.0.0.0), API_PORT (default 8000), API_RELOAD
(default: on in development only). Docs are served at /api/docs.
"""

import uvicorn

from src.config import config

if __name__ == "__main__":
    base_url = f"http://{config.API_HOST}:{config.API_PORT}"
    print(f"Starting NeuroLearn Progress API ({config.ENVIRONMENT})...")
    print(f"API docs: {base_url}/api/docs")
    print(f"Health check: {base_url}/health")
    print("\nPress Ctrl+C to stop\n")

    uvicorn.run(
        "src.interfaces.api.main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        reload=config.api_reload,
        log_level=config.LOG_LEVEL.lower(),
    )
