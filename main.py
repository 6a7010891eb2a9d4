# main.py
"""What's for Dinner? API - dinner ideas from ingredients and photos."""

from __future__ import annotations

import uvicorn

from whats_for_dinner.config import settings
from whats_for_dinner.main import app

# =============================================================================
# Entrypoint
# =============================================================================
if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
