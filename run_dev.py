#!/usr/bin/env python3
"""
Development runner for the Event Engine Cockpit backend.
"""
import uvicorn
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from cockpit.config import settings_summary, get_settings

if __name__ == "__main__":
    settings = get_settings()
    print("Starting Event Engine Cockpit backend")
    print(settings_summary(settings))
    print("-" * 50)

    uvicorn.run(
        "cockpit.service:app_factory",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info" if settings.debug else "warning"
    )
