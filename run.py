#!/usr/bin/env python3
"""Run script for teamstandup."""

import os

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "teamstandup.api.app:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        log_level=os.getenv("LOG_LEVEL", "info"),
        reload=os.getenv("ENVIRONMENT", "development").lower() == "development",
    )
