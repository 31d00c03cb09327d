#!/usr/bin/env python3
"""
Startup script for the ProjectHub backend
Creates missing tables, then starts the FastAPI server
"""

import uvicorn
import os
from dotenv import load_dotenv


def main():
    # Load environment variables
    load_dotenv()

    from projecthub.database import init_db
    init_db()

    # Server configuration
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    reload = os.getenv("RELOAD", "true").lower() == "true"

    print("Starting ProjectHub Server...")
    print(f"Host: {host}")
    print(f"Port: {port}")
    print(f"Reload: {reload}")
    print("=" * 50)

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info"
    )


if __name__ == "__main__":
    main()
