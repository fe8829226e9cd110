#!/usr/bin/env python3
"""
Startup script for the Code Escape backend.

This script starts the FastAPI server with proper configuration.
"""

import os
import sys
import uvicorn
from pathlib import Path

def main():
    """Start the FastAPI backend server."""

    project_root = Path(__file__).parent.resolve()
    app_dir = project_root / "backend" / "app"

    print("🚀 Starting Code Escape Backend...")
    print(f"📁 Project root: {project_root}")

    # Run from the project root so `backend.app` and `codeescape` are importable
    os.chdir(project_root)
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))

    main_py = app_dir / "main.py"
    if not main_py.exists():
        print(f"❌ Error: main.py not found at {main_py}")
        sys.exit(1)

    port = int(os.getenv("PORT", "8000"))
    print(f"🌐 Server will be available at: http://localhost:{port}")
    print(f"📖 API documentation will be available at: http://localhost:{port}/docs")
    print("\n" + "="*60)

    try:
        uvicorn.run(
            "backend.app.main:app",
            host="0.0.0.0",
            port=port,
            reload=True,
            reload_dirs=[str(app_dir)],
            log_level="info"
        )
    except KeyboardInterrupt:
        print("\n🛑 Server stopped by user")
    except Exception as e:
        print(f"\n❌ Server failed to start: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
