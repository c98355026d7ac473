#!/usr/bin/env python3
"""
Development startup script.

Runs pre-flight checks and starts the POS order service with reload.
"""

import os
import sys
import subprocess
from pathlib import Path

# Project root
PROJECT_ROOT = Path(__file__).parent.parent


def check_dependencies():
    """Check if required dependencies are installed."""
    try:
        import fastapi
        import uvicorn
        import httpx
        import pydantic_settings
        print("✓ All core dependencies installed")
        return True
    except ImportError as e:
        print(f"✗ Missing dependency: {e.name}")
        print("\nRun: pip install -e .")
        return False


def check_env():
    """Copy config/.env from the example on first run."""
    env_file = PROJECT_ROOT / "config" / ".env"
    env_example = PROJECT_ROOT / "config" / ".env.example"

    if env_file.exists():
        print("✓ Configuration file found")
        return True
    elif env_example.exists():
        print("! Configuration file not found, copying from example...")
        import shutil
        shutil.copy(env_example, env_file)
        print("✓ Created config/.env from example")
        print("  Set BACKEND_URL to use the managed backend, or leave it empty for demo data")
        return True
    else:
        print("✗ No configuration file found")
        return False


def start_service(port: str):
    """Start the POS service in development mode."""
    print(f"\n🧾 Starting POS Order Service on http://localhost:{port} ...")
    process = subprocess.Popen(
        [
            sys.executable, "-m", "uvicorn",
            "pos_service.main:app",
            "--reload",
            "--host", "0.0.0.0",
            "--port", port,
        ],
        cwd=PROJECT_ROOT,
        env={**os.environ, "DEBUG": os.environ.get("DEBUG", "true")},
    )

    print("\n" + "=" * 60)
    print(f"📍 POS API:  http://localhost:{port}/docs")
    print(f"📍 Health:   http://localhost:{port}/health")
    print("\nPress Ctrl+C to stop")
    print("=" * 60)

    try:
        process.wait()
    except KeyboardInterrupt:
        print("\n\nShutting down...")
        process.terminate()
        process.wait()
        print("Service stopped.")


def main():
    print("=" * 60)
    print("POS Order Service - Development Server")
    print("=" * 60)

    print("\nRunning pre-flight checks...")

    if not check_dependencies():
        sys.exit(1)

    if not check_env():
        sys.exit(1)

    print("\n✓ All checks passed!")

    start_service(os.environ.get("PORT", "8000"))


if __name__ == "__main__":
    main()
