#!/usr/bin/env python3
"""
Development startup script.

Starts the mock Lindo backend and the storefront (pointed at it) in
development mode.
"""

import os
import sys
import subprocess
import time
from pathlib import Path

# Project root
PROJECT_ROOT = Path(__file__).parent.parent

BACKEND_PORT = 8001
STOREFRONT_PORT = 8000


def check_dependencies():
    """Check if required dependencies are installed."""
    try:
        import fastapi
        import uvicorn
        import httpx
        import jwt
        print("✓ All core dependencies installed")
        return True
    except ImportError as e:
        print(f"✗ Missing dependency: {e.name}")
        print("\nRun: pip install -e .")
        return False


def check_env():
    """Report whether a .env file will be picked up."""
    env_file = PROJECT_ROOT / ".env"
    if env_file.exists():
        print("✓ Configuration file found")
    else:
        print("! No .env file, using defaults")
    return True


def start_services(use_mock: bool = True):
    """Start the backend fake (optional) and the storefront."""
    processes = []
    env = dict(os.environ)

    try:
        if use_mock:
            print(f"\n🍼 Starting mock Lindo backend on http://localhost:{BACKEND_PORT} ...")
            backend_process = subprocess.Popen(
                [
                    sys.executable, "-m", "uvicorn",
                    "mock_backend.main:app",
                    "--reload",
                    "--host", "0.0.0.0",
                    "--port", str(BACKEND_PORT),
                ],
                cwd=PROJECT_ROOT,
                env=env,
            )
            processes.append(backend_process)
            env["API_BASE_URL"] = f"http://localhost:{BACKEND_PORT}"

            # Wait a bit for the backend to start
            time.sleep(2)

        print(f"🛒 Starting storefront on http://localhost:{STOREFRONT_PORT} ...")
        storefront_process = subprocess.Popen(
            [
                sys.executable, "-m", "uvicorn",
                "storefront.main:app",
                "--reload",
                "--host", "0.0.0.0",
                "--port", str(STOREFRONT_PORT),
            ],
            cwd=PROJECT_ROOT,
            env=env,
        )
        processes.append(storefront_process)

        print("\n" + "=" * 60)
        print("Services started successfully!")
        print("=" * 60)
        print(f"\n📍 Storefront:     http://localhost:{STOREFRONT_PORT}")
        print(f"📍 Storefront API: http://localhost:{STOREFRONT_PORT}/docs")
        if use_mock:
            print(f"📍 Backend API:    http://localhost:{BACKEND_PORT}/docs")
        print("\nPress Ctrl+C to stop all services")
        print("=" * 60)

        # Wait for processes
        for p in processes:
            p.wait()

    except KeyboardInterrupt:
        print("\n\nShutting down services...")
        for p in processes:
            p.terminate()
        for p in processes:
            p.wait()
        print("All services stopped.")


def main():
    print("=" * 60)
    print("Lindocare Storefront - Development Server")
    print("=" * 60)

    # Pre-flight checks
    print("\nRunning pre-flight checks...")

    if not check_dependencies():
        sys.exit(1)

    check_env()

    print("\n✓ All checks passed!")

    # --live talks to the configured API_BASE_URL instead of the mock
    start_services(use_mock="--live" not in sys.argv[1:])


if __name__ == "__main__":
    main()
