#!/usr/bin/env python3
"""
Cart Service Runner
===================

Usage:
    python run_app.py                    # Development mode with auto-reload (default)
    python run_app.py --mode prod        # Production mode with workers
    python run_app.py --port 8001        # Custom port
    python run_app.py --host 127.0.0.1   # Custom host
"""

import argparse
import os
import sys

def check_environment():
    """Report what configuration the service will start with"""
    print("\n🔍 Checking environment...")

    if os.path.exists(".env"):
        print("✅ .env file found")
    else:
        print("⚠️  .env file not found, using defaults")

    if not os.environ.get("SECRET_KEY"):
        print("⚠️  SECRET_KEY not set in the environment; tokens use the default key")

def run_app(host: str, port: int, mode: str, workers: int):
    """Run the FastAPI application under uvicorn"""
    import uvicorn

    reload = mode == "dev"
    # Worker processes read this to decide whether a per-process cache is safe
    os.environ["WORKERS"] = str(1 if reload else workers)
    print(f"\n🚀 Starting Cart Service ({mode}) on {host}:{port}")
    print(f"📖 API Docs: http://{host}:{port}/api/docs")

    uvicorn.run(
        "app.main:app",
        host=host,
        port=port,
        reload=reload,
        workers=None if reload else workers,
        log_level="info"
    )

def main():
    parser = argparse.ArgumentParser(
        description="Cart Service Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--mode",
        choices=["dev", "prod"],
        default="dev",
        help="Server mode (default: dev)"
    )
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to (default: 8000)")
    parser.add_argument("--workers", type=int, default=4, help="Worker processes in prod mode")

    args = parser.parse_args()

    check_environment()
    run_app(args.host, args.port, args.mode, args.workers)
    return 0

if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n👋 Server stopped by user")
        sys.exit(0)
