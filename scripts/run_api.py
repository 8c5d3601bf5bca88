#!/usr/bin/env python
"""
Run the workshop pricing API with uvicorn.

Usage:
    python scripts/run_api.py [PORT]

Set WORKSHOP_PRICING_DATA_DIR to serve rules/workshops from another folder.
"""
import subprocess
import sys
import os
from pathlib import Path


def main():
    project_root = Path(__file__).parent.parent
    port = sys.argv[1] if len(sys.argv) > 1 else os.environ.get("WORKSHOP_PRICING_PORT", "8000")

    # Ensure src is in python path
    env = os.environ.copy()
    src_path = str(project_root / "src")
    if "PYTHONPATH" in env:
        env["PYTHONPATH"] = f"{src_path}{os.pathsep}{env['PYTHONPATH']}"
    else:
        env["PYTHONPATH"] = src_path

    print(f"Starting Workshop Pricing API on port {port}...")
    if env.get("WORKSHOP_PRICING_DATA_DIR"):
        print(f"Data directory: {env['WORKSHOP_PRICING_DATA_DIR']}")

    try:
        subprocess.run([
            sys.executable, "-m", "uvicorn",
            "workshop_pricing.api.main:app",
            "--host", "0.0.0.0",
            "--port", str(port),
            "--reload",
        ], env=env, cwd=str(project_root))
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
