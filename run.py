#!/usr/bin/env python3
"""
Money Flow Bank Entry Point

Starts the FastAPI server with a fresh in-memory ledger.
"""

import sys

from money_flow.api import run_server
from money_flow.config import get_config


if __name__ == "__main__":
    config = get_config()
    print("🏦 Starting Money Flow Bank...")
    print("💰 All financial calculations use Decimal precision")
    if config.seed_demo_accounts:
        print("👤 Demo accounts: 1234567890 / 1234 (savings), 0987654321 / 4321 (checking)")
    print(f"🌐 API available at: http://{config.api_host}:{config.api_port}")
    print(f"📚 Documentation at: http://{config.api_host}:{config.api_port}/docs")
    print()

    try:
        run_server()
    except KeyboardInterrupt:
        print("\n👋 Shutting down Money Flow Bank...")
    except Exception as e:
        print(f"❌ Error starting server: {e}")
        sys.exit(1)
