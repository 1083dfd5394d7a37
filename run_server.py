#!/usr/bin/env python3
"""
AI Code Review Webhook Server

Runs the Flask app that receives GitHub pull_request webhooks.
"""

import os
import sys
from pathlib import Path

# Add src directory to Python path
src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))

from ai_code_review.webhook import create_app

app = create_app()

if __name__ == '__main__':
    port = int(os.getenv("PORT", "8000"))

    print("🚀 Starting AI Code Review webhook server...")
    print(f"📍 Server will be available at: http://localhost:{port}")
    print("📋 Endpoints:")
    print("   - Health Check: GET /api/v1/health")
    print("   - GitHub Webhook: POST /api/v1/webhook")

    app.run(
        host='0.0.0.0',
        port=port,
        debug=os.getenv("DEBUG", "false").lower() == "true"
    )
