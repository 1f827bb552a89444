"""Vercel serverless function handler for the Channel Desk API."""

import sys
from pathlib import Path

# Add parent directory to path so we can import from channeldesk
sys.path.insert(0, str(Path(__file__).parent.parent))

from channeldesk.main import app
from mangum import Mangum

# Mangum adapter for Vercel
handler = Mangum(app, lifespan="off")
