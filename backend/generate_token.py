"""
Write a development bearer token to token.txt.

Usage: JWT_SECRET=... python generate_token.py [email]
"""

import logging
import sys

from app.config import settings
from app.security import create_access_token

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

email = sys.argv[1] if len(sys.argv) > 1 else "biomed.engineer@example.org"

if not settings.JWT_SECRET:
    logger.error("JWT_SECRET is not set; refusing to mint a token")
    sys.exit(1)

token = create_access_token(subject=email, email=email)
with open("token.txt", "w") as f:
    f.write(token)
logger.info(f"Token for {email} written to token.txt")
