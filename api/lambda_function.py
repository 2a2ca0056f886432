# api/lambda_function.py
"""
AWS Lambda entry module.

The console's default handler setting is `lambda_function.lambda_handler`, so
this file is deployed at the root of the zip (or referenced as
`api.lambda_function.lambda_handler` when the repo layout is kept).
"""
import sys
import os

# Ensure project root is on the Python path so `prompt_relay.*` imports resolve.
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# Lambda has no scrape endpoint; metrics stay in-process only
os.environ.setdefault("PROMETHEUS_ENABLED", "false")

# Load .env if present (Lambda injects env vars natively, but this helps local testing)
from dotenv import load_dotenv
load_dotenv(os.path.join(ROOT, ".env"))

from prompt_relay.handler import lambda_handler  # noqa: F401,E402
