"""Central configuration settings for the application."""

import os
from dotenv import load_dotenv

# Load env vars from a local .env if present (dev convenience)
load_dotenv()

# Market data source (stub data when no URL is configured)
XUEQIU_MCP_NOTE = os.getenv("XUEQIU_MCP_NOTE") or "Xueqiu MCP not configured"
MARKET_DATA_URL = os.getenv("MARKET_DATA_URL")
MARKET_DATA_TOKEN = os.getenv("MARKET_DATA_TOKEN")
MARKET_DATA_TIMEOUT_SECONDS = float(os.getenv("MARKET_DATA_TIMEOUT_SECONDS", "15"))

# Civil time used for the trading-hours gate, post title and log file date
MARKET_TIMEZONE = os.getenv("MARKET_TIMEZONE", "Asia/Shanghai")

# Publishing
PUBLISH_PLACEHOLDER_DATA = os.getenv("PUBLISH_PLACEHOLDER_DATA", "0") not in {"0", "false", "False", ""}
POST_COMMAND = os.getenv("POST_COMMAND", "bird")
POST_SUBCOMMAND = os.getenv("POST_SUBCOMMAND", "tweet")
TWEET_MAX_WEIGHTED_LENGTH = int(os.getenv("TWEET_MAX_WEIGHTED_LENGTH", "280"))

# Fallback log directory, relative to the working directory unless absolute
LOG_DIR = os.getenv("LOG_DIR", "logs")

# Shared database table prefix for the HTTP service
APP_PREFIX = os.getenv("APP_PREFIX")
DEFAULT_APP_PREFIX = "ashare-snowball"
