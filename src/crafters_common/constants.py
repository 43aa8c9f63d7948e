"""Shared constants for the crafters CLI and TUI."""

from pathlib import Path

# Local state (overridable via CRAFTERS_HOME)
CRAFTERS_DIR = Path.home() / ".crafters"
CONFIG_FILE_NAME = "config.json"
AUDIT_FILE_NAME = "audit.jsonl"

DEFAULT_BASE_DOMAIN = "crafter.run"

# Spaceship (DNS registrar)
SPACESHIP_API_URL = "https://spaceship.dev/api/v1"
DEFAULT_TTL = 3600

# Vercel (hosting platform)
VERCEL_API_URL = "https://api.vercel.com"
DEFAULT_VERCEL_CNAME = "cname.vercel-dns.com"
VERCEL_DNS_MARKER = "vercel"

# Clerk (auth provider)
CLERK_API_URL = "https://api.clerk.com/v1"

# claude-dx reference configuration
CLAUDE_DX_REPO = "crafter-station/claude-dx"
CLAUDE_DX_DIR_NAME = "claude-dx"
CLAUDE_CONFIG_DIR = Path.home() / ".claude"

# HTTP
DEFAULT_HTTP_TIMEOUT = 30.0

# Env var names, env value wins over the stored file
ENV_SPACESHIP_API_KEY = "SPACESHIP_API_KEY"
ENV_SPACESHIP_API_SECRET = "SPACESHIP_API_SECRET"
ENV_BASE_DOMAIN = "BASE_DOMAIN"
ENV_VERCEL_TOKEN = "VERCEL_TOKEN"
ENV_VERCEL_TEAM_ID = "VERCEL_TEAM_ID"
ENV_CLERK_SECRET_KEY = "CLERK_SECRET_KEY"
