from pathlib import Path
from config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

# Server configuration
PORT = config.get("PORT", 8081)
LOG_LEVEL = config.get("LOG_LEVEL", "info")
BIND_ADDRESS = config.get("BIND_ADDRESS", "0.0.0.0")

# Timeout configuration
# Connection timeout: Time to establish TCP connection
CONNECT_TIMEOUT = config.get("CONNECT_TIMEOUT", 10.0)
# Read timeout: Time between receiving data chunks, detects stalled streams
READ_TIMEOUT = config.get("READ_TIMEOUT", 60.0)
# Request timeout: Total timeout for non-streaming requests
REQUEST_TIMEOUT = config.get("REQUEST_TIMEOUT", 120.0)
# Stream timeout: Total timeout for streaming requests (reasoning can take longer)
STREAM_TIMEOUT = config.get("STREAM_TIMEOUT", 600.0)

# Copilot upstream endpoints
COPILOT_API_BASE = config.get("COPILOT_API_BASE", "https://api.githubcopilot.com")
COPILOT_TOKEN_URL = config.get("COPILOT_TOKEN_URL", "https://api.github.com/copilot_internal/v2/token")
# Optional CORS proxy prefix; requests go to "<prefix>/<percent-encoded url>" when set
CORS_PROXY_PREFIX = config.get("CORS_PROXY_PREFIX", "")

# Destination mode: anthropic, anthropic-thinking, openai, passthrough
ENDPOINT = config.get_choice("ENDPOINT", "anthropic", ("anthropic", "anthropic-thinking", "openai", "passthrough"))

# Request shaping toggles
USE_VSCODE_HEADERS = config.get("USE_VSCODE_HEADERS", True)
REMOVE_PREFILL = config.get("REMOVE_PREFILL", True)
TRIM_ASSISTANT = config.get("TRIM_ASSISTANT", True)
FORCE_LAST_USER = config.get("FORCE_LAST_USER", True)
# Send cookies with upstream requests (fetch credentials: include)
BASIC_AUTH_COMPAT = config.get("BASIC_AUTH_COMPAT", False)

# Thinking configuration
THINKING_ENABLED = config.get("THINKING_ENABLED", False)
THINKING_BUDGET = config.get("THINKING_BUDGET", 10000)
ADAPTIVE_THINKING = config.get("ADAPTIVE_THINKING", False)

# Disguise version strings (upstream may reject stale versions)
CHAT_VERSION = config.get("CHAT_VERSION", "0.38.2026020704")
CODE_VERSION = config.get("CODE_VERSION", "1.109.0")
CHROME_VERSION = config.get("CHROME_VERSION", "142.0.7444.265")
ELECTRON_VERSION = config.get("ELECTRON_VERSION", "39.4.1")
GITHUB_API_VERSION = config.get("GITHUB_API_VERSION", "2025-10-01")
# JSON object applied over the disguise headers; an empty value drops that header
VSCODE_HEADER_OVERRIDES = config.get("VSCODE_HEADER_OVERRIDES", {})

# Credentials
# Explicit long-lived key; takes priority over every other source
COPILOT_TOKEN = config.get("COPILOT_TOKEN", "")
CREDENTIALS_FILE = config.get("CREDENTIALS_FILE", str(Path.home() / ".copilot-interceptor" / "credentials.json"))
# Settings file of another integration whose "token" field is the last-resort credential
FALLBACK_TOKEN_FILE = config.get("FALLBACK_TOKEN_FILE", "")

# Request defaults
DEFAULT_MODEL = config.get("DEFAULT_MODEL", "claude-sonnet-4.5")
DEFAULT_MAX_TOKENS = config.get("DEFAULT_MAX_TOKENS", 8192)
