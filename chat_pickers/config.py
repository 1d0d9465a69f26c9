# chat_pickers/config.py
# Description: Configuration management for the chat_pickers widgets.
#
# Imports
import copy
import os
import sys
if sys.version_info < (3, 11):
    import tomli as tomllib
else:
    import tomllib
from pathlib import Path
from typing import Any, Dict, Optional
#
# Third-Party Imports
from loguru import logger
#
#######################################################################################################################
#
# Functions:

# --- Path to the configuration file ---
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "chat_pickers" / "config.toml"
CONFIG_PATH_ENV_VAR = "CHAT_PICKERS_CONFIG"

# --- Programmatic defaults, overridden key by key by the user's TOML file ---
CONFIG_TOML_CONTENT = """
# Configuration for chat_pickers

[tenor]
# API key for Tenor v2. Leave empty to read it from the environment variable below.
api_key = ""
api_key_env_var = "TENOR_API_KEY"
client_key = "chat_pickers"
base_url = "https://tenor.googleapis.com/v2/"
timeout = 15.0
locale = "en_US"
content_filter = "medium"
media_filter = "gif,tinygif,nanogif"

[gif_picker]
featured_limit = 24
search_limit = 48
# 8 MiB
max_bytes = 8388608

[emoji_picker]
margin = 8
max_width = 360
max_height = 520
# "bottom" or "center"
vertical_align = "bottom"

[logging]
level = "INFO"
log_file = "~/.local/share/chat_pickers/chat_pickers.log"
log_to_console = false
"""

DEFAULT_CONFIG_FROM_TOML: Dict[str, Any] = tomllib.loads(CONFIG_TOML_CONTENT)


def get_config_path() -> Path:
    """Returns the config file location, honouring the environment override."""
    override = os.environ.get(CONFIG_PATH_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_PATH


def deep_merge_dicts(base: Dict, update: Dict) -> Dict:
    """Recursively merges update_dict into base_dict."""
    merged = copy.deepcopy(base)
    for key, value in update.items():
        if isinstance(value, dict) and key in merged and isinstance(merged[key], dict):
            merged[key] = deep_merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


# --- Primary Configuration Loading Logic ---
_CONFIG_CACHE: Optional[Dict[str, Any]] = None


def load_picker_config(force_reload: bool = False) -> Dict[str, Any]:
    """
    Loads settings from the user's config.toml merged over the programmatic defaults.

    A missing file is not an error; the defaults from CONFIG_TOML_CONTENT apply.
    A file that cannot be decoded is logged and ignored.
    """
    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None and not force_reload:
        return _CONFIG_CACHE

    loaded_config = copy.deepcopy(DEFAULT_CONFIG_FROM_TOML)
    config_path = get_config_path()

    if not config_path.exists():
        logger.debug(f"Picker config file not found at {config_path}. Using built-in defaults.")
    else:
        logger.info(f"Loading picker config from: {config_path}")
        try:
            with open(config_path, "rb") as f:
                user_config_from_file = tomllib.load(f)
            loaded_config = deep_merge_dicts(loaded_config, user_config_from_file)
        except tomllib.TOMLDecodeError as e:
            logger.error(f"Error decoding TOML config file {config_path}: {e}. Using built-in defaults.")
        except OSError as e:
            logger.error(f"Could not read config file {config_path}: {e}. Using built-in defaults.")

    _CONFIG_CACHE = loaded_config
    logger.debug(f"load_picker_config returning config with top-level keys: {list(loaded_config.keys())}")
    return _CONFIG_CACHE


def get_picker_setting(section: str, key: str, default: Any = None) -> Any:
    """Helper to get a specific setting from the loaded configuration."""
    config = load_picker_config()
    section_data = config.get(section)
    if isinstance(section_data, dict):
        return section_data.get(key, default)
    return default


def get_tenor_api_key() -> Optional[str]:
    """Resolves the Tenor API key from the environment first, then the config file."""
    env_var = get_picker_setting("tenor", "api_key_env_var", "TENOR_API_KEY")
    api_key = os.getenv(env_var) if env_var else None
    if not api_key:
        config_key = get_picker_setting("tenor", "api_key", "")
        if not isinstance(config_key, str):
            if config_key:
                logger.warning(f"Ignoring non-string [tenor] api_key of type {type(config_key).__name__}")
            config_key = ""
        # Ignore template placeholders such as "<your key>"
        if config_key and not (config_key.startswith("<") and config_key.endswith(">")):
            api_key = config_key
    return api_key or None

#
# End of config.py
#######################################################################################################################
