from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import fcntl
from types import MappingProxyType
from typing import Any, Dict, Mapping
import yaml

from hyphenated_helper.datatypes.discord_datatypes import UserID
from hyphenated_helper.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/app_config.yml").resolve()

DEFAULT_COMMAND_PREFIX = "/"
DEFAULT_RULES_URL = "https://github.com/hanabi/hanabi.github.io/blob/main/misc/Convention_Questions.md"
DEFAULT_RULES_COUNT = 5
DEFAULT_GENERIC_RULE_PHRASE = "one of the rules"
DEFAULT_MODERATED_CHANNEL_LABEL = "convention-questions"

DEFAULT_CANNED_REPLIES: Mapping[str, str] = MappingProxyType({
    "wrongchannel": (
        "It looks like you are asking a question about the Hyphen-ated conventions or the "
        "Hyphen-ated group. Please put all such questions in the #questions-and-help channel, "
        "as that's what it is for."
    ),
    "badquestion": (
        "It looks like your question does not follow the format that the rules ask for. "
        "Please include the full game situation and say exactly what you are unsure about, "
        "then ask again."
    ),
    "badhere": (
        "Please do not use @here in this server. It pings everyone who is online, "
        "so it is reserved for the administrators."
    ),
    "2pquestion": (
        "It looks like you are asking about a 2-player game. Many conventions work differently "
        "with only two players, so please check the 2-player section of the conventions "
        "document before asking."
    ),
})


class ConfigurationError(Exception):
    """Raised when the configuration file holds values the bot cannot run with."""


@dataclass(frozen=True, slots=True)
class BotSettings:
    """Immutable runtime settings, built once at startup.

    Attributes:
        command_prefix: Marker that must start a command token
        allowed_user_ids: Users allowed to run the delete command
        canned_replies: Read-only mapping of command token to reply text
        rules_url: Link appended to every deletion notice
        rules_count: Highest rule number with a dedicated ``d<N>`` command
        generic_rule_phrase: Wording used when no rule number is given
        moderated_channel_label: Channel name quoted in the deletion notice
    """
    command_prefix: str = DEFAULT_COMMAND_PREFIX
    allowed_user_ids: frozenset[int] = frozenset()
    canned_replies: Mapping[str, str] = field(default_factory=lambda: DEFAULT_CANNED_REPLIES)
    rules_url: str = DEFAULT_RULES_URL
    rules_count: int = DEFAULT_RULES_COUNT
    generic_rule_phrase: str = DEFAULT_GENERIC_RULE_PHRASE
    moderated_channel_label: str = DEFAULT_MODERATED_CHANNEL_LABEL

    def is_allowed(self, user_id: int) -> bool:
        return user_id in self.allowed_user_ids


class AppConfig:
    """File-lock based accessor around the YAML application configuration.

    The class caches the contents of ``./config/app_config.yml``, exposes
    dictionary-like access helpers and validates everything into a
    :class:`BotSettings` through :meth:`bot_settings`.
    """

    def __init__(self, config_path: Path = CONFIG_PATH) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                data = yaml.safe_load(f)
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except FileNotFoundError:
            logger.warning("[APP CONFIGURATION] Config file %s not found, using defaults.", self.config_path)
            return {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Config file {self.config_path} is not valid YAML: {exc}") from exc

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file {self.config_path} must contain a mapping, got {type(data).__name__}"
            )
        return data

    def _section(self, key: str) -> Dict[str, Any]:
        value = self._data.get(key) or {}
        if not isinstance(value, dict):
            raise ConfigurationError(f"'{key}' must be a mapping, got {type(value).__name__}")
        return value

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Reload configuration from disk and return the loaded mapping."""
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        """Return the current cached configuration mapping (do not mutate)."""
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Safe lookup for top-level configuration keys."""
        return self._data.get(key, default)

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def command_prefix(self) -> str:
        value = self._data.get("command_prefix", DEFAULT_COMMAND_PREFIX)
        if not isinstance(value, str) or not value or any(ch.isspace() for ch in value):
            raise ConfigurationError(f"'command_prefix' must be a non-empty string without spaces, got {value!r}")
        return value

    @property
    def allowed_user_ids(self) -> frozenset[int]:
        raw = self._data.get("allowed_user_ids") or []
        if not isinstance(raw, list):
            raise ConfigurationError("'allowed_user_ids' must be a list of Discord user IDs")

        ids = set()
        for entry in raw:
            try:
                ids.add(UserID(entry).to_int())
            except ValueError as exc:
                raise ConfigurationError(f"Invalid user ID in 'allowed_user_ids': {entry!r}") from exc
        return frozenset(ids)

    @property
    def canned_replies(self) -> Mapping[str, str]:
        """Return the built-in replies with configured entries merged over them.

        Tokens are lower-cased so they match the normalized command token.
        """
        raw = self._data.get("canned_replies") or {}
        if not isinstance(raw, dict):
            raise ConfigurationError("'canned_replies' must map command names to reply text")

        replies = dict(DEFAULT_CANNED_REPLIES)
        for token, text in raw.items():
            token = str(token).strip().lower()
            if not token or any(ch.isspace() for ch in token):
                raise ConfigurationError(f"Invalid canned reply command name: {token!r}")
            if not isinstance(text, str) or not text.strip():
                raise ConfigurationError(f"Canned reply for '{token}' must be non-empty text")
            replies[token] = text
        return MappingProxyType(replies)

    @property
    def rules_url(self) -> str:
        return str(self._section("rules").get("url") or DEFAULT_RULES_URL)

    @property
    def rules_count(self) -> int:
        value = self._section("rules").get("count", DEFAULT_RULES_COUNT)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ConfigurationError(f"'rules.count' must be a non-negative integer, got {value!r}")
        return value

    @property
    def generic_rule_phrase(self) -> str:
        return str(self._section("rules").get("generic_phrase") or DEFAULT_GENERIC_RULE_PHRASE)

    @property
    def moderated_channel_label(self) -> str:
        value = self._data.get("moderated_channel_label") or DEFAULT_MODERATED_CHANNEL_LABEL
        return str(value).lstrip("#")

    def bot_settings(self) -> BotSettings:
        """Validate the loaded configuration and freeze it into BotSettings.

        Raises
        ------
        ConfigurationError
            If any configured value has the wrong type or shape.
        """
        settings = BotSettings(
            command_prefix=self.command_prefix,
            allowed_user_ids=self.allowed_user_ids,
            canned_replies=self.canned_replies,
            rules_url=self.rules_url,
            rules_count=self.rules_count,
            generic_rule_phrase=self.generic_rule_phrase,
            moderated_channel_label=self.moderated_channel_label,
        )
        if not settings.allowed_user_ids:
            logger.warning("[APP CONFIGURATION] 'allowed_user_ids' is empty; nobody can use the delete commands.")
        return settings
