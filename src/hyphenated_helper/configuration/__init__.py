"""
Configuration management for the helper bot.

- **app_configuration.py**: YAML configuration loader (``config/app_config.yml``).
  Validates the command prefix, the moderator allow-list, canned replies and the
  rules link, and freezes them into an immutable ``BotSettings`` at startup.
"""
