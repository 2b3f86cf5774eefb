"""
Hyphen-ated Helper - moderation helper bot for the Hyphen-ated Discord server

Core Components:

- **Command Dispatcher**: Parses prefixed text commands (``/d``, ``/wrongchannel``
  and friends) and routes them to their handlers
- **Delete and Notify**: Lets allow-listed users remove a rule-breaking message
  and DM its author the deleted text and the rule it broke
- **Canned Replies**: Fixed informational answers posted to the channel
- **Session Gateway**: The single adapter between the handlers and py-cord

Usage:
    from hyphenated_helper.main import main
    main()  # Connects to Discord and runs until SIGINT/SIGTERM
"""
