"""Core components: Brewfile parsing, command mapping and the session state machine."""
