from .console_theme import ConsoleTheme

__all__ = ["ConsoleTheme"]
