"""bitbridge - sync local scripts with a Bitburner home server over its Remote API."""

__version__ = "0.1.0"
__logo__ = "🌉"
