"""unitwatch: report systemd unit transitions to a notification channel."""

__version__ = "0.1.0"
