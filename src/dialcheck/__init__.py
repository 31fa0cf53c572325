"""dialcheck - static syntax checker for Asterisk-style dialplans."""

__version__ = "0.1.0"
