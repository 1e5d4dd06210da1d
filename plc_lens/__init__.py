"""plc-lens: turn PLC rule-checker output into stable compliance reports."""

__version__ = "0.1.0"
