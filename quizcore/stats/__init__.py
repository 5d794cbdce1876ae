from .stats import completion_rate, format_duration, format_summary

__all__ = ["completion_rate", "format_duration", "format_summary"]
