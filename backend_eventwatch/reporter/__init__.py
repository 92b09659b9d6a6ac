from backend_eventwatch.reporter.console import display_information, format_event

__all__ = ["display_information", "format_event"]
