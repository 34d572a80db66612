"""
Utility functions for the application.
"""
from typing import Any, Dict


def format_error(message: Any, details: Any = None) -> Dict[str, Any]:
    """Format error response in the `{"message": ...}` envelope the console reads."""
    response = {"message": message}
    if details:
        response["details"] = details
    return response
