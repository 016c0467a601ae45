"""Faculty portal: role-based faculty/student management API."""

__version__ = "0.1.0"
