"""Menu-bar countdown: fetch a target instant over HTTP and count towards it."""

__version__ = "1.0.0"
