"""upctl — command-line client for an HTTP file upload service.

Uploads files and directory trees as a single multipart request and
queries previously uploaded objects per tenant context.
"""

from upctl.version import __version__

__all__: list[str] = ["__version__"]
