"""remsh -- Minimal remote command-execution service.

A TCP server runs one client session at a time, executing each received
command line either as a built-in (cd, pwd, echo, exit) or as an
external program whose combined output is captured and sent back. A
thin interactive client forwards typed lines and prints the replies.
"""

__version__ = "0.1.0"
