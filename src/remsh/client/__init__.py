"""Interactive client for the remsh server.

Public API:
    RemoteShellClient -- TCP connection sending command lines
    ClientError -- Raised on connection failures
    interactive_loop -- Prompt, send, print until exit
"""

from remsh.client.terminal import ClientError, RemoteShellClient, interactive_loop

__all__ = ["ClientError", "RemoteShellClient", "interactive_loop"]
