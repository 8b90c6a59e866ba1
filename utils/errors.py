"""
╔══════════════════════════════════════════╗
║    ChatGPT Bridge — Utilities: Errors    ║
╚══════════════════════════════════════════╝

Error kinds surfaced to the caller. Every automation failure is
re-raised as one of these at the component boundary, with the
original exception chained as context.
"""


class AutomationError(Exception):
    """Raw failure from the OS automation layer (osascript, pbcopy, ...)."""


class BridgeError(Exception):
    kind = "BridgeError"

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return f"{self.kind}: {self.message}"


class ApplicationUnavailable(BridgeError):
    kind = "ApplicationUnavailable"


class InjectionFailed(BridgeError):
    kind = "InjectionFailed"


class AutomationUnavailable(BridgeError):
    kind = "AutomationUnavailable"

    GUIDANCE = (
        "Grant Accessibility permission to your terminal / MCP host in "
        "System Settings → Privacy & Security → Accessibility."
    )

    def __init__(self, message, guidance=True):
        if guidance and self.GUIDANCE not in message:
            message = f"{message} ({self.GUIDANCE})"
        super().__init__(message)


class EmptyResponse(BridgeError):
    kind = "EmptyResponse"


class InvalidRequest(BridgeError):
    kind = "InvalidRequest"


class BridgeBusy(BridgeError):
    kind = "BridgeBusy"
