"""
╔══════════════════════════════════════════════════════════════╗
║      ChatGPT Bridge — Tool Dispatcher                        ║
╠══════════════════════════════════════════════════════════════╣
║  Validates `chatgpt` tool arguments against a tagged union   ║
║  (operation = "ask" | "get_conversations"), routes them to   ║
║  the bridge, and turns every outcome into a result dict:     ║
║                                                              ║
║    {"success": bool, "error": bool, "content": str, ...}     ║
║                                                              ║
║  Nothing raised by the bridge escapes handle(); the server   ║
║  stays up for the next call.                                 ║
╚══════════════════════════════════════════════════════════════╝
"""

import logging
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from utils.errors import BridgeError, InvalidRequest

log = logging.getLogger("chatgpt_bridge.dispatcher")


class AskRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    operation: Literal["ask"]
    prompt: str = Field(min_length=1)
    conversation_id: Optional[str] = None

    @field_validator("prompt")
    @classmethod
    def prompt_not_blank(cls, value):
        if not value.strip():
            raise ValueError("prompt must not be blank")
        return value


class GetConversationsRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    operation: Literal["get_conversations"]


ToolRequest = Annotated[Union[AskRequest, GetConversationsRequest], Field(discriminator="operation")]

_request_adapter = TypeAdapter(ToolRequest)


def parse_request(arguments):
    """Validate raw tool arguments. Raises InvalidRequest."""
    if not arguments:
        raise InvalidRequest("No arguments provided")
    try:
        return _request_adapter.validate_python(arguments)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}" for err in e.errors()
        )
        raise InvalidRequest(f"Invalid arguments for ChatGPT tool: {problems}") from e


def _error(kind, message):
    return {"success": False, "error": True, "kind": kind, "content": message}


class ToolDispatcher:
    def __init__(self, bridge):
        self.bridge = bridge

    def handle(self, arguments):
        """Run one tool call. Always returns a result dict."""
        try:
            request = parse_request(arguments)
            if isinstance(request, AskRequest):
                return self._ask(request)
            return self._get_conversations()
        except BridgeError as e:
            log.error(f"❌ {e}")
            return _error(e.kind, str(e))
        except Exception as e:
            log.exception("Unexpected error while handling tool call")
            return _error("InternalError", f"Error: {e}")

    def _ask(self, request):
        log.info(f"🗣  ask ({len(request.prompt)} chars){' in ' + repr(request.conversation_id) if request.conversation_id else ''}")
        text = self.bridge.ask(request.prompt, request.conversation_id)
        return {
            "success": True,
            "error": False,
            "content": text or f"No response received from {self.bridge.app_name}.",
            "text": text,
        }

    def _get_conversations(self):
        conversations = self.bridge.get_conversations()
        if conversations:
            content = f"Found {len(conversations)} conversation(s):\n\n" + "\n".join(conversations)
        else:
            content = f"No conversations found in {self.bridge.app_name}."
        return {"success": True, "error": False, "content": content, "conversations": conversations}
