"""Fakes and sample payloads shared by the tests."""

from types import SimpleNamespace

PNG_B64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)
PNG_DATA_URL = f"data:image/png;base64,{PNG_B64}"

LONG_JSX = '<div className="flex flex-col h-full bg-white p-4"><h1 className="text-xl">Login</h1></div>'
LONG_DART = "class LoginScreen extends StatelessWidget {\n  Widget build(BuildContext context) => Scaffold();\n}"


class FakeLLM:
    """Stands in for TrackingChatGoogleGenerativeAI; records every call."""

    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def invoke(self, *args, agent_name="UnknownAgent", **kwargs):
        self.calls.append({"args": args, "agent_name": agent_name, "kwargs": kwargs})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(content=self.content)


def image_content(b64=PNG_B64):
    return [
        {"type": "text", "text": "Here is your image"},
        {"type": "image_url", "image_url": {"url": f"data:image/png;base64,{b64}"}},
    ]
