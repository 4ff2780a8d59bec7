from draftpress.tools.dispatcher import TOOLS, ToolSpec


def _parameters(tool: ToolSpec) -> dict:
    schema = tool.args_model.model_json_schema()
    schema.pop("title", None)
    schema.setdefault("properties", {})
    return schema


# Function-calling definitions handed to agents that drive the tools.
TOOL_DEFINITIONS = [
    {
        "type": "function",
        "function": {
            "name": tool.name,
            "description": tool.description,
            "parameters": _parameters(tool),
        },
    }
    for tool in TOOLS.values()
]
