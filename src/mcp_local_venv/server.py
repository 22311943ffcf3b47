"""MCP server implementation."""
import asyncio
import json
from typing import Dict, Any, List

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.models import InitializationOptions
from mcp.server import stdio

from mcp_local_venv import __version__
from mcp_local_venv.config import Settings, load_settings
from mcp_local_venv.commands import CAPTURE
from mcp_local_venv.environments.environment import (
    create_environment,
    destroy_environment,
    get_environment,
)
from mcp_local_venv.environments.packages import install_packages, list_packages
from mcp_local_venv.environments.execution import run_file, run_source
from mcp_local_venv.errors import LocalVenvError, log_error
from mcp_local_venv.types import CommandResult
from mcp_local_venv.logging import configure_logging, get_logger

logger = get_logger(__name__)

PATH_PROPERTY = {
    "type": "string",
    "description": "Environment directory; relative paths resolve under the environments home",
}
ARGS_PROPERTY = {
    "type": "array",
    "items": {"type": "string"},
    "description": "Arguments passed to the script",
}
CHECK_PROPERTY = {
    "type": "boolean",
    "description": "Fail when the script exits with a non-zero status",
}

tools = [
    types.Tool(
        name="venv_create",
        description="Create a virtual environment unless one already exists at the path",
        inputSchema={
            "type": "object",
            "properties": {
                "path": PATH_PROPERTY,
                "interpreter": {"type": "string", "description": "Interpreter program name"},
                "package_manager": {"type": "string", "description": "Package manager program name"},
            },
            "required": ["path"],
        },
    ),
    types.Tool(
        name="venv_destroy",
        description="Remove a virtual environment created by this server",
        inputSchema={
            "type": "object",
            "properties": {"path": PATH_PROPERTY},
            "required": ["path"],
        },
    ),
    types.Tool(
        name="venv_install",
        description="Install packages into a virtual environment, one at a time",
        inputSchema={
            "type": "object",
            "properties": {
                "path": PATH_PROPERTY,
                "packages": {"type": "array", "items": {"type": "string"}},
            },
            "required": ["path", "packages"],
        },
    ),
    types.Tool(
        name="venv_list",
        description="List packages installed in a virtual environment",
        inputSchema={
            "type": "object",
            "properties": {"path": PATH_PROPERTY},
            "required": ["path"],
        },
    ),
    types.Tool(
        name="venv_run_file",
        description="Run a script file inside a virtual environment",
        inputSchema={
            "type": "object",
            "properties": {
                "path": PATH_PROPERTY,
                "script": {"type": "string", "description": "Script path"},
                "args": ARGS_PROPERTY,
                "check": CHECK_PROPERTY,
            },
            "required": ["path", "script"],
        },
    ),
    types.Tool(
        name="venv_run_source",
        description="Run source code inside a virtual environment",
        inputSchema={
            "type": "object",
            "properties": {
                "path": PATH_PROPERTY,
                "source": {"type": "string", "description": "Source code to run"},
                "args": ARGS_PROPERTY,
                "check": CHECK_PROPERTY,
            },
            "required": ["path", "source"],
        },
    ),
]


def _text(payload: Dict[str, Any]) -> list[types.TextContent]:
    return [types.TextContent(type="text", text=json.dumps(payload))]


def _result_data(result: CommandResult) -> Dict[str, Any]:
    return {
        "returncode": result.returncode,
        "stdout": result.stdout,
        "stderr": result.stderr,
    }


def _dispatch(name: str, arguments: Dict[str, Any], settings: Settings) -> Dict[str, Any] | None:
    if name == "venv_create":
        env = create_environment(
            settings.resolve(arguments["path"]),
            arguments.get("interpreter"),
            arguments.get("package_manager"),
            settings=settings,
        )
        return {
            "directory": str(env.directory),
            "interpreter": env.interpreter,
            "package_manager": env.package_manager,
        }

    if name not in {tool.name for tool in tools}:
        return None

    env = get_environment(settings.resolve(arguments["path"]), settings=settings)

    if name == "venv_destroy":
        destroy_environment(env)
        return {"message": "Environment destroyed successfully"}

    if name == "venv_install":
        packages = list(arguments["packages"])
        results = install_packages(env, packages, CAPTURE, CAPTURE, settings=settings)
        return {
            "results": [
                {"package": package, **_result_data(result)}
                for package, result in zip(packages, results)
            ]
        }

    if name == "venv_list":
        return {
            "packages": [
                {"name": package.name, "version": package.version}
                for package in list_packages(env, settings=settings)
            ]
        }

    args = list(arguments.get("args", []))
    ignore_error_status = not arguments.get("check", False)
    if name == "venv_run_file":
        result = run_file(
            env, arguments["script"], args, ignore_error_status, CAPTURE, CAPTURE,
            settings=settings,
        )
    else:
        result = run_source(
            env, arguments["source"], args, ignore_error_status, CAPTURE, CAPTURE,
            settings=settings,
        )
    return _result_data(result)


async def handle_tool_call(
    name: str, arguments: Dict[str, Any], settings: Settings
) -> list[types.TextContent]:
    """Run a tool on a worker thread and wrap the outcome as JSON text."""
    logger.debug("tool_call_received", tool=name, arguments=arguments)
    try:
        data = await asyncio.to_thread(_dispatch, name, arguments, settings)
    except (LocalVenvError, KeyError, OSError, ValueError) as e:
        log_error(e, {"tool": name})
        error = f"Missing argument: {e}" if isinstance(e, KeyError) else str(e)
        return _text({"success": False, "error": error})

    if data is None:
        return _text({"success": False, "error": f"Unknown tool: {name}"})
    return _text({"success": True, "data": data})


async def init_server(settings: Settings | None = None) -> Server:
    settings = settings or load_settings()
    logger.info(f"Registered tools: {', '.join(t.name for t in tools)}")

    server = Server("mcp-local-venv")

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        logger.debug("Tools requested")
        return tools

    @server.call_tool()
    async def call_tool(
        name: str, arguments: Dict[str, Any]
    ) -> list[types.TextContent | types.ImageContent | types.EmbeddedResource]:
        return await handle_tool_call(name, arguments, settings)

    return server


async def serve() -> None:
    settings = load_settings()
    configure_logging(settings.log_level, json_output=True)
    logger.info("Starting MCP local venv server", home=str(settings.home))
    server = await init_server(settings)
    async with stdio.stdio_server() as (read_stream, write_stream):
        init_options = InitializationOptions(
            server_name="mcp-local-venv",
            server_version=__version__,
            capabilities=types.ServerCapabilities(
                tools=types.ToolsCapability(listChanged=False),
                logging=types.LoggingCapability(),
            ),
        )
        await server.run(read_stream, write_stream, init_options)

def main() -> None:
    """Run the MCP server."""
    asyncio.run(serve())
