"""Command-line interface for the user service."""

from __future__ import annotations
import argparse
import asyncio
import logging
import os
import sys
from typing import Any, Sequence

from user_service.client import DEFAULT_SERVICE_URL, UserServiceClient, UserServiceError
from user_service.config import ServiceConfig, load_config, resolve_config_path
from user_service.logging_config import setup_logging

logger = logging.getLogger("user_service.main")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    config_help = "Path to a YAML configuration file (default: USER_SERVICE_CONFIG or ./configs/config.yaml)"
    config_parent = argparse.ArgumentParser(add_help=False)
    config_parent.add_argument("--config", default=argparse.SUPPRESS, help=config_help)

    parser = argparse.ArgumentParser(description="User service utilities")
    parser.add_argument("--config", default=None, help=config_help)
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    serve_parser = subparsers.add_parser(
        "serve", parents=[config_parent], help="Start the API and probe listeners"
    )
    serve_parser.add_argument("--host", default=None, help="Bind address for both listeners")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port for the user API (default: api.port from config, 50051)",
    )
    serve_parser.add_argument(
        "--http-port",
        type=int,
        default=None,
        help="Port for /health, /ready and /metrics (default: http.port from config, 8080)",
    )

    users_parser = subparsers.add_parser(
        "users", parents=[config_parent], help="Call a running user service"
    )
    users_parser.add_argument(
        "--service-url",
        default=None,
        help=f"Base URL of the user API (default: {DEFAULT_SERVICE_URL})",
    )
    actions = users_parser.add_subparsers(dest="action", required=True)

    list_parser = actions.add_parser("list", help="List one page of users")
    list_parser.add_argument("--page", type=int, default=1)
    list_parser.add_argument("--limit", type=int, default=10)

    get_parser = actions.add_parser("get", help="Fetch a single user")
    get_parser.add_argument("user_id")

    create_parser = actions.add_parser("create", help="Create a user")
    create_parser.add_argument("--name", default="")
    create_parser.add_argument("--email", default="")
    create_parser.add_argument("--age", type=int, default=0)

    update_parser = actions.add_parser(
        "update", help="Update a user; empty values and ages of 0 are left unchanged"
    )
    update_parser.add_argument("user_id")
    update_parser.add_argument("--name", default="")
    update_parser.add_argument("--email", default="")
    update_parser.add_argument("--age", type=int, default=0)

    delete_parser = actions.add_parser("delete", help="Delete a user")
    delete_parser.add_argument("user_id")

    args_list = list(argv) if argv is not None else sys.argv[1:]
    known_commands = {"serve", "users"}

    if not args_list:
        args_list = ["serve"]
    elif args_list[0] not in ("-h", "--help") and not known_commands.intersection(args_list):
        args_list = ["serve", *args_list]

    return parser.parse_args(args_list)


def _load_config(config_arg: str | None) -> ServiceConfig:
    path = resolve_config_path(config_arg or os.getenv("USER_SERVICE_CONFIG"))
    return load_config(path)


async def _serve_all(servers: Sequence[Any]) -> None:
    tasks = [asyncio.create_task(server.serve()) for server in servers]
    _, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    for server in servers:
        server.should_exit = True
    if pending:
        await asyncio.gather(*pending)


def _serve(
    *,
    config: ServiceConfig,
    host: str | None,
    port: int | None,
    http_port: int | None,
) -> None:
    import uvicorn

    from user_service.handler import UserHandler
    from user_service.service import create_api_app, create_probe_app
    from user_service.store import UserStore

    bind_host = host if host is not None else config.api_host
    api_port = port if port is not None else config.api_port
    probe_port = http_port if http_port is not None else config.http_port
    if api_port == probe_port:
        raise SystemExit("The API port and the probe port must differ.")

    handler = UserHandler(UserStore(seed=config.seed_sample_data))
    api_app = create_api_app(handler=handler)
    probe_app = create_probe_app(handler=handler)

    servers = [
        uvicorn.Server(
            uvicorn.Config(api_app, host=bind_host, port=api_port, log_config=None)
        ),
        uvicorn.Server(
            uvicorn.Config(probe_app, host=bind_host, port=probe_port, log_config=None)
        ),
    ]

    logger.info("User API listening on %s:%s", bind_host, api_port)
    logger.info("Probe endpoints listening on %s:%s", bind_host, probe_port)

    asyncio.run(_serve_all(servers))
    logger.info("Servers exited")


def _run_users_command(args: argparse.Namespace) -> int:
    service_url = args.service_url or os.getenv("USER_SERVICE_URL") or DEFAULT_SERVICE_URL

    try:
        with UserServiceClient(service_url) as client:
            if args.action == "list":
                response = client.list_users(page=args.page, limit=args.limit)
            elif args.action == "get":
                response = client.get_user(args.user_id)
            elif args.action == "create":
                response = client.create_user(args.name, args.email, args.age)
            elif args.action == "update":
                response = client.update_user(
                    args.user_id, name=args.name, email=args.email, age=args.age
                )
            else:
                response = client.delete_user(args.user_id)
    except UserServiceError as exc:
        print(f"Request failed: {exc}", file=sys.stderr)
        return 2

    print(response.model_dump_json(by_alias=True, indent=2))
    return 0 if response.success else 1


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for CLI usage."""

    args = _parse_args(argv)
    config = _load_config(args.config)
    setup_logging(config.log_level, config.log_format)

    if args.command == "serve":
        _serve(
            config=config,
            host=getattr(args, "host", None),
            port=getattr(args, "port", None),
            http_port=getattr(args, "http_port", None),
        )
    elif args.command == "users":
        raise SystemExit(_run_users_command(args))


if __name__ == "__main__":
    main()
