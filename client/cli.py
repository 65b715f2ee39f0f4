# =============================================================================
# 模块: client/cli.py
# 功能: 终端前端
# 架构角色: 读取输入行交给 GoodPlaceApp，每次提交后把图层栈渲染为文本。
# =============================================================================
"""Terminal front end for GoodPlace."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from client.api import GoodPlaceClient
from client.app import GoodPlaceApp
from client.layers import LayerStack
from client.storage import UserStore
from common.logger import setup_logging
from settings import settings

logger = logging.getLogger(__name__)

WELCOME = "Welcome to the Good Place. Tell us who you are, then confess your sins."


def render(layers: LayerStack) -> str:
    """Render the stack as text, newest first, indented by horizontal position."""
    lines = []
    for layer in layers:
        indent = " " * int(layer.left / 5)
        marker = "*" if layer.entering else " "
        lines.append(
            f"{marker}{indent}[{layer.css_class}] {layer.label}"
            f"  (opacity {layer.opacity:.2f}, scale {layer.scale:.2f})"
        )
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="GoodPlace terminal client")
    parser.add_argument("--api-url", type=str, default=None, help="Backend base URL")
    parser.add_argument("--storage", type=str, default=None, help="Path of the local storage file")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Log level")
    parser.add_argument("--log-file", type=str, default=None, help="Client log file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``goodplace-client`` console script."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, Path(args.log_file or settings.client_log_file).expanduser())

    store = UserStore(args.storage or settings.client_storage_path)
    with GoodPlaceClient(args.api_url) as api:
        app = GoodPlaceApp(api, store)
        if not app.startup():
            print(WELCOME)
        print(render(app.layers))

        while True:
            try:
                text = input(f"{app.state.prompt} (/reset, /quit)> ")
            except (EOFError, KeyboardInterrupt):
                print()
                break

            command = text.strip()
            if command == "/quit":
                break
            if command == "/reset":
                app.reset()
                print(WELCOME)
                continue

            app.submit(text)
            app.layers.next_frame()
            print(render(app.layers))
    return 0
