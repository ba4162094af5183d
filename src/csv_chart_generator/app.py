from __future__ import annotations

import argparse
import os
import sys


def streamlit_script_path() -> str:
    return os.path.join(os.path.dirname(os.path.abspath(__file__)), "ui", "streamlit_app.py")


def build_streamlit_argv(argv: list[str] | None = None) -> list[str]:
    parser = argparse.ArgumentParser(prog="csv-chart-generator", description="Run the CSV Chart Generator UI.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8501)
    ns, unknown = parser.parse_known_args(argv)
    return [
        "streamlit",
        "run",
        streamlit_script_path(),
        "--server.address",
        ns.host,
        "--server.port",
        str(ns.port),
        *unknown,
    ]


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    from streamlit.web import cli as stcli

    sys.argv = build_streamlit_argv(args)
    return stcli.main()


if __name__ == "__main__":
    raise SystemExit(main())
