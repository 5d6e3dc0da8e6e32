"""Main entry point for scripttrace."""

import argparse
from pathlib import Path

from dotenv import load_dotenv

from scripttrace import Application, load_settings
from scripttrace.logging_config import setup_logging


def main(argv: list[str] | None = None) -> None:
    """Run a script under the tracer, or apply configured instrumentation."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")

    parser = argparse.ArgumentParser(description="Trace calls of a Python script.")
    parser.add_argument("script", nargs="?", help="script to run under the tracer")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="arguments for the script")
    options = parser.parse_args(argv)

    setup_logging()

    app = Application(settings=load_settings())
    app.start()
    try:
        if options.script:
            app.run_script(options.script, options.args)
    finally:
        app.stop()


if __name__ == "__main__":
    main()
