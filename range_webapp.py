#!/usr/bin/env python3
"""Run the range trainer Flask app locally."""

from __future__ import annotations

import logging

from range_trainer.webapp import create_app, load_runtime_config


def main() -> None:
    runtime = load_runtime_config()
    logging.basicConfig(
        level=getattr(logging, runtime.log_level, logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    app = create_app(runtime)
    app.run(host=runtime.host, port=runtime.port, debug=runtime.env != "production")


if __name__ == "__main__":
    main()
