"""sessiongate entrypoint.

Run with:
  python -m sessiongate
"""

from sessiongate.app import create_app
from sessiongate.shared.config import load_config


def main() -> None:
    config = load_config()
    app = create_app(config)
    app.run(host=config.host, port=config.port, debug=config.debug_logging)


if __name__ == "__main__":
    main()
