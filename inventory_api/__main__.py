"""Run the inventory API with uvicorn: ``python -m inventory_api``."""

import uvicorn

from inventory_api.app import create_app
from inventory_config import get_active_config


def main() -> None:
    config = get_active_config()
    app = create_app(config)
    print(f"Inventory API running at http://localhost:{config.port}")
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
