import asyncio

from .logger import setup_logger
from .service import run_service
from .settings import load_settings


def main() -> None:
    cfg = load_settings()
    setup_logger(cfg.logging)
    try:
        asyncio.run(run_service(cfg))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
