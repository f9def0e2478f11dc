import argparse
import os

import uvicorn

from greenlight.infrastructure.config.settings import Settings


def parse_args() -> argparse.Namespace:
    defaults = Settings()
    parser = argparse.ArgumentParser(prog="greenlight", description="Greenlight movie JSON API")
    parser.add_argument("--port", type=int, default=defaults.PORT, help="API server port")
    parser.add_argument(
        "--env", type=str, default=defaults.ENV, choices=["development", "staging", "production"], help="Environment"
    )
    parser.add_argument("--db-dsn", type=str, default=defaults.DATABASE_URL, help="Database DSN")
    parser.add_argument("--db-pool-size", type=int, default=defaults.DB_POOL_SIZE, help="Connection pool size")
    parser.add_argument(
        "--db-max-overflow", type=int, default=defaults.DB_MAX_OVERFLOW, help="Connections allowed beyond the pool"
    )
    parser.add_argument(
        "--db-pool-recycle", type=int, default=defaults.DB_POOL_RECYCLE, help="Seconds before a connection is recycled"
    )
    parser.add_argument("--log-level", type=str, default=defaults.LOG_LEVEL, help="Log level")
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    # Settings are read from the environment when the app module is imported.
    os.environ["PORT"] = str(args.port)
    os.environ["ENV"] = args.env
    os.environ["DATABASE_URL"] = args.db_dsn
    os.environ["DB_POOL_SIZE"] = str(args.db_pool_size)
    os.environ["DB_MAX_OVERFLOW"] = str(args.db_max_overflow)
    os.environ["DB_POOL_RECYCLE"] = str(args.db_pool_recycle)
    os.environ["LOG_LEVEL"] = args.log_level

    uvicorn.run(
        "greenlight.app:app",
        host="0.0.0.0",
        port=args.port,
        log_level=args.log_level.lower(),
        timeout_graceful_shutdown=30,
    )


if __name__ == "__main__":
    main()
