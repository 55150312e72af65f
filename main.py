import asyncio
import argparse
import logging
import uvicorn
from core.config import get_settings
from api.rest import create_app


async def main():
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Error Log Service")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address")
    parser.add_argument("--port", type=int, default=settings.port, help="REST API port")
    parser.add_argument("--database-url", default=settings.database_url, help="SQLAlchemy async database URL")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    settings = settings.model_copy(update={"database_url": args.database_url, "port": args.port})
    app = create_app(settings)

    config = uvicorn.Config(app, host=args.host, port=args.port, log_level=args.log_level.lower())
    server = uvicorn.Server(config)
    logging.getLogger(__name__).info(f"Server is running on port {args.port}")
    await server.serve()


if __name__ == "__main__":
    asyncio.run(main())
