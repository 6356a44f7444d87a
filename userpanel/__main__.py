"""Main entry point for the FastAPI application."""

import argparse

import uvicorn

from userpanel import create_app


def main() -> None:
    """Run the FastAPI application using Uvicorn."""
    parser = argparse.ArgumentParser(
        description="Run the user administration panel API.",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="Path to the environment configuration file.",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run the FastAPI application on.",
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to run the FastAPI application on.",
    )
    args = parser.parse_args()

    app = create_app(args.env_file)
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
