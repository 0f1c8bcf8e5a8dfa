import argparse
import os

import uvicorn


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="qcfinance", description="Serve the Quebec life simulator API")
    parser.add_argument("--host", default=os.getenv("QCFIN_HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.getenv("QCFIN_PORT", "8000")))
    parser.add_argument("--reload", action="store_true", help="Reload on source changes (development)")
    args = parser.parse_args(argv)
    uvicorn.run("qcfinance.api.http:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
