import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    # uvicorn --reload re-runs the lifespan; keep a single handler
    if not any(getattr(h, "_bloodbridge", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._bloodbridge = True
        root.addHandler(handler)
    root.setLevel(level.upper())
