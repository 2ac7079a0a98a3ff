import logging
from pathlib import Path
from typing import Optional


def configure_logging(level: str = "INFO", file_path: Optional[str] = None, calculator_level: str = "INFO") -> None:
    numeric_level = getattr(logging, (level or "INFO").upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if file_path:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        handlers=handlers,
        force=True,  # the CLI reconfigures once the YAML config is loaded
    )

    # The per-period overflow notes are very chatty at DEBUG.
    logging.getLogger("deposit_calc.calculator").setLevel(
        getattr(logging, (calculator_level or "INFO").upper(), logging.INFO)
    )
