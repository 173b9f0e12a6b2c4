import json
from pathlib import Path
from typing import Union

from pydantic import BaseModel, RootModel

DATA_DIR = Path(__file__).resolve().parent / "data"


def load_and_validate(data_path: Path, model: Union[RootModel, BaseModel]) -> BaseModel:
    """
    Load and validate model data from data_path.
    Returns a validated model instance.
    """
    if not data_path.exists():
        raise FileNotFoundError(f"Data file not found: {data_path}")

    with data_path.open("r", encoding="utf-8") as f:
        raw_data = json.load(f)
        return model.model_validate(raw_data)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp01(value: float) -> float:
    return clamp(value, 0.0, 1.0)


def format_to_euro(x: float) -> str:
    """Format a float as a euro currency string (no decimals, thin spaces)."""
    return f"{x:,.0f} €".replace(",", " ")
