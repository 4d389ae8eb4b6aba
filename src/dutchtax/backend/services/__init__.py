"""Service-layer helpers for the dutchtax backend."""

from .calculation_service import Box1Calculator, calculate_box1, get_default_calculator
from .income import annualise_income, convert_to_yearly_income

__all__ = [
    "Box1Calculator",
    "annualise_income",
    "calculate_box1",
    "convert_to_yearly_income",
    "get_default_calculator",
]
