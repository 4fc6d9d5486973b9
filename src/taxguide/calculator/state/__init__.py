from taxguide.calculator.state.state_tax_config import StateTaxConfig
from taxguide.calculator.state.state_tax_engine import StateTaxEngine

__all__ = ["StateTaxConfig", "StateTaxEngine"]
