from taxguide.export.computation_statement import (
    ComputationLine,
    ComputationSection,
    ComputationStatement,
    format_amount,
)

__all__ = ["ComputationLine", "ComputationSection", "ComputationStatement", "format_amount"]
