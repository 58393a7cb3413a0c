"""
Base classes for the calculatie calculators.

Every calculator exposed to the CLI implements Calculator.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class DeviationStatus(str, Enum):
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"


class InsightType(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass
class CalculationResult:
    calculation_type: str = ""
    warnings: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "calculation_type": self.calculation_type,
            "warnings": list(self.warnings),
            "notes": list(self.notes),
        }
        # Flatten data into top-level for convenience
        d.update(self.data)
        return d


class Calculator(ABC):
    """Abstract base class for calculators that dispatch by calculation name."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def available_calculations(self) -> List[str]:
        pass

    @abstractmethod
    def run_calculation(self, calculation_type: str, params: Dict[str, Any]) -> CalculationResult:
        pass
