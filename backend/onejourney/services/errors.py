from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class ServiceError(Exception):
    """Consistent service-layer exception with HTTP-friendly metadata."""

    status_code: int
    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:  # pragma: no cover - convenience for logging
        return f"{self.status_code} {self.code}: {self.message} | {self.details}"

    def to_payload(self) -> Dict[str, Any]:
        return error_payload(self.code, self.message, self.details)


def error_payload(code: str, message: str, details: Dict[str, Any] | None = None) -> Dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details or {},
        }
    }


def invalid_input(message: str, field_name: str) -> ServiceError:
    return ServiceError(400, "INVALID_INPUT", message, {"field": field_name, "reason": "Required."})


def insufficient_balance(balance: int, cost: int) -> ServiceError:
    return ServiceError(
        400,
        "INSUFFICIENT_BALANCE",
        "Insufficient balance",
        {"balance": balance, "cost": cost},
    )


def invalid_amount(amount: Any) -> ServiceError:
    return ServiceError(
        400,
        "INVALID_AMOUNT",
        "Invalid amount",
        {"field": "amount", "reason": "Must be > 0.", "value": amount},
    )
