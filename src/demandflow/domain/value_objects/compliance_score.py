"""Compliance score produced by the external scoring service."""

from dataclasses import dataclass

from demandflow.domain.exceptions import ValidationError


@dataclass(frozen=True)
class ComplianceScore:
    """Numeric 0-100 score. Coerces untyped input at the boundary."""

    value: float

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int | float):
            raise ValidationError("Compliance score must be a number")
        if not 0 <= self.value <= 100:
            raise ValidationError("Compliance score must be between 0 and 100")

    @classmethod
    def parse(cls, raw: object) -> "ComplianceScore":
        """Build from JSON-ish input (number or numeric string)."""
        if isinstance(raw, str):
            try:
                raw = float(raw.strip())
            except ValueError as e:
                raise ValidationError(f"Invalid compliance score: {raw!r}") from e
        return cls(raw)  # type: ignore[arg-type]
