"""
Payroll Kernel

Value objects, typed exceptions and structured logging shared by the
attendance and payroll calculation engines:
- Validated, immutable domain types (attendance, periods, compensation)
- Decimal-only money and hour arithmetic
- Typed errors with machine-readable codes
"""

__version__ = "0.1.0"
