"""Federal bracket and deduction reference data for dividend withholding."""

from __future__ import annotations

from typing import Final

FILING_TYPES: Final[set[str]] = {"single", "married", "headOfHousehold"}

# Brackets are (lower_threshold, marginal_rate), ascending. The last bracket is open-ended.
FEDERAL_BRACKETS: Final[dict[str, list[tuple[float, float]]]] = {
    "single": [
        (0.0, 0.10),
        (11_925.0, 0.12),
        (48_475.0, 0.22),
        (103_350.0, 0.24),
        (197_300.0, 0.32),
        (250_525.0, 0.35),
        (626_350.0, 0.37),
    ],
    "married": [
        (0.0, 0.10),
        (23_850.0, 0.12),
        (96_950.0, 0.22),
        (206_700.0, 0.24),
        (394_600.0, 0.32),
        (501_050.0, 0.35),
        (751_600.0, 0.37),
    ],
    "headOfHousehold": [
        (0.0, 0.10),
        (17_000.0, 0.12),
        (64_850.0, 0.22),
        (103_350.0, 0.24),
        (197_300.0, 0.32),
        (250_500.0, 0.35),
        (626_350.0, 0.37),
    ],
}

STANDARD_DEDUCTIONS: Final[dict[str, float]] = {
    "single": 15_000.0,
    "married": 30_000.0,
    "headOfHousehold": 22_500.0,
}

QUARTER_END_MONTHS: Final[set[int]] = {3, 6, 9, 12}
