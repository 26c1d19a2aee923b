"""
Derived metric calculations for the reporting tables.

Every ratio here guards its denominator, so no function returns NaN or
Infinity. Two kinds of "nothing" are kept apart:

- Undefined ratio: returned as None. The CPA of zero sales is undefined and
  renders as the no-sales sentinel ("—").
- Real zero: returned as 0.0. The CPA of sales bought at zero cost is a real
  $0.00.

Currency Handling:
Costs travel as integer cents through every sum and ratio. Only the format_*
functions divide by 100, so intermediate totals never pick up floating-point
drift.

Formulas:
- percent_of_total = part / total * 100 (0 when total <= 0)
- cost_per_acquisition = cost / sale_count (None when sale_count <= 0,
  0.0 when cost <= 0)
- billable_percentage = billable_calls / completed_calls * 100
- conversion_rate_percentage = sale_count / billable_calls * 100
"""

from typing import Any, List, Optional, Sequence

import numpy as np

from agency_dashboard.core.config import get_settings


# =============================================================================
# Guards
# =============================================================================


def _safe_float(value: Any) -> Optional[float]:
    """
    Convert a value to float, returning None for null, NaN, inf or junk.

    Args:
        value: Any value to convert to float.

    Returns:
        Float value or None if conversion fails or the value is not finite.
    """
    if value is None:
        return None
    try:
        float_val = float(value)
    except (ValueError, TypeError):
        return None
    if np.isnan(float_val) or np.isinf(float_val):
        return None
    return float_val


def round_half_up(value: Any) -> int:
    """Round to the nearest int with halves going up (125.5 -> 126, 124.5 -> 125)."""
    return int(np.floor((_safe_float(value) or 0.0) + 0.5))


# =============================================================================
# Ratios
# =============================================================================


def percent_of_total(part: Any, total: Any) -> float:
    """
    Share of `total` contributed by `part`, in percent.

    Returns 0.0 whenever the total is not a positive finite number.

    Example:
        >>> percent_of_total(25, 200)
        12.5
        >>> percent_of_total(5, 0)
        0.0
    """
    part_val = _safe_float(part)
    total_val = _safe_float(total)
    if part_val is None or total_val is None or total_val <= 0:
        return 0.0
    return part_val / total_val * 100


def percentages_of_total(parts: Sequence[Any]) -> List[float]:
    """
    Percent-of-total for every part of a list, against the list's own sum.

    When the parts sum to zero every percentage is 0.0.

    Example:
        >>> percentages_of_total([1, 1, 2])
        [25.0, 25.0, 50.0]
    """
    values = np.array([_safe_float(p) or 0.0 for p in parts], dtype=float)
    total = float(values.sum()) if values.size else 0.0
    if total <= 0:
        return [0.0] * len(values)
    return [float(v) for v in values / total * 100]


def cost_per_acquisition(cost: Any, sale_count: Any) -> Optional[float]:
    """
    Cost of each sale, in the same units as `cost` (cents).

    Returns:
        None when there were no sales (undefined), 0.0 when there were
        sales but no cost (a real zero), otherwise cost / sale_count.

    Example:
        >>> cost_per_acquisition(500, 0) is None
        True
        >>> cost_per_acquisition(0, 2)
        0.0
        >>> cost_per_acquisition(1000, 4)
        250.0
    """
    sales = _safe_float(sale_count)
    if sales is None or sales <= 0:
        return None
    cost_val = _safe_float(cost)
    if cost_val is None or cost_val <= 0:
        return 0.0
    return cost_val / sales


def rate_percentage(numerator: Any, denominator: Any, digits: int = 2) -> float:
    """numerator / denominator * 100 rounded to `digits`; 0.0 on a zero denominator."""
    return round(percent_of_total(numerator, denominator), digits)


def billable_percentage(billable_calls: int, completed_calls: int) -> float:
    return rate_percentage(billable_calls, completed_calls)


def conversion_rate_percentage(sale_count: int, billable_calls: int) -> float:
    return rate_percentage(sale_count, billable_calls)


def weighted_average(values: Sequence[Any], weights: Sequence[Any]) -> int:
    """
    Weight-averaged value rounded to the nearest int (0 with no weight).

    Used to roll per-vendor average call durations up to an agent, weighting
    each vendor by its billable calls.
    """
    value_arr = np.array([_safe_float(v) or 0.0 for v in values], dtype=float)
    weight_arr = np.array([_safe_float(w) or 0.0 for w in weights], dtype=float)
    total_weight = float(weight_arr.sum()) if weight_arr.size else 0.0
    if total_weight <= 0:
        return 0
    return round_half_up(float((value_arr * weight_arr).sum()) / total_weight)


# =============================================================================
# Formatting
# =============================================================================


def format_currency(cents: Any) -> str:
    """
    Render integer cents as US dollars.

    Example:
        >>> format_currency(123456)
        '$1,234.56'
        >>> format_currency(-250)
        '-$2.50'
    """
    value = _safe_float(cents) or 0.0
    dollars = value / 100
    sign = '-' if dollars < 0 else ''
    return f"{sign}${abs(dollars):,.2f}"


def format_cpa(cpa_cents: Optional[float], sentinel: Optional[str] = None) -> str:
    """
    Render a CPA, using the no-sales sentinel for an undefined value.

    Args:
        cpa_cents: Result of cost_per_acquisition (None means no sales).
        sentinel: Override for the configured no-sales sentinel.
    """
    if cpa_cents is None:
        return sentinel if sentinel is not None else get_settings().no_sales_sentinel
    return format_currency(cpa_cents)


def format_percentage(value: Any, digits: int = 1) -> str:
    """Render a percentage ("12.5%"); non-finite values render as 0."""
    return f"{(_safe_float(value) or 0.0):.{digits}f}%"


def format_duration(seconds: Any) -> str:
    """
    Render seconds as minutes:seconds, rounding fractional seconds.

    Example:
        >>> format_duration(125)
        '2:05'
        >>> format_duration(125.5)
        '2:06'
    """
    total = round_half_up(seconds)
    minutes, secs = divmod(max(total, 0), 60)
    return f"{minutes}:{secs:02d}"
