"""Derived-field computation for charging sessions.

Every function here is pure: it never reads or writes the record store. The
same functions run while a session is being composed (preview) and once more
at submit time to produce the values that are persisted.
"""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional, Union

from chargelog.domain.entities import ChargingInput, DerivedFields
from chargelog.utils.amount_parser import round2, round3, to_decimal
from chargelog.utils.time_parser import anchor_times, parse_time

TimeLike = Union[time, str]

# Common reference date for differencing wall-clock times
_REFERENCE_DATE = date(2000, 1, 1)


def _as_time(value: TimeLike) -> time:
    if isinstance(value, time):
        return value
    if isinstance(value, datetime):
        return value.time()
    return parse_time(value)


def _positive(value: Optional[Decimal]) -> bool:
    return value is not None and value > 0


def compute_duration(start_time: TimeLike, end_time: TimeLike) -> int:
    """Return the session length in whole minutes.

    An end time earlier than the start time is read as the next day, so
    "23:50" to "00:10" is 20 minutes. Equal times give 0.

    Raises:
        ValueError: If either time cannot be parsed
    """
    start_at, end_at = anchor_times(
        _REFERENCE_DATE, _as_time(start_time), _as_time(end_time)
    )
    return int((end_at - start_at).total_seconds() // 60)


def compute_fee(
    power: Optional[Decimal],
    price_per_unit: Optional[Decimal],
    duration: Optional[Union[int, Decimal]] = None,
    price_per_minute: Optional[Decimal] = None,
) -> Optional[Decimal]:
    """Derive the charging fee from a rate basis.

    The per-unit basis (power x price per unit) wins when both of its inputs
    are positive; otherwise the per-minute basis (duration x price per
    minute) is used. Returns None when neither basis applies and the fee is
    left for manual entry.
    """
    if _positive(power) and _positive(price_per_unit):
        return round2(to_decimal(power) * to_decimal(price_per_unit))
    if duration is not None and duration > 0 and _positive(price_per_minute):
        return round2(to_decimal(duration) * to_decimal(price_per_minute))
    return None


def compute_average_price(
    fee: Optional[Decimal], power: Optional[Decimal]
) -> Optional[Decimal]:
    """Price paid per unit of energy, rounded to 3 decimals. None unless power > 0."""
    if fee is None or not _positive(power):
        return None
    return round3(to_decimal(fee) / to_decimal(power))


def compute_mileage_delta(
    current_mileage: Decimal, previous_mileage: Optional[Decimal] = None
) -> Decimal:
    """Distance driven since the previous record.

    previous_mileage is None (treated as 0) for the first record of a log.
    Negative results are returned unchanged.
    """
    previous = to_decimal(previous_mileage) if previous_mileage is not None else Decimal("0")
    return to_decimal(current_mileage) - previous


def compute_cost_per_distance(
    fee: Optional[Decimal], mileage_delta: Optional[Decimal]
) -> Optional[Decimal]:
    """Charging cost per distance unit, rounded to 2 decimals. None unless delta > 0."""
    if fee is None or not _positive(mileage_delta):
        return None
    return round2(to_decimal(fee) / to_decimal(mileage_delta))


def derive_all(
    charging_input: ChargingInput, previous_mileage: Optional[Decimal] = None
) -> DerivedFields:
    """Compute every dependent field of a session from its primary input.

    Args:
        charging_input: Partial user input
        previous_mileage: Odometer reading of the preceding record, None if
            this is the first record of the log

    Returns:
        DerivedFields. The fee is the derived fee when a rate basis applies,
        else the manually entered fee (0 when absent).
    """
    if charging_input.start_time is not None and charging_input.end_time is not None:
        duration = compute_duration(charging_input.start_time, charging_input.end_time)
    else:
        duration = charging_input.duration or 0

    derived_fee = compute_fee(
        charging_input.power,
        charging_input.price_per_unit,
        duration,
        charging_input.price_per_minute,
    )
    if derived_fee is not None:
        fee = derived_fee
    elif charging_input.charging_fee is not None:
        fee = round2(to_decimal(charging_input.charging_fee))
    else:
        fee = Decimal("0.00")

    increased_mileage = None
    if charging_input.current_mileage is not None:
        increased_mileage = compute_mileage_delta(
            charging_input.current_mileage, previous_mileage
        )

    return DerivedFields(
        duration=duration,
        charging_fee=fee,
        fee_derived=derived_fee is not None,
        average_price=compute_average_price(fee, charging_input.power),
        increased_mileage=increased_mileage,
        cost_per_distance=compute_cost_per_distance(fee, increased_mileage),
    )
