from typing import List, Optional

Week = List[Optional[int]]


def leading_blanks(first_weekday: int, week_start: int) -> int:
    """Padding cells before day 1 so it lands under its weekday column (0..6)."""
    if first_weekday >= week_start:
        return first_weekday - week_start
    return 7 - week_start + first_weekday


def build_weeks(first_weekday: int, week_start: int, month_days: int) -> List[Week]:
    """
    Lay out days 1..month_days on a 7-column grid.
    - first_weekday, week_start: Sunday=0 .. Saturday=6
    - padding cells are None; every returned week has exactly 7 cells
    """
    days: Week = list(range(1, month_days + 1))
    weeks: List[Week] = []

    holds = leading_blanks(first_weekday, week_start)
    if holds:
        first_week_days = 7 - holds
        weeks.append([None] * holds + days[:first_week_days])
        days = days[first_week_days:]

    for i in range(0, len(days), 7):
        weeks.append(days[i:i + 7])

    if weeks and len(weeks[-1]) < 7:
        weeks[-1].extend([None] * (7 - len(weeks[-1])))
    return weeks
