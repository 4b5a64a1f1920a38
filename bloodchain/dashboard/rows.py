from collections import Counter
from datetime import datetime, timezone
from typing import Dict, List, Sequence

from bloodchain.domain.donation import Donation


def fmt_date(date: int) -> str:
    try:
        return datetime.fromtimestamp(date, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")
    except (OverflowError, OSError, ValueError):
        return str(date)


def history_rows(donations: Sequence[Donation], max_rows: int | None = None) -> List[Dict]:
    """Table rows, newest first, keeping the 1-based storage index."""
    rows = [
        {
            "#": index,
            "Donor": d.donor_name_text,
            "Blood Type": d.blood_type_text,
            "Date": fmt_date(d.date),
            "Raw Date": d.date,
        }
        for index, d in enumerate(donations, start=1)
    ]
    rows.reverse()
    if max_rows is not None:
        rows = rows[:max_rows]
    return rows


def blood_type_counts(donations: Sequence[Donation]) -> Dict[str, int]:
    counts = Counter(d.blood_type_text or "?" for d in donations)
    return dict(sorted(counts.items()))
