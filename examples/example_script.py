import pandas as pd

from intervalkit import at_risk_rolling_frame, coalesce_frame, cross_check, regular_grid
from intervalkit.config import IntervalColumns, SpanColumns
from intervalkit.utils.logging import configure_logging

configure_logging(level="DEBUG")

stays = pd.DataFrame(
    {
        "patient": ["p1", "p1", "p1", "p2", "p2"],
        "admit": pd.to_datetime(["2021-01-01", "2021-01-05", "2021-02-01", "2021-03-01", "2021-03-02"]),
        "discharge": pd.to_datetime(["2021-01-07", "2021-01-09", "2021-02-03", "2021-03-15", "2021-03-05"]),
    }
)
stay_cols = IntervalColumns(entity_col="patient", start_col="admit", end_col="discharge", event_col=None)

print("Coalesced stays:")
print(coalesce_frame(stays, stay_cols).to_string())

cohort = pd.DataFrame(
    {
        "subject": ["a", "b", "c", "d"],
        "enrolled": [0, 0, 12, 30],
        "left": [40, 25, 60, 45],
    }
)
cohort_cols = SpanColumns(entity_col="subject", entry_col="enrolled", exit_col="left")

print()
print("At risk at each entry time:")
print(at_risk_rolling_frame(cohort, cohort_cols).to_string())

print()
print("Rolling vs grid every 10 days:")
print(cross_check(cohort, regular_grid(0, 60, 10), cohort_cols).to_string())
