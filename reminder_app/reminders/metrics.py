from prometheus_client import Counter


reminders_created_total = Counter(
    "reminders_created_total",
    "Total reminders created via API",
)

reminders_expired_total = Counter(
    "reminders_expired_total",
    "Total reminders moved to expired",
    ["source"],  # sweep | inline
)

sweeper_runs_total = Counter(
    "reminder_sweeper_runs_total",
    "Total expiry sweep cycles",
)

sweeper_errors_total = Counter(
    "reminder_sweeper_errors_total",
    "Total expiry sweep cycles that failed",
)

push_dispatch_success_total = Counter(
    "reminder_push_dispatch_success_total",
    "Total successful push dispatches",
)

push_dispatch_failed_total = Counter(
    "reminder_push_dispatch_failed_total",
    "Total failed push dispatches",
)
