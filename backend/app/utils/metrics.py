"""Prometheus metrics for authorization and session context."""

from prometheus_client import Counter

authz_decisions_total = Counter(
    "authz_decisions_total",
    "Total permission decisions",
    ["scope", "outcome"],
)

club_switch_total = Counter(
    "club_switch_total",
    "Total club switch attempts",
    ["outcome"],
)

sessions_started_total = Counter(
    "sessions_started_total",
    "Total sessions started",
    ["auto_selected"],
)


class PrometheusAuthzMetrics:
    """Prometheus-based authorization metrics implementation."""

    def inc_decision(self, scope: str, outcome: str) -> None:
        """Increment permission decision counter."""
        authz_decisions_total.labels(scope=scope, outcome=outcome).inc()

    def inc_switch(self, outcome: str) -> None:
        """Increment club switch counter."""
        club_switch_total.labels(outcome=outcome).inc()

    def inc_session_started(self, auto_selected: bool) -> None:
        """Increment session start counter."""
        sessions_started_total.labels(auto_selected=str(auto_selected).lower()).inc()
