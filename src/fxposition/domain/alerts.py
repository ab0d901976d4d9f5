"""Alert lifecycle domain service."""

from datetime import UTC, date, datetime
from typing import Optional

import structlog

from fxposition.database.base import Database
from fxposition.domain.entities import Actor, Alert
from fxposition.domain.errors import NotFoundError, StateConflictError, not_found

logger = structlog.get_logger(__name__)


class AlertService:
    """Service for listing and resolving limit alerts."""

    def __init__(self, db: Database):
        """Initialize alert service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_active_alerts(self, alert_date: Optional[date] = None) -> list[Alert]:
        """Unresolved alerts, optionally of one date, newest first."""
        return self.db.list_alerts(alert_date=alert_date)

    def list_alerts(
        self, alert_date: Optional[date] = None, include_resolved: bool = False
    ) -> list[Alert]:
        """Alerts, optionally of one date, including resolved ones on request."""
        return self.db.list_alerts(alert_date=alert_date, include_resolved=include_resolved)

    def get_alert(self, alert_id: int) -> Alert:
        """Get alert by ID.

        Raises:
            NotFoundError: If alert doesn't exist
        """
        alert = self.db.get_alert(alert_id)
        if alert is None:
            raise NotFoundError(not_found("Alert", alert_id))
        return alert

    def resolve_alert(self, alert_id: int, actor: Actor) -> Alert:
        """Mark an alert resolved by the actor.

        Once resolved, a new breach of the same bank, date and type can
        raise a fresh alert.

        Raises:
            NotFoundError: If alert doesn't exist
            StateConflictError: If the alert is already resolved
        """
        with self.db.transaction():
            alert = self.get_alert(alert_id)
            if alert.is_resolved:
                raise StateConflictError(f"Alert {alert_id} is already resolved")
            self.db.resolve_alert(alert_id, resolved_by=actor.id, resolved_at=datetime.now(UTC))
        logger.info("alert_resolved", alert_id=alert_id, actor=actor.id)
        return self.get_alert(alert_id)
