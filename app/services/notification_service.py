# app/services/notification_service.py
from typing import Any, Dict

from app.celery_worker import celery_app
from app.data.models.order import OrderModel
from app.domain.order_status import STATUS_LABELS, OrderStatus
from app.services.notification_client import NotificationClient
from app.utils.settings import NOTIFICATION_SMS_ENABLED
from app.utils.logging import get_logger

logger = get_logger(__name__)


def order_payload(order: OrderModel) -> Dict[str, Any]:
    """Dane zamowienia potrzebne do wiadomosci, serializowalne dla Celery."""
    user = order.user
    return {
        "order_id": order.id,
        "order_number": order.order_number,
        "user_id": order.user_id,
        "name": user.name if user else None,
        "email": user.email if user else None,
        "phone": user.phone if user else None,
        "status": order.status,
        "total": str(order.total),
        "tracking_number": order.tracking_number,
        "carrier": order.carrier,
        "estimated_delivery": (
            order.estimated_delivery.date().isoformat() if order.estimated_delivery else None
        ),
    }


class NotificationService:
    """
    Powiadomienia o zamowieniach, fire-and-forget przez Celery.
    Blad wysylki jest logowany i nigdy nie przerywa operacji na zamowieniu.
    """

    def order_confirmed(self, order: OrderModel) -> None:
        self._dispatch(send_order_confirmation_task, order)

    def status_changed(self, order: OrderModel, old_status: OrderStatus, new_status: OrderStatus) -> None:
        self._dispatch(send_status_update_task, order, OrderStatus(old_status).value, OrderStatus(new_status).value)

    def shipped(self, order: OrderModel) -> None:
        self._dispatch(send_shipping_notification_task, order)

    @staticmethod
    def _dispatch(task, order: OrderModel, *args) -> None:
        try:
            task.delay(order_payload(order), *args)
        except Exception:
            logger.exception(f"Failed to dispatch {task.name} for order {order.id}")


def _label(status: str) -> str:
    return STATUS_LABELS.get(OrderStatus(status), status)


def _email(client: NotificationClient, payload: dict, subject: str, body: str) -> str:
    if not payload.get("email"):
        logger.warning(f"No email for order {payload['order_id']}, skipping")
        return "skipped"
    client.deliver("email", payload["email"], subject, body)
    return "sent"


@celery_app.task(name="app.services.notification_service.send_order_confirmation_task")
def send_order_confirmation_task(payload: dict):
    subject = f"Order confirmation #{payload['order_number']}"
    body = (
        f"Hi {payload.get('name') or 'customer'}, we received your order "
        f"#{payload['order_number']}. Total: {payload['total']}. "
        f"Status: {_label(payload['status'])}."
    )
    status = _email(NotificationClient(), payload, subject, body)
    return {"order_id": payload["order_id"], "status": status}


@celery_app.task(name="app.services.notification_service.send_status_update_task")
def send_status_update_task(payload: dict, old_status: str, new_status: str):
    subject = f"Order #{payload['order_number']} update"
    body = (
        f"Your order #{payload['order_number']} changed from "
        f"{_label(old_status)} to {_label(new_status)}."
    )
    status = _email(NotificationClient(), payload, subject, body)
    return {"order_id": payload["order_id"], "status": status}


@celery_app.task(name="app.services.notification_service.send_shipping_notification_task")
def send_shipping_notification_task(payload: dict):
    client = NotificationClient()
    subject = f"Your order #{payload['order_number']} has shipped"
    body = (
        f"Tracking number: {payload.get('tracking_number') or 'N/A'}. "
        f"Carrier: {payload.get('carrier') or 'N/A'}. "
        f"Estimated delivery: {payload.get('estimated_delivery') or 'N/A'}."
    )
    status = _email(client, payload, subject, body)

    if payload.get("phone") and NOTIFICATION_SMS_ENABLED:
        client.deliver(
            "sms",
            payload["phone"],
            subject,
            f"Order #{payload['order_number']} shipped. Tracking: {payload.get('tracking_number') or 'N/A'}",
        )

    return {"order_id": payload["order_id"], "status": status}
