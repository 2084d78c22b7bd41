# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysylania powiadomien o zamowieniach.
    Uzywa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_notification(scope_key: str, order_id: str, order_number: str) -> bool:
        """
        Kolejkuje powiadomienie. Brak brokera nie cofa zlozonego zamowienia,
        wiec blad jest tylko logowany.
        """
        try:
            send_order_notification_task.delay(scope_key, order_id, order_number)
        except Exception as e:
            logger.error(f"Nie udalo sie zakolejkowac powiadomienia dla {order_id}: {e}")
            return False
        return True


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(scope_key: str, order_id: str, order_number: str):
    """
    Celery task - w prawdziwym systemie wyslalby email/push.
    Teraz tylko loguje.
    """
    logger.info(f"[NOTIFICATION] {scope_key}: order {order_number} ({order_id}) is being processed")

    return {"scope_key": scope_key, "order_id": order_id, "order_number": order_number, "status": "sent"}
