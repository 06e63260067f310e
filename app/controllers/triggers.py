# file: controllers/triggers.py

from fastapi import APIRouter, Depends

from app.dependencies import get_event_handlers, verify_trigger_key
from app.models.order import OrderSnapshot, OrderChange
from app.models.service_record import ServiceRecordSnapshot, ServiceRecordChange
from app.services.event_handlers import EventHandlers

# Called by the data store's change-trigger runtime, once per create/update event.
# Handlers swallow their own failures so a 200 is always returned and the event is not retried.
router = APIRouter(dependencies=[Depends(verify_trigger_key)])


@router.post("/orders/{order_id}/created")
async def order_created(order_id: str, order: OrderSnapshot,
                        handlers: EventHandlers = Depends(get_event_handlers)):
    await handlers.on_order_created(order_id, order)
    return {"status": "processed"}


@router.post("/orders/{order_id}/updated")
async def order_updated(order_id: str, change: OrderChange,
                        handlers: EventHandlers = Depends(get_event_handlers)):
    await handlers.on_order_updated(order_id, change.before, change.after)
    return {"status": "processed"}


@router.post("/service-records/{record_id}/created")
async def service_record_created(record_id: str, record: ServiceRecordSnapshot,
                                 handlers: EventHandlers = Depends(get_event_handlers)):
    await handlers.on_service_record_created(record_id, record)
    return {"status": "processed"}


@router.post("/service-records/{record_id}/updated")
async def service_record_updated(record_id: str, change: ServiceRecordChange,
                                 handlers: EventHandlers = Depends(get_event_handlers)):
    await handlers.on_service_record_updated(record_id, change.before, change.after)
    return {"status": "processed"}
