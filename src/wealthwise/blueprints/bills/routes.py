"""Bill routes, including payment and upcoming/overdue views."""

from __future__ import annotations

from flask import request

from ...errors import ApiError
from ...extensions import get_context
from ...models.base import utcnow
from ...models.bill import Bill
from ...responses import created, success
from ...security import current_user, login_required
from ...services import bills as bill_service
from ...services.notifications import resolve_emitter
from ...services.serializers import bill_to_dict
from ..forms import MAX_PERIOD_DAYS, query_flag, query_int
from . import bp
from .forms import BillForm


def _get_bill(bill_id: int) -> Bill:
    bill = get_context().bill_repo.get_by_id(bill_id, user_id=current_user().id)
    if bill is None:
        raise ApiError.not_found("Bill not found")
    return bill


def _check_linked_account(account_id: int | None) -> None:
    if account_id is None:
        return
    if get_context().account_repo.get_by_id(account_id, user_id=current_user().id) is None:
        raise ApiError.not_found("Linked account not found")


def _active_bills() -> list[Bill]:
    return get_context().bill_repo.list_all(user_id=current_user().id, active_only=True)


@bp.get("/")
@login_required
def list_bills():
    args = request.args
    bills = get_context().bill_repo.list_all(
        user_id=current_user().id,
        active_only=True,
        is_paid=query_flag(args, "isPaid"),
        category=args.get("category") or None,
    )
    now = utcnow()
    return success([bill_to_dict(b, now) for b in bills], "Bills retrieved successfully")


@bp.get("/summary")
@login_required
def summary():
    return success(
        bill_service.summarize_bills(_active_bills(), now=utcnow()),
        "Bills summary retrieved successfully",
    )


@bp.get("/upcoming")
@login_required
def upcoming():
    now = utcnow()
    days = query_int(
        request.args, "days", bill_service.DEFAULT_UPCOMING_DAYS, maximum=MAX_PERIOD_DAYS
    )
    bills = bill_service.upcoming(_active_bills(), now=now, days=days)
    return success([bill_to_dict(b, now) for b in bills], "Upcoming bills retrieved successfully")


@bp.get("/overdue")
@login_required
def overdue():
    now = utcnow()
    bills = bill_service.overdue(_active_bills(), now=now)
    return success([bill_to_dict(b, now) for b in bills], "Overdue bills retrieved successfully")


@bp.post("/")
@login_required
def create_bill():
    data = BillForm.from_mapping(request.get_json(silent=True)).validated()
    _check_linked_account(data.get("linked_account_id"))
    user_id = current_user().id
    bill = get_context().bill_repo.create(Bill(**data), user_id=user_id)
    payload = bill_to_dict(bill, utcnow())
    resolve_emitter()(user_id, "bill:created", payload)
    return created(payload, "Bill created successfully")


@bp.get("/<int:bill_id>")
@login_required
def get_bill(bill_id: int):
    return success(bill_to_dict(_get_bill(bill_id), utcnow()), "Bill retrieved successfully")


@bp.put("/<int:bill_id>")
@login_required
def update_bill(bill_id: int):
    changes = BillForm.from_mapping(request.get_json(silent=True), partial=True).validated()
    bill = _get_bill(bill_id)
    _check_linked_account(changes.get("linked_account_id"))
    for key, value in changes.items():
        setattr(bill, key, value)
    user_id = current_user().id
    bill = get_context().bill_repo.update(bill, user_id=user_id)
    payload = bill_to_dict(bill, utcnow())
    resolve_emitter()(user_id, "bill:updated", payload)
    return success(payload, "Bill updated successfully")


@bp.post("/<int:bill_id>/pay")
@login_required
def pay_bill(bill_id: int):
    user_id = current_user().id
    now = utcnow()
    result = bill_service.pay_bill(
        repository=get_context().bill_repo, bill_id=bill_id, user_id=user_id, paid_at=now
    )
    payload = {
        "bill": bill_to_dict(result.bill, now),
        "nextBill": bill_to_dict(result.next_bill, now) if result.next_bill else None,
    }
    resolve_emitter()(user_id, "bill:paid", payload)
    return success(payload, "Bill marked as paid")


@bp.delete("/<int:bill_id>")
@login_required
def delete_bill(bill_id: int):
    user_id = current_user().id
    if not get_context().bill_repo.delete(bill_id, user_id=user_id):
        raise ApiError.not_found("Bill not found")
    resolve_emitter()(user_id, "bill:deleted", {"id": bill_id})
    return success(None, "Bill deleted successfully")
