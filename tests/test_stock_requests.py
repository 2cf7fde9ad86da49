import pytest

from stockflow.exceptions import (
    InsufficientStockError,
    NotFoundError,
    RequestAlreadyProcessedError,
    ValidationError,
)
from stockflow.models import ChangeType, RequestStatus, StockHistory
from stockflow.services.stock_requests import (
    approve_request,
    create_stock_request,
    deny_request,
    list_requests,
    list_requests_for_stock,
    list_requests_for_user,
)


def history_for(db, stock):
    db.expire_all()
    return db.query(StockHistory).filter(StockHistory.stock_id == stock.id).all()


def test_approve_decrements_stock_and_journals(db, admin_user, regular_user, make_stock, make_request):
    stock = make_stock("WM-001", 10)
    request = make_request(regular_user, stock, 4)

    approved = approve_request(db, request.id, admin_user.id, admin_notes="ok")

    assert approved.status == RequestStatus.APPROVED.value
    assert approved.admin_notes == "ok"
    assert approved.approved_by == admin_user.id
    db.refresh(stock)
    assert stock.quantity == 6

    history = history_for(db, stock)
    assert len(history) == 1
    entry = history[0]
    assert entry.change_type == ChangeType.REQUEST_APPROVED.value
    assert entry.quantity == -4
    assert entry.user_id == regular_user.id
    assert entry.request_id == request.id


def test_approve_with_insufficient_stock_changes_nothing(db, admin_user, regular_user, make_stock, make_request):
    stock = make_stock("WM-002", 3)
    request = make_request(regular_user, stock, 5)

    with pytest.raises(InsufficientStockError):
        approve_request(db, request.id, admin_user.id)

    db.expire_all()
    assert stock.quantity == 3
    assert request.status == RequestStatus.PENDING.value
    assert request.approved_by is None
    assert history_for(db, stock) == []


def test_second_approval_is_rejected_without_double_decrement(db, admin_user, regular_user, make_stock, make_request):
    stock = make_stock("WM-003", 10)
    request = make_request(regular_user, stock, 4)
    approve_request(db, request.id, admin_user.id)

    with pytest.raises(RequestAlreadyProcessedError):
        approve_request(db, request.id, admin_user.id)

    db.refresh(stock)
    assert stock.quantity == 6
    assert len(history_for(db, stock)) == 1


def test_deny_leaves_stock_and_history_untouched(db, admin_user, regular_user, make_stock, make_request):
    stock = make_stock("WM-004", 10)
    request = make_request(regular_user, stock, 4)

    denied = deny_request(db, request.id, admin_user.id, admin_notes="not now")

    assert denied.status == RequestStatus.DENIED.value
    assert denied.admin_notes == "not now"
    assert denied.approved_by == admin_user.id
    db.refresh(stock)
    assert stock.quantity == 10
    assert history_for(db, stock) == []


def test_decided_requests_cannot_change_again(db, admin_user, regular_user, make_stock, make_request):
    stock = make_stock("WM-005", 10)
    approved = make_request(regular_user, stock, 2)
    denied = make_request(regular_user, stock, 3)
    approve_request(db, approved.id, admin_user.id)
    deny_request(db, denied.id, admin_user.id)

    with pytest.raises(RequestAlreadyProcessedError):
        deny_request(db, approved.id, admin_user.id)
    with pytest.raises(RequestAlreadyProcessedError):
        approve_request(db, denied.id, admin_user.id)

    db.expire_all()
    assert approved.status == RequestStatus.APPROVED.value
    assert denied.status == RequestStatus.DENIED.value
    assert stock.quantity == 8


def test_unknown_request_is_not_found(db, admin_user):
    with pytest.raises(NotFoundError):
        approve_request(db, "missing", admin_user.id)
    with pytest.raises(NotFoundError):
        deny_request(db, "missing", admin_user.id)


def test_overlapping_requests_first_approval_wins(db, admin_user, make_user, make_stock, make_request):
    stock = make_stock("WM-006", 5)
    alice = make_user("alice@stockflow.io")
    bob = make_user("bob@stockflow.io")
    first = make_request(alice, stock, 3)
    second = make_request(bob, stock, 3)

    approve_request(db, first.id, admin_user.id)
    with pytest.raises(InsufficientStockError):
        approve_request(db, second.id, admin_user.id)

    db.expire_all()
    assert stock.quantity == 2
    assert second.status == RequestStatus.PENDING.value


def test_create_request_is_pending_and_reserves_nothing(db, regular_user, make_stock):
    stock = make_stock("WM-007", 10)

    request = create_stock_request(db, regular_user.id, stock.id, 4, reason="new hire")

    assert request.status == RequestStatus.PENDING.value
    assert request.quantity == 4
    assert request.reason == "new hire"
    db.refresh(stock)
    assert stock.quantity == 10
    assert history_for(db, stock) == []


def test_create_request_validation(db, regular_user, make_stock):
    stock = make_stock("WM-008", 2)

    with pytest.raises(ValidationError):
        create_stock_request(db, regular_user.id, stock.id, 0)
    with pytest.raises(NotFoundError):
        create_stock_request(db, regular_user.id, "missing", 1)
    with pytest.raises(InsufficientStockError):
        create_stock_request(db, regular_user.id, stock.id, 3)


def test_request_listings(db, admin_user, regular_user, make_user, make_stock, make_request):
    stock = make_stock("WM-009", 10)
    other = make_user("other@stockflow.io")
    mine = make_request(regular_user, stock, 1)
    theirs = make_request(other, stock, 2)
    deny_request(db, theirs.id, admin_user.id)

    assert [r.id for r in list_requests_for_user(db, regular_user.id)] == [mine.id]
    assert {r.id for r in list_requests_for_stock(db, stock.id)} == {mine.id, theirs.id}
    assert [r.id for r in list_requests(db, status=RequestStatus.PENDING)] == [mine.id]
    assert len(list_requests(db)) == 2

    with pytest.raises(NotFoundError):
        list_requests_for_stock(db, "missing")
